from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from room_admin.models.user import Role


class UserRegister(BaseModel):
    name: str = Field(min_length=3)
    email: EmailStr
    password: str = Field(min_length=6)


class UserCreate(UserRegister):
    role: Role = Role.TEACHER


class UserUpdate(BaseModel):
    name: str = Field(min_length=3)
    email: EmailStr
    role: Role


class ProfileUpdate(BaseModel):
    name: str = Field(min_length=3)
    email: EmailStr


class PasswordChange(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class Message(BaseModel):
    message: str
