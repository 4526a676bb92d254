from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class RoomBase(BaseModel):
    name: str = Field(min_length=3)
    capacity: int = Field(gt=0)
    type: str = Field(min_length=3)
    location: Optional[str] = None

class RoomCreate(RoomBase):
    pass

class RoomUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=3)
    capacity: Optional[int] = Field(default=None, gt=0)
    type: Optional[str] = Field(default=None, min_length=3)
    location: Optional[str] = None

class RoomResponse(RoomBase):
    id: int

    model_config = ConfigDict(from_attributes=True)
