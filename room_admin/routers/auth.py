import logging
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from room_admin.db import get_db
from room_admin.models.user import Role, User
from room_admin.schemas.user import Token, UserRegister, UserResponse
from room_admin.utils.auth import (
    authenticate_user,
    create_access_token,
    ensure_email_available,
    get_password_hash,
)
from room_admin.utils.errors import AuthError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user: UserRegister, db: Session = Depends(get_db)):
    """
    Create a new TEACHER account.
    """
    ensure_email_available(db, user.email)
    db_user = User(
        name=user.name,
        email=user.email,
        hashed_password=get_password_hash(user.password),
        role=Role.TEACHER,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info(f"Registered user: {db_user.email}")
    return db_user


@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """
    Exchange email (sent as ``username``) and password for a bearer token.
    """
    user = authenticate_user(db, form_data.username, form_data.password)
    if user is None:
        logger.warning(f"Failed login for: {form_data.username}")
        raise AuthError.unauthenticated("Incorrect email or password")
    return {"access_token": create_access_token({"sub": str(user.id)}), "token_type": "bearer"}
