from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from room_admin.db import get_db
from room_admin.models.user import User
from room_admin.schemas.user import Message, PasswordChange, ProfileUpdate, UserResponse
from room_admin.utils.auth import ensure_email_available, get_current_user, get_password_hash, verify_password
from room_admin.utils.errors import NotFoundError, ValidationError

router = APIRouter(
    prefix="/profile",
    tags=["profile"],
)


def _own_user(db: Session, current_user: dict) -> User:
    user = db.query(User).filter(User.id == current_user["id"]).first()
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.get("/", response_model=UserResponse)
def get_profile(db: Session = Depends(get_db), current_user: dict = Depends(get_current_user)):
    return _own_user(db, current_user)


@router.patch("/", response_model=UserResponse)
def update_profile(
    profile: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """Change the caller's own name and email."""
    user = _own_user(db, current_user)
    ensure_email_available(db, profile.email, user_id=user.id)
    user.name = profile.name
    user.email = profile.email
    db.commit()
    db.refresh(user)
    return user


@router.put("/password", response_model=Message)
def change_password(
    passwords: PasswordChange,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """Change the caller's password after checking the current one."""
    user = _own_user(db, current_user)
    if not verify_password(passwords.current_password, user.hashed_password):
        raise ValidationError(
            "The current password is incorrect.",
            errors=[{"field": "current_password", "message": "does not match"}],
        )
    user.hashed_password = get_password_hash(passwords.new_password)
    db.commit()
    return {"message": "Password updated."}
