import logging
from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from room_admin import config
from room_admin.db import get_db
from room_admin.models.booking import Booking
from room_admin.models.user import Role, User
from room_admin.schemas.user import Message, UserCreate, UserResponse, UserUpdate
from room_admin.utils.auth import ensure_email_available, get_password_hash, require_admin
from room_admin.utils.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


@router.get("/", response_model=List[UserResponse])
def get_users(db: Session = Depends(get_db), current_user: dict = Depends(require_admin)):
    """
    Retrieve all user accounts ordered by name.
    """
    return db.query(User).order_by(User.name).all()


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, db: Session = Depends(get_db), current_user: dict = Depends(require_admin)):
    """
    Create an account with any role.
    """
    ensure_email_available(db, user.email)
    db_user = User(
        name=user.name,
        email=user.email,
        hashed_password=get_password_hash(user.password),
        role=user.role,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info(f"User {current_user['email']} created account {db_user.email} ({db_user.role.value})")
    return db_user


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_admin),
):
    """
    Update an account's name, email and role.
    Administrators cannot take the ADMIN role away from themselves.
    """
    if user_id == current_user["id"] and user_update.role != Role.ADMIN:
        raise ValidationError(
            "You cannot change your own role.",
            errors=[{"field": "role", "message": "cannot demote yourself"}],
        )
    db_user = get_user_or_404(db, user_id)
    ensure_email_available(db, user_update.email, user_id=user_id)

    db_user.name = user_update.name
    db_user.email = user_update.email
    db_user.role = user_update.role
    db.commit()
    db.refresh(db_user)
    return db_user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, db: Session = Depends(get_db), current_user: dict = Depends(require_admin)):
    """
    Delete an account that owns no bookings. Administrators cannot delete themselves.
    """
    if user_id == current_user["id"]:
        raise ValidationError("You cannot delete your own account.")
    db_user = get_user_or_404(db, user_id)

    bookings_count = db.query(Booking).filter(Booking.user_id == user_id).count()
    if bookings_count > 0:
        logger.warning(f"Refusing to delete user {user_id} with {bookings_count} bookings")
        raise ConflictError("This user has bookings and cannot be deleted.")

    db.delete(db_user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"User {user_id} gained bookings while being deleted")
        raise ConflictError("This user has bookings and cannot be deleted.") from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{user_id}/reset-password", response_model=Message)
def reset_password(user_id: int, db: Session = Depends(get_db), current_user: dict = Depends(require_admin)):
    """
    Reset another account's password to the configured default.
    """
    if user_id == current_user["id"]:
        raise ValidationError("You cannot reset your own password from this panel.")
    db_user = get_user_or_404(db, user_id)

    db_user.hashed_password = get_password_hash(config.DEFAULT_PASSWORD)
    db.commit()
    logger.info(f"User {current_user['email']} reset the password of {db_user.email}")
    return {"message": f"Password of {db_user.email} was reset to the default password."}
