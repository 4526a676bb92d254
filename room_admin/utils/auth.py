import logging
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from datetime import datetime, timedelta, timezone
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from room_admin import config
from room_admin.db import get_db
from room_admin.models.user import Role, User
from room_admin.utils.errors import AuthError, ConflictError

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# HTTP Bearer scheme for JWT token, missing header is answered with 401 below
bearer_scheme = HTTPBearer(
    scheme_name="JWT",
    description="Enter 'Bearer <your_jwt_token>'. Obtain the token via /auth/login.",
    auto_error=False,
)


def verify_password(plain_password, hashed_password):
    """Verify a plain password against a hashed password."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    """Hash a password for storage."""
    return pwd_context.hash(password)


def create_access_token(data: dict):
    """Create a JWT access token with an expiration time."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


def authenticate_user(db: Session, email: str, password: str):
    """Return the user owning these credentials, or None."""
    user = db.query(User).filter(User.email == email).first()
    if user is None or not verify_password(password, user.hashed_password):
        return None
    return user


def ensure_email_available(db: Session, email: str, user_id=None):
    """Raise ConflictError if another account already uses this email."""
    query = db.query(User.id).filter(User.email == email)
    if user_id is not None:
        query = query.filter(User.id != user_id)
    if query.first() is not None:
        raise ConflictError("This email is already in use.")


def principal_for(user: User) -> dict:
    return {"id": user.id, "name": user.name, "email": user.email, "role": user.role}


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> dict:
    """Verify JWT token from Bearer header and return the current principal."""
    if credentials is None:
        raise AuthError.unauthenticated("Not authenticated")
    try:
        payload = jwt.decode(credentials.credentials, config.SECRET_KEY, algorithms=[config.ALGORITHM])
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError) as e:
        raise AuthError.unauthenticated(f"Could not validate credentials: {e}") from e

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise AuthError.unauthenticated()
    return principal_for(user)


def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    """Dependency letting only administrators through."""
    if not is_admin(current_user):
        logger.warning(f"User {current_user['email']} denied admin-only operation")
        raise AuthError.forbidden("Administrator role required")
    return current_user


def is_admin(principal: dict) -> bool:
    return principal["role"] == Role.ADMIN


def can_modify_booking(principal: dict, booking) -> bool:
    """Owners may edit or cancel their own bookings, administrators any booking."""
    return is_admin(principal) or booking.user_id == principal["id"]


def ensure_admin_account(db: Session):
    """Create the configured administrator account if it does not exist yet."""
    if not (config.ADMIN_EMAIL and config.ADMIN_PASSWORD):
        return None
    user = db.query(User).filter(User.email == config.ADMIN_EMAIL).first()
    if user is not None:
        return user
    user = User(
        name=config.ADMIN_NAME,
        email=config.ADMIN_EMAIL,
        hashed_password=get_password_hash(config.ADMIN_PASSWORD),
        role=Role.ADMIN,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created administrator account {user.email}")
    return user
