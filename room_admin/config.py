import os


def _env(name, default=None):
    return os.environ.get(f"ROOM_ADMIN_{name}", default)


DATABASE_URL = _env("DATABASE_URL", "sqlite:///./data/rooms_booking.db")

# JWT configuration
SECRET_KEY = _env("SECRET_KEY", "change-me-room-admin-secret")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(_env("TOKEN_EXPIRE_MINUTES", "30"))

# Password an administrator resets an account to
DEFAULT_PASSWORD = _env("DEFAULT_PASSWORD", "123456")

# Opening hours used when listing free slots
DAY_START_HOUR = int(_env("DAY_START_HOUR", "8"))
DAY_END_HOUR = int(_env("DAY_END_HOUR", "18"))

LOG_LEVEL = _env("LOG_LEVEL", "INFO").upper()

# Optional administrator account created at startup
ADMIN_EMAIL = _env("ADMIN_EMAIL")
ADMIN_PASSWORD = _env("ADMIN_PASSWORD")
ADMIN_NAME = _env("ADMIN_NAME", "Administrator")
