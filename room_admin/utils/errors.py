from fastapi import status


class AppError(Exception):
    """Error raised by the service layer and turned into an HTTP response by main.py."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail=None, status_code=None, errors=None, headers=None):
        self.detail = detail or self.default_detail
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors
        self.headers = headers
        super().__init__(self.detail)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid data"


class AuthError(AppError):
    """401 when the caller is not authenticated, 403 when not allowed."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"

    @classmethod
    def forbidden(cls, detail="Access denied"):
        return cls(detail, status_code=status.HTTP_403_FORBIDDEN)

    @classmethod
    def unauthenticated(cls, detail="Could not validate credentials"):
        return cls(detail, headers={"WWW-Authenticate": "Bearer"})


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class InternalError(AppError):
    pass
