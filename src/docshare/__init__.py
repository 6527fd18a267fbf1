from .exceptions import (
    BadRequestError,
    DocshareError,
    InvalidCredentialsError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from .services import DocumentService, UserService

__all__ = [
    "DocumentService",
    "UserService",
    "DocshareError",
    "ValidationError",
    "UnauthenticatedError",
    "InvalidCredentialsError",
    "NotFoundError",
    "BadRequestError",
]
