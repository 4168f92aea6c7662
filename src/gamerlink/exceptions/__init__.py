from .base import (
    RepositoryError,
    ValidationError,
    NotFoundError,
    ForbiddenError,
    DuplicateError,
    InvalidFieldError,
    StoreUnavailableError,
)
from .mapper import db_error_handler

__all__ = [
    "RepositoryError",
    "ValidationError",
    "NotFoundError",
    "ForbiddenError",
    "DuplicateError",
    "InvalidFieldError",
    "StoreUnavailableError",
    "db_error_handler",
]
