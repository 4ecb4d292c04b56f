from src.core.exceptions.base import (
    AppException,
    NotFoundError,
    ValidationError,
    InvalidArgumentError,
    AuthenticationError,
    AuthorizationError,
    InsufficientBalanceError,
    DuplicateError,
)

__all__ = [
    "AppException",
    "NotFoundError",
    "ValidationError",
    "InvalidArgumentError",
    "AuthenticationError",
    "AuthorizationError",
    "InsufficientBalanceError",
    "DuplicateError",
]
