from typing import Any


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Resource not found."""

    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} with id={identifier} not found"
        super().__init__(message=message, status_code=404)


class ValidationError(AppException):
    """Validation error."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message=message, status_code=422, details=details)


class InvalidArgumentError(AppException):
    """Argument outside the range an operation is defined for (e.g. page size 0)."""

    def __init__(self, argument: str, value: Any, reason: str = "must be positive"):
        message = f"Invalid {argument}={value}: {reason}"
        super().__init__(message=message, status_code=400, details={"field": argument})


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message=message, status_code=401)


class AuthorizationError(AppException):
    """Not authorized to perform action."""

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message=message, status_code=403)


class InsufficientBalanceError(AppException):
    """Savings withdrawal larger than the account balance."""

    def __init__(self, account_id: int, requested: int, available: int):
        message = (
            f"Insufficient savings balance on account {account_id}: "
            f"requested {requested}, available {available}"
        )
        super().__init__(
            message=message,
            status_code=400,
            details={"field": "amount", "requested": requested, "available": available},
        )


class DuplicateError(AppException):
    """Duplicate resource."""

    def __init__(self, resource: str, field: str, value: Any):
        message = f"{resource} with {field}={value} already exists"
        super().__init__(message=message, status_code=409, details={"field": field, "value": value})
