from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from src.core.config import settings
from src.core.exceptions import AppException
from src.shared.schemas import ErrorResponse, ErrorDetail


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle application exceptions."""
    field = exc.details.get("field")
    errors = [ErrorDetail(field=field, message=exc.message)]

    response = ErrorResponse(
        message=exc.message,
        errors=errors,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=response.model_dump(),
    )


def _format_validation_errors(errors: list[dict]) -> list[ErrorDetail]:
    details: list[ErrorDetail] = []
    for error in errors:
        loc = error.get("loc", ())
        # Drop top-level "body"/"query" for cleaner field paths
        if loc and loc[0] in ("body", "query"):
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) if loc else None
        details.append(ErrorDetail(field=field, message=error.get("msg", "Invalid value")))
    return details


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle FastAPI validation errors."""
    response = ErrorResponse(
        message="Validation error",
        errors=_format_validation_errors(exc.errors()),
    )
    return JSONResponse(
        status_code=422,
        content=response.model_dump(),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle generic HTTP exceptions."""
    errors = [ErrorDetail(field=None, message=str(exc.detail) if exc.detail else "HTTP error")]
    response = ErrorResponse(
        message=str(exc.detail) if exc.detail else "HTTP error",
        errors=errors,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=response.model_dump(),
    )


# Named constraints that users can hit from a form, with the field to point at
_CONSTRAINT_MESSAGES: dict[str, tuple[str, str | None, int]] = {
    "ck_savings_balance_non_negative": (
        "Savings balance cannot go below zero",
        "amount",
        400,
    ),
    "uq_salary_month": (
        "Salary for this teacher and month has already been recorded",
        "payment_month",
        409,
    ),
    "uq_monthly_report_period": ("Report for this month has already been saved", None, 409),
    "students_nim_key": ("Student with this NIM already exists", "nim", 409),
    "teachers_nip_key": ("Teacher with this NIP already exists", "nip", 409),
}


def _friendly_db_error(exc: Exception) -> tuple[str, str | None, int]:
    """
    Convert DB constraint errors to a stable, user-facing message.

    Full DB error text is only exposed when debug is enabled.
    """
    raw = str(getattr(exc, "orig", exc))
    lower = raw.lower()

    for constraint, result in _CONSTRAINT_MESSAGES.items():
        if constraint in lower:
            return result

    if "does not exist" in lower and ("column" in lower or "relation" in lower):
        # Code deployed without `alembic upgrade head`
        return (
            "Database schema is out of date. Run the latest migrations and try again.",
            None,
            500,
        )

    if "foreign key" in lower:
        return (
            "Record is still used by payments or other data and cannot be changed.",
            None,
            409,
        )

    if "receipt_number" in lower:
        return ("Receipt number already issued, please retry", "receipt_number", 409)

    if "unique" in lower or "duplicate key" in lower:
        return ("Record already exists", None, 409)

    if settings.debug:
        return (raw, None, 500)

    return ("Database error", None, 500)


async def sqlalchemy_db_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    message, field, status_code = _friendly_db_error(exc)
    response = ErrorResponse(
        message=message,
        errors=[ErrorDetail(field=field, message=message)],
    )
    return JSONResponse(status_code=status_code, content=response.model_dump())
