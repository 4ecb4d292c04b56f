from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from src.shared.utils.money import mask_currency_input, parse_thousands
from src.shared.utils.table import total_pages

T = TypeVar("T")


class BaseSchema(BaseModel):
    """Base Pydantic schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class ErrorDetail(BaseSchema):
    """Error detail for a specific field."""

    field: str | None = None
    message: str


class SuccessResponse(BaseSchema, Generic[T]):
    """Standard success response wrapper."""

    success: bool = True
    data: T
    message: str | None = None


# Alias for cleaner API usage
ApiResponse = SuccessResponse


class ErrorResponse(BaseSchema):
    """Standard error response wrapper."""

    success: bool = False
    data: None = None
    message: str
    errors: list[ErrorDetail] = []


class PaginatedResponse(BaseSchema, Generic[T]):
    """Paginated response wrapper."""

    items: list[T]
    total: int
    page: int
    limit: int
    pages: int

    @classmethod
    def create(cls, items: list[T], total: int, page: int, limit: int) -> "PaginatedResponse[T]":
        return cls(items=items, total=total, page=page, limit=limit, pages=total_pages(total, limit))


def _coerce_amount(value):
    """Accept '1.500.000' style strings from money inputs as well as plain integers."""
    if isinstance(value, str):
        masked: list[str] = []
        mask_currency_input(value, masked.append)
        return parse_thousands(masked[0])
    return value


# Positive Rupiah amount, given either as a number or as grouped text
MoneyInput = Annotated[int, BeforeValidator(_coerce_amount), Field(gt=0)]
