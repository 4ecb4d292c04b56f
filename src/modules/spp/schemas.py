"""Schemas for SPP (monthly tuition) payments."""

from datetime import date

from pydantic import BaseModel, Field

from src.shared.schemas import MoneyInput

DEFAULT_PAYMENT_METHOD = "Tunai"


class SppPaymentCreate(BaseModel):
    """Payment form. `amount` accepts '1.500.000' as well as 1500000."""

    student_id: int
    amount: MoneyInput
    payment_method: str = Field(DEFAULT_PAYMENT_METHOD, min_length=1, max_length=50)
    description: str | None = None
    transaction_date: date | None = None
