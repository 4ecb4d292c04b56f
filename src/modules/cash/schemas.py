"""Schemas for the cash book."""

from datetime import date

from pydantic import BaseModel, Field, computed_field

from src.modules.cash.models import CashTransactionType
from src.modules.students.schemas import StudentBrief
from src.shared.schemas import MoneyInput
from src.shared.utils.money import format_rupiah


class CashTransactionCreate(BaseModel):
    transaction_type: CashTransactionType
    amount: MoneyInput
    description: str = Field(..., min_length=1)
    category: str | None = Field(None, max_length=100)
    student_id: int | None = None
    transaction_date: date | None = None


class CashTransactionResponse(BaseModel):
    id: int
    transaction_type: str
    amount: int
    transaction_date: date
    category: str | None
    description: str
    student_id: int | None
    student: StudentBrief | None = None
    receipt_number: str

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def amount_display(self) -> str:
        sign = "+" if self.transaction_type == CashTransactionType.RECEIPT else "-"
        return f"{sign}{format_rupiah(self.amount)}"

    @computed_field
    @property
    def student_name(self) -> str | None:
        return self.student.full_name if self.student else None


class CashSummary(BaseModel):
    total_receipts: int
    total_disbursements: int

    @computed_field
    @property
    def balance(self) -> int:
        return self.total_receipts - self.total_disbursements

    @computed_field
    @property
    def balance_display(self) -> str:
        return format_rupiah(self.balance)
