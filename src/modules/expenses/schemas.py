"""Schemas for Expenses module."""

from datetime import date

from pydantic import BaseModel, Field, computed_field, model_validator

from src.modules.expenses.models import ExpenseCategory
from src.shared.schemas import MoneyInput
from src.shared.utils.money import format_rupiah


class ExpenseCreate(BaseModel):
    expense_category: ExpenseCategory
    amount: MoneyInput
    expense_date: date | None = None
    description: str = Field(..., min_length=1)
    payment_method: str | None = Field(None, max_length=50)
    vendor_name: str | None = Field(None, max_length=200)
    receipt_url: str | None = Field(None, max_length=500)
    teacher_id: int | None = None

    @model_validator(mode="after")
    def teacher_for_salary(self) -> "ExpenseCreate":
        """Teacher salary expenses name the teacher; other categories never do."""
        if self.expense_category == ExpenseCategory.GAJI_GURU:
            if self.teacher_id is None:
                raise ValueError("teacher_id is required for category 'Gaji Guru'")
        else:
            self.teacher_id = None
        return self


class ExpenseTeacher(BaseModel):
    id: int
    nip: str
    full_name: str

    model_config = {"from_attributes": True}


class ExpenseResponse(BaseModel):
    id: int
    expense_category: str
    amount: int
    expense_date: date
    description: str
    payment_method: str | None
    vendor_name: str | None
    receipt_url: str | None
    teacher_id: int | None
    teacher: ExpenseTeacher | None = None
    approval_status: str

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def amount_display(self) -> str:
        return format_rupiah(self.amount)
