"""Schemas for student savings."""

from datetime import date

from pydantic import BaseModel, Field, computed_field

from src.modules.students.schemas import StudentBrief
from src.modules.transactions.schemas import TransactionResponse
from src.shared.schemas import MoneyInput
from src.shared.utils.money import format_rupiah


class SavingsTransactionCreate(BaseModel):
    """Deposit or withdrawal form."""

    student_id: int
    amount: MoneyInput
    description: str | None = None
    transaction_date: date | None = None


class SavingsGoalUpdate(BaseModel):
    savings_goal: int | None = Field(None, ge=0)
    goal_description: str | None = None


class SavingsAccountResponse(BaseModel):
    id: int
    student_id: int
    account_type: str
    current_balance: int
    savings_goal: int | None
    goal_description: str | None
    student: StudentBrief | None = None

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def balance_display(self) -> str:
        return format_rupiah(self.current_balance)

    @computed_field
    @property
    def student_name(self) -> str | None:
        return self.student.full_name if self.student else None


class SavingsSummary(BaseModel):
    """Totals over all savings accounts."""

    account_count: int
    total_balance: int
    total_deposits: int
    total_withdrawals: int

    @computed_field
    @property
    def total_balance_display(self) -> str:
        return format_rupiah(self.total_balance)


class MySavingsResponse(BaseModel):
    """Own account and its history, for the student view."""

    account: SavingsAccountResponse
    transactions: list[TransactionResponse]
