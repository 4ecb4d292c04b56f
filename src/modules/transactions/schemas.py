"""Response schema shared by SPP and savings transactions."""

from datetime import date

from pydantic import BaseModel, computed_field

from src.modules.students.schemas import StudentBrief
from src.shared.utils.money import format_rupiah


class TransactionResponse(BaseModel):
    """Student transaction with the student it belongs to."""

    id: int
    transaction_type: str
    student_id: int | None
    savings_account_id: int | None
    amount: int
    transaction_date: date
    category: str | None
    description: str | None
    payment_method: str | None
    receipt_number: str | None
    status: str
    student: StudentBrief | None = None

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def amount_display(self) -> str:
        return format_rupiah(self.amount)

    @computed_field
    @property
    def student_name(self) -> str | None:
        return self.student.full_name if self.student else None
