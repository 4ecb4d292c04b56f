"""Student money movements: SPP payments and savings deposits/withdrawals."""

from datetime import date
from enum import StrEnum

from sqlalchemy import BigInteger, Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.core.database.base import RecordedModel


class TransactionType(StrEnum):
    """Kinds of student transactions."""

    SPP = "spp"
    SAVINGS_DEPOSIT = "savings_deposit"
    SAVINGS_WITHDRAWAL = "savings_withdrawal"


SAVINGS_TRANSACTION_TYPES = (
    TransactionType.SAVINGS_DEPOSIT.value,
    TransactionType.SAVINGS_WITHDRAWAL.value,
)


class TransactionStatus(StrEnum):
    """Transaction status."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Transaction(RecordedModel):
    """
    A payment by or for a student.

    SPP rows carry a receipt number; savings rows point at the savings
    account whose balance they changed.
    """

    __tablename__ = "transactions"

    transaction_type: Mapped[str] = mapped_column(String(30), nullable=False, index=True)

    student_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("students.id"), nullable=True, index=True
    )
    savings_account_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("savings_accounts.id"), nullable=True, index=True
    )

    # Whole Rupiah
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    payment_method: Mapped[str | None] = mapped_column(String(50), nullable=True)
    receipt_number: Mapped[str | None] = mapped_column(
        String(50), nullable=True, unique=True, index=True
    )

    processed_by: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TransactionStatus.COMPLETED.value
    )

    # Relationships
    student: Mapped["Student | None"] = relationship("Student")


from src.modules.students.models import Student  # noqa: E402
