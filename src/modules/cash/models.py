"""Cash book (kas) model."""

from datetime import date
from enum import StrEnum

from sqlalchemy import BigInteger, Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.core.database.base import RecordedModel


class CashTransactionType(StrEnum):
    RECEIPT = "receipt"  # penerimaan
    DISBURSEMENT = "disbursement"  # pengeluaran


class CashTransaction(RecordedModel):
    """Money in or out of the cash box, optionally paid by a student."""

    __tablename__ = "cash_transactions"

    transaction_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    # Whole Rupiah
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    student_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("students.id"), nullable=True, index=True
    )
    reference_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    reference_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    receipt_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    processed_by: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    student: Mapped["Student | None"] = relationship("Student")


from src.modules.students.models import Student  # noqa: E402
