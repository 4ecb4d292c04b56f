"""Expense (pengeluaran) model."""

from datetime import date
from enum import StrEnum

from sqlalchemy import BigInteger, Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.core.database.base import TimestampedModel


class ExpenseCategory(StrEnum):
    """Expense categories used on the expense form."""

    PROGRAM = "Program"
    OPERASIONAL = "Operasional"
    ADMINISTRASI = "Administrasi"
    PEMELIHARAAN = "Pemeliharaan"
    ATK = "ATK"
    TRANSPORTASI = "Transportasi"
    GAJI_GURU = "Gaji Guru"


class ApprovalStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Expense(TimestampedModel):
    """Money spent by the pesantren."""

    __tablename__ = "expenses"

    expense_category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    # Whole Rupiah
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    expense_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    payment_method: Mapped[str | None] = mapped_column(String(50), nullable=True)
    vendor_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    receipt_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Only for "Gaji Guru"
    teacher_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("teachers.id"), nullable=True, index=True
    )

    approval_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ApprovalStatus.APPROVED.value
    )
    approved_by: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_by: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    teacher: Mapped["Teacher | None"] = relationship("Teacher")


from src.modules.teachers.models import Teacher  # noqa: E402
