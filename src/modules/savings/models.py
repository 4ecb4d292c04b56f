"""Student savings accounts (tabungan santri)."""

from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.core.database.base import TimestampedModel


class SavingsAccount(TimestampedModel):
    """One savings account per student, opened when the student is enrolled."""

    __tablename__ = "savings_accounts"
    __table_args__ = (
        CheckConstraint("current_balance >= 0", name="ck_savings_balance_non_negative"),
    )

    student_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("students.id"), nullable=False, unique=True, index=True
    )
    account_type: Mapped[str] = mapped_column(String(30), nullable=False, default="tabungan")

    current_balance: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0, server_default="0"
    )
    savings_goal: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    goal_description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    student: Mapped["Student"] = relationship("Student")


from src.modules.students.models import Student  # noqa: E402
