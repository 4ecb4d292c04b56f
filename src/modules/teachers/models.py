"""Teacher (guru), teaching assignment and salary payment models."""

from datetime import date
from enum import StrEnum

from sqlalchemy import (
    BigInteger,
    Date,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.core.database.base import RecordedModel, TimestampedModel


class TeacherStatus(StrEnum):
    """Teacher status enumeration."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class SalaryPaymentStatus(StrEnum):
    """Salary payment status."""

    PENDING = "pending"
    PAID = "paid"


class Teacher(TimestampedModel):
    """Teacher employed by the pesantren."""

    __tablename__ = "teachers"

    nip: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)

    full_name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    gender: Mapped[str | None] = mapped_column(String(1), nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    qualification: Mapped[str | None] = mapped_column(String(100), nullable=True)
    specialization: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Whole Rupiah
    base_salary: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    hourly_rate: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TeacherStatus.ACTIVE.value, index=True
    )
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    @property
    def is_active(self) -> bool:
        return self.status == TeacherStatus.ACTIVE.value


class TeacherAssignment(RecordedModel):
    """Subject a teacher teaches to a class in an academic year."""

    __tablename__ = "teacher_assignments"

    teacher_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    subject: Mapped[str] = mapped_column(String(100), nullable=False)
    class_name: Mapped[str | None] = mapped_column("class", String(50), nullable=True)
    hours_per_week: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    academic_year: Mapped[str | None] = mapped_column(String(20), nullable=True)  # 2025/2026


class SalaryPayment(RecordedModel):
    """Monthly salary paid to a teacher."""

    __tablename__ = "salary_payments"
    __table_args__ = (
        UniqueConstraint("teacher_id", "payment_month", "payment_year", name="uq_salary_month"),
    )

    teacher_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("teachers.id"), nullable=False, index=True
    )
    payment_month: Mapped[int] = mapped_column(Integer, nullable=False)
    payment_year: Mapped[int] = mapped_column(Integer, nullable=False)

    base_amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    additional_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    additional_amount: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    total_amount: Mapped[int] = mapped_column(BigInteger, nullable=False)

    payment_date: Mapped[date] = mapped_column(Date, nullable=False)
    payment_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SalaryPaymentStatus.PAID.value
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    processed_by: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    teacher: Mapped["Teacher"] = relationship("Teacher")
