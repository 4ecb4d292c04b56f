"""Student (santri) model."""

from datetime import date
from enum import StrEnum

from sqlalchemy import Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import TimestampedModel


class Gender(StrEnum):
    """Gender enumeration."""

    MALE = "L"  # laki-laki
    FEMALE = "P"  # perempuan


class StudentStatus(StrEnum):
    """Student status enumeration."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    GRADUATED = "graduated"


class Student(TimestampedModel):
    """Santri enrolled in the pesantren."""

    __tablename__ = "students"

    nim: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)

    # Personal info
    full_name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    gender: Mapped[str] = mapped_column(String(1), nullable=False)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Parent / guardian
    parent_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    parent_phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    parent_address: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Boarding
    room_assignment: Mapped[str | None] = mapped_column(String(50), nullable=True)
    class_name: Mapped[str | None] = mapped_column("class", String(50), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=StudentStatus.ACTIVE.value, index=True
    )
    enrollment_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    @property
    def is_active(self) -> bool:
        return self.status == StudentStatus.ACTIVE.value
