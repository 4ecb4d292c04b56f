from datetime import datetime
from enum import StrEnum

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import Base, BigIntPK, TimestampedModel


class UserRole(StrEnum):
    """Roles a profile can hold."""

    ADMIN = "admin"
    SANTRI = "santri"  # student
    GURU = "guru"  # teacher
    KOMITE = "komite"  # school committee


class ProfileStatus(StrEnum):
    """Profile status."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class User(TimestampedModel):
    """
    Login identity: e-mail and password.

    Everything the application knows about the person (role, name, linked
    student or teacher) lives in the Profile with the same id.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class Profile(Base):
    """Role profile of a user, looked up by the user's id."""

    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(
        BigIntPK, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=UserRole.SANTRI.value, index=True
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ProfileStatus.ACTIVE.value
    )

    # Set for role santri / guru only
    student_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("students.id", ondelete="SET NULL"), nullable=True
    )
    teacher_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("teachers.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def has_role(self, *roles: UserRole) -> bool:
        """Check if profile has any of the specified roles."""
        return self.role in [r.value for r in roles]

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value
