from datetime import datetime
from typing import Any

from pydantic import EmailStr, field_validator

from src.core.auth.models import ProfileStatus, UserRole
from src.core.auth.schemas import check_password_length
from src.shared.schemas import BaseSchema


class UserCreate(BaseSchema):
    """Account created by an admin, with its role and links."""

    email: EmailStr
    password: str
    full_name: str
    role: UserRole
    student_id: int | None = None
    teacher_id: int | None = None

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Full name must be at least 2 characters")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_length(v)


class RoleChange(BaseSchema):
    """
    New role for a profile.

    student_id is kept only for santri and teacher_id only for guru; other
    roles drop both links.
    """

    role: UserRole
    student_id: int | None = None
    teacher_id: int | None = None


class UserResponse(BaseSchema):
    """Profile as shown in role management."""

    id: int
    email: str | None
    full_name: str | None
    role: str
    status: str
    student_id: int | None
    teacher_id: int | None
    created_at: datetime


class RoleCounts(BaseSchema):
    """Number of profiles per role."""

    total: int
    by_role: dict[str, int]


class UserListFilters(BaseSchema):
    """Filters for user list."""

    role: UserRole | None = None
    status: ProfileStatus | None = None


class ActivityResponse(BaseSchema):
    id: int
    user_id: int | None
    action_type: str
    module: str | None
    description: str | None
    details: dict[str, Any] | None
    ip_address: str | None
    created_at: datetime
