from datetime import datetime

from pydantic import EmailStr, field_validator, model_validator

from src.core.config import settings
from src.shared.schemas import BaseSchema


def check_password_length(v: str) -> str:
    if len(v) < settings.min_password_length:
        raise ValueError(f"Password must be at least {settings.min_password_length} characters")
    return v


class RegisterRequest(BaseSchema):
    """Self sign-up. New accounts start as santri."""

    email: EmailStr
    password: str
    confirm_password: str | None = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_length(v)

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Password and confirmation do not match")
        return self


class LoginRequest(BaseSchema):
    """Login request schema."""

    email: EmailStr
    password: str


class TokenResponse(BaseSchema):
    """Token response schema."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshRequest(BaseSchema):
    """Refresh token request schema."""

    refresh_token: str


class ProfileResponse(BaseSchema):
    """Profile response schema."""

    id: int
    email: str | None
    full_name: str | None
    role: str
    status: str
    student_id: int | None
    teacher_id: int | None
    created_at: datetime


class ProfileUpdate(BaseSchema):
    """Fields a user may change on their own profile."""

    full_name: str

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Full name must be at least 2 characters")
        return v


class LoginResponse(BaseSchema):
    """Login response with profile and tokens."""

    profile: ProfileResponse
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class ViewResponse(BaseSchema):
    """Which dashboard to show and which modules it may open."""

    kind: str
    role: str | None = None
    profile_id: int | None = None
    student_id: int | None = None
    teacher_id: int | None = None
    modules: list[str] = []
