"""Schemas for Students module."""

import re
from datetime import date

from pydantic import BaseModel, Field, field_validator

from src.modules.students.models import Gender, StudentStatus


# Indonesian mobile numbers: +62 followed by 8-13 digits
INDONESIAN_PHONE_REGEX = re.compile(r"^\+62[0-9]{8,13}$")


def normalize_phone(v: str | None) -> str | None:
    """Normalize 08xx / 62xx numbers to +62xx and validate."""
    if v is None or not v.strip():
        return None

    normalized = v.replace(" ", "").replace("-", "")

    if normalized.startswith("0"):
        normalized = "+62" + normalized[1:]
    elif normalized.startswith("62"):
        normalized = "+" + normalized

    if not INDONESIAN_PHONE_REGEX.match(normalized):
        raise ValueError("Phone must be an Indonesian number, e.g. 081234567890 or +6281234567890")
    return normalized


class StudentCreate(BaseModel):
    """Schema for creating a student."""

    nim: str = Field(..., min_length=1, max_length=50)
    full_name: str = Field(..., min_length=1, max_length=200)
    gender: Gender
    date_of_birth: date | None = None
    parent_name: str | None = Field(None, max_length=200)
    parent_phone: str | None = Field(None, max_length=20)
    parent_address: str | None = None
    room_assignment: str | None = Field(None, max_length=50)
    class_name: str | None = Field(None, max_length=50)
    status: StudentStatus = StudentStatus.ACTIVE
    enrollment_date: date | None = None

    @field_validator("nim", "full_name")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    @field_validator("parent_phone")
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        return normalize_phone(v)


class StudentUpdate(BaseModel):
    """Schema for updating a student. Only provided fields change."""

    nim: str | None = Field(None, min_length=1, max_length=50)
    full_name: str | None = Field(None, min_length=1, max_length=200)
    gender: Gender | None = None
    date_of_birth: date | None = None
    parent_name: str | None = Field(None, max_length=200)
    parent_phone: str | None = Field(None, max_length=20)
    parent_address: str | None = None
    room_assignment: str | None = Field(None, max_length=50)
    class_name: str | None = Field(None, max_length=50)
    status: StudentStatus | None = None
    enrollment_date: date | None = None

    @field_validator("parent_phone")
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        return normalize_phone(v)


class StudentResponse(BaseModel):
    """Schema for student response."""

    id: int
    nim: str
    full_name: str
    gender: str
    date_of_birth: date | None
    parent_name: str | None
    parent_phone: str | None
    parent_address: str | None
    room_assignment: str | None
    class_name: str | None
    status: str
    enrollment_date: date | None

    model_config = {"from_attributes": True}


class StudentBrief(BaseModel):
    """Student fields embedded in transaction rows."""

    id: int
    nim: str
    full_name: str
    class_name: str | None

    model_config = {"from_attributes": True}
