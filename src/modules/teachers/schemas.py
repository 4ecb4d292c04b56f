"""Schemas for Teachers module."""

from datetime import date

from pydantic import BaseModel, Field, computed_field, field_validator

from src.modules.students.models import Gender
from src.modules.students.schemas import normalize_phone
from src.modules.teachers.models import SalaryPaymentStatus, TeacherStatus
from src.shared.utils.money import format_rupiah


class TeacherCreate(BaseModel):
    """Schema for creating a teacher."""

    nip: str = Field(..., min_length=1, max_length=50)
    full_name: str = Field(..., min_length=1, max_length=200)
    gender: Gender | None = None
    date_of_birth: date | None = None
    phone: str | None = Field(None, max_length=20)
    address: str | None = None
    qualification: str | None = Field(None, max_length=100)
    specialization: str | None = Field(None, max_length=100)
    base_salary: int = Field(0, ge=0)
    hourly_rate: int = Field(0, ge=0)
    status: TeacherStatus = TeacherStatus.ACTIVE
    hire_date: date | None = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        return normalize_phone(v)


class TeacherUpdate(BaseModel):
    """Schema for updating a teacher."""

    nip: str | None = Field(None, min_length=1, max_length=50)
    full_name: str | None = Field(None, min_length=1, max_length=200)
    gender: Gender | None = None
    date_of_birth: date | None = None
    phone: str | None = Field(None, max_length=20)
    address: str | None = None
    qualification: str | None = Field(None, max_length=100)
    specialization: str | None = Field(None, max_length=100)
    base_salary: int | None = Field(None, ge=0)
    hourly_rate: int | None = Field(None, ge=0)
    status: TeacherStatus | None = None
    hire_date: date | None = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        return normalize_phone(v)


class TeacherResponse(BaseModel):
    """Schema for teacher response."""

    id: int
    nip: str
    full_name: str
    gender: str | None
    date_of_birth: date | None
    phone: str | None
    address: str | None
    qualification: str | None
    specialization: str | None
    base_salary: int
    hourly_rate: int
    status: str
    hire_date: date | None

    model_config = {"from_attributes": True}


# --- Assignments ---


class AssignmentCreate(BaseModel):
    subject: str = Field(..., min_length=1, max_length=100)
    class_name: str | None = Field(None, max_length=50)
    hours_per_week: int = Field(0, ge=0, le=80)
    academic_year: str | None = Field(None, pattern=r"^\d{4}/\d{4}$")


class AssignmentResponse(BaseModel):
    id: int
    teacher_id: int
    subject: str
    class_name: str | None
    hours_per_week: int
    academic_year: str | None

    model_config = {"from_attributes": True}


# --- Salary payments ---


class SalaryPaymentCreate(BaseModel):
    """
    Salary for one month.

    base_amount defaults to the teacher's base salary and the hourly rate
    for additional hours to the teacher's hourly rate.
    """

    payment_month: int = Field(..., ge=1, le=12)
    payment_year: int = Field(..., ge=2000, le=2100)
    base_amount: int | None = Field(None, ge=0)
    additional_hours: int = Field(0, ge=0)
    hourly_rate: int | None = Field(None, ge=0)
    payment_date: date | None = None
    payment_status: SalaryPaymentStatus = SalaryPaymentStatus.PAID
    notes: str | None = None


class SalaryPaymentResponse(BaseModel):
    id: int
    teacher_id: int
    teacher_name: str | None = None
    payment_month: int
    payment_year: int
    base_amount: int
    additional_hours: int
    additional_amount: int
    total_amount: int
    payment_date: date
    payment_status: str
    notes: str | None

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def total_display(self) -> str:
        return format_rupiah(self.total_amount)
