"""Schemas for dashboard API: one summary shape per role view."""

from src.shared.schemas.base import BaseSchema


class AdminSummary(BaseSchema):
    """Admin cards: this month's money in/out plus overall balances."""

    active_students_count: int = 0
    spp_this_month: int = 0
    donations_this_month: int = 0
    expenses_this_month: int = 0
    total_savings: int = 0
    cash_balance: int = 0
    active_teachers_count: int = 0


class StudentSummary(BaseSchema):
    student_id: int | None = None
    nim: str | None = None
    full_name: str | None = None
    class_name: str | None = None
    savings_balance: int = 0
    spp_paid_this_year: int = 0
    spp_months_paid_this_year: int = 0
    last_payment_date: str | None = None


class TeacherSummary(BaseSchema):
    teacher_id: int | None = None
    nip: str | None = None
    full_name: str | None = None
    assignments_count: int = 0
    hours_per_week: int = 0
    salary_paid_this_year: int = 0
    last_salary_total: int | None = None


class CommitteeSummary(BaseSchema):
    active_students_count: int = 0
    cash_balance: int = 0
    total_savings: int = 0
    cash_transactions_last_7_days: int = 0


class DashboardResponse(BaseSchema):
    """`kind` tells which of the summaries is filled in."""

    kind: str
    admin: AdminSummary | None = None
    student: StudentSummary | None = None
    teacher: TeacherSummary | None = None
    committee: CommitteeSummary | None = None
