"""Service for dashboard summaries (main page of every role)."""

from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.views import (
    AdminView,
    CommitteeView,
    StudentView,
    TeacherView,
    ViewVariant,
)
from src.core.exceptions import AuthenticationError
from src.core.query import RecordQueryService, eq, gte, lte
from src.modules.cash.models import CashTransactionType
from src.modules.expenses.models import ApprovalStatus
from src.modules.students.models import StudentStatus
from src.modules.teachers.models import TeacherStatus
from src.modules.transactions.models import TransactionType


def _total(rows: list[dict], field: str = "amount") -> int:
    return sum(int(r[field] or 0) for r in rows)


class DashboardService:
    """Aggregates data for main page cards."""

    def __init__(self, db: AsyncSession, today: date | None = None):
        self.db = db
        self.records = RecordQueryService(db)
        self.today = today or date.today()

    async def get_summary(self, view: ViewVariant) -> dict:
        """
        Build the summary for the given view.

        Raises:
            AuthenticationError: For the logged-out view.
        """
        if isinstance(view, AdminView):
            return {"kind": view.kind, "admin": await self.admin_summary()}
        if isinstance(view, StudentView):
            return {"kind": view.kind, "student": await self.student_summary(view.student_id)}
        if isinstance(view, TeacherView):
            return {"kind": view.kind, "teacher": await self.teacher_summary(view.teacher_id)}
        if isinstance(view, CommitteeView):
            return {"kind": view.kind, "committee": await self.committee_summary()}
        raise AuthenticationError("Sign in to see the dashboard")

    async def _cash_balance(self) -> int:
        rows = await self.records.fetch("cash_transactions")
        receipts = _total(
            [r for r in rows if r["transaction_type"] == CashTransactionType.RECEIPT.value]
        )
        disbursements = _total(
            [r for r in rows if r["transaction_type"] == CashTransactionType.DISBURSEMENT.value]
        )
        return receipts - disbursements

    async def _active_students(self) -> int:
        return await self.records.count("students", eq("status", StudentStatus.ACTIVE.value))

    async def _total_savings(self) -> int:
        return _total(await self.records.fetch("savings_accounts"), "current_balance")

    async def admin_summary(self) -> dict:
        month_start = self.today.replace(day=1)
        spp = await self.records.fetch(
            "transactions",
            eq("transaction_type", TransactionType.SPP.value),
            gte("transaction_date", month_start),
        )
        donations = await self.records.fetch("donations", gte("donation_date", month_start))
        expenses = await self.records.fetch(
            "expenses",
            eq("approval_status", ApprovalStatus.APPROVED.value),
            gte("expense_date", month_start),
        )

        return {
            "active_students_count": await self._active_students(),
            "spp_this_month": _total(spp),
            "donations_this_month": _total(donations),
            "expenses_this_month": _total(expenses),
            "total_savings": await self._total_savings(),
            "cash_balance": await self._cash_balance(),
            "active_teachers_count": await self.records.count(
                "teachers", eq("status", TeacherStatus.ACTIVE.value)
            ),
        }

    async def student_summary(self, student_id: int | None) -> dict:
        """Own savings and SPP for a student; empty when no student is linked."""
        if student_id is None:
            return {}
        students = await self.records.fetch("students", eq("id", student_id))
        if not students:
            return {"student_id": student_id}
        student = students[0]

        accounts = await self.records.fetch("savings_accounts", eq("student_id", student_id))
        year_start = date(self.today.year, 1, 1)
        payments = await self.records.fetch(
            "transactions",
            eq("student_id", student_id),
            eq("transaction_type", TransactionType.SPP.value),
            gte("transaction_date", year_start),
            lte("transaction_date", date(self.today.year, 12, 31)),
            order_by="transaction_date",
            descending=True,
        )
        return {
            "student_id": student_id,
            "nim": student["nim"],
            "full_name": student["full_name"],
            "class_name": student["class"],
            "savings_balance": _total(accounts, "current_balance"),
            "spp_paid_this_year": _total(payments),
            "spp_months_paid_this_year": len({p["transaction_date"].month for p in payments}),
            "last_payment_date": (
                payments[0]["transaction_date"].isoformat() if payments else None
            ),
        }

    async def teacher_summary(self, teacher_id: int | None) -> dict:
        """Assignments and salary of a teacher; empty when no teacher is linked."""
        if teacher_id is None:
            return {}
        teachers = await self.records.fetch("teachers", eq("id", teacher_id))
        if not teachers:
            return {"teacher_id": teacher_id}
        teacher = teachers[0]

        assignments = await self.records.fetch(
            "teacher_assignments", eq("teacher_id", teacher_id)
        )
        salaries = await self.records.fetch(
            "salary_payments",
            eq("teacher_id", teacher_id),
            order_by="payment_date",
            descending=True,
        )
        this_year = [s for s in salaries if s["payment_year"] == self.today.year]
        return {
            "teacher_id": teacher_id,
            "nip": teacher["nip"],
            "full_name": teacher["full_name"],
            "assignments_count": len(assignments),
            "hours_per_week": _total(assignments, "hours_per_week"),
            "salary_paid_this_year": _total(this_year, "total_amount"),
            "last_salary_total": int(salaries[0]["total_amount"]) if salaries else None,
        }

    async def committee_summary(self) -> dict:
        recent = await self.records.count(
            "cash_transactions", gte("transaction_date", self.today - timedelta(days=7))
        )
        return {
            "active_students_count": await self._active_students(),
            "cash_balance": await self._cash_balance(),
            "total_savings": await self._total_savings(),
            "cash_transactions_last_7_days": recent,
        }
