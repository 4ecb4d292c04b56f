"""Service for Expenses module."""

from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.activity import ActivityAction, ActivityService
from src.core.exceptions import NotFoundError
from src.modules.expenses.models import ApprovalStatus, Expense
from src.modules.expenses.schemas import ExpenseCreate
from src.modules.teachers.service import TeacherService
from src.shared.utils.money import format_rupiah

MODULE = "expenses"


class ExpenseService:
    """Records and lists expenses."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.activity = ActivityService(db)

    async def create_expense(self, data: ExpenseCreate, created_by_id: int) -> Expense:
        """Record an expense. Expenses recorded by an admin are approved immediately."""
        if data.teacher_id is not None:
            await TeacherService(self.db).get_teacher_by_id(data.teacher_id)

        expense = Expense(
            expense_category=data.expense_category.value,
            amount=data.amount,
            expense_date=data.expense_date or date.today(),
            description=data.description,
            payment_method=data.payment_method,
            vendor_name=data.vendor_name,
            receipt_url=data.receipt_url,
            teacher_id=data.teacher_id,
            approval_status=ApprovalStatus.APPROVED.value,
            approved_by=created_by_id,
            created_by=created_by_id,
        )
        self.db.add(expense)
        await self.db.flush()

        await self.activity.log(
            ActivityAction.RECORD_EXPENSE,
            module=MODULE,
            user_id=created_by_id,
            description=f"{expense.expense_category} {format_rupiah(expense.amount)}",
            details={"expense_id": expense.id, "amount": expense.amount},
        )

        await self.db.commit()
        return await self.get_expense(expense.id)

    async def get_expense(self, expense_id: int) -> Expense:
        result = await self.db.execute(
            select(Expense)
            .where(Expense.id == expense_id)
            .options(selectinload(Expense.teacher))
            .execution_options(populate_existing=True)
        )
        expense = result.scalar_one_or_none()
        if not expense:
            raise NotFoundError("Expense", expense_id)
        return expense

    async def list_expenses(
        self,
        category: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[Expense]:
        """Expenses, newest first."""
        query = (
            select(Expense)
            .options(selectinload(Expense.teacher))
            .order_by(Expense.expense_date.desc(), Expense.id.desc())
        )
        if category:
            query = query.where(Expense.expense_category == category)
        if date_from:
            query = query.where(Expense.expense_date >= date_from)
        if date_to:
            query = query.where(Expense.expense_date <= date_to)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def delete_expense(self, expense_id: int, deleted_by_id: int) -> None:
        expense = await self.get_expense(expense_id)
        await self.db.delete(expense)
        await self.activity.log(
            ActivityAction.DELETE,
            module=MODULE,
            user_id=deleted_by_id,
            description=f"Deleted expense {expense.expense_category} {format_rupiah(expense.amount)}",
            details={"expense_id": expense_id},
        )
        await self.db.commit()
