"""Service for student savings accounts."""

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.activity import ActivityAction, ActivityService
from src.core.documents import ReceiptPrefix, get_document_number
from src.core.exceptions import InsufficientBalanceError, NotFoundError
from src.modules.savings.models import SavingsAccount
from src.modules.savings.schemas import SavingsGoalUpdate, SavingsSummary, SavingsTransactionCreate
from src.modules.students.service import StudentService
from src.modules.transactions.models import (
    SAVINGS_TRANSACTION_TYPES,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from src.shared.utils.money import format_rupiah

MODULE = "savings"


class SavingsService:
    """Deposits, withdrawals and balances of student savings accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.activity = ActivityService(db)

    async def get_account_by_student(
        self, student_id: int, for_update: bool = False
    ) -> SavingsAccount:
        query = (
            select(SavingsAccount)
            .where(SavingsAccount.student_id == student_id)
            .options(selectinload(SavingsAccount.student))
        )
        if for_update:
            query = query.with_for_update()
        account = (await self.db.execute(query)).scalar_one_or_none()
        if not account:
            raise NotFoundError("Savings account for student", student_id)
        return account

    async def list_accounts(self) -> list[SavingsAccount]:
        result = await self.db.execute(
            select(SavingsAccount)
            .options(selectinload(SavingsAccount.student))
            .order_by(SavingsAccount.id)
        )
        return list(result.scalars().all())

    async def get_summary(self) -> SavingsSummary:
        """Account count, total balance and all-time deposit/withdrawal totals."""
        balances = (
            await self.db.execute(
                select(
                    func.count(SavingsAccount.id),
                    func.coalesce(func.sum(SavingsAccount.current_balance), 0),
                )
            )
        ).one()

        totals = dict(
            (
                await self.db.execute(
                    select(Transaction.transaction_type, func.sum(Transaction.amount))
                    .where(Transaction.transaction_type.in_(SAVINGS_TRANSACTION_TYPES))
                    .group_by(Transaction.transaction_type)
                )
            ).all()
        )

        return SavingsSummary(
            account_count=balances[0],
            total_balance=int(balances[1]),
            total_deposits=int(totals.get(TransactionType.SAVINGS_DEPOSIT.value) or 0),
            total_withdrawals=int(totals.get(TransactionType.SAVINGS_WITHDRAWAL.value) or 0),
        )

    async def deposit(self, data: SavingsTransactionCreate, processed_by_id: int) -> Transaction:
        """Add money to a student's savings."""
        return await self._move(
            data, processed_by_id, TransactionType.SAVINGS_DEPOSIT, ActivityAction.SAVINGS_DEPOSIT
        )

    async def withdraw(self, data: SavingsTransactionCreate, processed_by_id: int) -> Transaction:
        """
        Take money out of a student's savings.

        Raises:
            InsufficientBalanceError: If the amount exceeds the current balance.
        """
        return await self._move(
            data,
            processed_by_id,
            TransactionType.SAVINGS_WITHDRAWAL,
            ActivityAction.SAVINGS_WITHDRAWAL,
        )

    async def _move(
        self,
        data: SavingsTransactionCreate,
        processed_by_id: int,
        transaction_type: TransactionType,
        action: ActivityAction,
    ) -> Transaction:
        student = await StudentService(self.db).get_active_student(data.student_id)
        account = await self.get_account_by_student(student.id, for_update=True)

        if transaction_type == TransactionType.SAVINGS_WITHDRAWAL:
            if data.amount > account.current_balance:
                raise InsufficientBalanceError(account.id, data.amount, account.current_balance)
            account.current_balance -= data.amount
        else:
            account.current_balance += data.amount

        transaction_date = data.transaction_date or date.today()
        receipt_number = await get_document_number(
            self.db, ReceiptPrefix.SAVINGS, transaction_date.year
        )
        transaction = Transaction(
            transaction_type=transaction_type.value,
            student_id=student.id,
            savings_account_id=account.id,
            amount=data.amount,
            transaction_date=transaction_date,
            category="Tabungan",
            description=data.description,
            receipt_number=receipt_number,
            processed_by=processed_by_id,
            status=TransactionStatus.COMPLETED.value,
        )
        self.db.add(transaction)
        await self.db.flush()

        await self.activity.log(
            action,
            module=MODULE,
            user_id=processed_by_id,
            description=(
                f"{transaction_type.value} {format_rupiah(data.amount)} for {student.full_name}"
            ),
            details={
                "transaction_id": transaction.id,
                "student_id": student.id,
                "amount": data.amount,
                "balance_after": account.current_balance,
            },
        )

        await self.db.commit()
        return await self._get_transaction(transaction.id)

    async def _get_transaction(self, transaction_id: int) -> Transaction:
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.id == transaction_id)
            .options(selectinload(Transaction.student))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def list_transactions(
        self,
        student_id: int | None = None,
        transaction_type: TransactionType | None = None,
    ) -> list[Transaction]:
        """Savings deposits and withdrawals, newest first."""
        query = (
            select(Transaction)
            .where(Transaction.transaction_type.in_(SAVINGS_TRANSACTION_TYPES))
            .options(selectinload(Transaction.student))
            .order_by(Transaction.transaction_date.desc(), Transaction.id.desc())
        )
        if student_id is not None:
            query = query.where(Transaction.student_id == student_id)
        if transaction_type is not None:
            query = query.where(Transaction.transaction_type == transaction_type.value)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update_goal(
        self, student_id: int, data: SavingsGoalUpdate, updated_by_id: int
    ) -> SavingsAccount:
        account = await self.get_account_by_student(student_id)
        account.savings_goal = data.savings_goal
        account.goal_description = data.goal_description

        await self.activity.log(
            ActivityAction.UPDATE,
            module=MODULE,
            user_id=updated_by_id,
            description=f"Savings goal updated for student {student_id}",
            details={"account_id": account.id, "savings_goal": data.savings_goal},
        )
        await self.db.commit()
        return await self.get_account_by_student(student_id)
