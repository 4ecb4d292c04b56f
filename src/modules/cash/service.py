"""Service for the cash book."""

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.activity import ActivityAction, ActivityService
from src.core.documents import ReceiptPrefix, get_document_number
from src.core.exceptions import NotFoundError
from src.modules.cash.models import CashTransaction, CashTransactionType
from src.modules.cash.schemas import CashSummary, CashTransactionCreate
from src.modules.students.service import StudentService
from src.shared.utils.money import format_rupiah

MODULE = "cash"


class CashService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.activity = ActivityService(db)

    async def record_transaction(
        self, data: CashTransactionCreate, processed_by_id: int
    ) -> CashTransaction:
        """Record a cash receipt or disbursement."""
        if data.student_id is not None:
            await StudentService(self.db).get_student_by_id(data.student_id)

        transaction_date = data.transaction_date or date.today()
        receipt_number = await get_document_number(
            self.db, ReceiptPrefix.CASH, transaction_date.year
        )
        transaction = CashTransaction(
            transaction_type=data.transaction_type.value,
            amount=data.amount,
            transaction_date=transaction_date,
            category=data.category,
            description=data.description,
            student_id=data.student_id,
            receipt_number=receipt_number,
            processed_by=processed_by_id,
        )
        self.db.add(transaction)
        await self.db.flush()

        await self.activity.log(
            ActivityAction.RECORD_CASH,
            module=MODULE,
            user_id=processed_by_id,
            description=f"Cash {transaction.transaction_type} {format_rupiah(transaction.amount)}",
            details={"cash_transaction_id": transaction.id, "receipt_number": receipt_number},
        )

        await self.db.commit()
        return await self.get_transaction(transaction.id)

    async def get_transaction(self, transaction_id: int) -> CashTransaction:
        result = await self.db.execute(
            select(CashTransaction)
            .where(CashTransaction.id == transaction_id)
            .options(selectinload(CashTransaction.student))
            .execution_options(populate_existing=True)
        )
        transaction = result.scalar_one_or_none()
        if not transaction:
            raise NotFoundError("Cash transaction", transaction_id)
        return transaction

    async def list_transactions(
        self,
        transaction_type: CashTransactionType | None = None,
        student_id: int | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[CashTransaction]:
        query = (
            select(CashTransaction)
            .options(selectinload(CashTransaction.student))
            .order_by(CashTransaction.transaction_date.desc(), CashTransaction.id.desc())
        )
        if transaction_type:
            query = query.where(CashTransaction.transaction_type == transaction_type.value)
        if student_id is not None:
            query = query.where(CashTransaction.student_id == student_id)
        if date_from:
            query = query.where(CashTransaction.transaction_date >= date_from)
        if date_to:
            query = query.where(CashTransaction.transaction_date <= date_to)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_summary(
        self, date_from: date | None = None, date_to: date | None = None
    ) -> CashSummary:
        """Receipts, disbursements and the resulting balance."""
        query = select(CashTransaction.transaction_type, func.sum(CashTransaction.amount))
        if date_from:
            query = query.where(CashTransaction.transaction_date >= date_from)
        if date_to:
            query = query.where(CashTransaction.transaction_date <= date_to)
        totals = dict((await self.db.execute(query.group_by(CashTransaction.transaction_type))).all())
        return CashSummary(
            total_receipts=int(totals.get(CashTransactionType.RECEIPT.value) or 0),
            total_disbursements=int(totals.get(CashTransactionType.DISBURSEMENT.value) or 0),
        )
