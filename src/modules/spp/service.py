"""Service for SPP payments."""

from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.activity import ActivityAction, ActivityService
from src.core.documents import ReceiptPrefix, get_document_number
from src.core.exceptions import NotFoundError
from src.modules.spp.schemas import SppPaymentCreate
from src.modules.students.service import StudentService
from src.modules.transactions.models import Transaction, TransactionStatus, TransactionType
from src.shared.utils.money import format_rupiah

MODULE = "spp"


class SppService:
    """Records SPP payments as student transactions."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.activity = ActivityService(db)

    async def record_payment(self, data: SppPaymentCreate, processed_by_id: int) -> Transaction:
        """Record an SPP payment for an active student and issue a receipt number."""
        student = await StudentService(self.db).get_active_student(data.student_id)
        transaction_date = data.transaction_date or date.today()

        receipt_number = await get_document_number(
            self.db, ReceiptPrefix.SPP, transaction_date.year
        )
        transaction = Transaction(
            transaction_type=TransactionType.SPP.value,
            student_id=student.id,
            amount=data.amount,
            transaction_date=transaction_date,
            category="SPP",
            description=data.description,
            payment_method=data.payment_method,
            receipt_number=receipt_number,
            processed_by=processed_by_id,
            status=TransactionStatus.COMPLETED.value,
        )
        self.db.add(transaction)
        await self.db.flush()

        await self.activity.log(
            ActivityAction.RECORD_SPP_PAYMENT,
            module=MODULE,
            user_id=processed_by_id,
            description=f"SPP {format_rupiah(data.amount)} from {student.full_name}",
            details={
                "transaction_id": transaction.id,
                "student_id": student.id,
                "amount": data.amount,
                "receipt_number": receipt_number,
            },
        )

        await self.db.commit()
        return await self.get_payment(transaction.id)

    async def get_payment(self, transaction_id: int) -> Transaction:
        result = await self.db.execute(
            select(Transaction)
            .where(
                Transaction.id == transaction_id,
                Transaction.transaction_type == TransactionType.SPP.value,
            )
            .options(selectinload(Transaction.student))
            .execution_options(populate_existing=True)
        )
        transaction = result.scalar_one_or_none()
        if not transaction:
            raise NotFoundError("SPP payment", transaction_id)
        return transaction

    async def list_payments(
        self,
        student_id: int | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[Transaction]:
        """SPP payments, newest first."""
        query = (
            select(Transaction)
            .where(Transaction.transaction_type == TransactionType.SPP.value)
            .options(selectinload(Transaction.student))
            .order_by(Transaction.transaction_date.desc(), Transaction.id.desc())
        )
        if student_id is not None:
            query = query.where(Transaction.student_id == student_id)
        if date_from:
            query = query.where(Transaction.transaction_date >= date_from)
        if date_to:
            query = query.where(Transaction.transaction_date <= date_to)
        result = await self.db.execute(query)
        return list(result.scalars().all())
