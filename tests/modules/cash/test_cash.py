from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.models import UserRole
from src.core.exceptions import NotFoundError
from src.modules.cash.models import CashTransactionType
from src.modules.cash.schemas import CashTransactionCreate
from src.modules.cash.service import CashService
from src.modules.students.models import Gender
from src.modules.students.schemas import StudentCreate
from src.modules.students.service import StudentService


def _cash(transaction_type: CashTransactionType, amount: int, **kwargs) -> CashTransactionCreate:
    return CashTransactionCreate(
        transaction_type=transaction_type,
        amount=amount,
        description=kwargs.pop("description", "Kas kelas"),
        **kwargs,
    )


class TestCashService:
    """Tests for CashService."""

    async def test_record_receipt(self, db_session: AsyncSession):
        transaction = await CashService(db_session).record_transaction(
            _cash(CashTransactionType.RECEIPT, 150_000, transaction_date=date(2026, 1, 15)),
            processed_by_id=1,
        )

        assert transaction.receipt_number == "KAS-2026-000001"
        assert transaction.student is None

    async def test_record_for_student(self, db_session: AsyncSession):
        student = await StudentService(db_session).create_student(
            StudentCreate(nim="1", full_name="Ahmad", gender=Gender.MALE), 1
        )
        transaction = await CashService(db_session).record_transaction(
            _cash(CashTransactionType.RECEIPT, 10_000, student_id=student.id), 1
        )
        assert transaction.student.full_name == "Ahmad"

    async def test_unknown_student(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await CashService(db_session).record_transaction(
                _cash(CashTransactionType.RECEIPT, 10_000, student_id=999), 1
            )

    async def test_summary_and_balance(self, db_session: AsyncSession):
        service = CashService(db_session)
        await service.record_transaction(
            _cash(CashTransactionType.RECEIPT, 150_000, transaction_date=date(2026, 1, 15)), 1
        )
        await service.record_transaction(
            _cash(CashTransactionType.DISBURSEMENT, 60_000, transaction_date=date(2026, 1, 20)), 1
        )
        await service.record_transaction(
            _cash(CashTransactionType.RECEIPT, 40_000, transaction_date=date(2026, 2, 3)), 1
        )

        summary = await service.get_summary()
        assert summary.total_receipts == 190_000
        assert summary.total_disbursements == 60_000
        assert summary.balance == 130_000

        january = await service.get_summary(date_from=date(2026, 1, 1), date_to=date(2026, 1, 31))
        assert january.balance == 90_000

    async def test_empty_summary(self, db_session: AsyncSession):
        summary = await CashService(db_session).get_summary()
        assert summary.balance == 0
        assert summary.balance_display == "Rp 0"

    async def test_list_by_type(self, db_session: AsyncSession):
        service = CashService(db_session)
        await service.record_transaction(_cash(CashTransactionType.RECEIPT, 1_000), 1)
        await service.record_transaction(_cash(CashTransactionType.DISBURSEMENT, 500), 1)

        rows = await service.list_transactions(transaction_type=CashTransactionType.DISBURSEMENT)
        assert [r.amount for r in rows] == [500]


class TestCashEndpoints:
    async def test_committee_records_cash(self, client: AsyncClient, make_account):
        _, headers = await make_account(UserRole.KOMITE)

        response = await client.post(
            "/api/v1/cash",
            json={"transaction_type": "disbursement", "amount": "60.000", "description": "Spidol"},
            headers=headers,
        )

        assert response.status_code == 201
        assert response.json()["data"]["amount_display"] == "-Rp 60.000"

        response = await client.get("/api/v1/cash/summary", headers=headers)
        assert response.json()["data"]["balance"] == -60000

    async def test_missing_description(self, client: AsyncClient, admin):
        _, headers = admin
        response = await client.post(
            "/api/v1/cash", json={"transaction_type": "receipt", "amount": 1000}, headers=headers
        )
        assert response.status_code == 422

    async def test_santri_cannot_open_cash_book(self, client: AsyncClient, make_account):
        _, headers = await make_account(UserRole.SANTRI)
        response = await client.get("/api/v1/cash", headers=headers)
        assert response.status_code == 403
