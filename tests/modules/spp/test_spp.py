from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.models import UserRole
from src.core.exceptions import NotFoundError, ValidationError
from src.modules.savings.schemas import SavingsTransactionCreate
from src.modules.savings.service import SavingsService
from src.modules.spp.schemas import DEFAULT_PAYMENT_METHOD, SppPaymentCreate
from src.modules.spp.service import SppService
from src.modules.students.models import Gender, StudentStatus
from src.modules.students.schemas import StudentCreate
from src.modules.students.service import StudentService
from src.modules.transactions.models import TransactionType


async def _student(db_session: AsyncSession, nim: str = "2026001", **kwargs) -> int:
    student = await StudentService(db_session).create_student(
        StudentCreate(nim=nim, full_name=f"Santri {nim}", gender=Gender.MALE, **kwargs), 1
    )
    return student.id


class TestSppService:
    """Tests for SppService."""

    async def test_record_payment_issues_receipt(self, db_session: AsyncSession):
        student_id = await _student(db_session)

        payment = await SppService(db_session).record_payment(
            SppPaymentCreate(
                student_id=student_id, amount="350.000", transaction_date=date(2026, 1, 10)
            ),
            processed_by_id=1,
        )

        assert payment.transaction_type == TransactionType.SPP.value
        assert payment.amount == 350_000
        assert payment.receipt_number == "SPP-2026-000001"
        assert payment.category == "SPP"
        assert payment.payment_method == DEFAULT_PAYMENT_METHOD
        assert payment.student.nim == "2026001"

    async def test_receipts_are_sequential(self, db_session: AsyncSession):
        student_id = await _student(db_session)
        service = SppService(db_session)

        receipts = [
            (
                await service.record_payment(
                    SppPaymentCreate(
                        student_id=student_id, amount=350_000, transaction_date=date(2026, m, 10)
                    ),
                    1,
                )
            ).receipt_number
            for m in (1, 2)
        ]
        assert receipts == ["SPP-2026-000001", "SPP-2026-000002"]

    async def test_inactive_student_refused(self, db_session: AsyncSession):
        student_id = await _student(db_session, status=StudentStatus.INACTIVE)

        with pytest.raises(ValidationError):
            await SppService(db_session).record_payment(
                SppPaymentCreate(student_id=student_id, amount=350_000), 1
            )

    async def test_unknown_student(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await SppService(db_session).record_payment(
                SppPaymentCreate(student_id=999, amount=350_000), 1
            )

    async def test_list_only_spp(self, db_session: AsyncSession):
        student_id = await _student(db_session)
        await SppService(db_session).record_payment(
            SppPaymentCreate(student_id=student_id, amount=350_000), 1
        )
        await SavingsService(db_session).deposit(
            SavingsTransactionCreate(student_id=student_id, amount=50_000), 1
        )

        payments = await SppService(db_session).list_payments(student_id=student_id)
        assert len(payments) == 1

    async def test_list_date_range(self, db_session: AsyncSession):
        student_id = await _student(db_session)
        service = SppService(db_session)
        for month in (1, 2, 3):
            await service.record_payment(
                SppPaymentCreate(
                    student_id=student_id, amount=350_000, transaction_date=date(2026, month, 10)
                ),
                1,
            )

        payments = await service.list_payments(
            date_from=date(2026, 2, 1), date_to=date(2026, 3, 31)
        )
        assert [p.transaction_date.month for p in payments] == [3, 2]

    async def test_get_payment_rejects_savings_rows(self, db_session: AsyncSession):
        student_id = await _student(db_session)
        deposit = await SavingsService(db_session).deposit(
            SavingsTransactionCreate(student_id=student_id, amount=50_000), 1
        )
        with pytest.raises(NotFoundError):
            await SppService(db_session).get_payment(deposit.id)


class TestSppEndpoints:
    async def test_record_and_list(self, client: AsyncClient, db_session: AsyncSession, admin):
        _, headers = admin
        student_id = await _student(db_session)

        response = await client.post(
            "/api/v1/spp",
            json={"student_id": student_id, "amount": "350.000", "transaction_date": "2026-01-10"},
            headers=headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert "SPP-2026-000001" in body["message"]
        assert body["data"]["amount_display"] == "Rp 350.000"
        assert body["data"]["student_name"] == "Santri 2026001"

        response = await client.get(
            "/api/v1/spp", params={"search": "SPP-2026"}, headers=headers
        )
        assert response.json()["data"]["total"] == 1

    async def test_zero_amount(self, client: AsyncClient, db_session: AsyncSession, admin):
        _, headers = admin
        student_id = await _student(db_session)
        response = await client.post(
            "/api/v1/spp", json={"student_id": student_id, "amount": 0}, headers=headers
        )
        assert response.status_code == 422

    async def test_santri_sees_own_payments(
        self, client: AsyncClient, db_session: AsyncSession, make_account
    ):
        own = await _student(db_session, "1")
        other = await _student(db_session, "2")
        service = SppService(db_session)
        await service.record_payment(SppPaymentCreate(student_id=own, amount=350_000), 1)
        await service.record_payment(SppPaymentCreate(student_id=other, amount=350_000), 1)

        _, headers = await make_account(UserRole.SANTRI, student_id=own)
        response = await client.get("/api/v1/spp/me", headers=headers)

        assert response.status_code == 200
        assert [p["student_id"] for p in response.json()["data"]] == [own]

        response = await client.get("/api/v1/spp", headers=headers)
        assert response.status_code == 403
