from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.models import UserRole
from src.core.exceptions import InsufficientBalanceError, ValidationError
from src.modules.savings.schemas import SavingsGoalUpdate, SavingsTransactionCreate
from src.modules.savings.service import SavingsService
from src.modules.students.models import Gender, StudentStatus
from src.modules.students.schemas import StudentCreate
from src.modules.students.service import StudentService
from src.modules.transactions.models import TransactionType


async def _student(db_session: AsyncSession, nim: str = "2026001", **kwargs) -> int:
    student = await StudentService(db_session).create_student(
        StudentCreate(nim=nim, full_name=f"Santri {nim}", gender=Gender.FEMALE, **kwargs), 1
    )
    return student.id


class TestSavingsService:
    """Tests for SavingsService."""

    async def test_deposit_increases_balance(self, db_session: AsyncSession):
        student_id = await _student(db_session)
        service = SavingsService(db_session)

        transaction = await service.deposit(
            SavingsTransactionCreate(
                student_id=student_id, amount=100_000, transaction_date=date(2026, 2, 1)
            ),
            processed_by_id=1,
        )

        assert transaction.transaction_type == TransactionType.SAVINGS_DEPOSIT.value
        assert transaction.receipt_number == "TAB-2026-000001"
        account = await service.get_account_by_student(student_id)
        assert account.current_balance == 100_000
        assert transaction.savings_account_id == account.id

    async def test_withdraw_decreases_balance(self, db_session: AsyncSession):
        student_id = await _student(db_session)
        service = SavingsService(db_session)
        await service.deposit(SavingsTransactionCreate(student_id=student_id, amount=100_000), 1)

        await service.withdraw(SavingsTransactionCreate(student_id=student_id, amount=40_000), 1)

        account = await service.get_account_by_student(student_id)
        assert account.current_balance == 60_000

    async def test_withdraw_whole_balance(self, db_session: AsyncSession):
        student_id = await _student(db_session)
        service = SavingsService(db_session)
        await service.deposit(SavingsTransactionCreate(student_id=student_id, amount=50_000), 1)

        await service.withdraw(SavingsTransactionCreate(student_id=student_id, amount=50_000), 1)

        assert (await service.get_account_by_student(student_id)).current_balance == 0

    async def test_withdraw_more_than_balance(self, db_session: AsyncSession):
        student_id = await _student(db_session)
        service = SavingsService(db_session)
        await service.deposit(SavingsTransactionCreate(student_id=student_id, amount=50_000), 1)

        with pytest.raises(InsufficientBalanceError) as exc_info:
            await service.withdraw(
                SavingsTransactionCreate(student_id=student_id, amount=50_001), 1
            )

        assert exc_info.value.details["available"] == 50_000
        await db_session.rollback()
        assert (await service.get_account_by_student(student_id)).current_balance == 50_000
        assert len(await service.list_transactions(student_id=student_id)) == 1

    async def test_inactive_student(self, db_session: AsyncSession):
        student_id = await _student(db_session, status=StudentStatus.GRADUATED)
        with pytest.raises(ValidationError):
            await SavingsService(db_session).deposit(
                SavingsTransactionCreate(student_id=student_id, amount=1000), 1
            )

    async def test_summary(self, db_session: AsyncSession):
        first = await _student(db_session, "1")
        second = await _student(db_session, "2")
        service = SavingsService(db_session)
        await service.deposit(SavingsTransactionCreate(student_id=first, amount=100_000), 1)
        await service.deposit(SavingsTransactionCreate(student_id=second, amount=30_000), 1)
        await service.withdraw(SavingsTransactionCreate(student_id=first, amount=20_000), 1)

        summary = await service.get_summary()

        assert summary.account_count == 2
        assert summary.total_balance == 110_000
        assert summary.total_deposits == 130_000
        assert summary.total_withdrawals == 20_000
        assert summary.total_balance_display == "Rp 110.000"

    async def test_list_transactions_by_type(self, db_session: AsyncSession):
        student_id = await _student(db_session)
        service = SavingsService(db_session)
        await service.deposit(SavingsTransactionCreate(student_id=student_id, amount=100_000), 1)
        await service.withdraw(SavingsTransactionCreate(student_id=student_id, amount=1_000), 1)

        withdrawals = await service.list_transactions(
            transaction_type=TransactionType.SAVINGS_WITHDRAWAL
        )
        assert [t.amount for t in withdrawals] == [1_000]

    async def test_update_goal(self, db_session: AsyncSession):
        student_id = await _student(db_session)
        account = await SavingsService(db_session).update_goal(
            student_id,
            SavingsGoalUpdate(savings_goal=1_000_000, goal_description="Umroh"),
            updated_by_id=1,
        )
        assert account.savings_goal == 1_000_000
        assert account.student.nim == "2026001"


class TestSavingsEndpoints:
    async def test_deposit_withdraw_flow(
        self, client: AsyncClient, db_session: AsyncSession, admin
    ):
        _, headers = admin
        student_id = await _student(db_session)

        response = await client.post(
            "/api/v1/savings/deposit",
            json={"student_id": student_id, "amount": "150.000"},
            headers=headers,
        )
        assert response.status_code == 201

        response = await client.post(
            "/api/v1/savings/withdraw",
            json={"student_id": student_id, "amount": 200000},
            headers=headers,
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "amount"

        response = await client.get("/api/v1/savings/accounts", headers=headers)
        account = response.json()["data"]["items"][0]
        assert account["current_balance"] == 150_000
        assert account["balance_display"] == "Rp 150.000"
        assert account["student_name"] == "Santri 2026001"

    async def test_committee_can_record_savings(
        self, client: AsyncClient, db_session: AsyncSession, make_account
    ):
        student_id = await _student(db_session)
        _, headers = await make_account(UserRole.KOMITE)

        response = await client.post(
            "/api/v1/savings/deposit",
            json={"student_id": student_id, "amount": 10000},
            headers=headers,
        )
        assert response.status_code == 201

        response = await client.get("/api/v1/savings/summary", headers=headers)
        assert response.json()["data"]["total_balance"] == 10000

    async def test_my_savings(self, client: AsyncClient, db_session: AsyncSession, make_account):
        student_id = await _student(db_session)
        await SavingsService(db_session).deposit(
            SavingsTransactionCreate(student_id=student_id, amount=75_000), 1
        )
        _, headers = await make_account(UserRole.SANTRI, student_id=student_id)

        response = await client.get("/api/v1/savings/me", headers=headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["account"]["current_balance"] == 75_000
        assert len(data["transactions"]) == 1

    async def test_my_savings_without_student(self, client: AsyncClient, make_account):
        _, headers = await make_account(UserRole.SANTRI)
        response = await client.get("/api/v1/savings/me", headers=headers)
        assert response.status_code == 404
