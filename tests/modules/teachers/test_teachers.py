from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.models import UserRole
from src.core.exceptions import DuplicateError, NotFoundError, ValidationError
from src.modules.expenses.models import ExpenseCategory
from src.modules.expenses.schemas import ExpenseCreate
from src.modules.expenses.service import ExpenseService
from src.modules.teachers.models import TeacherStatus
from src.modules.teachers.schemas import (
    AssignmentCreate,
    SalaryPaymentCreate,
    TeacherCreate,
    TeacherUpdate,
)
from src.modules.teachers.service import TeacherService, salary_total


def _teacher(nip: str = "198501012010", **kwargs) -> TeacherCreate:
    defaults = {"full_name": "Ustadz Mahmud", "base_salary": 2_500_000, "hourly_rate": 50_000}
    defaults.update(kwargs)
    return TeacherCreate(nip=nip, **defaults)


class TestSalaryTotal:
    def test_base_plus_hours(self):
        assert salary_total(2_500_000, 4, 50_000) == (200_000, 2_700_000)

    def test_no_additional_hours(self):
        assert salary_total(2_000_000, 0, 40_000) == (0, 2_000_000)


class TestTeacherService:
    """Tests for TeacherService."""

    async def test_create_teacher(self, db_session: AsyncSession):
        teacher = await TeacherService(db_session).create_teacher(
            _teacher(phone="0812 3456 7890"), created_by_id=1
        )

        assert teacher.id is not None
        assert teacher.phone == "+6281234567890"
        assert teacher.status == TeacherStatus.ACTIVE.value

    async def test_duplicate_nip(self, db_session: AsyncSession):
        service = TeacherService(db_session)
        await service.create_teacher(_teacher(), 1)
        with pytest.raises(DuplicateError):
            await service.create_teacher(_teacher(full_name="Other"), 1)

    async def test_update_teacher(self, db_session: AsyncSession):
        service = TeacherService(db_session)
        teacher = await service.create_teacher(_teacher(), 1)

        updated = await service.update_teacher(
            teacher.id, TeacherUpdate(hourly_rate=60_000), updated_by_id=1
        )
        assert updated.hourly_rate == 60_000
        assert updated.base_salary == 2_500_000

    async def test_assignments(self, db_session: AsyncSession):
        service = TeacherService(db_session)
        teacher = await service.create_teacher(_teacher(), 1)

        assignment = await service.add_assignment(
            teacher.id,
            AssignmentCreate(
                subject="Tahfidz", class_name="7A", hours_per_week=6, academic_year="2025/2026"
            ),
            1,
        )
        assert [a.id for a in await service.list_assignments(teacher.id)] == [assignment.id]

        await service.delete_assignment(teacher.id, assignment.id, 1)
        assert await service.list_assignments(teacher.id) == []

    async def test_delete_assignment_of_other_teacher(self, db_session: AsyncSession):
        service = TeacherService(db_session)
        first = await service.create_teacher(_teacher("1"), 1)
        second = await service.create_teacher(_teacher("2"), 1)
        assignment = await service.add_assignment(first.id, AssignmentCreate(subject="Fiqih"), 1)

        with pytest.raises(NotFoundError):
            await service.delete_assignment(second.id, assignment.id, 1)

    async def test_record_salary_uses_teacher_rates(self, db_session: AsyncSession):
        service = TeacherService(db_session)
        teacher = await service.create_teacher(_teacher(), 1)

        payment = await service.record_salary(
            teacher.id,
            SalaryPaymentCreate(
                payment_month=1,
                payment_year=2026,
                additional_hours=4,
                payment_date=date(2026, 1, 28),
            ),
            processed_by_id=1,
        )

        assert payment.base_amount == 2_500_000
        assert payment.additional_amount == 200_000
        assert payment.total_amount == 2_700_000
        assert payment.teacher.full_name == "Ustadz Mahmud"

    async def test_record_salary_overrides(self, db_session: AsyncSession):
        service = TeacherService(db_session)
        teacher = await service.create_teacher(_teacher(), 1)

        payment = await service.record_salary(
            teacher.id,
            SalaryPaymentCreate(
                payment_month=2,
                payment_year=2026,
                base_amount=1_000_000,
                additional_hours=2,
                hourly_rate=25_000,
            ),
            processed_by_id=1,
        )
        assert payment.total_amount == 1_050_000

    async def test_one_salary_per_month(self, db_session: AsyncSession):
        service = TeacherService(db_session)
        teacher = await service.create_teacher(_teacher(), 1)
        data = SalaryPaymentCreate(payment_month=3, payment_year=2026)
        await service.record_salary(teacher.id, data, 1)

        with pytest.raises(DuplicateError):
            await service.record_salary(teacher.id, data, 1)

    async def test_inactive_teacher_not_paid(self, db_session: AsyncSession):
        service = TeacherService(db_session)
        teacher = await service.create_teacher(_teacher(status=TeacherStatus.INACTIVE), 1)

        with pytest.raises(ValidationError):
            await service.record_salary(
                teacher.id, SalaryPaymentCreate(payment_month=1, payment_year=2026), 1
            )

    async def test_list_salary_payments_newest_first(self, db_session: AsyncSession):
        service = TeacherService(db_session)
        teacher = await service.create_teacher(_teacher(), 1)
        for month in (1, 3, 2):
            await service.record_salary(
                teacher.id, SalaryPaymentCreate(payment_month=month, payment_year=2026), 1
            )
        await service.record_salary(
            teacher.id, SalaryPaymentCreate(payment_month=12, payment_year=2025), 1
        )

        payments = await service.list_salary_payments(teacher_id=teacher.id, year=2026)
        assert [p.payment_month for p in payments] == [3, 2, 1]

    async def test_delete_teacher(self, db_session: AsyncSession):
        service = TeacherService(db_session)
        teacher = await service.create_teacher(_teacher(), 1)
        await service.add_assignment(teacher.id, AssignmentCreate(subject="Fiqih"), 1)

        await service.delete_teacher(teacher.id, 1)

        with pytest.raises(NotFoundError):
            await service.get_teacher_by_id(teacher.id)
        assert await service.list_assignments(teacher.id) == []

    async def test_delete_teacher_with_salary_refused(self, db_session: AsyncSession):
        service = TeacherService(db_session)
        teacher = await service.create_teacher(_teacher(), 1)
        await service.record_salary(
            teacher.id, SalaryPaymentCreate(payment_month=1, payment_year=2026), 1
        )

        with pytest.raises(ValidationError):
            await service.delete_teacher(teacher.id, 1)

    async def test_delete_teacher_with_salary_expense_refused(self, db_session: AsyncSession):
        service = TeacherService(db_session)
        teacher = await service.create_teacher(_teacher(), 1)
        await ExpenseService(db_session).create_expense(
            ExpenseCreate(
                expense_category=ExpenseCategory.GAJI_GURU,
                amount=2_500_000,
                description="Gaji Januari",
                teacher_id=teacher.id,
            ),
            1,
        )

        with pytest.raises(ValidationError):
            await service.delete_teacher(teacher.id, 1)


class TestTeacherEndpoints:
    """Tests for teachers API endpoints."""

    async def _create(self, client: AsyncClient, headers: dict) -> int:
        response = await client.post(
            "/api/v1/teachers",
            json={
                "nip": "198501012010",
                "full_name": "Ustadz Mahmud",
                "base_salary": 2500000,
                "hourly_rate": 50000,
            },
            headers=headers,
        )
        assert response.status_code == 201
        return response.json()["data"]["id"]

    async def test_crud(self, client: AsyncClient, admin):
        _, headers = admin
        teacher_id = await self._create(client, headers)

        response = await client.get("/api/v1/teachers", params={"search": "mahmud"}, headers=headers)
        assert response.json()["data"]["total"] == 1

        response = await client.patch(
            f"/api/v1/teachers/{teacher_id}", json={"specialization": "Tahfidz"}, headers=headers
        )
        assert response.json()["data"]["specialization"] == "Tahfidz"

        response = await client.delete(f"/api/v1/teachers/{teacher_id}", headers=headers)
        assert response.status_code == 200

    async def test_salary_endpoint(self, client: AsyncClient, admin):
        _, headers = admin
        teacher_id = await self._create(client, headers)

        response = await client.post(
            f"/api/v1/teachers/{teacher_id}/salary-payments",
            json={"payment_month": 1, "payment_year": 2026, "additional_hours": 4},
            headers=headers,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["total_amount"] == 2700000
        assert data["total_display"] == "Rp 2.700.000"
        assert data["teacher_name"] == "Ustadz Mahmud"

        response = await client.get("/api/v1/teachers/salary-payments", headers=headers)
        assert len(response.json()["data"]) == 1

    async def test_invalid_month(self, client: AsyncClient, admin):
        _, headers = admin
        teacher_id = await self._create(client, headers)
        response = await client.post(
            f"/api/v1/teachers/{teacher_id}/salary-payments",
            json={"payment_month": 13, "payment_year": 2026},
            headers=headers,
        )
        assert response.status_code == 422

    async def test_guru_self_service(self, client: AsyncClient, admin, make_account):
        _, admin_headers = admin
        teacher_id = await self._create(client, admin_headers)
        await client.post(
            f"/api/v1/teachers/{teacher_id}/assignments",
            json={"subject": "Tahfidz", "class_name": "7A", "hours_per_week": 6},
            headers=admin_headers,
        )
        await client.post(
            f"/api/v1/teachers/{teacher_id}/salary-payments",
            json={"payment_month": 1, "payment_year": 2026},
            headers=admin_headers,
        )
        _, headers = await make_account(UserRole.GURU, teacher_id=teacher_id)

        me = await client.get("/api/v1/teachers/me", headers=headers)
        assert me.json()["data"]["id"] == teacher_id

        salary = await client.get("/api/v1/teachers/me/salary", headers=headers)
        assert [p["payment_month"] for p in salary.json()["data"]] == [1]

        assignments = await client.get("/api/v1/teachers/me/assignments", headers=headers)
        assert assignments.json()["data"][0]["subject"] == "Tahfidz"

        # Admin pages stay closed
        response = await client.get("/api/v1/teachers", headers=headers)
        assert response.status_code == 403

    async def test_guru_without_record(self, client: AsyncClient, make_account):
        _, headers = await make_account(UserRole.GURU)
        response = await client.get("/api/v1/teachers/me/salary", headers=headers)
        assert response.status_code == 404

    async def test_santri_cannot_see_salary(self, client: AsyncClient, make_account):
        _, headers = await make_account(UserRole.SANTRI)
        response = await client.get("/api/v1/teachers/me/salary", headers=headers)
        assert response.status_code == 403
