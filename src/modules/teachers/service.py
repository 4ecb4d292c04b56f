"""Service for Teachers module."""

from datetime import date

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.activity import ActivityAction, ActivityService
from src.core.auth.models import Profile
from src.core.exceptions import DuplicateError, NotFoundError, ValidationError
from src.modules.expenses.models import Expense
from src.modules.teachers.models import SalaryPayment, Teacher, TeacherAssignment, TeacherStatus
from src.modules.teachers.schemas import (
    AssignmentCreate,
    SalaryPaymentCreate,
    TeacherCreate,
    TeacherUpdate,
)

MODULE = "teachers"


def salary_total(base_amount: int, additional_hours: int, hourly_rate: int) -> tuple[int, int]:
    """Return (additional_amount, total_amount) for a salary payment."""
    additional_amount = additional_hours * hourly_rate
    return additional_amount, base_amount + additional_amount


class TeacherService:
    """Service for managing teachers, their assignments and salaries."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.activity = ActivityService(db)

    async def _ensure_unique_nip(self, nip: str, exclude_id: int | None = None) -> None:
        query = select(Teacher.id).where(Teacher.nip == nip)
        if exclude_id is not None:
            query = query.where(Teacher.id != exclude_id)
        if (await self.db.execute(query)).scalar_one_or_none() is not None:
            raise DuplicateError("Teacher", "nip", nip)

    async def create_teacher(self, data: TeacherCreate, created_by_id: int) -> Teacher:
        """Create a new teacher."""
        await self._ensure_unique_nip(data.nip)

        values = data.model_dump()
        values["gender"] = data.gender.value if data.gender else None
        values["status"] = data.status.value
        teacher = Teacher(**values)
        self.db.add(teacher)
        await self.db.flush()

        await self.activity.log(
            ActivityAction.CREATE,
            module=MODULE,
            user_id=created_by_id,
            description=f"Added teacher {teacher.full_name} ({teacher.nip})",
            details={"teacher_id": teacher.id},
        )

        await self.db.commit()
        await self.db.refresh(teacher)
        return teacher

    async def get_teacher_by_id(self, teacher_id: int) -> Teacher:
        """Get teacher by ID."""
        result = await self.db.execute(select(Teacher).where(Teacher.id == teacher_id))
        teacher = result.scalar_one_or_none()
        if not teacher:
            raise NotFoundError("Teacher", teacher_id)
        return teacher

    async def list_teachers(self, status: TeacherStatus | None = None) -> list[Teacher]:
        query = select(Teacher).order_by(Teacher.full_name, Teacher.id)
        if status:
            query = query.where(Teacher.status == status.value)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update_teacher(
        self, teacher_id: int, data: TeacherUpdate, updated_by_id: int
    ) -> Teacher:
        """Update a teacher."""
        teacher = await self.get_teacher_by_id(teacher_id)

        changes = data.model_dump(exclude_unset=True)
        if changes.get("nip") and changes["nip"] != teacher.nip:
            await self._ensure_unique_nip(changes["nip"], exclude_id=teacher_id)

        new_values = {}
        for field, value in changes.items():
            if value is None and field in ("nip", "full_name", "base_salary", "hourly_rate", "status"):
                continue
            if hasattr(value, "value"):
                value = value.value
            if getattr(teacher, field) != value:
                setattr(teacher, field, value)
                new_values[field] = None if value is None else str(value)

        if new_values:
            await self.activity.log(
                ActivityAction.UPDATE,
                module=MODULE,
                user_id=updated_by_id,
                description=f"Updated teacher {teacher.full_name}",
                details={"teacher_id": teacher_id, "changes": new_values},
            )

        await self.db.commit()
        await self.db.refresh(teacher)
        return teacher

    async def delete_teacher(self, teacher_id: int, deleted_by_id: int) -> None:
        """Delete a teacher without salary history (payments or Gaji Guru expenses)."""
        teacher = await self.get_teacher_by_id(teacher_id)

        paid = (
            await self.db.execute(
                select(func.count(SalaryPayment.id)).where(SalaryPayment.teacher_id == teacher_id)
            )
        ).scalar_one()
        paid += (
            await self.db.execute(
                select(func.count(Expense.id)).where(Expense.teacher_id == teacher_id)
            )
        ).scalar_one()
        if paid:
            raise ValidationError(
                f"Teacher {teacher.full_name} has salary records and cannot be deleted; "
                "set the status to inactive instead"
            )

        await self.db.execute(
            delete(TeacherAssignment).where(TeacherAssignment.teacher_id == teacher_id)
        )
        await self.db.execute(
            update(Profile).where(Profile.teacher_id == teacher_id).values(teacher_id=None)
        )
        await self.db.delete(teacher)
        await self.activity.log(
            ActivityAction.DELETE,
            module=MODULE,
            user_id=deleted_by_id,
            description=f"Deleted teacher {teacher.full_name} ({teacher.nip})",
            details={"teacher_id": teacher_id},
        )
        await self.db.commit()

    # --- Assignments ---

    async def add_assignment(
        self, teacher_id: int, data: AssignmentCreate, created_by_id: int
    ) -> TeacherAssignment:
        teacher = await self.get_teacher_by_id(teacher_id)
        assignment = TeacherAssignment(teacher_id=teacher.id, **data.model_dump())
        self.db.add(assignment)
        await self.db.flush()

        await self.activity.log(
            ActivityAction.CREATE,
            module=MODULE,
            user_id=created_by_id,
            description=f"Assigned {data.subject} to {teacher.full_name}",
            details={"teacher_id": teacher_id, "assignment_id": assignment.id},
        )

        await self.db.commit()
        await self.db.refresh(assignment)
        return assignment

    async def list_assignments(self, teacher_id: int) -> list[TeacherAssignment]:
        result = await self.db.execute(
            select(TeacherAssignment)
            .where(TeacherAssignment.teacher_id == teacher_id)
            .order_by(TeacherAssignment.academic_year.desc(), TeacherAssignment.subject)
        )
        return list(result.scalars().all())

    async def delete_assignment(self, teacher_id: int, assignment_id: int, deleted_by_id: int) -> None:
        result = await self.db.execute(
            select(TeacherAssignment).where(
                TeacherAssignment.id == assignment_id,
                TeacherAssignment.teacher_id == teacher_id,
            )
        )
        assignment = result.scalar_one_or_none()
        if not assignment:
            raise NotFoundError("Assignment", assignment_id)

        await self.db.delete(assignment)
        await self.activity.log(
            ActivityAction.DELETE,
            module=MODULE,
            user_id=deleted_by_id,
            description=f"Removed assignment {assignment.subject}",
            details={"teacher_id": teacher_id, "assignment_id": assignment_id},
        )
        await self.db.commit()

    # --- Salary ---

    async def record_salary(
        self, teacher_id: int, data: SalaryPaymentCreate, processed_by_id: int
    ) -> SalaryPayment:
        """
        Record a monthly salary payment.

        total_amount = base_amount + additional_hours * hourly_rate.
        One payment per teacher per month.
        """
        teacher = await self.get_teacher_by_id(teacher_id)
        if not teacher.is_active:
            raise ValidationError(f"Teacher {teacher.full_name} is not active", field="teacher_id")

        existing = await self.db.execute(
            select(SalaryPayment.id).where(
                SalaryPayment.teacher_id == teacher_id,
                SalaryPayment.payment_month == data.payment_month,
                SalaryPayment.payment_year == data.payment_year,
            )
        )
        if existing.scalar_one_or_none() is not None:
            raise DuplicateError(
                "SalaryPayment", "payment_month", f"{data.payment_month}/{data.payment_year}"
            )

        base_amount = teacher.base_salary if data.base_amount is None else data.base_amount
        hourly_rate = teacher.hourly_rate if data.hourly_rate is None else data.hourly_rate
        additional_amount, total_amount = salary_total(
            base_amount, data.additional_hours, hourly_rate
        )

        payment = SalaryPayment(
            teacher_id=teacher_id,
            payment_month=data.payment_month,
            payment_year=data.payment_year,
            base_amount=base_amount,
            additional_hours=data.additional_hours,
            additional_amount=additional_amount,
            total_amount=total_amount,
            payment_date=data.payment_date or date.today(),
            payment_status=data.payment_status.value,
            notes=data.notes,
            processed_by=processed_by_id,
        )
        self.db.add(payment)
        await self.db.flush()

        await self.activity.log(
            ActivityAction.RECORD_SALARY,
            module=MODULE,
            user_id=processed_by_id,
            description=(
                f"Salary {data.payment_month:02d}/{data.payment_year} for {teacher.full_name}"
            ),
            details={"teacher_id": teacher_id, "total_amount": total_amount},
        )

        await self.db.commit()
        return await self.get_salary_payment(payment.id)

    async def get_salary_payment(self, payment_id: int) -> SalaryPayment:
        result = await self.db.execute(
            select(SalaryPayment)
            .where(SalaryPayment.id == payment_id)
            .options(selectinload(SalaryPayment.teacher))
            .execution_options(populate_existing=True)
        )
        payment = result.scalar_one_or_none()
        if not payment:
            raise NotFoundError("SalaryPayment", payment_id)
        return payment

    async def list_salary_payments(
        self, teacher_id: int | None = None, year: int | None = None
    ) -> list[SalaryPayment]:
        query = (
            select(SalaryPayment)
            .options(selectinload(SalaryPayment.teacher))
            .order_by(SalaryPayment.payment_year.desc(), SalaryPayment.payment_month.desc())
        )
        if teacher_id is not None:
            query = query.where(SalaryPayment.teacher_id == teacher_id)
        if year is not None:
            query = query.where(SalaryPayment.payment_year == year)
        result = await self.db.execute(query)
        return list(result.scalars().all())
