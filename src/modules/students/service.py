"""Service for Students module."""

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.activity import ActivityAction, ActivityService
from src.core.auth.models import Profile
from src.core.exceptions import DuplicateError, NotFoundError, ValidationError
from src.modules.cash.models import CashTransaction
from src.modules.savings.models import SavingsAccount
from src.modules.students.models import Student, StudentStatus
from src.modules.students.schemas import StudentCreate, StudentUpdate
from src.modules.transactions.models import Transaction

MODULE = "students"


class StudentService:
    """Service for managing students."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.activity = ActivityService(db)

    async def _ensure_unique_nim(self, nim: str, exclude_id: int | None = None) -> None:
        query = select(Student.id).where(Student.nim == nim)
        if exclude_id is not None:
            query = query.where(Student.id != exclude_id)
        if (await self.db.execute(query)).scalar_one_or_none() is not None:
            raise DuplicateError("Student", "nim", nim)

    async def create_student(self, data: StudentCreate, created_by_id: int) -> Student:
        """Create a student and open an empty savings account for them."""
        await self._ensure_unique_nim(data.nim)

        student = Student(
            nim=data.nim,
            full_name=data.full_name,
            gender=data.gender.value,
            date_of_birth=data.date_of_birth,
            parent_name=data.parent_name,
            parent_phone=data.parent_phone,
            parent_address=data.parent_address,
            room_assignment=data.room_assignment,
            class_name=data.class_name,
            status=data.status.value,
            enrollment_date=data.enrollment_date,
        )
        self.db.add(student)
        await self.db.flush()

        self.db.add(SavingsAccount(student_id=student.id, current_balance=0))
        await self.db.flush()

        await self.activity.log(
            ActivityAction.CREATE,
            module=MODULE,
            user_id=created_by_id,
            description=f"Added student {student.full_name} ({student.nim})",
            details={"student_id": student.id, "nim": student.nim},
        )

        await self.db.commit()
        await self.db.refresh(student)
        return student

    async def get_student_by_id(self, student_id: int) -> Student:
        """Get student by ID."""
        result = await self.db.execute(select(Student).where(Student.id == student_id))
        student = result.scalar_one_or_none()
        if not student:
            raise NotFoundError("Student", student_id)
        return student

    async def get_active_student(self, student_id: int) -> Student:
        """Get a student that may still make payments."""
        student = await self.get_student_by_id(student_id)
        if not student.is_active:
            raise ValidationError(f"Student {student.full_name} is not active", field="student_id")
        return student

    async def list_students(
        self,
        status: StudentStatus | None = None,
        gender: str | None = None,
    ) -> list[Student]:
        """List students, ordered by name."""
        query = select(Student).order_by(Student.full_name, Student.id)
        if status:
            query = query.where(Student.status == status.value)
        if gender:
            query = query.where(Student.gender == gender)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_active(self) -> int:
        result = await self.db.execute(
            select(func.count(Student.id)).where(Student.status == StudentStatus.ACTIVE.value)
        )
        return result.scalar_one()

    async def update_student(
        self, student_id: int, data: StudentUpdate, updated_by_id: int
    ) -> Student:
        """Update a student."""
        student = await self.get_student_by_id(student_id)

        changes = data.model_dump(exclude_unset=True)
        if "nim" in changes and changes["nim"] != student.nim:
            await self._ensure_unique_nim(changes["nim"], exclude_id=student_id)

        new_values = {}
        for field, value in changes.items():
            if value is None and field in ("nim", "full_name", "gender", "status"):
                continue
            if hasattr(value, "value"):
                value = value.value
            if getattr(student, field) != value:
                setattr(student, field, value)
                new_values[field] = None if value is None else str(value)

        if new_values:
            await self.activity.log(
                ActivityAction.UPDATE,
                module=MODULE,
                user_id=updated_by_id,
                description=f"Updated student {student.full_name}",
                details={"student_id": student_id, "changes": new_values},
            )

        await self.db.commit()
        await self.db.refresh(student)
        return student

    async def delete_student(self, student_id: int, deleted_by_id: int) -> None:
        """
        Delete a student together with their savings account.

        Students with recorded transactions are kept for the financial history.
        """
        student = await self.get_student_by_id(student_id)

        tx_count = (
            await self.db.execute(
                select(func.count(Transaction.id)).where(Transaction.student_id == student_id)
            )
        ).scalar_one()
        tx_count += (
            await self.db.execute(
                select(func.count(CashTransaction.id)).where(
                    CashTransaction.student_id == student_id
                )
            )
        ).scalar_one()
        if tx_count:
            raise ValidationError(
                f"Student {student.full_name} has {tx_count} transaction(s) and cannot be deleted; "
                "set the status to inactive instead"
            )

        account = (
            await self.db.execute(
                select(SavingsAccount).where(SavingsAccount.student_id == student_id)
            )
        ).scalar_one_or_none()
        if account is not None:
            await self.db.delete(account)
            await self.db.flush()

        await self.db.execute(
            update(Profile).where(Profile.student_id == student_id).values(student_id=None)
        )

        await self.db.delete(student)
        await self.activity.log(
            ActivityAction.DELETE,
            module=MODULE,
            user_id=deleted_by_id,
            description=f"Deleted student {student.full_name} ({student.nim})",
            details={"student_id": student_id},
        )
        await self.db.commit()
