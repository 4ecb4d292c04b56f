from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.activity import ActivityAction, ActivityService
from src.core.auth.models import Profile, ProfileStatus, User, UserRole
from src.core.auth.service import AuthService
from src.core.exceptions import AuthorizationError, NotFoundError
from src.modules.students.service import StudentService
from src.modules.teachers.service import TeacherService
from src.modules.users.schemas import RoleChange, RoleCounts, UserCreate, UserListFilters

MODULE = "roles"


class UserService:
    """Service for managing accounts, roles and their student/teacher links."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.activity = ActivityService(db)

    async def get_by_id(self, profile_id: int) -> Profile:
        """Get profile by ID."""
        result = await self.db.execute(select(Profile).where(Profile.id == profile_id))
        profile = result.scalar_one_or_none()
        if not profile:
            raise NotFoundError("User", profile_id)
        return profile

    async def list_users(self, filters: UserListFilters) -> list[Profile]:
        """Profiles matching the filters, newest first."""
        query = select(Profile).order_by(Profile.created_at.desc(), Profile.id.desc())
        if filters.role:
            query = query.where(Profile.role == filters.role.value)
        if filters.status:
            query = query.where(Profile.status == filters.status.value)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def role_counts(self) -> RoleCounts:
        rows = (
            await self.db.execute(select(Profile.role, func.count(Profile.id)).group_by(Profile.role))
        ).all()
        by_role = {r.value: 0 for r in UserRole}
        for role, count in rows:
            by_role[role] = count
        return RoleCounts(total=sum(by_role.values()), by_role=by_role)

    async def _resolve_links(
        self, role: UserRole, student_id: int | None, teacher_id: int | None
    ) -> tuple[int | None, int | None]:
        if role == UserRole.SANTRI:
            if student_id is not None:
                await StudentService(self.db).get_student_by_id(student_id)
            return student_id, None
        if role == UserRole.GURU:
            if teacher_id is not None:
                await TeacherService(self.db).get_teacher_by_id(teacher_id)
            return None, teacher_id
        return None, None

    async def create(self, data: UserCreate, created_by_id: int) -> Profile:
        """Create an account with any role."""
        student_id, teacher_id = await self._resolve_links(
            data.role, data.student_id, data.teacher_id
        )
        profile = await AuthService(self.db).create_account(
            email=data.email,
            password=data.password,
            role=data.role,
            full_name=data.full_name,
            student_id=student_id,
            teacher_id=teacher_id,
            created_by_id=created_by_id,
        )
        await self.db.commit()
        return profile

    async def change_role(self, profile_id: int, data: RoleChange, changed_by_id: int) -> Profile:
        """Set the role of a profile and its student/teacher link."""
        profile = await self.get_by_id(profile_id)
        student_id, teacher_id = await self._resolve_links(
            data.role, data.student_id, data.teacher_id
        )

        old_role = profile.role
        profile.role = data.role.value
        profile.student_id = student_id
        profile.teacher_id = teacher_id

        await self.activity.log(
            ActivityAction.CHANGE_ROLE,
            module=MODULE,
            user_id=changed_by_id,
            description=f"Role of {profile.email} changed from {old_role} to {data.role.value}",
            details={
                "profile_id": profile_id,
                "old_role": old_role,
                "new_role": data.role.value,
                "student_id": student_id,
                "teacher_id": teacher_id,
            },
        )

        await self.db.commit()
        await self.db.refresh(profile)
        return profile

    async def set_status(
        self, profile_id: int, status: ProfileStatus, changed_by_id: int
    ) -> Profile:
        """Activate or deactivate an account. Inactive accounts cannot sign in."""
        if profile_id == changed_by_id and status == ProfileStatus.INACTIVE:
            raise AuthorizationError("Cannot deactivate your own account")

        profile = await self.get_by_id(profile_id)
        user = (await self.db.execute(select(User).where(User.id == profile_id))).scalar_one()

        profile.status = status.value
        user.is_active = status == ProfileStatus.ACTIVE

        await self.activity.log(
            ActivityAction.UPDATE,
            module=MODULE,
            user_id=changed_by_id,
            description=f"{profile.email} set to {status.value}",
            details={"profile_id": profile_id, "status": status.value},
        )

        await self.db.commit()
        await self.db.refresh(profile)
        return profile

    async def delete(self, profile_id: int, deleted_by_id: int) -> None:
        """Delete an account and its profile. The signed-in account cannot delete itself."""
        if profile_id == deleted_by_id:
            raise AuthorizationError("Cannot delete your own account")

        profile = await self.get_by_id(profile_id)
        user = (await self.db.execute(select(User).where(User.id == profile_id))).scalar_one()
        email = profile.email

        await self.db.delete(profile)
        await self.db.flush()
        await self.db.delete(user)

        await self.activity.log(
            ActivityAction.DELETE,
            module=MODULE,
            user_id=deleted_by_id,
            description=f"Deleted user {email}",
            details={"profile_id": profile_id},
        )
        await self.db.commit()
