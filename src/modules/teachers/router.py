"""API endpoints for Teachers module."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.dependencies import require_module, require_roles
from src.core.auth.models import Profile, UserRole
from src.core.database.session import get_db
from src.core.exceptions import NotFoundError
from src.modules.teachers.models import SalaryPayment, TeacherStatus
from src.modules.teachers.schemas import (
    AssignmentCreate,
    AssignmentResponse,
    SalaryPaymentCreate,
    SalaryPaymentResponse,
    TeacherCreate,
    TeacherResponse,
    TeacherUpdate,
)
from src.modules.teachers.service import TeacherService
from src.shared.schemas.base import ApiResponse, PaginatedResponse
from src.shared.schemas.table import TableQuery, table_query
from src.shared.utils.table import SortConfig

router = APIRouter(prefix="/teachers", tags=["Teachers"])

SORTABLE = ("nip", "full_name", "specialization", "base_salary", "status", "hire_date")
DEFAULT_SORT = SortConfig("full_name")


def _salary_to_response(payment: SalaryPayment) -> SalaryPaymentResponse:
    response = SalaryPaymentResponse.model_validate(payment)
    response.teacher_name = payment.teacher.full_name if payment.teacher else None
    return response


def _own_teacher_id(profile: Profile) -> int:
    if profile.teacher_id is None:
        raise NotFoundError("Teacher record for profile", profile.id)
    return profile.teacher_id


# --- Self-service (guru) ---


@router.get("/me", response_model=ApiResponse[TeacherResponse])
async def get_my_teacher_record(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(UserRole.GURU)),
):
    """Teacher record linked to the current profile."""
    teacher = await TeacherService(db).get_teacher_by_id(_own_teacher_id(profile))
    return ApiResponse(success=True, data=TeacherResponse.model_validate(teacher))


@router.get("/me/salary", response_model=ApiResponse[list[SalaryPaymentResponse]])
async def get_my_salary(
    year: int | None = Query(None, ge=2000, le=2100),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("my-salary")),
):
    """Salary history of the current teacher, newest first."""
    payments = await TeacherService(db).list_salary_payments(
        teacher_id=_own_teacher_id(profile), year=year
    )
    return ApiResponse(success=True, data=[_salary_to_response(p) for p in payments])


@router.get("/me/assignments", response_model=ApiResponse[list[AssignmentResponse]])
async def get_my_assignments(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("my-assignments")),
):
    """Teaching assignments of the current teacher."""
    assignments = await TeacherService(db).list_assignments(_own_teacher_id(profile))
    return ApiResponse(
        success=True, data=[AssignmentResponse.model_validate(a) for a in assignments]
    )


# --- Salary (admin) ---


@router.get("/salary-payments", response_model=ApiResponse[list[SalaryPaymentResponse]])
async def list_salary_payments(
    teacher_id: int | None = Query(None),
    year: int | None = Query(None, ge=2000, le=2100),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("teachers")),
):
    """List salary payments of all teachers."""
    payments = await TeacherService(db).list_salary_payments(teacher_id=teacher_id, year=year)
    return ApiResponse(success=True, data=[_salary_to_response(p) for p in payments])


# --- Teachers ---


@router.post(
    "",
    response_model=ApiResponse[TeacherResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_teacher(
    data: TeacherCreate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("teachers")),
):
    """Create a new teacher."""
    teacher = await TeacherService(db).create_teacher(data, profile.id)
    return ApiResponse(
        success=True,
        message="Teacher created successfully",
        data=TeacherResponse.model_validate(teacher),
    )


@router.get("", response_model=ApiResponse[PaginatedResponse[TeacherResponse]])
async def list_teachers(
    status: TeacherStatus | None = Query(None),
    table: TableQuery = Depends(table_query),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("teachers")),
):
    """List teachers. Search matches name, NIP and specialization."""
    teachers = await TeacherService(db).list_teachers(status=status)
    rows = [t for t in teachers if table.matches(t.full_name, t.nip, t.specialization)]
    return ApiResponse(
        success=True,
        data=table.paginate(rows, TeacherResponse.model_validate, SORTABLE, DEFAULT_SORT),
    )


@router.get("/{teacher_id}", response_model=ApiResponse[TeacherResponse])
async def get_teacher(
    teacher_id: int,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("teachers")),
):
    teacher = await TeacherService(db).get_teacher_by_id(teacher_id)
    return ApiResponse(success=True, data=TeacherResponse.model_validate(teacher))


@router.patch("/{teacher_id}", response_model=ApiResponse[TeacherResponse])
async def update_teacher(
    teacher_id: int,
    data: TeacherUpdate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("teachers")),
):
    teacher = await TeacherService(db).update_teacher(teacher_id, data, profile.id)
    return ApiResponse(
        success=True,
        message="Teacher updated successfully",
        data=TeacherResponse.model_validate(teacher),
    )


@router.delete("/{teacher_id}", response_model=ApiResponse[None])
async def delete_teacher(
    teacher_id: int,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("teachers")),
):
    """Delete a teacher that has no salary history."""
    await TeacherService(db).delete_teacher(teacher_id, profile.id)
    return ApiResponse(success=True, message="Teacher deleted successfully", data=None)


@router.get("/{teacher_id}/assignments", response_model=ApiResponse[list[AssignmentResponse]])
async def list_assignments(
    teacher_id: int,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("teachers")),
):
    service = TeacherService(db)
    await service.get_teacher_by_id(teacher_id)
    assignments = await service.list_assignments(teacher_id)
    return ApiResponse(
        success=True, data=[AssignmentResponse.model_validate(a) for a in assignments]
    )


@router.post(
    "/{teacher_id}/assignments",
    response_model=ApiResponse[AssignmentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_assignment(
    teacher_id: int,
    data: AssignmentCreate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("teachers")),
):
    assignment = await TeacherService(db).add_assignment(teacher_id, data, profile.id)
    return ApiResponse(
        success=True,
        message="Assignment added successfully",
        data=AssignmentResponse.model_validate(assignment),
    )


@router.delete(
    "/{teacher_id}/assignments/{assignment_id}",
    response_model=ApiResponse[None],
)
async def delete_assignment(
    teacher_id: int,
    assignment_id: int,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("teachers")),
):
    await TeacherService(db).delete_assignment(teacher_id, assignment_id, profile.id)
    return ApiResponse(success=True, message="Assignment removed successfully", data=None)


@router.post(
    "/{teacher_id}/salary-payments",
    response_model=ApiResponse[SalaryPaymentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def record_salary(
    teacher_id: int,
    data: SalaryPaymentCreate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("teachers")),
):
    """Record a monthly salary payment for a teacher."""
    payment = await TeacherService(db).record_salary(teacher_id, data, profile.id)
    return ApiResponse(
        success=True,
        message="Salary payment recorded successfully",
        data=_salary_to_response(payment),
    )
