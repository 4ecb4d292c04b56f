"""API endpoints for Students module."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.dependencies import require_module
from src.core.auth.models import Profile
from src.core.database.session import get_db
from src.modules.students.models import Gender, StudentStatus
from src.modules.students.schemas import StudentCreate, StudentResponse, StudentUpdate
from src.modules.students.service import StudentService
from src.shared.schemas.base import ApiResponse, PaginatedResponse
from src.shared.schemas.table import TableQuery, table_query
from src.shared.utils.table import SortConfig

router = APIRouter(prefix="/students", tags=["Students"])

SORTABLE = ("nim", "full_name", "class_name", "room_assignment", "status", "enrollment_date")
DEFAULT_SORT = SortConfig("full_name")


@router.post(
    "",
    response_model=ApiResponse[StudentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_student(
    data: StudentCreate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("students")),
):
    """Create a new student. A savings account is opened automatically."""
    service = StudentService(db)
    student = await service.create_student(data, profile.id)
    return ApiResponse(
        success=True,
        message="Student created successfully",
        data=StudentResponse.model_validate(student),
    )


@router.get(
    "",
    response_model=ApiResponse[PaginatedResponse[StudentResponse]],
)
async def list_students(
    status: StudentStatus | None = Query(None, description="Filter by status"),
    gender: Gender | None = Query(None, description="Filter by gender (L/P)"),
    table: TableQuery = Depends(table_query),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("students")),
):
    """List students. Search matches name, NIM and class."""
    service = StudentService(db)
    students = await service.list_students(
        status=status, gender=gender.value if gender else None
    )
    rows = [s for s in students if table.matches(s.full_name, s.nim, s.class_name)]
    return ApiResponse(
        success=True,
        data=table.paginate(rows, StudentResponse.model_validate, SORTABLE, DEFAULT_SORT),
    )


@router.get(
    "/{student_id}",
    response_model=ApiResponse[StudentResponse],
)
async def get_student(
    student_id: int,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("students")),
):
    """Get student by ID."""
    student = await StudentService(db).get_student_by_id(student_id)
    return ApiResponse(success=True, data=StudentResponse.model_validate(student))


@router.patch(
    "/{student_id}",
    response_model=ApiResponse[StudentResponse],
)
async def update_student(
    student_id: int,
    data: StudentUpdate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("students")),
):
    """Update a student."""
    student = await StudentService(db).update_student(student_id, data, profile.id)
    return ApiResponse(
        success=True,
        message="Student updated successfully",
        data=StudentResponse.model_validate(student),
    )


@router.delete(
    "/{student_id}",
    response_model=ApiResponse[None],
)
async def delete_student(
    student_id: int,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("students")),
):
    """Delete a student that has no transactions."""
    await StudentService(db).delete_student(student_id, profile.id)
    return ApiResponse(success=True, message="Student deleted successfully", data=None)
