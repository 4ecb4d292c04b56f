from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.activity import ActivityService
from src.core.auth.dependencies import require_module
from src.core.auth.models import Profile, ProfileStatus, UserRole
from src.core.database.session import get_db
from src.modules.users.schemas import (
    ActivityResponse,
    RoleChange,
    RoleCounts,
    UserCreate,
    UserListFilters,
    UserResponse,
)
from src.modules.users.service import UserService
from src.shared.schemas.base import ApiResponse, PaginatedResponse
from src.shared.schemas.table import TableQuery, table_query
from src.shared.utils.table import SortConfig, SortDirection

router = APIRouter(prefix="/users", tags=["Users"])

RolesAdmin = Depends(require_module("roles"))

SORTABLE = ("email", "full_name", "role", "status", "created_at")
DEFAULT_SORT = SortConfig("created_at", SortDirection.DESC)

ACTIVITY_SORTABLE = ("created_at", "action_type", "module")
ACTIVITY_DEFAULT_SORT = SortConfig("created_at", SortDirection.DESC)


@router.get("", response_model=ApiResponse[PaginatedResponse[UserResponse]])
async def list_users(
    role: UserRole | None = Query(None),
    status: ProfileStatus | None = Query(None),
    table: TableQuery = Depends(table_query),
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = RolesAdmin,
):
    """
    List all accounts with their roles.

    Search matches e-mail and full name.
    """
    profiles = await UserService(db).list_users(UserListFilters(role=role, status=status))
    rows = [p for p in profiles if table.matches(p.email, p.full_name)]
    return ApiResponse(
        success=True,
        data=table.paginate(rows, UserResponse.model_validate, SORTABLE, DEFAULT_SORT),
    )


@router.get("/role-counts", response_model=ApiResponse[RoleCounts])
async def get_role_counts(
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = RolesAdmin,
):
    """Number of accounts per role."""
    return ApiResponse(success=True, data=await UserService(db).role_counts())


@router.get("/activities", response_model=ApiResponse[PaginatedResponse[ActivityResponse]])
async def list_activities(
    user_id: int | None = Query(None),
    module: str | None = Query(None),
    action_type: str | None = Query(None),
    date_from: datetime | None = Query(None),
    date_to: datetime | None = Query(None),
    table: TableQuery = Depends(table_query),
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = RolesAdmin,
):
    """Activity log, newest first. Search matches the description."""
    activities = await ActivityService(db).list_activities(
        user_id=user_id,
        module=module,
        action_type=action_type,
        date_from=date_from,
        date_to=date_to,
    )
    rows = [a for a in activities if table.matches(a.description)]
    return ApiResponse(
        success=True,
        data=table.paginate(
            rows, ActivityResponse.model_validate, ACTIVITY_SORTABLE, ACTIVITY_DEFAULT_SORT
        ),
    )


@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = RolesAdmin,
):
    """Get an account by ID."""
    profile = await UserService(db).get_by_id(user_id)
    return ApiResponse(
        success=True, data=UserResponse.model_validate(profile), message="User retrieved"
    )


@router.post("", response_model=ApiResponse[UserResponse], status_code=201)
async def create_user(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = RolesAdmin,
):
    """
    Create an account with any role.

    Self sign-up always gives santri; admins use this to add staff and
    committee members directly.
    """
    profile = await UserService(db).create(data, created_by_id=current_profile.id)
    return ApiResponse(
        success=True,
        data=UserResponse.model_validate(profile),
        message="User created successfully",
    )


@router.patch("/{user_id}/role", response_model=ApiResponse[UserResponse])
async def change_role(
    user_id: int,
    data: RoleChange,
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = RolesAdmin,
):
    """Change the role of an account and link it to a student or teacher."""
    profile = await UserService(db).change_role(user_id, data, changed_by_id=current_profile.id)
    return ApiResponse(
        success=True,
        data=UserResponse.model_validate(profile),
        message="Role updated successfully",
    )


@router.post("/{user_id}/deactivate", response_model=ApiResponse[UserResponse])
async def deactivate_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = RolesAdmin,
):
    profile = await UserService(db).set_status(
        user_id, ProfileStatus.INACTIVE, changed_by_id=current_profile.id
    )
    return ApiResponse(
        success=True, data=UserResponse.model_validate(profile), message="User deactivated"
    )


@router.post("/{user_id}/activate", response_model=ApiResponse[UserResponse])
async def activate_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = RolesAdmin,
):
    profile = await UserService(db).set_status(
        user_id, ProfileStatus.ACTIVE, changed_by_id=current_profile.id
    )
    return ApiResponse(
        success=True, data=UserResponse.model_validate(profile), message="User activated"
    )


@router.delete("/{user_id}", response_model=ApiResponse[None])
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = RolesAdmin,
):
    """Delete an account. Deleting the account you are signed in with is refused."""
    await UserService(db).delete(user_id, deleted_by_id=current_profile.id)
    return ApiResponse(success=True, data=None, message="User deleted")
