"""API for dashboard summary (main page of every role)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.dependencies import get_optional_session, require_module
from src.core.auth.models import Profile
from src.core.auth.views import AuthSession, select_view
from src.core.database.session import get_db
from src.modules.dashboard.schemas import DashboardResponse
from src.modules.dashboard.service import DashboardService
from src.shared.schemas.base import ApiResponse

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get(
    "",
    response_model=ApiResponse[DashboardResponse],
)
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    session: AuthSession | None = Depends(get_optional_session),
    profile: Profile = Depends(require_module("dashboard")),
):
    """
    Get the dashboard of the signed-in user.

    Admins get finance cards, students their savings and SPP, teachers their
    assignments and salary, committee members cash and savings totals.
    """
    view = select_view(session, profile)
    data = await DashboardService(db).get_summary(view)
    return ApiResponse(success=True, data=DashboardResponse(**data))
