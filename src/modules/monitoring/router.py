"""API endpoints for payment monitoring."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.dependencies import require_module
from src.core.auth.models import Profile
from src.core.database.session import get_db
from src.modules.monitoring.schemas import MAX_YEAR, MIN_YEAR, MonitoringResponse, MonitoringType
from src.modules.monitoring.service import MonitoringService, build_monitoring_csv
from src.shared.schemas.base import ApiResponse

router = APIRouter(prefix="/monitoring", tags=["Monitoring"])


def _current_year() -> int:
    return min(max(date.today().year, MIN_YEAR), MAX_YEAR)


@router.get("", response_model=ApiResponse[MonitoringResponse])
async def get_payment_status(
    year: int | None = Query(None, ge=MIN_YEAR, le=MAX_YEAR),
    payment_type: MonitoringType = Query(MonitoringType.SPP),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("monitoring")),
):
    """Which active students paid in which month of the year."""
    report = await MonitoringService(db).get_status(year or _current_year(), payment_type)
    return ApiResponse(success=True, data=report)


@router.get("/export")
async def export_payment_status(
    year: int | None = Query(None, ge=MIN_YEAR, le=MAX_YEAR),
    payment_type: MonitoringType = Query(MonitoringType.SPP),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("monitoring")),
):
    """Download the payment grid as CSV."""
    year = year or _current_year()
    report = await MonitoringService(db).get_status(year, payment_type)
    filename = f"monitoring_{payment_type.value}_{year}.csv"
    return Response(
        content=build_monitoring_csv(report),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
