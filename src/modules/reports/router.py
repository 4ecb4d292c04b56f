"""API for monthly financial reports (admin only)."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.dependencies import require_module
from src.core.auth.models import Profile
from src.core.database.session import get_db
from src.modules.monitoring.schemas import MONTH_NAMES
from src.modules.reports.excel_export import export_monthly_report
from src.modules.reports.schemas import ExportFormat, MonthlyReportResponse, MonthlyReportSnapshot
from src.modules.reports.service import ReportsService, build_monthly_report_csv
from src.shared.schemas.base import ApiResponse

router = APIRouter(prefix="/reports", tags=["Reports"])

ReportsProfile = Depends(require_module("reports"))

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _period(month: int | None, year: int | None) -> tuple[int, int]:
    today = date.today()
    return month or today.month, year or today.year


@router.get("/monthly", response_model=ApiResponse[MonthlyReportResponse])
async def get_monthly_report(
    month: int | None = Query(None, ge=1, le=12, description="Defaults to the current month."),
    year: int | None = Query(None, ge=2000, le=2100),
    db: AsyncSession = Depends(get_db),
    profile: Profile = ReportsProfile,
):
    """
    Monthly financial report.

    Net balance is SPP revenue plus donations minus expenses.
    """
    month, year = _period(month, year)
    data = await ReportsService(db).monthly_report(month, year)
    return ApiResponse(success=True, data=MonthlyReportResponse(**data))


@router.get("/monthly/export")
async def export_monthly(
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None, ge=2000, le=2100),
    format: ExportFormat = Query(ExportFormat.XLSX, description="xlsx or csv"),
    db: AsyncSession = Depends(get_db),
    profile: Profile = ReportsProfile,
):
    """Download the monthly report as an Excel workbook or CSV file."""
    month, year = _period(month, year)
    service = ReportsService(db)
    data = await service.monthly_report(month, year)
    await service.log_export(data, format.value, profile.id)

    filename = f"Laporan-Keuangan-{MONTH_NAMES[month - 1]}-{year}.{format.value}"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    if format == ExportFormat.CSV:
        return Response(
            content=build_monthly_report_csv(data), media_type="text/csv", headers=headers
        )
    return Response(content=export_monthly_report(data), media_type=XLSX_MEDIA_TYPE, headers=headers)


@router.post("/monthly/snapshot", response_model=ApiResponse[MonthlyReportSnapshot])
async def save_monthly_snapshot(
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None, ge=2000, le=2100),
    db: AsyncSession = Depends(get_db),
    profile: Profile = ReportsProfile,
):
    """Store the month's totals. Saving the same month again overwrites it."""
    month, year = _period(month, year)
    snapshot = await ReportsService(db).save_snapshot(month, year, profile.id)
    return ApiResponse(
        success=True,
        message="Monthly report saved",
        data=MonthlyReportSnapshot.model_validate(snapshot),
    )


@router.get("/snapshots", response_model=ApiResponse[list[MonthlyReportSnapshot]])
async def list_snapshots(
    year: int | None = Query(None, ge=2000, le=2100),
    db: AsyncSession = Depends(get_db),
    profile: Profile = ReportsProfile,
):
    snapshots = await ReportsService(db).list_snapshots(year)
    return ApiResponse(
        success=True, data=[MonthlyReportSnapshot.model_validate(s) for s in snapshots]
    )


@router.get("/snapshots/{year}/{month}", response_model=ApiResponse[MonthlyReportSnapshot])
async def get_snapshot(
    year: int,
    month: int,
    db: AsyncSession = Depends(get_db),
    profile: Profile = ReportsProfile,
):
    snapshot = await ReportsService(db).get_snapshot(month, year)
    return ApiResponse(success=True, data=MonthlyReportSnapshot.model_validate(snapshot))
