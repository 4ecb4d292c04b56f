"""API endpoints for ZISWAF donations."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.dependencies import require_module
from src.core.auth.models import Profile
from src.core.database.session import get_db
from src.modules.donations.models import DonationType
from src.modules.donations.schemas import DonationCreate, DonationResponse, DonationTotals
from src.modules.donations.service import DonationService
from src.shared.schemas.base import ApiResponse, PaginatedResponse
from src.shared.schemas.table import TableQuery, table_query
from src.shared.utils.table import SortConfig, SortDirection

router = APIRouter(prefix="/donations", tags=["Donations"])

SORTABLE = ("donation_date", "donation_type", "donor_name", "amount", "receipt_number")
DEFAULT_SORT = SortConfig("donation_date", SortDirection.DESC)


@router.post(
    "",
    response_model=ApiResponse[DonationResponse],
    status_code=status.HTTP_201_CREATED,
)
async def record_donation(
    data: DonationCreate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("donations")),
):
    """Record a zakat, infaq, sedekah or wakaf donation."""
    donation = await DonationService(db).record_donation(data, profile.id)
    return ApiResponse(
        success=True,
        message=f"Donation recorded. Receipt: {donation.receipt_number}",
        data=DonationResponse.model_validate(donation),
    )


@router.get("", response_model=ApiResponse[PaginatedResponse[DonationResponse]])
async def list_donations(
    donation_type: DonationType | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    table: TableQuery = Depends(table_query),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("donations")),
):
    donations = await DonationService(db).list_donations(
        donation_type=donation_type, date_from=date_from, date_to=date_to
    )
    rows = [
        d
        for d in donations
        if table.matches(d.donor_name, d.receipt_number, d.purpose, d.allocated_to)
    ]
    return ApiResponse(
        success=True,
        data=table.paginate(rows, DonationResponse.model_validate, SORTABLE, DEFAULT_SORT),
    )


@router.get("/totals", response_model=ApiResponse[DonationTotals])
async def get_donation_totals(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("donations")),
):
    return ApiResponse(success=True, data=await DonationService(db).get_totals())


@router.get("/{donation_id}", response_model=ApiResponse[DonationResponse])
async def get_donation(
    donation_id: int,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("donations")),
):
    donation = await DonationService(db).get_donation(donation_id)
    return ApiResponse(success=True, data=DonationResponse.model_validate(donation))


@router.delete("/{donation_id}", response_model=ApiResponse[None])
async def delete_donation(
    donation_id: int,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("donations")),
):
    await DonationService(db).delete_donation(donation_id, profile.id)
    return ApiResponse(success=True, message="Donation deleted successfully", data=None)
