"""API endpoints for SPP payments."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.dependencies import require_module
from src.core.auth.models import Profile
from src.core.database.session import get_db
from src.core.exceptions import NotFoundError
from src.modules.spp.schemas import SppPaymentCreate
from src.modules.spp.service import SppService
from src.modules.transactions.schemas import TransactionResponse
from src.shared.schemas.base import ApiResponse, PaginatedResponse
from src.shared.schemas.table import TableQuery, table_query
from src.shared.utils.table import SortConfig, SortDirection

router = APIRouter(prefix="/spp", tags=["SPP"])

SORTABLE = ("transaction_date", "amount", "receipt_number", "student_name", "payment_method")
DEFAULT_SORT = SortConfig("transaction_date", SortDirection.DESC)


@router.post(
    "",
    response_model=ApiResponse[TransactionResponse],
    status_code=status.HTTP_201_CREATED,
)
async def record_spp_payment(
    data: SppPaymentCreate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("spp")),
):
    """Record an SPP payment. The receipt number is returned in the response."""
    transaction = await SppService(db).record_payment(data, profile.id)
    return ApiResponse(
        success=True,
        message=f"SPP payment recorded. Receipt: {transaction.receipt_number}",
        data=TransactionResponse.model_validate(transaction),
    )


@router.get("", response_model=ApiResponse[PaginatedResponse[TransactionResponse]])
async def list_spp_payments(
    student_id: int | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    table: TableQuery = Depends(table_query),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("spp")),
):
    """List SPP payments. Search matches receipt number and student name/NIM."""
    payments = await SppService(db).list_payments(
        student_id=student_id, date_from=date_from, date_to=date_to
    )
    rows = [
        p
        for p in payments
        if table.matches(
            p.receipt_number,
            p.student.full_name if p.student else None,
            p.student.nim if p.student else None,
        )
    ]
    return ApiResponse(
        success=True,
        data=table.paginate(rows, TransactionResponse.model_validate, SORTABLE, DEFAULT_SORT),
    )


@router.get("/me", response_model=ApiResponse[list[TransactionResponse]])
async def list_my_spp_payments(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("my-payments")),
):
    """SPP payments of the student linked to the current profile."""
    if profile.student_id is None:
        raise NotFoundError("Student record for profile", profile.id)
    payments = await SppService(db).list_payments(student_id=profile.student_id)
    return ApiResponse(
        success=True, data=[TransactionResponse.model_validate(p) for p in payments]
    )


@router.get("/{transaction_id}", response_model=ApiResponse[TransactionResponse])
async def get_spp_payment(
    transaction_id: int,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("spp")),
):
    transaction = await SppService(db).get_payment(transaction_id)
    return ApiResponse(success=True, data=TransactionResponse.model_validate(transaction))
