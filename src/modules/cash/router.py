"""API endpoints for the cash book."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.dependencies import require_module
from src.core.auth.models import Profile
from src.core.database.session import get_db
from src.modules.cash.models import CashTransactionType
from src.modules.cash.schemas import CashSummary, CashTransactionCreate, CashTransactionResponse
from src.modules.cash.service import CashService
from src.shared.schemas.base import ApiResponse, PaginatedResponse
from src.shared.schemas.table import TableQuery, table_query
from src.shared.utils.table import SortConfig, SortDirection

router = APIRouter(prefix="/cash", tags=["Cash"])

SORTABLE = ("transaction_date", "transaction_type", "amount", "category", "student_name")
DEFAULT_SORT = SortConfig("transaction_date", SortDirection.DESC)


@router.post(
    "",
    response_model=ApiResponse[CashTransactionResponse],
    status_code=status.HTTP_201_CREATED,
)
async def record_cash_transaction(
    data: CashTransactionCreate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("cash")),
):
    transaction = await CashService(db).record_transaction(data, profile.id)
    return ApiResponse(
        success=True,
        message="Cash transaction recorded successfully",
        data=CashTransactionResponse.model_validate(transaction),
    )


@router.get("", response_model=ApiResponse[PaginatedResponse[CashTransactionResponse]])
async def list_cash_transactions(
    transaction_type: CashTransactionType | None = Query(None),
    student_id: int | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    table: TableQuery = Depends(table_query),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("cash")),
):
    transactions = await CashService(db).list_transactions(
        transaction_type=transaction_type,
        student_id=student_id,
        date_from=date_from,
        date_to=date_to,
    )
    rows = [
        t
        for t in transactions
        if table.matches(
            t.description, t.category, t.student.full_name if t.student else None
        )
    ]
    return ApiResponse(
        success=True,
        data=table.paginate(
            rows, CashTransactionResponse.model_validate, SORTABLE, DEFAULT_SORT
        ),
    )


@router.get("/summary", response_model=ApiResponse[CashSummary])
async def get_cash_summary(
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("cash")),
):
    summary = await CashService(db).get_summary(date_from=date_from, date_to=date_to)
    return ApiResponse(success=True, data=summary)


@router.get("/{transaction_id}", response_model=ApiResponse[CashTransactionResponse])
async def get_cash_transaction(
    transaction_id: int,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("cash")),
):
    transaction = await CashService(db).get_transaction(transaction_id)
    return ApiResponse(success=True, data=CashTransactionResponse.model_validate(transaction))
