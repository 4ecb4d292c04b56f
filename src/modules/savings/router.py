"""API endpoints for student savings."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.dependencies import require_module
from src.core.auth.models import Profile
from src.core.database.session import get_db
from src.core.exceptions import NotFoundError
from src.modules.savings.schemas import (
    MySavingsResponse,
    SavingsAccountResponse,
    SavingsGoalUpdate,
    SavingsSummary,
    SavingsTransactionCreate,
)
from src.modules.savings.service import SavingsService
from src.modules.transactions.models import TransactionType
from src.modules.transactions.schemas import TransactionResponse
from src.shared.schemas.base import ApiResponse, PaginatedResponse
from src.shared.schemas.table import TableQuery, table_query
from src.shared.utils.table import SortConfig, SortDirection

router = APIRouter(prefix="/savings", tags=["Savings"])

ACCOUNT_SORTABLE = ("student_name", "current_balance", "savings_goal")
ACCOUNT_DEFAULT_SORT = SortConfig("student_name")
TX_SORTABLE = ("transaction_date", "amount", "transaction_type", "student_name")
TX_DEFAULT_SORT = SortConfig("transaction_date", SortDirection.DESC)


@router.get("/accounts", response_model=ApiResponse[PaginatedResponse[SavingsAccountResponse]])
async def list_savings_accounts(
    table: TableQuery = Depends(table_query),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("savings")),
):
    """Savings accounts with student info. Search matches student name and NIM."""
    accounts = await SavingsService(db).list_accounts()
    rows = [
        a
        for a in accounts
        if table.matches(
            a.student.full_name if a.student else None,
            a.student.nim if a.student else None,
        )
    ]
    return ApiResponse(
        success=True,
        data=table.paginate(
            rows, SavingsAccountResponse.model_validate, ACCOUNT_SORTABLE, ACCOUNT_DEFAULT_SORT
        ),
    )


@router.get("/summary", response_model=ApiResponse[SavingsSummary])
async def get_savings_summary(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("savings")),
):
    return ApiResponse(success=True, data=await SavingsService(db).get_summary())


@router.post(
    "/deposit",
    response_model=ApiResponse[TransactionResponse],
    status_code=status.HTTP_201_CREATED,
)
async def deposit(
    data: SavingsTransactionCreate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("savings")),
):
    transaction = await SavingsService(db).deposit(data, profile.id)
    return ApiResponse(
        success=True,
        message="Deposit recorded successfully",
        data=TransactionResponse.model_validate(transaction),
    )


@router.post(
    "/withdraw",
    response_model=ApiResponse[TransactionResponse],
    status_code=status.HTTP_201_CREATED,
)
async def withdraw(
    data: SavingsTransactionCreate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("savings")),
):
    """Withdraw from savings. Fails when the balance is not enough."""
    transaction = await SavingsService(db).withdraw(data, profile.id)
    return ApiResponse(
        success=True,
        message="Withdrawal recorded successfully",
        data=TransactionResponse.model_validate(transaction),
    )


@router.get(
    "/transactions",
    response_model=ApiResponse[PaginatedResponse[TransactionResponse]],
)
async def list_savings_transactions(
    student_id: int | None = Query(None),
    transaction_type: TransactionType | None = Query(None),
    table: TableQuery = Depends(table_query),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("savings")),
):
    transactions = await SavingsService(db).list_transactions(
        student_id=student_id, transaction_type=transaction_type
    )
    rows = [
        t
        for t in transactions
        if table.matches(t.description, t.student.full_name if t.student else None)
    ]
    return ApiResponse(
        success=True,
        data=table.paginate(
            rows, TransactionResponse.model_validate, TX_SORTABLE, TX_DEFAULT_SORT
        ),
    )


@router.patch(
    "/accounts/{student_id}/goal",
    response_model=ApiResponse[SavingsAccountResponse],
)
async def update_savings_goal(
    student_id: int,
    data: SavingsGoalUpdate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("savings")),
):
    account = await SavingsService(db).update_goal(student_id, data, profile.id)
    return ApiResponse(success=True, data=SavingsAccountResponse.model_validate(account))


@router.get("/me", response_model=ApiResponse[MySavingsResponse])
async def get_my_savings(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("my-savings")),
):
    """Savings account and history of the student linked to the current profile."""
    if profile.student_id is None:
        raise NotFoundError("Student record for profile", profile.id)
    service = SavingsService(db)
    account = await service.get_account_by_student(profile.student_id)
    transactions = await service.list_transactions(student_id=profile.student_id)
    return ApiResponse(
        success=True,
        data=MySavingsResponse(
            account=SavingsAccountResponse.model_validate(account),
            transactions=[TransactionResponse.model_validate(t) for t in transactions],
        ),
    )
