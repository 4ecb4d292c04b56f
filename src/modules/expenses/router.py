"""API endpoints for Expenses module."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.dependencies import require_module
from src.core.auth.models import Profile
from src.core.database.session import get_db
from src.modules.expenses.models import ExpenseCategory
from src.modules.expenses.schemas import ExpenseCreate, ExpenseResponse
from src.modules.expenses.service import ExpenseService
from src.shared.schemas.base import ApiResponse, PaginatedResponse
from src.shared.schemas.table import TableQuery, table_query
from src.shared.utils.table import SortConfig, SortDirection

router = APIRouter(prefix="/expenses", tags=["Expenses"])

SORTABLE = ("expense_date", "expense_category", "amount", "vendor_name", "description")
DEFAULT_SORT = SortConfig("expense_date", SortDirection.DESC)


@router.get("/categories", response_model=ApiResponse[list[str]])
async def list_expense_categories(
    profile: Profile = Depends(require_module("expenses")),
):
    return ApiResponse(success=True, data=[c.value for c in ExpenseCategory])


@router.post(
    "",
    response_model=ApiResponse[ExpenseResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_expense(
    data: ExpenseCreate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("expenses")),
):
    """Record an expense. Category 'Gaji Guru' requires teacher_id."""
    expense = await ExpenseService(db).create_expense(data, profile.id)
    return ApiResponse(
        success=True,
        message="Expense recorded successfully",
        data=ExpenseResponse.model_validate(expense),
    )


@router.get("", response_model=ApiResponse[PaginatedResponse[ExpenseResponse]])
async def list_expenses(
    category: ExpenseCategory | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    table: TableQuery = Depends(table_query),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("expenses")),
):
    expenses = await ExpenseService(db).list_expenses(
        category=category.value if category else None, date_from=date_from, date_to=date_to
    )
    rows = [
        e
        for e in expenses
        if table.matches(e.description, e.vendor_name, e.expense_category)
    ]
    return ApiResponse(
        success=True,
        data=table.paginate(rows, ExpenseResponse.model_validate, SORTABLE, DEFAULT_SORT),
    )


@router.get("/{expense_id}", response_model=ApiResponse[ExpenseResponse])
async def get_expense(
    expense_id: int,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("expenses")),
):
    expense = await ExpenseService(db).get_expense(expense_id)
    return ApiResponse(success=True, data=ExpenseResponse.model_validate(expense))


@router.delete("/{expense_id}", response_model=ApiResponse[None])
async def delete_expense(
    expense_id: int,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_module("expenses")),
):
    await ExpenseService(db).delete_expense(expense_id, profile.id)
    return ApiResponse(success=True, message="Expense deleted successfully", data=None)
