"""Schemas for reports API."""

from datetime import date
from enum import StrEnum

from pydantic import computed_field

from src.shared.schemas.base import BaseSchema
from src.shared.utils.money import format_rupiah


class ExportFormat(StrEnum):
    XLSX = "xlsx"
    CSV = "csv"


class SppReportRow(BaseSchema):
    transaction_date: date
    receipt_number: str | None
    student_name: str | None
    amount: int
    payment_method: str | None


class DonationReportRow(BaseSchema):
    donation_date: date
    donation_type: str
    donor_name: str
    amount: int


class ExpenseReportRow(BaseSchema):
    expense_date: date
    expense_category: str
    description: str
    amount: int


class MonthlyReportResponse(BaseSchema):
    """
    Financial report of one month.

    net_balance = total_spp + total_donations - total_expenses. Savings and
    cash are reported beside it and do not enter the net balance.
    """

    institution_name: str
    month: int
    year: int
    period_label: str  # "Maret 2026"

    total_spp: int
    total_donations: int
    total_expenses: int
    total_savings: int  # balance over all accounts, at report time
    savings_deposits: int
    savings_withdrawals: int
    cash_receipts: int
    cash_disbursements: int
    active_students: int

    spp_transactions: list[SppReportRow]
    donations: list[DonationReportRow]
    expenses: list[ExpenseReportRow]

    @computed_field
    @property
    def net_balance(self) -> int:
        return self.total_spp + self.total_donations - self.total_expenses

    @computed_field
    @property
    def cash_balance(self) -> int:
        return self.cash_receipts - self.cash_disbursements

    @computed_field
    @property
    def net_balance_display(self) -> str:
        return format_rupiah(self.net_balance)


class MonthlyReportSnapshot(BaseSchema):
    """Saved monthly totals."""

    id: int
    report_month: int
    report_year: int
    total_spp_revenue: int
    total_donations: int
    total_expenses: int
    total_savings_deposits: int
    total_savings_withdrawals: int
    active_student_count: int
    net_balance: int
