"""Service for monthly financial reports."""

import csv
from calendar import monthrange
from datetime import date
from io import StringIO

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.activity import ActivityAction, ActivityService
from src.core.config import settings
from src.core.exceptions import InvalidArgumentError, NotFoundError
from src.core.query import RecordQueryService, eq, gte, in_, lte
from src.modules.cash.models import CashTransactionType
from src.modules.donations.models import ANONYMOUS_DONOR
from src.modules.expenses.models import ApprovalStatus
from src.modules.monitoring.schemas import MONTH_NAMES
from src.modules.reports.models import MonthlyReport
from src.modules.students.models import StudentStatus
from src.modules.transactions.models import TransactionType
from src.shared.utils.money import format_rupiah

MODULE = "reports"


def _sum(rows: list[dict], field: str = "amount") -> int:
    return sum(int(r[field] or 0) for r in rows)


def period_label(month: int, year: int) -> str:
    return f"{MONTH_NAMES[month - 1]} {year}"


class ReportsService:
    """Build report data for admins."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.records = RecordQueryService(db)
        self.activity = ActivityService(db)

    async def monthly_report(self, month: int, year: int) -> dict:
        """
        Monthly report: SPP revenue, donations, expenses and their net balance,
        plus savings, cash flow and the number of active students.

        Detail rows are ordered by date.
        """
        if not 1 <= month <= 12:
            raise InvalidArgumentError("month", month, "must be between 1 and 12")

        date_from = date(year, month, 1)
        date_to = date(year, month, monthrange(year, month)[1])

        def period(field: str):
            return gte(field, date_from), lte(field, date_to)

        transactions = await self.records.fetch(
            "transactions", *period("transaction_date"), order_by="transaction_date"
        )
        spp = [t for t in transactions if t["transaction_type"] == TransactionType.SPP.value]
        deposits = [
            t for t in transactions
            if t["transaction_type"] == TransactionType.SAVINGS_DEPOSIT.value
        ]
        withdrawals = [
            t for t in transactions
            if t["transaction_type"] == TransactionType.SAVINGS_WITHDRAWAL.value
        ]

        donations = await self.records.fetch(
            "donations", *period("donation_date"), order_by="donation_date"
        )
        expenses = await self.records.fetch(
            "expenses",
            eq("approval_status", ApprovalStatus.APPROVED.value),
            *period("expense_date"),
            order_by="expense_date",
        )
        cash = await self.records.fetch("cash_transactions", *period("transaction_date"))
        accounts = await self.records.fetch("savings_accounts")
        active_students = await self.records.count(
            "students", eq("status", StudentStatus.ACTIVE.value)
        )

        student_ids = sorted({t["student_id"] for t in spp if t["student_id"] is not None})
        names = {}
        if student_ids:
            students = await self.records.fetch("students", in_("id", student_ids))
            names = {s["id"]: s["full_name"] for s in students}

        return {
            "institution_name": settings.institution_name,
            "month": month,
            "year": year,
            "period_label": period_label(month, year),
            "total_spp": _sum(spp),
            "total_donations": _sum(donations),
            "total_expenses": _sum(expenses),
            "total_savings": _sum(accounts, "current_balance"),
            "savings_deposits": _sum(deposits),
            "savings_withdrawals": _sum(withdrawals),
            "cash_receipts": _sum(
                [c for c in cash if c["transaction_type"] == CashTransactionType.RECEIPT.value]
            ),
            "cash_disbursements": _sum(
                [c for c in cash if c["transaction_type"] == CashTransactionType.DISBURSEMENT.value]
            ),
            "active_students": active_students,
            "spp_transactions": [
                {
                    "transaction_date": t["transaction_date"],
                    "receipt_number": t["receipt_number"],
                    "student_name": names.get(t["student_id"]),
                    "amount": int(t["amount"]),
                    "payment_method": t["payment_method"],
                }
                for t in spp
            ],
            "donations": [
                {
                    "donation_date": d["donation_date"],
                    "donation_type": d["donation_type"],
                    "donor_name": d["donor_name"] or ANONYMOUS_DONOR,
                    "amount": int(d["amount"]),
                }
                for d in donations
            ],
            "expenses": [
                {
                    "expense_date": e["expense_date"],
                    "expense_category": e["expense_category"],
                    "description": e["description"],
                    "amount": int(e["amount"]),
                }
                for e in expenses
            ],
        }

    async def save_snapshot(self, month: int, year: int, saved_by_id: int) -> MonthlyReport:
        """Store the month's totals, replacing an earlier snapshot of the same month."""
        data = await self.monthly_report(month, year)

        result = await self.db.execute(
            select(MonthlyReport).where(
                MonthlyReport.report_month == month, MonthlyReport.report_year == year
            )
        )
        snapshot = result.scalar_one_or_none()
        if snapshot is None:
            snapshot = MonthlyReport(report_month=month, report_year=year)
            self.db.add(snapshot)

        snapshot.total_spp_revenue = data["total_spp"]
        snapshot.total_donations = data["total_donations"]
        snapshot.total_expenses = data["total_expenses"]
        snapshot.total_savings_deposits = data["savings_deposits"]
        snapshot.total_savings_withdrawals = data["savings_withdrawals"]
        snapshot.active_student_count = data["active_students"]
        await self.db.flush()

        await self.activity.log(
            ActivityAction.CREATE,
            module=MODULE,
            user_id=saved_by_id,
            description=f"Saved report {data['period_label']}",
            details={"monthly_report_id": snapshot.id},
        )

        await self.db.commit()
        await self.db.refresh(snapshot)
        return snapshot

    async def get_snapshot(self, month: int, year: int) -> MonthlyReport:
        result = await self.db.execute(
            select(MonthlyReport).where(
                MonthlyReport.report_month == month, MonthlyReport.report_year == year
            )
        )
        snapshot = result.scalar_one_or_none()
        if not snapshot:
            raise NotFoundError("Monthly report", f"{month}/{year}")
        return snapshot

    async def list_snapshots(self, year: int | None = None) -> list[MonthlyReport]:
        query = select(MonthlyReport).order_by(
            MonthlyReport.report_year.desc(), MonthlyReport.report_month.desc()
        )
        if year is not None:
            query = query.where(MonthlyReport.report_year == year)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def log_export(self, data: dict, export_format: str, user_id: int) -> None:
        await self.activity.log(
            ActivityAction.EXPORT_REPORT,
            module=MODULE,
            user_id=user_id,
            description=f"Exported report {data['period_label']} as {export_format}",
            details={"month": data["month"], "year": data["year"], "format": export_format},
        )
        await self.db.commit()


def build_monthly_report_csv(data: dict) -> str:
    """Summary block followed by the SPP, donation and expense detail sections."""
    out = StringIO()
    writer = csv.writer(out)
    writer.writerow([f"Laporan Keuangan {data['institution_name']}"])
    writer.writerow([f"Periode: {data['period_label']}"])
    writer.writerow([])
    writer.writerow(["Ringkasan"])
    net = data["total_spp"] + data["total_donations"] - data["total_expenses"]
    for label, amount in (
        ("Total Pemasukan SPP", data["total_spp"]),
        ("Total Donasi ZISWAF", data["total_donations"]),
        ("Total Pengeluaran", data["total_expenses"]),
        ("Saldo Bersih", net),
        ("Total Tabungan Santri", data["total_savings"]),
    ):
        writer.writerow([label, format_rupiah(amount)])
    writer.writerow(["Jumlah Santri Aktif", data["active_students"]])

    writer.writerow([])
    writer.writerow(["Pembayaran SPP"])
    writer.writerow(["Tanggal", "No. Kwitansi", "Santri", "Jumlah", "Metode"])
    for t in data["spp_transactions"]:
        writer.writerow([
            t["transaction_date"].isoformat(),
            t["receipt_number"] or "-",
            t["student_name"] or "-",
            t["amount"],
            t["payment_method"] or "-",
        ])

    writer.writerow([])
    writer.writerow(["Donasi ZISWAF"])
    writer.writerow(["Tanggal", "Jenis", "Donatur", "Jumlah"])
    for d in data["donations"]:
        writer.writerow([
            d["donation_date"].isoformat(), d["donation_type"], d["donor_name"], d["amount"],
        ])

    writer.writerow([])
    writer.writerow(["Pengeluaran"])
    writer.writerow(["Tanggal", "Kategori", "Deskripsi", "Jumlah"])
    for e in data["expenses"]:
        writer.writerow([
            e["expense_date"].isoformat(), e["expense_category"], e["description"], e["amount"],
        ])
    return out.getvalue()
