"""Per-student, per-month payment status for a year."""

import csv
from collections import defaultdict
from datetime import date
from io import StringIO

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import InvalidArgumentError
from src.core.query import RecordQueryService, eq, gte, lte
from src.modules.cash.models import CashTransactionType
from src.modules.monitoring.schemas import (
    MAX_YEAR,
    MIN_YEAR,
    MONTH_NAMES,
    MonitoringResponse,
    MonitoringType,
    MonthStatus,
    StudentPaymentRow,
)
from src.modules.students.models import StudentStatus
from src.modules.transactions.models import TransactionType


class MonitoringService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.records = RecordQueryService(db)

    async def _paid_amounts(
        self, year: int, payment_type: MonitoringType
    ) -> dict[int, dict[int, int]]:
        """student_id -> month -> amount paid in that month."""
        period = (
            gte("transaction_date", date(year, 1, 1)),
            lte("transaction_date", date(year, 12, 31)),
        )
        if payment_type == MonitoringType.SPP:
            rows = await self.records.fetch(
                "transactions", eq("transaction_type", TransactionType.SPP.value), *period
            )
        else:
            rows = await self.records.fetch(
                "cash_transactions",
                eq("transaction_type", CashTransactionType.RECEIPT.value),
                *period,
            )

        paid: dict[int, dict[int, int]] = defaultdict(lambda: defaultdict(int))
        for row in rows:
            if row["student_id"] is None:
                continue
            month = row["transaction_date"].month
            paid[row["student_id"]][month] += int(row["amount"])
        return paid

    async def get_status(self, year: int, payment_type: MonitoringType) -> MonitoringResponse:
        """
        Payment grid of all active students for `year`.

        A month counts as paid ("Lunas") when any payment of the chosen type
        was recorded for the student in that month.
        """
        if not MIN_YEAR <= year <= MAX_YEAR:
            raise InvalidArgumentError("year", year, f"must be between {MIN_YEAR} and {MAX_YEAR}")

        students = await self.records.fetch(
            "students", eq("status", StudentStatus.ACTIVE.value), order_by="full_name"
        )
        paid = await self._paid_amounts(year, payment_type)

        rows = [
            StudentPaymentRow(
                student_id=s["id"],
                nim=s["nim"],
                full_name=s["full_name"],
                class_name=s["class"],
                months=[
                    MonthStatus(month=m, amount_paid=paid.get(s["id"], {}).get(m, 0))
                    for m in range(1, 13)
                ],
            )
            for s in students
        ]
        return MonitoringResponse(year=year, payment_type=payment_type, rows=rows)


def build_monitoring_csv(report: MonitoringResponse) -> str:
    """CSV with one row per student and one Lunas/Belum Bayar column per month."""
    out = StringIO()
    writer = csv.writer(out)
    writer.writerow(["NIM", "Nama Santri", "Kelas", *MONTH_NAMES])
    for row in report.rows:
        writer.writerow([
            row.nim,
            row.full_name,
            row.class_name or "",
            *[m.label for m in row.months],
        ])
    return out.getvalue()
