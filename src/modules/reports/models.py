"""Stored monthly report snapshots."""

from sqlalchemy import BigInteger, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import TimestampedModel


class MonthlyReport(TimestampedModel):
    """Totals of one month, saved when the report is closed."""

    __tablename__ = "monthly_reports"
    __table_args__ = (
        UniqueConstraint("report_month", "report_year", name="uq_monthly_report_period"),
    )

    report_month: Mapped[int] = mapped_column(Integer, nullable=False)
    report_year: Mapped[int] = mapped_column(Integer, nullable=False)

    total_spp_revenue: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    total_donations: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    total_expenses: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    total_savings_deposits: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    total_savings_withdrawals: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    active_student_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    @property
    def net_balance(self) -> int:
        return self.total_spp_revenue + self.total_donations - self.total_expenses
