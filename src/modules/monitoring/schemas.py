"""Schemas for payment monitoring."""

from enum import StrEnum

from pydantic import BaseModel, computed_field

MONTH_NAMES = (
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
)

PAID_LABEL = "Lunas"
UNPAID_LABEL = "Belum Bayar"

MIN_YEAR = 2025
MAX_YEAR = 2100


class MonitoringType(StrEnum):
    """Which payments count: SPP transactions or cash receipts (kas)."""

    SPP = "spp"
    KAS = "kas"


class MonthStatus(BaseModel):
    month: int
    amount_paid: int

    @computed_field
    @property
    def paid(self) -> bool:
        return self.amount_paid > 0

    @computed_field
    @property
    def label(self) -> str:
        return PAID_LABEL if self.paid else UNPAID_LABEL


class StudentPaymentRow(BaseModel):
    student_id: int
    nim: str
    full_name: str
    class_name: str | None
    months: list[MonthStatus]

    @computed_field
    @property
    def paid_months(self) -> int:
        return sum(1 for m in self.months if m.paid)


class MonitoringResponse(BaseModel):
    year: int
    payment_type: MonitoringType
    month_names: list[str] = list(MONTH_NAMES)
    rows: list[StudentPaymentRow]
