"""ZISWAF donation model."""

from datetime import date
from enum import StrEnum

from sqlalchemy import BigInteger, Boolean, Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import RecordedModel

ANONYMOUS_DONOR = "Anonim"


class DonationType(StrEnum):
    """Zakat, infaq, sedekah and wakaf."""

    ZAKAT = "zakat"
    INFAQ = "infaq"
    SEDEKAH = "sedekah"
    WAKAF = "wakaf"


class Donation(RecordedModel):
    """Donation received by the pesantren."""

    __tablename__ = "donations"

    donation_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    donor_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    donor_contact: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Whole Rupiah
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    donation_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    purpose: Mapped[str | None] = mapped_column(Text, nullable=True)
    allocated_to: Mapped[str | None] = mapped_column(String(200), nullable=True)
    receipt_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    recorded_by: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
