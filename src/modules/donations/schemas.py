"""Schemas for ZISWAF donations."""

from datetime import date

from pydantic import BaseModel, Field, computed_field

from src.modules.donations.models import DonationType
from src.shared.schemas import MoneyInput
from src.shared.utils.money import format_rupiah


class DonationCreate(BaseModel):
    """Donation form. Donor name and contact are ignored for anonymous donations."""

    donation_type: DonationType
    amount: MoneyInput
    donor_name: str | None = Field(None, max_length=200)
    donor_contact: str | None = Field(None, max_length=100)
    is_anonymous: bool = False
    donation_date: date | None = None
    purpose: str | None = None
    allocated_to: str | None = Field(None, max_length=200)


class DonationResponse(BaseModel):
    id: int
    donation_type: str
    donor_name: str | None
    donor_contact: str | None
    is_anonymous: bool
    amount: int
    donation_date: date
    purpose: str | None
    allocated_to: str | None
    receipt_number: str

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def amount_display(self) -> str:
        return format_rupiah(self.amount)


class DonationTotals(BaseModel):
    """Total received overall and per ZISWAF type."""

    total: int
    by_type: dict[str, int]

    @computed_field
    @property
    def total_display(self) -> str:
        return format_rupiah(self.total)
