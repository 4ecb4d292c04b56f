"""Service for ZISWAF donations."""

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.activity import ActivityAction, ActivityService
from src.core.documents import ReceiptPrefix, get_document_number
from src.core.exceptions import NotFoundError
from src.modules.donations.models import ANONYMOUS_DONOR, Donation, DonationType
from src.modules.donations.schemas import DonationCreate, DonationTotals
from src.shared.utils.money import format_rupiah

MODULE = "donations"


class DonationService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.activity = ActivityService(db)

    async def record_donation(self, data: DonationCreate, recorded_by_id: int) -> Donation:
        """
        Record a donation and issue a ZISWAF receipt number.

        Anonymous donations are stored with donor "Anonim" and an empty
        contact, whatever was typed in the form.
        """
        donation_date = data.donation_date or date.today()
        receipt_number = await get_document_number(
            self.db, ReceiptPrefix.ZISWAF, donation_date.year
        )

        donation = Donation(
            donation_type=data.donation_type.value,
            donor_name=ANONYMOUS_DONOR if data.is_anonymous else data.donor_name,
            donor_contact="" if data.is_anonymous else data.donor_contact,
            is_anonymous=data.is_anonymous,
            amount=data.amount,
            donation_date=donation_date,
            purpose=data.purpose,
            allocated_to=data.allocated_to,
            receipt_number=receipt_number,
            recorded_by=recorded_by_id,
        )
        self.db.add(donation)
        await self.db.flush()

        await self.activity.log(
            ActivityAction.RECORD_DONATION,
            module=MODULE,
            user_id=recorded_by_id,
            description=(
                f"{donation.donation_type} {format_rupiah(donation.amount)} "
                f"from {donation.donor_name or ANONYMOUS_DONOR}"
            ),
            details={"donation_id": donation.id, "receipt_number": receipt_number},
        )

        await self.db.commit()
        await self.db.refresh(donation)
        return donation

    async def get_donation(self, donation_id: int) -> Donation:
        result = await self.db.execute(select(Donation).where(Donation.id == donation_id))
        donation = result.scalar_one_or_none()
        if not donation:
            raise NotFoundError("Donation", donation_id)
        return donation

    async def list_donations(
        self,
        donation_type: DonationType | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[Donation]:
        query = select(Donation).order_by(Donation.donation_date.desc(), Donation.id.desc())
        if donation_type:
            query = query.where(Donation.donation_type == donation_type.value)
        if date_from:
            query = query.where(Donation.donation_date >= date_from)
        if date_to:
            query = query.where(Donation.donation_date <= date_to)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_totals(self) -> DonationTotals:
        """Totals per type; types without donations report 0."""
        rows = (
            await self.db.execute(
                select(Donation.donation_type, func.sum(Donation.amount)).group_by(
                    Donation.donation_type
                )
            )
        ).all()
        by_type = {t.value: 0 for t in DonationType}
        for donation_type, amount in rows:
            by_type[donation_type] = int(amount or 0)
        return DonationTotals(total=sum(by_type.values()), by_type=by_type)

    async def delete_donation(self, donation_id: int, deleted_by_id: int) -> None:
        donation = await self.get_donation(donation_id)
        await self.db.delete(donation)
        await self.activity.log(
            ActivityAction.DELETE,
            module=MODULE,
            user_id=deleted_by_id,
            description=f"Deleted donation {donation.receipt_number}",
            details={"donation_id": donation_id},
        )
        await self.db.commit()
