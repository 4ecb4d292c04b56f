from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.auth.models import UserRole
from src.core.exceptions import NotFoundError
from src.modules.donations.models import ANONYMOUS_DONOR, DonationType
from src.modules.donations.schemas import DonationCreate
from src.modules.donations.service import DonationService


class TestDonationService:
    """Tests for DonationService."""

    async def test_record_donation(self, db_session: AsyncSession):
        donation = await DonationService(db_session).record_donation(
            DonationCreate(
                donation_type=DonationType.ZAKAT,
                amount="2.500.000",
                donor_name="H. Sulaiman",
                donor_contact="081234567890",
                donation_date=date(2026, 3, 1),
            ),
            recorded_by_id=1,
        )

        assert donation.amount == 2_500_000
        assert donation.donor_name == "H. Sulaiman"
        assert donation.receipt_number == "ZISWAF-2026-000001"

    async def test_anonymous_donation_hides_donor(self, db_session: AsyncSession):
        donation = await DonationService(db_session).record_donation(
            DonationCreate(
                donation_type=DonationType.SEDEKAH,
                amount=250_000,
                donor_name="Someone",
                donor_contact="someone@example.com",
                is_anonymous=True,
            ),
            recorded_by_id=1,
        )

        assert donation.is_anonymous is True
        assert donation.donor_name == ANONYMOUS_DONOR
        assert donation.donor_contact == ""

    async def test_totals_cover_every_type(self, db_session: AsyncSession):
        service = DonationService(db_session)
        for donation_type, amount in [
            (DonationType.ZAKAT, 1_000_000),
            (DonationType.ZAKAT, 500_000),
            (DonationType.WAKAF, 10_000_000),
        ]:
            await service.record_donation(
                DonationCreate(donation_type=donation_type, amount=amount), 1
            )

        totals = await service.get_totals()

        assert totals.total == 11_500_000
        assert totals.by_type == {"zakat": 1_500_000, "infaq": 0, "sedekah": 0, "wakaf": 10_000_000}

    async def test_totals_empty(self, db_session: AsyncSession):
        totals = await DonationService(db_session).get_totals()
        assert totals.total == 0
        assert set(totals.by_type) == {t.value for t in DonationType}

    async def test_list_by_type(self, db_session: AsyncSession):
        service = DonationService(db_session)
        await service.record_donation(DonationCreate(donation_type=DonationType.INFAQ, amount=1), 1)
        await service.record_donation(DonationCreate(donation_type=DonationType.WAKAF, amount=2), 1)

        infaq = await service.list_donations(donation_type=DonationType.INFAQ)
        assert [d.amount for d in infaq] == [1]

    async def test_delete(self, db_session: AsyncSession):
        service = DonationService(db_session)
        donation = await service.record_donation(
            DonationCreate(donation_type=DonationType.INFAQ, amount=1000), 1
        )
        await service.delete_donation(donation.id, 1)
        with pytest.raises(NotFoundError):
            await service.get_donation(donation.id)


class TestDonationEndpoints:
    async def test_record_list_and_totals(self, client: AsyncClient, admin):
        _, headers = admin
        response = await client.post(
            "/api/v1/donations",
            json={
                "donation_type": "infaq",
                "amount": "500.000",
                "donor_name": "Ibu Rahmawati",
                "purpose": "Operasional pondok",
            },
            headers=headers,
        )
        assert response.status_code == 201
        assert response.json()["data"]["amount_display"] == "Rp 500.000"

        response = await client.get(
            "/api/v1/donations", params={"search": "rahmawati"}, headers=headers
        )
        assert response.json()["data"]["total"] == 1

        response = await client.get("/api/v1/donations/totals", headers=headers)
        assert response.json()["data"]["total_display"] == "Rp 500.000"

    async def test_unknown_type(self, client: AsyncClient, admin):
        _, headers = admin
        response = await client.post(
            "/api/v1/donations", json={"donation_type": "hibah", "amount": 1000}, headers=headers
        )
        assert response.status_code == 422

    async def test_committee_cannot_record(self, client: AsyncClient, make_account):
        _, headers = await make_account(UserRole.KOMITE)
        response = await client.post(
            "/api/v1/donations", json={"donation_type": "infaq", "amount": 1000}, headers=headers
        )
        assert response.status_code == 403
