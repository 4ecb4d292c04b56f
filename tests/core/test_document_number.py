from sqlalchemy.ext.asyncio import AsyncSession

from src.core.documents import ReceiptPrefix, get_document_number


class TestDocumentNumberGenerator:
    """Tests for receipt number generator."""

    async def test_generate_first_number(self, db_session: AsyncSession):
        number = await get_document_number(db_session, ReceiptPrefix.SPP, year=2026)
        assert number == "SPP-2026-000001"

    async def test_generate_sequential_numbers(self, db_session: AsyncSession):
        num1 = await get_document_number(db_session, ReceiptPrefix.SPP, year=2026)
        num2 = await get_document_number(db_session, ReceiptPrefix.SPP, year=2026)
        num3 = await get_document_number(db_session, ReceiptPrefix.SPP, year=2026)

        assert num1 == "SPP-2026-000001"
        assert num2 == "SPP-2026-000002"
        assert num3 == "SPP-2026-000003"

    async def test_different_prefixes(self, db_session: AsyncSession):
        """Each receipt series has its own sequence."""
        spp = await get_document_number(db_session, ReceiptPrefix.SPP, year=2026)
        ziswaf = await get_document_number(db_session, ReceiptPrefix.ZISWAF, year=2026)
        savings = await get_document_number(db_session, ReceiptPrefix.SAVINGS, year=2026)
        spp2 = await get_document_number(db_session, ReceiptPrefix.SPP, year=2026)

        assert spp == "SPP-2026-000001"
        assert ziswaf == "ZISWAF-2026-000001"
        assert savings == "TAB-2026-000001"
        assert spp2 == "SPP-2026-000002"

    async def test_different_years(self, db_session: AsyncSession):
        num_2026 = await get_document_number(db_session, ReceiptPrefix.CASH, year=2026)
        num_2027 = await get_document_number(db_session, ReceiptPrefix.CASH, year=2027)
        num_2026_2 = await get_document_number(db_session, ReceiptPrefix.CASH, year=2026)

        assert num_2026 == "KAS-2026-000001"
        assert num_2027 == "KAS-2027-000001"
        assert num_2026_2 == "KAS-2026-000002"

    async def test_format_with_leading_zeros(self, db_session: AsyncSession):
        for _ in range(99):
            await get_document_number(db_session, "TEST", year=2026)

        num_100 = await get_document_number(db_session, "TEST", year=2026)
        assert num_100 == "TEST-2026-000100"
