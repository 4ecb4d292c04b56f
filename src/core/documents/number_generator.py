from datetime import datetime
from enum import StrEnum

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.documents.models import DocumentSequence


class ReceiptPrefix(StrEnum):
    """Receipt series printed on kwitansi."""

    SPP = "SPP"
    ZISWAF = "ZISWAF"
    SAVINGS = "TAB"
    CASH = "KAS"


class DocumentNumberGenerator:
    """
    Generates sequential receipt numbers in format: PREFIX-YYYY-NNNNNN

    Examples:
        SPP-2026-000001
        ZISWAF-2026-000042
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def generate(self, prefix: str | ReceiptPrefix, year: int | None = None) -> str:
        """
        Generate next receipt number for given prefix and year.

        Uses SELECT FOR UPDATE to ensure uniqueness in concurrent scenarios.
        """
        prefix = str(prefix)
        if year is None:
            year = datetime.now().year

        stmt = (
            select(DocumentSequence)
            .where(DocumentSequence.prefix == prefix, DocumentSequence.year == year)
            .with_for_update()
        )
        sequence = (await self.session.execute(stmt)).scalar_one_or_none()

        if sequence is None:
            sequence = DocumentSequence(prefix=prefix, year=year, last_number=0)
            self.session.add(sequence)
            await self.session.flush()

        sequence.last_number += 1
        await self.session.flush()

        return sequence.receipt_number()


async def get_document_number(
    session: AsyncSession, prefix: str | ReceiptPrefix, year: int | None = None
) -> str:
    """Convenience function to generate a receipt number."""
    return await DocumentNumberGenerator(session).generate(prefix, year)
