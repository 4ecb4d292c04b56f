from sqlalchemy import CheckConstraint, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import Base

RECEIPT_DIGITS = 6


class DocumentSequence(Base):
    """Counter behind one receipt series (SPP, ZISWAF, TAB, KAS) in one year."""

    __tablename__ = "document_sequences"
    __table_args__ = (
        UniqueConstraint("prefix", "year", name="uq_document_sequence_prefix_year"),
        CheckConstraint("last_number >= 0", name="ck_document_sequence_last_number"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    prefix: Mapped[str] = mapped_column(String(20), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    last_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def receipt_number(self) -> str:
        """The last issued number as printed on the kwitansi: SPP-2026-000001."""
        return f"{self.prefix}-{self.year}-{self.last_number:0{RECEIPT_DIGITS}d}"
