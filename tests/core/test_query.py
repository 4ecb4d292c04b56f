from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import NotFoundError, ValidationError
from src.core.query import Predicate, RecordQueryService, eq, gte, in_, lte
from src.modules.students.models import Student


async def _seed_students(db_session: AsyncSession) -> None:
    for nim, name, status, enrolled in [
        ("001", "Ahmad", "active", date(2025, 7, 1)),
        ("002", "Siti", "active", date(2026, 1, 5)),
        ("003", "Zahra", "graduated", date(2023, 7, 1)),
    ]:
        db_session.add(
            Student(
                nim=nim,
                full_name=name,
                gender="L",
                status=status,
                class_name="7A",
                enrollment_date=enrolled,
            )
        )
    await db_session.commit()


class TestRecordQueryService:
    """Tests for generic collection queries."""

    async def test_fetch_with_predicates(self, db_session: AsyncSession):
        await _seed_students(db_session)
        service = RecordQueryService(db_session)

        rows = await service.fetch("students", eq("status", "active"), order_by="full_name")

        assert [r["full_name"] for r in rows] == ["Ahmad", "Siti"]
        # Rows are keyed by column name
        assert rows[0]["class"] == "7A"

    async def test_range_predicates(self, db_session: AsyncSession):
        await _seed_students(db_session)
        rows = await RecordQueryService(db_session).fetch(
            "students",
            gte("enrollment_date", date(2025, 1, 1)),
            lte("enrollment_date", date(2025, 12, 31)),
        )
        assert [r["nim"] for r in rows] == ["001"]

    async def test_in_and_descending(self, db_session: AsyncSession):
        await _seed_students(db_session)
        rows = await RecordQueryService(db_session).fetch(
            "students", in_("nim", ["001", "003"]), order_by="nim", descending=True
        )
        assert [r["nim"] for r in rows] == ["003", "001"]

    async def test_neq_none(self, db_session: AsyncSession):
        await _seed_students(db_session)
        rows = await RecordQueryService(db_session).fetch(
            "students", Predicate("enrollment_date", "neq", None), limit=2, order_by="nim"
        )
        assert len(rows) == 2

    async def test_count(self, db_session: AsyncSession):
        await _seed_students(db_session)
        service = RecordQueryService(db_session)
        assert await service.count("students") == 3
        assert await service.count("students", eq("status", "graduated")) == 1

    async def test_unknown_collection(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await RecordQueryService(db_session).fetch("santri")

    async def test_unknown_field(self, db_session: AsyncSession):
        with pytest.raises(ValidationError):
            await RecordQueryService(db_session).fetch("students", eq("class_name", "7A"))
