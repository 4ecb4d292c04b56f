"""Generic record queries addressed by collection (table) name.

Dashboards and reports read several collections with simple predicates and
then aggregate in Python, so they go through this service instead of
importing every module's models.
"""

from dataclasses import dataclass
from typing import Any, Literal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database.base import Base
from src.core.exceptions import NotFoundError, ValidationError

Operator = Literal["eq", "neq", "in", "gte", "lte", "gt", "lt"]


@dataclass(frozen=True)
class Predicate:
    """Condition on one field of a collection."""

    field: str
    op: Operator
    value: Any


def eq(field: str, value: Any) -> Predicate:
    return Predicate(field, "eq", value)


def in_(field: str, values: list[Any]) -> Predicate:
    return Predicate(field, "in", list(values))


def gte(field: str, value: Any) -> Predicate:
    return Predicate(field, "gte", value)


def lte(field: str, value: Any) -> Predicate:
    return Predicate(field, "lte", value)


def _model_for(collection: str) -> type[Base]:
    for mapper in Base.registry.mappers:
        if getattr(mapper.class_, "__tablename__", None) == collection:
            return mapper.class_
    raise NotFoundError("Collection", collection)


def _column(model: type[Base], field: str):
    column = model.__table__.columns.get(field)
    if column is None:
        raise ValidationError(f"Unknown field '{field}' in {model.__tablename__}", field=field)
    return column


def _condition(model: type[Base], predicate: Predicate):
    column = _column(model, predicate.field)
    if predicate.op == "eq":
        return column.is_(None) if predicate.value is None else column == predicate.value
    if predicate.op == "neq":
        return column.is_not(None) if predicate.value is None else column != predicate.value
    if predicate.op == "in":
        return column.in_(predicate.value)
    if predicate.op == "gte":
        return column >= predicate.value
    if predicate.op == "lte":
        return column <= predicate.value
    if predicate.op == "gt":
        return column > predicate.value
    if predicate.op == "lt":
        return column < predicate.value
    raise ValidationError(f"Unsupported operator '{predicate.op}'", field=predicate.field)


class RecordQueryService:
    """Read-only access to any table as plain dict rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def fetch(
        self,
        collection: str,
        *predicates: Predicate,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Rows of `collection` matching all predicates."""
        model = _model_for(collection)
        table = model.__table__
        stmt = select(table).where(*[_condition(model, p) for p in predicates])
        if order_by:
            column = _column(model, order_by)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self.db.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def count(self, collection: str, *predicates: Predicate) -> int:
        """Number of rows of `collection` matching all predicates."""
        model = _model_for(collection)
        stmt = (
            select(func.count())
            .select_from(model.__table__)
            .where(*[_condition(model, p) for p in predicates])
        )
        result = await self.db.execute(stmt)
        return result.scalar_one()
