"""Query parameters shared by every list endpoint."""

from collections.abc import Callable, Iterable, Sequence
from typing import Any

from fastapi import Query
from pydantic import BaseModel

from src.core.config import settings
from src.core.exceptions import ValidationError
from src.shared.schemas.base import BaseSchema, PaginatedResponse
from src.shared.utils.table import SortConfig, SortDirection, paginate_records, sort_records


class TableQuery(BaseSchema):
    """Search, sort and page settings of a table view."""

    search: str | None = None
    sort_by: str | None = None
    sort_dir: SortDirection = SortDirection.ASC
    page: int = 1
    limit: int = 10

    def sort_config(self, sortable: Iterable[str], default: SortConfig) -> SortConfig:
        """Requested sort, or `default` when no column was chosen."""
        if not self.sort_by:
            return default
        if self.sort_by not in set(sortable):
            raise ValidationError(f"Cannot sort by '{self.sort_by}'", field="sort_by")
        return SortConfig(key=self.sort_by, direction=self.sort_dir)

    def matches(self, *values: Any) -> bool:
        """Case-insensitive 'contains' search over the given values."""
        if not self.search:
            return True
        needle = self.search.strip().lower()
        return any(needle in str(v).lower() for v in values if v is not None)

    def paginate(
        self,
        rows: Sequence[Any],
        convert: Callable[[Any], BaseModel],
        sortable: Iterable[str],
        default: SortConfig,
    ) -> PaginatedResponse[dict]:
        """
        Convert rows to response schemas, sort and slice them.

        Rows are sorted in their JSON form, so dates order as ISO strings.
        """
        records = [convert(row).model_dump(mode="json") for row in rows]
        ordered = sort_records(records, self.sort_config(sortable, default))
        return PaginatedResponse.create(
            items=paginate_records(ordered, self.page, self.limit),
            total=len(ordered),
            page=self.page,
            limit=self.limit,
        )


def table_query(
    search: str | None = Query(None, description="Free-text search"),
    sort_by: str | None = Query(None, description="Column to sort by"),
    sort_dir: SortDirection = Query(SortDirection.ASC, description="asc, desc or none"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
) -> TableQuery:
    """Dependency collecting table query parameters."""
    return TableQuery(search=search, sort_by=sort_by, sort_dir=sort_dir, page=page, limit=limit)
