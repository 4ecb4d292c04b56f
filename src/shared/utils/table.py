"""Sorting and pagination over rows already loaded in memory.

Every list endpoint loads its rows, filters them, then sorts and slices them
here, so ordering rules are the same across all tables.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from functools import cmp_to_key
from typing import Any, TypeVar

from pyuca import Collator

from src.core.exceptions import InvalidArgumentError

T = TypeVar("T")

# Unicode collation: case and accents only break ties, so "budi" < "Élodie" < "Zahra".
_COLLATOR = Collator()


class SortDirection(StrEnum):
    """Column sort direction."""

    ASC = "asc"
    DESC = "desc"
    NONE = "none"


@dataclass(frozen=True)
class SortConfig:
    """Which field to sort by and in which direction."""

    key: str
    direction: SortDirection = SortDirection.ASC


def _field_value(record: Any, key: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _compare(a: Any, b: Any, descending: bool) -> int:
    # Empty values go last in both directions.
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1

    if isinstance(a, str) and isinstance(b, str):
        key_a, key_b = _COLLATOR.sort_key(a), _COLLATOR.sort_key(b)
        result = (key_a > key_b) - (key_a < key_b)
    elif _is_number(a) and _is_number(b):
        result = (a > b) - (a < b)
    else:
        # Mixed or unsupported types keep their relative order.
        return 0

    return -result if descending else result


def sort_records(records: Sequence[T], config: SortConfig) -> list[T]:
    """
    Return a new list of records ordered by `config.key`.

    Strings compare by Unicode collation order, numbers numerically. Records
    whose value is None (or that lack the field) come after all others
    regardless of direction. The sort is stable and the input is not
    modified. With SortDirection.NONE the original order is returned.
    """
    if config.direction == SortDirection.NONE:
        return list(records)

    descending = config.direction == SortDirection.DESC

    def compare(a: T, b: T) -> int:
        return _compare(_field_value(a, config.key), _field_value(b, config.key), descending)

    return sorted(records, key=cmp_to_key(compare))


def paginate_records(records: Sequence[T], page: int, page_size: int) -> list[T]:
    """
    Return the rows of a 1-based page.

    Pages past the end give an empty list; page numbers below 1 are treated
    as page 1.

    Raises:
        InvalidArgumentError: If page_size is not positive.
    """
    if page_size <= 0:
        raise InvalidArgumentError("page_size", page_size)
    page = max(page, 1)
    start = (page - 1) * page_size
    return list(records[start:start + page_size])


def total_pages(total_items: int, page_size: int) -> int:
    """Number of pages needed for `total_items` rows (0 when there are none)."""
    if page_size <= 0:
        raise InvalidArgumentError("page_size", page_size)
    if total_items < 0:
        raise InvalidArgumentError("total_items", total_items, "must not be negative")
    return (total_items + page_size - 1) // page_size
