"""
Query descriptors for the question list.

The builder only describes a query; the record store executes it. A list
query is always a pair: the row query for one page and a count query with
identical filters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

DEFAULT_ORDER_FIELDS = ("created_at", "id")


@dataclass(frozen=True)
class QuestionFilters:
    title_contains: Optional[str] = None
    tag: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.title_contains is None and self.tag is None

    def matches(self, record) -> bool:
        """Evaluate the predicates against a record in Python."""
        if self.title_contains is not None:
            title = (record.title or "").lower()
            if self.title_contains.lower() not in title:
                return False
        if self.tag is not None:
            if self.tag not in (record.tags or []):
                return False
        return True


@dataclass(frozen=True)
class SortKey:
    field: str
    descending: bool = True


@dataclass(frozen=True)
class RowRange:
    """Zero-indexed, inclusive on both ends."""

    start: int
    end: int

    @property
    def limit(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class RowQuery:
    filters: QuestionFilters
    order: tuple[SortKey, ...]
    row_range: RowRange


@dataclass(frozen=True)
class ListQuery:
    rows: RowQuery
    count: QuestionFilters = field(default_factory=QuestionFilters)


def page_range(page: int, page_size: int) -> RowRange:
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be > 0, got {page_size}")
    start = (page - 1) * page_size
    return RowRange(start=start, end=page * page_size - 1)


def build_list_query(
    search_term: str,
    tag: Optional[str],
    page: int,
    page_size: int,
) -> ListQuery:
    """
    Translate the list view inputs into a page query and its count query.

    An empty search term or tag means "no filter". Rows are ordered newest
    first, ties broken by identifier descending.
    """
    filters = QuestionFilters(
        title_contains=search_term or None,
        tag=tag or None,
    )
    order = tuple(SortKey(name, descending=True) for name in DEFAULT_ORDER_FIELDS)
    rows = RowQuery(
        filters=filters,
        order=order,
        row_range=page_range(page, page_size),
    )
    return ListQuery(rows=rows, count=filters)
