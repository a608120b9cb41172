"""
Pagination controls derived from a total row count.
"""

from __future__ import annotations

from dataclasses import dataclass, field


def page_count(total_count: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError(f"page_size must be > 0, got {page_size}")
    if total_count <= 0:
        return 0
    return (total_count + page_size - 1) // page_size


@dataclass(frozen=True)
class PaginationView:
    current_page: int
    page_size: int
    total_count: int
    page_count: int
    visible: bool
    previous_enabled: bool
    next_enabled: bool
    # Every page gets its own control; no windowing.
    pages: list[int] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "current_page": self.current_page,
            "page_size": self.page_size,
            "total_count": self.total_count,
            "page_count": self.page_count,
            "visible": self.visible,
            "previous_enabled": self.previous_enabled,
            "next_enabled": self.next_enabled,
            "pages": list(self.pages),
        }


def present_pagination(
    total_count: int, page_size: int, current_page: int
) -> PaginationView:
    """
    Compute the page buttons for the list view.

    Controls are hidden when everything fits on a single page.
    """
    count = page_count(total_count, page_size)
    return PaginationView(
        current_page=current_page,
        page_size=page_size,
        total_count=total_count,
        page_count=count,
        visible=total_count > page_size,
        previous_enabled=current_page > 1,
        next_enabled=current_page < count,
        pages=list(range(1, count + 1)),
    )
