"""Client-side pagination of result sets and compact page-index lists."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final, TypeVar

from wiki_searcher.models import PageState

T = TypeVar("T")

# Marker for a collapsed run of page numbers
ELLIPSIS: Final = "..."

PageLabel = int | str


def paginate(items: Sequence[T], page: int, page_size: int) -> list[T]:
    """Return the items on 1-based ``page``.

    Out-of-range pages yield an empty list rather than raising.
    """
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    if page < 1:
        return []
    start = (page - 1) * page_size
    return list(items[start : start + page_size])


def page_count(item_count: int, page_size: int) -> int:
    """Number of pages needed for ``item_count`` items (0 when empty)."""
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    if item_count <= 0:
        return 0
    return -(-item_count // page_size)


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp ``page`` into ``[1, max(total_pages, 1)]``."""
    return max(1, min(page, max(total_pages, 1)))


def renderable_page_list(current: int, total: int) -> list[PageLabel]:
    """Build the page buttons to show, collapsing long gaps.

    Page 1, page ``total`` and every page within one of ``current`` are
    always listed. A gap hiding a single page shows that page instead of
    a marker; longer gaps become one ELLIPSIS.

    >>> renderable_page_list(5, 10)
    [1, '...', 4, 5, 6, '...', 10]
    >>> renderable_page_list(1, 3)
    [1, 2, 3]
    """
    if total <= 0:
        return []
    current = clamp_page(current, total)
    anchors = sorted(
        {1, total} | {p for p in (current - 1, current, current + 1) if 1 <= p <= total}
    )

    labels: list[PageLabel] = []
    previous: int | None = None
    for page in anchors:
        if previous is not None:
            gap = page - previous - 1
            if gap == 1:
                labels.append(previous + 1)
            elif gap > 1:
                labels.append(ELLIPSIS)
        labels.append(page)
        previous = page
    return labels


def page_state_for(item_count: int, page_size: int, current_page: int = 1) -> PageState:
    """Build a clamped PageState for a result set."""
    total = page_count(item_count, page_size)
    return PageState(current_page=clamp_page(current_page, total), total_pages=total)


def next_page(state: PageState) -> PageState:
    return PageState(current_page=state.current_page + 1, total_pages=state.total_pages)


def previous_page(state: PageState) -> PageState:
    return PageState(current_page=state.current_page - 1, total_pages=state.total_pages)


def go_to_page(state: PageState, page: int) -> PageState:
    return PageState(current_page=page, total_pages=state.total_pages)


__all__ = [
    "ELLIPSIS",
    "PageLabel",
    "clamp_page",
    "go_to_page",
    "next_page",
    "page_count",
    "page_state_for",
    "paginate",
    "previous_page",
    "renderable_page_list",
]
