"""Pagination over sorted, filtered results. Pages are 1-based."""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


def total_pages(count: int, page_size: int) -> int:
    """Number of pages needed for ``count`` items, minimum 0."""
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
    return max(0, math.ceil(count / page_size))


def paginate(items: Sequence[T], page: int, page_size: int) -> list[T]:
    """
    Return the slice ``[(page-1)*page_size, page*page_size)`` of ``items``.

    Pages outside ``1..total_pages`` yield an empty list.

    Raises:
        ValueError: If ``page_size`` is below 1.
    """
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
    if page < 1:
        return []
    start = (page - 1) * page_size
    return list(items[start:start + page_size])


def clamp_page(page: int, pages: int) -> int:
    """Clamp a page number into ``1..pages`` (1 when there are no pages)."""
    if pages < 1:
        return 1
    return min(max(page, 1), pages)


def page_numbers(current: int, pages: int, max_visible: int = 5) -> list[int]:
    """
    Page numbers to show in a pagination bar.

    Shows every page when there are at most ``max_visible``; otherwise a window of
    ``max_visible`` pages centred on ``current`` and pinned to either end.
    """
    if pages <= max_visible:
        return list(range(1, pages + 1))

    half = max_visible // 2
    if current <= half + 1:
        start = 1
    elif current >= pages - half:
        start = pages - max_visible + 1
    else:
        start = current - half
    return list(range(start, start + max_visible))


@dataclass
class Page(Generic[T]):
    """One page of results with its pagination metadata."""

    items: list[T] = field(default_factory=list)
    page: int = 1
    page_size: int = 12
    total_items: int = 0
    total_pages: int = 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


def build_page(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Paginate ``items`` and wrap the slice with its metadata."""
    return Page(
        items=paginate(items, page, page_size),
        page=page,
        page_size=page_size,
        total_items=len(items),
        total_pages=total_pages(len(items), page_size),
    )
