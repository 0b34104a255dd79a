"""Page slicing helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class Page(Generic[T]):
    items: tuple[T, ...]
    page: int
    total_pages: int


def page_count(total: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    return math.ceil(max(0, total) / page_size)


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Return the ``page``-th slice of ``items`` (1-based).

    Page numbers outside ``[1, total_pages]`` yield an empty slice instead of
    raising; wrapping is left to the caller.
    """

    total = len(items)
    total_pages = page_count(total, page_size)
    start = (page - 1) * page_size
    if start < 0 or start >= total:
        return Page(items=(), page=page, total_pages=total_pages)
    end = min(start + page_size, total)
    return Page(items=tuple(items[start:end]), page=page, total_pages=total_pages)


def wrap_page(page: int, total_pages: int) -> int:
    """Map any integer onto ``[1, total_pages]``, cycling past either end."""

    if total_pages <= 0:
        return 1
    return (page - 1) % total_pages + 1


def previous_page(current: int, total_pages: int) -> int:
    target = current - 1
    if target < 1:
        target = total_pages
    return wrap_page(target, total_pages)


def next_page(current: int, total_pages: int) -> int:
    target = current + 1
    if target > total_pages:
        target = 1
    return wrap_page(target, total_pages)


__all__ = ["Page", "next_page", "page_count", "paginate", "previous_page", "wrap_page"]
