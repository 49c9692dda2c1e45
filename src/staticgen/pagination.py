"""Fixed-size page partitioning for statically generated listings.

Listings are built for every locale, but the locales' collections can
differ in size or be missing entirely.  One canonical collection (the
first non-empty one in locale preference order) drives the page count,
so the same set of page numbers is emitted for every locale.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from sitecontent.i18n.locales import SUPPORTED_LOCALES

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One contiguous slice of a paginated collection."""

    page_number: int
    items_per_page: int
    items: list[T] = Field(default_factory=list)
    total_items: int
    total_pages: int

    @property
    def first_item_number(self) -> int:
        """1-based position of the first item shown, 0 on an empty page."""
        if not self.items:
            return 0
        return (self.page_number - 1) * self.items_per_page + 1

    @property
    def last_item_number(self) -> int:
        if not self.items:
            return 0
        return self.first_item_number + len(self.items) - 1

    @property
    def has_previous(self) -> bool:
        return self.page_number > 1

    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages


class PaginationPlan(Generic[T]):
    """Page layout derived from a canonical collection."""

    def __init__(
        self,
        items: Sequence[T],
        items_per_page: int,
        canonical_locale: str | None = None,
    ) -> None:
        if items_per_page < 1:
            raise ValueError(f"items_per_page must be positive, got {items_per_page}")
        self.items = list(items)
        self.items_per_page = items_per_page
        self.canonical_locale = canonical_locale

    @property
    def total_items(self) -> int:
        return len(self.items)

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total_items / self.items_per_page))

    def page_numbers(self) -> range:
        return range(1, self.total_pages + 1)

    def page_of(self, page_number: int) -> Page[T] | None:
        """The page at *page_number*, or None if it is out of range."""
        if page_number not in self.page_numbers():
            return None
        start = (page_number - 1) * self.items_per_page
        return Page(
            page_number=page_number,
            items_per_page=self.items_per_page,
            items=self.items[start:start + self.items_per_page],
            total_items=self.total_items,
            total_pages=self.total_pages,
        )

    def pages(self) -> list[Page[T]]:
        return [page for n in self.page_numbers() if (page := self.page_of(n)) is not None]

    def static_paths(self) -> list[str]:
        """One page identifier per page number, for static generation."""
        return [str(n) for n in self.page_numbers()]


def canonical_locale(
    collections_by_locale: Mapping[str, Sequence[Any]],
    preference: Sequence[str] = SUPPORTED_LOCALES,
) -> str | None:
    """First locale, in preference order, whose collection is non-empty.

    Locales missing from *preference* are considered after it, in mapping
    order.  Returns None when every collection is empty.
    """
    order = [code for code in preference if code in collections_by_locale]
    order += [code for code in collections_by_locale if code not in order]
    for code in order:
        if collections_by_locale[code]:
            return code
    return None


def plan(
    collections_by_locale: Mapping[str, Sequence[T]],
    items_per_page: int,
    preference: Sequence[str] = SUPPORTED_LOCALES,
) -> PaginationPlan[T]:
    """Plan the pages for a listing from its per-locale collections."""
    locale = canonical_locale(collections_by_locale, preference)
    items: Sequence[T] = collections_by_locale[locale] if locale is not None else []
    return PaginationPlan(items, items_per_page, canonical_locale=locale)


def visible_pages(current: int, total: int, max_visible: int = 5) -> list[int]:
    """Sliding window of page numbers to link from a pagination bar.

    The window is centred on *current* where possible and shifted to stay
    within ``[1, total]``.
    """
    if total < 1:
        return []
    start = max(1, current - max_visible // 2)
    end = min(total, start + max_visible - 1)
    if end - start + 1 < max_visible:
        start = max(1, end - max_visible + 1)
    return list(range(start, end + 1))


def parse_page_number(raw: str | int | None) -> int | None:
    """Parse a routed page parameter; None unless it is a positive integer."""
    if raw is None:
        return None
    if isinstance(raw, int):
        return raw if raw >= 1 else None
    text = raw.strip()
    if not text.isascii() or not text.isdigit():
        return None
    number = int(text)
    return number if number >= 1 else None
