"""Path enumeration for the static build."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from sitecontent.i18n.locales import DEFAULT_LOCALE, SUPPORTED_LOCALES, localized_path
from sitecontent.staticgen.pagination import PaginationPlan, plan
from sitecontent.store.collections import CollectionFetcher
from sitecontent.store.models import ContentRecord

logger = logging.getLogger(__name__)


def detail_paths(records: Iterable[ContentRecord]) -> list[str]:
    """Route keys a detail page must be generated for.

    Each record contributes its documentId (or id) and, when it differs,
    its slug.  Duplicates are dropped, first occurrence wins.
    """
    seen: set[str] = set()
    keys: list[str] = []
    for record in records:
        candidates = [record.route_key]
        if record.slug and record.slug != record.route_key:
            candidates.append(record.slug)
        for key in candidates:
            if key not in seen:
                seen.add(key)
                keys.append(key)
    return keys


def listing_paths(
    base: str,
    pagination: PaginationPlan,
    locale: str = DEFAULT_LOCALE,
    default_locale: str = DEFAULT_LOCALE,
) -> list[str]:
    """Full URL paths of every listing page, e.g. ``/zh-Hans/sectors/page/2``."""
    base = base.rstrip("/")
    return [
        localized_path(f"{base}/page/{number}", locale, default_locale)
        for number in pagination.static_paths()
    ]


async def plan_listing(
    fetcher: CollectionFetcher,
    content_type: str,
    items_per_page: int,
    locales: Sequence[str] = SUPPORTED_LOCALES,
) -> PaginationPlan[ContentRecord]:
    """Fetch every locale's collection concurrently, then plan the pages."""
    collections = await fetcher.fetch_collections_by_locale(content_type, locales)
    listing = plan(collections, items_per_page, preference=locales)
    logger.info(
        "Planned %d page(s) of %s from %s (%d items)",
        listing.total_pages,
        content_type,
        listing.canonical_locale or "no locale",
        listing.total_items,
    )
    return listing
