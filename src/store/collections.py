"""Collection fetching for listing pages.

A failed content list must never fail a page render, so every failure
here degrades to an empty collection.  The one exception is a 403 on a
localized request: the store sometimes refuses the ``locale`` parameter
for read-only tokens, in which case the request is retried once without
it and default-locale content is served instead.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from sitecontent.errors import StoreError, StoreHTTPError
from sitecontent.i18n.locales import DEFAULT_LOCALE
from sitecontent.media.urls import CDNRewriter
from sitecontent.store.client import StoreClient, equality_filter
from sitecontent.store.content_types import get_content_type
from sitecontent.store.models import ContentRecord

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_CAP = 100


class CollectionFetcher:
    """Fetches whole (or capped) collections of one content type."""

    def __init__(
        self,
        client: StoreClient,
        rewriter: CDNRewriter | None = None,
        default_locale: str = DEFAULT_LOCALE,
        collection_cap: int = DEFAULT_COLLECTION_CAP,
    ) -> None:
        self.client = client
        self.rewriter = rewriter or CDNRewriter()
        self.default_locale = default_locale
        self.collection_cap = collection_cap

    def fetch_collection(
        self,
        content_type: str,
        locale: str | None = None,
        limit: int | None = None,
        filters: Mapping[str, str] | None = None,
    ) -> list[ContentRecord]:
        """Fetch records of *content_type*, newest first.

        Args:
            content_type: Content type name or alias.
            locale: Locale to request; ``None`` omits the parameter.
            limit: Maximum records; defaults to the collection cap.
            filters: Optional field equality filters.

        Returns:
            Records with media URLs rewritten, or ``[]`` on any failure.
        """
        spec = get_content_type(content_type)
        params: list[tuple[str, str]] = [equality_filter(k, v) for k, v in (filters or {}).items()]
        params += [
            ("sort", spec.sort),
            ("populate", "*"),
            ("pagination[limit]", str(limit or self.collection_cap)),
        ]
        localized = [*params, ("locale", locale)] if locale else params

        try:
            body = self.client.get(spec.endpoint, localized)
        except StoreHTTPError as exc:
            if exc.is_forbidden and locale and locale != self.default_locale:
                logger.warning(
                    "403 fetching %s with locale=%s; retrying without locale", spec.name, locale
                )
                return self._fetch_unlocalized(spec.name, spec.endpoint, params)
            logger.warning("Failed to fetch %s (%s): %s", spec.name, locale, exc)
            return []
        except StoreError:
            logger.warning("Failed to fetch %s (%s)", spec.name, locale, exc_info=True)
            return []

        records = self._to_records(spec.name, body)
        logger.debug("Fetched %d %s records (%s)", len(records), spec.name, locale)
        return records

    def _fetch_unlocalized(
        self, name: str, endpoint: str, params: list[tuple[str, str]]
    ) -> list[ContentRecord]:
        try:
            body = self.client.get(endpoint, params)
        except StoreError:
            logger.warning("Fallback fetch of %s without locale also failed", name, exc_info=True)
            return []
        records = self._to_records(name, body)
        logger.info("Fallback fetch of %s returned %d records", name, len(records))
        return records

    def _to_records(self, name: str, body: Any) -> list[ContentRecord]:
        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, list):
            logger.warning("Invalid %s collection payload", name)
            return []

        records: list[ContentRecord] = []
        for item in self.rewriter.normalize(data):
            try:
                records.append(ContentRecord.model_validate(item))
            except ValidationError as exc:
                logger.warning("Skipping malformed %s record: %s", name, exc.errors()[:1])
        return records

    async def fetch_collections_by_locale(
        self,
        content_type: str,
        locales: Sequence[str],
        limit: int | None = None,
    ) -> dict[str, list[ContentRecord]]:
        """Fetch one collection per locale concurrently.

        The blocking fetches run in worker threads and are all awaited
        before returning.  Keys follow the order of *locales*.
        """
        results = await asyncio.gather(
            *(
                asyncio.to_thread(self.fetch_collection, content_type, locale, limit)
                for locale in locales
            )
        )
        return dict(zip(locales, results))


def filter_by_field(records: Sequence[ContentRecord], field: str, value: Any) -> list[ContentRecord]:
    """Keep records whose *field* (wire name) equals *value*."""
    return [r for r in records if r.field(field) == value]
