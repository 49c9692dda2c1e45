"""Lookup cascade for resolving a single record from an ambiguous identifier.

The store's addressing is inconsistent across content types and schema
versions: some records answer only to their ``documentId`` path segment,
older ones only to a numeric id or a legacy ``slug``.  Rather than make
callers know which applies, the resolver walks an ordered list of lookup
strategies and stops at the first one that yields a record.

Strategies run strictly one after another.  A strategy that raises a
:class:`~sitecontent.errors.StoreError` or returns nothing is a miss and
the cascade moves on; when every strategy misses the caller gets a
:class:`~sitecontent.store.models.NotFound` value, never an exception.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import ValidationError

from sitecontent.errors import StoreError
from sitecontent.i18n.locales import DEFAULT_LOCALE, SUPPORTED_LOCALES, resolve_locale
from sitecontent.media.urls import CDNRewriter
from sitecontent.store.client import StoreClient, equality_filter
from sitecontent.store.content_types import ContentTypeSpec, get_content_type
from sitecontent.store.models import ContentRecord, NotFound

logger = logging.getLogger(__name__)

T = TypeVar("T")
Payload = dict[str, Any]
StrategyFetch = Callable[[StoreClient, ContentTypeSpec, str, str], "Payload | None"]

_NUMERIC_ID = re.compile(r"^\d+$")


def first_match(candidates: Iterable[Callable[[], T | None]]) -> T | None:
    """Call each candidate in order and return the first non-empty result.

    Later candidates are not called once one has matched.
    """
    for candidate in candidates:
        result = candidate()
        if result:
            return result
    return None


def _always(spec: ContentTypeSpec, identifier: str) -> bool:
    return True


@dataclass(frozen=True)
class LookupStrategy:
    """One way of addressing a record in the store."""

    name: str
    fetch: StrategyFetch
    applies: Callable[[ContentTypeSpec, str], bool] = _always


def _detail_params(locale: str) -> list[tuple[str, str]]:
    return [("locale", locale), ("populate", "*")]


def _single(body: Any) -> Payload | None:
    data = body.get("data") if isinstance(body, dict) else None
    if isinstance(data, dict) and data:
        return data
    return None


def _first(body: Any) -> Payload | None:
    data = body.get("data") if isinstance(body, dict) else None
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return data[0]
    return None


def _fetch_by_path(client: StoreClient, spec: ContentTypeSpec, identifier: str, locale: str) -> Payload | None:
    return _single(client.get_document(spec.endpoint, identifier, _detail_params(locale)))


def _filter_on(field: str) -> StrategyFetch:
    def fetch(client: StoreClient, spec: ContentTypeSpec, identifier: str, locale: str) -> Payload | None:
        params = [equality_filter(field, identifier), *_detail_params(locale)]
        return _first(client.get(spec.endpoint, params))

    return fetch


def _fetch_by_secondary_id(
    client: StoreClient, spec: ContentTypeSpec, identifier: str, locale: str
) -> Payload | None:
    if spec.secondary_id_field is None:
        return None
    return _filter_on(spec.secondary_id_field)(client, spec, identifier, locale)


CASCADE: tuple[LookupStrategy, ...] = (
    LookupStrategy("document_id", _fetch_by_path),
    LookupStrategy(
        "numeric_id",
        _fetch_by_path,
        applies=lambda spec, identifier: bool(_NUMERIC_ID.match(identifier)),
    ),
    LookupStrategy("document_id_filter", _filter_on("documentId")),
    LookupStrategy("slug_filter", _filter_on("slug")),
    LookupStrategy(
        "secondary_id",
        _fetch_by_secondary_id,
        applies=lambda spec, identifier: spec.secondary_id_field is not None,
    ),
)


def applicable_strategies(
    spec: ContentTypeSpec,
    identifier: str,
    strategies: Sequence[LookupStrategy] = CASCADE,
) -> list[LookupStrategy]:
    """The strategies that will be tried for this type and identifier, in order."""
    return [s for s in strategies if s.applies(spec, identifier)]


class ContentResolver:
    """Resolves single records through the lookup cascade."""

    def __init__(
        self,
        client: StoreClient,
        rewriter: CDNRewriter | None = None,
        default_locale: str = DEFAULT_LOCALE,
        supported_locales: Sequence[str] = SUPPORTED_LOCALES,
        strategies: Sequence[LookupStrategy] = CASCADE,
    ) -> None:
        self.client = client
        self.rewriter = rewriter or CDNRewriter()
        self.default_locale = default_locale
        self.supported_locales = tuple(supported_locales)
        self.strategies = tuple(strategies)

    def resolve_content(
        self,
        content_type: str,
        identifier: str,
        locale: str | None = None,
        *,
        prefer_variant: bool = False,
    ) -> ContentRecord | NotFound:
        """Resolve *identifier* to a record of *content_type*.

        The cascade always runs against the default locale first.  For a
        non-default *locale* with *prefer_variant* set, it runs again with
        that locale and the locale-specific record wins when one exists.

        Returns:
            The resolved record, or a falsy :class:`NotFound` when every
            applicable strategy missed.
        """
        spec = get_content_type(content_type)
        requested = resolve_locale(locale, self.supported_locales, self.default_locale)
        attempted: list[str] = []

        logger.debug("Resolving %s/%s (%s)", spec.name, identifier, requested)
        record = self._cascade(spec, identifier, self.default_locale, attempted)

        if requested != self.default_locale and prefer_variant:
            variant = self._cascade(spec, identifier, requested, attempted)
            if variant is not None:
                record = variant

        if record is None:
            logger.warning(
                "No %s record for %r (%s) after %d lookups",
                spec.name, identifier, requested, len(attempted),
            )
            return NotFound(
                content_type=spec.name,
                identifier=identifier,
                locale=requested,
                attempted=attempted,
            )
        return record

    def _cascade(
        self,
        spec: ContentTypeSpec,
        identifier: str,
        locale: str,
        attempted: list[str],
    ) -> ContentRecord | None:
        strategies = applicable_strategies(spec, identifier, self.strategies)
        return first_match(
            (lambda s=s: self._attempt(s, spec, identifier, locale, attempted)) for s in strategies
        )

    def _attempt(
        self,
        strategy: LookupStrategy,
        spec: ContentTypeSpec,
        identifier: str,
        locale: str,
        attempted: list[str],
    ) -> ContentRecord | None:
        attempted.append(f"{strategy.name}@{locale}")
        try:
            payload = strategy.fetch(self.client, spec, identifier, locale)
        except StoreError as exc:
            logger.debug("Strategy %s missed for %s/%s: %s", strategy.name, spec.name, identifier, exc)
            return None
        if payload is None:
            logger.debug("Strategy %s found nothing for %s/%s", strategy.name, spec.name, identifier)
            return None

        try:
            record = ContentRecord.model_validate(self.rewriter.normalize(payload))
        except ValidationError:
            logger.warning(
                "Strategy %s returned an unusable %s record for %r",
                strategy.name, spec.name, identifier, exc_info=True,
            )
            return None
        logger.debug("Strategy %s matched %s/%s", strategy.name, spec.name, identifier)
        return record

    def locale_versions(self, content_type: str, document_id: str) -> list[ContentRecord]:
        """Every locale variant of one document, or ``[]`` on failure."""
        spec = get_content_type(content_type)
        params = [
            equality_filter("documentId", document_id),
            ("populate", "*"),
            ("locale", "all"),
        ]
        try:
            body = self.client.get(spec.endpoint, params)
        except StoreError:
            logger.warning("Failed to list locale versions of %s/%s", spec.name, document_id, exc_info=True)
            return []

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, list):
            return []
        records: list[ContentRecord] = []
        for item in self.rewriter.normalize(data):
            try:
                records.append(ContentRecord.model_validate(item))
            except ValidationError:
                logger.warning("Skipping malformed %s locale version", spec.name)
        return records

    def locale_exists(self, content_type: str, document_id: str, locale: str) -> bool:
        """True if *document_id* has a variant in *locale*."""
        return any(v.locale == locale for v in self.locale_versions(content_type, document_id))


def fetch_supported_locales(
    client: StoreClient,
    fallback: Sequence[str] = SUPPORTED_LOCALES,
) -> list[str]:
    """Locale codes enabled in the store, or *fallback* if they can't be read."""
    try:
        body = client.get("i18n/locales")
    except StoreError:
        logger.warning("Failed to read store locales; using %s", list(fallback), exc_info=True)
        return list(fallback)

    if isinstance(body, list):
        codes = [item["code"] for item in body if isinstance(item, dict) and item.get("code")]
        if codes:
            return codes
    logger.warning("Store returned no locales; using %s", list(fallback))
    return list(fallback)
