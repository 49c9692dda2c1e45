"""Read-only access to the headless content store.

Single records are resolved through a lookup cascade
(:class:`ContentResolver`); listings come from :class:`CollectionFetcher`.
Both rewrite media URLs to the CDN before returning.
"""

from sitecontent.store.client import StoreClient, encode_query, equality_filter
from sitecontent.store.collections import CollectionFetcher, filter_by_field
from sitecontent.store.content_types import (
    CONTENT_TYPES,
    ContentTypeSpec,
    api_endpoint,
    get_content_type,
)
from sitecontent.store.models import Asset, AssetFormat, ContentRecord, NotFound
from sitecontent.store.resolver import (
    CASCADE,
    ContentResolver,
    LookupStrategy,
    applicable_strategies,
    fetch_supported_locales,
    first_match,
)

__all__ = [
    "CASCADE",
    "CONTENT_TYPES",
    "Asset",
    "AssetFormat",
    "CollectionFetcher",
    "ContentRecord",
    "ContentResolver",
    "ContentTypeSpec",
    "LookupStrategy",
    "NotFound",
    "StoreClient",
    "api_endpoint",
    "applicable_strategies",
    "encode_query",
    "equality_filter",
    "fetch_supported_locales",
    "filter_by_field",
    "first_match",
    "get_content_type",
]
