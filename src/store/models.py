"""Content store domain models: pure Pydantic v2 data types.

Records are read-only projections of remote state.  The store has served
two payload shapes over time: flat records (``{"id": 1, "title": ...}``)
and legacy records nesting fields under ``attributes`` with media wrapped
in ``{"data": {"attributes": {...}}}``.  Both are accepted here.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _unwrap_media(data: Any) -> Any:
    """Strip the legacy ``{"data": {"attributes": {...}}}`` media wrapper."""
    if not isinstance(data, dict) or set(data) - {"data"}:
        return data
    inner = data.get("data")
    if isinstance(inner, dict):
        attrs = inner.get("attributes")
        if isinstance(attrs, dict):
            return {**attrs, **({"id": inner["id"]} if "id" in inner else {})}
        return inner
    return inner


class AssetFormat(BaseModel):
    """One resized variant of an asset (``thumbnail``, ``small``, ...)."""

    model_config = ConfigDict(extra="allow")

    url: str
    width: int | None = None
    height: int | None = None


class Asset(BaseModel):
    """A media reference attached to a record."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    url: str
    alternative_text: str | None = Field(default=None, alias="alternativeText")
    name: str | None = None
    ext: str | None = None
    width: int | None = None
    height: int | None = None
    formats: dict[str, AssetFormat] | None = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap(cls, data: Any) -> Any:
        return _unwrap_media(data)


class ContentRecord(BaseModel):
    """A resolved record from the content store.

    ``document_id`` is stable across locale variants of one document and
    is the only valid cross-locale join key; ``id`` differs per variant.
    Content-type-specific fields are kept as extras.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int
    document_id: str | None = Field(default=None, alias="documentId")
    title: str | None = None
    slug: str | None = None
    locale: str | None = None
    content: str | None = None
    description: str | None = None
    cover: Asset | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    published_at: datetime | None = Field(default=None, alias="publishedAt")

    @model_validator(mode="before")
    @classmethod
    def _flatten_attributes(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        attrs = data.get("attributes")
        if isinstance(attrs, dict):
            data = {**attrs, **{k: v for k, v in data.items() if k != "attributes"}}
        cover = data.get("cover")
        if isinstance(cover, dict):
            unwrapped = _unwrap_media(cover)
            data = {**data, "cover": unwrapped if unwrapped else None}
        return data

    @property
    def route_key(self) -> str:
        """Identifier used in detail-page URLs: documentId, else id."""
        return self.document_id or str(self.id)

    def field(self, name: str, default: Any = None) -> Any:
        """Look up a declared or content-type-specific field by wire name."""
        extras = self.model_extra or {}
        if name in extras:
            return extras[name]
        for field_name, info in type(self).model_fields.items():
            if name in (field_name, info.alias):
                return getattr(self, field_name)
        return default


class NotFound(BaseModel):
    """Result of a resolution where every lookup strategy missed."""

    content_type: str
    identifier: str
    locale: str
    attempted: list[str] = Field(default_factory=list)

    def __bool__(self) -> bool:
        return False
