"""Registry of content types known to the content store.

The store exposes one endpoint per content type, but the names used by
page code and by the API do not always agree (``newsroom`` is served from
``newsrooms``).  Capabilities such as a secondary identifier field are
declared here per type rather than probed at runtime.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ContentTypeSpec(BaseModel):
    """How one content type is addressed in the store."""

    name: str
    endpoint: str
    aliases: list[str] = Field(default_factory=list)
    sort_field: str = "publishedAt"
    secondary_id_field: str | None = None

    @property
    def sort(self) -> str:
        """Newest-first sort expression for collection requests."""
        return f"{self.sort_field}:desc"


CONTENT_TYPES: dict[str, ContentTypeSpec] = {
    spec.name: spec
    for spec in [
        ContentTypeSpec(name="articles", endpoint="articles", aliases=["article"]),
        ContentTypeSpec(name="newsroom", endpoint="newsrooms", aliases=["newsrooms", "news"]),
        ContentTypeSpec(
            name="sectors",
            endpoint="sectors",
            aliases=["sector"],
            # legacy field name as spelled in the store schema
            secondary_id_field="artcileId",
        ),
        ContentTypeSpec(name="events", endpoint="events", aliases=["event"], sort_field="date"),
        ContentTypeSpec(name="resources", endpoint="resources", aliases=["resource"]),
    ]
}

_ALIASES: dict[str, str] = {
    alias: spec.name for spec in CONTENT_TYPES.values() for alias in spec.aliases
}


def get_content_type(name: str) -> ContentTypeSpec:
    """Look up a content type by name or alias.

    Unknown names are treated as a plain endpoint of the same name with
    no secondary identifier, so new types work without a registry entry.
    """
    key = name.strip().strip("/")
    canonical = _ALIASES.get(key, key)
    spec = CONTENT_TYPES.get(canonical)
    if spec is not None:
        return spec
    return ContentTypeSpec(name=key, endpoint=key)


def api_endpoint(name: str) -> str:
    """Map a content type name to its API endpoint segment."""
    return get_content_type(name).endpoint
