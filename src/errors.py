"""Error types raised by the content store transport.

Only the HTTP client raises these.  The resolver and the collection
fetcher catch :class:`StoreError` at their boundaries and degrade to a
miss, an empty collection, or a :class:`~sitecontent.store.models.NotFound`
value.
"""

from __future__ import annotations


class SiteContentError(Exception):
    """Base error for the sitecontent package."""


class StoreError(SiteContentError):
    """A request to the content store failed."""


class StoreHTTPError(StoreError):
    """The content store answered with a non-2xx status."""

    def __init__(self, status: int, url: str, message: str = "") -> None:
        self.status = status
        self.url = url
        self.message = message
        detail = f": {message}" if message else ""
        super().__init__(f"HTTP {status} for {url}{detail}")

    @property
    def is_forbidden(self) -> bool:
        return self.status == 403


class StoreConnectionError(StoreError):
    """The content store could not be reached."""


class StoreDecodeError(StoreError):
    """The content store returned a body that is not valid JSON."""
