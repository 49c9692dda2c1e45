"""HTTP client for the headless content store's REST API.

Read-only.  Handles bearer-token authentication, the store's bracketed
query syntax (``filters[slug][$eq]=...``), and maps transport failures
onto :mod:`sitecontent.errors`.
"""

from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.request
from typing import Any
from urllib.parse import quote, urlencode

from sitecontent.config import StoreConfig
from sitecontent.errors import StoreConnectionError, StoreDecodeError, StoreHTTPError

logger = logging.getLogger(__name__)

# Characters left unescaped in query strings so bracketed params stay readable.
_QUERY_SAFE = "[]$:*"


def equality_filter(field: str, value: str) -> tuple[str, str]:
    """Query pair for a ``field == value`` filter."""
    return (f"filters[{field}][$eq]", value)


def encode_query(params: list[tuple[str, str]]) -> str:
    return urlencode(params, safe=_QUERY_SAFE)


class StoreClient:
    """Client for the content store REST API.

    Every method issues exactly one HTTP request.  Failures raise
    :class:`~sitecontent.errors.StoreError` subclasses; deciding whether a
    failure is a miss is left to the caller.
    """

    def __init__(self, config: StoreConfig | None = None) -> None:
        self.config = config or StoreConfig()
        self.base_url = self.config.api_url.rstrip("/")
        if self.config.api_token and not self.config.is_authenticated:
            logger.warning("Store API token is a placeholder; sending unauthenticated requests")

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        token = self.config.bearer_token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def build_url(self, path: str, params: list[tuple[str, str]] | None = None) -> str:
        url = f"{self.base_url}/{path.lstrip('/')}"
        if params:
            url = f"{url}?{encode_query(params)}"
        return url

    def get(self, path: str, params: list[tuple[str, str]] | None = None) -> Any:
        """GET *path* and return the decoded JSON body."""
        url = self.build_url(path, params)
        req = urllib.request.Request(url, method="GET", headers=self._headers())
        logger.debug("GET %s", url)

        try:
            with urllib.request.urlopen(req, timeout=self.config.timeout) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as exc:
            raise StoreHTTPError(exc.code, url, _error_message(exc)) from exc
        except (urllib.error.URLError, http.client.HTTPException, OSError) as exc:
            raise StoreConnectionError(f"Could not reach {url}: {exc}") from exc

        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StoreDecodeError(f"Invalid JSON from {url}") from exc

    def get_document(
        self,
        endpoint: str,
        key: str,
        params: list[tuple[str, str]] | None = None,
    ) -> Any:
        """GET a single record addressed by a path segment."""
        return self.get(f"{endpoint}/{quote(key, safe='')}", params)


def _error_message(exc: urllib.error.HTTPError) -> str:
    """Pull ``error.message`` out of a store error body, if any."""
    try:
        body = json.loads(exc.read().decode("utf-8"))
    except (ValueError, OSError, http.client.HTTPException, AttributeError, KeyError):
        return str(exc.reason or "")
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return str(exc.reason or "")
