"""CDN rewriting for media URLs embedded in content store payloads.

Every asset the store hands back points either at a relative upload path
(``/uploads/...``) or at the store's own media host.  Rendering code must
only ever see the CDN origin, so payloads are walked in full and each
string is passed through a single idempotent transform.
"""

from __future__ import annotations

from typing import Union
from urllib.parse import urlencode, urlsplit

from sitecontent.config import CDNConfig

JSONScalar = Union[str, int, float, bool, None]
JSONValue = Union[JSONScalar, list["JSONValue"], dict[str, "JSONValue"]]

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".avif", ".svg")

# name -> (width, height, quality); None means the bare CDN URL
IMAGE_SIZE_PRESETS: dict[str, tuple[int, int | None, int] | None] = {
    "thumbnail": (150, 150, 80),
    "small": (400, None, 85),
    "medium": (800, None, 85),
    "large": (1200, None, 90),
    "original": None,
}


class CDNRewriter:
    """Rewrites store media URLs onto the canonical CDN origin."""

    def __init__(self, config: CDNConfig | None = None) -> None:
        self.config = config or CDNConfig()
        self.origin = self.config.origin
        self.cdn_host = self.config.host
        self.cdn_port = self.config.port
        self.store_host = self.config.store_host.lower()
        self.upload_prefix = self.config.upload_prefix

    def convert(self, url: str) -> str:
        """Convert a single URL to its CDN form.

        Relative upload paths get the CDN origin prepended.  URLs on the
        store host get their host swapped, with scheme, path and query
        kept byte-for-byte.  Anything else is returned unchanged.
        """
        if not url:
            return ""
        if url.startswith(self.upload_prefix):
            return f"{self.origin}{url}"

        try:
            parts = urlsplit(url)
            hostname = parts.hostname
            port = parts.port
        except ValueError:
            return url
        if not hostname or hostname != self.store_host:
            return url

        authority = f"{parts.scheme}://{parts.netloc}" if parts.scheme else f"//{parts.netloc}"
        if not url.startswith(authority):
            return url
        # the CDN origin's own port wins over the store URL's
        port = self.cdn_port if self.cdn_port is not None else port
        netloc = self.cdn_host if port is None else f"{self.cdn_host}:{port}"
        new_authority = f"{parts.scheme}://{netloc}" if parts.scheme else f"//{netloc}"
        return new_authority + url[len(authority):]

    def normalize(self, value: JSONValue) -> JSONValue:
        """Return a copy of *value* with every media URL rewritten.

        Strings are converted directly, lists element-wise, and objects
        field-by-field.  ``url`` fields and every ``formats.<size>.url``
        are handled explicitly, but the generic recursion still visits
        every field of every object.  The input is never mutated.
        """
        if isinstance(value, str):
            return self.convert(value)
        if isinstance(value, list):
            return [self.normalize(item) for item in value]
        if isinstance(value, dict):
            return self._normalize_object(value)
        # int, float, bool, None and anything non-JSON pass through
        return value

    def _normalize_object(self, obj: dict[str, JSONValue]) -> dict[str, JSONValue]:
        processed: dict[str, JSONValue] = {}
        for key, item in obj.items():
            if key == "url" and isinstance(item, str):
                processed[key] = self.convert(item)
            elif key == "formats" and isinstance(item, dict):
                processed[key] = self._normalize_formats(item)
            else:
                processed[key] = self.normalize(item)
        return processed

    def _normalize_formats(self, formats: dict[str, JSONValue]) -> dict[str, JSONValue]:
        result: dict[str, JSONValue] = {}
        for size, variant in formats.items():
            if isinstance(variant, dict):
                result[size] = self._normalize_object(variant)
            else:
                result[size] = self.normalize(variant)
        return result

    def optimized_url(
        self,
        url: str,
        *,
        width: int | None = None,
        height: int | None = None,
        format: str | None = None,
        quality: int | None = None,
    ) -> str:
        """Build a CDN URL carrying resize/format query parameters.

        Parameters are emitted in the order width, height, format,
        quality.  With none of them set the bare CDN URL is returned.
        """
        cdn_url = self.convert(url)
        params: list[tuple[str, str]] = []
        if width:
            params.append(("width", str(width)))
        if height:
            params.append(("height", str(height)))
        if format:
            params.append(("format", format))
        if quality:
            params.append(("quality", str(quality)))

        if not params:
            return cdn_url
        separator = "&" if "?" in cdn_url else "?"
        return f"{cdn_url}{separator}{urlencode(params)}"

    def responsive_url(self, url: str, width: int, format: str = "webp") -> str:
        """Single responsive variant at the default 85 quality."""
        return self.optimized_url(url, width=width, format=format, quality=85)

    def image_sizes(self, url: str) -> dict[str, str]:
        """All preset sizes for one image, keyed by preset name."""
        sizes: dict[str, str] = {}
        for name, preset in IMAGE_SIZE_PRESETS.items():
            if preset is None:
                sizes[name] = self.convert(url)
                continue
            width, height, quality = preset
            sizes[name] = self.optimized_url(
                url, width=width, height=height, format="webp", quality=quality
            )
        return sizes


def is_image_url(url: str) -> bool:
    """Return True if the URL mentions a known image file extension."""
    if not url:
        return False
    lowered = url.lower()
    return any(ext in lowered for ext in IMAGE_EXTENSIONS)
