"""Media URL handling: CDN rewriting and image variant URLs."""

from sitecontent.media.urls import (
    IMAGE_EXTENSIONS,
    IMAGE_SIZE_PRESETS,
    CDNRewriter,
    JSONValue,
    is_image_url,
)

__all__ = [
    "IMAGE_EXTENSIONS",
    "IMAGE_SIZE_PRESETS",
    "CDNRewriter",
    "JSONValue",
    "is_image_url",
]
