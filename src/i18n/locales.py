"""Supported locales and locale negotiation helpers."""

from __future__ import annotations

from collections.abc import Sequence

SUPPORTED_LOCALES: tuple[str, ...] = ("en", "zh-Hans")
DEFAULT_LOCALE = "en"

LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "zh-Hans": "中文",
}


def resolve_locale(
    code: str | None,
    supported: Sequence[str] = SUPPORTED_LOCALES,
    default: str = DEFAULT_LOCALE,
) -> str:
    """Return *code* if it is supported, otherwise the default locale."""
    if code and code in supported:
        return code
    return default


def locale_from_path(
    path: str,
    supported: Sequence[str] = SUPPORTED_LOCALES,
    default: str = DEFAULT_LOCALE,
) -> str:
    """Derive a locale hint from a routed path such as ``/zh-Hans/sectors``.

    The first path segment naming a supported locale wins; paths without
    one belong to the default locale.
    """
    for segment in path.split("?", 1)[0].split("/"):
        if segment and segment in supported:
            return segment
    return default


def localized_path(path: str, locale: str, default: str = DEFAULT_LOCALE) -> str:
    """Prefix *path* with the locale segment unless it is the default."""
    if not path.startswith("/"):
        path = f"/{path}"
    if locale == default:
        return path
    if path == "/":
        return f"/{locale}"
    return f"/{locale}{path}"


def language_name(code: str, default: str = DEFAULT_LOCALE) -> str:
    """Human-readable language name for a locale code."""
    return LANGUAGE_NAMES.get(code) or LANGUAGE_NAMES.get(default, default)
