"""Locale negotiation and the process-wide current-locale context."""

from sitecontent.i18n.context import LocaleContext, LocaleListener
from sitecontent.i18n.locales import (
    DEFAULT_LOCALE,
    LANGUAGE_NAMES,
    SUPPORTED_LOCALES,
    language_name,
    locale_from_path,
    localized_path,
    resolve_locale,
)

__all__ = [
    "DEFAULT_LOCALE",
    "LANGUAGE_NAMES",
    "SUPPORTED_LOCALES",
    "LocaleContext",
    "LocaleListener",
    "language_name",
    "locale_from_path",
    "localized_path",
    "resolve_locale",
]
