"""Process-wide current-locale state with change notification.

The context is the single source of truth for the active locale.
Anything that displays locale-dependent content subscribes to it and
re-resolves on change.  The ``token`` counter lets an in-flight load
tell whether its locale is still the one being shown.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from sitecontent.i18n.locales import DEFAULT_LOCALE, SUPPORTED_LOCALES, resolve_locale

logger = logging.getLogger(__name__)

LocaleListener = Callable[[str, int], None]


class LocaleContext:
    """Holds the current locale and notifies subscribers when it changes.

    Subscribers are called synchronously, in subscription order, with the
    new locale and the new token.
    """

    def __init__(
        self,
        initial_hint: str | None = None,
        supported: Sequence[str] = SUPPORTED_LOCALES,
        default: str = DEFAULT_LOCALE,
    ) -> None:
        self.supported = tuple(supported)
        self.default = default
        self._current = resolve_locale(initial_hint, self.supported, self.default)
        self._token = 0
        self._listeners: list[LocaleListener] = []

    @property
    def current(self) -> str:
        return self._current

    @property
    def token(self) -> int:
        return self._token

    def resolve(self, code: str | None) -> str:
        return resolve_locale(code, self.supported, self.default)

    def set_current(self, code: str | None) -> str:
        """Switch the current locale and notify subscribers.

        Unsupported codes resolve to the default locale.  Setting the
        locale that is already current does nothing.

        Returns:
            The resolved locale now in effect.
        """
        locale = self.resolve(code)
        if locale == self._current:
            return locale

        previous = self._current
        self._current = locale
        self._token += 1
        logger.debug("Locale changed %s -> %s (token %d)", previous, locale, self._token)

        for listener in list(self._listeners):
            try:
                listener(locale, self._token)
            except Exception:
                logger.warning("Locale listener %r failed", listener, exc_info=True)
        return locale

    def subscribe(self, listener: LocaleListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def is_current(self, token: int) -> bool:
        """True if no locale switch happened since *token* was taken."""
        return token == self._token
