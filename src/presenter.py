"""Keeps displayed content in step with the current locale.

When the locale changes the presenter starts a background load for the
new locale and keeps showing the old content until it completes.  Loads
are not cancelled; instead each one remembers the locale token it
started under and its result is dropped if another switch happened in
the meantime, so the most recently requested locale always wins.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from sitecontent.i18n.context import LocaleContext
from sitecontent.store.models import ContentRecord
from sitecontent.store.resolver import ContentResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")
Loader = Callable[[str], Awaitable["T | None"]]


class ContentPresenter(Generic[T]):
    """Displays content loaded for the context's current locale."""

    def __init__(self, context: LocaleContext, loader: Loader) -> None:
        self.context = context
        self._loader = loader
        self.displayed: T | None = None
        self.displayed_locale: str | None = None
        self._pending: set[asyncio.Task[bool]] = set()
        self._unsubscribe = context.subscribe(self._on_locale_change)

    @classmethod
    def for_resolver(
        cls,
        context: LocaleContext,
        resolver: ContentResolver,
        content_type: str,
        identifier: str,
        *,
        prefer_variant: bool = True,
    ) -> ContentPresenter[ContentRecord]:
        """Presenter for one record, re-resolved on every locale switch."""

        async def load(locale: str) -> ContentRecord | None:
            result = await asyncio.to_thread(
                resolver.resolve_content,
                content_type,
                identifier,
                locale,
                prefer_variant=prefer_variant,
            )
            return result if isinstance(result, ContentRecord) else None

        return cls(context, load)

    @property
    def pending(self) -> int:
        """Number of loads still in flight."""
        return len(self._pending)

    async def refresh(self) -> bool:
        """Load content for the current locale and display it.

        Returns:
            True if the result was applied, False if it was stale or the
            load failed.
        """
        return await self._load(self.context.current, self.context.token)

    async def wait_idle(self) -> None:
        """Wait until every scheduled load has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def close(self) -> None:
        self._unsubscribe()

    def _on_locale_change(self, locale: str, token: int) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("Locale switched to %s with no event loop running; call refresh()", locale)
            return
        task = loop.create_task(self._load(locale, token))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _load(self, locale: str, token: int) -> bool:
        try:
            content = await self._loader(locale)
        except Exception:
            logger.warning("Loading content for %s failed", locale, exc_info=True)
            return False

        if not self.context.is_current(token):
            logger.debug(
                "Discarding stale %s content (token %d, current %d)",
                locale, token, self.context.token,
            )
            return False

        self.displayed = content
        self.displayed_locale = locale
        return True
