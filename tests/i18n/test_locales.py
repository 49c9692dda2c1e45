"""Tests for locale negotiation helpers and LocaleContext."""

from unittest.mock import MagicMock

import pytest

from sitecontent.i18n import (
    DEFAULT_LOCALE,
    LocaleContext,
    language_name,
    locale_from_path,
    localized_path,
    resolve_locale,
)


class TestResolveLocale:
    @pytest.mark.parametrize("code", ["en", "zh-Hans"])
    def test_supported_code_returned(self, code):
        assert resolve_locale(code) == code

    @pytest.mark.parametrize("code", ["fr", "zh", "EN", "", None])
    def test_unknown_falls_back_to_default(self, code):
        assert resolve_locale(code) == DEFAULT_LOCALE

    def test_custom_supported_set(self):
        assert resolve_locale("fr", supported=["en", "fr"], default="en") == "fr"
        assert resolve_locale("de", supported=["en", "fr"], default="fr") == "fr"


class TestPaths:
    def test_locale_from_path(self):
        assert locale_from_path("/zh-Hans/sectors/page/2") == "zh-Hans"
        assert locale_from_path("/en/newsroom") == "en"
        assert locale_from_path("/sectors") == "en"
        assert locale_from_path("/sectors?lang=zh-Hans") == "en"

    def test_localized_path(self):
        assert localized_path("/sectors/page/2", "zh-Hans") == "/zh-Hans/sectors/page/2"
        assert localized_path("/sectors/page/2", "en") == "/sectors/page/2"
        assert localized_path("events", "en") == "/events"
        assert localized_path("/", "zh-Hans") == "/zh-Hans"

    def test_language_name(self):
        assert language_name("en") == "English"
        assert language_name("zh-Hans") == "中文"
        assert language_name("xx") == "English"


class TestLocaleContext:
    def test_initial_hint_resolved(self):
        assert LocaleContext("zh-Hans").current == "zh-Hans"
        assert LocaleContext("klingon").current == "en"
        assert LocaleContext().current == "en"

    def test_set_current_notifies_in_order(self):
        ctx = LocaleContext("en")
        calls: list[tuple[str, str, int]] = []
        ctx.subscribe(lambda loc, tok: calls.append(("first", loc, tok)))
        ctx.subscribe(lambda loc, tok: calls.append(("second", loc, tok)))

        assert ctx.set_current("zh-Hans") == "zh-Hans"

        assert calls == [("first", "zh-Hans", 1), ("second", "zh-Hans", 1)]
        assert ctx.current == "zh-Hans"
        assert ctx.token == 1

    def test_same_locale_is_noop(self):
        ctx = LocaleContext("en")
        listener = MagicMock()
        ctx.subscribe(listener)
        ctx.set_current("en")
        listener.assert_not_called()
        assert ctx.token == 0

    def test_unsupported_code_switches_to_default(self):
        ctx = LocaleContext("zh-Hans")
        assert ctx.set_current("fr") == "en"
        assert ctx.current == "en"

    def test_unsubscribe(self):
        ctx = LocaleContext()
        listener = MagicMock()
        unsubscribe = ctx.subscribe(listener)
        unsubscribe()
        unsubscribe()  # second call is harmless
        ctx.set_current("zh-Hans")
        listener.assert_not_called()

    def test_failing_listener_does_not_block_others(self):
        ctx = LocaleContext()
        ctx.subscribe(MagicMock(side_effect=RuntimeError("boom")))
        after = MagicMock()
        ctx.subscribe(after)
        ctx.set_current("zh-Hans")
        after.assert_called_once_with("zh-Hans", 1)

    def test_is_current_tracks_token(self):
        ctx = LocaleContext()
        token = ctx.token
        ctx.set_current("zh-Hans")
        assert not ctx.is_current(token)
        assert ctx.is_current(ctx.token)
