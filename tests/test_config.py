"""Tests for src/config.py: SiteContentConfig, TOML loading, env and CLI overrides."""

from pathlib import Path

import pytest
from sitecontent.config import (
    CDNConfig,
    LocalesConfig,
    SiteContentConfig,
    StoreConfig,
    load_config,
    merge_cli_overrides,
)

ENV_VARS = (
    "STRAPI_API_URL",
    "NEXT_PUBLIC_STRAPI_API_URL",
    "STRAPI_API_TOKEN",
    "SITECONTENT_CDN_ORIGIN",
    "SITECONTENT_STORE_HOST",
    "SITECONTENT_DEFAULT_LOCALE",
    "SITECONTENT_TIMEOUT",
    "SITECONTENT_COLLECTION_CAP",
    "SITECONTENT_ITEMS_PER_PAGE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Remove env vars that _apply_env_vars reads so tests see TOML values."""
    for key in ENV_VARS:
        monkeypatch.delenv(key, raising=False)


class TestDefaults:
    def test_store(self):
        cfg = SiteContentConfig()
        assert cfg.store.api_url == "http://localhost:1337/api"
        assert cfg.store.timeout == 15
        assert cfg.store.collection_cap == 100
        assert cfg.store.is_authenticated is False

    def test_pagination_and_locales(self):
        cfg = SiteContentConfig()
        assert cfg.pagination.items_per_page == 12
        assert cfg.locales.supported == ["en", "zh-Hans"]
        assert cfg.locales.default == "en"


class TestStoreToken:
    @pytest.mark.parametrize("token", ["", "   ", "your_readonly_token_here", "your_api_token_here"])
    def test_placeholder_or_empty_means_unauthenticated(self, token):
        cfg = StoreConfig(api_token=token)
        assert cfg.bearer_token is None
        assert not cfg.is_authenticated

    def test_real_token(self):
        cfg = StoreConfig(api_token=" abc123 ")
        assert cfg.bearer_token == "abc123"
        assert cfg.is_authenticated

    def test_custom_placeholder_list(self):
        cfg = StoreConfig(api_token="changeme", placeholder_tokens=["changeme"])
        assert cfg.bearer_token is None


def test_cdn_origin_trailing_slash_stripped():
    cfg = CDNConfig(origin="https://cdn.test/")
    assert cfg.origin == "https://cdn.test"
    assert cfg.host == "cdn.test"
    assert cfg.port is None


def test_cdn_host_excludes_port():
    cfg = CDNConfig(origin="https://CDN.test:8443")
    assert cfg.host == "cdn.test"
    assert cfg.port == 8443


def test_locale_preference_puts_default_first():
    cfg = LocalesConfig(supported=["en", "zh-Hans", "fr"], default="zh-Hans")
    assert cfg.preference == ("zh-Hans", "en", "fr")


class TestLoadConfig:
    def test_explicit_toml(self, tmp_path: Path):
        path = tmp_path / "site.toml"
        path.write_text(
            '[store]\napi_url = "https://cms.test/api"\ntimeout = 5\n'
            '[cdn]\norigin = "https://cdn.test/"\n'
            "[pagination]\nitems_per_page = 9\n"
        )
        cfg = load_config(path)
        assert cfg.store.api_url == "https://cms.test/api"
        assert cfg.store.timeout == 5
        assert cfg.cdn.origin == "https://cdn.test"
        assert cfg.pagination.items_per_page == 9
        assert cfg.locales.default == "en"

    def test_missing_file_gives_defaults(self, tmp_path: Path):
        cfg = load_config(tmp_path / "nope.toml")
        assert cfg == SiteContentConfig()

    def test_invalid_toml_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text("[store\napi_url = ")
        cfg = load_config(path)
        assert cfg.store.api_url == "http://localhost:1337/api"

    def test_cwd_search(self, tmp_path: Path, monkeypatch):
        (tmp_path / ".sitecontent.toml").write_text('[locales]\ndefault = "zh-Hans"\n')
        monkeypatch.chdir(tmp_path)
        cfg = load_config()
        assert cfg.locales.default == "zh-Hans"


class TestEnvOverlay:
    def test_env_beats_toml(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "site.toml"
        path.write_text('[store]\napi_url = "https://from-toml/api"\n')
        monkeypatch.setenv("STRAPI_API_URL", "https://from-env/api")
        monkeypatch.setenv("STRAPI_API_TOKEN", "tok")
        cfg = load_config(path)
        assert cfg.store.api_url == "https://from-env/api"
        assert cfg.store.bearer_token == "tok"

    def test_server_url_beats_public_url(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("NEXT_PUBLIC_STRAPI_API_URL", "https://public/api")
        monkeypatch.setenv("STRAPI_API_URL", "https://server/api")
        assert load_config(tmp_path / "none.toml").store.api_url == "https://server/api"

    def test_public_url_used_alone(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("NEXT_PUBLIC_STRAPI_API_URL", "https://public/api")
        assert load_config(tmp_path / "none.toml").store.api_url == "https://public/api"

    def test_int_env_vars(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("SITECONTENT_ITEMS_PER_PAGE", "20")
        monkeypatch.setenv("SITECONTENT_TIMEOUT", "not-a-number")
        cfg = load_config(tmp_path / "none.toml")
        assert cfg.pagination.items_per_page == 20
        assert cfg.store.timeout == 15


class TestMergeCliOverrides:
    def test_none_values_ignored(self):
        cfg = SiteContentConfig()
        merged = merge_cli_overrides(cfg, api_url=None, cdn_origin=None)
        assert merged == cfg

    def test_overrides_applied(self):
        merged = merge_cli_overrides(
            SiteContentConfig(),
            api_url="https://cli/api",
            api_token="t",
            cdn_origin="https://cdn.cli/",
            items_per_page=3,
            default_locale="zh-Hans",
        )
        assert merged.store.api_url == "https://cli/api"
        assert merged.store.bearer_token == "t"
        assert merged.cdn.origin == "https://cdn.cli"
        assert merged.pagination.items_per_page == 3
        assert merged.locales.default == "zh-Hans"

    def test_unknown_keys_ignored(self):
        merged = merge_cli_overrides(SiteContentConfig(), unknown="x")
        assert merged == SiteContentConfig()
