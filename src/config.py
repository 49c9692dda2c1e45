"""Unified configuration loaded from .sitecontent.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from urllib.parse import urlsplit

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".sitecontent.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
    Path.home() / ".config" / "sitecontent",
]

PLACEHOLDER_TOKENS = ("your_readonly_token_here", "your_api_token_here")


class StoreConfig(BaseModel):
    """[store] section: the remote content store API."""

    api_url: str = "http://localhost:1337/api"
    api_token: str = ""
    placeholder_tokens: list[str] = Field(default_factory=lambda: list(PLACEHOLDER_TOKENS))
    timeout: int = 15
    collection_cap: int = 100

    @property
    def bearer_token(self) -> str | None:
        """The token to send, or None when unset or still a placeholder."""
        token = self.api_token.strip()
        if not token or token in self.placeholder_tokens:
            return None
        return token

    @property
    def is_authenticated(self) -> bool:
        return self.bearer_token is not None


class CDNConfig(BaseModel):
    """[cdn] section: media URL rewriting."""

    origin: str = "https://cdn.example.org"
    store_host: str = "cms.example.org"
    upload_prefix: str = "/uploads/"

    @field_validator("origin")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def host(self) -> str:
        """Hostname of the CDN origin, without any port."""
        return urlsplit(self.origin).hostname or self.origin

    @property
    def port(self) -> int | None:
        """Explicit port of the CDN origin, if it has one."""
        try:
            return urlsplit(self.origin).port
        except ValueError:
            return None


class LocalesConfig(BaseModel):
    """[locales] section."""

    supported: list[str] = Field(default_factory=lambda: ["en", "zh-Hans"])
    default: str = "en"

    @property
    def preference(self) -> tuple[str, ...]:
        """Default locale first, then the rest in declared order."""
        rest = [code for code in self.supported if code != self.default]
        return (self.default, *rest)


class PaginationConfig(BaseModel):
    """[pagination] section."""

    items_per_page: int = 12
    max_visible_pages: int = 5


class SiteContentConfig(BaseModel):
    """Top-level configuration model for the content layer."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    cdn: CDNConfig = Field(default_factory=CDNConfig)
    locales: LocalesConfig = Field(default_factory=LocalesConfig)
    pagination: PaginationConfig = Field(default_factory=PaginationConfig)


def load_config(path: str | Path | None = None) -> SiteContentConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .sitecontent.toml in CWD
    3. ~/.config/sitecontent/.sitecontent.toml
    4. ~/.config/sitecontent/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged SiteContentConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        global_config = Path.home() / ".config" / "sitecontent" / "config.toml"
        if not data and global_config.exists():
            data = _load_toml(global_config)
            logger.info("Loaded config from %s", global_config)

    config = SiteContentConfig.model_validate(data) if data else SiteContentConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: SiteContentConfig, **cli_kwargs: object) -> SiteContentConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).

    Args:
        config: Base config.
        **cli_kwargs: CLI flag values, e.g. ``api_url``, ``api_token``,
            ``cdn_origin``, ``items_per_page``.

    Returns:
        Updated config with CLI overrides applied.
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "api_url": ("store", "api_url"),
        "api_token": ("store", "api_token"),
        "timeout": ("store", "timeout"),
        "collection_cap": ("store", "collection_cap"),
        "cdn_origin": ("cdn", "origin"),
        "store_host": ("cdn", "store_host"),
        "default_locale": ("locales", "default"),
        "items_per_page": ("pagination", "items_per_page"),
    }

    for key, value in cli_kwargs.items():
        if value is None:
            continue
        if key in mapping:
            section, field = mapping[key]
            data[section][field] = value

    return SiteContentConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: SiteContentConfig) -> SiteContentConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    # Later entries win, so the server-side name beats the public one.
    env_mapping: list[tuple[str, tuple[str, str]]] = [
        ("NEXT_PUBLIC_STRAPI_API_URL", ("store", "api_url")),
        ("STRAPI_API_URL", ("store", "api_url")),
        ("STRAPI_API_TOKEN", ("store", "api_token")),
        ("SITECONTENT_CDN_ORIGIN", ("cdn", "origin")),
        ("SITECONTENT_STORE_HOST", ("cdn", "store_host")),
        ("SITECONTENT_DEFAULT_LOCALE", ("locales", "default")),
    ]

    for env_var, (section, field) in env_mapping:
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    int_mapping: dict[str, tuple[str, str]] = {
        "SITECONTENT_TIMEOUT": ("store", "timeout"),
        "SITECONTENT_COLLECTION_CAP": ("store", "collection_cap"),
        "SITECONTENT_ITEMS_PER_PAGE": ("pagination", "items_per_page"),
    }
    for env_var, (section, field) in int_mapping.items():
        raw = os.environ.get(env_var)
        if raw is None:
            continue
        try:
            data[section][field] = int(raw)
        except ValueError:
            logger.warning("Ignoring non-integer %s=%r", env_var, raw)

    return SiteContentConfig.model_validate(data)
