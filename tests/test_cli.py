"""Smoke tests for the CLI."""

import json
from typing import Any
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from sitecontent.cli import app
from sitecontent.errors import StoreHTTPError

CONFIG = (
    '[store]\napi_url = "https://cms.test/api"\n'
    '[cdn]\norigin = "https://cdn.test"\nstore_host = "cms.test"\n'
)


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """A config file plus a clean environment."""
    for key in ("STRAPI_API_URL", "NEXT_PUBLIC_STRAPI_API_URL", "STRAPI_API_TOKEN",
                "SITECONTENT_CDN_ORIGIN", "SITECONTENT_ITEMS_PER_PAGE"):
        monkeypatch.delenv(key, raising=False)
    path = tmp_path / "site.toml"
    path.write_text(CONFIG)
    return str(path)


class FakeStore:
    """Stands in for StoreClient.get, routing on path and query."""

    def __init__(self, route) -> None:
        self.route = route
        self.calls: list[tuple[str, dict[str, str]]] = []

    def __call__(self, client, path: str, params: list[tuple[str, str]] | None = None) -> Any:
        query = dict(params or [])
        self.calls.append((path, query))
        result = self.route(path, query)
        if isinstance(result, Exception):
            raise result
        return result


def _patch_store(route):
    fake = FakeStore(route)
    return fake, patch("sitecontent.store.client.StoreClient.get", autospec=True, side_effect=fake)


class TestCLI:
    """Tests for the CLI entry point."""

    def test_main_help(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "resolve" in result.output

    def test_main_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "sitecontent" in result.output


class TestCdn:
    def test_optimized_url(self, runner: CliRunner, config_file: str) -> None:
        result = runner.invoke(
            app, ["-c", config_file, "cdn", "/uploads/a.jpg", "--width", "400", "--format", "webp"]
        )
        assert result.exit_code == 0
        assert result.output.strip() == "https://cdn.test/uploads/a.jpg?width=400&format=webp"

    def test_store_host_rewritten(self, runner: CliRunner, config_file: str) -> None:
        result = runner.invoke(app, ["-c", config_file, "cdn", "https://cms.test/uploads/b.png"])
        assert result.output.strip() == "https://cdn.test/uploads/b.png"

    def test_sizes(self, runner: CliRunner, config_file: str) -> None:
        result = runner.invoke(app, ["-c", config_file, "cdn", "/uploads/a.jpg", "--sizes"])
        sizes = json.loads(result.output)
        assert sizes["original"] == "https://cdn.test/uploads/a.jpg"
        assert sizes["thumbnail"].endswith("width=150&height=150&format=webp&quality=80")

    def test_cli_origin_override(self, runner: CliRunner, config_file: str) -> None:
        result = runner.invoke(
            app, ["-c", config_file, "--cdn-origin", "https://img.test", "cdn", "/uploads/a.jpg"]
        )
        assert result.output.strip() == "https://img.test/uploads/a.jpg"


class TestResolve:
    def test_found_as_json(self, runner: CliRunner, config_file: str) -> None:
        fake, patcher = _patch_store(
            lambda path, query: {"data": {"id": 3, "documentId": "abc", "title": "Edge",
                                          "cover": {"url": "/uploads/x.jpg"}}}
        )
        with patcher:
            result = runner.invoke(app, ["-c", config_file, "resolve", "sectors", "abc", "--json"])

        assert result.exit_code == 0
        body = json.loads(result.output)
        assert body["documentId"] == "abc"
        assert body["cover"]["url"] == "https://cdn.test/uploads/x.jpg"
        assert fake.calls[0][0] == "sectors/abc"

    def test_not_found_exits_1(self, runner: CliRunner, config_file: str) -> None:
        fake, patcher = _patch_store(lambda path, query: StoreHTTPError(404, path))
        with patcher:
            result = runner.invoke(app, ["-c", config_file, "resolve", "articles", "missing"])

        assert result.exit_code == 1
        assert "Not found" in result.output
        assert "slug_filter@en" in result.output
        assert len(fake.calls) == 3


class TestList:
    def test_lists_records(self, runner: CliRunner, config_file: str) -> None:
        fake, patcher = _patch_store(
            lambda path, query: {"data": [{"id": 1, "documentId": "n1", "title": "Launch"}]}
        )
        with patcher:
            result = runner.invoke(
                app, ["-c", config_file, "list", "newsroom", "-l", "zh-Hans", "-w", "type=Press"]
            )

        assert result.exit_code == 0
        assert "Launch" in result.output
        path, query = fake.calls[0]
        assert path == "newsrooms"
        assert query["locale"] == "zh-Hans"
        assert query["filters[type][$eq]"] == "Press"

    def test_empty(self, runner: CliRunner, config_file: str) -> None:
        _, patcher = _patch_store(lambda path, query: {"data": []})
        with patcher:
            result = runner.invoke(app, ["-c", config_file, "list", "events"])
        assert result.exit_code == 0
        assert "No events records." in result.output

    def test_bad_filter_exits_2(self, runner: CliRunner, config_file: str) -> None:
        result = runner.invoke(app, ["-c", config_file, "list", "events", "-w", "oops"])
        assert result.exit_code == 2


class TestPages:
    def test_paths_for_every_locale(self, runner: CliRunner, config_file: str) -> None:
        def route(path, query):
            count = 13 if query["locale"] == "en" else 2
            return {"data": [{"id": i, "documentId": f"s{i}"} for i in range(count)]}

        _, patcher = _patch_store(route)
        with patcher:
            result = runner.invoke(app, ["-c", config_file, "pages", "sectors", "-p", "12"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert "/sectors/page/1" in lines
        assert "/sectors/page/2" in lines
        assert "/zh-Hans/sectors/page/2" in lines
        assert "/sectors/page/3" not in lines

    def test_store_down_still_emits_page_one(self, runner: CliRunner, config_file: str) -> None:
        _, patcher = _patch_store(lambda path, query: StoreHTTPError(500, path))
        with patcher:
            result = runner.invoke(app, ["-c", config_file, "pages", "sectors", "--base", "/industries"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert "/industries/page/1" in lines
        assert "/zh-Hans/industries/page/1" in lines


def test_locales_command(runner: CliRunner, config_file: str) -> None:
    _, patcher = _patch_store(lambda path, query: [{"code": "en"}, {"code": "zh-Hans"}])
    with patcher:
        result = runner.invoke(app, ["-c", config_file, "locales"])
    assert result.exit_code == 0
    assert "en" in result.output
    assert "(default)" in result.output
