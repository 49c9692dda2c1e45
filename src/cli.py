"""CLI interface for sitecontent."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from sitecontent.config import SiteContentConfig, load_config, merge_cli_overrides
from sitecontent.i18n.locales import language_name
from sitecontent.media.urls import CDNRewriter
from sitecontent.staticgen.pagination import visible_pages
from sitecontent.staticgen.paths import detail_paths, listing_paths, plan_listing
from sitecontent.store.client import StoreClient
from sitecontent.store.collections import CollectionFetcher
from sitecontent.store.models import ContentRecord, NotFound
from sitecontent.store.resolver import ContentResolver, fetch_supported_locales

app = typer.Typer(
    name="sitecontent",
    help="Resolve, list and paginate content from the headless content store.",
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from sitecontent import __version__

        console.print(f"sitecontent {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .sitecontent.toml file."),
    ] = None,
    api_url: Annotated[
        Optional[str],
        typer.Option("--api-url", help="Content store API base URL."),
    ] = None,
    api_token: Annotated[
        Optional[str],
        typer.Option("--token", help="Read-only API token."),
    ] = None,
    cdn_origin: Annotated[
        Optional[str],
        typer.Option("--cdn-origin", help="Canonical CDN origin for media URLs."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log each store request and lookup."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """sitecontent - content store access for the static site."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )
    config = merge_cli_overrides(
        load_config(config_path),
        api_url=api_url,
        api_token=api_token,
        cdn_origin=cdn_origin,
    )
    ctx.obj = config


def _config(ctx: typer.Context) -> SiteContentConfig:
    return ctx.obj if isinstance(ctx.obj, SiteContentConfig) else load_config()


def _resolver(config: SiteContentConfig) -> ContentResolver:
    return ContentResolver(
        StoreClient(config.store),
        CDNRewriter(config.cdn),
        default_locale=config.locales.default,
        supported_locales=config.locales.supported,
    )


def _fetcher(config: SiteContentConfig) -> CollectionFetcher:
    return CollectionFetcher(
        StoreClient(config.store),
        CDNRewriter(config.cdn),
        default_locale=config.locales.default,
        collection_cap=config.store.collection_cap,
    )


def _records_table(title: str, records: list[ContentRecord]) -> Table:
    table = Table(title=title)
    table.add_column("documentId")
    table.add_column("id", justify="right")
    table.add_column("locale")
    table.add_column("title")
    table.add_column("slug")
    for record in records:
        table.add_row(
            record.document_id or "",
            str(record.id),
            record.locale or "",
            record.title or "",
            record.slug or "",
        )
    return table


@app.command()
def resolve(
    ctx: typer.Context,
    content_type: Annotated[str, typer.Argument(help="Content type, e.g. sectors.")],
    identifier: Annotated[str, typer.Argument(help="documentId, numeric id, slug or secondary id.")],
    locale: Annotated[Optional[str], typer.Option("--locale", "-l", help="Requested locale.")] = None,
    variant: Annotated[
        bool,
        typer.Option("--variant/--no-variant", help="Prefer the locale-specific variant."),
    ] = True,
    as_json: Annotated[bool, typer.Option("--json", help="Print the record as JSON.")] = False,
) -> None:
    """Resolve a single record through the lookup cascade."""
    config = _config(ctx)
    result = _resolver(config).resolve_content(
        content_type, identifier, locale, prefer_variant=variant
    )

    if isinstance(result, NotFound):
        console.print(
            f"[red]Not found:[/red] {result.content_type}/{result.identifier} ({result.locale})"
        )
        console.print(f"Tried: {', '.join(result.attempted)}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(result.model_dump_json(by_alias=True, indent=2))
        return
    console.print(_records_table(f"{content_type}/{identifier}", [result]))


@app.command(name="list")
def list_cmd(
    ctx: typer.Context,
    content_type: Annotated[str, typer.Argument(help="Content type, e.g. newsroom.")],
    locale: Annotated[Optional[str], typer.Option("--locale", "-l", help="Locale to request.")] = None,
    limit: Annotated[Optional[int], typer.Option("--limit", "-n", help="Maximum records.")] = None,
    where: Annotated[
        Optional[list[str]],
        typer.Option("--where", "-w", help="Equality filter as field=value (repeatable)."),
    ] = None,
) -> None:
    """List a content collection, newest first."""
    config = _config(ctx)
    filters: dict[str, str] = {}
    for clause in where or []:
        field, sep, value = clause.partition("=")
        if not sep or not field:
            console.print(f"[red]Error:[/red] Invalid filter {clause!r}, expected field=value")
            raise typer.Exit(2)
        filters[field] = value

    records = _fetcher(config).fetch_collection(
        content_type, locale or config.locales.default, limit, filters or None
    )
    if not records:
        console.print(f"[yellow]No {content_type} records.[/yellow]")
        return
    console.print(_records_table(f"{content_type} ({len(records)})", records))


@app.command()
def pages(
    ctx: typer.Context,
    content_type: Annotated[str, typer.Argument(help="Content type to paginate.")],
    per_page: Annotated[
        Optional[int], typer.Option("--per-page", "-p", help="Items per page.")
    ] = None,
    base: Annotated[
        Optional[str], typer.Option("--base", help="Listing base path (default /<content-type>).")
    ] = None,
    details: Annotated[
        bool, typer.Option("--details", help="Also print detail page keys.")
    ] = False,
) -> None:
    """Print every listing page path the static build must generate."""
    config = _config(ctx)
    items_per_page = per_page or config.pagination.items_per_page
    listing = asyncio.run(
        plan_listing(
            _fetcher(config),
            content_type,
            items_per_page,
            locales=config.locales.preference,
        )
    )

    console.print(
        f"{listing.total_items} item(s), {listing.total_pages} page(s) of {items_per_page} "
        f"from {listing.canonical_locale or 'no locale'}"
    )
    base_path = base or f"/{content_type}"
    for locale in config.locales.preference:
        for path in listing_paths(base_path, listing, locale, config.locales.default):
            typer.echo(path)

    if details:
        for key in detail_paths(listing.items):
            typer.echo(f"{base_path}/{key}")

    window = visible_pages(1, listing.total_pages, config.pagination.max_visible_pages)
    console.print(f"Page bar from page 1: {window}", style="dim")


@app.command()
def cdn(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="Media URL or /uploads/ path.")],
    width: Annotated[Optional[int], typer.Option("--width")] = None,
    height: Annotated[Optional[int], typer.Option("--height")] = None,
    image_format: Annotated[Optional[str], typer.Option("--format")] = None,
    quality: Annotated[Optional[int], typer.Option("--quality")] = None,
    sizes: Annotated[bool, typer.Option("--sizes", help="Print every preset size.")] = False,
) -> None:
    """Rewrite a media URL onto the CDN."""
    rewriter = CDNRewriter(_config(ctx).cdn)
    if sizes:
        typer.echo(json.dumps(rewriter.image_sizes(url), indent=2))
        return
    typer.echo(
        rewriter.optimized_url(
            url, width=width, height=height, format=image_format, quality=quality
        )
    )


@app.command()
def locales(ctx: typer.Context) -> None:
    """Show the locales enabled in the content store."""
    config = _config(ctx)
    codes = fetch_supported_locales(StoreClient(config.store), config.locales.supported)
    for code in codes:
        marker = " (default)" if code == config.locales.default else ""
        console.print(f"{code}\t{language_name(code, config.locales.default)}{marker}")


if __name__ == "__main__":
    app()
