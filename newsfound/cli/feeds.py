"""Feed management commands."""

import typer
from rich.console import Console
from rich.table import Table

from ..config import Config, FeedConfig, load_feeds, save_feeds
from ..errors import FetchError, ParseError
from ..ingestion import FeedFetcher

console = Console()
feeds_app = typer.Typer(help="Manage feeds")


def _load(config: Config) -> list:
    try:
        return load_feeds(config.feeds_path)
    except FileNotFoundError:
        console.print("[red]Feeds file not found. Run 'newsfound init' first.[/red]")
        raise typer.Exit(1)


@feeds_app.command("list")
def feeds_list(ctx: typer.Context) -> None:
    """List all configured feeds."""
    feeds = _load(ctx.obj)

    if not feeds:
        console.print("[yellow]No feeds configured.[/yellow]")
        return

    table = Table(title="Configured Feeds")
    table.add_column("URL", style="blue")
    table.add_column("Enabled", style="yellow")

    for feed in feeds:
        table.add_row(feed.url, "yes" if feed.enabled else "no")

    console.print(table)


@feeds_app.command("add")
def feeds_add(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Feed URL"),
) -> None:
    """Add a new feed."""
    config: Config = ctx.obj
    try:
        feeds = load_feeds(config.feeds_path)
    except FileNotFoundError:
        feeds = []

    if any(f.url == url for f in feeds):
        console.print(f"[red]Feed already exists: {url}[/red]")
        raise typer.Exit(1)

    try:
        feeds.append(FeedConfig(url=url))
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    save_feeds(feeds, config.feeds_path)
    console.print(f"[green]Added feed: {url}[/green]")


@feeds_app.command("remove")
def feeds_remove(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Feed URL to remove"),
) -> None:
    """Remove a feed. Its source record and articles table are kept."""
    config: Config = ctx.obj
    feeds = _load(config)

    remaining = [f for f in feeds if f.url != url]
    if len(remaining) == len(feeds):
        console.print(f"[red]Feed not found: {url}[/red]")
        raise typer.Exit(1)

    save_feeds(remaining, config.feeds_path)
    console.print(f"[green]Removed feed: {url}[/green]")


@feeds_app.command("test")
def feeds_test(
    ctx: typer.Context,
    url: str = typer.Argument(None, help="Feed URL to test (or test all)"),
) -> None:
    """Fetch and parse feeds without storing anything.

    Uses the configured http.timeout; with none set a request waits on the server.
    """
    config: Config = ctx.obj
    http = config.config.http

    if url:
        urls = [url]
    else:
        urls = [f.url for f in _load(config) if f.enabled]

    fetcher = FeedFetcher(timeout=http.timeout, user_agent=http.user_agent)
    for feed_url in urls:
        try:
            feed = fetcher.fetch(feed_url)
            console.print(f"[green]{feed.channel_title or feed_url}: OK ({len(feed.items)} items)[/green]")
        except (FetchError, ParseError) as e:
            console.print(f"[red]{feed_url}: Failed - {e}[/red]")
