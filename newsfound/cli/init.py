"""Init command implementation."""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import DEFAULT_FEEDS, Config, ConfigModel, save_config, save_feeds
from ..db import create_connection_pool, init_database, validate_connection
from ..errors import StorageError

console = Console()


def init_command(
    ctx: typer.Context,
    db_url_env: str = typer.Option("DB_URL", "--db-url-env", help="Environment variable holding the database URL"),
    environment: str = typer.Option("development", "--environment", "-e", help="Deployment environment tag"),
    seed_feeds: bool = typer.Option(
        True,
        "--seed-feeds/--no-seed-feeds",
        help="Seed the default news feeds",
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite existing config and feeds files"),
) -> None:
    """Write default configuration and create the sources table."""
    config: Config = ctx.obj
    config_path: Path = config.config_path
    feeds_path: Path = config.feeds_path

    console.print(Panel.fit("Some News Found - Initialization", style="bold blue"))

    if config_path.exists() and not force:
        console.print(f"[yellow]Config exists, keeping it: {config_path}[/yellow]")
    else:
        model = ConfigModel(environment=environment, database={"url_env": db_url_env})
        save_config(model, config_path)
        console.print(f"Created config: {config_path}")

    if feeds_path.exists() and not force:
        console.print(f"[yellow]Feeds file exists, keeping it: {feeds_path}[/yellow]")
    else:
        feeds = list(DEFAULT_FEEDS) if seed_feeds else []
        save_feeds(feeds, feeds_path)
        console.print(f"Created feeds: {feeds_path} ({len(feeds)} feeds)")

    # Re-read what is on disk now
    config = Config(config_path)

    console.print("\n[bold]Testing database connection...[/bold]")
    try:
        pool = create_connection_pool(config.get_db_config())
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    try:
        if not validate_connection(pool):
            console.print(
                "[red]Database connection failed![/red]\n"
                f"Set the connection string via [bold]export {db_url_env}=postgresql://...[/bold]"
            )
            raise typer.Exit(1)
        console.print("Database connection successful")

        init_database(pool)
        console.print("Database schema initialized")
    except StorageError as e:
        console.print(f"[red]Failed to initialize database: {e}[/red]")
        raise typer.Exit(1)
    finally:
        pool.close()

    console.print(
        Panel(
            "[green]Initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Feeds: {feeds_path}\n\n"
            "Next steps:\n"
            "1. Point OLLAMA_HOST and OLLAMA_HTML_READER at an Ollama server\n"
            "2. Run: [bold]newsfound run[/bold]",
            style="green",
        )
    )
