"""Main CLI application."""

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from ..config import Config
from ..log import setup_logging
from .feeds import feeds_app
from .init import init_command
from .run import run_command, worker_command

app = typer.Typer(
    name="newsfound",
    help="Some News Found - feed ingestion and article enrichment",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Config file (default: $NEWSFOUND_CONFIG or ~/.config/newsfound/config.yaml)",
    ),
) -> None:
    """Load configuration and set up logging for every command."""
    config = Config(config_path)
    ctx.obj = config
    setup_logging(config.environment)


# Register commands
app.command("init")(init_command)
app.command("run")(run_command)
app.command("worker")(worker_command)
app.add_typer(feeds_app, name="feeds", help="Manage feeds")


if __name__ == "__main__":
    app()
