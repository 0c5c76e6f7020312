"""Logging setup."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

QUIET_LOGGERS = ("httpx", "httpcore", "psycopg.pool")


def setup_logging(environment: str = "development", console: Optional[Console] = None) -> None:
    """Route all module loggers through a rich handler.

    Production runs log at INFO, every other environment at DEBUG.
    """
    level = logging.INFO if environment == "production" else logging.DEBUG

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("[%(name)s] %(message)s"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
