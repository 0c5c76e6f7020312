"""Run and worker command implementations."""

import logging
import time
from typing import List, Optional

import typer
from psycopg_pool import ConnectionPool
from rich.console import Console

from ..config import Config
from ..db import close_connection_pool, get_connection_pool, init_database, validate_connection
from ..errors import NewsFoundError
from ..pipeline import PipelineOrchestrator, RunReport, print_run_summary

console = Console()
logger = logging.getLogger(__name__)


def _feed_urls(config: Config, feed: Optional[List[str]]) -> List[str]:
    if feed:
        return feed
    try:
        return [f.url for f in config.get_feeds()]
    except FileNotFoundError:
        console.print("[red]Feeds file not found. Run 'newsfound init' or pass --feed.[/red]")
        raise typer.Exit(1)


def _open_pool(config: Config) -> ConnectionPool:
    pool = get_connection_pool(config.get_db_config())
    if not validate_connection(pool):
        raise NewsFoundError("Database connection failed")
    init_database(pool)
    return pool


def run_once(config: Config, feed_urls: List[str]) -> RunReport:
    """One ingestion and enrichment pass."""
    pool = _open_pool(config)
    orchestrator = PipelineOrchestrator.from_config(config, pool)
    return orchestrator.run(feed_urls)


def run_command(
    ctx: typer.Context,
    feed: Optional[List[str]] = typer.Option(
        None,
        "--feed",
        "-f",
        help="Feed URL to ingest (repeatable). Default: feeds.yaml",
    ),
    batch_size: Optional[int] = typer.Option(
        None,
        "--batch-size",
        "-b",
        help="Pending articles enriched per source",
        min=1,
    ),
) -> None:
    """Run one ingestion and enrichment pass."""
    config: Config = ctx.obj
    try:
        if batch_size is not None:
            config.config.enrichment.batch_size = batch_size

        feed_urls = _feed_urls(config, feed)
        if not feed_urls:
            console.print("[yellow]No feeds configured.[/yellow]")
            return

        report = run_once(config, feed_urls)
        print_run_summary(report, console)
    except KeyboardInterrupt:
        console.print("\n[yellow]Run interrupted by user[/yellow]")
        raise typer.Exit(1)
    except (NewsFoundError, ValueError) as e:
        console.print(f"[red]Run failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        close_connection_pool()


def worker_command(
    ctx: typer.Context,
    interval: Optional[int] = typer.Option(
        None,
        "--interval",
        "-i",
        help="Minutes to sleep between runs",
        min=1,
    ),
) -> None:
    """Run the pipeline forever, one pass at a time."""
    config: Config = ctx.obj
    minutes = interval or config.config.worker.interval_minutes

    try:
        while True:
            logger.info("Starting feed worker run")
            try:
                # Feeds are re-read every run
                report = run_once(config, [f.url for f in config.get_feeds()])
                print_run_summary(report, console)
            except FileNotFoundError:
                logger.error("Feeds file not found: %s, run 'newsfound init'", config.feeds_path)
            except (NewsFoundError, ValueError) as e:
                logger.error("Worker run failed: %s", e)

            logger.info("Worker sleeping for %d minutes...", minutes)
            time.sleep(minutes * 60)
    except KeyboardInterrupt:
        console.print("\n[yellow]Worker stopped[/yellow]")
    finally:
        close_connection_pool()
