"""Pipeline orchestrator: ingest every feed, then enrich every source table."""

import logging
import time
from typing import Dict, Iterable, List, Optional, Tuple

import pendulum
from psycopg_pool import ConnectionPool
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import Config
from ..db import ArticleStore, SourceRegistry
from ..errors import NewsFoundError
from ..ingestion import FeedFetcher, FeedItem
from ..normalization import ContentNormalizer, LLMProvider, OllamaProvider, PassthroughProvider
from ..scrapers import MEDIA_CONTENT, default_registry, is_media
from .enrichment import EnrichmentCoordinator
from .models import RunReport, SourceReport

logger = logging.getLogger(__name__)


class PipelineStage:
    """Represents a pipeline stage."""

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

    def start(self):
        """Mark stage as started."""
        logger.info("%s", self.description)
        self.start_time = time.monotonic()

    def complete(self):
        """Mark stage as completed."""
        self.end_time = time.monotonic()
        logger.info("%s finished in %.1fs", self.name.title(), self.duration)

    @property
    def duration(self) -> float:
        """Get stage duration in seconds."""
        if self.start_time is not None and self.end_time is not None:
            return self.end_time - self.start_time
        return 0.0


def build_llm_provider(config: Config) -> LLMProvider:
    """Ollama provider when a host and model are configured, else passthrough."""
    ollama_config = config.get_ollama_config()

    if not ollama_config.get("host") or not ollama_config.get("model"):
        logger.warning("Ollama host or model not configured, content will be stored without normalization")
        return PassthroughProvider()

    logger.info("Ollama host configured: %s", ollama_config["host"])
    return OllamaProvider(
        host=ollama_config["host"],
        model=ollama_config["model"],
        num_ctx=ollama_config["num_ctx"],
        timeout=ollama_config.get("timeout"),
    )


class PipelineOrchestrator:
    """Runs ingestion and enrichment for a list of feeds.

    Sources are processed strictly one after another. A failing feed is
    recorded on the run report and the run moves on to the next one.
    """

    def __init__(
        self,
        fetcher: FeedFetcher,
        sources: SourceRegistry,
        store: ArticleStore,
        coordinator: EnrichmentCoordinator,
    ) -> None:
        """Initialize pipeline orchestrator."""
        self.fetcher = fetcher
        self.sources = sources
        self.store = store
        self.coordinator = coordinator
        self.stages = [
            PipelineStage("ingest", "Fetching feeds and storing articles"),
            PipelineStage("enrich", "Extracting and normalizing article content"),
        ]

    @classmethod
    def from_config(cls, config: Config, pool: ConnectionPool) -> "PipelineOrchestrator":
        """Wire the pipeline from configuration and a connection pool."""
        http = config.config.http
        sources = SourceRegistry(pool)
        store = ArticleStore(pool)
        coordinator = EnrichmentCoordinator(
            store=store,
            sources=sources,
            scrapers=default_registry(timeout=http.timeout),
            normalizer=ContentNormalizer(build_llm_provider(config)),
            batch_size=config.config.enrichment.batch_size,
        )
        fetcher = FeedFetcher(timeout=http.timeout, user_agent=http.user_agent)
        return cls(fetcher, sources, store, coordinator)

    def ingest_feed(self, feed_url: str) -> Tuple[SourceReport, List[FeedItem]]:
        """Fetch one feed and upsert its items into the source's table."""
        report = SourceReport(feed_url=feed_url)
        try:
            feed = self.fetcher.fetch(feed_url)

            report.channel_name = feed.channel_title or None
            source = self.sources.resolve(feed.url, feed.channel_title)
            report.channel_name = source.display_name
            report.table = source.table_identifier

            self.store.ensure_table(source.table_identifier)
            report.items = self.store.upsert_articles(source.table_identifier, feed.items)

            # Categories are not persisted
            media_urls = [item.link for item in feed.items if is_media(item.categories)]
            if media_urls:
                report.media = self.store.fill_content(source.table_identifier, media_urls, MEDIA_CONTENT)
        except NewsFoundError as e:
            logger.error("Failed to ingest %s: %s", feed_url, e)
            report.error = str(e)
            return report, []

        report.success = True
        logger.info("Stored %d articles from %s", report.items, report.channel_name)
        return report, feed.items

    def run(self, feed_urls: Iterable[str]) -> RunReport:
        """Run ingestion then enrichment; always returns a completed report."""
        report = RunReport(started_at=pendulum.now("UTC"))
        feed_metadata: Dict[str, FeedItem] = {}

        stage = self.stages[0]
        stage.start()
        for feed_url in feed_urls:
            source_report, items = self.ingest_feed(feed_url)
            report.sources.append(source_report)
            for item in items:
                feed_metadata[item.link] = item
        stage.complete()

        stage = self.stages[1]
        stage.start()
        report.tables = self.coordinator.process_all(feed_metadata)
        stage.complete()
        logger.info("Normalizer usage: %s", self.coordinator.normalizer.provider.get_usage_stats())

        report.finished_at = pendulum.now("UTC")
        return report


def print_run_summary(report: RunReport, console: Optional[Console] = None) -> None:
    """Print summary of a pipeline run."""
    console = console or Console()

    feeds = Table(title="Feeds")
    feeds.add_column("Channel", style="cyan")
    feeds.add_column("Status", style="bold")
    feeds.add_column("Items", style="yellow", justify="right")
    feeds.add_column("Details", style="dim")
    for source in report.sources:
        status = "[green]ok[/green]" if source.success else "[red]failed[/red]"
        details = (source.table or "") if source.success else (source.error or "Failed")
        feeds.add_row(source.channel_name or source.feed_url, status, str(source.items), details)

    tables = Table(title="Enrichment")
    tables.add_column("Table", style="cyan")
    tables.add_column("Pending", justify="right")
    tables.add_column("Normalized", style="green", justify="right")
    tables.add_column("Raw", style="yellow", justify="right")
    tables.add_column("Media", justify="right")
    tables.add_column("Skipped", style="dim", justify="right")
    tables.add_column("Failed", style="red", justify="right")
    for table in report.tables:
        tables.add_row(
            table.table,
            str(table.pending),
            str(table.normalized),
            str(table.fallback),
            str(table.media),
            str(table.skipped),
            str(table.failed) if not table.error else f"{table.failed} ({table.error})",
        )

    console.print(feeds)
    console.print(tables)

    failed = report.failed_sources
    style = "yellow" if failed else "green"
    console.print(Panel(
        f"Run finished in {report.duration:.1f} seconds\n"
        f"Feeds: {len(report.sources) - len(failed)}/{len(report.sources)} ingested\n"
        f"Articles enriched: {report.stored}",
        style=style,
    ))

