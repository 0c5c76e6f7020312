"""Enrichment: extract, normalize and store content for pending articles."""

import logging
from typing import List, Mapping, Optional

from ..db import ArticleStore, SourceRegistry
from ..errors import NewsFoundError
from ..ingestion.models import FeedItem
from ..models import Article
from ..normalization import ContentNormalizer, NormalizedText
from ..scrapers import ArticleMetadata, RawContent, ScraperRegistry, is_media
from .models import ArticleState, EnrichmentOutcome, TableReport

logger = logging.getLogger(__name__)

FeedMetadata = Mapping[str, FeedItem]


class EnrichmentCoordinator:
    """Enrich pending articles one at a time, one table at a time.

    An article moves PENDING -> EXTRACTED -> NORMALIZED | FALLBACK -> STORED.
    If no strategy matches or extraction fails it stays PENDING and is picked
    up again by a later run. A failure on one article or table never stops
    the rest of the run.
    """

    def __init__(
        self,
        store: ArticleStore,
        sources: SourceRegistry,
        scrapers: ScraperRegistry,
        normalizer: ContentNormalizer,
        batch_size: int = 5,
    ) -> None:
        """Initialize the coordinator."""
        self.store = store
        self.sources = sources
        self.scrapers = scrapers
        self.normalizer = normalizer
        self.batch_size = batch_size

    def process_all(self, feed_metadata: Optional[FeedMetadata] = None) -> List[TableReport]:
        """Enrich every registered source table."""
        logger.info("Starting article processing")
        try:
            sources = self.sources.list_sources()
        except NewsFoundError as e:
            logger.error("Could not list article tables: %s", e)
            return []

        logger.debug("Found %d article tables", len(sources))
        reports = [self.process_table(source.table_identifier, feed_metadata) for source in sources]
        logger.info("Completed article processing")
        return reports

    def process_table(self, table: str, feed_metadata: Optional[FeedMetadata] = None) -> TableReport:
        """Enrich one bounded batch of pending articles from ``table``."""
        report = TableReport(table=table)
        feed_metadata = feed_metadata or {}

        try:
            articles = self.store.fetch_pending(table, self.batch_size)
        except NewsFoundError as e:
            logger.error("Error reading pending articles from %s: %s", table, e)
            report.error = str(e)
            return report

        report.pending = len(articles)
        if not articles:
            logger.debug("No unprocessed articles in %s", table)
            return report

        logger.info("Found %d unprocessed articles in %s", len(articles), table)
        for article in articles:
            try:
                outcome = self.process_article(table, article, feed_metadata.get(article.url))
            except NewsFoundError as e:
                logger.warning("Failed to process article %r: %s", article.title, e)
                outcome = EnrichmentOutcome.FAILED
            except Exception:
                logger.exception("Unexpected error processing article %r", article.title)
                outcome = EnrichmentOutcome.FAILED
            report.record(outcome)

        return report

    def process_article(
        self,
        table: str,
        article: Article,
        item: Optional[FeedItem] = None,
    ) -> EnrichmentOutcome:
        """Run one article through extraction, normalization and storage.

        Raises:
            NewsFoundError: extraction or storage failed; the article stays pending.
        """
        strategy = self.scrapers.resolve_strategy(article.url)
        if strategy is None:
            logger.debug("Skipping %r, no scraper available", article.title)
            return EnrichmentOutcome.SKIPPED

        meta = self._metadata(article, item)
        if is_media(meta.categories):
            raw = RawContent.media()
        else:
            raw = strategy.extract(article.url, meta)
        self._transition(article, ArticleState.EXTRACTED)

        if raw.is_media:
            logger.debug("Media content: %s", article.title)
            if not self._store(table, article, raw.body):
                return EnrichmentOutcome.SKIPPED
            return EnrichmentOutcome.MEDIA

        if not raw.body.strip():
            logger.warning("No content extracted for %r", article.title)
            return EnrichmentOutcome.SKIPPED

        result = self.normalizer.try_normalize(raw.body)
        if isinstance(result, NormalizedText):
            content, outcome = result.text, EnrichmentOutcome.NORMALIZED
            self._transition(article, ArticleState.NORMALIZED)
        else:
            logger.warning("Normalization failed for %r, storing raw content: %s", article.title, result.reason)
            content, outcome = raw.body, EnrichmentOutcome.FALLBACK
            self._transition(article, ArticleState.FALLBACK)

        if not self._store(table, article, content):
            return EnrichmentOutcome.SKIPPED
        return outcome

    def _store(self, table: str, article: Article, content: str) -> bool:
        stored = self.store.write_content(table, article.id, content)
        if stored:
            self._transition(article, ArticleState.STORED)
        return stored

    @staticmethod
    def _metadata(article: Article, item: Optional[FeedItem]) -> ArticleMetadata:
        """Feed metadata from this run when available, else what the row holds."""
        if item is None:
            return ArticleMetadata(
                id=article.id,
                url=article.url,
                title=article.title,
                summary=article.summary,
            )
        return ArticleMetadata(
            id=article.id,
            url=article.url,
            title=article.title,
            categories=item.categories,
            raw_body_html=item.raw_body_html,
            summary=item.summary or article.summary,
        )

    @staticmethod
    def _transition(article: Article, state: ArticleState) -> None:
        logger.debug("Article %s -> %s", article.id, state.value)
