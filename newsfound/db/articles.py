"""Article storage in per-source tables."""

import logging
from typing import Dict, Iterable, List

from psycopg import Error as PsycopgError
from psycopg import sql
from psycopg_pool import ConnectionPool

from ..errors import StorageError
from ..ingestion.models import FeedItem
from ..models import SCRAPE_DONE, SCRAPE_PENDING, Article
from .identifiers import index_identifier, validate_table_identifier

logger = logging.getLogger(__name__)


CREATE_TABLE_SQL = sql.SQL(
    """
    CREATE TABLE IF NOT EXISTS {table} (
        id BIGINT PRIMARY KEY GENERATED ALWAYS AS IDENTITY,
        url TEXT NOT NULL UNIQUE,
        title TEXT NOT NULL,
        date_added TIMESTAMPTZ NOT NULL,
        scrape_check INTEGER NOT NULL DEFAULT 0,
        content TEXT,
        summary TEXT
    )
    """
)

CREATE_INDEX_SQL = sql.SQL("CREATE INDEX IF NOT EXISTS {index} ON {table} (date_added DESC)")

# Re-ingesting a feed refreshes title and date only. Content, scrape_check
# and summary belong to enrichment and first insert respectively.
UPSERT_SQL = sql.SQL(
    """
    INSERT INTO {table} (url, title, date_added, scrape_check, summary)
    VALUES (%s, %s, %s, %s, %s)
    ON CONFLICT (url) DO UPDATE SET
        title = EXCLUDED.title,
        date_added = EXCLUDED.date_added
    """
)

PENDING_SQL = sql.SQL(
    """
    SELECT id, url, title, date_added, scrape_check, content, summary
    FROM {table}
    WHERE content IS NULL
    ORDER BY date_added DESC, id DESC
    LIMIT %s
    """
)

WRITE_CONTENT_SQL = sql.SQL(
    """
    UPDATE {table}
    SET content = %s,
        scrape_check = %s
    WHERE id = %s AND content IS NULL
    """
)

FILL_CONTENT_SQL = sql.SQL(
    """
    UPDATE {table}
    SET content = %s,
        scrape_check = %s
    WHERE url = ANY(%s) AND content IS NULL
    """
)


class ArticleStore:
    """Own the per-source articles tables.

    Every operation borrows a pooled connection for a single transaction and
    returns it before the call completes, so no connection is held while the
    caller talks to a scraping or inference endpoint.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """Initialize article storage."""
        self.pool = pool
        self._tables: Dict[str, sql.Identifier] = {}

    def _table(self, table_identifier: str) -> sql.Identifier:
        """Schema handle for a table name, validated before first use."""
        handle = self._tables.get(table_identifier)
        if handle is None:
            validate_table_identifier(table_identifier)
            handle = sql.Identifier(table_identifier)
        return handle

    def ensure_table(self, table_identifier: str) -> None:
        """Create the articles table if it does not exist yet."""
        if table_identifier in self._tables:
            return

        table = self._table(table_identifier)
        index = sql.Identifier(index_identifier(table_identifier))
        try:
            with self.pool.connection() as conn:
                with conn.transaction():
                    conn.execute(CREATE_TABLE_SQL.format(table=table))
                    conn.execute(CREATE_INDEX_SQL.format(index=index, table=table))
        except PsycopgError as e:
            raise StorageError(f"Failed to create table {table_identifier}: {e}") from e

        self._tables[table_identifier] = table
        logger.debug("Table %s ready", table_identifier)

    def upsert_articles(self, table_identifier: str, items: Iterable[FeedItem]) -> int:
        """Insert new articles and refresh title/date of known ones.

        The whole batch commits together or not at all.

        Returns:
            Number of items written.
        """
        query = UPSERT_SQL.format(table=self._table(table_identifier))
        rows = [
            (item.link, item.title, item.published_at, SCRAPE_PENDING, item.summary)
            for item in items
        ]
        if not rows:
            return 0

        try:
            with self.pool.connection() as conn:
                with conn.transaction():
                    with conn.cursor() as cur:
                        cur.executemany(query, rows)
        except PsycopgError as e:
            raise StorageError(f"Failed to upsert articles into {table_identifier}: {e}") from e

        logger.debug("Upserted %d articles into %s", len(rows), table_identifier)
        return len(rows)

    def fetch_pending(self, table_identifier: str, limit: int) -> List[Article]:
        """Newest articles that have no content yet, at most ``limit``."""
        if limit < 1:
            return []

        query = PENDING_SQL.format(table=self._table(table_identifier))
        try:
            with self.pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query, (limit,))
                    rows = cur.fetchall()
        except PsycopgError as e:
            raise StorageError(f"Failed to read pending articles from {table_identifier}: {e}") from e

        return [Article(**row) for row in rows]

    def write_content(self, table_identifier: str, article_id: int, content: str) -> bool:
        """Store enriched content for an article that has none.

        Returns:
            False if the article already had content (it is left untouched).
        """
        if not content:
            raise ValueError("Refusing to store empty content")

        query = WRITE_CONTENT_SQL.format(table=self._table(table_identifier))
        try:
            with self.pool.connection() as conn:
                with conn.transaction():
                    with conn.cursor() as cur:
                        cur.execute(query, (content, SCRAPE_DONE, article_id))
                        updated = cur.rowcount == 1
        except PsycopgError as e:
            raise StorageError(
                f"Failed to store content for article {article_id} in {table_identifier}: {e}"
            ) from e

        if not updated:
            logger.warning("Article %s in %s already has content, not overwriting", article_id, table_identifier)
        return updated

    def fill_content(self, table_identifier: str, urls: Iterable[str], content: str) -> int:
        """Store the same content for every listed article that has none yet.

        Returns:
            Number of articles updated.
        """
        if not content:
            raise ValueError("Refusing to store empty content")

        urls = list(urls)
        if not urls:
            return 0

        query = FILL_CONTENT_SQL.format(table=self._table(table_identifier))
        try:
            with self.pool.connection() as conn:
                with conn.transaction():
                    with conn.cursor() as cur:
                        cur.execute(query, (content, SCRAPE_DONE, urls))
                        updated = cur.rowcount
        except PsycopgError as e:
            raise StorageError(f"Failed to store content in {table_identifier}: {e}") from e

        logger.debug("Stored content for %d of %d articles in %s", updated, len(urls), table_identifier)
        return updated
