"""Source registry: feed endpoints and the tables that hold their articles."""

import logging
from typing import List, Optional

from psycopg import Connection
from psycopg import Error as PsycopgError
from psycopg_pool import ConnectionPool

from ..errors import StorageError
from ..models import Source
from .identifiers import derive_table_identifier, disambiguate, display_name, validate_table_identifier

logger = logging.getLogger(__name__)

SOURCE_COLUMNS = "id, url, channel_name AS display_name, articles_table AS table_identifier"


class SourceRegistry:
    """Manage sources in database.

    A source's table identifier is assigned once, when the feed URL is first
    seen, and never recomputed. Renaming a channel updates its display name
    only, so an existing articles table is never orphaned.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """Initialize the registry with a connection pool."""
        self.pool = pool

    def resolve(self, feed_url: str, channel_title: str) -> Source:
        """Return the source for ``feed_url``, registering it if new.

        A title that sanitizes to nothing is stored under a placeholder name
        keyed on the feed URL, so untitled feeds never share a name or table.

        Raises:
            StorageError: on a unique-constraint violation (e.g. another
                feed already uses this display name), when both the derived
                table name and its disambiguated variant are taken, or on
                connection failure.
        """
        try:
            with self.pool.connection() as conn:
                with conn.transaction():
                    name = display_name(channel_title, feed_url)
                    existing = self._get_by_url(conn, feed_url)
                    if existing:
                        return self._refresh_display_name(conn, existing, name)
                    return self._insert(conn, feed_url, channel_title, name)
        except PsycopgError as e:
            raise StorageError(f"Failed to resolve source {feed_url}: {e}") from e

    def _get_by_url(self, conn: Connection, feed_url: str) -> Optional[Source]:
        with conn.cursor() as cur:
            cur.execute(f"SELECT {SOURCE_COLUMNS} FROM sources WHERE url = %s", (feed_url,))
            row = cur.fetchone()
        return Source(**row) if row else None

    def _identifier_taken(self, conn: Connection, identifier: str) -> bool:
        with conn.cursor() as cur:
            cur.execute("SELECT 1 FROM sources WHERE articles_table = %s", (identifier,))
            return cur.fetchone() is not None

    def _refresh_display_name(self, conn: Connection, source: Source, name: str) -> Source:
        if source.display_name == name:
            return source

        logger.info(
            "Channel %s renamed from %r to %r, keeping table %s",
            source.url,
            source.display_name,
            name,
            source.table_identifier,
        )
        with conn.cursor() as cur:
            cur.execute(
                f"""
                UPDATE sources
                SET channel_name = %s
                WHERE id = %s
                RETURNING {SOURCE_COLUMNS}
                """,
                (name, source.id),
            )
            return Source(**cur.fetchone())

    def _insert(self, conn: Connection, feed_url: str, channel_title: str, name: str) -> Source:
        identifier = derive_table_identifier(channel_title, feed_url)
        if self._identifier_taken(conn, identifier):
            claimed = identifier
            identifier = disambiguate(identifier, feed_url)
            if self._identifier_taken(conn, identifier):
                raise StorageError(
                    f"Table {claimed} and its variant {identifier} are both taken, cannot register {feed_url}"
                )
            logger.warning(
                "Table %s already belongs to another source, assigning %s to %s",
                claimed,
                identifier,
                feed_url,
            )
        validate_table_identifier(identifier)

        with conn.cursor() as cur:
            cur.execute(
                f"""
                INSERT INTO sources (url, channel_name, articles_table)
                VALUES (%s, %s, %s)
                ON CONFLICT (url) DO UPDATE SET
                    channel_name = EXCLUDED.channel_name
                RETURNING {SOURCE_COLUMNS}
                """,
                (feed_url, name, identifier),
            )
            source = Source(**cur.fetchone())

        logger.info("Registered source %s -> %s", name, source.table_identifier)
        return source

    def list_sources(self) -> List[Source]:
        """Get all sources ordered by display name."""
        try:
            with self.pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(f"SELECT {SOURCE_COLUMNS} FROM sources ORDER BY channel_name")
                    return [Source(**row) for row in cur.fetchall()]
        except PsycopgError as e:
            raise StorageError(f"Failed to list sources: {e}") from e
