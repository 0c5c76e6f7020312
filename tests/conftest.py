"""Shared test fixtures."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from psycopg import sql

from newsfound.ingestion.models import FeedItem


def render_sql(query) -> str:
    """Flatten a psycopg ``sql`` composition into plain text without a connection."""
    if isinstance(query, sql.Composed):
        return "".join(render_sql(part) for part in query)
    if isinstance(query, sql.Identifier):
        return ".".join(f'"{name}"' for name in query._obj)
    if isinstance(query, sql.SQL):
        return query._obj
    return str(query)


@pytest.fixture
def mock_pool():
    """Connection pool whose connections and cursors are mocks.

    The cursor is exposed as ``pool.cursor`` and the connection as
    ``pool.conn``.
    """
    pool = MagicMock()
    conn = pool.connection.return_value.__enter__.return_value
    cursor = conn.cursor.return_value.__enter__.return_value
    pool.conn = conn
    pool.cursor = cursor
    return pool


@pytest.fixture
def feed_item():
    """Factory for feed items."""

    def make(link="https://tnc.news/2024/01/01/story/", title="Story", **kwargs):
        kwargs.setdefault("published_at", datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))
        return FeedItem(link=link, title=title, **kwargs)

    return make
