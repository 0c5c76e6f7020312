"""Database initialization and schema management."""

import logging

from psycopg import Error as PsycopgError
from psycopg_pool import ConnectionPool

from ..errors import StorageError

logger = logging.getLogger(__name__)


# Per-source articles tables are created on demand by ArticleStore.
SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS sources (
    id BIGINT PRIMARY KEY GENERATED ALWAYS AS IDENTITY,
    url TEXT NOT NULL UNIQUE,
    channel_name TEXT NOT NULL UNIQUE,
    articles_table TEXT NOT NULL UNIQUE
)
"""


def validate_connection(pool: ConnectionPool) -> bool:
    """Validate database connection."""
    try:
        with pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1 AS ok")
                result = cur.fetchone()
                return result is not None and result["ok"] == 1
    except PsycopgError as e:
        logger.error("Database connection failed: %s", e)
        return False


def init_database(pool: ConnectionPool) -> None:
    """Create the sources registry table if it does not exist."""
    try:
        with pool.connection() as conn:
            with conn.transaction():
                conn.execute(SCHEMA_SQL)
    except PsycopgError as e:
        raise StorageError(f"Failed to initialize database schema: {e}") from e
    logger.info("Database schema initialized")
