"""Database connection management."""

from typing import Any, Dict, Optional

from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

_connection_pool: Optional[ConnectionPool] = None


def create_connection_pool(config: Dict[str, Any]) -> ConnectionPool:
    """Create a connection pool from a database config dict."""
    url = config.get("url")
    if not url:
        raise ValueError("Database URL is not configured (set DB_URL or database.url)")

    return ConnectionPool(
        url,
        min_size=config.get("min_size", 1),
        max_size=config.get("max_size", 10),
        kwargs={"row_factory": dict_row},
        open=True,
    )


def get_connection_pool(config: Dict[str, Any]) -> ConnectionPool:
    """Get or create the process-wide connection pool."""
    global _connection_pool
    if _connection_pool is None:
        _connection_pool = create_connection_pool(config)
    return _connection_pool


def close_connection_pool() -> None:
    """Close the process-wide pool, if one was created."""
    global _connection_pool
    if _connection_pool is not None:
        _connection_pool.close()
        _connection_pool = None

