"""Database management for newsfound."""

from .articles import ArticleStore
from .connection import close_connection_pool, create_connection_pool, get_connection_pool
from .identifiers import derive_table_identifier, display_name, validate_table_identifier
from .init import init_database, validate_connection
from .sources import SourceRegistry

__all__ = [
    "ArticleStore",
    "SourceRegistry",
    "close_connection_pool",
    "create_connection_pool",
    "derive_table_identifier",
    "display_name",
    "get_connection_pool",
    "init_database",
    "validate_connection",
    "validate_table_identifier",
]
