"""Configuration management for newsfound."""

from .loader import Config, load_config, load_feeds, save_config, save_feeds
from .models import (
    DEFAULT_FEEDS,
    ConfigModel,
    DatabaseConfig,
    EnrichmentConfig,
    FeedConfig,
    HttpConfig,
    OllamaConfig,
    WorkerConfig,
)

__all__ = [
    "Config",
    "ConfigModel",
    "DatabaseConfig",
    "EnrichmentConfig",
    "FeedConfig",
    "HttpConfig",
    "OllamaConfig",
    "WorkerConfig",
    "DEFAULT_FEEDS",
    "load_config",
    "load_feeds",
    "save_config",
    "save_feeds",
]
