"""Data models for newsfound."""

from .article import SCRAPE_DONE, SCRAPE_PENDING, Article
from .source import Source

__all__ = ["Article", "Source", "SCRAPE_DONE", "SCRAPE_PENDING"]
