"""Feed ingestion."""

from .feed_fetcher import FeedFetcher
from .models import Feed, FeedItem
from .text import clean_title, strip_escape_artifacts

__all__ = [
    "FeedFetcher",
    "Feed",
    "FeedItem",
    "clean_title",
    "strip_escape_artifacts",
]
