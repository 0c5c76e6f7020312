"""Feed fetcher: one HTTP GET plus feedparser normalization."""

import io
import logging
import time
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Union

import feedparser
import httpx
import pendulum

from ..errors import FetchError, ParseError
from .models import Feed, FeedItem
from .text import clean_title

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "newsfound/0.1 (RSS reader)"


def _struct_to_datetime(value: Optional[time.struct_time]) -> Optional[datetime]:
    """feedparser's parsed time tuples are always UTC."""
    if not value:
        return None
    try:
        return datetime(*value[:6], tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return None


def _string_to_datetime(value: Optional[str]) -> Optional[datetime]:
    """Last resort for date strings feedparser could not parse."""
    if not value:
        return None
    try:
        parsed = pendulum.parse(value, strict=False)
    except (ValueError, OverflowError):
        return None
    if not isinstance(parsed, datetime):
        return None
    return parsed.in_timezone("UTC")


def parse_date(entry: Mapping[str, Any], prefixes=("published", "updated")) -> Optional[datetime]:
    """First parseable date among ``<prefix>_parsed`` / ``<prefix>`` fields."""
    for prefix in prefixes:
        parsed = _struct_to_datetime(entry.get(f"{prefix}_parsed"))
        if parsed:
            return parsed
        parsed = _string_to_datetime(entry.get(prefix))
        if parsed:
            return parsed
    return None


def _categories(entry: Mapping[str, Any]) -> List[str]:
    terms = []
    for tag in entry.get("tags") or []:
        term = (tag.get("term") or "").strip()
        if term:
            terms.append(term)
    return terms


def _body_html(entry: Mapping[str, Any]) -> Optional[str]:
    """Full body from content:encoded, if the feed carries it."""
    for content in entry.get("content") or []:
        value = content.get("value")
        if value:
            return value
    return None


class FeedFetcher:
    """Fetch and parse syndication feeds."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """Initialize feed fetcher.

        Args:
            timeout: Request timeout in seconds; ``None`` waits on the peer.
            user_agent: User agent header sent with every request.
            transport: Optional httpx transport (tests inject a mock one).
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

    def _get(self, url: str) -> bytes:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8",
        }
        try:
            with httpx.Client(
                timeout=self.timeout,
                follow_redirects=True,
                headers=headers,
                transport=self.transport,
            ) as client:
                response = client.get(url)
                response.raise_for_status()
                return response.content
        except httpx.HTTPStatusError as e:
            raise FetchError(url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise FetchError(url, f"HTTP error: {e}") from e

    def fetch(self, feed_url: str, now: Optional[datetime] = None) -> Feed:
        """Fetch and parse a single feed.

        Items without a publish date get the channel date, else ``now`` (the
        moment this fetch started).

        Raises:
            FetchError: on transport failure or a non-success status.
            ParseError: when the document is malformed and yields no items.
        """
        if now is None:
            now = pendulum.now("UTC")

        logger.info("Pulling feed from %s", feed_url)
        document = self._get(feed_url)
        return self.parse(feed_url, document, now)

    def parse(self, feed_url: str, document: Union[bytes, str], now: datetime) -> Feed:
        """Normalize a raw feed document."""
        if isinstance(document, str):
            document = document.encode("utf-8")
        # A stream keeps feedparser from treating the body as a URL or path.
        parsed = feedparser.parse(io.BytesIO(document))

        if parsed.bozo:
            if not parsed.entries:
                raise ParseError(f"Invalid feed at {feed_url}: {parsed.bozo_exception}")
            logger.warning("Feed %s is not well formed, continuing: %s", feed_url, parsed.bozo_exception)

        channel = parsed.feed
        channel_title = clean_title(channel.get("title"), default="")
        fallback_date = parse_date(channel) or now

        items = []
        for entry in parsed.entries:
            link = (entry.get("link") or "").strip()
            if not link:
                logger.debug("Skipping item without link in %s", feed_url)
                continue

            items.append(
                FeedItem(
                    link=link,
                    title=clean_title(entry.get("title")),
                    published_at=parse_date(entry) or fallback_date,
                    raw_body_html=_body_html(entry),
                    summary=entry.get("summary") or entry.get("description"),
                    categories=_categories(entry),
                )
            )

        logger.info("Parsed %d items from %s", len(items), channel_title or feed_url)
        return Feed(url=feed_url, channel_title=channel_title, items=items)
