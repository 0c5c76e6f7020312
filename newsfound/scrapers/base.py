"""Extraction strategy interface and shared page fetching."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Literal, Optional

import httpx
from pydantic import BaseModel, Field

from ..errors import FetchError

logger = logging.getLogger(__name__)

MEDIA_CONTENT = "Video Content"
MEDIA_CATEGORIES = frozenset({"videos", "podcasts"})


def is_media(categories: Iterable[str]) -> bool:
    """Whether feed categories mark an item as video or podcast."""
    if isinstance(categories, str):
        categories = [categories]
    return any((c or "").strip().lower() in MEDIA_CATEGORIES for c in categories)


class ArticleMetadata(BaseModel):
    """What a strategy knows about an article besides its URL."""

    id: Optional[int] = Field(None, description="Article row ID")
    url: str = Field(..., description="Article URL")
    title: str = Field("", description="Article title")
    categories: List[str] = Field(default_factory=list, description="Feed categories")
    raw_body_html: Optional[str] = Field(None, description="content:encoded body from the feed")
    summary: Optional[str] = Field(None, description="Feed description")


class RawContent(BaseModel):
    """Extracted article body, or the non-text media marker."""

    kind: Literal["text", "media"] = Field("text", description="Body text or media marker")
    body: str = Field(..., description="Extracted HTML/text, or the media sentinel")

    @classmethod
    def text(cls, body: str) -> "RawContent":
        return cls(kind="text", body=body)

    @classmethod
    def media(cls) -> "RawContent":
        return cls(kind="media", body=MEDIA_CONTENT)

    @property
    def is_media(self) -> bool:
        return self.kind == "media"


class ExtractionStrategy(ABC):
    """Site-specific logic that isolates article body content."""

    name: str = "base"

    @abstractmethod
    def extract(self, url: str, meta: ArticleMetadata) -> RawContent:
        """
        Extract the raw body for an article.

        Args:
            url: Article URL
            meta: Feed metadata known for the article

        Returns:
            Raw content, or the media marker

        Raises:
            ExtractionError: when no content can be located
            FetchError: when the page cannot be retrieved
        """
        pass


class HttpStrategy(ExtractionStrategy):
    """Strategy that downloads the article page."""

    headers: Dict[str, str] = {
        "User-Agent": "newsfound/0.1 (RSS reader)",
        "Accept": "text/html,application/xhtml+xml",
    }

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """Initialize with an optional timeout and httpx transport."""
        self.timeout = timeout
        self.transport = transport

    def fetch_html(self, url: str) -> str:
        """GET a page with this strategy's headers."""
        logger.debug("Fetching article %s", url)
        try:
            with httpx.Client(
                timeout=self.timeout,
                follow_redirects=True,
                headers=self.headers,
                transport=self.transport,
            ) as client:
                response = client.get(url)
                response.raise_for_status()
                return response.text
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            error_msg = f"HTTP {status}"
            if status == 404:
                error_msg = "Article not found (404)"
            elif status == 403:
                error_msg = "Access forbidden (403)"
            elif status >= 500:
                error_msg = f"Server error ({status})"
            raise FetchError(url, error_msg) from e
        except httpx.TimeoutException as e:
            raise FetchError(url, "Request timed out") from e
        except httpx.HTTPError as e:
            raise FetchError(url, f"HTTP error: {e}") from e
