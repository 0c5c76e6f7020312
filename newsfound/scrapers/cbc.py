"""CBC News extraction strategy."""

import logging
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from ..errors import ExtractionError
from .base import ArticleMetadata, HttpStrategy, RawContent
from .html import ContainerMarker, extract_first, extract_region

logger = logging.getLogger(__name__)

MAIN = ContainerMarker("main")
BODY_MARKERS = (
    ContainerMarker("div", "id", "detailContent"),
    ContainerMarker("div", "class", "story-content"),
)
PAGE_FALLBACKS = (ContainerMarker("div", "id", "content"),)

MEDIA_PATH_PREFIXES = ("/player/",)


def clean_url(url: str) -> str:
    """Drop query string and fragment."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def extract_main_content(html: str) -> Optional[str]:
    """Story body inside ``<main>``, else a page-level content container."""
    main = extract_region(html, MAIN)
    if main and main.strip():
        return extract_first(main, BODY_MARKERS) or main

    return extract_first(html, PAGE_FALLBACKS)


class CBCStrategy(HttpStrategy):
    """Scrape cbc.ca article pages."""

    name = "cbc"
    headers = {
        "User-Agent": (
            "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
        ),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
        "Upgrade-Insecure-Requests": "1",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "none",
        "Sec-Fetch-User": "?1",
        "Cache-Control": "max-age=0",
    }

    def extract(self, url: str, meta: ArticleMetadata) -> RawContent:
        """Fetch the article page and isolate the story body."""
        cleaned = clean_url(url)
        if urlsplit(cleaned).path.startswith(MEDIA_PATH_PREFIXES):
            logger.debug("Media page: %s", cleaned)
            return RawContent.media()

        html = self.fetch_html(cleaned)
        content = extract_main_content(html)
        if not content:
            raise ExtractionError(f"No content container found in {cleaned}")

        logger.debug("Extracted %d chars from %s", len(content), meta.title or cleaned)
        return RawContent.text(content)
