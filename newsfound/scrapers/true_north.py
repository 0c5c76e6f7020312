"""True North Centre (tnc.news) extraction strategy."""

import logging

from ..errors import ExtractionError
from .base import ArticleMetadata, HttpStrategy, RawContent
from .html import ContainerMarker, extract_first

logger = logging.getLogger(__name__)

PAGE_MARKERS = (
    ContainerMarker("div", "class", "entry-content"),
    ContainerMarker("article"),
)


class TrueNorthStrategy(HttpStrategy):
    """tnc.news publishes full bodies in its feed; the page is a fallback."""

    name = "true_north"

    def extract(self, url: str, meta: ArticleMetadata) -> RawContent:
        if meta.raw_body_html and meta.raw_body_html.strip():
            return RawContent.text(meta.raw_body_html)

        if meta.summary and meta.summary.strip():
            logger.debug("No full body in feed for %s, using description", meta.title or url)
            return RawContent.text(meta.summary)

        html = self.fetch_html(url)
        content = extract_first(html, PAGE_MARKERS)
        if not content:
            raise ExtractionError(f"No content available for {url}")
        return RawContent.text(content)
