"""Article model for rows of a per-source articles table."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import DBModel

SCRAPE_PENDING = 0
SCRAPE_DONE = 1


class Article(DBModel):
    """Article row."""

    url: str = Field(..., description="Article URL, unique within its table")
    title: str = Field(..., description="Article title")
    date_added: datetime = Field(..., description="Publication timestamp from the feed")
    scrape_check: int = Field(SCRAPE_PENDING, description="0 = pending, 1 = done")
    content: Optional[str] = Field(None, description="Enriched body content")
    summary: Optional[str] = Field(None, description="Feed description captured on first insert")

    @property
    def is_pending(self) -> bool:
        """Whether enrichment has not stored content yet."""
        return self.content is None
