"""Data models for ingestion."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class FeedItem(BaseModel):
    """Parsed feed item."""

    link: str = Field(..., description="Article URL")
    title: str = Field(..., description="Cleaned article title")
    published_at: datetime = Field(..., description="Publication date, or the fallback timestamp")
    raw_body_html: Optional[str] = Field(None, description="Full body from the content:encoded extension")
    summary: Optional[str] = Field(None, description="Plain description/summary field")
    categories: List[str] = Field(default_factory=list, description="Item categories")


class Feed(BaseModel):
    """Parsed syndication feed."""

    url: str = Field(..., description="Feed URL")
    channel_title: str = Field("", description="Cleaned channel title, empty when the feed has none")
    items: List[FeedItem] = Field(default_factory=list, description="Parsed feed items")
