"""Source model for registered feed endpoints."""

from pydantic import Field

from .base import DBModel


class Source(DBModel):
    """Feed endpoint and the table holding its articles."""

    url: str = Field(..., description="Feed URL")
    display_name: str = Field(..., description="Cleaned channel title")
    table_identifier: str = Field(..., description="Name of the per-source articles table")
