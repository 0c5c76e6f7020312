"""Run reporting models."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ArticleState(str, Enum):
    """Enrichment states of a single article."""

    PENDING = "pending"
    EXTRACTED = "extracted"
    NORMALIZED = "normalized"
    FALLBACK = "fallback"
    STORED = "stored"


class EnrichmentOutcome(str, Enum):
    """How enrichment of one article ended."""

    NORMALIZED = "normalized"
    FALLBACK = "fallback"
    MEDIA = "media"
    SKIPPED = "skipped"
    FAILED = "failed"


class TableReport(BaseModel):
    """Enrichment results for one source table."""

    table: str = Field(..., description="Articles table")
    pending: int = Field(0, description="Pending articles picked up")
    normalized: int = Field(0, description="Stored after successful normalization")
    fallback: int = Field(0, description="Stored raw after normalization failed")
    media: int = Field(0, description="Stored as media sentinel")
    skipped: int = Field(0, description="Left pending without error")
    failed: int = Field(0, description="Left pending after an error")
    error: Optional[str] = Field(None, description="Table-level error")

    @property
    def stored(self) -> int:
        return self.normalized + self.fallback + self.media

    def record(self, outcome: EnrichmentOutcome) -> None:
        """Count one article outcome."""
        field = outcome.value
        setattr(self, field, getattr(self, field) + 1)


class SourceReport(BaseModel):
    """Ingestion results for one feed."""

    feed_url: str = Field(..., description="Feed URL")
    channel_name: Optional[str] = Field(None, description="Channel display name")
    table: Optional[str] = Field(None, description="Articles table")
    items: int = Field(0, description="Items upserted")
    media: int = Field(0, description="Media items stored as the sentinel at ingest")
    success: bool = Field(False, description="Whether ingestion completed")
    error: Optional[str] = Field(None, description="Error message if failed")


class RunReport(BaseModel):
    """Outcome of one pipeline run. A run completes even if every step failed."""

    started_at: datetime = Field(..., description="When the run started")
    finished_at: Optional[datetime] = Field(None, description="When the run finished")
    sources: List[SourceReport] = Field(default_factory=list)
    tables: List[TableReport] = Field(default_factory=list)

    @property
    def duration(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    @property
    def failed_sources(self) -> List[SourceReport]:
        return [s for s in self.sources if not s.success]

    @property
    def stored(self) -> int:
        return sum(t.stored for t in self.tables) + sum(s.media for s in self.sources)
