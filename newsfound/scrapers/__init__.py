"""Site-specific article content extraction."""

from .base import (
    MEDIA_CONTENT,
    ArticleMetadata,
    ExtractionStrategy,
    HttpStrategy,
    RawContent,
    is_media,
)
from .cbc import CBCStrategy
from .html import ContainerMarker, extract_first, extract_region
from .registry import ScraperRegistry, default_registry
from .true_north import TrueNorthStrategy

__all__ = [
    "MEDIA_CONTENT",
    "ArticleMetadata",
    "CBCStrategy",
    "ContainerMarker",
    "ExtractionStrategy",
    "HttpStrategy",
    "RawContent",
    "ScraperRegistry",
    "TrueNorthStrategy",
    "default_registry",
    "extract_first",
    "extract_region",
    "is_media",
]
