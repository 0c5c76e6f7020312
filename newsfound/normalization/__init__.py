"""Content normalization."""

from .llm_provider import LLMProvider, OllamaProvider, PassthroughProvider
from .normalizer import (
    SYSTEM_PROMPT,
    ContentNormalizer,
    NormalizationFailure,
    NormalizationResult,
    NormalizedText,
)

__all__ = [
    "LLMProvider",
    "OllamaProvider",
    "PassthroughProvider",
    "ContentNormalizer",
    "NormalizationFailure",
    "NormalizationResult",
    "NormalizedText",
    "SYSTEM_PROMPT",
]
