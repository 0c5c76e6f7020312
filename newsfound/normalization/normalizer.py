"""Best-effort content normalization through an LLM provider."""

import logging
from typing import Union

import httpx
from pydantic import BaseModel, Field

from .llm_provider import LLMProvider

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "Convert the following HTML content to clean, readable markdown. "
    "Preserve important formatting but remove unnecessary HTML elements."
)


class NormalizedText(BaseModel):
    """Successful normalization."""

    text: str = Field(..., description="Normalized markdown")


class NormalizationFailure(BaseModel):
    """Normalization did not produce text; callers keep the raw content."""

    reason: str = Field(..., description="Why normalization failed")


NormalizationResult = Union[NormalizedText, NormalizationFailure]


class ContentNormalizer:
    """Turn extracted HTML into clean text, never losing the input."""

    def __init__(self, provider: LLMProvider, system_prompt: str = SYSTEM_PROMPT) -> None:
        """Initialize with an LLM provider."""
        self.provider = provider
        self.system_prompt = system_prompt

    def try_normalize(self, raw_content: str) -> NormalizationResult:
        """Normalize ``raw_content`` and report the outcome as a value."""
        if not raw_content or not raw_content.strip():
            return NormalizationFailure(reason="Content is required")

        try:
            text = self.provider.chat(self.system_prompt, raw_content)
        except httpx.HTTPStatusError as e:
            return NormalizationFailure(reason=f"HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            return NormalizationFailure(reason=f"HTTP error: {e}")
        except (ValueError, AttributeError) as e:
            return NormalizationFailure(reason=f"Malformed response: {e}")

        if not text or not text.strip():
            return NormalizationFailure(reason="Empty response")
        return NormalizedText(text=text)

    def normalize(self, raw_content: str) -> str:
        """Normalized text, or ``raw_content`` unchanged if normalization failed."""
        result = self.try_normalize(raw_content)
        if isinstance(result, NormalizationFailure):
            logger.warning("Normalization failed, keeping raw content: %s", result.reason)
            return raw_content
        return result.text
