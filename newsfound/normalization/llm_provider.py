"""LLM provider interface and implementations."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def chat(self, system_prompt: str, content: str) -> str:
        """
        Run one non-streaming chat exchange.

        Args:
            system_prompt: Fixed instruction for the model
            content: User message

        Returns:
            The model's reply

        Raises:
            httpx.HTTPError: on transport failure or non-success status
            ValueError: when the response body has an unexpected shape
        """
        pass

    @abstractmethod
    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""
        pass


class OllamaProvider(LLMProvider):
    """Ollama ``/api/chat`` implementation of LLM provider."""

    def __init__(
        self,
        host: str,
        model: str,
        num_ctx: int,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Initialize Ollama provider.

        Args:
            host: Base URL of the Ollama server
            model: Model name to use
            num_ctx: Context window size sent with every request
            timeout: Request timeout in seconds; None waits on the server
            transport: Custom httpx transport (for testing)
        """
        if not host:
            raise ValueError("Ollama host is required")
        if not model:
            raise ValueError("Model name is required")

        self.endpoint = f"{host.rstrip('/')}/api/chat"
        self.model = model
        self.num_ctx = num_ctx
        self.timeout = timeout
        self.transport = transport
        self.api_calls = 0
        self.failed_calls = 0

    def _request_body(self, system_prompt: str, content: str) -> Dict[str, Any]:
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": content},
        ]
        return {
            "model": self.model,
            "messages": messages,
            "stream": False,
            "options": {"num_ctx": self.num_ctx},
        }

    def chat(self, system_prompt: str, content: str) -> str:
        """Send content to the model and return its reply."""
        logger.info("Sending request to Ollama model: %s", self.model)
        self.api_calls += 1
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.endpoint, json=self._request_body(system_prompt, content))
                response.raise_for_status()
                data = response.json()

            reply = data.get("message", {}).get("content") if isinstance(data, dict) else None
            if not isinstance(reply, str) or not reply:
                raise ValueError("No content in Ollama response")
        except (httpx.HTTPError, ValueError, AttributeError):
            self.failed_calls += 1
            raise

        logger.info("Received response from Ollama model: %s", self.model)
        return reply

    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""
        return {
            "api_calls": self.api_calls,
            "failed_calls": self.failed_calls,
            "model": self.model,
        }


class PassthroughProvider(LLMProvider):
    """Provider that returns content unchanged, used when no model is configured."""

    def __init__(self) -> None:
        """Initialize passthrough provider."""
        self.calls = 0

    def chat(self, system_prompt: str, content: str) -> str:
        """Echo the content back."""
        self.calls += 1
        return content

    def get_usage_stats(self) -> Dict:
        """Get passthrough usage statistics."""
        return {
            "api_calls": self.calls,
            "failed_calls": 0,
            "model": "passthrough",
        }
