"""Tests for newsfound.normalization."""

import json
from unittest.mock import Mock

import httpx
import pytest

from newsfound.normalization import (
    SYSTEM_PROMPT,
    ContentNormalizer,
    NormalizationFailure,
    NormalizedText,
    OllamaProvider,
    PassthroughProvider,
)

HOST = "http://ollama.local:11434"


def ollama(handler, **kwargs) -> OllamaProvider:
    return OllamaProvider(
        host=HOST + "/",
        model="reader",
        num_ctx=4096,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestOllamaProvider:
    def test_request_body(self) -> None:
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"message": {"role": "assistant", "content": "# Title"}})

        provider = ollama(handler)
        assert provider.chat("system", "<h1>Title</h1>") == "# Title"
        assert seen["url"] == HOST + "/api/chat"
        assert seen["body"] == {
            "model": "reader",
            "messages": [
                {"role": "system", "content": "system"},
                {"role": "user", "content": "<h1>Title</h1>"},
            ],
            "stream": False,
            "options": {"num_ctx": 4096},
        }
        assert provider.get_usage_stats() == {"api_calls": 1, "failed_calls": 0, "model": "reader"}

    def test_http_error_status(self) -> None:
        provider = ollama(lambda request: httpx.Response(500))
        with pytest.raises(httpx.HTTPStatusError):
            provider.chat("system", "content")
        assert provider.get_usage_stats()["failed_calls"] == 1

    @pytest.mark.parametrize(
        "payload",
        [{}, {"message": {}}, {"message": {"content": ""}}, {"message": {"content": 42}}, []],
    )
    def test_malformed_response(self, payload) -> None:
        provider = ollama(lambda request: httpx.Response(200, json=payload))
        with pytest.raises((ValueError, AttributeError)):
            provider.chat("system", "content")

    def test_requires_host_and_model(self) -> None:
        with pytest.raises(ValueError):
            OllamaProvider(host="", model="reader", num_ctx=1)
        with pytest.raises(ValueError):
            OllamaProvider(host=HOST, model="", num_ctx=1)


class TestContentNormalizer:
    def test_success(self) -> None:
        provider = Mock()
        provider.chat.return_value = "Clean text"
        result = ContentNormalizer(provider).try_normalize("<p>Clean text</p>")

        assert result == NormalizedText(text="Clean text")
        provider.chat.assert_called_once_with(SYSTEM_PROMPT, "<p>Clean text</p>")

    def test_server_error_keeps_raw_content(self) -> None:
        provider = ollama(lambda request: httpx.Response(500))
        normalizer = ContentNormalizer(provider)

        result = normalizer.try_normalize("<p>raw</p>")
        assert isinstance(result, NormalizationFailure)
        assert "500" in result.reason
        assert normalizer.normalize("<p>raw</p>") == "<p>raw</p>"

    def test_connection_error(self) -> None:
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        result = ContentNormalizer(ollama(handler)).try_normalize("<p>raw</p>")
        assert isinstance(result, NormalizationFailure)

    def test_malformed_response(self) -> None:
        provider = ollama(lambda request: httpx.Response(200, json={"done": True}))
        assert isinstance(ContentNormalizer(provider).try_normalize("<p>raw</p>"), NormalizationFailure)

    def test_blank_reply(self) -> None:
        provider = Mock()
        provider.chat.return_value = "   "
        assert isinstance(ContentNormalizer(provider).try_normalize("<p>raw</p>"), NormalizationFailure)

    def test_empty_input_skips_provider(self) -> None:
        provider = Mock()
        result = ContentNormalizer(provider).try_normalize("  ")
        assert isinstance(result, NormalizationFailure)
        provider.chat.assert_not_called()

    def test_passthrough(self) -> None:
        assert ContentNormalizer(PassthroughProvider()).normalize("<p>x</p>") == "<p>x</p>"
