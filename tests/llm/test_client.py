"""
Tests for the chat-completions client.
"""

import asyncio
import json
from unittest.mock import patch

import httpx
import pytest

from maintainability_index.llm.client import (
    LLMClient,
    LLMResponse,
    extract_error_message,
)

API_URL = "https://llm.test/v1/chat/completions"


def _complete(handler, prompt: str = "Hello") -> LLMResponse:
    """Run a single completion against a mocked transport."""

    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = LLMClient(
                api_key="test-key", model="test/model", api_url=API_URL, http_client=http
            )
            return await client.complete(prompt)

    return asyncio.run(_run())


def _ok(content, total_tokens=42):
    return httpx.Response(
        200,
        json={
            "choices": [{"message": {"role": "assistant", "content": content}}],
            "usage": {"total_tokens": total_tokens},
        },
    )


class TestLLMClientInit:
    def test_requires_api_key(self):
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ValueError, match="OPENROUTER_API_KEY is required"):
                LLMClient()

    def test_reads_key_and_model_from_env(self):
        with patch.dict(
            "os.environ",
            {"OPENROUTER_API_KEY": "env-key", "OPENROUTER_MODEL": "env/model"},
            clear=True,
        ):
            client = LLMClient()
        assert client.api_key == "env-key"
        assert client.model == "env/model"

    def test_explicit_arguments_win(self):
        with patch.dict("os.environ", {"OPENROUTER_MODEL": "env/model"}):
            client = LLMClient(api_key="k", model="explicit/model", api_url=API_URL)
        assert client.model == "explicit/model"
        assert client.api_url == API_URL


class TestComplete:
    def test_request_shape(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["headers"] = request.headers
            captured["body"] = json.loads(request.content)
            return _ok('{"clarity": 80}')

        response = _complete(handler, "Score this README")

        assert response == LLMResponse('{"clarity": 80}', 42)
        assert captured["url"] == API_URL
        assert captured["headers"]["Authorization"] == "Bearer test-key"
        assert captured["headers"]["X-Title"] == "Repository Maintainability Index"
        assert "HTTP-Referer" in captured["headers"]
        assert captured["body"] == {
            "model": "test/model",
            "messages": [{"role": "user", "content": "Score this README"}],
            "temperature": 0.3,
            "max_tokens": 2000,
        }

    def test_missing_usage_counts_zero_tokens(self):
        def handler(request):
            return httpx.Response(
                200, json={"choices": [{"message": {"content": "text"}}]}
            )

        assert _complete(handler).tokens_used == 0

    def test_unauthorized_raises_with_provider_message(self):
        def handler(request):
            return httpx.Response(
                401, json={"error": {"message": "No auth credentials found", "code": 401}}
            )

        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            _complete(handler)
        message = str(exc_info.value)
        assert "401" in message
        assert "test/model" in message
        assert "No auth credentials found" in message

    @pytest.mark.parametrize(
        "payload",
        [
            {"choices": []},
            {"choices": [{"message": {}}]},
            {"unexpected": True},
        ],
    )
    def test_malformed_response(self, payload):
        def handler(request):
            return httpx.Response(200, json=payload)

        with pytest.raises(ValueError):
            _complete(handler)

    def test_empty_content(self):
        with pytest.raises(ValueError, match="no content"):
            _complete(lambda request: _ok("   "))


class TestExtractErrorMessage:
    def test_structured_error(self):
        body = json.dumps({"error": {"message": "Rate limit exceeded", "code": 429}})
        assert extract_error_message(body) == "[429] Rate limit exceeded"

    def test_error_without_code(self):
        body = json.dumps({"error": {"message": "Bad model"}})
        assert extract_error_message(body) == "Bad model"

    def test_plain_text_truncated(self):
        assert extract_error_message("x" * 300) == "x" * 200 + "..."

    def test_empty_body(self):
        assert extract_error_message("") == "No error details available"
