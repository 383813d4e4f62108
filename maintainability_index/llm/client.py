"""
Chat-completion backends for AI augmentation.

``LLMClient`` talks to any OpenAI-compatible chat-completions endpoint
(OpenRouter by default). Anything with an async ``complete(prompt)`` method
returning an ``LLMResponse`` can stand in for it.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, NamedTuple

import httpx

from maintainability_index.config import (
    get_llm_api_key,
    get_llm_api_url,
    get_llm_model,
)
from maintainability_index.http_client import _get_async_http_client

APP_REFERER = "https://github.com/maintainability-index/maintainability-index"
APP_TITLE = "Repository Maintainability Index"

TEMPERATURE = 0.3
MAX_TOKENS = 2000
MAX_ERROR_LENGTH = 200


class LLMResponse(NamedTuple):
    """Text returned by a completion request."""

    content: str
    tokens_used: int = 0


class AIBackend(ABC):
    """Minimal contract for a completion backend."""

    model: str = ""

    @abstractmethod
    async def complete(self, prompt: str) -> LLMResponse:
        """
        Send a single-message prompt and return the model's reply.

        Raises:
            Exception: Any transport, HTTP or payload error. Callers treat
                every failure as "analysis unavailable".
        """


def extract_error_message(body: str) -> str:
    """Pull a readable message out of a provider error body."""
    if not body or not body.strip():
        return "No error details available"

    try:
        payload = json.loads(body)
    except ValueError:
        payload = None

    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        error = payload["error"]
        message = error.get("message")
        if message:
            code = error.get("code")
            return f"[{code}] {message}" if code is not None else str(message)

    if len(body) > MAX_ERROR_LENGTH:
        return body[:MAX_ERROR_LENGTH] + "..."
    return body


class LLMClient(AIBackend):
    """OpenAI-compatible chat-completions client."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        api_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: API key. If not provided, reads from the
                     OPENROUTER_API_KEY environment variable.
            model: Model identifier (defaults to the configured model).
            api_url: Chat-completions endpoint (defaults to OpenRouter).
            http_client: Client to send requests with (defaults to the
                         shared pooled client).

        Raises:
            ValueError: If no API key is available.
        """
        self.api_key = api_key or get_llm_api_key()
        if not self.api_key:
            raise ValueError(
                "OPENROUTER_API_KEY is required for LLM analysis.\n"
                "\n"
                "To get started:\n"
                "1. Create an API key at https://openrouter.ai/keys\n"
                "2. Set the key:\n"
                "   export OPENROUTER_API_KEY='your_key_here'  # Linux/macOS\n"
                "   or add to your .env file: OPENROUTER_API_KEY=your_key_here\n"
            )
        self.model = model or get_llm_model()
        self.api_url = api_url or get_llm_api_url()
        self._http_client = http_client

    def _build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }

    async def complete(self, prompt: str) -> LLMResponse:
        """
        Send a prompt to the chat-completions endpoint.

        Raises:
            httpx.HTTPStatusError: If the API returns a non-2xx status.
            ValueError: If the response carries no message content.
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": APP_REFERER,
            "X-Title": APP_TITLE,
        }
        client = self._http_client or await _get_async_http_client()
        response = await client.post(
            self.api_url,
            json=self._build_payload(prompt),
            headers=headers,
            # Per-request deadline is enforced by the caller
            timeout=None,
        )

        if response.is_error:
            message = extract_error_message(response.text)
            raise httpx.HTTPStatusError(
                f"LLM API request failed: {response.status_code} "
                f"(model: {self.model}) - {message}",
                request=response.request,
                response=response,
            )

        data = response.json()
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ValueError(f"Unexpected LLM response shape: {e}") from e
        if not isinstance(content, str) or not content.strip():
            raise ValueError("LLM response contained no content")

        usage = data.get("usage") or {}
        tokens_used = usage.get("total_tokens") or 0
        return LLMResponse(content, int(tokens_used))
