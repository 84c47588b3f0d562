# src/llm/adapters/anthropic_adapter.py — v4
"""Anthropic Claude adapter implementing BaseLLMClient.

Uses the official anthropic SDK over the Messages API. SDK-level retries
are disabled: a failed call surfaces immediately as UpstreamError with the
HTTP status preserved.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import anthropic

from widgetsmith.core.errors import UpstreamError
from widgetsmith.llm.base_client import BaseLLMClient
from widgetsmith.llm.models import LLMResponse, Message

logger = logging.getLogger(__name__)


class AnthropicAdapter(BaseLLMClient):
    """Adapter for Anthropic Claude models."""

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: str | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self.__client: anthropic.AsyncAnthropic | None = None  # Lazy initialization

    @property
    def _client(self) -> anthropic.AsyncAnthropic:
        """Lazy-init Anthropic client (only on first API call)."""
        if self.__client is None:
            self.__client = anthropic.AsyncAnthropic(
                api_key=self._api_key or "",
                max_retries=0,
            )
        return self.__client

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
    ) -> LLMResponse:
        """Text completion via Anthropic Messages API."""
        kwargs = self._build_kwargs(messages, system, max_tokens, temperature)

        start = time.monotonic()
        try:
            response = await self._client.messages.create(**kwargs)
        except anthropic.APIStatusError as e:
            raise UpstreamError(e.status_code, str(e.message)) from e
        except anthropic.APIConnectionError as e:
            raise UpstreamError(None, str(e)) from e
        except anthropic.APIError as e:
            raise UpstreamError(None, str(e.message)) from e
        latency_ms = int((time.monotonic() - start) * 1000)

        return LLMResponse(
            content=self._extract_content(response),
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=response.model,
            provider="anthropic",
            latency_ms=latency_ms,
            raw_response=response,
        )

    @property
    def provider_name(self) -> str:
        return "anthropic"

    # --- Internal helpers ---

    def _build_kwargs(
        self,
        messages: list[Message],
        system: str | None,
        max_tokens: int,
        temperature: float,
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [self._to_api_message(m) for m in messages],
        }
        if system:
            kwargs["system"] = system
        return kwargs

    @staticmethod
    def _to_api_message(m: Message) -> dict[str, Any]:
        return {"role": m.role, "content": m.content}

    @staticmethod
    def _extract_content(response: Any) -> str:
        """Extract text of the first text block."""
        for block in response.content:
            if getattr(block, "type", None) == "text":
                return block.text
        return ""
