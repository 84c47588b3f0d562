# src/llm/base_client.py — v2
"""Abstract LLM client interface (the completion transport)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from widgetsmith.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
    ) -> LLMResponse:
        """Text completion.

        Raises:
            UpstreamError: On non-success status or connection failure.
        """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (anthropic, ...)."""
