# src/llm/completion.py — v2
"""Completion client shared by every pipeline stage.

Checks that a credential is configured before any transport is built or
called, then sends a single user prompt (plus optional system prompt) and
returns the raw text of the first content block. No retries at this layer.
"""

from __future__ import annotations

import logging

from widgetsmith.config.credentials import Credentials
from widgetsmith.config.settings import Settings
from widgetsmith.core.errors import CredentialMissing, GenerationError, UpstreamError
from widgetsmith.llm.base_client import BaseLLMClient
from widgetsmith.llm.client_factory import create_llm_client
from widgetsmith.llm.models import Message
from widgetsmith.tracking.call_logger import CallLogger

logger = logging.getLogger(__name__)

_CONNECTION_TEST_PROMPT = 'Respond with "AI connection successful" if you can read this.'


class CompletionClient:
    """Sends prompts to the completion service on behalf of pipeline agents."""

    def __init__(
        self,
        credentials: Credentials,
        settings: Settings,
        transport: BaseLLMClient | None = None,
        call_logger: CallLogger | None = None,
    ) -> None:
        self._credentials = credentials
        self._settings = settings
        self._injected = transport
        self._call_logger = call_logger
        self._cached: BaseLLMClient | None = None
        self._cached_key: str | None = None

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    def _transport(self, api_key: str) -> BaseLLMClient:
        if self._injected is not None:
            return self._injected
        if self._cached is None or self._cached_key != api_key:
            self._cached = create_llm_client(
                self._settings.llm_provider, self._settings.llm_model, api_key=api_key
            )
            self._cached_key = api_key
        return self._cached

    def _require_key(self) -> str:
        api_key = self._credentials.get_api_key()
        if not api_key:
            raise CredentialMissing()
        return api_key

    async def complete(
        self,
        prompt: str,
        max_output_tokens: int,
        system: str | None = None,
        agent: str = "unknown",
        step: str = "",
    ) -> str:
        """Send one prompt and return the raw completion text.

        Args:
            prompt: User message content.
            max_output_tokens: Output token budget for this call.
            system: Role-specific system prompt, if any.
            agent: Calling agent name (for call tracking).
            step: Step identifier (for call tracking).

        Raises:
            CredentialMissing: No API key configured (checked before any call).
            UpstreamError: The service returned a non-success status, or the
                transport failed in any other way.
        """
        api_key = self._require_key()
        transport = self._transport(api_key)

        logger.debug("Completion request agent=%s step=%s max_tokens=%d", agent, step, max_output_tokens)
        try:
            response = await transport.complete(
                messages=[Message(role="user", content=prompt)],
                system=system,
                max_tokens=max_output_tokens,
                temperature=self._settings.llm_temperature,
            )
        except GenerationError as e:
            if self._call_logger is not None:
                self._call_logger.record_failure(
                    agent, step, transport.provider_name, self._settings.llm_model, e
                )
            raise
        except Exception as e:
            if self._call_logger is not None:
                self._call_logger.record_failure(
                    agent, step, transport.provider_name, self._settings.llm_model, e
                )
            raise UpstreamError(None, str(e)) from e

        if self._call_logger is not None:
            self._call_logger.record(agent, step, response)
        return response.content

    async def test_connection(self) -> bool:
        """Return True if a minimal completion succeeds with the current key."""
        if not self._credentials.is_configured:
            return False
        try:
            await self.complete(
                _CONNECTION_TEST_PROMPT,
                self._settings.llm_max_tokens_connection_test,
                agent="connection_test",
            )
        except GenerationError as e:
            logger.warning("Connection test failed: %s", e)
            return False
        return True
