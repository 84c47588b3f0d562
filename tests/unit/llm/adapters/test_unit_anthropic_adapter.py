# tests/unit/llm/adapters/test_unit_anthropic_adapter.py — v2
"""Tests for llm/adapters/anthropic_adapter.py — mocked SDK client."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import pytest

from widgetsmith.core.errors import UpstreamError
from widgetsmith.llm.adapters.anthropic_adapter import AnthropicAdapter
from widgetsmith.llm.models import Message

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _sdk_response(*blocks):
    return SimpleNamespace(
        content=list(blocks),
        usage=SimpleNamespace(input_tokens=12, output_tokens=34),
        model="claude-sonnet-4-20250514",
    )


def _adapter_with(create: AsyncMock) -> AnthropicAdapter:
    adapter = AnthropicAdapter(model="claude-sonnet-4-20250514", api_key="sk-test")
    client = MagicMock()
    client.messages.create = create
    adapter._AnthropicAdapter__client = client
    return adapter


class TestAnthropicAdapter:
    def test_provider_name(self):
        assert AnthropicAdapter().provider_name == "anthropic"

    def test_lazy_client_disables_retries(self):
        adapter = AnthropicAdapter(api_key="sk-test")
        assert adapter._client.max_retries == 0

    @pytest.mark.asyncio
    async def test_complete_request_shape(self):
        create = AsyncMock(return_value=_sdk_response(SimpleNamespace(type="text", text="hello")))
        adapter = _adapter_with(create)

        resp = await adapter.complete(
            [Message(role="user", content="hi")], system="be brief", max_tokens=100
        )

        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "claude-sonnet-4-20250514"
        assert kwargs["max_tokens"] == 100
        assert kwargs["messages"] == [{"role": "user", "content": "hi"}]
        assert kwargs["system"] == "be brief"
        assert resp.content == "hello"
        assert resp.input_tokens == 12
        assert resp.output_tokens == 34
        assert resp.provider == "anthropic"

    @pytest.mark.asyncio
    async def test_no_system_key_without_system(self):
        create = AsyncMock(return_value=_sdk_response(SimpleNamespace(type="text", text="x")))
        adapter = _adapter_with(create)
        await adapter.complete([Message(role="user", content="hi")])
        assert "system" not in create.call_args.kwargs

    @pytest.mark.asyncio
    async def test_first_text_block(self):
        create = AsyncMock(
            return_value=_sdk_response(
                SimpleNamespace(type="tool_use", id="t1"),
                SimpleNamespace(type="text", text="first"),
                SimpleNamespace(type="text", text="second"),
            )
        )
        resp = await _adapter_with(create).complete([Message(role="user", content="hi")])
        assert resp.content == "first"

    @pytest.mark.asyncio
    async def test_status_error_maps_to_upstream(self):
        err = anthropic.InternalServerError(
            "overloaded", response=httpx.Response(529, request=_REQUEST), body=None
        )
        adapter = _adapter_with(AsyncMock(side_effect=err))
        with pytest.raises(UpstreamError) as exc_info:
            await adapter.complete([Message(role="user", content="hi")])
        assert exc_info.value.status == 529

    @pytest.mark.asyncio
    async def test_connection_error_maps_to_upstream(self):
        err = anthropic.APIConnectionError(request=_REQUEST)
        adapter = _adapter_with(AsyncMock(side_effect=err))
        with pytest.raises(UpstreamError) as exc_info:
            await adapter.complete([Message(role="user", content="hi")])
        assert exc_info.value.status is None

    @pytest.mark.asyncio
    async def test_response_validation_error_maps_to_upstream(self):
        err = anthropic.APIResponseValidationError(
            response=httpx.Response(200, request=_REQUEST), body=None
        )
        adapter = _adapter_with(AsyncMock(side_effect=err))
        with pytest.raises(UpstreamError) as exc_info:
            await adapter.complete([Message(role="user", content="hi")])
        assert exc_info.value.status is None
