# tests/unit/llm/test_unit_llm_models.py — v1
"""Tests for llm/models.py and llm/base_client.py."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from widgetsmith.llm.base_client import BaseLLMClient
from widgetsmith.llm.models import LLMResponse, Message


class TestMessage:
    def test_roles(self):
        assert Message(role="user", content="hi").role == "user"
        with pytest.raises(ValidationError):
            Message(role="system", content="hi")


class TestLLMResponse:
    def test_raw_response_optional(self):
        r = LLMResponse(
            content="x", input_tokens=1, output_tokens=2, model="m", provider="p", latency_ms=3
        )
        assert r.raw_response is None


class TestBaseLLMClient:
    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            BaseLLMClient()  # type: ignore[abstract]

    @pytest.mark.asyncio
    async def test_subclass(self):
        class EchoClient(BaseLLMClient):
            async def complete(self, messages, system=None, max_tokens=4096, temperature=0.2):
                return LLMResponse(
                    content=messages[-1].content,
                    input_tokens=0,
                    output_tokens=0,
                    model="echo",
                    provider="echo",
                    latency_ms=0,
                )

            @property
            def provider_name(self) -> str:
                return "echo"

        client = EchoClient()
        resp = await client.complete([Message(role="user", content="ping")])
        assert resp.content == "ping"
        assert client.provider_name == "echo"
