# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides settings, an in-memory key-value store, sample requests, analyses
and plans, and scripted completion transports. No network access: the
transport is always an AsyncMock.
"""

from __future__ import annotations

import json
from typing import Callable
from unittest.mock import AsyncMock

import pytest

from widgetsmith.config.credentials import Credentials
from widgetsmith.config.settings import Settings
from widgetsmith.core.models import (
    AIAnalysis,
    CompanyContext,
    GenerationRequest,
    ImplementationPlan,
)
from widgetsmith.kv.memory_store import MemoryKeyValueStore
from widgetsmith.llm.completion import CompletionClient
from widgetsmith.llm.models import LLMResponse
from widgetsmith.tracking.call_logger import CallLogger


# === FIXTURES: Raw model output ===


ANALYSIS_PAYLOAD = {
    "complexity": "Moderate",
    "estimatedTime": "2-3 hours",
    "requiredAPIs": ["FMP"],
    "components": ["LineChart", "PeriodSelector"],
    "risks": ["API rate limits"],
    "widgetType": "moving-average-chart",
    "widgetTitle": "Moving Average Chart",
    "description": "Plots 50 and 200 day moving averages for a ticker",
}

PLAN_PAYLOAD = {
    "steps": [
        {
            "step": 1,
            "description": "Create the price history service",
            "files": ["src/services/movingAverageService.ts"],
            "estimated_duration": "20 min",
        },
        {
            "step": 2,
            "description": "Build the chart widget component",
            "files": ["src/components/widgets/MovingAverageChartWidget.tsx"],
            "estimated_duration": "40 min",
        },
    ],
    "totalSteps": 2,
}

SERVICE_SOURCE = (
    "import { fmpApi } from './fmpApi';\n\n"
    "export async function fetchMovingAverages(symbol: string) {\n"
    "  const prices = await fmpApi.getHistoricalPrices(symbol);\n"
    "  return prices.map((p) => p.close);\n"
    "}\n"
)

WIDGET_SOURCE = (
    "import React from 'react';\n"
    "import { WidgetProps } from '../../types/widget';\n\n"
    "export const MovingAverageChartWidget: React.FC<WidgetProps> = (props) => {\n"
    "  return <div className=\"p-4\">{props.title}</div>;\n"
    "};\n"
)


@pytest.fixture
def analysis_text() -> str:
    """Analysis JSON wrapped in chatty model prose."""
    return f"Here is my analysis:\n{json.dumps(ANALYSIS_PAYLOAD)}\nLet me know!"


@pytest.fixture
def plan_text() -> str:
    return f"```json\n{json.dumps(PLAN_PAYLOAD, indent=2)}\n```"


@pytest.fixture
def service_source() -> str:
    return SERVICE_SOURCE


@pytest.fixture
def widget_source() -> str:
    return WIDGET_SOURCE


# === FIXTURES: Domain objects ===


@pytest.fixture
def sample_request() -> GenerationRequest:
    return GenerationRequest(
        user_prompt="Create a moving average chart widget",
        company_context=CompanyContext(symbol="AAPL", name="Apple Inc.", industry="Technology"),
    )


@pytest.fixture
def sample_analysis() -> AIAnalysis:
    return AIAnalysis.model_validate(ANALYSIS_PAYLOAD)


@pytest.fixture
def sample_plan() -> ImplementationPlan:
    return ImplementationPlan.model_validate(PLAN_PAYLOAD)


# === FIXTURES: Configuration and collaborators ===


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None, anthropic_api_key="test-key", kv_backend="memory")


@pytest.fixture
def credentials() -> Credentials:
    return Credentials("test-key")


@pytest.fixture
def memory_kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def call_logger() -> CallLogger:
    return CallLogger()


@pytest.fixture
def make_response() -> Callable[[str], LLMResponse]:
    """Factory building an LLMResponse around completion text."""

    def _make(content: str, input_tokens: int = 100, output_tokens: int = 50) -> LLMResponse:
        return LLMResponse(
            content=content,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            model="claude-sonnet-4-20250514",
            provider="anthropic",
            latency_ms=120,
        )

    return _make


@pytest.fixture
def scripted_transport(make_response) -> Callable[..., AsyncMock]:
    """Factory for a transport answering with the given texts in order."""

    def _make(*texts: str) -> AsyncMock:
        transport = AsyncMock()
        transport.provider_name = "anthropic"
        transport.complete = AsyncMock(side_effect=[make_response(t) for t in texts])
        return transport

    return _make


@pytest.fixture
def mock_transport(make_response) -> AsyncMock:
    """Transport always answering with the same short text."""
    transport = AsyncMock()
    transport.provider_name = "anthropic"
    transport.complete = AsyncMock(return_value=make_response("AI connection successful"))
    return transport


@pytest.fixture
def completion_factory(settings, credentials, call_logger) -> Callable[[AsyncMock], CompletionClient]:
    """Factory wiring a CompletionClient around a transport."""

    def _make(transport: AsyncMock) -> CompletionClient:
        return CompletionClient(credentials, settings, transport=transport, call_logger=call_logger)

    return _make
