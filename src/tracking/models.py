# src/tracking/models.py — v2
"""Tracking domain models: LLMCallRecord."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class LLMCallRecord(BaseModel):
    """Individual completion call log entry."""

    call_id: str
    timestamp: datetime
    agent: str
    step: str
    provider: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    latency_ms: int = 0
    status: Literal["success", "failed"]
    error: str | None = None
