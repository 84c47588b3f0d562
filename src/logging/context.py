# src/logging/context.py — v2
"""Contextual logging support — attach run_id, stage and file path to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per pipeline run.
_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)
_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "path", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    run_id: str | None = None
    stage: str | None = None
    path: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(run_id=_run_id.get(), stage=_stage.get(), path=_path.get())


def set_run_context(run_id: str) -> None:
    """Set run-level context (called once per run)."""
    _run_id.set(run_id)


def set_stage_context(stage: str, path: str | None = None) -> None:
    """Set stage-level context (called on every stage transition)."""
    _stage.set(stage)
    _path.set(path)


def set_path_context(path: str | None) -> None:
    """Set the file currently being synthesized or stored."""
    _path.set(path)


def clear_context() -> None:
    """Reset all context variables."""
    _run_id.set(None)
    _stage.set(None)
    _path.set(None)
