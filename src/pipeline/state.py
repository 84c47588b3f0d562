# src/pipeline/state.py — v2
"""Run state machine.

idle → analyzing → planning → synthesizing → validating → storing
→ registry_planned → done, with failed reachable from analyzing and
planning only. Per-file failures never move the run to failed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from widgetsmith.core.models import RunFailure, RunReport, RunStage
from widgetsmith.logging.context import set_stage_context

logger = logging.getLogger(__name__)

_TRANSITIONS: dict[RunStage, frozenset[RunStage]] = {
    "idle": frozenset({"analyzing", "synthesizing"}),
    "analyzing": frozenset({"planning", "failed"}),
    "planning": frozenset({"synthesizing", "failed"}),
    "synthesizing": frozenset({"validating"}),
    "validating": frozenset({"storing"}),
    "storing": frozenset({"registry_planned"}),
    "registry_planned": frozenset({"done"}),
    "done": frozenset(),
    "failed": frozenset(),
}


class InvalidTransition(RuntimeError):
    """Raised on a stage change the state machine does not allow."""


def advance(report: RunReport, stage: RunStage) -> None:
    """Move the run to stage, updating logging context."""
    if stage not in _TRANSITIONS[report.stage]:
        raise InvalidTransition(f"Cannot move run from {report.stage!r} to {stage!r}")
    report.stage = stage
    set_stage_context(stage)
    logger.debug("Run %s entered stage %s", report.run_id, stage)


def fail(report: RunReport, error: Exception) -> None:
    """Terminate the run as failed at its current stage."""
    stage = report.stage
    advance(report, "failed")
    report.status = "failed"
    report.failure = RunFailure(stage=stage, reason=str(error), error_type=type(error).__name__)
    report.completed_at = datetime.now(timezone.utc)


def finish(report: RunReport) -> None:
    """Terminate the run as done; status reflects per-file outcomes."""
    advance(report, "done")
    report.status = "succeeded" if report.written_files and not report.errors else "partial"
    report.completed_at = datetime.now(timezone.utc)
