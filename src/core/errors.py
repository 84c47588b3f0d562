# src/core/errors.py — v1
"""Error taxonomy for the generation pipeline.

Stage-fatal errors (CredentialMissing, UpstreamError, MalformedModelOutput
raised during analysis or planning) abort a run. File-local errors
(CodeGenerationFailed, ValidationFailed, StorageError) are collected into
the run report and never abort sibling files.
"""

from __future__ import annotations


class GenerationError(Exception):
    """Base class for all pipeline errors."""


class CredentialMissing(GenerationError):
    """No API key configured for the completion service."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "AI API key not configured. Set it with 'widgetsmith set-key' "
            "or WIDGETSMITH_ANTHROPIC_API_KEY."
        )


class UpstreamError(GenerationError):
    """Completion service answered with a non-success status."""

    def __init__(self, status: int | None, detail: str = "") -> None:
        self.status = status
        self.detail = detail
        label = status if status is not None else "connection error"
        msg = f"AI API request failed: {label}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class MalformedModelOutput(GenerationError):
    """Model output did not contain a valid structured payload."""

    def __init__(self, stage: str, detail: str) -> None:
        self.stage = stage
        self.detail = detail
        super().__init__(f"Malformed {stage} output: {detail}")


class CodeGenerationFailed(GenerationError):
    """Synthesis of a single file failed."""

    def __init__(self, path: str, cause: Exception | None = None) -> None:
        self.path = path
        self.cause = cause
        reason = str(cause) if cause is not None else "unknown error"
        super().__init__(f"Code generation failed for {path}: {reason}")


class ValidationFailed(GenerationError):
    """A synthesized file was rejected by the content validator."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Validation failed for {path}: {reason}")


class StorageError(GenerationError):
    """Persisting a single artifact failed."""

    def __init__(self, path: str, cause: Exception | None = None) -> None:
        self.path = path
        self.cause = cause
        reason = str(cause) if cause is not None else "unknown error"
        super().__init__(f"Failed to write file {path}: {reason}")
