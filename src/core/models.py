# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
Wire names coming from model output are camelCase; attributes are
snake_case and both are accepted on input.
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_KEBAB_CASE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

Complexity = Literal["Simple", "Moderate", "Complex"]

RunStage = Literal[
    "idle",
    "analyzing",
    "planning",
    "synthesizing",
    "validating",
    "storing",
    "registry_planned",
    "done",
    "failed",
]

FileErrorStage = Literal["synthesis", "validation", "storage"]


# Model-output shapes are validated strictly: missing, extra or mistyped
# fields are rejected rather than coerced.
_MODEL_OUTPUT_CONFIG = ConfigDict(
    extra="forbid",
    strict=True,
    populate_by_name=True,
)


# === REQUEST ===


class CompanyContext(BaseModel):
    """Optional company the widget is being built for."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
    industry: str


class GenerationRequest(BaseModel):
    """Immutable input to a single pipeline run."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user_prompt: str = Field(alias="userPrompt", min_length=1)
    company_context: CompanyContext | None = Field(default=None, alias="companyContext")

    @field_validator("user_prompt")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("user_prompt must not be blank")
        return v


# === MODEL OUTPUT ===


class AIAnalysis(BaseModel):
    """Structured assessment of a widget request."""

    model_config = _MODEL_OUTPUT_CONFIG

    complexity: Complexity
    estimated_time: str = Field(alias="estimatedTime")
    required_apis: list[str] = Field(alias="requiredAPIs")
    components: list[str]
    risks: list[str]
    widget_type: str = Field(alias="widgetType")
    widget_title: str = Field(alias="widgetTitle", min_length=1)
    description: str

    @field_validator("widget_type")
    @classmethod
    def _kebab_case(cls, v: str) -> str:
        if not _KEBAB_CASE.match(v):
            raise ValueError(f"widgetType must be kebab-case, got {v!r}")
        return v


class ImplementationStep(BaseModel):
    """One ordered unit of an implementation plan."""

    model_config = _MODEL_OUTPUT_CONFIG

    step: int = Field(ge=1)
    description: str
    files: list[str] = Field(min_length=1)
    estimated_duration: str
    code: str | None = None

    @field_validator("files")
    @classmethod
    def _non_empty_paths(cls, v: list[str]) -> list[str]:
        if any(not p.strip() for p in v):
            raise ValueError("file paths must be non-empty")
        return v


class ImplementationPlan(BaseModel):
    """Ordered plan of steps, each naming files to synthesize."""

    model_config = _MODEL_OUTPUT_CONFIG

    steps: list[ImplementationStep] = Field(min_length=1)
    total_steps: int = Field(alias="totalSteps")

    @model_validator(mode="after")
    def _check_numbering(self) -> ImplementationPlan:
        if self.total_steps != len(self.steps):
            raise ValueError(
                f"totalSteps={self.total_steps} but {len(self.steps)} steps given"
            )
        for expected, step in enumerate(self.steps, start=1):
            if step.step != expected:
                raise ValueError(
                    f"step numbering must be sequential from 1: "
                    f"expected {expected}, got {step.step}"
                )
        return self

    def file_paths(self) -> list[str]:
        """Distinct file paths across all steps, in step order."""
        seen: dict[str, None] = {}
        for step in self.steps:
            for path in step.files:
                seen.setdefault(path, None)
        return list(seen)


# === GENERATED ARTIFACTS ===


class GeneratedFile(BaseModel):
    """Synthesized file content; path joins back to the plan."""

    path: str
    content: str


class GeneratedWidget(BaseModel):
    """Terminal artifact of a successful synthesis."""

    widget_type: str
    title: str
    description: str
    files: list[GeneratedFile] = Field(default_factory=list)
    dependencies: list[str] | None = None


class ValidationResult(BaseModel):
    """Outcome of the content validation gate (never persisted)."""

    valid: bool
    reason: str | None = None


# === STORAGE ===


class ManifestEntry(BaseModel):
    """Index record for one stored artifact."""

    path: str
    timestamp: datetime
    size: int


class StoredArtifact(BaseModel):
    """Artifact reconstructed from the manifest and its content key."""

    path: str
    content: str
    timestamp: datetime


class FileError(BaseModel):
    """Per-file failure collected into a run or write report."""

    path: str
    stage: FileErrorStage
    reason: str


class WriteResult(BaseModel):
    """Outcome of ArtifactStore.write_all."""

    success: bool
    message: str
    written_files: list[str] = Field(default_factory=list)
    errors: list[FileError] = Field(default_factory=list)

    @classmethod
    def summarize(cls, written_files: list[str], errors: list[FileError]) -> WriteResult:
        """Build a result; success iff something was written and nothing failed."""
        success = bool(written_files) and not errors
        if success:
            message = f"Successfully generated {len(written_files)} files"
        else:
            message = f"Generated {len(written_files)} files with {len(errors)} errors"
        return cls(
            success=success,
            message=message,
            written_files=list(written_files),
            errors=list(errors),
        )


# === REGISTRY UPDATE PLANS ===


class RegistryChange(BaseModel):
    """One declarative edit intent inside a host file."""

    type: Literal["import", "case", "type_addition", "template_addition"]
    line: str | None = None
    data: dict[str, Any] | None = None


class RegistryUpdateRecord(BaseModel):
    """Edit intents targeting one host file."""

    file: str
    changes: list[RegistryChange]


class RegistryUpdatePlan(BaseModel):
    """The three update records that register a widget in the host app."""

    widget_type: str
    container: RegistryUpdateRecord
    types: RegistryUpdateRecord
    library: RegistryUpdateRecord


# === RUN REPORT ===


class RunFailure(BaseModel):
    """Fatal failure of a run at the analyzing or planning stage."""

    stage: RunStage
    reason: str
    error_type: str


class RunReport(BaseModel):
    """Result of one end-to-end run."""

    run_id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    status: Literal["running", "succeeded", "partial", "failed"] = "running"
    stage: RunStage = "idle"
    request: GenerationRequest
    analysis: AIAnalysis | None = None
    plan: ImplementationPlan | None = None
    widget: GeneratedWidget | None = None
    write_result: WriteResult | None = None
    registry_plan: RegistryUpdatePlan | None = None
    errors: list[FileError] = Field(default_factory=list)
    failure: RunFailure | None = None
    llm_calls: int = 0
    total_tokens: int = 0
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None

    @property
    def written_files(self) -> list[str]:
        return self.write_result.written_files if self.write_result else []
