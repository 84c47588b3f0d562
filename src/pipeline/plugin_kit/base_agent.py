# src/pipeline/plugin_kit/base_agent.py — v2
"""Standard agent interface for pipeline stages.

Agents receive their collaborators at construction and load their prompt
templates from ``pipeline/prompts``.
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from widgetsmith.config.settings import Settings
    from widgetsmith.core.models import GenerationRequest
    from widgetsmith.llm.completion import CompletionClient

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"


class BaseAgent(ABC):
    """Common plumbing for completion-driven agents."""

    def __init__(self, completion: CompletionClient, settings: Settings) -> None:
        self._completion = completion
        self._settings = settings
        self._templates: dict[str, str] = {}

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique agent identifier (e.g., 'request_analyzer')."""

    @property
    @abstractmethod
    def version(self) -> str:
        """Agent version (semver)."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what this agent does."""

    @property
    def prompt_files(self) -> list[str]:
        """Template file names under pipeline/prompts used by this agent."""
        return []

    def _load_prompt(self, filename: str) -> str:
        """Load and cache a prompt template."""
        if filename not in self._templates:
            self._templates[filename] = (PROMPTS_DIR / filename).read_text(encoding="utf-8")
        return self._templates[filename]

    @staticmethod
    def prompt_hash(prompt: str) -> str:
        """Short stable hash of a rendered prompt, for log correlation."""
        return hashlib.sha256(prompt.encode()).hexdigest()[:16]

    @staticmethod
    def company_context_block(request: GenerationRequest) -> str:
        """Prompt lines describing the optional company context."""
        ctx = request.company_context
        if ctx is None:
            return ""
        return f"COMPANY CONTEXT: {ctx.name} ({ctx.symbol}), industry: {ctx.industry}\n"
