# src/pipeline/agents/code_synthesizer.py — v2
"""Per-file code synthesizer agent.

Each plan file is classified by directory convention (widget, service or
generic) and generated with a role-specific prompt. One completion per
file; failures are reported per file as CodeGenerationFailed so sibling
files are unaffected.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from widgetsmith.config.capabilities import DEFAULT_CAPABILITIES, HostCapabilities
from widgetsmith.core.conventions import FileRole, classify_path, widget_component_name
from widgetsmith.core.errors import CodeGenerationFailed
from widgetsmith.core.models import AIAnalysis, GenerationRequest, ImplementationStep
from widgetsmith.pipeline.json_extraction import extract_code
from widgetsmith.pipeline.plugin_kit.base_agent import BaseAgent

if TYPE_CHECKING:
    from widgetsmith.config.settings import Settings
    from widgetsmith.llm.completion import CompletionClient

logger = logging.getLogger(__name__)

# role -> (system template, user template)
_TEMPLATES: dict[FileRole, tuple[str | None, str]] = {
    "widget": ("code_widget_system.txt", "code_widget_user.txt"),
    "service": ("code_service_system.txt", "code_service_user.txt"),
    "generic": (None, "code_generic_user.txt"),
}


class CodeSynthesizer(BaseAgent):
    """Generate the source of a single plan file."""

    def __init__(
        self,
        completion: CompletionClient,
        settings: Settings,
        capabilities: HostCapabilities = DEFAULT_CAPABILITIES,
    ) -> None:
        super().__init__(completion, settings)
        self._capabilities = capabilities

    @property
    def name(self) -> str:
        return "code_synthesizer"

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def description(self) -> str:
        return "Generate source code for one planned file using a role-specific prompt"

    @property
    def prompt_files(self) -> list[str]:
        return sorted({f for pair in _TEMPLATES.values() for f in pair if f})

    def build_prompts(
        self,
        path: str,
        analysis: AIAnalysis,
        request: GenerationRequest,
        step: ImplementationStep,
    ) -> tuple[str | None, str]:
        """Return (system prompt, user prompt) for a file."""
        system_file, user_file = _TEMPLATES[classify_path(path)]
        values = {
            "path": path,
            "step_description": step.description,
            "widget_type": analysis.widget_type,
            "widget_title": analysis.widget_title,
            "description": analysis.description,
            "user_prompt": request.user_prompt,
            "component_name": widget_component_name(analysis.widget_title),
            "data_sources": self._capabilities.describe_data_sources(),
        }
        system = self._load_prompt(system_file).format(**values) if system_file else None
        return system, self._load_prompt(user_file).format(**values)

    async def synthesize(
        self,
        path: str,
        analysis: AIAnalysis,
        request: GenerationRequest,
        step: ImplementationStep,
    ) -> str:
        """Generate the content of one file.

        Raises:
            CodeGenerationFailed: The completion call failed for this file.
        """
        system, prompt = self.build_prompts(path, analysis, request, step)
        logger.debug("Synthesizing %s as %s", path, classify_path(path))

        try:
            text = await self._completion.complete(
                prompt,
                self._settings.llm_max_tokens_code,
                system=system,
                agent=self.name,
                step=path,
            )
        except Exception as e:
            logger.error("Failed to generate %s: %s", path, e)
            raise CodeGenerationFailed(path, e) from e

        return extract_code(text)
