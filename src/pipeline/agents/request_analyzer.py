# src/pipeline/agents/request_analyzer.py — v1
"""Request analyzer agent.

Turns a free-text widget request into a structured AIAnalysis. The prompt
embeds the host platform capabilities so the model scopes its answer to
what is buildable. Malformed output is terminal for the run: there is no
retry at this layer.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from widgetsmith.config.capabilities import DEFAULT_CAPABILITIES, HostCapabilities
from widgetsmith.core.models import AIAnalysis, GenerationRequest
from widgetsmith.pipeline.json_extraction import parse_model_output
from widgetsmith.pipeline.plugin_kit.base_agent import BaseAgent

if TYPE_CHECKING:
    from widgetsmith.config.settings import Settings
    from widgetsmith.llm.completion import CompletionClient

logger = logging.getLogger(__name__)

_PROMPT_FILE = "request_analyzer.txt"


class RequestAnalyzer(BaseAgent):
    """Assess complexity, APIs, components and naming for a request."""

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
        return "request_analyzer"

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def description(self) -> str:
        return "Analyze a widget request into complexity, APIs, components and naming"

    @property
    def prompt_files(self) -> list[str]:
        return [_PROMPT_FILE]

    def build_prompt(self, request: GenerationRequest) -> str:
        """Fill the analysis template."""
        return self._load_prompt(_PROMPT_FILE).format(
            user_prompt=request.user_prompt,
            company_context=self.company_context_block(request),
            platform=self._capabilities.platform,
            capabilities=self._capabilities.describe(),
            data_sources=", ".join(self._capabilities.data_source_names),
        )

    async def analyze(self, request: GenerationRequest) -> AIAnalysis:
        """Analyze a request.

        Raises:
            CredentialMissing: No API key configured.
            UpstreamError: Completion service failure.
            MalformedModelOutput: Response had no valid analysis object.
        """
        prompt = self.build_prompt(request)
        logger.info("Analyzing request (prompt %s)", self.prompt_hash(prompt))

        text = await self._completion.complete(
            prompt,
            self._settings.llm_max_tokens_analysis,
            agent=self.name,
            step="analysis",
        )
        analysis = parse_model_output(text, AIAnalysis, stage="analysis")

        logger.info(
            "Analysis: %s (%s, %s)",
            analysis.widget_type, analysis.complexity, analysis.estimated_time,
        )
        return analysis
