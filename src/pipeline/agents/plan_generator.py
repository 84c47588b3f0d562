# src/pipeline/agents/plan_generator.py — v1
"""Implementation plan generator agent.

The model is asked for steps in dependency order (services, then
components, then integration). That order is trusted; only the structural
shape of the plan is validated.
"""

from __future__ import annotations

import logging

from widgetsmith.core.models import AIAnalysis, GenerationRequest, ImplementationPlan
from widgetsmith.pipeline.json_extraction import parse_model_output
from widgetsmith.pipeline.plugin_kit.base_agent import BaseAgent

logger = logging.getLogger(__name__)

_PROMPT_FILE = "plan_generator.txt"


class PlanGenerator(BaseAgent):
    """Turn an analysis into an ordered ImplementationPlan."""

    @property
    def name(self) -> str:
        return "plan_generator"

    @property
    def version(self) -> str:
        return "1.0.0"

    @property
    def description(self) -> str:
        return "Produce an ordered, file-level implementation plan from an analysis"

    @property
    def prompt_files(self) -> list[str]:
        return [_PROMPT_FILE]

    def build_prompt(self, analysis: AIAnalysis, request: GenerationRequest) -> str:
        return self._load_prompt(_PROMPT_FILE).format(
            widget_title=analysis.widget_title,
            widget_type=analysis.widget_type,
            description=analysis.description,
            complexity=analysis.complexity,
            user_prompt=request.user_prompt,
            company_context=self.company_context_block(request),
            required_apis=", ".join(analysis.required_apis) or "none",
            components=", ".join(analysis.components) or "none",
        )

    async def plan(
        self, analysis: AIAnalysis, request: GenerationRequest
    ) -> ImplementationPlan:
        """Generate the implementation plan.

        Raises:
            CredentialMissing: No API key configured.
            UpstreamError: Completion service failure.
            MalformedModelOutput: Plan missing or structurally invalid.
        """
        prompt = self.build_prompt(analysis, request)
        text = await self._completion.complete(
            prompt,
            self._settings.llm_max_tokens_plan,
            agent=self.name,
            step="plan",
        )
        plan = parse_model_output(text, ImplementationPlan, stage="plan")

        logger.info(
            "Plan for %s: %d steps, %d files",
            analysis.widget_type, plan.total_steps, len(plan.file_paths()),
        )
        return plan
