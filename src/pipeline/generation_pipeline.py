# src/pipeline/generation_pipeline.py — v1
"""End-to-end generation pipeline.

Drives one run through analysis, planning, per-file synthesis, validation,
storage and registry planning. Analysis and planning failures are fatal to
the run; synthesis, validation and storage failures are collected per file
and the run completes with a mixed report.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from widgetsmith.core.errors import CodeGenerationFailed, GenerationError, StorageError
from widgetsmith.core.models import (
    AIAnalysis,
    FileError,
    GeneratedFile,
    GeneratedWidget,
    GenerationRequest,
    ImplementationPlan,
    ImplementationStep,
    RunReport,
    WriteResult,
)
from widgetsmith.logging.context import set_path_context, set_run_context
from widgetsmith.pipeline.state import advance, fail, finish

if TYPE_CHECKING:
    from widgetsmith.config.settings import Settings
    from widgetsmith.pipeline.agents.code_synthesizer import CodeSynthesizer
    from widgetsmith.pipeline.agents.plan_generator import PlanGenerator
    from widgetsmith.pipeline.agents.request_analyzer import RequestAnalyzer
    from widgetsmith.registry.planner import RegistryPlanner
    from widgetsmith.storage.artifact_store import ArtifactStore
    from widgetsmith.tracking.call_logger import CallLogger
    from widgetsmith.validation.content_validator import ContentValidator

logger = logging.getLogger(__name__)


class GenerationPipeline:
    """Orchestrates the agents, the validator and the artifact store."""

    def __init__(
        self,
        analyzer: RequestAnalyzer,
        planner: PlanGenerator,
        synthesizer: CodeSynthesizer,
        validator: ContentValidator,
        store: ArtifactStore,
        registry_planner: RegistryPlanner,
        settings: Settings,
        call_logger: CallLogger | None = None,
    ) -> None:
        self._analyzer = analyzer
        self._planner = planner
        self._synthesizer = synthesizer
        self._validator = validator
        self._store = store
        self._registry_planner = registry_planner
        self._settings = settings
        self._call_logger = call_logger

    # --- Public API ---

    async def prepare(
        self, request: GenerationRequest
    ) -> tuple[AIAnalysis, ImplementationPlan]:
        """Analyze and plan without generating anything.

        Raises:
            GenerationError: Any analysis or planning failure.
        """
        analysis = await self._analyzer.analyze(request)
        plan = await self._planner.plan(analysis, request)
        return analysis, plan

    async def run(self, request: GenerationRequest) -> RunReport:
        """Execute a full run. Never raises for pipeline errors."""
        report = RunReport(request=request)
        calls_before = self._calls_so_far()
        set_run_context(report.run_id)
        logger.info("Run %s started", report.run_id)

        try:
            advance(report, "analyzing")
            report.analysis = await self._analyzer.analyze(request)
            advance(report, "planning")
            report.plan = await self._planner.plan(report.analysis, request)
        except GenerationError as e:
            logger.error("Run %s failed while %s: %s", report.run_id, report.stage, e)
            fail(report, e)
            self._attach_stats(report, calls_before)
            return report

        await self._build_into(report, report.analysis, report.plan)
        self._attach_stats(report, calls_before)
        return report

    async def build(
        self,
        request: GenerationRequest,
        analysis: AIAnalysis,
        plan: ImplementationPlan,
    ) -> RunReport:
        """Generate, validate and store files for an already approved plan."""
        report = RunReport(request=request, analysis=analysis, plan=plan)
        calls_before = self._calls_so_far()
        set_run_context(report.run_id)
        await self._build_into(report, analysis, plan)
        self._attach_stats(report, calls_before)
        return report

    async def synthesize_widget(
        self,
        analysis: AIAnalysis,
        plan: ImplementationPlan,
        request: GenerationRequest,
    ) -> tuple[GeneratedWidget, list[FileError]]:
        """Synthesize every distinct plan file.

        Returns:
            The widget holding successfully generated files, and the
            per-file synthesis errors.
        """
        jobs = self._file_jobs(plan)
        concurrency = self._settings.synthesis_concurrency

        if concurrency == 1:
            outcomes = [
                await self._synthesize_one(path, step, analysis, request)
                for path, step in jobs
            ]
        else:
            semaphore = asyncio.Semaphore(concurrency)

            async def bounded(path: str, step: ImplementationStep) -> GeneratedFile | FileError:
                async with semaphore:
                    return await self._synthesize_one(path, step, analysis, request)

            outcomes = await asyncio.gather(*(bounded(p, s) for p, s in jobs))

        files = [o for o in outcomes if isinstance(o, GeneratedFile)]
        errors = [o for o in outcomes if isinstance(o, FileError)]

        widget = GeneratedWidget(
            widget_type=analysis.widget_type,
            title=analysis.widget_title,
            description=analysis.description,
            files=files,
            dependencies=list(analysis.required_apis),
        )
        return widget, errors

    # --- Internal helpers ---

    async def _build_into(
        self,
        report: RunReport,
        analysis: AIAnalysis,
        plan: ImplementationPlan,
    ) -> None:
        advance(report, "synthesizing")
        widget, synthesis_errors = await self.synthesize_widget(analysis, plan, report.request)
        report.widget = widget

        advance(report, "validating")
        accepted: list[GeneratedFile] = []
        validation_errors: list[FileError] = []
        for file in widget.files:
            result = self._validator.validate(file.path, file.content)
            if result.valid:
                accepted.append(file)
            else:
                logger.warning("Validation failed for %s: %s", file.path, result.reason)
                validation_errors.append(
                    FileError(path=file.path, stage="validation", reason=result.reason or "")
                )

        advance(report, "storing")
        stored = await self._store.write_all(accepted)
        report.write_result = WriteResult.summarize(
            stored.written_files, validation_errors + stored.errors
        )
        report.errors = synthesis_errors + report.write_result.errors

        advance(report, "registry_planned")
        registry_plan = self._registry_planner.plan_registration(
            widget.widget_type, widget.title
        )
        report.registry_plan = registry_plan
        try:
            await self._store.save_update_plan(registry_plan)
        except StorageError as e:
            logger.error("%s", e)
            report.errors.append(FileError(path=e.path, stage="storage", reason=str(e)))

        finish(report)
        logger.info(
            "Run %s %s: %d written, %d errors",
            report.run_id, report.status, len(report.written_files), len(report.errors),
        )

    async def _synthesize_one(
        self,
        path: str,
        step: ImplementationStep,
        analysis: AIAnalysis,
        request: GenerationRequest,
    ) -> GeneratedFile | FileError:
        set_path_context(path)
        try:
            content = await self._synthesizer.synthesize(path, analysis, request, step)
        except CodeGenerationFailed as e:
            reason = str(e.cause) if e.cause is not None else str(e)
            return FileError(path=path, stage="synthesis", reason=reason)
        finally:
            set_path_context(None)
        return GeneratedFile(path=path, content=content)

    @staticmethod
    def _file_jobs(plan: ImplementationPlan) -> list[tuple[str, ImplementationStep]]:
        """(path, owning step) pairs; a path named twice keeps its first step."""
        jobs: dict[str, ImplementationStep] = {}
        for step in plan.steps:
            for path in step.files:
                if path in jobs:
                    logger.warning("File %s listed again in step %d; skipping", path, step.step)
                    continue
                jobs[path] = step
        return list(jobs.items())

    def _calls_so_far(self) -> tuple[int, int]:
        if self._call_logger is None:
            return (0, 0)
        return (self._call_logger.total_calls, self._call_logger.total_tokens)

    def _attach_stats(self, report: RunReport, before: tuple[int, int]) -> None:
        calls, tokens = self._calls_so_far()
        report.llm_calls = calls - before[0]
        report.total_tokens = tokens - before[1]
