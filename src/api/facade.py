# src/api/facade.py — v2
"""Public API facade — explicit wiring of the generation pipeline.

Usage:
    from widgetsmith.api.facade import generate_widget
    report = await generate_widget(GenerationRequest(user_prompt="..."))

Every component receives its collaborators at construction; nothing is a
process-wide singleton, so any piece can be swapped for a fake.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from widgetsmith.config.credentials import Credentials, load_credentials
from widgetsmith.config.settings import Settings
from widgetsmith.core.models import GenerationRequest, RunReport
from widgetsmith.kv.kv_factory import create_kv_store
from widgetsmith.llm.completion import CompletionClient
from widgetsmith.pipeline.agents.code_synthesizer import CodeSynthesizer
from widgetsmith.pipeline.agents.plan_generator import PlanGenerator
from widgetsmith.pipeline.agents.request_analyzer import RequestAnalyzer
from widgetsmith.pipeline.generation_pipeline import GenerationPipeline
from widgetsmith.registry.planner import RegistryPlanner
from widgetsmith.storage.artifact_store import ArtifactStore
from widgetsmith.tracking.call_logger import CallLogger
from widgetsmith.validation.content_validator import ContentValidator

if TYPE_CHECKING:
    from widgetsmith.kv.base_kv_store import BaseKeyValueStore
    from widgetsmith.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)


@dataclass
class PipelineHandle:
    """A wired pipeline plus the collaborators callers may need directly."""

    settings: Settings
    kv: BaseKeyValueStore
    credentials: Credentials
    completion: CompletionClient
    store: ArtifactStore
    call_logger: CallLogger
    pipeline: GenerationPipeline


async def build_pipeline(
    settings: Settings | None = None,
    kv_store: BaseKeyValueStore | None = None,
    transport: BaseLLMClient | None = None,
    credentials: Credentials | None = None,
) -> PipelineHandle:
    """Construct every component of the pipeline.

    Args:
        settings: Global settings. Loaded from .env if None.
        kv_store: Key-value backend. Built from settings if None.
        transport: Completion transport. Built from the provider setting
            on first use if None.
        credentials: API key holder. Loaded from settings or the persisted
            key if None.
    """
    settings = settings or Settings()
    kv = kv_store if kv_store is not None else create_kv_store(settings)
    if credentials is None:
        credentials = await load_credentials(settings, kv)

    call_logger = CallLogger()
    completion = CompletionClient(credentials, settings, transport=transport, call_logger=call_logger)
    validator = ContentValidator()
    store = ArtifactStore.from_settings(kv, settings, validator=validator)

    pipeline = GenerationPipeline(
        analyzer=RequestAnalyzer(completion, settings),
        planner=PlanGenerator(completion, settings),
        synthesizer=CodeSynthesizer(completion, settings),
        validator=validator,
        store=store,
        registry_planner=RegistryPlanner(),
        settings=settings,
        call_logger=call_logger,
    )
    logger.debug(
        "Pipeline built: provider=%s model=%s kv=%s",
        settings.llm_provider, settings.llm_model, type(kv).__name__,
    )
    return PipelineHandle(
        settings=settings,
        kv=kv,
        credentials=credentials,
        completion=completion,
        store=store,
        call_logger=call_logger,
        pipeline=pipeline,
    )


async def generate_widget(
    request: GenerationRequest,
    settings: Settings | None = None,
    kv_store: BaseKeyValueStore | None = None,
    transport: BaseLLMClient | None = None,
    credentials: Credentials | None = None,
) -> RunReport:
    """Run the full pipeline for one request and return its report."""
    handle = await build_pipeline(
        settings=settings, kv_store=kv_store, transport=transport, credentials=credentials
    )
    return await handle.pipeline.run(request)
