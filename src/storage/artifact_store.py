# src/storage/artifact_store.py — v2
"""Persistence of accepted artifacts, their manifest and update plans.

The manifest is the only source of truth for enumeration; it holds at most
one entry per path (last write wins). There is no multi-file transaction:
files written before a later failure stay persisted.
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from widgetsmith.core.errors import StorageError, ValidationFailed
from widgetsmith.core.models import (
    FileError,
    GeneratedFile,
    ManifestEntry,
    RegistryUpdatePlan,
    RegistryUpdateRecord,
    StoredArtifact,
    WriteResult,
)
from widgetsmith.logging.context import set_path_context
from widgetsmith.storage.layout import (
    ARTIFACT_PREFIX,
    MANIFEST_KEY,
    PLAN_PREFIXES,
    artifact_key,
    canonical_path,
    update_plan_key,
)
from widgetsmith.validation.content_validator import ContentValidator

if TYPE_CHECKING:
    from widgetsmith.config.settings import Settings
    from widgetsmith.kv.base_kv_store import BaseKeyValueStore

logger = logging.getLogger(__name__)

_MANIFEST_ADAPTER = TypeAdapter(list[ManifestEntry])


class ArtifactStore:
    """Validated, manifest-indexed artifact storage over a key-value store."""

    def __init__(
        self,
        kv: BaseKeyValueStore,
        validator: ContentValidator | None = None,
        base_dir: str = "/workspace/host-app/src",
        root_prefix: str = "src/",
    ) -> None:
        self._kv = kv
        self._validator = validator or ContentValidator()
        self._base_dir = base_dir
        self._root_prefix = root_prefix
        self._manifest_lock = asyncio.Lock()

    @classmethod
    def from_settings(
        cls,
        kv: BaseKeyValueStore,
        settings: Settings,
        validator: ContentValidator | None = None,
    ) -> ArtifactStore:
        return cls(
            kv,
            validator=validator,
            base_dir=settings.host_src_root,
            root_prefix=settings.host_root_prefix,
        )

    def canonical_path(self, logical_path: str) -> str:
        return canonical_path(logical_path, self._base_dir, self._root_prefix)

    # --- Writing ---

    async def write_all(self, files: list[GeneratedFile]) -> WriteResult:
        """Validate and persist files independently.

        Returns:
            WriteResult; success iff at least one file was written and none
            failed.
        """
        written: list[str] = []
        errors: list[FileError] = []

        for file in files:
            set_path_context(file.path)
            try:
                await self._write_one(file)
            except ValidationFailed as e:
                logger.warning("Rejected %s: %s", file.path, e.reason)
                errors.append(FileError(path=file.path, stage="validation", reason=e.reason))
                continue
            except StorageError as e:
                logger.error("%s", e)
                errors.append(FileError(path=file.path, stage="storage", reason=str(e)))
                continue
            finally:
                set_path_context(None)
            written.append(file.path)
            logger.info("Generated: %s", file.path)

        return WriteResult.summarize(written, errors)

    async def _write_one(self, file: GeneratedFile) -> None:
        result = self._validator.validate(file.path, file.content)
        if not result.valid:
            raise ValidationFailed(file.path, result.reason or "invalid content")

        full_path = self.canonical_path(file.path)
        key = artifact_key(full_path)
        try:
            previous = await self._kv.get(key)
            await self._kv.set(key, file.content)
        except Exception as e:
            raise StorageError(full_path, e) from e

        try:
            await self._upsert_manifest(
                ManifestEntry(
                    path=full_path,
                    timestamp=datetime.now(timezone.utc),
                    size=len(file.content.encode("utf-8")),
                )
            )
        except Exception as e:
            await self._rollback_content(key, previous)
            if isinstance(e, StorageError):
                raise
            raise StorageError(full_path, e) from e

    async def _rollback_content(self, key: str, previous: str | None) -> None:
        """Undo a content write whose manifest entry could not be recorded."""
        try:
            if previous is None:
                await self._kv.delete(key)
            else:
                await self._kv.set(key, previous)
        except Exception as e:
            logger.error("Could not roll back %s: %s", key, e)

    # --- Manifest ---

    async def read_manifest(self) -> list[ManifestEntry]:
        """Current manifest entries in write order.

        Raises:
            StorageError: The manifest record is unreadable.
        """
        raw = await self._kv.get(MANIFEST_KEY)
        if not raw:
            return []
        try:
            return _MANIFEST_ADAPTER.validate_json(raw)
        except ValidationError as e:
            raise StorageError(MANIFEST_KEY, e) from e

    async def _upsert_manifest(self, entry: ManifestEntry) -> None:
        async with self._manifest_lock:
            entries = [e for e in await self.read_manifest() if e.path != entry.path]
            key = artifact_key(entry.path)
            for other in entries:
                if artifact_key(other.path) == key:
                    logger.warning(
                        "%s shares content key %s with %s; the earlier content is replaced",
                        entry.path,
                        key,
                        other.path,
                    )
            entries.append(entry)
            await self._kv.set(
                MANIFEST_KEY, _MANIFEST_ADAPTER.dump_json(entries).decode("utf-8")
            )

    # --- Enumeration ---

    async def list_all(self) -> list[StoredArtifact]:
        """Reconstruct every stored artifact from the manifest."""
        artifacts: list[StoredArtifact] = []
        for entry in await self.read_manifest():
            content = await self._kv.get(artifact_key(entry.path))
            artifacts.append(
                StoredArtifact(path=entry.path, content=content or "", timestamp=entry.timestamp)
            )
        return artifacts

    # --- Update plans ---

    async def save_update_plan(self, plan: RegistryUpdatePlan) -> None:
        """Store the three update records of a widget.

        Raises:
            StorageError: A record could not be written.
        """
        records = {"container": plan.container, "types": plan.types, "library": plan.library}
        for kind, record in records.items():
            key = update_plan_key(kind, plan.widget_type)
            try:
                await self._kv.set(key, record.model_dump_json(exclude_none=True))
            except Exception as e:
                raise StorageError(key, e) from e
        logger.info("Updated widget registry plans for: %s", plan.widget_type)

    async def list_update_plans(self) -> list[RegistryUpdatePlan]:
        """Pending update plans, one per widget type with all three records."""
        prefix = PLAN_PREFIXES["container"]
        plans: list[RegistryUpdatePlan] = []
        for key in await self._kv.list_keys(prefix):
            widget_type = key[len(prefix):]
            records: dict[str, RegistryUpdateRecord] = {}
            for kind in PLAN_PREFIXES:
                raw = await self._kv.get(update_plan_key(kind, widget_type))
                if raw is None:
                    break
                try:
                    records[kind] = RegistryUpdateRecord.model_validate(json.loads(raw))
                except (json.JSONDecodeError, ValidationError) as e:
                    logger.warning("Skipping unreadable %s plan for %s: %s", kind, widget_type, e)
                    break
            if len(records) != len(PLAN_PREFIXES):
                logger.warning("Incomplete update plan for %s", widget_type)
                continue
            plans.append(RegistryUpdatePlan(widget_type=widget_type, **records))
        return plans

    # --- Clearing ---

    async def clear_all(self) -> int:
        """Remove all tracked artifacts, the manifest and every update plan.

        An unreadable manifest does not block clearing: every key under the
        artifact prefix is removed instead.

        Returns:
            Number of keys removed.
        """
        removed = 0
        async with self._manifest_lock:
            try:
                keys = [artifact_key(entry.path) for entry in await self.read_manifest()]
            except StorageError as e:
                logger.warning("Manifest unreadable, clearing by prefix: %s", e)
                keys = await self._kv.list_keys(ARTIFACT_PREFIX)
            for key in dict.fromkeys(keys):
                await self._kv.delete(key)
                removed += 1
            await self._kv.delete(MANIFEST_KEY)

        for prefix in PLAN_PREFIXES.values():
            for key in await self._kv.list_keys(prefix):
                await self._kv.delete(key)
                removed += 1

        logger.info("Cleared %d stored keys", removed)
        return removed
