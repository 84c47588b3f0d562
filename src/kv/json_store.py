# src/kv/json_store.py — v1
"""JSON file-backed key-value store (default KV_BACKEND=json).

The whole store is a single JSON object on disk, rewritten on every
mutation through a temporary file so a crash never leaves it truncated.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from widgetsmith.kv.base_kv_store import BaseKeyValueStore

logger = logging.getLogger(__name__)


class JsonKeyValueStore(BaseKeyValueStore):
    """Single-file JSON key-value store."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._data = self._load()

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning("Ignoring unreadable store file %s: %s", self._path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring store file %s: not a JSON object", self._path)
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _flush(self) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._data, indent=2, sort_keys=True), encoding="utf-8")
        tmp.replace(self._path)

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    async def delete(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._flush()

    async def list_keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))

    @property
    def path(self) -> Path:
        return self._path
