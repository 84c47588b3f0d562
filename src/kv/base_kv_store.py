# src/kv/base_kv_store.py — v1
"""Abstract key-value store interface.

Any durable string-keyed store (filesystem, embedded database, in-memory
map) can back the artifact store through this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseKeyValueStore(ABC):
    """Unified interface for key-value storage backends."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value for key, or None if absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store value under key (upsert)."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key. Missing keys are ignored."""

    @abstractmethod
    async def list_keys(self, prefix: str = "") -> list[str]:
        """List keys starting with prefix, sorted."""
