# src/kv/kv_factory.py — v1
"""Factory for key-value store instantiation."""

from __future__ import annotations

from widgetsmith.config.settings import Settings
from widgetsmith.kv.base_kv_store import BaseKeyValueStore


def create_kv_store(settings: Settings | None = None) -> BaseKeyValueStore:
    """Instantiate the configured key-value backend.

    Args:
        settings: Application settings. Defaults to the in-memory backend.

    Returns:
        Configured BaseKeyValueStore implementation.
    """
    backend = "memory" if settings is None else settings.kv_backend

    if backend == "memory":
        from widgetsmith.kv.memory_store import MemoryKeyValueStore
        return MemoryKeyValueStore()

    if backend == "json":
        from widgetsmith.kv.json_store import JsonKeyValueStore
        return JsonKeyValueStore(settings.kv_path)

    if backend == "sqlite":
        from widgetsmith.kv.sqlite_store import SqliteKeyValueStore
        return SqliteKeyValueStore(settings.kv_path.with_suffix(".db"))

    if backend == "redis":
        from widgetsmith.kv.redis_store import RedisKeyValueStore
        if not settings.kv_redis_url:
            raise ValueError(
                "KV_REDIS_URL must be set when KV_BACKEND=redis"
            )
        return RedisKeyValueStore(redis_url=settings.kv_redis_url)

    raise ValueError(f"Unsupported key-value backend: {backend!r}")
