# src/kv/redis_store.py — v1
"""Redis-based key-value store (KV_BACKEND=redis).

Requires 'redis' package: pip install redis.
Suitable when several processes share one artifact store.
"""

from __future__ import annotations

import logging

from widgetsmith.kv.base_kv_store import BaseKeyValueStore

logger = logging.getLogger(__name__)

_KEY_PREFIX = "widgetsmith:kv:"
_INDEX_KEY = "widgetsmith:kv:__index__"


class RedisKeyValueStore(BaseKeyValueStore):
    """Redis-backed key-value store."""

    def __init__(self, redis_url: str) -> None:
        try:
            import redis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install redis"
            ) from e

        self._client = redis.Redis.from_url(redis_url, decode_responses=True)

    async def get(self, key: str) -> str | None:
        return self._client.get(f"{_KEY_PREFIX}{key}")

    async def set(self, key: str, value: str) -> None:
        self._client.set(f"{_KEY_PREFIX}{key}", value)
        # Maintain a set of all keys for list_keys
        self._client.sadd(_INDEX_KEY, key)

    async def delete(self, key: str) -> None:
        self._client.delete(f"{_KEY_PREFIX}{key}")
        self._client.srem(_INDEX_KEY, key)

    async def list_keys(self, prefix: str = "") -> list[str]:
        keys = self._client.smembers(_INDEX_KEY)
        return sorted(k for k in keys if k.startswith(prefix))

    def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()
