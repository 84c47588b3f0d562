# src/config/credentials.py — v1
"""Process-wide completion-service credential.

The secret is absent unless explicitly configured: either through
WIDGETSMITH_ANTHROPIC_API_KEY or a key persisted by ``save_api_key``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from widgetsmith.config.settings import Settings
    from widgetsmith.kv.base_kv_store import BaseKeyValueStore

logger = logging.getLogger(__name__)

API_KEY_KEY = "claude_api_key"


class Credentials:
    """Holder for the single completion-service secret."""

    def __init__(self, api_key: str | None = None) -> None:
        self._api_key = api_key.strip() if api_key and api_key.strip() else None

    def get_api_key(self) -> str | None:
        return self._api_key

    def set_api_key(self, api_key: str) -> None:
        key = api_key.strip()
        if not key:
            raise ValueError("API key must not be empty")
        self._api_key = key

    def clear(self) -> None:
        self._api_key = None

    @property
    def is_configured(self) -> bool:
        return self._api_key is not None


async def load_credentials(
    settings: Settings, kv: BaseKeyValueStore | None = None
) -> Credentials:
    """Build credentials from settings, falling back to the persisted key."""
    if settings.anthropic_api_key:
        return Credentials(settings.anthropic_api_key)
    if kv is not None:
        stored = await kv.get(API_KEY_KEY)
        if stored:
            logger.debug("Loaded persisted API key")
            return Credentials(stored)
    return Credentials()


async def save_api_key(
    credentials: Credentials, kv: BaseKeyValueStore, api_key: str
) -> None:
    """Set the key for this process and persist it for later runs."""
    credentials.set_api_key(api_key)
    await kv.set(API_KEY_KEY, credentials.get_api_key() or "")
    logger.info("API key saved")
