# tests/unit/config/test_unit_credentials.py — v1
"""Tests for config/credentials.py."""

from __future__ import annotations

import pytest

from widgetsmith.config.credentials import (
    API_KEY_KEY,
    Credentials,
    load_credentials,
    save_api_key,
)
from widgetsmith.config.settings import Settings
from widgetsmith.kv.memory_store import MemoryKeyValueStore


class TestCredentials:
    def test_absent_by_default(self):
        creds = Credentials()
        assert creds.get_api_key() is None
        assert creds.is_configured is False

    def test_blank_is_absent(self):
        assert Credentials("  ").is_configured is False

    def test_set_and_clear(self):
        creds = Credentials()
        creds.set_api_key(" sk-123 ")
        assert creds.get_api_key() == "sk-123"
        creds.clear()
        assert creds.get_api_key() is None

    def test_set_empty_rejected(self):
        with pytest.raises(ValueError):
            Credentials().set_api_key("")


class TestLoadCredentials:
    @pytest.mark.asyncio
    async def test_from_settings(self):
        settings = Settings(_env_file=None, anthropic_api_key="sk-env")
        creds = await load_credentials(settings, MemoryKeyValueStore({API_KEY_KEY: "sk-stored"}))
        assert creds.get_api_key() == "sk-env"

    @pytest.mark.asyncio
    async def test_from_store(self):
        settings = Settings(_env_file=None, anthropic_api_key="")
        creds = await load_credentials(settings, MemoryKeyValueStore({API_KEY_KEY: "sk-stored"}))
        assert creds.get_api_key() == "sk-stored"

    @pytest.mark.asyncio
    async def test_absent(self):
        settings = Settings(_env_file=None, anthropic_api_key="")
        creds = await load_credentials(settings, MemoryKeyValueStore())
        assert creds.is_configured is False

    @pytest.mark.asyncio
    async def test_without_store(self):
        settings = Settings(_env_file=None, anthropic_api_key="")
        creds = await load_credentials(settings)
        assert creds.is_configured is False


class TestSaveApiKey:
    @pytest.mark.asyncio
    async def test_persists(self):
        kv = MemoryKeyValueStore()
        creds = Credentials()
        await save_api_key(creds, kv, "sk-new")
        assert creds.get_api_key() == "sk-new"
        assert await kv.get(API_KEY_KEY) == "sk-new"
