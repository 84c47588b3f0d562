# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings. Every field
maps to a WIDGETSMITH_* environment variable.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_prefix="WIDGETSMITH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === COMPLETION SERVICE ===
    llm_provider: str = "anthropic"
    llm_model: str = "claude-sonnet-4-20250514"
    llm_temperature: float = 0.2
    anthropic_api_key: str = ""

    # Per-stage output budgets
    llm_max_tokens_analysis: int = 1500
    llm_max_tokens_plan: int = 2000
    llm_max_tokens_code: int = 4000
    llm_max_tokens_connection_test: int = 100

    # === Synthesis ===
    synthesis_concurrency: int = 1

    # === Key-value store ===
    kv_backend: Literal["memory", "json", "sqlite", "redis"] = "json"
    kv_path: Path = Path("~/.widgetsmith/store.json")
    kv_redis_url: str = ""

    # === Host project ===
    host_src_root: str = "/workspace/host-app/src"
    host_root_prefix: str = "src/"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("synthesis_concurrency")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("synthesis_concurrency must be >= 1")
        return v

    @field_validator(
        "llm_max_tokens_analysis",
        "llm_max_tokens_plan",
        "llm_max_tokens_code",
        "llm_max_tokens_connection_test",
    )
    @classmethod
    def validate_token_budget(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("token budgets must be positive")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.kv_backend == "redis" and not self.kv_redis_url:
            errors.append("KV_BACKEND=redis requires KV_REDIS_URL")

        if not self.host_src_root.strip():
            errors.append("HOST_SRC_ROOT must not be empty")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or one-off runs).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
