# tests/unit/logging/test_unit_logging.py — v1
"""Tests for logging/ — context variables, formatters, setup and rotation."""

from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler

import pytest

from widgetsmith.logging.context import (
    clear_context,
    get_context,
    set_path_context,
    set_run_context,
    set_stage_context,
)
from widgetsmith.logging.handlers import _parse_size, create_rotating_handler
from widgetsmith.logging.logger import (
    ROOT_LOGGER,
    JsonFormatter,
    TextFormatter,
    get_logger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _reset_logging():
    clear_context()
    yield
    clear_context()
    root = logging.getLogger(ROOT_LOGGER)
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.setLevel(logging.NOTSET)


def _record(msg: str = "hello", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord("widgetsmith.test", level, __file__, 1, msg, None, None)


class TestContext:
    def test_empty(self):
        assert get_context().as_dict() == {}

    def test_run_stage_path(self):
        set_run_context("abc123")
        set_stage_context("synthesizing")
        set_path_context("src/a.ts")
        assert get_context().as_dict() == {
            "run_id": "abc123",
            "stage": "synthesizing",
            "path": "src/a.ts",
        }

    def test_stage_resets_path(self):
        set_path_context("src/a.ts")
        set_stage_context("storing")
        assert get_context().path is None


class TestFormatters:
    def test_json_includes_context(self):
        set_run_context("run1")
        set_stage_context("planning")
        entry = json.loads(JsonFormatter().format(_record()))
        assert entry["message"] == "hello"
        assert entry["level"] == "INFO"
        assert entry["context"] == {"run_id": "run1", "stage": "planning"}

    def test_json_without_context(self):
        entry = json.loads(JsonFormatter().format(_record()))
        assert "context" not in entry

    def test_text_includes_context(self):
        set_run_context("run1")
        set_stage_context("validating", path="src/a.ts")
        line = TextFormatter().format(_record("checked"))
        assert "<run1>" in line
        assert "[validating]" in line
        assert "(src/a.ts)" in line
        assert line.endswith("- checked")


class TestSetupLogging:
    def test_get_logger_namespace(self):
        assert get_logger("pipeline").name == "widgetsmith.pipeline"

    def test_json_handler(self):
        setup_logging(level="DEBUG", log_format="json")
        root = logging.getLogger(ROOT_LOGGER)
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_reinit_does_not_duplicate(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger(ROOT_LOGGER).handlers) == 1

    def test_file_handler(self, tmp_path):
        setup_logging(log_file=tmp_path / "logs" / "run.log")
        handlers = logging.getLogger(ROOT_LOGGER).handlers
        assert any(isinstance(h, RotatingFileHandler) for h in handlers)


class TestHandlers:
    @pytest.mark.parametrize(
        "text,expected",
        [("10MB", 10 * 1024**2), ("512kb", 512 * 1024), ("1GB", 1024**3), ("200", 200), ("7 B", 7)],
    )
    def test_parse_size(self, text, expected):
        assert _parse_size(text) == expected

    def test_parse_size_invalid(self):
        with pytest.raises(ValueError, match="Invalid size"):
            _parse_size("ten megabytes")

    def test_rotating_handler(self, tmp_path):
        handler = create_rotating_handler(tmp_path / "a" / "b.log", rotation="1KB", retention=3)
        assert handler.maxBytes == 1024
        assert handler.backupCount == 3
        assert (tmp_path / "a").is_dir()
        handler.close()
