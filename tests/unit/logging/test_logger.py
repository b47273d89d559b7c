# tests/unit/logging/test_logger.py - v2
"""Tests for logging/logger.py - logger factory and formatters."""

from __future__ import annotations

import io
import json
import logging
import sys

from unitgen.logging.context import (
    clear_context,
    get_context,
    set_invocation_context,
    set_state_context,
)
from unitgen.logging.logger import JsonFormatter, TextFormatter, setup_logging


def _record(msg: str = "Hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="test", level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )


class TestLogContext:
    def test_empty_by_default(self):
        assert get_context().as_dict() == {}

    def test_invocation_and_state(self):
        set_invocation_context("abc123", "openai")
        set_state_context("cache_miss")
        assert get_context().as_dict() == {
            "fingerprint": "abc123",
            "provider": "openai",
            "state": "cache_miss",
        }

    def test_clear(self):
        set_invocation_context("abc123", "openai")
        clear_context()
        assert get_context().fingerprint is None


class TestJsonFormatter:
    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_context(self):
        set_invocation_context("fp1", "anthropic")
        parsed = json.loads(JsonFormatter().format(_record("test msg")))
        assert parsed["context"]["fingerprint"] == "fp1"
        assert parsed["context"]["provider"] == "anthropic"

    def test_format_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record("failed")
            record.exc_info = sys.exc_info()
        parsed = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in parsed["exception"]


class TestTextFormatter:
    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "INFO" in output

    def test_includes_state(self):
        set_state_context("generating")
        assert "(generating)" in TextFormatter().format(_record())


class TestSetupLogging:
    def teardown_method(self):
        logging.getLogger("unitgen").handlers.clear()

    def test_setup_json(self):
        stream = io.StringIO()
        setup_logging(level="DEBUG", log_format="json", stream=stream)
        root = logging.getLogger("unitgen")
        assert root.level == logging.DEBUG
        logging.getLogger("unitgen.cache").debug("stored")
        assert json.loads(stream.getvalue())["message"] == "stored"

    def test_setup_text(self):
        setup_logging(level="INFO", log_format="text")
        root = logging.getLogger("unitgen")
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_no_duplicate_handlers(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger("unitgen").handlers) == 1
