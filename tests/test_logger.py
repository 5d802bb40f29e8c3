"""
Tests for the logging module.
"""

import logging
import os
from unittest.mock import patch

import pytest

from geoedit.logger import (
    EditCallLogger,
    EditorFormatter,
    get_log_level,
    get_logger,
    log_edit_call,
)


class TestGetLogLevel:
    """Tests for get_log_level function."""

    def test_default_log_level(self):
        """Default log level should be INFO."""
        with patch.dict(os.environ, {}, clear=True):
            assert get_log_level() == logging.INFO

    def test_debug_log_level(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "DEBUG"}):
            assert get_log_level() == logging.DEBUG

    def test_case_insensitive(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "warning"}):
            assert get_log_level() == logging.WARNING

    def test_invalid_log_level_defaults_to_info(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "LOUD"}):
            assert get_log_level() == logging.INFO


class TestGetLogger:
    """Tests for get_logger function."""

    def test_logger_name(self):
        assert get_logger("geoedit.test_name").name == "geoedit.test_name"

    def test_logger_uses_editor_formatter(self):
        logger = get_logger("geoedit.test_formatter")
        assert logger.handlers
        for handler in logger.handlers:
            assert isinstance(handler.formatter, EditorFormatter)

    def test_cached_logger(self):
        """Same name should return the same logger with a single handler."""
        logger1 = get_logger("geoedit.test_cached")
        logger2 = get_logger("geoedit.test_cached")
        assert logger1 is logger2
        assert len(logger1.handlers) == 1


class TestEditorFormatter:
    """Tests for EditorFormatter class."""

    def _record(self):
        return logging.LogRecord(
            name="geoedit",
            level=logging.INFO,
            pathname="",
            lineno=0,
            msg="Edit committed",
            args=(),
            exc_info=None,
        )

    def test_basic_format(self):
        formatted = EditorFormatter().format(self._record())
        assert "geoedit" in formatted
        assert "INFO" in formatted
        assert "Edit committed" in formatted

    def test_extra_fields(self):
        record = self._record()
        record.edit_type = "movePosition"
        record.feature_index = 3
        formatted = EditorFormatter().format(record)
        assert "edit_type=movePosition" in formatted
        assert "feature_index=3" in formatted


class TestEditCallLogger:
    """Tests for EditCallLogger context manager."""

    def test_context_manager_basic(self):
        logger = get_logger("geoedit.test_call")
        with EditCallLogger(logger, "handle_interaction", kind="click") as log:
            log.set_result({"session": {}, "edit": None})
        assert log.result == {"session": {}, "edit": None}

    def test_summarize_edit(self):
        log = EditCallLogger(get_logger("geoedit.test_summary"), "op")
        assert log._summarize_result({"edit": {"edit_type": "addFeature"}}) == "edit=addFeature"

    def test_summarize_handles(self):
        log = EditCallLogger(get_logger("geoedit.test_summary"), "op")
        assert log._summarize_result({"handles": [1, 2], "count": 2}) == "handles=2"

    def test_summarize_error(self):
        log = EditCallLogger(get_logger("geoedit.test_summary"), "op")
        assert "error" in log._summarize_result({"error": "stale"})

    def test_summarize_other(self):
        log = EditCallLogger(get_logger("geoedit.test_summary"), "op")
        assert log._summarize_result(None) == "None"
        assert log._summarize_result([1, 2, 3]) == "list with 3 items"
        assert log._summarize_result(1.5) == "float"

    def test_exception_is_reraised(self):
        logger = get_logger("geoedit.test_exception")
        with pytest.raises(ValueError):
            with EditCallLogger(logger, "failing_op"):
                raise ValueError("Test error")


class TestLogEditCall:
    def test_decorator_returns_result(self):
        logger = get_logger("geoedit.test_decorator")

        @log_edit_call(logger, "double")
        def double(value):
            return value * 2

        assert double(value=4) == 8
        assert double.__name__ == "double"
