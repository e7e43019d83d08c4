"""Unit tests for structured logging utilities."""

from __future__ import annotations

import logging
import sys
from unittest.mock import MagicMock

import pytest
import structlog

from provisioner.utils.logging import get_logger, log_error, setup_logging


class TestSetupLogging:
    """Test setup_logging function."""

    @pytest.fixture(autouse=True)
    def reset_logging(self):
        """Reset logging configuration before each test."""
        logging.root.handlers = []
        structlog.reset_defaults()
        yield
        logging.root.handlers = []
        structlog.reset_defaults()

    def test_setup_logging_default_parameters(self):
        """Defaults configure a handler and console rendering."""
        setup_logging()

        assert len(logging.root.handlers) > 0
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    @pytest.mark.parametrize("level", ["DEBUG", "INFO", "WARNING", "ERROR", "critical"])
    def test_setup_logging_levels(self, level):
        """Known levels, in any case, are accepted."""
        setup_logging(level=level)

        assert logging.root.level == getattr(logging, level.upper())

    def test_setup_logging_invalid_level_defaults_to_info(self):
        setup_logging(level="CHATTY")

        assert logging.root.level == logging.INFO

    def test_setup_logging_json_format(self):
        """JSON format ends with the JSON renderer."""
        setup_logging(format="json")

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert any(isinstance(p, structlog.processors.TimeStamper) for p in processors)

    def test_setup_logging_stderr_output(self):
        """stderr output binds both stdlib and structlog to stderr."""
        setup_logging(output="stderr")

        handler = logging.root.handlers[0]
        assert handler.stream is sys.stderr

    def test_setup_logging_stdout_output(self):
        setup_logging(output="stdout")

        handler = logging.root.handlers[0]
        assert handler.stream is sys.stdout

    def test_setup_logging_caches_logger(self):
        setup_logging()

        assert structlog.get_config()["cache_logger_on_first_use"] is True


class TestGetLogger:
    """Test get_logger function."""

    def test_get_logger_can_log_messages(self):
        logger = get_logger("provisioner.test")

        logger.info("test_message", key="value")

    def test_get_logger_without_name(self):
        assert get_logger() is not None


class TestLogError:
    """Test log_error helper function."""

    def test_log_error_basic(self):
        """log_error logs error type and message."""
        logger = MagicMock()
        error = ValueError("Test error")

        log_error(logger, error)

        logger.error.assert_called_once()
        call_args = logger.error.call_args
        assert call_args[0][0] == "error_occurred"
        assert call_args[1]["error_type"] == "ValueError"
        assert call_args[1]["error_message"] == "Test error"
        assert call_args[1]["exc_info"] is True
        assert "operation" not in call_args[1]

    def test_log_error_with_operation_and_context(self):
        logger = MagicMock()
        error = RuntimeError("Runtime error")

        log_error(logger, error, operation="provision_run", step="ensure_cluster")

        call_args = logger.error.call_args
        assert call_args[1]["operation"] == "provision_run"
        assert call_args[1]["step"] == "ensure_cluster"
        assert call_args[1]["error_type"] == "RuntimeError"
