"""
Tests for logging setup.
"""

import io
import logging

import pytest
from rich.console import Console
from rich.logging import RichHandler

from bucket_purge.core.logging import LogContext, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put the root logger back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_console_handler(self):
        """Test that a Rich handler is installed at the requested level."""
        setup_logging(level="DEBUG")
        root = logging.getLogger()

        assert root.level == logging.DEBUG
        assert any(isinstance(h, RichHandler) for h in root.handlers)
        assert logging.getLogger("botocore").level == logging.WARNING

    def test_file_handler(self, tmp_path):
        """Test that a log file receives records."""
        log_file = tmp_path / "purge.log"
        setup_logging(level="INFO", log_file=str(log_file))

        get_logger("bucket_purge.test").info("purging bucket")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "purging bucket" in log_file.read_text()

    def test_unknown_level_defaults_to_info(self):
        """Test that an unknown level name falls back to INFO."""
        setup_logging(level="chatty")
        assert logging.getLogger().level == logging.INFO


class TestLogContext:
    """Tests for LogContext."""

    def test_restores_level(self):
        """Test that the original level is restored."""
        logger = logging.getLogger("bucket_purge.context")
        logger.setLevel(logging.WARNING)

        with LogContext(logger, "DEBUG"):
            assert logger.level == logging.DEBUG

        assert logger.level == logging.WARNING

    def test_handlers_let_sdk_debug_through(self):
        """Test that lowering the root handlers lets SDK debug records print."""
        stream = io.StringIO()
        setup_logging(level="WARNING", console=Console(file=stream, width=200))
        root = logging.getLogger()
        sdk_logger = logging.getLogger("botocore")

        sdk_logger.debug("hidden wire detail")
        with LogContext(sdk_logger, "DEBUG", handlers=root.handlers):
            sdk_logger.debug("visible wire detail")
            logging.getLogger("bucket_purge.context").debug("app detail")

        assert "visible wire detail" in stream.getvalue()
        assert "hidden wire detail" not in stream.getvalue()
        assert "app detail" not in stream.getvalue()
        assert all(h.level == logging.WARNING for h in root.handlers)
        assert sdk_logger.level == logging.WARNING
