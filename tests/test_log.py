"""Tests for logging setup."""

from __future__ import annotations

import io
import logging

from rich.logging import RichHandler

from schemawarden.log import LOGGER_NAME, setup_logging


class TestSetupLogging:
    def test_installs_single_rich_handler(self):
        setup_logging("debug")
        setup_logging(logging.INFO)
        logger = logging.getLogger(LOGGER_NAME)
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)

    def test_unknown_level_falls_back(self):
        setup_logging("chatty")
        assert logging.getLogger(LOGGER_NAME).level == logging.WARNING

    def test_child_loggers_write_to_stream(self):
        stream = io.StringIO()
        setup_logging(logging.WARNING, stream=stream)
        logging.getLogger("schemawarden.core.scanner").warning("Skipping unreadable source")
        assert "Skipping unreadable source" in stream.getvalue()
