"""Logging setup for the command-line entry points.

Library modules only call ``logging.getLogger(__name__)``; handlers are
installed here, once, by the CLI or MCP entry point.
"""

from __future__ import annotations

import logging
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "schemawarden"


def setup_logging(level: int | str = logging.WARNING, stream: TextIO | None = None) -> None:
    """Attach a rich handler to the ``schemawarden`` logger.

    Args:
        level: Minimum level, as a ``logging`` constant or a level name
        stream: Output stream (default: stderr)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    console = Console(file=stream, stderr=stream is None)
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
