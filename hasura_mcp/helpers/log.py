"""Logging setup: rich-formatted records on stderr.

stdout carries the MCP stdio transport, so nothing else may write to it.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

stderr_console = Console(stderr=True)


def setup_logging(level: str | int = "INFO") -> None:
    """Route the root logger through a RichHandler bound to stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=stderr_console, rich_tracebacks=True, show_path=False)],
        force=True,
    )
