"""Logging setup for command-line entry points.

Log records go to stderr: the stdio MCP transport owns stdout.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str = "INFO") -> None:
    """Install a Rich handler on the root logger.

    Args:
        level: Logging level name.
    """
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


__all__ = ["configure_logging"]
