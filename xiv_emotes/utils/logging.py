"""Logging setup for the emote bot core and its catalog sync CLI.

Everything renders through one rich Console: RichHandler for log records,
and the sync logger's progress line and summary panel. Library code only
ever calls ``logging.getLogger(__name__)``; the process entry point (the
sync CLI, or the bot that embeds this package) calls ``setup_logging``.

Usage:
    from xiv_emotes.utils.logging import setup_logging

    setup_logging(level=logging.DEBUG, log_file="sync.log")
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler


console = Console()

# Level per chatty library when third-party debugging is on.
# sqlalchemy.engine logs each statement at INFO.
THIRD_PARTY_DEBUG_LEVELS = {
    "httpx": logging.DEBUG,
    "asyncpg": logging.DEBUG,
    "sqlalchemy.engine": logging.INFO,
}

FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _file_handler(log_file: str | Path) -> logging.Handler:
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=FILE_DATE_FORMAT))
    return handler


def setup_logging(
    level: int = logging.INFO,
    log_file: str | Path | None = None,
    debug_third_party: bool = False,
) -> None:
    """Route all logging through RichHandler on the shared console.

    Safe to call again (e.g. from tests); existing root handlers are replaced.

    Args:
        level: Root logger level
        log_file: Also append plain-text records to this file
        debug_third_party: Show httpx, asyncpg and SQL statement logs;
            otherwise those libraries only log warnings
    """
    handlers: list[logging.Handler] = [
        RichHandler(console=console, show_path=False, rich_tracebacks=True)
    ]
    if log_file:
        handlers.append(_file_handler(log_file))

    logging.basicConfig(level=level, handlers=handlers, format="%(message)s", force=True)

    for name, debug_level in THIRD_PARTY_DEBUG_LEVELS.items():
        logging.getLogger(name).setLevel(
            debug_level if debug_third_party else logging.WARNING
        )
