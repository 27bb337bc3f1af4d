"""Console output for the catalog sync.

Warnings and status lines are ordinary log records (rendered by RichHandler
once ``setup_logging`` has run). The page counter is a single line redrawn
in place on the shared console and is wiped before anything else is written,
so log records never land halfway through it.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from xiv_emotes.utils.logging import console

_ERASE_LINE = "\033[2K\r"


class SyncLogger:
    def __init__(self, logger_name: str | None = None) -> None:
        self.console: Console = console
        self._logger = logging.getLogger(logger_name or __name__)
        self._progress_visible = False

    def _erase_progress(self) -> None:
        if self._progress_visible:
            self.console.file.write(_ERASE_LINE)
            self._progress_visible = False

    def _log(self, level: int, message: str) -> None:
        if level >= logging.WARNING:
            self._erase_progress()
        self._logger.log(level, message)

    def debug(self, message: str) -> None:
        self._log(logging.DEBUG, message)

    def info(self, message: str) -> None:
        self._log(logging.INFO, message)

    def warning(self, message: str) -> None:
        self._log(logging.WARNING, message)

    def error(self, message: str) -> None:
        self._log(logging.ERROR, message)

    def success(self, message: str) -> None:
        self._erase_progress()
        self.console.print(f"[green]✓[/green] {message}")

    # XIVAPI transport

    def rate_limit(self, retry_after: float) -> None:
        self.warning(f"Rate limited. Waiting {retry_after:.1f}s...")

    def retry(
        self, attempt: int, max_attempts: int, wait_time: float, reason: str = ""
    ) -> None:
        suffix = f" ({reason})" if reason else ""
        self.warning(f"Retry {attempt}/{max_attempts} in {wait_time:.1f}s{suffix}")

    def page_progress(self, page: int, total_pages: int | None, fetched: int) -> None:
        """Redraw the page counter; total_pages is None until XIVAPI reports it."""
        of_total = f"/{total_pages}" if total_pages else ""
        self.console.file.write(_ERASE_LINE)
        self.console.print(
            f"  [dim]Page {page}{of_total}: {fetched:,} emotes fetched...[/dim]",
            end="\r",
        )
        self._progress_visible = True

    # Registration

    def emote_skipped(self, xiv_id: int | None, reason: str) -> None:
        self.debug(f"Skipping emote {xiv_id}: {reason}")

    def emote_conflict(self, xiv_id: int, command: str) -> None:
        self.warning(
            f"Emote {xiv_id} wants command {command}, which another emote already owns"
        )

    def summary(
        self,
        fetched: int = 0,
        registered: int = 0,
        skipped: int = 0,
        conflicts: int = 0,
        elapsed: float = 0.0,
    ) -> None:
        """Print the end-of-run counts as a panel."""
        self._erase_progress()

        counts = Table.grid(padding=(0, 2))
        counts.add_column(style="bold")
        counts.add_column(justify="right", style="green")
        for label, value in (
            ("Rows fetched", f"{fetched:,}"),
            ("Emotes registered", f"{registered:,}"),
            ("Rows skipped", f"{skipped:,}"),
            ("Command conflicts", f"{conflicts:,}"),
            ("Time elapsed", f"{elapsed:.1f}s"),
        ):
            counts.add_row(label, value)

        self.console.print()
        self.console.print(
            Panel(
                counts,
                title="[bold]Catalog Sync Complete[/bold]",
                border_style="cyan",
                padding=(1, 2),
            )
        )


logger = SyncLogger()
