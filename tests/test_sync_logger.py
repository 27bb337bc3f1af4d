"""Tests for xiv_emotes.catalog.logger."""

from __future__ import annotations

import logging
from io import StringIO

from rich.console import Console

from xiv_emotes.catalog.logger import SyncLogger


def _make_logger() -> SyncLogger:
    logger = SyncLogger("test_sync_logger")
    # Replace console with a string-capturing one for assertions
    logger.console = Console(file=StringIO(), force_terminal=True, width=120)
    return logger


def _output(logger: SyncLogger) -> str:
    logger.console.file.seek(0)
    return logger.console.file.read()


class TestSummary:
    """Tests for SyncLogger.summary."""

    def test_prints_panel_with_counts(self) -> None:
        logger = _make_logger()

        logger.summary(fetched=1234, registered=200, skipped=30, conflicts=2, elapsed=3.21)

        output = _output(logger)
        assert "Catalog Sync Complete" in output
        assert "1,234" in output
        assert "200" in output
        assert "Command conflicts" in output
        assert "3.2s" in output


class TestEvents:
    """Tests for the event helpers routed through Python logging."""

    def test_retry_includes_reason(self, caplog) -> None:
        logger = _make_logger()

        with caplog.at_level(logging.WARNING, logger="test_sync_logger"):
            logger.retry(2, 5, 4.0, "HTTP 503")

        assert "Retry 2/5 in 4.0s (HTTP 503)" in caplog.text

    def test_rate_limit(self, caplog) -> None:
        logger = _make_logger()

        with caplog.at_level(logging.WARNING, logger="test_sync_logger"):
            logger.rate_limit(1.5)

        assert "Rate limited. Waiting 1.5s" in caplog.text

    def test_emote_conflict_is_warning(self, caplog) -> None:
        logger = _make_logger()

        with caplog.at_level(logging.WARNING, logger="test_sync_logger"):
            logger.emote_conflict(42, "/dance")

        assert caplog.records[0].levelno == logging.WARNING
        assert "/dance" in caplog.text

    def test_emote_skipped_is_debug(self, caplog) -> None:
        logger = _make_logger()

        with caplog.at_level(logging.DEBUG, logger="test_sync_logger"):
            logger.emote_skipped(7, "no text command")

        assert caplog.records[0].levelno == logging.DEBUG
        assert "Skipping emote 7: no text command" in caplog.text

    def test_success_prints_to_console(self) -> None:
        logger = _make_logger()

        logger.success("done")

        assert "done" in _output(logger)


class TestPageProgress:
    """Tests for the in-place page counter."""

    def test_prints_page_of_total(self) -> None:
        logger = _make_logger()

        logger.page_progress(2, 5, 1500)

        assert "Page 2/5: 1,500 emotes fetched" in _output(logger)

    def test_warning_erases_progress_line(self, caplog) -> None:
        logger = _make_logger()
        logger.page_progress(1, None, 100)

        with caplog.at_level(logging.WARNING, logger="test_sync_logger"):
            logger.warning("slow down")

        assert _output(logger).endswith("\033[2K\r")
        assert "slow down" in caplog.text
