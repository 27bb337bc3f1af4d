"""Tests for the xiv-emotes-sync command line and logging setup."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock, patch

import pytest
from rich.logging import RichHandler

from xiv_emotes.catalog.__main__ import build_parser, main
from xiv_emotes.utils.logging import THIRD_PARTY_DEBUG_LEVELS, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    library_levels = {name: logging.getLogger(name).level for name in THIRD_PARTY_DEBUG_LEVELS}
    yield root
    for name, library_level in library_levels.items():
        logging.getLogger(name).setLevel(library_level)
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def _interrupt(coro):
    coro.close()
    raise KeyboardInterrupt


class TestBuildParser:
    def test_defaults(self) -> None:
        args = build_parser().parse_args([])

        assert args.config == "config.json"
        assert args.dry_run is False
        assert args.verbose is False
        assert args.debug is False
        assert args.log_file is None

    def test_all_flags(self) -> None:
        args = build_parser().parse_args(
            ["--config", "other.json", "--dry-run", "-v", "--debug", "--log-file", "s.log"]
        )

        assert args.config == "other.json"
        assert args.dry_run is True
        assert args.verbose is True
        assert args.debug is True
        assert args.log_file == "s.log"


class TestMain:
    def test_runs_sync_with_parsed_options(self) -> None:
        run_sync = MagicMock(return_value="coro")

        with patch("xiv_emotes.catalog.__main__.setup_logging") as setup, patch(
            "xiv_emotes.catalog.__main__.run_sync", run_sync
        ), patch("xiv_emotes.catalog.__main__.asyncio.run") as run:
            main(["--config", "other.json", "--dry-run", "-v"])

        run_sync.assert_called_once_with(config_path="other.json", dry_run=True)
        run.assert_called_once_with("coro")
        assert setup.call_args.kwargs["level"] == logging.DEBUG
        assert setup.call_args.kwargs["debug_third_party"] is False

    def test_interrupt_exits_nonzero(self) -> None:
        with patch("xiv_emotes.catalog.__main__.setup_logging"), patch(
            "xiv_emotes.catalog.__main__.asyncio.run",
            side_effect=_interrupt,
        ):
            with pytest.raises(SystemExit) as exc_info:
                main([])

        assert exc_info.value.code == 1

    def test_failure_is_reraised(self) -> None:
        def _fail(coro):
            coro.close()
            raise RuntimeError("db gone")

        with patch("xiv_emotes.catalog.__main__.setup_logging"), patch(
            "xiv_emotes.catalog.__main__.asyncio.run", side_effect=_fail
        ):
            with pytest.raises(RuntimeError, match="db gone"):
                main([])


class TestSetupLogging:
    def test_installs_rich_handler(self, restore_root_logger) -> None:
        setup_logging(level=logging.DEBUG)

        assert restore_root_logger.level == logging.DEBUG
        assert any(isinstance(h, RichHandler) for h in restore_root_logger.handlers)
        for name in THIRD_PARTY_DEBUG_LEVELS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_debug_third_party_and_log_file(self, restore_root_logger, tmp_path) -> None:
        log_file = tmp_path / "sync.log"

        setup_logging(log_file=log_file, debug_third_party=True)
        logging.getLogger("xiv_emotes.test").info("hello file")

        for handler in restore_root_logger.handlers:
            handler.flush()
        assert "hello file" in log_file.read_text(encoding="utf-8")
        assert logging.getLogger("sqlalchemy.engine").level == logging.INFO
        assert logging.getLogger("httpx").level == logging.DEBUG
