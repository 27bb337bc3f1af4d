"""CLI entry point for xiv_emotes.catalog.

Usage:
    python -m xiv_emotes.catalog                 # Sync the emote catalog
    python -m xiv_emotes.catalog --dry-run       # Fetch and validate only
    python -m xiv_emotes.catalog --verbose       # Show skipped rows
    python -m xiv_emotes.catalog --debug         # Show HTTP and SQL logs
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from xiv_emotes.catalog.logger import logger
from xiv_emotes.catalog.sync import run_sync
from xiv_emotes.utils.logging import setup_logging

EPILOG = """
Examples:
  xiv-emotes-sync --config /etc/xiv-emotes/config.json
      Sync using a config file outside the working directory

  xiv-emotes-sync --dry-run -v
      Check what XIVAPI currently serves and why rows would be skipped
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xiv-emotes-sync",
        description="Register the FFXIV emote catalog from XIVAPI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )
    parser.add_argument(
        "--config",
        default="config.json",
        help="Path to config.json (default: config.json)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch and validate the catalog without writing to the database",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log skipped rows (DEBUG level)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Like --verbose, plus httpx, asyncpg and SQL logs",
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    setup_logging(
        level=logging.DEBUG if (args.verbose or args.debug) else logging.INFO,
        log_file=args.log_file,
        debug_third_party=args.debug,
    )

    try:
        asyncio.run(run_sync(config_path=args.config, dry_run=args.dry_run))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Catalog sync failed: {e}")
        raise

    logger.success("Dry run complete" if args.dry_run else "Catalog sync complete")


if __name__ == "__main__":
    main()
