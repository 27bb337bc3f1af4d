"""Emote catalog sync.

Pulls the Emote sheet from XIVAPI and registers every usable emote. Safe to
run on every startup: registration is an upsert keyed on the game's emote
ID, so re-running only advances update_tm.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from xiv_emotes.catalog.client import XivApiClient
from xiv_emotes.catalog.logger import logger
from xiv_emotes.catalog.mapper import EmoteDefinition, map_emote_rows
from xiv_emotes.config.settings import AppSettings, load_config
from xiv_emotes.db.engine import create_tables, dispose_engines, get_engine
from xiv_emotes.db.repositories import register_emote
from xiv_emotes.errors import EmoteCommandConflictError


async def register_definitions(
    session: AsyncSession, definitions: list[EmoteDefinition]
) -> tuple[int, int]:
    """Register definitions, each in its own savepoint.

    A command conflict rolls back only that emote's savepoint, so one bad
    upstream row cannot abort the whole sync.

    Returns:
        (registered, conflicts)
    """
    registered = 0
    conflicts = 0
    for definition in definitions:
        try:
            async with session.begin_nested():
                await register_emote(session, definition.xiv_id, definition.command)
            registered += 1
        except EmoteCommandConflictError:
            logger.emote_conflict(definition.xiv_id, definition.command)
            conflicts += 1
    return registered, conflicts


@dataclass
class SyncStats:
    rows_fetched: int = 0
    rows_skipped: int = 0
    emotes_registered: int = 0
    command_conflicts: int = 0


class CatalogSyncOrchestrator:
    """Fetches the upstream emote catalog and registers it.

    With dry_run the catalog is fetched and validated but the database is
    never touched, so no database_url is needed.
    """

    def __init__(self, settings: AppSettings, dry_run: bool = False) -> None:
        self.settings = settings
        self.dry_run = dry_run
        self.stats = SyncStats()

    async def fetch_definitions(self) -> list[EmoteDefinition]:
        """Download every page of the Emote sheet and map it."""
        rows: list[dict] = []
        async with XivApiClient(
            base_url=self.settings.xivapi_base_url,
            private_key=self.settings.xivapi_key,
        ) as client:
            async for page, total_pages, page_rows in client.iter_emote_pages():
                rows.extend(page_rows)
                logger.page_progress(page, total_pages, len(rows))

        result = map_emote_rows(rows)
        for xiv_id, reason in result.skipped:
            logger.emote_skipped(xiv_id, reason)

        self.stats.rows_fetched = len(rows)
        self.stats.rows_skipped = len(result.skipped)
        return result.definitions

    async def register(self, definitions: list[EmoteDefinition]) -> None:
        """Create missing tables, then register everything in one transaction."""
        engine = get_engine(self.settings.database_url, self.settings.db_command_timeout)
        await create_tables(engine)

        session_factory = async_sessionmaker(bind=engine, expire_on_commit=False)
        async with session_factory() as session:
            async with session.begin():
                registered, conflicts = await register_definitions(session, definitions)

        self.stats.emotes_registered = registered
        self.stats.command_conflicts = conflicts

    async def run(self) -> SyncStats:
        start = time.monotonic()

        definitions = await self.fetch_definitions()
        if self.dry_run:
            logger.info(f"Dry run: {len(definitions):,} emotes would be registered")
        else:
            logger.info(f"Registering {len(definitions):,} emotes")
            await self.register(definitions)

        logger.summary(
            fetched=self.stats.rows_fetched,
            registered=self.stats.emotes_registered,
            skipped=self.stats.rows_skipped,
            conflicts=self.stats.command_conflicts,
            elapsed=time.monotonic() - start,
        )
        return self.stats


async def run_sync(config_path: str = "config.json", dry_run: bool = False) -> SyncStats:
    """Entry point for running the catalog sync."""
    settings = load_config(config_path)
    try:
        return await CatalogSyncOrchestrator(settings, dry_run=dry_run).run()
    finally:
        await dispose_engines()
