"""Transactional facade over the emote repositories.

Every public coroutine runs in its own session and transaction, so the bot
can call them concurrently from many event handlers without any
in-process locking: uniqueness and atomicity come from PostgreSQL.

Usage:
    service = EmoteLedgerService(get_async_session(), get_settings())

    result = await service.handle_invocation(event)
    reply = render(result.emote_command, result.settings)  # bot layer
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import AsyncIterator, Iterable

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from xiv_emotes.config.settings import AppSettings
from xiv_emotes.db import repositories as repo
from xiv_emotes.db.errors import is_transient_sqlstate
from xiv_emotes.db.models import Emote
from xiv_emotes.errors import StorageError, StorageUnavailableError, UnknownCommandError
from xiv_emotes.events import ConfigChangeEvent, ConfigScope, InvocationEvent
from xiv_emotes.preferences import (
    UNCONFIGURED,
    EffectiveSettings,
    Gender,
    Language,
    resolve_effective_settings,
)
from xiv_emotes.utils.ids import to_external_id

logger = logging.getLogger(__name__)


@dataclass
class InvocationResult:
    """Outcome of a recorded emote invocation."""

    emote_log_id: int
    emote_xiv_id: int
    emote_command: str
    settings: EffectiveSettings
    tagged_user_count: int


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, (OperationalError, InterfaceError)):
        return True
    if isinstance(exc, DBAPIError):
        return exc.connection_invalidated or is_transient_sqlstate(exc)
    return isinstance(exc, (TimeoutError, asyncio.TimeoutError, OSError))


class EmoteLedgerService:
    """Identity mapping, settings resolution, catalog and usage ledger."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        settings: AppSettings | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.settings = settings or AppSettings()
        self.defaults = self.settings.defaults

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Yield a session inside a transaction.

        Commits on success and rolls back on any exception. Connection
        failures, timeouts, deadlocks and serialization failures are
        re-raised as StorageUnavailableError; any other database error as
        StorageError.
        """
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    yield session
        except Exception as e:
            if _is_transient(e):
                logger.warning("Storage unavailable: %s", e)
                raise StorageUnavailableError(str(e)) from e
            if isinstance(e, DBAPIError):
                logger.error("Database error: %s", e)
                raise StorageError(str(e)) from e
            raise

    # -------------------------------------------------------------------------
    # Identity Mapper
    # -------------------------------------------------------------------------

    async def resolve_user(self, external_id: str | int) -> int:
        async with self.transaction() as session:
            return await repo.resolve_user(session, external_id, self.defaults)

    async def resolve_guild(self, external_id: str | int) -> int:
        async with self.transaction() as session:
            return await repo.resolve_guild(session, external_id, self.defaults)

    # -------------------------------------------------------------------------
    # Settings Resolver
    # -------------------------------------------------------------------------

    async def _effective_settings(
        self, session: AsyncSession, user_key: int, guild_key: int | None
    ) -> EffectiveSettings:
        user_pref = await repo.get_user_preference(session, user_key)
        guild_pref = None
        if guild_key is not None:
            guild_pref = await repo.get_guild_preference(session, guild_key)
        return resolve_effective_settings(user_pref, guild_pref, self.defaults)

    async def effective_settings(
        self, user_key: int, guild_key: int | None = None
    ) -> EffectiveSettings:
        """Resolve the settings to render a reply with."""
        async with self.transaction() as session:
            return await self._effective_settings(session, user_key, guild_key)

    async def set_user_preference(
        self,
        user_key: int,
        language: Language | None = None,
        gender: Gender | None = None,
    ) -> bool:
        async with self.transaction() as session:
            return await repo.set_user_preference(session, user_key, language, gender)

    async def set_guild_preference(
        self,
        guild_key: int,
        language: Language | None = None,
        gender: Gender | None = None,
        prefix: str | None = None,
    ) -> bool:
        async with self.transaction() as session:
            return await repo.set_guild_preference(
                session, guild_key, language, gender, prefix
            )

    # -------------------------------------------------------------------------
    # Emote Catalog
    # -------------------------------------------------------------------------

    async def register_emote(self, xiv_id: int, command: str) -> None:
        async with self.transaction() as session:
            await repo.register_emote(session, xiv_id, command)

    async def list_emotes(self) -> list[Emote]:
        async with self.transaction() as session:
            return await repo.list_emotes(session)

    # -------------------------------------------------------------------------
    # Usage Ledger
    # -------------------------------------------------------------------------

    async def record_invocation(
        self,
        user_key: int,
        guild_key: int | None,
        emote_xiv_id: int,
        sent_at: datetime,
        tagged_user_keys: Iterable[int] = (),
    ) -> int:
        """Record an invocation and its tags atomically; returns the log ID."""
        async with self.transaction() as session:
            return await repo.record_invocation(
                session, user_key, guild_key, emote_xiv_id, sent_at, tagged_user_keys
            )

    async def count_emote_logs(self, query: repo.EmoteLogQuery) -> int:
        async with self.transaction() as session:
            return await repo.count_emote_logs(session, query)

    # -------------------------------------------------------------------------
    # Event handlers
    # -------------------------------------------------------------------------

    async def handle_invocation(self, event: InvocationEvent) -> InvocationResult:
        """Resolve every party, the emote and the settings, then log the invocation.

        Raises:
            UnknownCommandError: If the command text matches no registered emote.
            StorageUnavailableError: If the database failed or aborted the
                transaction; nothing was written and a retry may succeed.
            StorageError: If the database rejected the operation.
        """
        async with self.transaction() as session:
            emote = await repo.find_emote_by_command(session, event.command_text)
            if emote is None:
                raise UnknownCommandError(event.command_text)

            # Guild first, then every user in one sorted pass: the same lock
            # order in every transaction, whoever invokes and whoever is tagged.
            guild_key = None
            if event.guild_external_id is not None:
                guild_key = await repo.resolve_guild(
                    session, event.guild_external_id, self.defaults
                )
            user_keys = await repo.resolve_user_keys(
                session,
                [event.inviter_external_id, *event.tagged_external_ids],
                self.defaults,
            )
            user_key = user_keys[to_external_id(event.inviter_external_id)]
            tagged_keys = {
                user_keys[to_external_id(external_id)]
                for external_id in event.tagged_external_ids
            }

            settings = await self._effective_settings(session, user_key, guild_key)
            emote_log_id = await repo.record_invocation(
                session,
                user_key,
                guild_key,
                emote.xiv_id,
                event.sent_at,
                tagged_keys,
            )

        logger.debug(
            "Logged %s by %s (log %d, %d tagged)",
            emote.command,
            event.inviter_external_id,
            emote_log_id,
            len(tagged_keys),
        )
        return InvocationResult(
            emote_log_id=emote_log_id,
            emote_xiv_id=emote.xiv_id,
            emote_command=emote.command,
            settings=settings,
            tagged_user_count=len(tagged_keys),
        )

    async def handle_config_change(self, event: ConfigChangeEvent) -> EffectiveSettings:
        """Apply a settings command and return the subject's new effective settings."""
        async with self.transaction() as session:
            if event.scope is ConfigScope.USER:
                user_key = await repo.resolve_user(
                    session, event.subject_external_id, self.defaults
                )
                await repo.set_user_preference(
                    session, user_key, event.language, event.gender
                )
                settings = await self._effective_settings(session, user_key, None)
            else:
                guild_key = await repo.resolve_guild(
                    session, event.subject_external_id, self.defaults
                )
                await repo.set_guild_preference(
                    session, guild_key, event.language, event.gender, event.prefix
                )
                guild_pref = await repo.get_guild_preference(session, guild_key)
                # What an unconfigured member of this guild now gets
                settings = resolve_effective_settings(
                    UNCONFIGURED, guild_pref, self.defaults
                )

        logger.info(
            "Updated %s settings for %s", event.scope.value, event.subject_external_id
        )
        return settings
