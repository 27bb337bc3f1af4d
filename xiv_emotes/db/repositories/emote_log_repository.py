"""Emote log repository: the usage ledger and its statistics.

record_invocation writes one EmoteLog and its EmoteLogTag rows. It does
not commit; the caller's transaction is what makes the log and its tags
land together or not at all.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from xiv_emotes.db.base import utcnow
from xiv_emotes.db.models import Emote, EmoteLog, EmoteLogTag
from xiv_emotes.db.repositories.emote_repository import find_emote_id
from xiv_emotes.errors import EmoteNotFoundError
from xiv_emotes.utils.time import ensure_utc


async def record_invocation(
    session: AsyncSession,
    user_key: int,
    guild_key: int | None,
    emote_xiv_id: int,
    sent_at: datetime,
    tagged_user_keys: Iterable[int] = (),
) -> int:
    """Record one emote invocation with its tagged users.

    Args:
        session: Database session (inside a transaction)
        user_key: Invoking user's surrogate key
        guild_key: Guild surrogate key, or None for direct messages
        emote_xiv_id: The game's emote ID; must already be registered
        sent_at: When the Discord message was sent
        tagged_user_keys: Surrogate keys of mentioned users; duplicates collapse

    Returns:
        The new emote_log_id

    Raises:
        EmoteNotFoundError: If the emote was never registered. Nothing is
            written in that case.
    """
    emote_id = await find_emote_id(session, emote_xiv_id)
    if emote_id is None:
        raise EmoteNotFoundError(emote_xiv_id)

    now = utcnow()
    result = await session.execute(
        pg_insert(EmoteLog)
        .values(
            user_id=user_key,
            guild_id=guild_key,
            emote_id=emote_id,
            sent_at=ensure_utc(sent_at),
            insert_tm=now,
            update_tm=now,
        )
        .returning(EmoteLog.emote_log_id)
    )
    emote_log_id = result.scalar_one()

    await insert_tags(session, emote_log_id, tagged_user_keys)
    return emote_log_id


async def insert_tags(
    session: AsyncSession, emote_log_id: int, user_keys: Iterable[int]
) -> None:
    """Insert tag rows for a log (on conflict do nothing).

    Args:
        session: Database session
        emote_log_id: The log the tags belong to
        user_keys: Tagged users' surrogate keys, possibly with duplicates
    """
    # Sorted and deduplicated so the statement is deterministic
    unique_keys = sorted(set(user_keys))
    if not unique_keys:
        return

    now = utcnow()
    values = [
        {
            "emote_log_id": emote_log_id,
            "user_id": user_key,
            "insert_tm": now,
            "update_tm": now,
        }
        for user_key in unique_keys
    ]
    stmt = (
        pg_insert(EmoteLogTag)
        .values(values)
        .on_conflict_do_nothing(index_elements=["emote_log_id", "user_id"])
    )
    await session.execute(stmt)


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


class LogDirection(str, Enum):
    """Whether to count emotes a user sent or emotes they were tagged in."""

    SENT = "sent"
    RECEIVED = "received"


@dataclass(frozen=True)
class EmoteLogQuery:
    """Scope of an emote usage count.

    At least one of guild_key or user_key is required. Covers the guild,
    guild+user and user scopes for both directions, optionally narrowed
    to a single emote.
    """

    direction: LogDirection
    guild_key: int | None = None
    user_key: int | None = None
    emote_xiv_id: int | None = None

    def __post_init__(self) -> None:
        if self.guild_key is None and self.user_key is None:
            raise ValueError("EmoteLogQuery needs a guild_key, a user_key or both")


async def count_emote_logs(session: AsyncSession, query: EmoteLogQuery) -> int:
    """Count emote usage for a statistics query.

    SENT counts emote_logs rows invoked by the user. RECEIVED counts
    emote_log_tags rows naming the user (or all tags when only a guild is
    given).

    Args:
        session: Database session
        query: The scope to count

    Returns:
        Number of matching rows
    """
    if query.direction is LogDirection.SENT:
        stmt = select(func.count()).select_from(EmoteLog)
        if query.user_key is not None:
            stmt = stmt.where(EmoteLog.user_id == query.user_key)
    else:
        stmt = (
            select(func.count())
            .select_from(EmoteLogTag)
            .join(EmoteLog, EmoteLog.emote_log_id == EmoteLogTag.emote_log_id)
        )
        if query.user_key is not None:
            stmt = stmt.where(EmoteLogTag.user_id == query.user_key)

    if query.guild_key is not None:
        stmt = stmt.where(EmoteLog.guild_id == query.guild_key)

    if query.emote_xiv_id is not None:
        stmt = stmt.join(Emote, Emote.emote_id == EmoteLog.emote_id).where(
            Emote.xiv_id == query.emote_xiv_id
        )

    result = await session.execute(stmt)
    return result.scalar() or 0
