"""Emote catalog repository.

The catalog sync is the only writer of the emotes table. Registration is
keyed on xiv_id and safe to re-run on every startup.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from xiv_emotes.db.base import utcnow
from xiv_emotes.db.errors import UNIQUE_VIOLATION, pg_error_field, sqlstate
from xiv_emotes.db.models import Emote
from xiv_emotes.errors import EmoteCommandConflictError

# PostgreSQL's default name for the unique constraint on emotes.command
COMMAND_CONSTRAINT = "emotes_command_key"


def _is_command_conflict(error: IntegrityError) -> bool:
    if sqlstate(error) != UNIQUE_VIOLATION:
        return False
    # xiv_id conflicts are absorbed by ON CONFLICT, so an unnamed unique
    # violation can only be the command
    constraint = pg_error_field(error, "constraint_name")
    return constraint is None or constraint == COMMAND_CONSTRAINT


async def register_emote(session: AsyncSession, xiv_id: int, command: str) -> None:
    """Upsert an emote definition.

    Inserts a new emote, or on conflict (xiv_id) only advances update_tm.
    The command stored at first registration is never overwritten.

    Args:
        session: Database session
        xiv_id: The game's emote ID
        command: Text command, e.g. "/dance"

    Raises:
        EmoteCommandConflictError: If a different emote already owns the command.
            Run inside a savepoint to keep the surrounding transaction usable.
    """
    now = utcnow()
    stmt = (
        pg_insert(Emote)
        .values(xiv_id=xiv_id, command=command, insert_tm=now, update_tm=now)
        .on_conflict_do_update(
            index_elements=["xiv_id"],
            set_={"update_tm": now},
        )
    )
    try:
        await session.execute(stmt)
    except IntegrityError as e:
        if _is_command_conflict(e):
            raise EmoteCommandConflictError(xiv_id, command) from e
        raise


async def find_emote_id(session: AsyncSession, xiv_id: int) -> int | None:
    """Get the surrogate key of a registered emote, or None."""
    result = await session.execute(
        select(Emote.emote_id).where(Emote.xiv_id == xiv_id)
    )
    return result.scalar_one_or_none()


async def find_emote_by_command(session: AsyncSession, command: str) -> Emote | None:
    """Get the emote registered for a text command, or None."""
    result = await session.execute(select(Emote).where(Emote.command == command))
    return result.scalar_one_or_none()


async def list_emotes(session: AsyncSession) -> list[Emote]:
    """Get every registered emote ordered by xiv_id."""
    result = await session.execute(select(Emote).order_by(Emote.xiv_id))
    return list(result.scalars().all())
