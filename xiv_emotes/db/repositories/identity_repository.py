"""Identity repository: Discord snowflake to surrogate key mapping.

Users and guilds are created lazily the first time they are seen. Two
concurrent first sightings of the same snowflake both issue
``INSERT ... ON CONFLICT DO NOTHING``; the unique constraint on discord_id
lets exactly one insert win and the loser re-reads the winner's key.
"""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from xiv_emotes.db.models import Guild, User
from xiv_emotes.preferences import SettingsDefaults
from xiv_emotes.utils.ids import to_external_id


async def find_user_key(session: AsyncSession, external_id: str) -> int | None:
    """Get the surrogate key for a user snowflake, or None if unseen."""
    result = await session.execute(
        select(User.user_id).where(User.discord_id == external_id)
    )
    return result.scalar_one_or_none()


async def find_guild_key(session: AsyncSession, external_id: str) -> int | None:
    """Get the surrogate key for a guild snowflake, or None if unseen."""
    result = await session.execute(
        select(Guild.guild_id).where(Guild.discord_id == external_id)
    )
    return result.scalar_one_or_none()


async def resolve_user(
    session: AsyncSession,
    external_id: str | int,
    defaults: SettingsDefaults | None = None,
) -> int:
    """Get or create the user row for a snowflake.

    New rows get placeholder preferences with is_set_flg = False.

    Args:
        session: Database session
        external_id: Discord user snowflake (int, plain or padded string)
        defaults: Placeholder language/gender for new rows

    Returns:
        The user's surrogate key (stable for the lifetime of the row)
    """
    external_id = to_external_id(external_id)
    user_key = await find_user_key(session, external_id)
    if user_key is not None:
        return user_key

    defaults = defaults or SettingsDefaults()
    stmt = (
        pg_insert(User)
        .values(
            discord_id=external_id,
            language=defaults.language,
            gender=defaults.gender,
            is_set_flg=False,
        )
        .on_conflict_do_nothing(index_elements=["discord_id"])
        .returning(User.user_id)
    )
    result = await session.execute(stmt)
    user_key = result.scalar_one_or_none()
    if user_key is not None:
        return user_key

    # Lost a first-sight race; the winning row is committed and visible now
    user_key = await find_user_key(session, external_id)
    if user_key is None:
        raise RuntimeError(f"User {external_id} vanished after insert conflict")
    return user_key


async def resolve_guild(
    session: AsyncSession,
    external_id: str | int,
    defaults: SettingsDefaults | None = None,
) -> int:
    """Get or create the guild row for a snowflake.

    New rows get placeholder preferences, the default prefix and
    is_set_flg = False.

    Args:
        session: Database session
        external_id: Discord guild snowflake (int, plain or padded string)
        defaults: Placeholder language/gender/prefix for new rows

    Returns:
        The guild's surrogate key
    """
    external_id = to_external_id(external_id)
    guild_key = await find_guild_key(session, external_id)
    if guild_key is not None:
        return guild_key

    defaults = defaults or SettingsDefaults()
    stmt = (
        pg_insert(Guild)
        .values(
            discord_id=external_id,
            language=defaults.language,
            gender=defaults.gender,
            prefix=defaults.prefix,
            is_set_flg=False,
        )
        .on_conflict_do_nothing(index_elements=["discord_id"])
        .returning(Guild.guild_id)
    )
    result = await session.execute(stmt)
    guild_key = result.scalar_one_or_none()
    if guild_key is not None:
        return guild_key

    guild_key = await find_guild_key(session, external_id)
    if guild_key is None:
        raise RuntimeError(f"Guild {external_id} vanished after insert conflict")
    return guild_key


async def resolve_user_keys(
    session: AsyncSession,
    external_ids: Iterable[str | int],
    defaults: SettingsDefaults | None = None,
) -> dict[str, int]:
    """Resolve user snowflakes to surrogate keys, keyed by normalized snowflake.

    Every user a transaction touches must go through one call: users are
    resolved in sorted order, so two transactions creating the same new
    users lock their unique index entries in the same order and cannot
    deadlock.
    """
    normalized = {to_external_id(external_id) for external_id in external_ids}
    return {
        external_id: await resolve_user(session, external_id, defaults)
        for external_id in sorted(normalized)
    }


async def resolve_users(
    session: AsyncSession,
    external_ids: Iterable[str | int],
    defaults: SettingsDefaults | None = None,
) -> set[int]:
    """Resolve a batch of user snowflakes to their distinct surrogate keys.

    The same snowflake given twice (in any representation) resolves once.
    """
    keys = await resolve_user_keys(session, external_ids, defaults)
    return set(keys.values())
