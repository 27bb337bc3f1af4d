"""Preference repository for user and guild display settings."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from xiv_emotes.db.base import utcnow
from xiv_emotes.db.models import Guild, User
from xiv_emotes.preferences import (
    UNCONFIGURED,
    Gender,
    GuildPreference,
    Language,
    Preference,
    validate_prefix,
)


async def get_user_preference(session: AsyncSession, user_key: int) -> Preference:
    """Get a user's preference as a tagged state.

    A user key with no row is treated as Unconfigured.
    """
    result = await session.execute(select(User).where(User.user_id == user_key))
    user = result.scalar_one_or_none()
    if user is None:
        return UNCONFIGURED
    return user.preference


async def get_guild_preference(
    session: AsyncSession, guild_key: int
) -> GuildPreference | None:
    """Get a guild's preference and prefix, or None if the key has no row."""
    result = await session.execute(select(Guild).where(Guild.guild_id == guild_key))
    guild = result.scalar_one_or_none()
    if guild is None:
        return None
    return guild.to_guild_preference()


async def set_user_preference(
    session: AsyncSession,
    user_key: int,
    language: Language | None = None,
    gender: Gender | None = None,
) -> bool:
    """Apply a user settings command.

    Only the supplied fields change; the row is always marked configured and
    stamped. Last write wins, no history is kept.

    Args:
        session: Database session
        user_key: User surrogate key
        language: New language, or None to keep the stored value
        gender: New gender, or None to keep the stored value

    Returns:
        True if a row was updated
    """
    values: dict = {"is_set_flg": True, "update_tm": utcnow()}
    if language is not None:
        values["language"] = Language(language)
    if gender is not None:
        values["gender"] = Gender(gender)

    result = await session.execute(
        update(User).where(User.user_id == user_key).values(**values)
    )
    return result.rowcount > 0


async def set_guild_preference(
    session: AsyncSession,
    guild_key: int,
    language: Language | None = None,
    gender: Gender | None = None,
    prefix: str | None = None,
) -> bool:
    """Apply a server settings command.

    Args:
        session: Database session
        guild_key: Guild surrogate key
        language: New language, or None to keep the stored value
        gender: New gender, or None to keep the stored value
        prefix: New command prefix, or None to keep the stored value

    Returns:
        True if a row was updated

    Raises:
        InvalidPreferenceError: If the prefix is invalid
    """
    values: dict = {"is_set_flg": True, "update_tm": utcnow()}
    if language is not None:
        values["language"] = Language(language)
    if gender is not None:
        values["gender"] = Gender(gender)
    if prefix is not None:
        values["prefix"] = validate_prefix(prefix)

    result = await session.execute(
        update(Guild).where(Guild.guild_id == guild_key).values(**values)
    )
    return result.rowcount > 0
