"""Effective settings resolution.

Precedence is decided per source, never per field: a configured user wins
outright, then a configured guild (only when the message came from one),
then the system defaults. The prefix is guild-scoped only.
"""

from __future__ import annotations

from xiv_emotes.errors import InvalidPreferenceError
from xiv_emotes.preferences.types import (
    MAX_PREFIX_LENGTH,
    Configured,
    EffectiveSettings,
    GuildPreference,
    Preference,
    SettingsDefaults,
    SettingsSource,
)


def resolve_effective_settings(
    user: Preference,
    guild: GuildPreference | None,
    defaults: SettingsDefaults | None = None,
) -> EffectiveSettings:
    """Resolve the effective (language, gender, prefix) for a message.

    Args:
        user: The invoking user's stored preference.
        guild: The guild's stored preference, or None outside a guild.
        defaults: System defaults (library defaults if None).

    Returns:
        EffectiveSettings tagged with the source that supplied
        language and gender.
    """
    defaults = defaults or SettingsDefaults()
    prefix = guild.prefix if guild is not None else defaults.prefix

    if isinstance(user, Configured):
        return EffectiveSettings(
            language=user.language,
            gender=user.gender,
            prefix=prefix,
            source=SettingsSource.USER,
        )

    if guild is not None and isinstance(guild.preference, Configured):
        return EffectiveSettings(
            language=guild.preference.language,
            gender=guild.preference.gender,
            prefix=prefix,
            source=SettingsSource.GUILD,
        )

    return EffectiveSettings(
        language=defaults.language,
        gender=defaults.gender,
        prefix=prefix,
        source=SettingsSource.DEFAULT,
    )


def validate_prefix(prefix: str) -> str:
    """Check a guild command prefix and return it unchanged.

    Raises:
        InvalidPreferenceError: If the prefix is empty, longer than
            MAX_PREFIX_LENGTH characters, or contains whitespace.
    """
    if not prefix or len(prefix) > MAX_PREFIX_LENGTH:
        raise InvalidPreferenceError(
            f"prefix must be 1 to {MAX_PREFIX_LENGTH} characters, got {prefix!r}"
        )
    if any(ch.isspace() for ch in prefix):
        raise InvalidPreferenceError(f"prefix may not contain whitespace: {prefix!r}")
    return prefix
