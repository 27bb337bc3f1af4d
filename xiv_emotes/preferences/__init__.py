"""User and guild display preferences and their resolution."""

from xiv_emotes.preferences.resolver import (
    resolve_effective_settings,
    validate_prefix,
)
from xiv_emotes.preferences.types import (
    DEFAULT_GENDER,
    DEFAULT_LANGUAGE,
    DEFAULT_PREFIX,
    UNCONFIGURED,
    Configured,
    EffectiveSettings,
    Gender,
    GuildPreference,
    Language,
    Preference,
    SettingsDefaults,
    SettingsSource,
    Unconfigured,
)

__all__ = [
    "DEFAULT_GENDER",
    "DEFAULT_LANGUAGE",
    "DEFAULT_PREFIX",
    "UNCONFIGURED",
    "Configured",
    "EffectiveSettings",
    "Gender",
    "GuildPreference",
    "Language",
    "Preference",
    "SettingsDefaults",
    "SettingsSource",
    "Unconfigured",
    "resolve_effective_settings",
    "validate_prefix",
]
