"""Display preference types.

A stored preference is either ``Unconfigured`` (the row exists but its
language/gender columns only hold placeholders) or ``Configured`` with the
values the user or guild picked. Consuming code matches on the tagged
state instead of reading the placeholder columns.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class Language(IntEnum):
    """Client language used to pick emote message text."""

    EN = 0
    JA = 1
    DE = 2
    FR = 3

    @property
    def code(self) -> str:
        return self.name.lower()


class Gender(IntEnum):
    """Grammatical gender used by gender-inflected emote text."""

    M = 0
    F = 1


DEFAULT_LANGUAGE = Language.EN
DEFAULT_GENDER = Gender.M
DEFAULT_PREFIX = "!"
MAX_PREFIX_LENGTH = 5


@dataclass(frozen=True)
class Unconfigured:
    """No explicit preference; fall through to the next source."""


@dataclass(frozen=True)
class Configured:
    """An explicitly chosen language and gender."""

    language: Language
    gender: Gender


Preference = Unconfigured | Configured

UNCONFIGURED = Unconfigured()


class SettingsSource(str, Enum):
    """Where the effective settings came from."""

    USER = "user"
    GUILD = "guild"
    DEFAULT = "default"


@dataclass(frozen=True)
class SettingsDefaults:
    """System-wide fallbacks for when neither user nor guild is configured."""

    language: Language = DEFAULT_LANGUAGE
    gender: Gender = DEFAULT_GENDER
    prefix: str = DEFAULT_PREFIX


@dataclass(frozen=True)
class GuildPreference:
    """A guild's stored preference plus its command prefix."""

    preference: Preference
    prefix: str


@dataclass(frozen=True)
class EffectiveSettings:
    """The settings actually applied to render a reply."""

    language: Language
    gender: Gender
    prefix: str
    source: SettingsSource
