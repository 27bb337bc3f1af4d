"""Unit tests for xiv_emotes.preferences."""

from __future__ import annotations

import pytest

from xiv_emotes.errors import FailureKind, InvalidPreferenceError
from xiv_emotes.preferences import (
    UNCONFIGURED,
    Configured,
    Gender,
    GuildPreference,
    Language,
    SettingsDefaults,
    SettingsSource,
    resolve_effective_settings,
    validate_prefix,
)

USER_PREF = Configured(language=Language.EN, gender=Gender.M)
GUILD_PREF = Configured(language=Language.JA, gender=Gender.F)
DEFAULTS = SettingsDefaults(language=Language.DE, gender=Gender.F, prefix="?")


def _guild(configured: bool, prefix: str = "~") -> GuildPreference:
    return GuildPreference(
        preference=GUILD_PREF if configured else UNCONFIGURED, prefix=prefix
    )


# ---------------------------------------------------------------------------
# TestPrecedence
# ---------------------------------------------------------------------------


class TestPrecedence:
    """Every (user set, guild set, guild present) combination has one source."""

    @pytest.mark.parametrize(
        ("user_set", "guild_set", "guild_present", "expected"),
        [
            (True, True, True, SettingsSource.USER),
            (True, False, True, SettingsSource.USER),
            (True, True, False, SettingsSource.USER),
            (True, False, False, SettingsSource.USER),
            (False, True, True, SettingsSource.GUILD),
            (False, True, False, SettingsSource.DEFAULT),
            (False, False, False, SettingsSource.DEFAULT),
            (False, False, True, SettingsSource.DEFAULT),
        ],
    )
    def test_source_table(self, user_set, guild_set, guild_present, expected) -> None:
        user = USER_PREF if user_set else UNCONFIGURED
        guild = _guild(guild_set) if guild_present else None

        settings = resolve_effective_settings(user, guild, DEFAULTS)

        assert settings.source is expected
        expected_values = {
            SettingsSource.USER: (Language.EN, Gender.M),
            SettingsSource.GUILD: (Language.JA, Gender.F),
            SettingsSource.DEFAULT: (Language.DE, Gender.F),
        }[expected]
        # Language and gender always come from the same source
        assert (settings.language, settings.gender) == expected_values

    def test_user_beats_configured_guild(self) -> None:
        user = Configured(language=Language.EN, gender=Gender.M)
        guild = GuildPreference(
            preference=Configured(language=Language.JA, gender=Gender.F), prefix="!"
        )

        settings = resolve_effective_settings(user, guild)

        assert settings.language is Language.EN
        assert settings.gender is Gender.M

    def test_unconfigured_user_gets_guild_french(self) -> None:
        guild = GuildPreference(
            preference=Configured(language=Language.FR, gender=Gender.M), prefix="!"
        )

        settings = resolve_effective_settings(UNCONFIGURED, guild)

        assert settings.language is Language.FR
        assert settings.source is SettingsSource.GUILD

    def test_library_defaults_when_none_given(self) -> None:
        settings = resolve_effective_settings(UNCONFIGURED, None)

        assert settings.language is Language.EN
        assert settings.gender is Gender.M
        assert settings.prefix == "!"


# ---------------------------------------------------------------------------
# TestPrefix
# ---------------------------------------------------------------------------


class TestPrefix:
    """The prefix is guild-scoped only."""

    def test_guild_prefix_used_in_guild(self) -> None:
        settings = resolve_effective_settings(USER_PREF, _guild(False, prefix="xiv!"))

        assert settings.prefix == "xiv!"

    def test_unconfigured_guild_still_supplies_prefix(self) -> None:
        settings = resolve_effective_settings(UNCONFIGURED, _guild(False, "$"), DEFAULTS)

        assert settings.prefix == "$"
        assert settings.source is SettingsSource.DEFAULT

    def test_default_prefix_outside_guild(self) -> None:
        settings = resolve_effective_settings(USER_PREF, None, DEFAULTS)

        assert settings.prefix == "?"


class TestValidatePrefix:
    @pytest.mark.parametrize("prefix", ["!", "xiv!", "12345", "エモ"])
    def test_accepts_valid(self, prefix: str) -> None:
        assert validate_prefix(prefix) == prefix

    @pytest.mark.parametrize("prefix", ["", "123456", "a b", "\t"])
    def test_rejects_invalid(self, prefix: str) -> None:
        with pytest.raises(InvalidPreferenceError) as exc_info:
            validate_prefix(prefix)

        assert exc_info.value.kind is FailureKind.INVALID

    def test_invalid_prefix_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            validate_prefix("toolong")


class TestLanguage:
    def test_code(self) -> None:
        assert Language.JA.code == "ja"

    def test_stored_values_match_legacy_schema(self) -> None:
        assert int(Language.EN) == 0
        assert int(Language.JA) == 1
        assert int(Gender.M) == 0
        assert int(Gender.F) == 1
