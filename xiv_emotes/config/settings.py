"""Settings for the emote bot core and the catalog sync.

Values come from config.json when it exists. Anything the file leaves out
falls back to an XIV_EMOTES_* environment variable, then to the default
below. Language and gender accept their names ("en", "f") as well as the
stored integers.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from xiv_emotes.preferences import (
    DEFAULT_GENDER,
    DEFAULT_LANGUAGE,
    DEFAULT_PREFIX,
    Gender,
    Language,
    SettingsDefaults,
    validate_prefix,
)


class AppSettings(BaseSettings):
    database_url: str = ""
    db_command_timeout: float = 10.0

    xivapi_base_url: str = "https://xivapi.com"
    xivapi_key: str | None = None

    default_prefix: str = DEFAULT_PREFIX
    default_language: Language = DEFAULT_LANGUAGE
    default_gender: Gender = DEFAULT_GENDER

    model_config = SettingsConfigDict(
        env_prefix="XIV_EMOTES_",
        extra="ignore",
    )

    @field_validator("default_language", mode="before")
    @classmethod
    def parse_language(cls, v: Any) -> Any:
        """Accept language codes ("en", "ja") as well as enum values."""
        if isinstance(v, str):
            return int(v) if v.isdigit() else Language.__members__.get(v.upper(), v)
        return v

    @field_validator("default_gender", mode="before")
    @classmethod
    def parse_gender(cls, v: Any) -> Any:
        """Accept "m"/"f" as well as enum values."""
        if isinstance(v, str):
            return int(v) if v.isdigit() else Gender.__members__.get(v.upper(), v)
        return v

    @field_validator("default_prefix")
    @classmethod
    def check_prefix(cls, v: str) -> str:
        return validate_prefix(v)

    @property
    def defaults(self) -> SettingsDefaults:
        """Fallback display settings for unconfigured users and guilds."""
        return SettingsDefaults(
            language=self.default_language,
            gender=self.default_gender,
            prefix=self.default_prefix,
        )

    @classmethod
    def from_json(cls, path: str | Path = "config.json") -> "AppSettings":
        """Build settings from a JSON file; without one only env vars and defaults apply."""
        path = Path(path)
        if not path.exists():
            return cls()
        return cls(**json.loads(path.read_text(encoding="utf-8")))


@lru_cache
def get_settings(config_path: str = "config.json") -> AppSettings:
    """Process-wide settings, read once per config path."""
    return AppSettings.from_json(config_path)


def load_config(path: str | Path = "config.json") -> AppSettings:
    """Load configuration from a specific file, bypassing the cache."""
    get_settings.cache_clear()
    return AppSettings.from_json(path)
