"""Normalized events handed over by the Discord dispatch layer."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from xiv_emotes.preferences import Gender, Language, validate_prefix
from xiv_emotes.utils.ids import to_external_id
from xiv_emotes.utils.time import ensure_utc


def normalize_command(text: str) -> str:
    """Normalize emote command text to the stored "/command" form."""
    command = text.strip().lower()
    if not command.startswith("/"):
        command = "/" + command
    return command


class InvocationEvent(BaseModel):
    """An emote command issued in a guild channel or a direct message."""

    model_config = ConfigDict(frozen=True)

    inviter_external_id: str
    guild_external_id: str | None = None
    command_text: str = Field(min_length=1)
    tagged_external_ids: list[str] = []
    sent_at: datetime

    @field_validator("inviter_external_id", "guild_external_id", mode="before")
    @classmethod
    def normalize_external_id(cls, v: Any) -> Any:
        """Store snowflakes in their fixed-width form."""
        if v is None:
            return None
        return to_external_id(v)

    @field_validator("tagged_external_ids", mode="before")
    @classmethod
    def normalize_tagged_ids(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple, set)):
            return [to_external_id(item) for item in v]
        return v

    @field_validator("command_text")
    @classmethod
    def normalize_command_text(cls, v: str) -> str:
        command = normalize_command(v)
        if command == "/":
            raise ValueError("command_text is empty")
        return command

    @field_validator("sent_at")
    @classmethod
    def normalize_sent_at(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class ConfigScope(str, Enum):
    USER = "user"
    GUILD = "guild"


class ConfigChangeEvent(BaseModel):
    """A user or server settings command."""

    model_config = ConfigDict(frozen=True)

    subject_external_id: str
    scope: ConfigScope
    language: Language | None = None
    gender: Gender | None = None
    prefix: str | None = None

    @field_validator("subject_external_id", mode="before")
    @classmethod
    def normalize_external_id(cls, v: Any) -> Any:
        return to_external_id(v)

    @field_validator("prefix")
    @classmethod
    def check_prefix(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return validate_prefix(v)

    @model_validator(mode="after")
    def prefix_is_guild_only(self) -> "ConfigChangeEvent":
        if self.scope is ConfigScope.USER and self.prefix is not None:
            raise ValueError("prefix can only be set for a guild")
        return self
