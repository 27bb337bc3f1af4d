"""Map XIVAPI Emote sheet rows to catalog definitions.

Rows without an ID, without an English text command, or missing any of the
targeted/untargeted log messages (English and Japanese) cannot be rendered
by the bot and are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from xiv_emotes.db.models.emote import MAX_COMMAND_LENGTH
from xiv_emotes.events import normalize_command

REQUIRED_MESSAGES = (
    ("LogMessageTargeted", "Text_en"),
    ("LogMessageTargeted", "Text_ja"),
    ("LogMessageUntargeted", "Text_en"),
    ("LogMessageUntargeted", "Text_ja"),
)


@dataclass(frozen=True)
class EmoteDefinition:
    """One emote as it will be registered."""

    xiv_id: int
    name: str
    command: str


@dataclass
class MapResult:
    """Definitions ready to register, plus the rows that were dropped."""

    definitions: list[EmoteDefinition] = field(default_factory=list)
    skipped: list[tuple[int | None, str]] = field(default_factory=list)


def _nested(row: dict[str, Any], *keys: str) -> Any:
    value: Any = row
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def map_emote_row(row: dict[str, Any]) -> EmoteDefinition | str:
    """Map a single row, returning the definition or the reason it was skipped."""
    xiv_id = row.get("ID")
    if xiv_id is None:
        return "no ID"

    command = _nested(row, "TextCommand", "Command_en")
    if not command:
        return "no text command"

    for column, text in REQUIRED_MESSAGES:
        if not _nested(row, column, text):
            return f"no {column}.{text}"

    command = normalize_command(command)
    if len(command) > MAX_COMMAND_LENGTH:
        return f"command longer than {MAX_COMMAND_LENGTH} characters"

    return EmoteDefinition(
        xiv_id=int(xiv_id),
        name=row.get("Name") or command.lstrip("/"),
        command=command,
    )


def map_emote_rows(rows: list[dict[str, Any]]) -> MapResult:
    """Map rows to definitions, dropping invalid rows and duplicate commands.

    When two rows share a command, the first one wins.
    """
    result = MapResult()
    seen_commands: set[str] = set()
    seen_ids: set[int] = set()

    for row in rows:
        mapped = map_emote_row(row)
        if isinstance(mapped, str):
            result.skipped.append((row.get("ID"), mapped))
            continue
        if mapped.xiv_id in seen_ids:
            result.skipped.append((mapped.xiv_id, "duplicate ID"))
            continue
        if mapped.command in seen_commands:
            result.skipped.append((mapped.xiv_id, f"duplicate command {mapped.command}"))
            continue
        seen_ids.add(mapped.xiv_id)
        seen_commands.add(mapped.command)
        result.definitions.append(mapped)

    return result
