# xiv_emotes/utils/ids.py
from __future__ import annotations

from xiv_emotes.db.base import EXTERNAL_ID_LENGTH

# Snowflakes are unsigned 64-bit integers
MAX_SNOWFLAKE = 2**64 - 1


def to_external_id(value: str | int) -> str:
    """
    Normalize a Discord snowflake to its stored external ID form:
    a decimal string zero-padded to EXTERNAL_ID_LENGTH characters.

    Accepts ints, plain decimal strings and already-padded strings, so the
    same snowflake always maps to the same external ID.
    """
    if isinstance(value, bool):
        raise ValueError(f"not a snowflake: {value!r}")
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            raise ValueError(f"not a snowflake: {value!r}")
    snowflake = int(value)
    if snowflake < 0 or snowflake > MAX_SNOWFLAKE:
        raise ValueError(f"snowflake out of range: {value!r}")
    return str(snowflake).zfill(EXTERNAL_ID_LENGTH)
