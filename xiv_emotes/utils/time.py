from datetime import datetime, timezone


def ensure_utc(value: datetime) -> datetime:
    """
    Normalize an event timestamp to timezone-aware UTC.

    Discord event times arrive either aware (any offset) or naive from
    callers that already dropped the zone; naive values are taken as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
