"""Failure taxonomy for the emote ledger.

Every failure an operation reports carries a ``kind`` so the bot layer can
pick a reply ("command not recognized", "try again later") without
inspecting exception types. Conflicts that are resolved locally (first-sight
identity races, duplicate tags) never raise.
"""

from __future__ import annotations

from enum import Enum


class FailureKind(str, Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    INVALID = "invalid"


class EmoteLedgerError(Exception):
    """Base class for all reported ledger failures."""

    kind: FailureKind = FailureKind.STORAGE_UNAVAILABLE
    retryable: bool = False


class EmoteNotFoundError(EmoteLedgerError):
    """Raised when an invocation references an emote the catalog never registered."""

    kind = FailureKind.NOT_FOUND

    def __init__(self, xiv_id: int) -> None:
        self.xiv_id = xiv_id
        super().__init__(f"Emote {xiv_id} is not registered; has the catalog been synced?")


class UnknownCommandError(EmoteLedgerError):
    """Raised when command text does not match any registered emote."""

    kind = FailureKind.NOT_FOUND

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"Unrecognized emote command: {command}")


class EmoteCommandConflictError(EmoteLedgerError):
    """Raised when a new emote reuses a command already owned by another emote."""

    kind = FailureKind.CONFLICT

    def __init__(self, xiv_id: int, command: str) -> None:
        self.xiv_id = xiv_id
        self.command = command
        super().__init__(
            f"Emote {xiv_id} cannot register command {command}: "
            "it belongs to another emote"
        )


class StorageError(EmoteLedgerError):
    """Raised when the database rejected an operation for a reason a retry won't fix.

    Nothing from the failed operation was persisted.
    """

    kind = FailureKind.STORAGE_UNAVAILABLE


class StorageUnavailableError(StorageError):
    """Raised when the database could not be reached, timed out, or aborted
    the transaction (deadlock, serialization failure).

    Nothing from the failed operation was persisted; callers may retry.
    """

    retryable = True


class InvalidPreferenceError(EmoteLedgerError, ValueError):
    """Raised when a configuration value is out of range."""

    kind = FailureKind.INVALID


class CatalogAPIError(Exception):
    """Raised when the upstream emote catalog API returns an error."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Catalog API error {status_code}: {message}")
