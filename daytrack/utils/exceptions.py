"""Error taxonomy for DayTrack.

Read-path failures never escape the record stores: they are logged and the
collection is treated as empty. Write-path and extraction transport failures
propagate to the caller. A missing record on update/delete is not an error
and is reported with ``None`` / ``False``.
"""

from __future__ import annotations

from typing import Optional


class DayTrackError(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class StorageReadError(DayTrackError):
    """A stored collection could not be read or decoded."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        super().__init__(f"Could not read '{key}': {reason}")


class StorageWriteError(DayTrackError):
    """A collection could not be written back to the store."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        super().__init__(f"Could not write '{key}': {reason}")


class StaleWriteError(StorageWriteError):
    """The collection changed between read and write; the caller must retry."""

    def __init__(self, key: str, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(key, f"version {expected} is stale (current {actual})")


class ExtractionFailure(DayTrackError):
    """The extraction service call failed or returned unusable content."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.cause = cause
        detail = f"Failed to extract from journal: {message}"
        super().__init__(detail)


class InvalidTransition(DayTrackError):
    """An extraction session action is not allowed in its current state."""

    def __init__(self, action: str, state: str) -> None:
        self.action = action
        self.state = state
        super().__init__(f"Cannot {action} while session is {state}")
