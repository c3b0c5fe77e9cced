"""Exception hierarchy for the week planner."""


class CalendarError(Exception):
    """Base class for all week planner errors."""


class EventValidationError(CalendarError, ValueError):
    """An event was rejected before it reached the store."""


class StorageError(CalendarError):
    """The key-value medium failed to read or write."""


class InteractionError(CalendarError):
    """A UI interaction was requested in a state that cannot accept it."""


class CorruptEntryError(CalendarError):
    """A stored value under an event key could not be decoded."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"{key}: {reason}")
        self.key = key
        self.reason = reason
