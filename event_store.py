"""Round-trips EventRecords through a KeyValueStorage under ``event-`` keys."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from errors import CorruptEntryError
from event_record import EVENT_KEY_PREFIX, EventRecord
from storage import KeyValueStorage

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Outcome of a full scan.

    ``entries`` pairs each decoded event with the key it was read from;
    ``errors`` holds one error per bad entry.
    """

    entries: list[tuple[str, EventRecord]] = field(default_factory=list)
    errors: list[CorruptEntryError] = field(default_factory=list)

    @property
    def events(self) -> list[EventRecord]:
        return [event for _key, event in self.entries]

    def __iter__(self):
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.entries)


class EventStore:
    """Event persistence on top of an opaque string mapping.

    Keys are ``event-<day>-<start>``: at most one event exists per day and
    start time, and saving a second one replaces the first.
    Storage faults propagate as StorageError.
    """

    def __init__(self, storage: KeyValueStorage,
                 prefix: str = EVENT_KEY_PREFIX) -> None:
        self.storage = storage
        self.prefix = prefix

    def save(self, event: EventRecord) -> str:
        key = event.key
        previous = self.storage.get(key)
        value = event.to_json()
        if previous is not None and previous != value:
            logger.warning("Replacing existing event at %s", key)
        self.storage.set(key, value)
        logger.info("Saved event %s (%s)", key, event.title)
        return key

    def get(self, key: str) -> EventRecord | None:
        value = self.storage.get(key)
        if value is None:
            return None
        try:
            return EventRecord.from_json(value)
        except ValueError as exc:
            raise CorruptEntryError(key, str(exc)) from exc

    def delete(self, key: str) -> bool:
        if self.storage.get(key) is None:
            logger.debug("Delete of absent key %s ignored", key)
            return False
        self.storage.delete(key)
        logger.info("Deleted event %s", key)
        return True

    def load_all(self) -> LoadResult:
        result = LoadResult()
        for key, value in self.storage.items():
            if not key.startswith(self.prefix):
                continue
            try:
                result.entries.append((key, EventRecord.from_json(value)))
            except ValueError as exc:
                err = CorruptEntryError(key, str(exc))
                logger.warning("Skipping unreadable entry %s", err)
                result.errors.append(err)
        return result
