"""The event entity and its storage key."""

from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass
from datetime import date

from errors import EventValidationError

EVENT_KEY_PREFIX = "event-"
MIN_DURATION_MINUTES = 15

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_FIELDS = ("title", "day", "start", "end", "type")


def parse_time(value: str) -> tuple[int, int]:
    """Split a 24h ``HH:MM`` string into (hour, minute).

    Raises ValueError for anything that is not a valid clock time.
    """
    m = _TIME_RE.match(value.strip()) if isinstance(value, str) else None
    if m is None:
        raise ValueError(f"not a HH:MM time: {value!r}")
    hour, minute = int(m.group(1)), int(m.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"time out of range: {value!r}")
    return hour, minute


def minutes_of_day(value: str) -> int:
    hour, minute = parse_time(value)
    return hour * 60 + minute


def event_key(day: date, start: str) -> str:
    """Return the storage key ``event-<YYYY-MM-DD>-<HH:MM>``."""
    return f"{EVENT_KEY_PREFIX}{day.isoformat()}-{start}"


@dataclass(frozen=True)
class EventRecord:
    """A single calendar entry. Never mutated once stored."""

    title: str
    day: date
    start: str
    end: str
    type: str

    @property
    def key(self) -> str:
        return event_key(self.day, self.start)

    @property
    def duration_minutes(self) -> int:
        return minutes_of_day(self.end) - minutes_of_day(self.start)

    @classmethod
    def create(cls, title: str, day: date, start: str, end: str,
               type: str) -> "EventRecord":
        """Build a record from form input, enforcing the creation rules.

        Times are normalised to zero-padded ``HH:MM`` so that the derived key
        is stable. Raises EventValidationError on empty title, malformed times
        or a duration shorter than MIN_DURATION_MINUTES.
        """
        title = (title or "").strip()
        if not title:
            raise EventValidationError("The event needs a title.")
        if not isinstance(day, date):
            raise EventValidationError("The event needs a day.")
        try:
            sh, sm = parse_time(start)
            eh, em = parse_time(end)
        except ValueError as exc:
            raise EventValidationError(str(exc)) from exc

        if (eh * 60 + em) - (sh * 60 + sm) < MIN_DURATION_MINUTES:
            raise EventValidationError(
                f"The end time must be at least {MIN_DURATION_MINUTES} "
                "minutes after the start time."
            )
        return cls(
            title=title,
            day=day,
            start=f"{sh:02d}:{sm:02d}",
            end=f"{eh:02d}:{em:02d}",
            type=(type or "").strip(),
        )

    def to_dict(self) -> dict[str, str]:
        data = asdict(self)
        data["day"] = self.day.isoformat()
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> "EventRecord":
        """Decode a stored value. Raises ValueError on malformed data."""
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("stored value is not a JSON object")
        missing = [f for f in _FIELDS if f not in data]
        if missing:
            raise ValueError(f"missing fields: {', '.join(missing)}")
        if not all(isinstance(data[f], str) for f in _FIELDS):
            raise ValueError("all fields must be strings")
        parse_time(data["start"])
        parse_time(data["end"])
        return cls(
            title=data["title"],
            day=date.fromisoformat(data["day"]),
            start=data["start"],
            end=data["end"],
            type=data["type"],
        )
