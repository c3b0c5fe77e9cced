"""Pure week calculations, no UI dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday",
             "Saturday", "Sunday"]

DAYS_PER_WEEK = 7


def _as_date(value: date | datetime) -> date:
    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return value.date()
    return value


def day_of_year(d: date) -> int:
    """Return the 1-based day-of-year for the given date."""
    return d.timetuple().tm_yday


def iso_week(d: date) -> int:
    """Return the ISO calendar week number."""
    return d.isocalendar()[1]


@dataclass(frozen=True)
class WeekWindow:
    """Seven days starting on a Monday: ``[first_day, first_day + 7)``."""

    first_day: date

    def __post_init__(self) -> None:
        if isinstance(self.first_day, datetime):
            object.__setattr__(self, "first_day", self.first_day.date())
        if self.first_day.weekday() != 0:
            raise ValueError(f"{self.first_day} is not a Monday")

    @classmethod
    def for_date(cls, reference: date | datetime) -> "WeekWindow":
        """Return the window whose Monday precedes or equals ``reference``.

        Sundays belong to the week that started six days earlier.
        """
        d = _as_date(reference)
        weekday = d.isoweekday()  # Monday=1 .. Sunday=7
        if weekday == 7:
            return cls(d - timedelta(days=6))
        return cls(d - timedelta(days=weekday - 1))

    @property
    def last_day(self) -> date:
        return self.first_day + timedelta(days=DAYS_PER_WEEK - 1)

    @property
    def end(self) -> date:
        """First day after the window (exclusive bound)."""
        return self.first_day + timedelta(days=DAYS_PER_WEEK)

    def shift(self, delta_weeks: int) -> "WeekWindow":
        return WeekWindow(self.first_day + timedelta(days=7 * delta_weeks))

    def contains(self, value: date | datetime) -> bool:
        return self.first_day <= _as_date(value) < self.end

    def days(self) -> Iterator[date]:
        for offset in range(DAYS_PER_WEEK):
            yield self.first_day + timedelta(days=offset)

    def title(self) -> str:
        return (f"CW {iso_week(self.first_day)} · "
                f"{self.first_day.strftime('%d.%m.%Y')} – "
                f"{self.last_day.strftime('%d.%m.%Y')}")
