"""Time-to-pixel geometry for event blocks. Pure functions, no UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from event_record import EventRecord, parse_time


@dataclass(frozen=True)
class GridMetrics:
    """Geometry shared by the grid renderer and the layout functions.

    The hour rows drawn by the renderer are ``hour_height`` pixels tall and
    blocks are scaled by ``px_per_minute``; both derive from this one value.
    """

    first_hour: int = 6
    hour_count: int = 16
    hour_height: int = 60
    header_height: int = 20
    inset: int = 2

    def __post_init__(self) -> None:
        if self.hour_height <= 0:
            raise ValueError("hour_height must be positive")
        if not 0 <= self.first_hour <= 23:
            raise ValueError("first_hour must be within 0..23")
        if self.hour_count <= 0 or self.first_hour + self.hour_count > 24:
            raise ValueError("visible hours must stay within one day")

    @property
    def px_per_minute(self) -> float:
        return self.hour_height / 60

    @property
    def column_height(self) -> int:
        return self.header_height + self.hour_count * self.hour_height


DEFAULT_METRICS = GridMetrics()


@dataclass(frozen=True)
class Block:
    top: int
    height: int


@dataclass(frozen=True)
class PlacedBlock:
    """A block positioned in a day column (Monday=0)."""

    key: str
    column: int
    top: int
    height: int
    label: str
    event: EventRecord


def time_to_offset_minutes(time: str, first_hour: int = 6) -> int:
    """Minutes between ``first_hour``:00 and ``time``; never clamped."""
    hour, minute = parse_time(time)
    return (hour - first_hour) * 60 + minute


def layout_block(header_height: int, start: str, end: str,
                 metrics: GridMetrics = DEFAULT_METRICS) -> Block:
    """Vertical position and height of a block spanning ``[start, end)``.

    With the default one pixel per minute:
    ``top = header + offset(start) + 2`` and
    ``height = (header + offset(end) - 2 - top) - 2``.
    """
    scale = metrics.px_per_minute
    inset = metrics.inset
    top = header_height + round(
        time_to_offset_minutes(start, metrics.first_hour) * scale) + inset
    raw_end = header_height + round(
        time_to_offset_minutes(end, metrics.first_hour) * scale) - inset
    return Block(top=top, height=(raw_end - top) - inset)


def block_label(event: EventRecord) -> str:
    return f"{event.type} - {event.title} ({event.start} - {event.end})"


def place_event(event: EventRecord, header_height: int,
                metrics: GridMetrics = DEFAULT_METRICS,
                key: str | None = None) -> PlacedBlock:
    """Position ``event`` in its weekday column.

    ``key`` is the storage key the event was read from; it defaults to the
    key derived from the record.
    """
    block = layout_block(header_height, event.start, event.end, metrics)
    return PlacedBlock(
        key=key or event.key,
        column=event.day.weekday(),
        top=block.top,
        height=block.height,
        label=block_label(event),
        event=event,
    )


def hour_labels(metrics: GridMetrics = DEFAULT_METRICS) -> Iterator[tuple[int, str]]:
    """Yield ``(y, "HH:00")`` for the top edge of every visible hour row."""
    for i in range(metrics.hour_count):
        y = metrics.header_height + i * metrics.hour_height
        yield y, f"{metrics.first_hour + i:02d}:00"
