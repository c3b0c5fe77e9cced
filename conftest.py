"""Shared fixtures: in-memory storage, a recording surface, fixed dates."""

from datetime import date

import pytest

from controller import CalendarController, WeekSurface
from drag_delete import Rect
from event_record import EventRecord
from event_store import EventStore
from layout import GridMetrics, PlacedBlock
from storage import MemoryStorage

# Monday of ISO week 42, 2026
MONDAY = date(2026, 10, 12)
TODAY = date(2026, 10, 18)


class FakeSurface(WeekSurface):
    """Records what the controller draws instead of drawing it."""

    def __init__(self, header: int = 20, trash: Rect = Rect(900, 10, 940, 50)) -> None:
        self.header = header
        self.trash = trash
        self.days: list[tuple[int, date, str, bool]] = []
        self.blocks: dict[str, PlacedBlock] = {}
        self.title = ""
        self.clears = 0

    def clear(self) -> None:
        self.clears += 1
        self.days.clear()
        self.blocks.clear()

    def draw_day(self, column, day, name, is_today, metrics) -> None:
        self.days.append((column, day, name, is_today))

    def header_height(self, column: int) -> int:
        return self.header

    def place_block(self, block: PlacedBlock) -> None:
        self.blocks[block.key] = block

    def remove_block(self, key: str) -> None:
        self.blocks.pop(key, None)

    def trash_rect(self) -> Rect:
        return self.trash

    def set_title(self, title: str) -> None:
        self.title = title


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage) -> EventStore:
    return EventStore(storage)


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture
def answers() -> list[bool]:
    """Queue of confirmation answers consumed by the controller fixture."""
    return []


@pytest.fixture
def cues() -> list[str]:
    return []


@pytest.fixture
def controller(store, surface, answers, cues) -> CalendarController:
    return CalendarController(
        store, surface, GridMetrics(),
        confirm=lambda _msg: answers.pop(0),
        notify=cues.append,
        today=lambda: TODAY,
    )


@pytest.fixture
def massage() -> EventRecord:
    return EventRecord(title="Massage", day=MONDAY, start="09:00", end="10:00", type="Spa")
