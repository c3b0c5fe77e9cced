"""Orchestrates store, week window, layout and drag-delete for one view."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable

from calendar_logic import DAY_NAMES, WeekWindow
from drag_delete import DragDeleteMachine, DragOutcome, DragState, Rect
from errors import CorruptEntryError
from event_record import EventRecord
from event_store import EventStore
from layout import GridMetrics, PlacedBlock, place_event
from settings import grid_metrics_from_settings
from storage import JsonFileStorage, KeyValueStorage

logger = logging.getLogger(__name__)


class WeekSurface(ABC):
    """Rendering capability the controller draws into.

    Day columns are addressed positionally, Monday=0 .. Sunday=6.
    """

    @abstractmethod
    def clear(self) -> None:
        """Discard all day columns and blocks."""

    @abstractmethod
    def draw_day(self, column: int, day: date, name: str, is_today: bool,
                 metrics: GridMetrics) -> None:
        ...

    @abstractmethod
    def header_height(self, column: int) -> int:
        ...

    @abstractmethod
    def place_block(self, block: PlacedBlock) -> None:
        ...

    @abstractmethod
    def remove_block(self, key: str) -> None:
        ...

    @abstractmethod
    def trash_rect(self) -> Rect:
        ...

    def set_title(self, title: str) -> None:
        pass


class CalendarController:
    """One independent week view over an EventStore."""

    def __init__(
        self,
        store: EventStore,
        surface: WeekSurface,
        metrics: GridMetrics | None = None,
        confirm: Callable[[str], bool] | None = None,
        notify: Callable[[str], Any] | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self.surface = surface
        self.metrics = metrics or GridMetrics()
        self.today = today
        self.window = WeekWindow.for_date(today())
        self.load_errors: list[CorruptEntryError] = []
        self._blocks: dict[str, PlacedBlock] = {}
        self.drag = DragDeleteMachine(
            store,
            confirm=confirm or (lambda _msg: False),
            remove_block=self._remove_block,
            notify=notify,
        )

    @property
    def rendered_keys(self) -> set[str]:
        return set(self._blocks)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render(self, window: WeekWindow | None = None) -> None:
        """Full rebuild of the surface for ``window`` (default: current)."""
        if window is not None:
            self.window = window
        # blocks are rebuilt, so a payload picked up from the old ones is stale
        self.drag.cancel_drag()
        self.surface.clear()
        self._blocks.clear()
        self.surface.set_title(self.window.title())

        today = self.today()
        for column, day in enumerate(self.window.days()):
            self.surface.draw_day(column, day, DAY_NAMES[column],
                                  day == today, self.metrics)

        result = self.store.load_all()
        self.load_errors = result.errors
        for key, event in result.entries:
            self._lay_out(event, key)
        logger.debug("Rendered %s: %d events, %d unreadable",
                     self.window.first_day, len(self._blocks),
                     len(self.load_errors))

    def _lay_out(self, event: EventRecord,
                 key: str | None = None) -> PlacedBlock | None:
        if not self.window.contains(event.day):
            return None
        column = event.day.weekday()
        block = place_event(event, self.surface.header_height(column),
                            self.metrics, key)
        if block.key in self._blocks:
            self.surface.remove_block(block.key)
        self.surface.place_block(block)
        self._blocks[block.key] = block
        return block

    def _remove_block(self, key: str) -> None:
        if self._blocks.pop(key, None) is not None:
            self.surface.remove_block(key)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def navigate(self, delta_weeks: int) -> None:
        self.render(self.window.shift(delta_weeks))

    def go_today(self) -> None:
        self.render(WeekWindow.for_date(self.today()))

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def add_event(self, record: EventRecord) -> PlacedBlock | None:
        """Persist ``record`` and draw just its block, without a rebuild."""
        self.store.save(record)
        return self._lay_out(record)

    def create_event(self, title: str, day: date, start: str, end: str,
                     type: str) -> EventRecord:
        """Form submission path; raises EventValidationError on bad input."""
        record = EventRecord.create(title, day, start, end, type)
        self.add_event(record)
        return record

    def begin_drag(self, key: str) -> None:
        """Pick up ``key``, dropping a drag whose release never arrived.

        Raises InteractionError while a deletion is awaiting confirmation.
        """
        if self.drag.state is DragState.DRAGGING:
            logger.debug("Discarding stale drag of %s", self.drag.payload)
            self.drag.cancel_drag()
        self.drag.begin(key)

    def cancel_drag(self) -> None:
        self.drag.cancel_drag()

    def drop(self, x: float, y: float) -> DragOutcome:
        return self.drag.release(x, y, self.surface.trash_rect())


@dataclass
class AppContext:
    """Everything one running planner needs, built once and passed around."""

    settings: dict
    storage: KeyValueStorage
    store: EventStore
    metrics: GridMetrics
    controller: CalendarController | None = field(default=None)

    def attach(self, surface: WeekSurface,
               confirm: Callable[[str], bool] | None = None,
               notify: Callable[[str], Any] | None = None,
               today: Callable[[], date] = date.today) -> CalendarController:
        self.controller = CalendarController(
            self.store, surface, self.metrics,
            confirm=confirm, notify=notify, today=today,
        )
        return self.controller


def build_context(settings: dict,
                  storage: KeyValueStorage | None = None) -> AppContext:
    if storage is None:
        storage = JsonFileStorage(settings["events_path"])
    return AppContext(
        settings=settings,
        storage=storage,
        store=EventStore(storage),
        metrics=grid_metrics_from_settings(settings),
    )
