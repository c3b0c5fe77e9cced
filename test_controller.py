"""Tests for controller.py: render, navigation, incremental add, drag-delete."""

from datetime import date, timedelta

import pytest

from conftest import MONDAY, TODAY, FakeSurface
from controller import CalendarController, build_context
from drag_delete import DragOutcome, DragState
from errors import EventValidationError, InteractionError
from event_record import EventRecord
from storage import JsonFileStorage, MemoryStorage


def _ev(day, start="09:00", end="10:00", title="Massage"):
    return EventRecord(title=title, day=day, start=start, end=end, type="Spa")


class TestRender:
    def test_draws_seven_days_and_marks_today(self, controller, surface):
        controller.render()
        assert [d[0] for d in surface.days] == list(range(7))
        assert surface.days[0][1:3] == (MONDAY, "Monday")
        assert [d[1] for d in surface.days if d[3]] == [TODAY]
        assert surface.title.startswith("CW 42")

    def test_only_events_inside_window(self, controller, store, surface):
        for title, day in [
            ("before", MONDAY - timedelta(days=1)),
            ("first", MONDAY),
            ("last", MONDAY + timedelta(days=6)),
            ("after", MONDAY + timedelta(days=7)),
        ]:
            store.save(_ev(day, title=title))
        controller.render()
        titles = sorted(b.event.title for b in surface.blocks.values())
        assert titles == ["first", "last"]
        assert controller.rendered_keys == set(surface.blocks)

    def test_uses_surface_header_height(self, store):
        surface = FakeSurface(header=30)
        ctl = CalendarController(store, surface, today=lambda: TODAY)
        store.save(_ev(MONDAY))
        ctl.render()
        block = surface.blocks["event-2026-10-12-09:00"]
        assert (block.top, block.height) == (212, 54)

    def test_corrupt_entries_do_not_stop_render(self, controller, storage, store, surface):
        storage.set("event-2026-10-13-08:00", "garbage")
        store.save(_ev(MONDAY))
        controller.render()
        assert list(surface.blocks) == ["event-2026-10-12-09:00"]
        assert [e.key for e in controller.load_errors] == ["event-2026-10-13-08:00"]


class TestNavigate:
    def test_next_week_rebuilds(self, controller, store, surface):
        store.save(_ev(MONDAY))
        store.save(_ev(MONDAY + timedelta(days=7), title="next"))
        controller.render()
        controller.navigate(1)
        assert controller.window.first_day == date(2026, 10, 19)
        assert [b.event.title for b in surface.blocks.values()] == ["next"]
        assert surface.clears == 2
        assert not any(d[3] for d in surface.days)

    def test_back_and_today(self, controller):
        controller.render()
        controller.navigate(-1)
        assert controller.window.first_day == date(2026, 10, 5)
        controller.go_today()
        assert controller.window.first_day == MONDAY


class TestAddEvent:
    def test_massage_scenario(self, controller, storage, surface):
        controller.render()
        clears = surface.clears
        controller.add_event(_ev(MONDAY))
        assert storage.keys() == ["event-2026-10-12-09:00"]
        block = surface.blocks["event-2026-10-12-09:00"]
        assert (block.top, block.height) == (202, 54)
        assert surface.clears == clears

    def test_outside_window_is_stored_not_drawn(self, controller, store, surface):
        controller.render()
        controller.add_event(_ev(MONDAY + timedelta(days=14)))
        assert surface.blocks == {}
        assert len(store.load_all()) == 1

    def test_same_key_replaces_block(self, controller, surface):
        controller.render()
        controller.add_event(_ev(MONDAY, "09:00", "10:00", "Massage"))
        controller.add_event(_ev(MONDAY, "09:00", "11:00", "Facial"))
        assert len(surface.blocks) == 1
        assert surface.blocks["event-2026-10-12-09:00"].event.title == "Facial"

    def test_create_rejects_short_event(self, controller, storage, surface):
        controller.render()
        with pytest.raises(EventValidationError):
            controller.create_event("Massage", MONDAY, "10:00", "10:05", "Spa")
        assert storage.keys() == []
        assert surface.blocks == {}

    def test_create_accepts_valid_event(self, controller, store):
        controller.render()
        rec = controller.create_event("Massage", MONDAY, "9:00", "10:00", "Spa")
        assert store.load_all().events == [rec]


class TestDragDelete:
    def test_drop_on_trash_and_confirm(self, controller, store, surface, answers, cues):
        controller.render()
        controller.add_event(_ev(MONDAY))
        answers.append(True)
        controller.begin_drag("event-2026-10-12-09:00")
        assert controller.drop(920, 30) is DragOutcome.DELETED
        assert store.load_all().events == []
        assert surface.blocks == {}
        assert controller.rendered_keys == set()
        assert cues == ["event-2026-10-12-09:00"]

    def test_drop_outside_trash(self, controller, store, surface, answers):
        controller.render()
        controller.add_event(_ev(MONDAY))
        controller.begin_drag("event-2026-10-12-09:00")
        assert controller.drop(10, 300) is DragOutcome.MISSED
        assert len(store.load_all()) == 1
        assert "event-2026-10-12-09:00" in surface.blocks

    def test_decline(self, controller, store, surface, answers):
        controller.render()
        controller.add_event(_ev(MONDAY))
        answers.append(False)
        controller.begin_drag("event-2026-10-12-09:00")
        assert controller.drop(900, 10) is DragOutcome.CANCELLED
        assert len(store.load_all()) == 1
        assert "event-2026-10-12-09:00" in surface.blocks


class TestContext:
    def test_build_context_uses_settings(self, tmp_path):
        settings = {
            "events_path": str(tmp_path / "events.json"),
            "first_hour": 7, "hour_count": 12, "hour_height": 48, "header_height": 24,
        }
        ctx = build_context(settings)
        assert isinstance(ctx.storage, JsonFileStorage)
        assert ctx.metrics.first_hour == 7
        assert ctx.metrics.hour_height == 48

    def test_independent_contexts(self):
        a = build_context({"events_path": "unused"}, storage=MemoryStorage())
        b = build_context({"events_path": "unused"}, storage=MemoryStorage())
        ca = a.attach(FakeSurface(), today=lambda: TODAY)
        cb = b.attach(FakeSurface(), today=lambda: TODAY)
        ca.add_event(_ev(MONDAY))
        cb.render()
        assert ca.rendered_keys == {"event-2026-10-12-09:00"}
        assert cb.rendered_keys == set()
        assert a.controller is ca and b.controller is cb


class TestStaleDrag:
    def test_press_while_still_dragging_moves_payload(self, controller, store, answers):
        controller.render()
        controller.add_event(_ev(MONDAY, "09:00", "10:00", "first"))
        controller.add_event(_ev(MONDAY, "11:00", "12:00", "second"))
        controller.begin_drag("event-2026-10-12-09:00")  # release lost
        controller.begin_drag("event-2026-10-12-11:00")
        answers.append(True)
        assert controller.drop(920, 30) is DragOutcome.DELETED
        assert [e.title for e in store.load_all().events] == ["first"]

    def test_cancel_drag_forgets_payload(self, controller, store):
        controller.render()
        controller.add_event(_ev(MONDAY))
        controller.begin_drag("event-2026-10-12-09:00")
        controller.cancel_drag()
        assert controller.drag.state is DragState.IDLE
        with pytest.raises(InteractionError):
            controller.drop(920, 30)
        assert len(store.load_all()) == 1

    def test_navigation_drops_pending_drag(self, controller):
        controller.render()
        controller.add_event(_ev(MONDAY))
        controller.begin_drag("event-2026-10-12-09:00")
        controller.navigate(1)
        assert controller.drag.state is DragState.IDLE
        assert controller.drag.payload is None


class TestStorageKey:
    def test_block_uses_key_it_was_stored_under(self, controller, storage, store, surface, answers):
        record = _ev(MONDAY)
        storage.set("event-2026-10-12-9:00", record.to_json())
        controller.render()
        assert list(surface.blocks) == ["event-2026-10-12-9:00"]

        answers.append(True)
        controller.begin_drag("event-2026-10-12-9:00")
        assert controller.drop(920, 30) is DragOutcome.DELETED
        assert storage.keys() == []
        assert surface.blocks == {}

        controller.render()
        assert surface.blocks == {}
