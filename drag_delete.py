r"""Drag-to-trash deletion as an explicit state machine.

    IDLE -> DRAGGING -> DROPPED_ON_TRASH -> CONFIRMING -> COMMITTED -> IDLE
                     |                               \-> CANCELLED -> IDLE
                     \-> DROPPED_ELSEWHERE -> IDLE

The confirmation prompt is an injected callable returning a bool, or an
awaitable of one when driven through ``release_async``.
"""

from __future__ import annotations

import enum
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from errors import InteractionError
from event_store import EventStore

logger = logging.getLogger(__name__)

CONFIRM_PROMPT = "Do you really want to delete that?"


class DragState(enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    DROPPED_ON_TRASH = "dropped-on-trash"
    DROPPED_ELSEWHERE = "dropped-elsewhere"
    CONFIRMING = "confirming"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


class DragOutcome(enum.Enum):
    DELETED = "deleted"
    CANCELLED = "cancelled"
    MISSED = "missed"  # released outside the trash


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    right: float
    bottom: float

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom


class DragDeleteMachine:
    """Owns the drag payload and performs the confirmed deletion.

    ``remove_block(key)`` drops the visual block; ``notify(key)`` is a
    fire-and-forget cue whose failures are logged and ignored.
    """

    def __init__(
        self,
        store: EventStore,
        confirm: Callable[[str], bool | Awaitable[bool]],
        remove_block: Callable[[str], None],
        notify: Callable[[str], Any] | None = None,
    ) -> None:
        self.store = store
        self.confirm = confirm
        self.remove_block = remove_block
        self.notify = notify
        self.state = DragState.IDLE
        self.payload: str | None = None
        self.history: list[DragState] = [DragState.IDLE]

    def _enter(self, state: DragState) -> None:
        logger.debug("drag-delete: %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _reset(self) -> None:
        self.payload = None
        self._enter(DragState.IDLE)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def begin(self, key: str) -> None:
        """Pick up the block stored under ``key``."""
        if self.state is not DragState.IDLE:
            raise InteractionError(
                f"cannot start a drag while {self.state.value}")
        self.history = [DragState.IDLE]
        self.payload = key
        self._enter(DragState.DRAGGING)

    def cancel_drag(self) -> None:
        """Abandon a drag that never reached a drop (pointer lost)."""
        if self.state is DragState.DRAGGING:
            self._reset()

    def _drop(self, x: float, y: float, trash: Rect) -> bool:
        if self.state is not DragState.DRAGGING:
            raise InteractionError(f"no drag in progress ({self.state.value})")
        if trash.contains(x, y):
            self._enter(DragState.DROPPED_ON_TRASH)
            self._enter(DragState.CONFIRMING)
            return True
        self._enter(DragState.DROPPED_ELSEWHERE)
        self._reset()
        return False

    def _resolve(self, answer: bool) -> DragOutcome:
        key = self.payload
        if not answer:
            self._enter(DragState.CANCELLED)
            self._reset()
            return DragOutcome.CANCELLED

        self.store.delete(key)
        self.remove_block(key)
        self._enter(DragState.COMMITTED)
        if self.notify is not None:
            try:
                self.notify(key)
            except Exception:
                logger.exception("Deletion cue failed for %s", key)
        self._reset()
        return DragOutcome.DELETED

    def release(self, x: float, y: float, trash: Rect) -> DragOutcome:
        """Drop the payload at ``(x, y)`` with a blocking confirmation."""
        if not self._drop(x, y, trash):
            return DragOutcome.MISSED
        try:
            answer = self.confirm(CONFIRM_PROMPT)
            if inspect.isawaitable(answer):
                if inspect.iscoroutine(answer):
                    answer.close()
                raise InteractionError(
                    "confirmation is asynchronous; use release_async()")
            return self._resolve(bool(answer))
        except BaseException:
            if self.state is not DragState.IDLE:
                self._reset()
            raise

    async def release_async(self, x: float, y: float,
                            trash: Rect) -> DragOutcome:
        """Same as ``release`` but awaits the confirmation."""
        if not self._drop(x, y, trash):
            return DragOutcome.MISSED
        try:
            answer = self.confirm(CONFIRM_PROMPT)
            if inspect.isawaitable(answer):
                answer = await answer
            return self._resolve(bool(answer))
        except BaseException:
            if self.state is not DragState.IDLE:
                self._reset()
            raise
