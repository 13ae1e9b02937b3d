"""Drag-to-reorder and drag-to-resize gesture handling.

Both controllers share one :class:`GestureSlot`, so at most one gesture is
ever in progress: starting a new gesture tears down whatever the slot held.
Gestures never raise for bad input. An invalid drop, a gesture on a
container row or a resize proposal that would invert a task are declined
quietly, and the only signal a caller sees is a callback for a committed
outcome.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date, timedelta
from enum import Enum
from typing import Any, TypeAlias

from .events import ESCAPE, KEY_DOWN, POINTER_MOVE, POINTER_UP, EventSource, ListenerScope
from .geometry import TimeScale
from .hierarchy import TaskIndex
from .logger import get_logger

logger = get_logger()


class ResizeEdge(str, Enum):
    """Which end of a bar is being dragged."""

    START = "start"
    END = "end"


@dataclass(slots=True, frozen=True)
class Idle:
    """No gesture in progress."""


@dataclass(slots=True, frozen=True)
class Reordering:
    dragging_task_id: str
    drag_over_task_id: str | None = None


@dataclass(slots=True, frozen=True)
class Resizing:
    """An edge drag, anchored to the dates and pointer position at its start.

    Every pointer move is measured against ``pointer_origin_x`` and the
    original dates, never against the previous frame, so rounding cannot
    accumulate. ``proposed_*`` hold the last accepted proposal.
    """

    task_id: str
    edge: ResizeEdge
    pointer_origin_x: float
    original_start: date
    original_end: date
    proposed_start: date
    proposed_end: date


GestureState: TypeAlias = Idle | Reordering | Resizing

IDLE = Idle()


@dataclass(slots=True, frozen=True)
class ReorderRequest:
    """Proposal to move ``task_id`` into the slot currently held by ``target_id``."""

    task_id: str
    new_index: int
    parent_id: str | None
    target_id: str


@dataclass(slots=True, frozen=True)
class DateChangeRequest:
    task_id: str
    new_start: date
    new_end: date


ReorderCallback = Callable[[str, int, str | None], Any]
DateChangeCallback = Callable[[str, date, date], Any]
IndexProvider = Callable[[], TaskIndex]
ScaleProvider = Callable[[], TimeScale]


class GestureSlot:
    """Holds the single active gesture and the listeners it acquired."""

    def __init__(self) -> None:
        self.state: GestureState = IDLE
        self._scope: ListenerScope | None = None

    @property
    def idle(self) -> bool:
        return isinstance(self.state, Idle)

    def begin(self, state: GestureState, scope: ListenerScope | None = None) -> None:
        """Replace any prior gesture, releasing its listeners first."""
        self.clear()
        self.state = state
        if scope is not None:
            scope.acquire()
            self._scope = scope

    def update(self, state: GestureState) -> None:
        """Swap the state of the running gesture, keeping its listeners."""
        self.state = state

    def clear(self) -> None:
        if self._scope is not None:
            scope, self._scope = self._scope, None
            scope.release()
        self.state = IDLE


class DragReorderController:
    """Row drag-and-drop for leaf tasks.

    The controller only proposes a move. Where the dragged row ends up, and
    whether moving it under another parent is allowed, is up to the caller.
    """

    def __init__(
        self,
        slot: GestureSlot,
        index: IndexProvider,
        on_task_reorder: ReorderCallback | None = None,
    ) -> None:
        self._slot = slot
        self._index = index
        self.on_task_reorder = on_task_reorder

    @property
    def active(self) -> bool:
        return isinstance(self._slot.state, Reordering)

    def drag_start(self, task_id: str) -> bool:
        task = self._index().task(task_id)
        if task is None or not task.is_leaf_task:
            logger.checks("Drag of '%s' declined: only leaf tasks can be reordered", task_id)
            return False
        self._slot.begin(Reordering(dragging_task_id=task_id))
        logger.debug("Drag started on '%s'", task_id)
        return True

    def drag_over(self, target_id: str) -> None:
        """Record the row under the pointer. Highlight only, never a mutation."""
        state = self._slot.state
        if isinstance(state, Reordering) and target_id in self._index():
            self._slot.update(replace(state, drag_over_task_id=target_id))

    def drag_leave(self) -> None:
        state = self._slot.state
        if isinstance(state, Reordering):
            self._slot.update(replace(state, drag_over_task_id=None))

    def drop(self, target_id: str) -> ReorderRequest | None:
        """Finish the drag on ``target_id`` and emit a reorder proposal.

        Returns:
            The emitted request, or None when the drop was a no-op
        """
        state = self._slot.state
        if not isinstance(state, Reordering):
            logger.checks("Drop on '%s' ignored: no drag in progress", target_id)
            return None
        self._slot.clear()

        if state.dragging_task_id == target_id:
            logger.checks("Drop of '%s' onto itself ignored", target_id)
            return None

        index = self._index()
        target = index.get(target_id)
        if target is None or not target.task.is_leaf_task:
            logger.checks("Drop on '%s' ignored: not a task row", target_id)
            return None
        if state.dragging_task_id not in index:
            logger.checks("Drop ignored: '%s' is no longer in the chart", state.dragging_task_id)
            return None

        request = ReorderRequest(
            task_id=state.dragging_task_id,
            new_index=target.index,
            parent_id=target.parent_id,
            target_id=target_id,
        )
        logger.changes(
            "Reorder '%s' to index %d under %s",
            request.task_id,
            request.new_index,
            request.parent_id or "<root>",
        )
        if self.on_task_reorder is not None:
            self.on_task_reorder(request.task_id, request.new_index, request.parent_id)
        return request

    def drag_end(self) -> None:
        """Native drag finished (dropped or cancelled): forget the drag.

        Always clears reorder state. A resize owning the slot keeps running
        with its listeners attached.
        """
        if isinstance(self._slot.state, Reordering):
            self._slot.clear()


class ResizeEditController:
    """Edge drags on task bars that move the start or end date.

    While a resize is active the controller listens to the event source for
    pointer moves, pointer release and Escape. Those listeners are acquired
    by :meth:`resize_start` and released on commit, cancel or teardown.
    """

    def __init__(
        self,
        slot: GestureSlot,
        index: IndexProvider,
        scale: ScaleProvider,
        events: EventSource,
        on_task_date_change: DateChangeCallback | None = None,
    ) -> None:
        self._slot = slot
        self._index = index
        self._scale = scale
        self._events = events
        self.on_task_date_change = on_task_date_change

    @property
    def active(self) -> bool:
        return isinstance(self._slot.state, Resizing)

    def resize_start(self, task_id: str, edge: ResizeEdge | str, pointer_x: float) -> bool:
        task = self._index().task(task_id)
        if task is None or not task.is_leaf_task:
            logger.checks("Resize of '%s' declined: only leaf tasks can be resized", task_id)
            return False

        state = Resizing(
            task_id=task_id,
            edge=ResizeEdge(edge),
            pointer_origin_x=float(pointer_x),
            original_start=task.start_date,
            original_end=task.end_date,
            proposed_start=task.start_date,
            proposed_end=task.end_date,
        )
        scope = ListenerScope(
            self._events,
            {
                POINTER_MOVE: self._on_pointer_move,
                POINTER_UP: self._on_pointer_up,
                KEY_DOWN: self._on_key_down,
            },
        )
        self._slot.begin(state, scope)
        logger.debug("Resize of '%s' (%s edge) started at x=%s", task_id, state.edge.value, pointer_x)
        return True

    def pointer_move(self, pointer_x: float) -> tuple[date, date] | None:
        """Re-evaluate the proposal for the current pointer position.

        Returns:
            The (start, end) the bar should show, or None if no resize is active
        """
        state = self._slot.state
        if not isinstance(state, Resizing):
            return None

        day_delta = self._scale().days_for_pixels(pointer_x - state.pointer_origin_x)
        shift = timedelta(days=day_delta)

        if state.edge is ResizeEdge.START:
            proposed = state.original_start + shift
            if proposed < state.original_end:
                state = replace(state, proposed_start=proposed, proposed_end=state.original_end)
                self._slot.update(state)
            else:
                logger.checks(
                    "Rejected start %s for '%s': not before end %s",
                    proposed,
                    state.task_id,
                    state.original_end,
                )
        else:
            proposed = state.original_end + shift
            if proposed > state.original_start:
                state = replace(state, proposed_start=state.original_start, proposed_end=proposed)
                self._slot.update(state)
            else:
                logger.checks(
                    "Rejected end %s for '%s': not after start %s",
                    proposed,
                    state.task_id,
                    state.original_start,
                )

        return state.proposed_start, state.proposed_end

    def resize_end(self) -> DateChangeRequest | None:
        """Commit the last accepted proposal and end the gesture."""
        state = self._slot.state
        if not isinstance(state, Resizing):
            return None
        self._slot.clear()

        request = DateChangeRequest(state.task_id, state.proposed_start, state.proposed_end)
        logger.changes(
            "Dates of '%s' -> %s..%s", request.task_id, request.new_start, request.new_end
        )
        if self.on_task_date_change is not None:
            self.on_task_date_change(request.task_id, request.new_start, request.new_end)
        return request

    def cancel(self) -> bool:
        """Abort the resize without committing anything."""
        state = self._slot.state
        if not isinstance(state, Resizing):
            return False
        self._slot.clear()
        logger.checks("Resize of '%s' cancelled", state.task_id)
        return True

    def _on_pointer_move(self, event: Any) -> None:
        self.pointer_move(event.x)

    def _on_pointer_up(self, _event: Any) -> None:
        self.resize_end()

    def _on_key_down(self, event: Any) -> None:
        if getattr(event, "key", None) == ESCAPE:
            self.cancel()
