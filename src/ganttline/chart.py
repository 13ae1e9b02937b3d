"""The interactive Gantt timeline engine."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date

from .config import GanttConfig
from .events import DocumentEvents, EventSource
from .geometry import (
    TimeScale,
    bar_geometry,
    days_between,
    grid_lines,
    timeline_headers,
    timeline_width,
    today_marker,
    total_weeks,
)
from .gestures import (
    DateChangeCallback,
    DragReorderController,
    GestureSlot,
    GestureState,
    ReorderCallback,
    Reordering,
    ReorderRequest,
    ResizeEdge,
    ResizeEditController,
    Resizing,
)
from .hierarchy import ExpansionState, FlatRow, TaskIndex, flatten
from .logger import get_logger
from .models import ChartFrame, RowView, TimelineTask, Viewport

logger = get_logger()


class GanttChart:
    """One mounted Gantt view.

    The chart owns its expansion state, hover focus and the in-flight
    gesture. It never owns the tasks: date changes and reorders are only
    proposed through ``on_task_date_change`` / ``on_task_reorder`` and show
    up once the caller passes an updated forest to :meth:`set_tasks`.
    """

    def __init__(  # noqa: PLR0913 - mirrors the component's props
        self,
        tasks: Sequence[TimelineTask],
        viewport_start: date | None,
        viewport_end: date | None,
        *,
        on_task_reorder: ReorderCallback | None = None,
        on_task_date_change: DateChangeCallback | None = None,
        config: GanttConfig | None = None,
        events: EventSource | None = None,
        today: Callable[[], date] | None = None,
    ) -> None:
        """Mount a chart.

        Args:
            tasks: Root-level nodes of the forest, in display order
            viewport_start: First visible day, or None for no viewport
            viewport_end: Last visible day, or None for no viewport
            on_task_reorder: Called once per successful drop
            on_task_date_change: Called once per completed resize
            config: Layout settings
            events: Source for global pointer/key listeners during a resize.
                    Defaults to a private in-memory dispatcher.
            today: Clock used for the today marker (defaults to date.today)
        """
        self.config = config or GanttConfig()
        self.events: EventSource = events if events is not None else DocumentEvents()
        self.viewport_start = viewport_start
        self.viewport_end = viewport_end
        self._today = today or date.today
        self._tasks: list[TimelineTask] = list(tasks)
        self._index = TaskIndex(self._tasks)
        self.expansion = ExpansionState.from_tasks(self._tasks)
        self.hovered_task_id: str | None = None
        self._closed = False

        self._slot = GestureSlot()
        self.reorder = DragReorderController(self._slot, self._get_index, on_task_reorder)
        self.resize = ResizeEditController(
            self._slot, self._get_index, self.time_scale, self.events, on_task_date_change
        )

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    @property
    def tasks(self) -> list[TimelineTask]:
        return self._tasks

    def set_tasks(self, tasks: Sequence[TimelineTask]) -> None:
        """Swap in the caller's latest forest; expansion state is kept."""
        self._tasks = list(tasks)
        self._index = TaskIndex(self._tasks)

    def set_viewport(self, start: date | None, end: date | None) -> None:
        self.viewport_start = start
        self.viewport_end = end

    @property
    def viewport(self) -> Viewport | None:
        if self.viewport_start is None or self.viewport_end is None:
            return None
        return Viewport(self.viewport_start, self.viewport_end)

    def _get_index(self) -> TaskIndex:
        return self._index

    @property
    def gesture(self) -> GestureState:
        return self._slot.state

    def time_scale(self) -> TimeScale:
        """Pixel/day scale of the current viewport, used by resize drags."""
        headers = timeline_headers(self.viewport_start, self.viewport_end)
        total = 0
        if self.viewport_start is not None and self.viewport_end is not None:
            total = days_between(self.viewport_start, self.viewport_end)
        return TimeScale(
            total_days=total, pixel_width=timeline_width(headers, self.config.column_width)
        )

    # ------------------------------------------------------------------
    # User interaction
    # ------------------------------------------------------------------

    def hover(self, task_id: str | None) -> None:
        """Move hover focus (pointer enter/leave on a row)."""
        self.hovered_task_id = task_id

    def toggle(self, task_id: str) -> bool | None:
        """Chevron click. Returns the new expanded flag, or None without a chevron."""
        task = self._index.task(task_id)
        if task is None or not task.has_children:
            return None
        expanded = self.expansion.toggle(task_id)
        logger.debug("%s '%s'", "Expanded" if expanded else "Collapsed", task_id)
        return expanded

    def drag_start(self, task_id: str) -> bool:
        return self.reorder.drag_start(task_id)

    def drag_over(self, target_id: str) -> None:
        self.reorder.drag_over(target_id)

    def drag_leave(self) -> None:
        self.reorder.drag_leave()

    def drop(self, target_id: str) -> ReorderRequest | None:
        return self.reorder.drop(target_id)

    def drag_end(self) -> None:
        self.reorder.drag_end()

    def resize_start(self, task_id: str, edge: ResizeEdge | str, pointer_x: float) -> bool:
        """Press on a bar edge; the rest of the gesture arrives via ``events``."""
        return self.resize.resize_start(task_id, edge, pointer_x)

    def cancel_gesture(self) -> None:
        """Abandon whatever gesture is in progress without emitting anything."""
        self._slot.clear()

    def close(self) -> None:
        """Unmount: release global listeners and drop transient state."""
        self._slot.clear()
        self.hovered_task_id = None
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> GanttChart:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def visible_rows(self) -> list[FlatRow]:
        return flatten(self._tasks, self.expansion)

    def render(self) -> ChartFrame:
        """Derive all visual state for the current inputs and gesture."""
        config = self.config
        headers = timeline_headers(self.viewport_start, self.viewport_end)
        width = timeline_width(headers, config.column_width)
        state = self._slot.state

        rows = [self._row_view(row, state) for row in self.visible_rows()]

        return ChartFrame(
            viewport_start=self.viewport_start,
            viewport_end=self.viewport_end,
            headers=headers,
            total_weeks=total_weeks(headers),
            column_width=config.column_width,
            timeline_width=width,
            sidebar_width=config.sidebar_width,
            rows=rows,
            grid_lines=grid_lines(headers, config.column_width),
            today=today_marker(self.viewport_start, self.viewport_end, self._today(), width),
        )

    def _row_view(self, row: FlatRow, state: GestureState) -> RowView:
        task = row.task
        start, end = task.start_date, task.end_date
        resizing = False
        if isinstance(state, Resizing) and state.task_id == task.id:
            # Live feedback: show the proposal, not the caller's dates
            resizing = True
            start, end = state.proposed_start, state.proposed_end

        dragging = isinstance(state, Reordering) and state.dragging_task_id == task.id
        drop_target = (
            isinstance(state, Reordering)
            and state.drag_over_task_id == task.id
            and state.dragging_task_id != task.id
        )
        hovered = self.hovered_task_id == task.id
        leaf = task.is_leaf_task

        return RowView(
            task_id=task.id,
            name=task.name,
            kind=task.kind,
            depth=row.depth,
            parent_id=row.parent_id,
            indent_px=self.config.indent_for(row.depth),
            has_chevron=task.has_children,
            expanded=task.has_children and task.id in self.expansion,
            start_date=start,
            end_date=end,
            progress=task.progress,
            color=task.display_color(self.config.default_color),
            bar=bar_geometry(start, end, self.viewport_start, self.viewport_end),
            hovered=hovered,
            show_drag_handle=leaf and hovered,
            show_resize_handles=leaf and hovered,
            is_dragging=dragging,
            is_drop_target=drop_target,
            is_resizing=resizing,
        )
