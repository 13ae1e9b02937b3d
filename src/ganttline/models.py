"""Data models for Ganttline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

# Bar color used when a task does not carry its own
DEFAULT_COLOR = "#0394ff"


class TaskKind(str, Enum):
    """Level of a node in the project -> phase -> task forest."""

    PROJECT = "project"
    PHASE = "phase"
    TASK = "task"


def _default_children() -> list[TimelineTask]:
    return []


@dataclass
class TimelineTask:
    """A node in the timeline forest.

    Only ``task`` nodes are draggable and resizable. Projects and phases are
    containers, but nothing stops a caller from nesting deeper, so renderers
    must not assume a fixed depth.
    """

    id: str
    name: str
    start_date: date
    end_date: date
    progress: float = 0.0
    color: str | None = None
    kind: TaskKind = TaskKind.TASK
    children: list[TimelineTask] = field(default_factory=_default_children)

    def __post_init__(self) -> None:
        self.kind = TaskKind(self.kind)
        if self.start_date > self.end_date:
            raise ValueError(
                f"Task '{self.id}' starts after it ends ({self.start_date} > {self.end_date})"
            )
        if not 0 <= self.progress <= 100:  # noqa: PLR2004
            raise ValueError(f"Task '{self.id}' progress must be within 0-100, got {self.progress}")

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def is_leaf_task(self) -> bool:
        """True for the only kind that supports drag and resize."""
        return self.kind is TaskKind.TASK

    def display_color(self, default: str = DEFAULT_COLOR) -> str:
        return self.color or default


@dataclass(frozen=True)
class Viewport:
    """The visible calendar window for one render pass."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Viewport starts after it ends ({self.start} > {self.end})")

    @property
    def total_days(self) -> int:
        return (self.end - self.start).days

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(slots=True, frozen=True)
class BarGeometry:
    """Horizontal placement of a bar as percentages of the timeline width.

    Values are never clamped: a task outside the viewport yields a negative
    left offset or a width running past 100, and the drawing surface clips.
    """

    left_percent: float
    width_percent: float

    @property
    def right_percent(self) -> float:
        return self.left_percent + self.width_percent


ZERO_BAR = BarGeometry(0.0, 0.0)


@dataclass(slots=True, frozen=True)
class MonthBucket:
    """A month header and the week-boundary dates it contains."""

    label: str
    weeks: tuple[date, ...]


@dataclass(slots=True, frozen=True)
class GridLine:
    """Vertical guide at the left edge of a week column."""

    index: int
    offset_px: float


@dataclass(slots=True, frozen=True)
class TodayMarker:
    percent: float
    offset_px: float


@dataclass(slots=True, frozen=True)
class RowView:
    """Everything a renderer needs to draw one visible row."""

    task_id: str
    name: str
    kind: TaskKind
    depth: int
    parent_id: str | None
    indent_px: int
    has_chevron: bool
    expanded: bool
    start_date: date
    end_date: date
    progress: float
    color: str
    bar: BarGeometry
    hovered: bool = False
    show_drag_handle: bool = False
    show_resize_handles: bool = False
    is_dragging: bool = False
    is_drop_target: bool = False
    is_resizing: bool = False


@dataclass(slots=True, frozen=True)
class ChartFrame:
    """Derived visual state for a single render pass."""

    viewport_start: date | None
    viewport_end: date | None
    headers: list[MonthBucket]
    total_weeks: int
    column_width: int
    timeline_width: int
    sidebar_width: int
    rows: list[RowView] = field(default_factory=list[RowView])
    grid_lines: list[GridLine] = field(default_factory=list[GridLine])
    today: TodayMarker | None = None

    @property
    def total_width(self) -> int:
        return self.sidebar_width + self.timeline_width

    def row(self, task_id: str) -> RowView | None:
        for row in self.rows:
            if row.task_id == task_id:
                return row
        return None
