"""Ganttline - interactive Gantt timeline engine."""

from ganttline.chart import GanttChart
from ganttline.config import GanttConfig, GanttlineConfig, discover_config, load_config
from ganttline.events import DocumentEvents, KeyEvent, ListenerScope, PointerEvent
from ganttline.exceptions import ConfigError, GanttlineError, ParseError, ValidationError
from ganttline.geometry import (
    TimeScale,
    bar_geometry,
    days_between,
    grid_lines,
    round_half_up,
    timeline_headers,
    timeline_width,
    today_marker,
)
from ganttline.gestures import (
    DateChangeRequest,
    DragReorderController,
    Idle,
    Reordering,
    ReorderRequest,
    ResizeEdge,
    ResizeEditController,
    Resizing,
)
from ganttline.hierarchy import ExpansionState, FlatRow, TaskIndex, flatten
from ganttline.loader import Timeline, load_timeline, parse_timeline, write_timeline
from ganttline.models import (
    DEFAULT_COLOR,
    BarGeometry,
    ChartFrame,
    MonthBucket,
    RowView,
    TaskKind,
    TimelineTask,
    TodayMarker,
    Viewport,
)
from ganttline.store import TaskStore

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_COLOR",
    "BarGeometry",
    "ChartFrame",
    "ConfigError",
    "DateChangeRequest",
    "DocumentEvents",
    "DragReorderController",
    "ExpansionState",
    "FlatRow",
    "GanttChart",
    "GanttConfig",
    "GanttlineConfig",
    "GanttlineError",
    "Idle",
    "KeyEvent",
    "ListenerScope",
    "MonthBucket",
    "ParseError",
    "PointerEvent",
    "ReorderRequest",
    "Reordering",
    "ResizeEdge",
    "ResizeEditController",
    "Resizing",
    "RowView",
    "TaskIndex",
    "TaskKind",
    "TaskStore",
    "TimeScale",
    "Timeline",
    "TimelineTask",
    "TodayMarker",
    "ValidationError",
    "Viewport",
    "bar_geometry",
    "days_between",
    "discover_config",
    "flatten",
    "grid_lines",
    "load_config",
    "load_timeline",
    "parse_timeline",
    "round_half_up",
    "timeline_headers",
    "timeline_width",
    "today_marker",
]
