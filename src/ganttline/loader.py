"""Loading and saving timeline YAML files.

Two layouts are understood:

``format: forest`` (default)
    A nested ``tasks`` list of projects, phases and tasks.

``format: workspace``
    A flat list of project tasks, each naming its ``phase`` and ``status``.
    On load the tasks are grouped into one phase node per phase name, in
    order of first appearance.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError
from ruamel.yaml import YAML

from .exceptions import ParseError, ValidationError
from .geometry import last_day_of_month
from .hierarchy import iter_tasks
from .logger import get_logger
from .models import TaskKind, TimelineTask
from .schemas import ForestSchema, TaskSchema, WorkspaceSchema, WorkspaceTaskSchema

logger = get_logger()

FOREST_FORMAT = "forest"
WORKSPACE_FORMAT = "workspace"

NO_PHASE = "No Phase"
PHASE_ID_PREFIX = "phase-"

# Workspace status -> percent complete
STATUS_PROGRESS = {
    "done": 100.0,
    "ready": 75.0,
    "in-progress": 50.0,
}

# Default span given to workspace tasks with a missing date
DEFAULT_TASK_DAYS = 6
# Spacing between the default start dates of undated tasks
DEFAULT_STAGGER_DAYS = 3


@dataclass
class Timeline:
    """Tasks loaded from a file plus the viewport to show them in."""

    tasks: list[TimelineTask]
    viewport_start: date
    viewport_end: date
    source_format: str = FOREST_FORMAT


def _shift_months(day: date, months: int) -> date:
    """First day of the month ``months`` away from ``day``'s month."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def default_viewport(today: date) -> tuple[date, date]:
    """From the 1st of last month through the end of the month after next."""
    start = _shift_months(today, -1)
    end = last_day_of_month(_shift_months(today, 2))
    return start, end


def _task_from_schema(root: TaskSchema) -> TimelineTask:
    # Build parents before children without recursion
    result = TimelineTask(
        id=root.id,
        name=root.name,
        start_date=root.start,
        end_date=root.end,
        progress=root.progress,
        color=root.color,
        kind=root.kind,
    )
    stack: list[tuple[TaskSchema, TimelineTask]] = [(root, result)]
    while stack:
        schema, task = stack.pop()
        for child_schema in schema.children:
            child = TimelineTask(
                id=child_schema.id,
                name=child_schema.name,
                start_date=child_schema.start,
                end_date=child_schema.end,
                progress=child_schema.progress,
                color=child_schema.color,
                kind=child_schema.kind,
            )
            task.children.append(child)
            stack.append((child_schema, child))
    return result


def _workspace_dates(
    entry: WorkspaceTaskSchema, position: int, month_start: date
) -> tuple[date, date]:
    if entry.start is not None and entry.end is not None:
        return entry.start, entry.end
    if entry.start is not None:
        return entry.start, entry.start + timedelta(days=DEFAULT_TASK_DAYS)
    if entry.end is not None:
        return entry.end - timedelta(days=DEFAULT_TASK_DAYS), entry.end
    start = month_start + timedelta(days=position * DEFAULT_STAGGER_DAYS)
    return start, start + timedelta(days=DEFAULT_TASK_DAYS)


def group_by_phase(workspace: WorkspaceSchema, today: date) -> list[TimelineTask]:
    """Group flat workspace tasks into phase nodes.

    Tasks without a phase go under "No Phase". Task bars take their phase's
    color, progress comes from the status, and a phase spans its tasks with
    their mean progress. Undated tasks get staggered week-long windows from
    the start of the current month.
    """
    groups: dict[str, list[WorkspaceTaskSchema]] = {}
    for entry in workspace.tasks:
        groups.setdefault(entry.phase or NO_PHASE, []).append(entry)

    month_start = today.replace(day=1)
    phases: list[TimelineTask] = []
    for phase_name, entries in groups.items():
        settings = workspace.phases.get(phase_name)
        color = settings.color if settings else None

        children: list[TimelineTask] = []
        for position, entry in enumerate(entries):
            start, end = _workspace_dates(entry, position, month_start)
            if end < start:
                raise ValidationError(f"Task '{entry.id}': end date {end} is before start {start}")
            children.append(
                TimelineTask(
                    id=entry.id,
                    name=entry.name,
                    start_date=start,
                    end_date=end,
                    progress=STATUS_PROGRESS.get((entry.status or "").lower(), 0.0),
                    color=color,
                    kind=TaskKind.TASK,
                )
            )

        phases.append(
            TimelineTask(
                id=f"{PHASE_ID_PREFIX}{phase_name}",
                name=phase_name,
                start_date=min(child.start_date for child in children),
                end_date=max(child.end_date for child in children),
                progress=sum(child.progress for child in children) / len(children),
                color=color,
                kind=TaskKind.PHASE,
                children=children,
            )
        )
    return phases


def parse_timeline(data: dict[str, Any], today: date | None = None) -> Timeline:
    """Build a :class:`Timeline` from already-parsed YAML data.

    Raises:
        ValidationError: If the data does not match either file layout
    """
    today = today or date.today()  # noqa: DTZ011
    layout = data.get("format", FOREST_FORMAT)

    try:
        if layout == WORKSPACE_FORMAT:
            workspace = WorkspaceSchema.model_validate(data)
            tasks = group_by_phase(workspace, today)
            viewport = workspace.viewport
        elif layout == FOREST_FORMAT:
            forest = ForestSchema.model_validate(data)
            tasks = [_task_from_schema(node) for node in forest.tasks]
            viewport = forest.viewport
        else:
            raise ValidationError(
                f"Unknown format '{layout}', expected '{FOREST_FORMAT}' or '{WORKSPACE_FORMAT}'"
            )
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid timeline structure: {e}") from e

    seen: set[str] = set()
    for task in iter_tasks(tasks):
        if task.id in seen:
            raise ValidationError(f"Duplicate task id '{task.id}'")
        seen.add(task.id)

    if viewport is not None:
        start, end = viewport.start, viewport.end
    else:
        start, end = default_viewport(today)

    logger.debug("Loaded %d nodes (%s format), viewport %s..%s", len(seen), layout, start, end)
    return Timeline(tasks=tasks, viewport_start=start, viewport_end=end, source_format=layout)


def load_timeline(path: Path | str, today: date | None = None) -> Timeline:
    """Parse a timeline YAML file.

    Raises:
        ParseError: If the file is missing or is not valid YAML
        ValidationError: If its contents are not a valid timeline
    """
    path = Path(path)
    if not path.exists():
        raise ParseError(f"File not found: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse YAML: {e}") from e

    if not isinstance(data, dict):
        raise ParseError("YAML must contain a dictionary at the root level")

    return parse_timeline(data, today)  # type: ignore[arg-type]


def task_to_data(task: TimelineTask) -> dict[str, Any]:
    """Serializable form of one node and its subtree, matching the forest layout."""
    data: dict[str, Any] = {
        "id": task.id,
        "name": task.name,
        "start": task.start_date,
        "end": task.end_date,
    }
    if task.progress:
        data["progress"] = int(task.progress) if float(task.progress).is_integer() else task.progress
    if task.color:
        data["color"] = task.color
    if task.kind is not TaskKind.TASK:
        data["kind"] = task.kind.value
    if task.children:
        data["children"] = [task_to_data(child) for child in task.children]
    return data


def _workspace_entries(tasks: list[TimelineTask], original: Any) -> list[Any]:
    by_id = {str(entry["id"]): entry for entry in original or []}
    entries: list[Any] = []
    for phase in tasks:
        phase_name = phase.name if phase.kind is TaskKind.PHASE else None
        members = phase.children if phase.kind is TaskKind.PHASE else [phase]
        for task in members:
            entry = by_id.get(task.id)
            if entry is None:
                entry = {"id": task.id, "name": task.name}
            entry["start"] = task.start_date
            entry["end"] = task.end_date
            if phase_name is None or phase_name == NO_PHASE:
                entry.pop("phase", None)
            else:
                entry["phase"] = phase_name
            entries.append(entry)
    return entries


def write_timeline(path: Path | str, timeline: Timeline) -> None:
    """Write tasks back to their file, keeping comments and unrelated keys.

    Forest files get their ``tasks`` section replaced. Workspace files keep
    their flat layout: each task's dates and phase are updated in place and
    the list follows the current row order.
    """
    path = Path(path)
    yaml_rt = YAML()
    yaml_rt.preserve_quotes = True  # type: ignore[assignment]

    with path.open(encoding="utf-8") as f:
        data: Any = yaml_rt.load(f)  # type: ignore[no-untyped-call]

    if timeline.source_format == WORKSPACE_FORMAT:
        data["tasks"] = _workspace_entries(timeline.tasks, data.get("tasks"))
    else:
        data["tasks"] = [task_to_data(task) for task in timeline.tasks]

    with path.open("w", encoding="utf-8") as f:
        yaml_rt.dump(data, f)  # type: ignore[no-untyped-call]
