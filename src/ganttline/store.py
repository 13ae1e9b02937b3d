"""Authoritative task store that applies the chart's proposals."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date

from .hierarchy import TaskIndex
from .logger import get_logger
from .models import TimelineTask

logger = get_logger()

_Subscriber = Callable[[list[TimelineTask]], object]


class TaskStore:
    """Owns a task forest and decides whether chart proposals are applied.

    Its ``apply_reorder`` and ``apply_date_change`` methods have the same
    signatures as the chart callbacks, so they can be wired in directly::

        store = TaskStore(tasks)
        chart = GanttChart(
            store.tasks,
            start,
            end,
            on_task_reorder=store.apply_reorder,
            on_task_date_change=store.apply_date_change,
        )
        store.subscribe(chart.set_tasks)
    """

    def __init__(
        self, tasks: Sequence[TimelineTask], *, allow_cross_parent: bool = True
    ) -> None:
        self._tasks: list[TimelineTask] = list(tasks)
        self._index = TaskIndex(self._tasks)
        self.allow_cross_parent = allow_cross_parent
        self._subscribers: list[_Subscriber] = []
        self.revision = 0

    @property
    def tasks(self) -> list[TimelineTask]:
        return self._tasks

    def find(self, task_id: str) -> TimelineTask | None:
        return self._index.task(task_id)

    def subscribe(self, callback: _Subscriber) -> None:
        """Register a listener called with the forest after every change."""
        self._subscribers.append(callback)

    def _changed(self) -> None:
        self._index = TaskIndex(self._tasks)
        self.revision += 1
        for callback in self._subscribers:
            callback(self._tasks)

    def _siblings(self, parent_id: str | None) -> list[TimelineTask] | None:
        if parent_id is None:
            return self._tasks
        parent = self._index.task(parent_id)
        return parent.children if parent is not None else None

    def apply_date_change(self, task_id: str, new_start: date, new_end: date) -> bool:
        """Move a task's dates. Returns False if the change was rejected."""
        task = self._index.task(task_id)
        if task is None:
            logger.checks("Date change for unknown task '%s' rejected", task_id)
            return False
        if new_start > new_end:
            logger.checks(
                "Date change for '%s' rejected: %s is after %s", task_id, new_start, new_end
            )
            return False
        if (task.start_date, task.end_date) == (new_start, new_end):
            return True

        logger.changes(
            "Task '%s': %s..%s -> %s..%s",
            task_id,
            task.start_date,
            task.end_date,
            new_start,
            new_end,
        )
        task.start_date = new_start
        task.end_date = new_end
        self._changed()
        return True

    def apply_reorder(self, task_id: str, new_index: int, parent_id: str | None = None) -> bool:
        """Move a task to ``new_index`` among the children of ``parent_id``.

        ``new_index`` is the drop target's position before the move, so the
        dragged task takes the target's slot: it lands after the target when
        moving down within the same list and before it otherwise.

        Returns:
            False if the move was rejected (unknown ids, a cross-parent move
            while those are disabled, or a move beneath itself)
        """
        entry = self._index.get(task_id)
        if entry is None:
            logger.checks("Reorder of unknown task '%s' rejected", task_id)
            return False

        target_siblings = self._siblings(parent_id)
        if target_siblings is None:
            logger.checks("Reorder of '%s' rejected: unknown parent '%s'", task_id, parent_id)
            return False

        if entry.parent_id != parent_id:
            if not self.allow_cross_parent:
                logger.checks(
                    "Reorder of '%s' rejected: cross-parent moves are disabled", task_id
                )
                return False
            if parent_id == task_id or (
                parent_id is not None and self._index.is_descendant(parent_id, task_id)
            ):
                logger.checks("Reorder of '%s' rejected: cannot move beneath itself", task_id)
                return False

        source_siblings = self._siblings(entry.parent_id)
        assert source_siblings is not None
        task = source_siblings.pop(entry.index)
        position = max(0, min(new_index, len(target_siblings)))
        target_siblings.insert(position, task)

        logger.changes(
            "Moved '%s' to index %d under %s", task_id, position, parent_id or "<root>"
        )
        self._changed()
        return True

