"""Expand/collapse state and flattening of the task forest into rows."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from .models import TaskKind, TimelineTask


def iter_tasks(tasks: Sequence[TimelineTask]) -> Iterator[TimelineTask]:
    """Yield every node of the forest in depth-first pre-order."""
    stack = list(reversed(tasks))
    while stack:
        task = stack.pop()
        yield task
        stack.extend(reversed(task.children))


class ExpansionState:
    """Set of node ids whose children are currently shown."""

    def __init__(self, expanded: Iterable[str] = ()) -> None:
        self._expanded: set[str] = set(expanded)

    @classmethod
    def from_tasks(cls, tasks: Sequence[TimelineTask]) -> ExpansionState:
        """Start with every project and phase expanded, at any depth.

        ``task`` nodes are never tracked.
        """
        return cls(task.id for task in iter_tasks(tasks) if task.kind is not TaskKind.TASK)

    def is_expanded(self, task_id: str) -> bool:
        return task_id in self._expanded

    def expand(self, task_id: str) -> None:
        self._expanded.add(task_id)

    def collapse(self, task_id: str) -> None:
        self._expanded.discard(task_id)

    def toggle(self, task_id: str) -> bool:
        """Flip one node and return whether it is now expanded."""
        if task_id in self._expanded:
            self._expanded.remove(task_id)
            return False
        self._expanded.add(task_id)
        return True

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._expanded

    def __len__(self) -> int:
        return len(self._expanded)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._expanded))


@dataclass(slots=True, frozen=True)
class FlatRow:
    """A visible row: the node, its nesting depth and its parent's id."""

    task: TimelineTask
    depth: int
    parent_id: str | None = None


def flatten(tasks: Sequence[TimelineTask], expansion: ExpansionState) -> list[FlatRow]:
    """Produce the rows to draw, in depth-first sibling order.

    A node's children are included only when the node is expanded and has
    children. Uses an explicit stack so deep forests cannot exhaust the
    interpreter's recursion limit.
    """
    rows: list[FlatRow] = []
    stack: list[FlatRow] = [FlatRow(task, 0, None) for task in reversed(tasks)]
    while stack:
        row = stack.pop()
        rows.append(row)
        task = row.task
        if task.children and task.id in expansion:
            stack.extend(FlatRow(child, row.depth + 1, task.id) for child in reversed(task.children))
    return rows


@dataclass(slots=True, frozen=True)
class IndexEntry:
    task: TimelineTask
    parent_id: str | None
    index: int
    depth: int


class TaskIndex:
    """Lookup of every node by id with its parent and sibling position.

    The index is a snapshot; rebuild it whenever the forest changes shape.
    """

    def __init__(self, tasks: Sequence[TimelineTask]) -> None:
        self._entries: dict[str, IndexEntry] = {}
        stack: list[tuple[Sequence[TimelineTask], str | None, int]] = [(tasks, None, 0)]
        while stack:
            siblings, parent_id, depth = stack.pop()
            for position, task in enumerate(siblings):
                self._entries[task.id] = IndexEntry(task, parent_id, position, depth)
                if task.children:
                    stack.append((task.children, task.id, depth + 1))

    def get(self, task_id: str) -> IndexEntry | None:
        return self._entries.get(task_id)

    def task(self, task_id: str) -> TimelineTask | None:
        entry = self._entries.get(task_id)
        return entry.task if entry else None

    def is_descendant(self, task_id: str, ancestor_id: str) -> bool:
        """True if ``task_id`` sits anywhere below ``ancestor_id``."""
        entry = self._entries.get(task_id)
        while entry is not None and entry.parent_id is not None:
            if entry.parent_id == ancestor_id:
                return True
            entry = self._entries.get(entry.parent_id)
        return False

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
