"""Pytest configuration and fixtures for ganttline tests."""

from __future__ import annotations

from datetime import date

import pytest

from ganttline import context
from ganttline.logger import reset_logger
from ganttline.models import TaskKind, TimelineTask


@pytest.fixture(autouse=True)
def clean_state() -> None:
    """Reset logger and CLI context before each test for isolation."""
    reset_logger()
    context.reset()


def make_task(
    task_id: str,
    start: date,
    end: date,
    *,
    kind: TaskKind = TaskKind.TASK,
    children: list[TimelineTask] | None = None,
    progress: float = 0.0,
    color: str | None = None,
) -> TimelineTask:
    """Shorthand for building forest nodes in tests (name = id)."""
    return TimelineTask(
        id=task_id,
        name=task_id,
        start_date=start,
        end_date=end,
        progress=progress,
        color=color,
        kind=kind,
        children=children or [],
    )


@pytest.fixture
def viewport() -> tuple[date, date]:
    """January 2025: 30 days from the 1st to the 31st."""
    return date(2025, 1, 1), date(2025, 1, 31)


@pytest.fixture
def forest() -> list[TimelineTask]:
    """Project P -> phases Ph1 (T1, T2, T3) and Ph2 (T4)."""
    ph1 = make_task(
        "Ph1",
        date(2025, 1, 6),
        date(2025, 1, 20),
        kind=TaskKind.PHASE,
        children=[
            make_task("T1", date(2025, 1, 6), date(2025, 1, 10)),
            make_task("T2", date(2025, 1, 10), date(2025, 1, 15), progress=50),
            make_task("T3", date(2025, 1, 15), date(2025, 1, 20)),
        ],
    )
    ph2 = make_task(
        "Ph2",
        date(2025, 1, 20),
        date(2025, 1, 28),
        kind=TaskKind.PHASE,
        children=[make_task("T4", date(2025, 1, 20), date(2025, 1, 28))],
    )
    project = make_task(
        "P", date(2025, 1, 6), date(2025, 1, 28), kind=TaskKind.PROJECT, children=[ph1, ph2]
    )
    return [project]
