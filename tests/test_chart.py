"""Tests for the mounted chart: rendering, interaction and teardown."""

from __future__ import annotations

import copy
from datetime import date
from typing import Any

import pytest

from ganttline.chart import GanttChart
from ganttline.config import GanttConfig
from ganttline.events import DocumentEvents
from ganttline.gestures import Idle, ResizeEdge
from ganttline.models import TaskKind, TimelineTask
from tests.conftest import make_task

JAN_1 = date(2025, 1, 1)
JAN_31 = date(2025, 1, 31)


def row_ids(chart: GanttChart) -> list[str]:
    return [row.task_id for row in chart.render().rows]


@pytest.fixture
def events() -> DocumentEvents:
    return DocumentEvents()


@pytest.fixture
def calls() -> dict[str, list[tuple[Any, ...]]]:
    return {"reorder": [], "dates": []}


@pytest.fixture
def chart(
    forest: list[TimelineTask],
    events: DocumentEvents,
    calls: dict[str, list[tuple[Any, ...]]],
) -> GanttChart:
    return GanttChart(
        forest,
        JAN_1,
        JAN_31,
        on_task_reorder=lambda *args: calls["reorder"].append(args),
        on_task_date_change=lambda *args: calls["dates"].append(args),
        events=events,
        today=lambda: date(2025, 1, 16),
    )


class TestRender:
    """Test frame derivation."""

    def test_frame_layout(self, chart: GanttChart) -> None:
        frame = chart.render()

        assert [bucket.label for bucket in frame.headers] == ["Jan 2025"]
        assert frame.total_weeks == 5
        assert frame.timeline_width == 400
        assert frame.total_width == 700
        assert len(frame.grid_lines) == 5

    def test_rows_in_order_with_indent(self, chart: GanttChart) -> None:
        frame = chart.render()

        assert [row.task_id for row in frame.rows] == ["P", "Ph1", "T1", "T2", "T3", "Ph2", "T4"]
        assert [row.indent_px for row in frame.rows] == [12, 32, 52, 52, 52, 32, 52]

    def test_bar_geometry_per_row(self, chart: GanttChart) -> None:
        row = chart.render().row("T2")

        assert row is not None
        assert row.bar.left_percent == pytest.approx(30.0)
        assert row.bar.width_percent == pytest.approx(500 / 30)

    def test_today_marker(self, chart: GanttChart) -> None:
        marker = chart.render().today
        assert marker is not None
        assert marker.percent == pytest.approx(50.0)
        assert marker.offset_px == pytest.approx(200.0)

    def test_no_today_marker_outside_viewport(self, forest: list[TimelineTask]) -> None:
        chart = GanttChart(forest, JAN_1, JAN_31, today=lambda: date(2025, 2, 1))
        assert chart.render().today is None

    def test_chevrons_and_colors(self, chart: GanttChart) -> None:
        frame = chart.render()
        project = frame.row("P")
        task = frame.row("T1")

        assert project is not None and project.has_chevron and project.expanded
        assert task is not None and not task.has_chevron and not task.expanded
        assert task.color == "#0394ff"

    def test_task_color_overrides_default(self) -> None:
        task = make_task("A", JAN_1, date(2025, 1, 5), color="#ff0000")
        chart = GanttChart([task], JAN_1, JAN_31, config=GanttConfig(default_color="#00ff00"))
        row = chart.render().row("A")
        assert row is not None and row.color == "#ff0000"

    def test_custom_column_width(self, forest: list[TimelineTask]) -> None:
        chart = GanttChart(forest, JAN_1, JAN_31, config=GanttConfig(column_width=100))
        assert chart.render().timeline_width == 500

    def test_absent_viewport(self, forest: list[TimelineTask]) -> None:
        chart = GanttChart(forest, None, None)
        frame = chart.render()

        assert frame.headers == []
        assert frame.timeline_width == 0
        assert frame.today is None
        assert all(row.bar.width_percent == 0 for row in frame.rows)
        assert chart.viewport is None

    def test_empty_forest(self) -> None:
        frame = GanttChart([], JAN_1, JAN_31).render()
        assert frame.rows == []
        assert frame.total_weeks == 5

    def test_set_viewport(self, chart: GanttChart) -> None:
        chart.set_viewport(date(2025, 1, 1), date(2025, 2, 28))
        frame = chart.render()
        assert [bucket.label for bucket in frame.headers] == ["Jan 2025", "Feb 2025"]

    def test_render_does_not_mutate_tasks(
        self, chart: GanttChart, forest: list[TimelineTask]
    ) -> None:
        before = copy.deepcopy(forest)
        chart.hover("T1")
        chart.toggle("Ph2")
        chart.render()
        assert forest == before


class TestExpandCollapse:
    """Test chevron toggling."""

    def test_collapse_and_expand_phase(self) -> None:
        t1 = make_task("T1", JAN_1, date(2025, 1, 5))
        ph1 = make_task("Ph1", JAN_1, date(2025, 1, 5), kind=TaskKind.PHASE, children=[t1])
        project = make_task("P", JAN_1, date(2025, 1, 5), kind=TaskKind.PROJECT, children=[ph1])
        chart = GanttChart([project], JAN_1, JAN_31)

        assert chart.toggle("Ph1") is False
        assert row_ids(chart) == ["P", "Ph1"]
        assert chart.toggle("Ph1") is True
        assert row_ids(chart) == ["P", "Ph1", "T1"]

    def test_collapsed_row_shows_closed_chevron(self, chart: GanttChart) -> None:
        chart.toggle("Ph1")
        row = chart.render().row("Ph1")
        assert row is not None and row.has_chevron and not row.expanded

    def test_toggle_without_children(self, chart: GanttChart) -> None:
        assert chart.toggle("T1") is None
        assert chart.toggle("missing") is None

    def test_expansion_survives_set_tasks(
        self, chart: GanttChart, forest: list[TimelineTask]
    ) -> None:
        chart.toggle("Ph1")
        chart.set_tasks(copy.deepcopy(forest))
        assert "T1" not in row_ids(chart)

    def test_new_containers_are_not_auto_expanded(self, chart: GanttChart) -> None:
        """Expansion is seeded once at mount."""
        late = make_task(
            "Late", JAN_1, date(2025, 1, 5), kind=TaskKind.PHASE,
            children=[make_task("L1", JAN_1, date(2025, 1, 2))],
        )
        chart.set_tasks([*chart.tasks, late])
        assert row_ids(chart)[-1] == "Late"


class TestHover:
    """Test hover affordances."""

    def test_hovered_task_shows_handles(self, chart: GanttChart) -> None:
        chart.hover("T1")
        row = chart.render().row("T1")
        assert row is not None
        assert row.hovered and row.show_drag_handle and row.show_resize_handles

    def test_hovered_container_has_no_handles(self, chart: GanttChart) -> None:
        chart.hover("Ph1")
        row = chart.render().row("Ph1")
        assert row is not None
        assert row.hovered and not row.show_drag_handle and not row.show_resize_handles

    def test_hover_clears(self, chart: GanttChart) -> None:
        chart.hover("T1")
        chart.hover(None)
        assert not any(row.hovered for row in chart.render().rows)


class TestChartReorder:
    """Test drag-and-drop through the chart."""

    def test_drop_on_sibling(
        self, chart: GanttChart, calls: dict[str, list[tuple[Any, ...]]]
    ) -> None:
        chart.drag_start("T1")
        chart.drag_over("T2")
        chart.drop("T2")
        chart.drag_end()

        assert calls["reorder"] == [("T1", 1, "Ph1")]
        assert isinstance(chart.gesture, Idle)

    def test_drag_feedback_flags(self, chart: GanttChart) -> None:
        chart.drag_start("T1")
        chart.drag_over("T3")
        frame = chart.render()

        dragged, target, other = frame.row("T1"), frame.row("T3"), frame.row("T2")
        assert dragged is not None and dragged.is_dragging and not dragged.is_drop_target
        assert target is not None and target.is_drop_target
        assert other is not None and not other.is_dragging and not other.is_drop_target

    def test_hovering_own_row_is_not_a_drop_target(self, chart: GanttChart) -> None:
        chart.drag_start("T1")
        chart.drag_over("T1")
        row = chart.render().row("T1")
        assert row is not None and not row.is_drop_target

    def test_chart_does_not_reorder_itself(
        self, chart: GanttChart, calls: dict[str, list[tuple[Any, ...]]]
    ) -> None:
        chart.drag_start("T1")
        chart.drop("T3")

        assert calls["reorder"] == [("T1", 2, "Ph1")]
        assert row_ids(chart)[2:5] == ["T1", "T2", "T3"]


class TestChartResize:
    """Test bar-edge drags through the chart."""

    def test_right_edge_by_three_day_widths(
        self,
        chart: GanttChart,
        events: DocumentEvents,
        calls: dict[str, list[tuple[Any, ...]]],
    ) -> None:
        # 400 px over 30 days
        day = 400 / 30
        chart.resize_start("T2", ResizeEdge.END, 500)
        events.pointer_move(500 + 3 * day)

        row = chart.render().row("T2")
        assert row is not None and row.is_resizing
        assert row.end_date == date(2025, 1, 18)

        events.pointer_up(500 + 3 * day)
        assert calls["dates"] == [("T2", date(2025, 1, 10), date(2025, 1, 18))]

        row = chart.render().row("T2")
        assert row is not None and not row.is_resizing
        assert row.end_date == date(2025, 1, 15)

    def test_half_day_rounds_up(
        self,
        chart: GanttChart,
        events: DocumentEvents,
        calls: dict[str, list[tuple[Any, ...]]],
    ) -> None:
        chart.resize_start("T2", ResizeEdge.END, 0)
        events.pointer_move(1.5 * 400 / 30)
        events.pointer_up()
        assert calls["dates"] == [("T2", date(2025, 1, 10), date(2025, 1, 17))]

    def test_start_edge_never_passes_end(
        self,
        chart: GanttChart,
        events: DocumentEvents,
        calls: dict[str, list[tuple[Any, ...]]],
    ) -> None:
        chart.resize_start("T1", ResizeEdge.START, 0)
        events.pointer_move(1000)
        events.pointer_up()

        ((_task, start, end),) = calls["dates"]
        assert start < end

    def test_cancel_gesture(
        self,
        chart: GanttChart,
        events: DocumentEvents,
        calls: dict[str, list[tuple[Any, ...]]],
    ) -> None:
        chart.resize_start("T1", ResizeEdge.END, 0)
        events.pointer_move(40)
        chart.cancel_gesture()
        events.pointer_up()

        assert calls["dates"] == []
        assert events.listener_count() == 0

    def test_close_mid_resize_releases_listeners(
        self,
        chart: GanttChart,
        events: DocumentEvents,
        calls: dict[str, list[tuple[Any, ...]]],
    ) -> None:
        chart.resize_start("T1", ResizeEdge.END, 0)
        assert events.listener_count() == 3

        chart.close()

        assert chart.closed
        assert events.listener_count() == 0
        events.pointer_up()
        assert calls["dates"] == []

    def test_context_manager_closes(
        self, forest: list[TimelineTask], events: DocumentEvents
    ) -> None:
        with GanttChart(forest, JAN_1, JAN_31, events=events) as chart:
            chart.resize_start("T3", ResizeEdge.START, 0)
        assert events.listener_count() == 0

    def test_private_event_source_by_default(self, forest: list[TimelineTask]) -> None:
        chart = GanttChart(forest, JAN_1, JAN_31)
        assert isinstance(chart.events, DocumentEvents)
        assert chart.resize_start("T1", "end", 0)
        chart.events.pointer_up()  # type: ignore[attr-defined]
        assert isinstance(chart.gesture, Idle)

    def test_resize_on_degenerate_viewport_does_not_move(
        self, forest: list[TimelineTask], events: DocumentEvents
    ) -> None:
        seen: list[tuple[Any, ...]] = []
        chart = GanttChart(
            forest, JAN_1, JAN_1, events=events, on_task_date_change=lambda *a: seen.append(a)
        )
        chart.resize_start("T1", ResizeEdge.END, 0)
        events.pointer_move(500)
        events.pointer_up()
        assert seen == [("T1", date(2025, 1, 6), date(2025, 1, 10))]
