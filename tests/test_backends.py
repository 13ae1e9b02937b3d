"""Tests for the text and SVG chart backends."""

from __future__ import annotations

from datetime import date

import pytest

from ganttline.backends import SvgBackend, TextBackend
from ganttline.chart import GanttChart
from ganttline.models import ChartFrame, TimelineTask
from tests.conftest import make_task


def bar_cells(output: str, name: str) -> str:
    """The timeline part of the text row whose label ends with ``name``."""
    for line in output.splitlines():
        label, _, cells = line.partition(" |")
        if label.strip().endswith(name):
            return cells
    raise AssertionError(f"no row for {name}")


@pytest.fixture
def chart(forest: list[TimelineTask]) -> GanttChart:
    return GanttChart(forest, date(2025, 1, 1), date(2025, 1, 31), today=lambda: date(2025, 1, 16))


@pytest.fixture
def frame(chart: GanttChart) -> ChartFrame:
    return chart.render()


class TestTextBackend:
    """Test terminal rendering."""

    def test_header(self, frame: ChartFrame) -> None:
        first = TextBackend(width=30).render(frame).splitlines()[0]
        assert first.startswith("TASK NAME")
        assert first.endswith("|Jan 2025")

    def test_bars_and_today(self, frame: ChartFrame) -> None:
        output = TextBackend(width=30).render(frame)

        assert bar_cells(output, "T1") == "     ====      |"
        assert bar_cells(output, "T2") == "         ###== |"

    def test_chevrons_and_indent(self, chart: GanttChart) -> None:
        chart.toggle("Ph1")
        lines = TextBackend(width=30).render(chart.render()).splitlines()

        assert lines[2].startswith("v P")
        assert lines[3].startswith("  > Ph1")
        assert lines[4].startswith("  v Ph2")
        assert lines[5].startswith("      T4")

    def test_drag_markers(self, chart: GanttChart) -> None:
        chart.drag_start("T1")
        chart.drag_over("T3")
        output = TextBackend(width=30).render(chart.render())

        assert "T1 (moving)" in output
        assert "T3 <- drop" in output

    def test_bars_outside_viewport_are_clipped(self) -> None:
        tasks = [
            make_task("early", date(2024, 11, 1), date(2024, 11, 20)),
            make_task("wide", date(2024, 12, 1), date(2025, 3, 1)),
        ]
        frame = GanttChart(tasks, date(2025, 1, 1), date(2025, 1, 31)).render()
        output = TextBackend(width=30).render(frame)

        assert bar_cells(output, "early") == ""
        assert bar_cells(output, "wide") == "=" * 30

    def test_long_names_truncated(self) -> None:
        task = make_task("x" * 60, date(2025, 1, 1), date(2025, 1, 5))
        frame = GanttChart([task], date(2025, 1, 1), date(2025, 1, 31)).render()
        row = TextBackend(width=30, sidebar=20).render(frame).splitlines()[2]

        assert row.index(" |") == 20
        assert row[19] == "~"

    def test_empty(self) -> None:
        frame = GanttChart([], date(2025, 1, 1), date(2025, 1, 31)).render()
        assert "(no tasks)" in TextBackend().render(frame)


class TestSvgBackend:
    """Test SVG rendering."""

    def test_document(self, frame: ChartFrame) -> None:
        svg = SvgBackend().render(frame)

        assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg" width="700"')
        assert svg.rstrip().endswith("</svg>")
        assert 'clipPath id="timeline-clip"' in svg
        assert ">Jan 2025<" in svg
        assert ">1/29<" in svg

    def test_rows_and_today(self, frame: ChartFrame) -> None:
        svg = SvgBackend().render(frame)

        for task_id in ["P", "Ph1", "T1", "T2", "T3", "Ph2", "T4"]:
            assert f'data-task-id="{task_id}"' in svg
        assert ">TODAY<" in svg
        assert svg.count('class="grid"') == 5

    def test_bar_position(self, frame: ChartFrame) -> None:
        svg = SvgBackend().render(frame)
        # T2 starts 9 of 30 days in: 300 + 0.3 * 400
        assert '<rect x="420" y="' in svg

    def test_no_today_outside_viewport(self, forest: list[TimelineTask]) -> None:
        frame = GanttChart(
            forest, date(2025, 1, 1), date(2025, 1, 31), today=lambda: date(2025, 2, 1)
        ).render()
        assert "TODAY" not in SvgBackend().render(frame)

    def test_names_escaped(self) -> None:
        task = TimelineTask(
            id="a", name="R&D <core>", start_date=date(2025, 1, 2), end_date=date(2025, 1, 4)
        )
        svg = SvgBackend().render(GanttChart([task], date(2025, 1, 1), date(2025, 1, 31)).render())

        assert "R&amp;D &lt;core&gt;" in svg
        assert "<core>" not in svg

    def test_hover_shows_resize_handles(self, chart: GanttChart) -> None:
        chart.hover("T1")
        assert SvgBackend().render(chart.render()).count('class="resize-handle"') == 2

    def test_dragged_row_dimmed(self, chart: GanttChart) -> None:
        chart.drag_start("T1")
        svg = SvgBackend().render(chart.render())
        assert '<g class="row" data-task-id="T1" opacity="0.4">' in svg
