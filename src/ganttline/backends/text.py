"""Plain-text chart rendering for terminals."""

from __future__ import annotations

import math

from ganttline.models import ChartFrame, RowView

SIDEBAR_CHARS = 32
INDENT_CHARS = 2

CHEVRON_EXPANDED = "v"
CHEVRON_COLLAPSED = ">"
DONE_CHAR = "#"
TODO_CHAR = "="
MILESTONE_CHAR = "*"
TODAY_CHAR = "|"


class TextBackend:
    """Render a frame as fixed-width text.

    The timeline is squeezed into ``width`` character cells. Bars are drawn
    with ``#`` for the completed share and ``=`` for the rest. Anything
    outside the viewport is clipped at the edges.
    """

    name = "text"

    def __init__(self, width: int = 72, sidebar: int = SIDEBAR_CHARS) -> None:
        self.width = width
        self.sidebar = sidebar

    def render(self, frame: ChartFrame) -> str:
        lines = [self._header_line(frame), "-" * (self.sidebar + 2 + self.width)]
        today_col = self._today_column(frame)
        lines.extend(self._row_line(row, today_col) for row in frame.rows)
        if not frame.rows:
            lines.append("(no tasks)".ljust(self.sidebar) + " |")
        return "\n".join(lines) + "\n"

    def _header_line(self, frame: ChartFrame) -> str:
        cells = [" "] * self.width
        week_index = 0
        for bucket in frame.headers:
            if frame.total_weeks:
                col = week_index * self.width // frame.total_weeks
                for offset, char in enumerate(bucket.label):
                    if col + offset < self.width:
                        cells[col + offset] = char
            week_index += len(bucket.weeks)
        return "TASK NAME".ljust(self.sidebar) + " |" + "".join(cells).rstrip()

    def _today_column(self, frame: ChartFrame) -> int | None:
        if frame.today is None:
            return None
        return min(self.width - 1, int(frame.today.percent * self.width / 100))

    def _label(self, row: RowView) -> str:
        if row.has_chevron:
            chevron = CHEVRON_EXPANDED if row.expanded else CHEVRON_COLLAPSED
        else:
            chevron = " "
        label = f"{' ' * (row.depth * INDENT_CHARS)}{chevron} {row.name}"
        if row.is_dragging:
            label += " (moving)"
        elif row.is_drop_target:
            label += " <- drop"
        if len(label) > self.sidebar:
            label = label[: self.sidebar - 1] + "~"
        return label.ljust(self.sidebar)

    def _row_line(self, row: RowView, today_col: int | None) -> str:
        cells = [" "] * self.width
        if today_col is not None:
            cells[today_col] = TODAY_CHAR

        # Rounded so bars on exact day boundaries land on whole cells
        left = round(row.bar.left_percent * self.width / 100, 6)
        right = round(row.bar.right_percent * self.width / 100, 6)
        if row.bar.width_percent == 0:
            col = math.floor(left)
            if 0 <= col < self.width:
                cells[col] = MILESTONE_CHAR
        elif right > 0 and left < self.width:
            first = max(0, math.floor(left))
            last = min(self.width, max(math.ceil(right), first + 1))
            done_until = left + (right - left) * row.progress / 100
            for col in range(first, last):
                cells[col] = DONE_CHAR if col < done_until else TODO_CHAR

        return f"{self._label(row)} |{''.join(cells).rstrip()}"
