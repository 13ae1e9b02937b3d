"""SVG chart rendering."""

from __future__ import annotations

from html import escape

from ganttline.geometry import week_label
from ganttline.models import ChartFrame, RowView

HEADER_HEIGHT = 56
MONTH_ROW_HEIGHT = 28
BAR_HEIGHT = 28

BACKGROUND = "#181c28"
PANEL = "#1f2330"
BORDER = "#3d4457"
MUTED_TEXT = "#838a9c"
TEXT = "#e4e6eb"
PHASE_TEXT = "#0394ff"
TODAY_COLOR = "#ef4444"

_STYLE = f"""
text {{ font-family: sans-serif; font-size: 12px; fill: {TEXT}; }}
.muted {{ fill: {MUTED_TEXT}; font-size: 11px; }}
.project {{ font-weight: 600; fill: #ffffff; }}
.phase {{ font-weight: 500; fill: {PHASE_TEXT}; }}
.grid {{ stroke: {BORDER}; stroke-opacity: 0.2; }}
.drop-target {{ stroke: {PHASE_TEXT}; stroke-width: 2; }}
.today {{ stroke: {TODAY_COLOR}; stroke-width: 2; }}
.today-label {{ fill: #ffffff; font-size: 10px; font-weight: 500; }}
""".strip()


def _num(value: float) -> str:
    """Compact number formatting for attributes."""
    return f"{value:.2f}".rstrip("0").rstrip(".")


class SvgBackend:
    """Render a frame as a standalone SVG document.

    Uses the frame's pixel layout directly: a sidebar of task names, one
    column per week, and bars positioned by their percentage geometry.
    Bars running outside the viewport are clipped to the timeline area.
    """

    name = "svg"

    def __init__(self, row_height: int = 48) -> None:
        self.row_height = row_height

    def render(self, frame: ChartFrame) -> str:
        height = HEADER_HEIGHT + len(frame.rows) * self.row_height
        width = frame.total_width
        lines = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
            f'viewBox="0 0 {width} {height}">',
            f"<style>{_STYLE}</style>",
            "<defs>",
            f'  <clipPath id="timeline-clip"><rect x="{frame.sidebar_width}" y="0" '
            f'width="{frame.timeline_width}" height="{height}"/></clipPath>',
            "</defs>",
            f'<rect x="0" y="0" width="{width}" height="{height}" fill="{BACKGROUND}"/>',
        ]
        lines.extend(self._header(frame))
        lines.extend(self._grid(frame, height))
        for position, row in enumerate(frame.rows):
            lines.extend(self._row(frame, row, HEADER_HEIGHT + position * self.row_height))
        lines.extend(self._today(frame, height))
        lines.append("</svg>")
        return "\n".join(lines) + "\n"

    def _header(self, frame: ChartFrame) -> list[str]:
        cw = frame.column_width
        x0 = frame.sidebar_width
        lines = [
            f'<rect x="0" y="0" width="{frame.total_width}" height="{HEADER_HEIGHT}" fill="{PANEL}"/>',
            f'<text class="muted" x="12" y="{HEADER_HEIGHT - 20}">TASK NAME</text>',
        ]
        column = 0
        for bucket in frame.headers:
            x = x0 + column * cw
            lines.append(f'<text x="{x + 12}" y="18">{escape(bucket.label)}</text>')
            for week in bucket.weeks:
                wx = x0 + column * cw
                lines.append(
                    f'<text class="muted" x="{wx + cw // 2}" y="{HEADER_HEIGHT - 10}" '
                    f'text-anchor="middle">{week_label(week)}</text>'
                )
                column += 1
        lines.append(
            f'<line x1="0" y1="{HEADER_HEIGHT}" x2="{frame.total_width}" y2="{HEADER_HEIGHT}" '
            f'stroke="{BORDER}"/>'
        )
        return lines

    def _grid(self, frame: ChartFrame, height: int) -> list[str]:
        x0 = frame.sidebar_width
        return [
            f'<line class="grid" x1="{_num(x0 + line.offset_px)}" y1="{HEADER_HEIGHT}" '
            f'x2="{_num(x0 + line.offset_px)}" y2="{height}"/>'
            for line in frame.grid_lines
        ]

    def _row(self, frame: ChartFrame, row: RowView, y: int) -> list[str]:
        lines: list[str] = []
        mid = y + self.row_height // 2
        css = {"project": "project", "phase": "phase"}.get(row.kind.value, "")
        opacity = "0.4" if row.is_dragging else "1"

        lines.append(f'<g class="row" data-task-id="{escape(row.task_id)}" opacity="{opacity}">')
        if row.is_drop_target:
            lines.append(
                f'  <line class="drop-target" x1="0" y1="{y}" x2="{frame.total_width}" y2="{y}"/>'
            )
        if row.has_chevron:
            glyph = "▾" if row.expanded else "▸"
            lines.append(f'  <text class="muted" x="{row.indent_px}" y="{mid + 4}">{glyph}</text>')
        label_x = row.indent_px + 16
        class_attr = f' class="{css}"' if css else ""
        lines.append(
            f'  <text{class_attr} x="{label_x}" y="{mid + 4}">{escape(row.name)}</text>'
        )

        span = frame.timeline_width
        bar_x = frame.sidebar_width + row.bar.left_percent * span / 100
        bar_w = row.bar.width_percent * span / 100
        bar_y = mid - BAR_HEIGHT // 2
        bar_opacity = "1" if row.hovered else "0.85"
        title = f"{row.name}\n{row.start_date} - {row.end_date}\nProgress: {_num(row.progress)}%"
        lines.append('  <g clip-path="url(#timeline-clip)">')
        lines.append(
            f'    <rect x="{_num(bar_x)}" y="{bar_y}" width="{_num(bar_w)}" height="{BAR_HEIGHT}" '
            f'rx="2" fill="{escape(row.color)}" opacity="{bar_opacity}">'
            f"<title>{escape(title)}</title></rect>"
        )
        if row.progress:
            lines.append(
                f'    <rect x="{_num(bar_x)}" y="{bar_y}" width="{_num(bar_w * row.progress / 100)}" '
                f'height="{BAR_HEIGHT}" rx="2" fill="#000000" fill-opacity="0.15"/>'
            )
        if row.show_resize_handles:
            for hx in (bar_x - 2, bar_x + bar_w - 2):
                lines.append(
                    f'    <rect class="resize-handle" x="{_num(hx)}" y="{bar_y}" width="4" '
                    f'height="{BAR_HEIGHT}" fill="#ffffff" fill-opacity="0.3"/>'
                )
        lines.append("  </g>")
        lines.append("</g>")
        return lines

    def _today(self, frame: ChartFrame, height: int) -> list[str]:
        if frame.today is None:
            return []
        x = _num(frame.sidebar_width + frame.today.offset_px)
        return [
            f'<line class="today" x1="{x}" y1="0" x2="{x}" y2="{height}"/>',
            f'<rect x="{_num(float(x) - 22)}" y="16" width="44" height="16" rx="3" fill="{TODAY_COLOR}"/>',
            f'<text class="today-label" x="{x}" y="28" text-anchor="middle">TODAY</text>',
        ]
