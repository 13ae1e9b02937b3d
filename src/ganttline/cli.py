"""Command-line interface for Ganttline."""

from __future__ import annotations

from datetime import date
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from . import context
from .backends import ChartBackend, SvgBackend, TextBackend
from .chart import GanttChart
from .config import GanttConfig, discover_config
from .events import DocumentEvents
from .exceptions import GanttlineError
from .gestures import ResizeEdge
from .loader import Timeline, load_timeline, write_timeline
from .logger import setup_logger
from .store import TaskStore

app = typer.Typer(
    name="ganttline",
    help="Interactive Gantt timeline engine - render task forests and replay edit gestures",
    add_completion=False,
)


class OutputFormat(str, Enum):
    TEXT = "text"
    SVG = "svg"


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show declined gestures, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to config file (default: ganttline.yaml)"),
    ] = None,
    today: Annotated[
        str | None,
        typer.Option("--today", help="Pretend today is this date (YYYY-MM-DD)"),
    ] = None,
) -> None:
    """Global options for ganttline commands."""
    setup_logger(verbose)
    context.set_config_path(config)
    context.set_today(_parse_date_option(today, "--today"))


def _parse_date_option(date_str: str | None, option_name: str) -> date | None:
    if date_str is None:
        return None
    try:
        return date.fromisoformat(date_str)
    except ValueError:
        typer.echo(
            f"Error: Invalid {option_name} format '{date_str}'. Use YYYY-MM-DD", err=True
        )
        raise typer.Exit(1) from None


def _load(file: Path) -> tuple[Timeline, GanttConfig]:
    try:
        timeline = load_timeline(file, today=context.get_today())
        config = discover_config(file).gantt
    except GanttlineError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    return timeline, config


def _build_chart(
    timeline: Timeline,
    config: GanttConfig,
    store: TaskStore,
    start: str | None,
    end: str | None,
    events: DocumentEvents | None = None,
) -> GanttChart:
    viewport_start = _parse_date_option(start, "--start") or timeline.viewport_start
    viewport_end = _parse_date_option(end, "--end") or timeline.viewport_end
    if viewport_end < viewport_start:
        typer.echo("Error: --end must not be before --start", err=True)
        raise typer.Exit(1)

    chart = GanttChart(
        store.tasks,
        viewport_start,
        viewport_end,
        on_task_reorder=store.apply_reorder,
        on_task_date_change=store.apply_date_change,
        config=config,
        events=events,
        today=context.get_today,
    )
    store.subscribe(chart.set_tasks)
    return chart


def _write_output(content: str, output: Path | None, what: str) -> None:
    if output:
        output.write_text(content, encoding="utf-8")
        typer.echo(f"{what} written to {output}")
    else:
        typer.echo(content, nl=False)


StartOption = Annotated[
    str | None, typer.Option("--start", help="Viewport start date (YYYY-MM-DD)")
]
EndOption = Annotated[str | None, typer.Option("--end", help="Viewport end date (YYYY-MM-DD)")]
CollapseOption = Annotated[
    list[str] | None,
    typer.Option("--collapse", help="Collapse this project/phase id (repeatable)"),
]


@app.command()
def render(  # noqa: PLR0913 - CLI command needs multiple options
    file: Annotated[Path, typer.Argument(help="Path to the timeline YAML file")] = Path(
        "timeline.yaml"
    ),
    *,
    start: StartOption = None,
    end: EndOption = None,
    output_format: Annotated[
        OutputFormat, typer.Option("--format", "-f", help="Output format")
    ] = OutputFormat.TEXT,
    collapse: CollapseOption = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Render the timeline as text or SVG."""
    timeline, config = _load(file)
    store = TaskStore(timeline.tasks)
    with _build_chart(timeline, config, store, start, end) as chart:
        for task_id in collapse or []:
            if chart.toggle(task_id) is None:
                typer.echo(f"Warning: '{task_id}' has no children to collapse", err=True)
        frame = chart.render()

    backend: ChartBackend
    if output_format is OutputFormat.SVG:
        backend = SvgBackend(row_height=config.row_height)
    else:
        backend = TextBackend(width=config.text_width)
    _write_output(backend.render(frame), output, "Timeline")


@app.command()
def rows(
    file: Annotated[Path, typer.Argument(help="Path to the timeline YAML file")] = Path(
        "timeline.yaml"
    ),
    *,
    start: StartOption = None,
    end: EndOption = None,
    collapse: CollapseOption = None,
) -> None:
    """List visible rows with their bar geometry."""
    timeline, config = _load(file)
    store = TaskStore(timeline.tasks)
    with _build_chart(timeline, config, store, start, end) as chart:
        for task_id in collapse or []:
            chart.toggle(task_id)
        frame = chart.render()

    for row in frame.rows:
        typer.echo(
            f"{'  ' * row.depth}{row.task_id}\t{row.kind.value}\t"
            f"{row.start_date}..{row.end_date}\t"
            f"left={row.bar.left_percent:.2f}%\twidth={row.bar.width_percent:.2f}%"
        )


def _save(file: Path, timeline: Timeline, store: TaskStore) -> None:
    timeline.tasks = store.tasks
    write_timeline(file, timeline)
    typer.echo(f"Updated {file}")


@app.command()
def resize(  # noqa: PLR0913 - CLI command needs multiple options
    file: Annotated[Path, typer.Argument(help="Path to the timeline YAML file")],
    task_id: Annotated[str, typer.Argument(help="Task whose bar edge is dragged")],
    *,
    edge: Annotated[ResizeEdge, typer.Option("--edge", help="Bar edge to drag")] = ResizeEdge.END,
    pixels: Annotated[float, typer.Option("--pixels", help="Horizontal drag distance")] = 0.0,
    start: StartOption = None,
    end: EndOption = None,
    write: Annotated[bool, typer.Option("--write", help="Save the result to FILE")] = False,
) -> None:
    """Replay a bar-edge drag and report the committed dates."""
    timeline, config = _load(file)
    store = TaskStore(timeline.tasks, allow_cross_parent=config.allow_cross_parent_reorder)
    events = DocumentEvents()
    with _build_chart(timeline, config, store, start, end, events) as chart:
        if not chart.resize_start(task_id, edge, 0.0):
            typer.echo(f"Error: '{task_id}' is not a resizable task", err=True)
            raise typer.Exit(1)
        events.pointer_move(pixels)
        events.pointer_up(pixels)

    task = store.find(task_id)
    assert task is not None
    typer.echo(f"{task_id}: {task.start_date}..{task.end_date}")
    if write:
        _save(file, timeline, store)


@app.command()
def reorder(
    file: Annotated[Path, typer.Argument(help="Path to the timeline YAML file")],
    task_id: Annotated[str, typer.Argument(help="Task being dragged")],
    target_id: Annotated[str, typer.Argument(help="Task row it is dropped on")],
    *,
    write: Annotated[bool, typer.Option("--write", help="Save the result to FILE")] = False,
) -> None:
    """Replay a row drag-and-drop and report the proposed move."""
    timeline, config = _load(file)
    store = TaskStore(timeline.tasks, allow_cross_parent=config.allow_cross_parent_reorder)
    with _build_chart(timeline, config, store, None, None) as chart:
        if not chart.drag_start(task_id):
            typer.echo(f"Error: '{task_id}' is not a draggable task", err=True)
            raise typer.Exit(1)
        chart.drag_over(target_id)
        request = chart.drop(target_id)
        chart.drag_end()

    if request is None:
        typer.echo("Nothing to do")
        return
    revision = store.revision
    typer.echo(
        f"{request.task_id} -> index {request.new_index} under {request.parent_id or '<root>'}"
    )
    if revision == 0:
        typer.echo("Move rejected by the task store", err=True)
        raise typer.Exit(1)
    if write:
        _save(file, timeline, store)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
