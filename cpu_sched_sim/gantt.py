from __future__ import annotations

from typing import Dict, List, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def _layout(slices: List[ScheduledSlice]) -> List[Tuple[int, ScheduledSlice]]:
    """
    Pair each slice (sorted by start) with the idle gap that precedes it.
    """
    ordered = sorted(slices, key=lambda s: (s.start_time, s.end_time))
    layout = []
    last_time = 0
    for sl in ordered:
        layout.append((max(0, sl.start_time - last_time), sl))
        last_time = sl.end_time
    return layout


def _time_marks(layout: List[Tuple[int, ScheduledSlice]]) -> str:
    marks = "0"
    for gap, sl in layout:
        if gap > 0:
            marks += f"{sl.start_time:>3}"
        marks += f"{sl.end_time:>3}"
    return marks


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart. Idle time shows as dots.
    """
    if not slices:
        return "(no execution)"

    layout = _layout(slices)
    line = "|"
    labels = " "

    for gap, sl in layout:
        if gap > 0:
            line += "." * gap
            labels += " " * gap
        width = max(1, sl.duration)
        line += "=" * width
        labels += sl.name[:width].ljust(width)

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            labels.rstrip(),
            _time_marks(layout),
        ]
    )


def build_rich_gantt(slices: List[ScheduledSlice]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not slices:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            pid_to_color[pid] = COLORS[len(pid_to_color) % len(COLORS)]
        return pid_to_color[pid]

    layout = _layout(slices)
    timeline = Text()
    labels = Text()

    for gap, sl in layout:
        if gap > 0:
            timeline.append(" " * gap)
            labels.append(" " * gap)

        width = max(1, sl.duration)
        timeline.append(" " * width, style=f"on {pid_color(sl.pid)}")
        labels.append(sl.name[:width].ljust(width), style="bold")

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, _time_marks(layout)
