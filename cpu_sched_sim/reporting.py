from __future__ import annotations

from typing import Iterable, List, Optional

from rich import box
from rich.table import Table

from .models import Process, ScheduleResult


def _fmt(value: Optional[int]) -> str:
    return "-" if value is None else str(value)


def build_workload_table(processes: List[Process]) -> Table:
    """
    The current workload before any simulation.
    """
    table = Table(
        title="Current processes",
        caption=f"Total processes: {len(processes)}",
        box=box.SIMPLE_HEAVY,
    )
    table.add_column("Process", justify="center")
    table.add_column("Arrival", justify="right")
    table.add_column("Burst", justify="right")
    table.add_column("Priority", justify="center")

    for p in processes:
        table.add_row(p.name, str(p.arrival_time), str(p.burst_time), _fmt(p.priority))
    return table


def build_result_table(result: ScheduleResult) -> Table:
    headers = [
        "Process",
        "Arrival",
        "Burst",
        "Completion",
        "Turnaround",
        "Waiting",
        "Response",
    ]

    table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h == "Process" else "right"
        table.add_column(h, justify=justify)

    for p in result.processes:
        table.add_row(
            p.name,
            str(p.arrival_time),
            str(p.burst_time),
            _fmt(p.completion_time),
            _fmt(p.turnaround_time),
            _fmt(p.waiting_time),
            _fmt(p.response_time),
        )
    return table


def build_summary_table(result: ScheduleResult) -> Table:
    table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    table.add_column("Metric")
    table.add_column("Value", justify="right")

    system = result.system
    if system is None:
        return table

    table.add_row("Avg waiting", f"{system.avg_waiting:.2f}")
    table.add_row("Avg turnaround", f"{system.avg_turnaround:.2f}")
    table.add_row("Avg response", f"{system.avg_response:.2f}")
    table.add_row("Throughput (proc/time)", f"{system.throughput:.3f}")
    if system.makespan > 0:
        table.add_row("CPU utilization", f"{system.cpu_utilization:.2f}%")
    if not result.completed:
        unfinished = ", ".join(p.name for p in result.incomplete)
        table.add_row("Incomplete", f"[red]{unfinished} (limit {result.time_limit})[/red]")
    return table


def build_comparison_table(results: Iterable[ScheduleResult], title: str = "Algorithm comparison") -> Table:
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("Algorithm")
    table.add_column("Quantum", justify="right")
    table.add_column("Avg waiting", justify="right")
    table.add_column("Avg turnaround", justify="right")
    table.add_column("Avg response", justify="right")
    table.add_column("CPU util.", justify="right")

    for result in results:
        system = result.system
        name = result.algorithm if result.completed else f"{result.algorithm} (incomplete)"
        table.add_row(
            name,
            "" if result.quantum is None else str(result.quantum),
            f"{system.avg_waiting:.2f}",
            f"{system.avg_turnaround:.2f}",
            f"{system.avg_response:.2f}",
            f"{system.cpu_utilization:.1f}%",
        )
    return table
