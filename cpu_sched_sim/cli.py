from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from .algorithms import ALGORITHMS, QUANTUM_ALGORITHMS, run_algorithm
from .config import (
    DEFAULT_QUANTUM,
    DEFAULT_TIME_BUFFER,
    MAX_ARRIVAL,
    MAX_BURST,
    MAX_NAME_LENGTH,
    MAX_QUANTUM,
    PRIORITY_RANGE,
    SimulationConfig,
)
from .errors import SchedulerError
from .gantt import build_rich_gantt
from .logging_setup import configure_logging
from .models import ScheduleResult
from .reporting import (
    build_comparison_table,
    build_result_table,
    build_summary_table,
    build_workload_table,
)
from .session import Session
from .workload_io import load_workload

logger = logging.getLogger(__name__)

MENU_ALGORITHMS = {
    "5": "fcfs",
    "6": "sjf",
    "7": "srtf",
    "8": "priority",
    "9": "priority-p",
    "10": "rr",
}


def _non_negative_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {raw!r}")
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0 (got {value})")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpu-sched-sim",
        description="CPU scheduling simulator (FCFS, SJF, SRTF, Priority, preemptive Priority, RR).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log scheduling decisions (DEBUG level).",
    )
    parser.add_argument(
        "--time-buffer",
        type=_non_negative_int,
        default=DEFAULT_TIME_BUFFER,
        help=f"Extra time units allowed past sum(burst)+last arrival before a run is cut off (default: {DEFAULT_TIME_BUFFER}).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        choices=list(ALGORITHMS),
        help="Algorithm to use.",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (ignored by the other algorithms).",
    )
    run_parser.add_argument(
        "--no-gantt",
        action="store_true",
        help="Skip the Gantt chart.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        choices=list(ALGORITHMS),
        default=list(ALGORITHMS),
        help="Algorithms to compare (default: all).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )

    menu_parser = subparsers.add_parser(
        "menu",
        help="Interactive menu to build a workload and run algorithms on it.",
    )
    menu_parser.add_argument(
        "--workload",
        "-w",
        default=None,
        help="Optional workload file to preload.",
    )

    return parser


def _print_result(result: ScheduleResult, console: Console, gantt: bool = True) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    if not result.completed:
        console.print("[yellow]Warning: not all processes could be completed before the time limit.[/yellow]")

    console.print()

    if gantt:
        panel, time_marks = build_rich_gantt(result.timeline)
        console.print(panel)
        if time_marks:
            console.print(time_marks)
        console.print()

    console.print(build_result_table(result))
    console.print()
    console.print(build_summary_table(result))


def _prompt_int(console: Console, prompt: str, low: int, high: int) -> int:
    while True:
        raw = input(prompt).strip()
        try:
            value = int(raw)
        except ValueError:
            console.print("[red]Error: Invalid input. Please enter a valid integer.[/red]")
            continue
        if low <= value <= high:
            return value
        console.print(f"[red]Error: Value must be between {low} and {high}[/red]")


def _prompt_name(console: Console, prompt: str) -> str:
    # Only the first whitespace-separated word is used as the name.
    while True:
        words = input(prompt).split()
        value = words[0] if words else ""
        if value and len(value) <= MAX_NAME_LENGTH:
            return value
        console.print(f"[red]Error: Name must be 1-{MAX_NAME_LENGTH} characters long.[/red]")


def _menu_add_process(session: Session, console: Console) -> None:
    console.print("\n[bold]--- Add New Process ---[/bold]")
    name = _prompt_name(console, f"Enter Process Name (1-{MAX_NAME_LENGTH} chars): ")
    if session.has_name(name):
        console.print("[yellow]Warning: A process with this name already exists.[/yellow]")
    arrival = _prompt_int(console, f"Enter Arrival Time (0-{MAX_ARRIVAL}): ", 0, MAX_ARRIVAL)
    burst = _prompt_int(console, f"Enter Burst Time (1-{MAX_BURST}): ", 1, MAX_BURST)
    low, high = PRIORITY_RANGE
    priority = _prompt_int(console, f"Enter Priority ({low}-{high}, lower = higher priority): ", low, high)
    session.add_process(name, arrival, burst, priority)
    console.print(f"[green]Process '{name}' added successfully![/green]")


def _menu_clear(session: Session, console: Console) -> None:
    if not len(session):
        console.print("No processes to clear.")
        return
    confirm = input("Are you sure you want to clear all processes? (y/n): ").strip().lower()
    if confirm == "y":
        session.clear()
        console.print("[green]All processes cleared successfully![/green]")
    else:
        console.print("Operation cancelled.")


def _menu_run(session: Session, console: Console, algorithm: str) -> None:
    if not len(session):
        console.print("[red]Error: No processes available! Please add processes first.[/red]")
        return
    quantum = None
    if algorithm in QUANTUM_ALGORITHMS:
        quantum = _prompt_int(console, f"Enter Time Quantum (1-{MAX_QUANTUM}): ", 1, MAX_QUANTUM)
    if algorithm.startswith("priority"):
        console.print("[dim]Note: Lower priority number = Higher priority[/dim]")
    result = session.run(algorithm, quantum=quantum)
    _print_result(result, console)


def _interactive_menu(session: Session, console: Console) -> None:
    console.print("\n[bold cyan]CPU Scheduling Algorithms Simulator[/bold cyan]")

    while True:
        console.print("\n[bold]============ MENU ============[/bold]")
        console.print("  [yellow]1[/yellow].  Add Process")
        console.print("  [yellow]2[/yellow].  Display All Processes")
        console.print("  [yellow]3[/yellow].  Load Sample Data")
        console.print("  [yellow]4[/yellow].  Clear All Processes")
        console.print("  [yellow]5[/yellow].  Run FCFS")
        console.print("  [yellow]6[/yellow].  Run SJF (Non-Preemptive)")
        console.print("  [yellow]7[/yellow].  Run SRTF (Preemptive SJF)")
        console.print("  [yellow]8[/yellow].  Run Priority (Non-Preemptive)")
        console.print("  [yellow]9[/yellow].  Run Priority (Preemptive)")
        console.print("  [yellow]10[/yellow]. Run Round Robin")
        console.print("  [yellow]0[/yellow].  Exit")

        try:
            choice = input("Enter choice: ").strip()
            if choice == "0":
                console.print("Thank you for using the CPU Scheduling Simulator!")
                return
            elif choice == "1":
                _menu_add_process(session, console)
            elif choice == "2":
                if not len(session):
                    console.print("[red]Error: No processes available! Please add processes first.[/red]")
                else:
                    console.print(build_workload_table(session.processes))
            elif choice == "3":
                session.load_sample()
                console.print("[green]Sample processes loaded successfully![/green]")
                console.print(build_workload_table(session.processes))
            elif choice == "4":
                _menu_clear(session, console)
            elif choice in MENU_ALGORITHMS:
                _menu_run(session, console, MENU_ALGORITHMS[choice])
            else:
                console.print("[red]Invalid selection.[/red]")
        except SchedulerError as exc:
            console.print(f"[red]Error: {escape(str(exc))}[/red]")
        except EOFError:
            # Input ran out mid-prompt; leave the menu like an explicit exit.
            console.print()
            return


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose)
    console = Console()
    config = SimulationConfig(time_buffer=args.time_buffer)

    try:
        if args.command == "run":
            processes = load_workload(Path(args.workload))
            result = run_algorithm(args.algorithm, processes, quantum=args.quantum, config=config)
            _print_result(result, console, gantt=not args.no_gantt)
            return 0

        if args.command == "compare":
            processes = load_workload(Path(args.workload))
            results: List[ScheduleResult] = []
            for alg in args.algorithms:
                q: Optional[int] = args.quantum if alg in QUANTUM_ALGORITHMS else None
                results.append(run_algorithm(alg, processes, quantum=q, config=config))
            console.print(build_comparison_table(results, title=f"Algorithm comparison: {args.workload}"))
            return 0

        if args.command == "menu":
            session = Session(config=config)
            if args.workload:
                session.load_file(args.workload)
            _interactive_menu(session, console)
            return 0
    except (SchedulerError, ValueError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
