from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, List, Optional, Tuple

from .config import SimulationConfig
from .errors import EmptyWorkloadError
from .metrics import compute_system_metrics, finalize_process, record_dispatch
from .models import Process, ScheduleResult, ScheduledSlice, snapshot_workload

logger = logging.getLogger(__name__)

SelectionKey = Callable[[Process], Tuple]


def _append_slice(timeline: List[ScheduledSlice], p: Process, start_time: int, end_time: int) -> None:
    # Back-to-back runs of the same process collapse into one slice.
    if timeline and timeline[-1].pid == p.pid and timeline[-1].end_time == start_time:
        timeline[-1].end_time = end_time
        return
    timeline.append(ScheduledSlice(pid=p.pid, name=p.name, start_time=start_time, end_time=end_time))


def _priority_rank(p: Process) -> float:
    # Missing priority ranks below every numeric priority.
    return p.priority if p.priority is not None else float("inf")


def _burst_key(p: Process) -> Tuple:
    return (p.burst_time, p.arrival_time, p.pid)


def _remaining_key(p: Process) -> Tuple:
    return (p.remaining_time, p.arrival_time, p.pid)


def _priority_key(p: Process) -> Tuple:
    return (_priority_rank(p), p.arrival_time, p.pid)


def _finish(
    algorithm: str,
    processes: List[Process],
    timeline: List[ScheduledSlice],
    quantum: Optional[int] = None,
    time_limit: Optional[int] = None,
) -> ScheduleResult:
    completed = all(p.is_complete for p in processes)
    if not completed:
        unfinished = ", ".join(p.name for p in processes if not p.is_complete)
        logger.warning(
            "%s stopped at time limit %s before all processes completed (unfinished: %s)",
            algorithm,
            time_limit,
            unfinished,
        )
    result = ScheduleResult(
        algorithm=algorithm,
        quantum=quantum,
        processes=sorted(processes, key=lambda p: p.pid),
        timeline=timeline,
        completed=completed,
        time_limit=time_limit,
    )
    compute_system_metrics(result)
    return result


def schedule_fcfs(
    processes: List[Process],
    quantum: Optional[int] = None,
    config: Optional[SimulationConfig] = None,
) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Arrival ties are broken by PID.
    """
    procs = snapshot_workload(processes)
    processes_sorted = sorted(procs, key=lambda p: (p.arrival_time, p.pid))

    time = 0
    timeline: List[ScheduledSlice] = []

    for p in processes_sorted:
        if time < p.arrival_time:
            logger.debug("FCFS: CPU idle from %d to %d", time, p.arrival_time)
            time = p.arrival_time

        record_dispatch(p, time)
        start_time = time
        time += p.burst_time
        timeline.append(ScheduledSlice(pid=p.pid, name=p.name, start_time=start_time, end_time=time))
        finalize_process(p, time)

    return _finish("FCFS", procs, timeline)


def _run_non_preemptive(processes: List[Process], key: SelectionKey, algorithm: str) -> ScheduleResult:
    """
    At each decision point, among processes that have arrived and are not yet
    completed, run the one with the smallest ``key`` to completion. When none
    has arrived, jump the clock to the next arrival.
    """
    procs = snapshot_workload(processes)
    pending: List[Process] = list(procs)

    time = 0
    timeline: List[ScheduledSlice] = []

    while pending:
        ready = [p for p in pending if p.arrival_time <= time]

        if not ready:
            next_arrival = min(p.arrival_time for p in pending)
            logger.debug("%s: CPU idle from %d to %d", algorithm, time, next_arrival)
            time = next_arrival
            continue

        p = min(ready, key=key)
        logger.debug("%s: t=%d dispatch %s", algorithm, time, p.name)

        record_dispatch(p, time)
        start_time = time
        time += p.burst_time
        timeline.append(ScheduledSlice(pid=p.pid, name=p.name, start_time=start_time, end_time=time))
        finalize_process(p, time)

        pending.remove(p)

    return _finish(algorithm, procs, timeline)


def schedule_sjf(
    processes: List[Process],
    quantum: Optional[int] = None,
    config: Optional[SimulationConfig] = None,
) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    Smallest total burst wins; ties go to the earlier arrival, then the lower PID.
    """
    return _run_non_preemptive(processes, _burst_key, "SJF (non-preemptive)")


def schedule_priority(
    processes: List[Process],
    quantum: Optional[int] = None,
    config: Optional[SimulationConfig] = None,
) -> ScheduleResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. Among ready
    processes, choose the one with the smallest priority; break ties
    by earlier arrival time, then PID.
    """
    return _run_non_preemptive(processes, _priority_key, "Priority (non-preemptive)")


def _run_preemptive(
    processes: List[Process],
    key: SelectionKey,
    algorithm: str,
    config: Optional[SimulationConfig],
) -> ScheduleResult:
    """
    Tick-driven preemptive scheduling: every time unit, the arrived process
    with the smallest ``key`` runs for one unit. The run stops at the
    configured time limit even if work remains.
    """
    config = config or SimulationConfig()
    procs = snapshot_workload(processes)
    time_limit = config.limit_for(procs)

    time = 0
    completed = 0
    timeline: List[ScheduledSlice] = []
    previous: Optional[Process] = None

    while completed < len(procs) and time < time_limit:
        ready = [p for p in procs if p.arrival_time <= time and p.remaining_time > 0]

        if not ready:
            time += 1
            continue

        current = min(ready, key=key)
        if previous is not None and previous is not current and not previous.is_complete:
            logger.debug("%s: t=%d %s preempts %s", algorithm, time, current.name, previous.name)
        previous = current

        record_dispatch(current, time)
        current.remaining_time -= 1
        _append_slice(timeline, current, time, time + 1)
        time += 1

        if current.remaining_time == 0:
            finalize_process(current, time)
            completed += 1

    return _finish(algorithm, procs, timeline, time_limit=time_limit)


def schedule_srtf(
    processes: List[Process],
    quantum: Optional[int] = None,
    config: Optional[SimulationConfig] = None,
) -> ScheduleResult:
    """
    Shortest Remaining Time First (preemptive SJF).
    """
    return _run_preemptive(processes, _remaining_key, "SRTF", config)


def schedule_priority_preemptive(
    processes: List[Process],
    quantum: Optional[int] = None,
    config: Optional[SimulationConfig] = None,
) -> ScheduleResult:
    """
    Priority scheduling (preemptive). A newly arrived process with a smaller
    priority value takes the CPU at the next time unit.
    """
    return _run_preemptive(processes, _priority_key, "Priority (preemptive)", config)


def schedule_rr(
    processes: List[Process],
    quantum: Optional[int] = None,
    config: Optional[SimulationConfig] = None,
) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    The ready queue holds indices into the working copy. Processes that arrive
    during a slice are queued ahead of the process that was just preempted.
    """
    if quantum is None or quantum <= 0:
        raise ValueError("Round Robin requires a positive quantum (use --quantum)")

    config = config or SimulationConfig()
    procs = snapshot_workload(processes)
    time_limit = config.limit_for(procs)
    n = len(procs)

    # Arrival order, PID on ties; new arrivals are always queued in this order.
    arrival_order = sorted(range(n), key=lambda i: (procs[i].arrival_time, procs[i].pid))

    ready: Deque[int] = deque()
    queued = [False] * n

    time = 0
    completed = 0
    timeline: List[ScheduledSlice] = []

    def enqueue_new_arrivals(current_time: int, exclude: Optional[int] = None) -> None:
        for i in arrival_order:
            p = procs[i]
            if i != exclude and not queued[i] and p.remaining_time > 0 and p.arrival_time <= current_time:
                ready.append(i)
                queued[i] = True

    # Initialize with processes that arrive at time 0
    enqueue_new_arrivals(time)

    while completed < n and time < time_limit:
        if not ready:
            # Jump to next arrival if CPU is idle
            future_arrivals = [p.arrival_time for p in procs if p.remaining_time > 0 and p.arrival_time > time]
            if not future_arrivals:
                break
            time = min(future_arrivals)
            enqueue_new_arrivals(time)
            continue

        idx = ready.popleft()
        queued[idx] = False
        p = procs[idx]

        record_dispatch(p, time)

        run_time = min(quantum, p.remaining_time)
        p.remaining_time -= run_time
        _append_slice(timeline, p, time, time + run_time)
        logger.debug("RR: t=%d run %s for %d (remaining %d)", time, p.name, run_time, p.remaining_time)
        time += run_time

        # Enqueue any new arrivals that appeared during this slice
        enqueue_new_arrivals(time, exclude=idx)

        if p.remaining_time > 0:
            ready.append(idx)
            queued[idx] = True
        else:
            finalize_process(p, time)
            completed += 1

    return _finish("Round Robin", procs, timeline, quantum=quantum, time_limit=time_limit)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "srtf": schedule_srtf,
    "priority": schedule_priority,
    "priority-p": schedule_priority_preemptive,
    "rr": schedule_rr,
}

QUANTUM_ALGORITHMS = {"rr"}


def run_algorithm(
    name: str,
    processes: List[Process],
    quantum: Optional[int] = None,
    config: Optional[SimulationConfig] = None,
) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")
    if not processes:
        raise EmptyWorkloadError()

    func = ALGORITHMS[name]
    if name not in QUANTUM_ALGORITHMS:
        quantum = None
    return func(processes, quantum=quantum, config=config)
