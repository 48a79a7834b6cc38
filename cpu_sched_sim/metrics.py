from __future__ import annotations

from typing import Iterable, List, Optional

from .models import Process, ScheduleResult, SystemMetrics


def record_dispatch(process: Process, time: int) -> None:
    """
    Mark the first dispatch of a process and derive its response time.
    Later dispatches (after preemption) leave the response time alone.
    """
    if process.started:
        return
    process.started = True
    process.response_time = time - process.arrival_time


def finalize_process(process: Process, completion_time: int) -> None:
    process.remaining_time = 0
    process.completion_time = completion_time
    process.turnaround_time = completion_time - process.arrival_time
    process.waiting_time = process.turnaround_time - process.burst_time


def _mean(values: Iterable[Optional[int]]) -> float:
    observed = [v for v in values if v is not None]
    if not observed:
        return 0.0
    return sum(observed) / len(observed)


def summarize_process_metrics(processes: List[Process]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    Unobserved values (unfinished processes) are left out of the means.
    """
    return {
        "avg_waiting": _mean(p.waiting_time for p in processes),
        "avg_turnaround": _mean(p.turnaround_time for p in processes),
        "avg_response": _mean(p.response_time for p in processes),
    }


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute averages, throughput and CPU utilization given populated
    per-process metrics and timeline slices.
    """
    if not result.processes:
        system = SystemMetrics(cpu_busy_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)
        result.system = system
        return system

    cpu_busy_time = sum(slice_.duration for slice_ in result.timeline)

    completion_times = [p.completion_time for p in result.processes if p.completion_time is not None]
    makespan = max(completion_times, default=0)
    if not result.completed and result.timeline:
        # Unfinished work keeps the CPU busy past the last completion.
        makespan = max(makespan, result.timeline[-1].end_time)

    throughput = len(completion_times) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan * 100 if makespan > 0 else 0.0

    summary = summarize_process_metrics(result.processes)
    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
        avg_waiting=summary["avg_waiting"],
        avg_turnaround=summary["avg_turnaround"],
        avg_response=summary["avg_response"],
    )
    result.system = system
    return system
