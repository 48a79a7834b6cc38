from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional


@dataclass
class Process:
    """
    One workload item.

    The first five fields describe the workload and never change. The rest is
    simulation state, filled in by exactly one algorithm run on a private copy
    (see ``snapshot``). Time metrics stay ``None`` until they are observed.
    """

    pid: int
    name: str
    arrival_time: int
    burst_time: int
    priority: Optional[int] = None

    remaining_time: Optional[int] = None
    started: bool = False
    completion_time: Optional[int] = None
    turnaround_time: Optional[int] = None
    waiting_time: Optional[int] = None
    response_time: Optional[int] = None

    def __post_init__(self) -> None:
        if self.remaining_time is None:
            self.remaining_time = self.burst_time

    @property
    def is_complete(self) -> bool:
        return self.completion_time is not None

    def snapshot(self) -> "Process":
        """
        Fresh copy carrying only the static workload fields.
        """
        return Process(
            pid=self.pid,
            name=self.name,
            arrival_time=self.arrival_time,
            burst_time=self.burst_time,
            priority=self.priority,
        )


def snapshot_workload(processes: Iterable[Process]) -> List[Process]:
    return [p.snapshot() for p in processes]


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: int
    name: str
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float  # percent
    avg_waiting: float = 0.0
    avg_turnaround: float = 0.0
    avg_response: float = 0.0


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[Process] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    system: Optional[SystemMetrics] = None
    completed: bool = True
    time_limit: Optional[int] = None

    @property
    def incomplete(self) -> List[Process]:
        return [p for p in self.processes if not p.is_complete]

    def process(self, name: str) -> Process:
        for p in self.processes:
            if p.name == name:
                return p
        raise KeyError(name)
