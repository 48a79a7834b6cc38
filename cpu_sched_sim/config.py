from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .models import Process

# Input limits enforced at the workload boundary.
MAX_PROCESSES = 100
MAX_NAME_LENGTH = 20
MAX_ARRIVAL = 1000
MAX_BURST = 100
PRIORITY_RANGE = (0, 99)
MAX_QUANTUM = 100
DEFAULT_QUANTUM = 2

DEFAULT_TIME_BUFFER = 1000


@dataclass(frozen=True)
class SimulationConfig:
    """
    Cutoff for the tick-driven algorithms (SRTF, preemptive priority, RR).

    The limit is ``sum(burst) + max(arrival) + time_buffer`` unless
    ``time_limit`` pins it explicitly.
    """

    time_buffer: int = DEFAULT_TIME_BUFFER
    time_limit: Optional[int] = None

    def limit_for(self, processes: Iterable[Process]) -> int:
        if self.time_limit is not None:
            return self.time_limit
        procs = list(processes)
        if not procs:
            return self.time_buffer
        total_burst = sum(p.burst_time for p in procs)
        last_arrival = max(p.arrival_time for p in procs)
        return total_burst + last_arrival + self.time_buffer
