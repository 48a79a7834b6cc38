from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .algorithms import run_algorithm
from .config import MAX_PROCESSES, SimulationConfig
from .errors import CapacityError, EmptyWorkloadError
from .models import Process, ScheduleResult, snapshot_workload
from .workload_io import load_workload, sample_workload, validate_process

logger = logging.getLogger(__name__)


class Session:
    """
    Owns the canonical workload for one interactive session.

    Callers only ever receive copies; simulation runs work on their own
    snapshots, so running several algorithms back to back never leaks state
    between them.
    """

    def __init__(self, config: Optional[SimulationConfig] = None) -> None:
        self.config = config or SimulationConfig()
        self._processes: List[Process] = []

    def __len__(self) -> int:
        return len(self._processes)

    @property
    def processes(self) -> List[Process]:
        return snapshot_workload(self._processes)

    def has_name(self, name: str) -> bool:
        return any(p.name == name for p in self._processes)

    def add_process(
        self,
        name: str,
        arrival_time: int,
        burst_time: int,
        priority: Optional[int] = None,
    ) -> Tuple[Process, bool]:
        """
        Append a process and return it with a flag telling whether its name
        was already taken. Duplicate names are allowed; warning the user is up
        to the caller.
        """
        if len(self._processes) >= MAX_PROCESSES:
            raise CapacityError(f"Maximum process limit ({MAX_PROCESSES}) reached")

        validate_process(name, arrival_time, burst_time, priority)

        duplicate = self.has_name(name)
        if duplicate:
            logger.info("A process named %r already exists", name)

        process = Process(
            pid=len(self._processes) + 1,
            name=name,
            arrival_time=arrival_time,
            burst_time=burst_time,
            priority=priority,
        )
        self._processes.append(process)
        logger.info("Added %s (arrival=%d, burst=%d, priority=%s)", name, arrival_time, burst_time, priority)
        return process.snapshot(), duplicate

    def load_sample(self) -> None:
        self._processes = sample_workload()
        logger.info("Loaded %d sample processes", len(self._processes))

    def load_file(self, path: str | Path) -> None:
        self._processes = load_workload(path)
        logger.info("Loaded %d processes from %s", len(self._processes), path)

    def clear(self) -> int:
        count = len(self._processes)
        self._processes = []
        logger.info("Cleared %d processes", count)
        return count

    def run(self, algorithm: str, quantum: Optional[int] = None) -> ScheduleResult:
        if not self._processes:
            raise EmptyWorkloadError()
        return run_algorithm(algorithm, self._processes, quantum=quantum, config=self.config)
