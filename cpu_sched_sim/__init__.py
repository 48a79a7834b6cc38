"""
CPU scheduling simulator package.

Simulates FCFS, SJF, SRTF, priority (both flavours) and round robin over a
static workload and reports per-process and aggregate metrics.
"""

from .algorithms import ALGORITHMS, run_algorithm
from .models import Process, ScheduleResult

__all__ = ["ALGORITHMS", "Process", "ScheduleResult", "cli", "run_algorithm"]
