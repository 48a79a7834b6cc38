from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import List, Optional

from .config import MAX_NAME_LENGTH, MAX_PROCESSES, PRIORITY_RANGE
from .errors import CapacityError, WorkloadError
from .models import Process

SAMPLE_WORKLOAD = [
    ("P1", 0, 5, 2),
    ("P2", 1, 3, 1),
    ("P3", 2, 8, 3),
    ("P4", 3, 6, 2),
]


def validate_process(name: str, arrival_time: int, burst_time: int, priority: Optional[int]) -> None:
    """
    Reject workload entries the engine must never see.
    """
    if not name or len(name) > MAX_NAME_LENGTH:
        raise WorkloadError(f"Process name must be 1-{MAX_NAME_LENGTH} characters long: {name!r}")
    if arrival_time < 0:
        raise WorkloadError(f"{name}: arrival time must be >= 0 (got {arrival_time})")
    if burst_time <= 0:
        raise WorkloadError(f"{name}: burst time must be > 0 (got {burst_time})")
    low, high = PRIORITY_RANGE
    if priority is not None and not low <= priority <= high:
        raise WorkloadError(f"{name}: priority must be between {low} and {high} (got {priority})")


def sample_workload() -> List[Process]:
    return [
        Process(pid=i, name=name, arrival_time=arrival, burst_time=burst, priority=priority)
        for i, (name, arrival, burst, priority) in enumerate(SAMPLE_WORKLOAD, start=1)
    ]


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.

    PIDs are assigned in file order starting at 1.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if not path.exists():
        raise WorkloadError(f"Workload not found: {path}")

    if suffix == ".json":
        entries = _load_json(path)
    elif suffix == ".csv":
        entries = _load_csv(path)
    else:
        raise WorkloadError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    processes = [_process_from_mapping(pid, entry) for pid, entry in enumerate(entries, start=1)]
    if len(processes) > MAX_PROCESSES:
        raise CapacityError(f"Workload has {len(processes)} processes; the limit is {MAX_PROCESSES}")
    return processes


def _load_json(path: Path) -> List[dict]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise WorkloadError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise WorkloadError("JSON workload must be a list of process objects")

    return raw


def _load_csv(path: Path) -> List[dict]:
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        return list(reader)


def _process_from_mapping(pid: int, mapping) -> Process:
    try:
        name_val = mapping.get("name", mapping.get("pid"))
        name = str(name_val).strip() if name_val not in (None, "") else f"P{pid}"
        arrival_time = int(mapping["arrival_time"])
        burst_time = int(mapping["burst_time"])
        priority_val = mapping.get("priority")
        priority = int(priority_val) if priority_val not in (None, "") else None
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise WorkloadError(f"Invalid process entry: {mapping!r}") from exc

    validate_process(name, arrival_time, burst_time, priority)

    return Process(
        pid=pid,
        name=name,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )
