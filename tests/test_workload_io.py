from pathlib import Path

import pytest

from cpu_sched_sim.errors import CapacityError, WorkloadError
from cpu_sched_sim.models import Process
from cpu_sched_sim.workload_io import load_workload, sample_workload, validate_process


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"name":"A","arrival_time":0,"burst_time":3,"priority":1},'
                 '{"name":"B","arrival_time":1,"burst_time":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert [q.pid for q in procs] == [1, 2]
    assert procs[1].priority is None
    assert procs[1].arrival_time == 1
    assert procs[1].remaining_time == 2


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority\nA,0,3,1\nB,1,2,\n")
    procs = load_workload(p)
    assert procs[0].name == "A"
    assert procs[1].priority is None


def test_unnamed_entries_get_default_names(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"arrival_time":0,"burst_time":3}]')
    assert load_workload(p)[0].name == "P1"


@pytest.mark.parametrize(
    "body",
    [
        '[{"name":"A","arrival_time":-1,"burst_time":3}]',
        '[{"name":"A","arrival_time":0,"burst_time":0}]',
        '[{"name":"A","arrival_time":0,"burst_time":3,"priority":100}]',
        '[{"name":"A","burst_time":3}]',
        '[{"name":"A","arrival_time":"soon","burst_time":3}]',
        '{"name":"A"}',
        '[1, 2]',
        'not json',
    ],
)
def test_invalid_json_workloads(tmp_path: Path, body):
    p = tmp_path / "w.json"
    p.write_text(body)
    with pytest.raises(WorkloadError):
        load_workload(p)


def test_unsupported_suffix(tmp_path: Path):
    p = tmp_path / "w.txt"
    p.write_text("")
    with pytest.raises(WorkloadError):
        load_workload(p)


def test_missing_file(tmp_path: Path):
    with pytest.raises(WorkloadError):
        load_workload(tmp_path / "nope.json")


def test_capacity_guard(tmp_path: Path):
    p = tmp_path / "w.csv"
    rows = "\n".join(f"P{i},0,1,0" for i in range(101))
    p.write_text("name,arrival_time,burst_time,priority\n" + rows + "\n")
    with pytest.raises(CapacityError):
        load_workload(p)


def test_validate_name_length():
    with pytest.raises(WorkloadError):
        validate_process("", 0, 1, 0)
    with pytest.raises(WorkloadError):
        validate_process("x" * 21, 0, 1, 0)
    validate_process("x" * 20, 0, 1, 0)


def test_workload_errors_are_value_errors():
    with pytest.raises(ValueError):
        validate_process("A", 0, -4, None)


def test_sample_workload():
    procs = sample_workload()
    assert [(p.pid, p.name, p.arrival_time, p.burst_time, p.priority) for p in procs] == [
        (1, "P1", 0, 5, 2),
        (2, "P2", 1, 3, 1),
        (3, "P3", 2, 8, 3),
        (4, "P4", 3, 6, 2),
    ]
