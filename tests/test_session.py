import logging

import pytest

from cpu_sched_sim.config import MAX_PROCESSES
from cpu_sched_sim.errors import CapacityError, EmptyWorkloadError, WorkloadError
from cpu_sched_sim.session import Session


def test_add_assigns_sequential_pids():
    session = Session()
    first, _ = session.add_process("A", 0, 3, 1)
    second, _ = session.add_process("B", 2, 1, 0)
    assert (first.pid, second.pid) == (1, 2)
    assert len(session) == 2


def test_duplicate_name_is_allowed_but_flagged(caplog):
    session = Session()
    session.add_process("A", 0, 3, 1)
    with caplog.at_level(logging.INFO, logger="cpu_sched_sim.session"):
        _, duplicate = session.add_process("A", 1, 2, 1)
    assert duplicate
    assert len(session) == 2
    assert "already exists" in caplog.text


def test_invalid_process_rejected():
    session = Session()
    with pytest.raises(WorkloadError):
        session.add_process("A", -1, 3, 1)
    assert len(session) == 0


def test_capacity_limit():
    session = Session()
    for i in range(MAX_PROCESSES):
        session.add_process(f"P{i}", 0, 1, 0)
    with pytest.raises(CapacityError):
        session.add_process("extra", 0, 1, 0)


def test_run_empty_session():
    with pytest.raises(EmptyWorkloadError):
        Session().run("fcfs")


def test_runs_do_not_touch_canonical_workload():
    session = Session()
    session.load_sample()
    session.run("srtf")
    session.run("rr", quantum=2)
    for p in session.processes:
        assert p.remaining_time == p.burst_time
        assert p.completion_time is None


def test_processes_returns_copies():
    session = Session()
    session.load_sample()
    session.processes[0].burst_time = 99
    assert session.processes[0].burst_time == 5


def test_sample_then_clear():
    session = Session()
    session.load_sample()
    result = session.run("fcfs")
    assert [p.completion_time for p in result.processes] == [5, 8, 16, 22]
    assert session.clear() == 4
    assert len(session) == 0


def test_load_file(tmp_path):
    path = tmp_path / "w.csv"
    path.write_text("name,arrival_time,burst_time,priority\nX,0,2,0\n")
    session = Session()
    session.load_file(path)
    assert [p.name for p in session.processes] == ["X"]


def test_duplicate_name_does_not_warn(caplog):
    session = Session()
    session.add_process("A", 0, 3, 1)
    with caplog.at_level(logging.WARNING, logger="cpu_sched_sim.session"):
        session.add_process("A", 1, 2, 1)
    assert not caplog.records
