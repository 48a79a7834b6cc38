import builtins
import json
from pathlib import Path

import pytest

from cpu_sched_sim.cli import build_parser, main


def _workload(tmp_path: Path) -> Path:
    p = tmp_path / "w.json"
    p.write_text(
        json.dumps(
            [
                {"name": "P1", "arrival_time": 0, "burst_time": 5, "priority": 2},
                {"name": "P2", "arrival_time": 1, "burst_time": 3, "priority": 1},
                {"name": "P3", "arrival_time": 2, "burst_time": 8, "priority": 3},
                {"name": "P4", "arrival_time": 3, "burst_time": 6, "priority": 2},
            ]
        )
    )
    return p


def _feed(monkeypatch, answers):
    it = iter(answers)

    def fake_input(prompt=""):
        try:
            return next(it)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr(builtins, "input", fake_input)


def test_parser_rejects_unknown_algorithm():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["run", "-a", "lottery", "-w", "x.json"])


def test_run_prints_metrics(tmp_path, capsys):
    assert main(["run", "-a", "rr", "-q", "2", "-w", str(_workload(tmp_path))]) == 0
    out = capsys.readouterr().out
    assert "Round Robin" in out
    assert "Quantum: 2" in out
    assert "Per-process metrics" in out


def test_run_without_quantum_fails_cleanly(tmp_path, capsys):
    assert main(["run", "-a", "rr", "-w", str(_workload(tmp_path))]) == 2
    assert "positive quantum" in capsys.readouterr().out


def test_run_missing_workload(tmp_path, capsys):
    assert main(["run", "-a", "fcfs", "-w", str(tmp_path / "missing.json")]) == 2
    assert "Workload not found" in capsys.readouterr().out


def test_compare_lists_every_algorithm(tmp_path, capsys):
    assert main(["compare", "-w", str(_workload(tmp_path))]) == 0
    out = capsys.readouterr().out
    for label in ["FCFS", "SJF", "SRTF", "Robin"]:
        assert label in out


def test_menu_sample_and_runs(monkeypatch, capsys):
    _feed(monkeypatch, ["3", "5", "10", "2", "0"])
    assert main(["menu"]) == 0
    out = capsys.readouterr().out
    assert "Sample processes loaded" in out
    assert "FCFS" in out
    assert "Round Robin" in out


def test_menu_add_process_reprompts(monkeypatch, capsys):
    _feed(monkeypatch, ["1", "A", "abc", "-1", "0", "4", "5", "2", "0"])
    assert main(["menu"]) == 0
    out = capsys.readouterr().out
    assert "Invalid input" in out
    assert "Value must be between" in out
    assert "Process 'A' added successfully" in out
    assert "Total processes: 1" in out


def test_menu_empty_workload_notice(monkeypatch, capsys):
    _feed(monkeypatch, ["6", "4", "0"])
    assert main(["menu"]) == 0
    out = capsys.readouterr().out
    assert "No processes available" in out
    assert "No processes to clear" in out


def test_menu_clear_confirmation(monkeypatch, capsys, tmp_path):
    _feed(monkeypatch, ["4", "n", "4", "y", "2"])
    assert main(["menu", "-w", str(_workload(tmp_path))]) == 0
    out = capsys.readouterr().out
    assert "Operation cancelled" in out
    assert "All processes cleared" in out
    assert "No processes available" in out


def test_menu_duplicate_name_warned_once(monkeypatch, capsys):
    _feed(monkeypatch, ["3", "1", "P1", "0", "1", "0", "0"])
    assert main(["menu"]) == 0
    captured = capsys.readouterr()
    assert captured.out.count("already exists") == 1
    assert "already exists" not in captured.err


def test_menu_name_uses_first_word(monkeypatch, capsys):
    _feed(monkeypatch, ["1", "Job one", "0", "2", "1", "2", "0"])
    assert main(["menu"]) == 0
    out = capsys.readouterr().out
    assert "Process 'Job' added successfully" in out


def test_menu_input_ending_mid_prompt_exits(monkeypatch, capsys):
    _feed(monkeypatch, ["1", "X"])
    assert main(["menu"]) == 0


def test_menu_input_ending_at_clear_confirmation(monkeypatch, capsys):
    _feed(monkeypatch, ["3", "4"])
    assert main(["menu"]) == 0


def test_negative_time_buffer_rejected(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--time-buffer", "-1", "run", "-a", "srtf", "-w", str(_workload(tmp_path))])
    assert exc_info.value.code == 2
    assert "must be >= 0" in capsys.readouterr().err


def test_zero_time_buffer_still_completes(tmp_path, capsys):
    assert main(["--time-buffer", "0", "run", "-a", "srtf", "-w", str(_workload(tmp_path))]) == 0
    assert "not all processes" not in capsys.readouterr().out
