import csv
import json
import sys
from pathlib import Path

import pytest

from run import collect_levels, format_solution, main, write_results_csv
from src.starbattle.levels import get_level


def _read_results(path: Path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))


def test_format_solution():
    assert format_solution([(0, 3), (1, 0)]) == [[0, 3], [1, 0]]
    assert format_solution(None) == []


def test_collect_levels_defaults_to_catalog(monkeypatch):
    monkeypatch.delenv("STARBATTLE_LEVELS_PATH", raising=False)
    levels = collect_levels(None)
    assert [level.id for level in levels][:2] == ["altar_1", "altar_2"]
    assert [level.id for level in collect_levels(None, ["altar_5"])] == ["altar_5"]


def test_collect_levels_reads_env_path(monkeypatch, tmp_path):
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"id": "custom", "regions": [[0]]}))
    monkeypatch.setenv("STARBATTLE_LEVELS_PATH", str(path))
    assert [level.id for level in collect_levels(None)] == ["custom"]


def test_collect_levels_rejects_missing_path(tmp_path):
    with pytest.raises(ValueError):
        collect_levels(tmp_path / "missing")


def test_main_writes_catalog_results(monkeypatch, tmp_path):
    monkeypatch.delenv("STARBATTLE_LEVELS_PATH", raising=False)
    output_path = tmp_path / "results.csv"
    monkeypatch.setattr(sys, "argv", ["run.py", "--level", "altar_2", "--level", "altar_6", "--output", str(output_path)])
    main()

    rows = _read_results(output_path)
    assert [row["id"] for row in rows] == ["altar_2", "altar_6"]
    assert rows[0]["solved"] == "True"
    assert len(json.loads(rows[0]["solution"])) == 5
    assert rows[1]["solved"] == "False"
    assert json.loads(rows[1]["solution"]) == []


def test_main_directory_input_with_traces(monkeypatch, tmp_path, capsys):
    levels_dir = tmp_path / "levels"
    levels_dir.mkdir()
    (levels_dir / "a.txt").write_text("0\n")
    (levels_dir / "b.json").write_text(json.dumps(get_level("altar_2").to_dict()))
    (levels_dir / "notes.md").write_text("ignored")
    trace_dir = tmp_path / "traces"

    monkeypatch.setattr(sys, "argv", ["run.py", str(levels_dir), "--trace-dir", str(trace_dir), "--show"])
    main()

    out = capsys.readouterr().out
    assert "altar_2 (5x5):" in out
    assert "'id': 'a'" in out
    assert (trace_dir / "a_trace.csv").exists()
    assert (trace_dir / "altar_2_trace.csv").exists()


def test_write_results_csv(tmp_path):
    output_path = tmp_path / "out.csv"
    write_results_csv(
        [{"id": "x", "grid_size": 1, "solution": [[0, 0]], "solved": True, "steps": 1}],
        output_path,
    )
    content = output_path.read_text()
    assert "id,grid_size,solution,solved,steps" in content
    assert '"[[0,0]]"' in content


def test_trace_csv_holds_only_solver_steps(monkeypatch, tmp_path):
    monkeypatch.delenv("STARBATTLE_LEVELS_PATH", raising=False)
    trace_dir = tmp_path / "traces"
    monkeypatch.setattr(sys, "argv", ["run.py", "--level", "altar_2", "--trace-dir", str(trace_dir), "--output", str(tmp_path / "r.csv")])
    main()

    rows = _read_results(trace_dir / "altar_2_trace.csv")
    actions = {row["action_type"] for row in rows}
    assert "assign" in actions
    assert not actions & {"build", "place", "solved"}
