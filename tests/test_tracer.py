"""Tests that the tracer captures engine steps and writes them to CSV."""

import csv

from src.starbattle.engine import PuzzleEngine
from src.starbattle.levels import get_level
from src.utils.trace import Tracer, enable_tracing, get_tracer, reset_tracer


def test_tracer_captures_engine_steps(tmp_path):
    tracer = Tracer()
    engine = PuzzleEngine(tracer=tracer)
    engine.load_level(get_level("altar_2"))
    engine.place_queen(2, 2)
    engine.place_queen(3, 3)
    engine.toggle_mark(0, 0)
    engine.remove_queen(2, 2)

    actions = [step.action_type for step in tracer.steps]
    assert actions == ["build", "place", "reject", "mark", "remove"]
    assert [step.step_number for step in tracer.steps] == [1, 2, 3, 4, 5]
    assert tracer.steps[2].reason == "adjacency conflict"

    summary = tracer.summary()
    assert summary["total_steps"] == 5
    assert summary["num_rejections"] == 1
    assert summary["action_counts"]["place"] == 1

    output_path = tmp_path / "traces" / "altar_2.csv"
    tracer.to_csv(output_path)
    with open(output_path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 5
    assert rows[1]["action_type"] == "place"
    assert rows[1]["region_id"] == "1"


def test_disabled_tracer_records_nothing(tmp_path, capsys):
    tracer = Tracer(enabled=False)
    tracer.log_place(0, 0, 0, 1)
    assert tracer.steps == []
    tracer.to_csv(tmp_path / "empty.csv")
    assert "No trace steps" in capsys.readouterr().out
    assert not (tmp_path / "empty.csv").exists()


def test_global_tracer_lifecycle():
    reset_tracer()
    tracer = get_tracer()
    assert get_tracer() is tracer
    enable_tracing(False)
    tracer.log_place(0, 0, 0, 1)
    assert tracer.steps == []
    reset_tracer()
    assert get_tracer() is not tracer
    assert get_tracer().enabled


def test_default_engine_does_not_grow_global_tracer():
    reset_tracer()
    engine = PuzzleEngine()
    engine.load_level(get_level("altar_2"))
    for _ in range(10000):
        engine.toggle_mark(0, 0)
    engine.place_queen(0, 3)
    engine.place_queen(0, 4)

    assert not engine.tracer.enabled
    assert engine.tracer.steps == []
    assert get_tracer().steps == []


def test_engine_tracer_is_independent_of_global_tracer():
    reset_tracer()
    tracer = Tracer()
    engine = PuzzleEngine(tracer=tracer)
    engine.build_grid(1, [[0]])
    assert engine.tracer is tracer
    assert [step.action_type for step in tracer.steps] == ["build"]
    assert get_tracer().steps == []
