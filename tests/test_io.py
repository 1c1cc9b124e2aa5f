import pytest

from src.starbattle.engine import PuzzleEngine
from src.starbattle.levels import get_level
from src.utils.io import load_json, load_solution_state, save_json, save_solution_state


def test_solution_state_round_trip(tmp_path):
    engine = PuzzleEngine()
    engine.load_level(get_level("altar_2"))
    engine.place_queen(0, 3)
    engine.place_queen(2, 2)

    path = tmp_path / "saves" / "altar_2.json"
    save_solution_state(path, "altar_2", engine.get_solution_state())
    assert load_json(path) == {"id": "altar_2", "queens": [[0, 3], [2, 2]]}

    level_id, queens = load_solution_state(path)
    assert level_id == "altar_2"
    engine.build_grid(5, get_level("altar_2").regions)
    for row, col in queens:
        assert engine.place_queen(row, col).ok
    assert engine.get_solution_state() == [(0, 3), (2, 2)]


def test_load_solution_state_rejects_other_payloads(tmp_path):
    path = tmp_path / "other.json"
    save_json(path, {"levels": []})
    with pytest.raises(ValueError):
        load_solution_state(path)
