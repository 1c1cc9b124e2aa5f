"""Integration-style tests for the backtracking solver."""

import pytest

from solver import replay_solution, solve_level
from src.starbattle import solver_core
from src.starbattle.levels import LEVELS, get_level
from src.starbattle.model import Level
from src.utils.trace import Tracer


def _assert_valid(level, positions):
    assert len(positions) == level.grid_size
    assert sorted(r for r, _ in positions) == list(range(level.grid_size))
    assert sorted(c for _, c in positions) == list(range(level.grid_size))
    assert sorted(level.region_at(r, c) for r, c in positions) == level.region_ids
    for i, (r1, c1) in enumerate(positions):
        for r2, c2 in positions[i + 1:]:
            assert not (abs(r1 - r2) == 1 and abs(c1 - c2) == 1)


def test_solver_solves_five_by_five_altar():
    level = get_level("altar_2")
    positions = solve_level(level)
    assert positions, "Solver should find a placement"
    _assert_valid(level, positions)
    assert replay_solution(level, positions).is_puzzle_solved()


def test_solver_solves_seven_by_seven_altar():
    level = get_level("altar_1")
    positions = solve_level(level)
    assert positions
    _assert_valid(level, positions)


def test_solver_rejects_level_with_too_many_regions():
    assert solve_level(get_level("altar_6")) is None


@pytest.mark.parametrize("level_id", list(LEVELS))
def test_every_solution_replays_to_a_solved_grid(level_id):
    level = get_level(level_id)
    positions = solve_level(level)
    if level_id == "altar_6":
        assert positions is None
        return
    assert positions is not None
    engine = replay_solution(level, positions)
    assert engine.is_puzzle_solved()
    assert engine.get_solution_state() == positions


def test_solver_handles_trivial_and_impossible_grids():
    assert solve_level(Level(id="one", grid_size=1, regions=[[0]])) == [(0, 0)]
    # Two queens on a 2x2 grid always touch diagonally.
    assert solve_level(Level(id="two", grid_size=2, regions=[[0, 0], [1, 1]])) is None


def test_solve_level_accepts_raw_dict():
    puzzle = {"id": "dict", "gridSize": 1, "regions": [[4]]}
    assert solve_level(puzzle) == [(0, 0)]


def test_solve_level_rejects_unknown_input():
    with pytest.raises(TypeError):
        solve_level("altar_1")


def test_solver_is_deterministic():
    level = get_level("altar_3")
    assert solve_level(level) == solve_level(level)


def test_solver_reports_steps_to_tracer():
    tracer = Tracer()
    level = get_level("altar_2")
    positions = solver_core.solve(level, tracer)
    summary = tracer.summary()
    assert positions
    assert summary["num_assignments"] >= level.grid_size
    assert summary["action_counts"]["solution_found"] == 1


def test_mrv_picks_row_with_fewest_columns_then_lowest_index():
    level = get_level("altar_2")
    domains = {0: {1, 2}, 1: {3}, 2: {0}, 3: {0, 1, 2}, 4: {4}}
    assert solver_core._select_unassigned_row(level, {}, domains) == 1
    assert solver_core._select_unassigned_row(level, {1: 3}, domains) == 2


def test_forward_check_prunes_column_region_and_diagonals():
    level = get_level("altar_2")
    domains = {row: set(range(5)) for row in range(5)}
    domains[2] = {2}
    assignment = {2: 2}
    ok = solver_core._forward_check(level, 2, assignment, domains, Tracer())
    assert ok
    # Row 1 loses column 2, the diagonals 1 and 3.
    assert domains[1] == {0, 4}
    # Row 4 loses column 2 and region 1 cells (4, 2) and (4, 3).
    assert domains[4] == {0, 1, 4}


def test_forward_check_fails_when_a_region_becomes_unreachable():
    level = Level(
        id="cornered",
        grid_size=4,
        regions=[[0, 1, 1, 1], [1, 1, 1, 1], [1, 1, 1, 1], [2, 2, 3, 3]],
    )
    domains = {row: set(range(4)) for row in range(4)}
    domains[3] = {0}
    # A queen at (3, 0) takes column 0, the only column of region 0.
    assert not solver_core._forward_check(level, 3, {3: 0}, domains, Tracer())
    assert domains[0] == {1, 2, 3}


def test_replay_records_only_into_its_own_tracer():
    level = get_level("altar_2")
    solver_tracer = Tracer()
    positions = solver_core.solve(level, tracer=solver_tracer)
    solver_steps = len(solver_tracer.steps)

    replay_tracer = Tracer()
    engine = replay_solution(level, positions, tracer=replay_tracer)
    assert engine.tracer is replay_tracer
    assert len(solver_tracer.steps) == solver_steps
    assert [step.action_type for step in replay_tracer.steps] == ["build"] + ["place"] * 5 + ["solved"]
