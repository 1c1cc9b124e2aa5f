"""Top-level Star Battle solve interface.

Expose `solve_level(puzzle)` that accepts either a `Level` or a raw level
dictionary compatible with `src.starbattle.loader.level_from_record`, and
`replay_solution` which feeds positions through a `PuzzleEngine`.
"""

from typing import Any, Iterable, List, Optional, Tuple

from src.starbattle import solver_core
from src.starbattle.engine import PuzzleEngine
from src.starbattle.loader import level_from_record
from src.starbattle.model import Level
from src.utils.trace import Tracer


def _as_level(puzzle: Any) -> Level:
    if isinstance(puzzle, Level):
        return puzzle
    if isinstance(puzzle, dict):
        return level_from_record(puzzle, "level")
    raise TypeError("solve_level expects a Level instance or level dictionary")


def solve_level(puzzle: Any) -> Optional[List[Tuple[int, int]]]:
    """
    Solve a level and return the queen positions in row order, or None when
    it has no solution.
    """
    return solver_core.solve(_as_level(puzzle))


def replay_solution(
    puzzle: Any,
    positions: Iterable[Tuple[int, int]],
    tracer: Optional[Tracer] = None,
) -> PuzzleEngine:
    """
    Build a fresh engine for `puzzle` and place every queen in `positions`.
    Replay steps go to `tracer` only when one is given, never to the global
    solver tracer.
    """
    engine = PuzzleEngine(tracer=tracer)
    engine.load_level(_as_level(puzzle))
    for row, col in positions:
        engine.place_queen(row, col)
    return engine


__all__ = ["solve_level", "replay_solution"]
