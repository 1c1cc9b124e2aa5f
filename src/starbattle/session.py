"""Puzzle session: which level is active, which levels are solved, and move counts."""

import logging
from typing import Callable, Dict, List, Optional

from .engine import PuzzleEngine
from .levels import LEVELS
from .model import EventKind, Level, PuzzleEvent

logger = logging.getLogger(__name__)

GameCompletedListener = Callable[[int], None]


class PuzzleSession:
    """
    Drives a PuzzleEngine through a catalog of levels. Solving the active
    level marks it solved and deactivates it; solved levels cannot be
    activated again. Solved state outlives every grid.

    Accepted placements on the active level count as moves: `moves` is reset
    each time a level is activated, `total_moves` is never reset. Once every
    catalog level is solved the game-completed listeners are called a single
    time with `total_moves`.
    """

    def __init__(self, engine: Optional[PuzzleEngine] = None, catalog: Optional[Dict[str, Level]] = None):
        self.engine = engine or PuzzleEngine()
        self.catalog: Dict[str, Level] = dict(catalog if catalog is not None else LEVELS)
        self._active_level_id: Optional[str] = None
        self._solved: Dict[str, bool] = {level_id: False for level_id in self.catalog}
        self.moves = 0
        self.total_moves = 0
        self._completed = False
        self._game_completed_listeners: List[GameCompletedListener] = []
        self.engine.on_queen_placed(self._handle_placed)
        self.engine.on_puzzle_solved(self._handle_solved)

    @property
    def active_level_id(self) -> Optional[str]:
        return self._active_level_id

    def activate(self, level_id: str) -> bool:
        """Build the grid for `level_id`. Returns False if it is already solved."""
        if level_id not in self.catalog:
            raise KeyError(f"Unknown level {level_id!r}")

        if self._active_level_id is not None:
            self.deactivate()

        if self._solved[level_id]:
            logger.info(f"Level {level_id} is already solved")
            return False

        self.engine.load_level(self.catalog[level_id])
        self._active_level_id = level_id
        self.moves = 0
        logger.info(f"Activated level {level_id}")
        return True

    def deactivate(self) -> None:
        if self._active_level_id is None:
            return
        self.engine.reset_grid()
        logger.info(f"Deactivated level {self._active_level_id}")
        self._active_level_id = None

    def is_solved(self, level_id: str) -> bool:
        return self._solved.get(level_id, False)

    def solved_levels(self) -> List[str]:
        return [level_id for level_id, solved in self._solved.items() if solved]

    def all_solved(self) -> bool:
        """True once every level in the catalog is solved; False for an empty catalog."""
        return bool(self._solved) and all(self._solved.values())

    def mark_solved(self, level_id: str) -> None:
        if level_id not in self.catalog:
            raise KeyError(f"Unknown level {level_id!r}")
        self._solved[level_id] = True
        self._check_game_completed()

    def on_game_completed(self, listener: GameCompletedListener) -> None:
        self._game_completed_listeners.append(listener)

    def _check_game_completed(self) -> None:
        if self._completed or not self.all_solved():
            return
        self._completed = True
        logger.info(f"All {len(self._solved)} levels solved in {self.total_moves} moves")
        for listener in list(self._game_completed_listeners):
            listener(self.total_moves)

    def _handle_placed(self, event: PuzzleEvent) -> None:
        if self._active_level_id is None:
            return
        self.moves += 1
        self.total_moves += 1

    def _handle_solved(self, event: PuzzleEvent) -> None:
        if event.kind is not EventKind.PUZZLE_SOLVED or self._active_level_id is None:
            return
        level_id = self._active_level_id
        logger.info(f"Level {level_id} solved in {self.moves} moves")
        self.deactivate()
        self.mark_solved(level_id)
