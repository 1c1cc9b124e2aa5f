"""Puzzle engine: grid state and Star Battle placement rules.

The engine owns one active grid at a time. Every mutation goes through
`place_queen`, `remove_queen`, `toggle_mark`, `build_grid` or `reset_grid`;
callers only ever see `CellState` snapshots. Events are delivered
synchronously to subscribers from inside the call that caused them.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .model import (
    Cell,
    CellOutOfBoundsError,
    CellState,
    EventKind,
    GridNotBuiltError,
    Level,
    PlacementResult,
    Position,
    PuzzleEvent,
    RejectionReason,
    validate_region_matrix,
)
from src.utils.trace import Tracer

logger = logging.getLogger(__name__)

Listener = Callable[[PuzzleEvent], None]

DIAGONAL_OFFSETS: Tuple[Position, ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))

_REGION_SYMBOLS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class PuzzleEngine:
    def __init__(self, tracer: Optional[Tracer] = None) -> None:
        # Engines only record steps into a tracer they are handed.
        self.tracer = tracer if tracer is not None else Tracer(enabled=False)
        self._size = 0
        self._cells: List[List[Cell]] = []
        self._regions: Dict[int, List[Cell]] = {}
        self._listeners: Dict[EventKind, List[Listener]] = {kind: [] for kind in EventKind}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        return self._size

    @property
    def is_built(self) -> bool:
        return self._size > 0

    def build_grid(self, size: int, region_matrix: Sequence[Sequence[int]]) -> None:
        """
        Replace the current grid with a fresh one built from `region_matrix`.
        The matrix is validated before any existing state is discarded.
        """
        matrix = validate_region_matrix(size, region_matrix)

        self.reset_grid()
        self._size = size
        self._cells = [
            [Cell(row=r, col=c, region_id=matrix[r][c]) for c in range(size)]
            for r in range(size)
        ]
        for row in self._cells:
            for cell in row:
                self._regions.setdefault(cell.region_id, []).append(cell)

        region_count = len(self._regions)
        if region_count != size:
            logger.warning(
                f"Grid of size {size} has {region_count} regions; it cannot be solved"
            )
        logger.info(f"Built {size}x{size} grid with {region_count} regions")
        self.tracer.log_build(size, region_count)

    def load_level(self, level: Level) -> None:
        self.build_grid(level.grid_size, level.regions)

    def reset_grid(self) -> None:
        """Drop all cells, queens and marks; the engine goes back to unbuilt."""
        if self.is_built:
            logger.info("Grid reset")
        self._size = 0
        self._cells = []
        self._regions = {}

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def subscribe(self, kind: EventKind, listener: Listener) -> None:
        self._listeners[kind].append(listener)

    def unsubscribe(self, kind: EventKind, listener: Listener) -> None:
        listeners = self._listeners[kind]
        if listener in listeners:
            listeners.remove(listener)

    def on_queen_placed(self, listener: Listener) -> None:
        self.subscribe(EventKind.QUEEN_PLACED, listener)

    def on_invalid_placement(self, listener: Listener) -> None:
        self.subscribe(EventKind.INVALID_PLACEMENT, listener)

    def on_puzzle_solved(self, listener: Listener) -> None:
        self.subscribe(EventKind.PUZZLE_SOLVED, listener)

    def _emit(self, event: PuzzleEvent) -> None:
        # Copy so a listener may unsubscribe itself while being notified.
        for listener in list(self._listeners[event.kind]):
            listener(event)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def place_queen(self, row: int, col: int) -> PlacementResult:
        cell = self._cell(row, col)
        reason = self._rejection_for(cell)
        if reason is not None:
            logger.debug(f"Rejected queen at ({row}, {col}): {reason.value}")
            self.tracer.log_reject(row, col, reason.value)
            self._emit(PuzzleEvent(EventKind.INVALID_PLACEMENT, row, col, reason))
            return PlacementResult.rejected(reason)

        cell.has_queen = True
        queen_count = self.queen_count
        logger.debug(f"Placed queen at ({row}, {col}) in region {cell.region_id}")
        self.tracer.log_place(row, col, cell.region_id, queen_count)
        self._emit(PuzzleEvent(EventKind.QUEEN_PLACED, row, col))

        # Only a placement can complete the grid.
        if queen_count == self._size and self.is_puzzle_solved():
            logger.info("Puzzle solved")
            self.tracer.log_solved(queen_count)
            self._emit(PuzzleEvent(EventKind.PUZZLE_SOLVED))
        return PlacementResult.accepted()

    def remove_queen(self, row: int, col: int) -> bool:
        cell = self._cell(row, col)
        if not cell.has_queen:
            return False
        cell.has_queen = False
        logger.debug(f"Removed queen at ({row}, {col})")
        self.tracer.log_remove(row, col, self.queen_count)
        self._emit(PuzzleEvent(EventKind.QUEEN_REMOVED, row, col))
        return True

    def toggle_mark(self, row: int, col: int) -> bool:
        """Flip the planning mark on a cell and return the new value."""
        cell = self._cell(row, col)
        cell.marked = not cell.marked
        self.tracer.log_mark(row, col, cell.marked)
        return cell.marked

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def check_placement(self, row: int, col: int) -> PlacementResult:
        """Dry-run `place_queen`: report the outcome without mutating or emitting."""
        reason = self._rejection_for(self._cell(row, col))
        if reason is None:
            return PlacementResult.accepted()
        return PlacementResult.rejected(reason)

    def _rejection_for(self, cell: Cell) -> Optional[RejectionReason]:
        if cell.has_queen:
            return RejectionReason.OCCUPIED
        return self._conflict_for(cell)

    def _conflict_for(self, cell: Cell) -> Optional[RejectionReason]:
        """First rule (row, column, region, diagonal) that another queen breaks for `cell`."""
        row_cells = self._cells[cell.row]
        if any(other.has_queen for other in row_cells if other is not cell):
            return RejectionReason.ROW_CONFLICT

        if any(
            self._cells[r][cell.col].has_queen
            for r in range(self._size)
            if r != cell.row
        ):
            return RejectionReason.COLUMN_CONFLICT

        if any(other.has_queen for other in self._regions[cell.region_id] if other is not cell):
            return RejectionReason.REGION_CONFLICT

        for neighbor in self._diagonal_neighbors(cell):
            if neighbor.has_queen:
                return RejectionReason.ADJACENCY_CONFLICT
        return None

    def _diagonal_neighbors(self, cell: Cell) -> List[Cell]:
        neighbors = []
        for row_offset, col_offset in DIAGONAL_OFFSETS:
            r, c = cell.row + row_offset, cell.col + col_offset
            if 0 <= r < self._size and 0 <= c < self._size:
                neighbors.append(self._cells[r][c])
        return neighbors

    def is_puzzle_solved(self) -> bool:
        """
        True iff exactly N queens are placed, each queen passes the row,
        column, region and diagonal rules against all the others, and every
        region holds exactly one queen.
        """
        if not self.is_built:
            return False

        queens = self._queen_cells()
        if len(queens) != self._size:
            return False

        # Each queen is re-validated against all the others.
        for cell in queens:
            if self._conflict_for(cell) is not None:
                return False

        for members in self._regions.values():
            if sum(1 for cell in members if cell.has_queen) != 1:
                return False
        return True

    def conflicts(self) -> List[Tuple[Position, Position, RejectionReason]]:
        """Every pair of queens that breaks a rule, with the rule broken."""
        queens = self._queen_cells()
        found = []
        for i, a in enumerate(queens):
            for b in queens[i + 1:]:
                if a.row == b.row:
                    reason = RejectionReason.ROW_CONFLICT
                elif a.col == b.col:
                    reason = RejectionReason.COLUMN_CONFLICT
                elif a.region_id == b.region_id:
                    reason = RejectionReason.REGION_CONFLICT
                elif abs(a.row - b.row) == 1 and abs(a.col - b.col) == 1:
                    reason = RejectionReason.ADJACENCY_CONFLICT
                else:
                    continue
                found.append((a.position, b.position, reason))
        return found

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _cell(self, row: int, col: int) -> Cell:
        if not self.is_built:
            raise GridNotBuiltError("No grid has been built")
        for name, value in (("row", row), ("col", col)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be an integer, got {value!r}")
        if not (0 <= row < self._size and 0 <= col < self._size):
            raise CellOutOfBoundsError(
                f"Cell ({row}, {col}) is outside the {self._size}x{self._size} grid"
            )
        return self._cells[row][col]

    def _queen_cells(self) -> List[Cell]:
        return [cell for row in self._cells for cell in row if cell.has_queen]

    def get_cell(self, row: int, col: int) -> CellState:
        return self._cell(row, col).snapshot()

    def has_queen(self, row: int, col: int) -> bool:
        return self._cell(row, col).has_queen

    def is_marked(self, row: int, col: int) -> bool:
        return self._cell(row, col).marked

    def region_id(self, row: int, col: int) -> int:
        return self._cell(row, col).region_id

    def region_ids(self) -> List[int]:
        return sorted(self._regions)

    def region_cells(self, region_id: int) -> List[Position]:
        return [cell.position for cell in self._regions.get(region_id, [])]

    @property
    def queen_count(self) -> int:
        return len(self._queen_cells())

    def get_solution_state(self) -> List[Position]:
        """Row-major positions of every queen; empty when no grid is built."""
        return [cell.position for cell in self._queen_cells()]

    def render(self) -> str:
        """Plain-text board: region symbol per cell, 'Q' for queens, 'x' for marks."""
        lines = []
        for row in self._cells:
            symbols = []
            for cell in row:
                if cell.has_queen:
                    symbols.append("Q")
                elif cell.marked:
                    symbols.append("x")
                else:
                    symbols.append(_REGION_SYMBOLS[cell.region_id % len(_REGION_SYMBOLS)])
            lines.append(" ".join(symbols))
        return "\n".join(lines)
