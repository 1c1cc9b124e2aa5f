"""Star Battle core data structures and level validation."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

Position = Tuple[int, int]


class LevelFormatError(ValueError):
    """Raised when a region layout cannot describe a square puzzle grid."""


class GridNotBuiltError(RuntimeError):
    """Raised when the engine is used before a grid has been built."""


class CellOutOfBoundsError(IndexError):
    """Raised for coordinates outside the active grid."""


class RejectionReason(str, Enum):
    OCCUPIED = "occupied"
    ROW_CONFLICT = "row conflict"
    COLUMN_CONFLICT = "column conflict"
    REGION_CONFLICT = "region conflict"
    ADJACENCY_CONFLICT = "adjacency conflict"


class EventKind(str, Enum):
    QUEEN_PLACED = "queen_placed"
    QUEEN_REMOVED = "queen_removed"
    INVALID_PLACEMENT = "invalid_placement"
    PUZZLE_SOLVED = "puzzle_solved"


@dataclass
class Cell:
    row: int
    col: int
    region_id: int
    has_queen: bool = False
    marked: bool = False

    @property
    def position(self) -> Position:
        return (self.row, self.col)

    def snapshot(self) -> "CellState":
        return CellState(self.row, self.col, self.region_id, self.has_queen, self.marked)


@dataclass(frozen=True)
class CellState:
    """Read-only view of a cell handed out by engine queries."""

    row: int
    col: int
    region_id: int
    has_queen: bool
    marked: bool


@dataclass(frozen=True)
class PlacementResult:
    ok: bool
    reason: Optional[RejectionReason] = None

    @classmethod
    def accepted(cls) -> "PlacementResult":
        return cls(ok=True)

    @classmethod
    def rejected(cls, reason: RejectionReason) -> "PlacementResult":
        return cls(ok=False, reason=reason)

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True)
class PuzzleEvent:
    kind: EventKind
    row: Optional[int] = None
    col: Optional[int] = None
    reason: Optional[RejectionReason] = None


def _is_int(value: Any) -> bool:
    # bool is an int subclass but never a meaningful size or region id.
    return isinstance(value, int) and not isinstance(value, bool)


def validate_region_matrix(size: Any, regions: Any) -> List[List[int]]:
    """
    Check that `regions` is a `size` x `size` matrix of non-negative ints and
    return a defensive copy as a list of lists.
    """
    if not _is_int(size) or size < 1:
        raise LevelFormatError(f"Grid size must be a positive integer, got {size!r}")
    if isinstance(regions, (str, bytes)) or not isinstance(regions, Sequence):
        raise LevelFormatError("Region matrix must be a sequence of rows")
    if len(regions) != size:
        raise LevelFormatError(f"Region matrix has {len(regions)} rows, expected {size}")

    matrix: List[List[int]] = []
    for r, row in enumerate(regions):
        if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
            raise LevelFormatError(f"Row {r} of the region matrix is not a sequence")
        if len(row) != size:
            raise LevelFormatError(f"Row {r} has {len(row)} entries, expected {size}")
        for c, value in enumerate(row):
            if not _is_int(value):
                raise LevelFormatError(f"Region id at ({r}, {c}) must be an integer, got {value!r}")
            if value < 0:
                raise LevelFormatError(f"Region id at ({r}, {c}) is negative: {value}")
        matrix.append(list(row))
    return matrix


@dataclass
class Level:
    """A puzzle definition: grid size plus one region id per cell."""

    id: str
    grid_size: int
    regions: List[List[int]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.regions = validate_region_matrix(self.grid_size, self.regions)

    @property
    def region_ids(self) -> List[int]:
        return sorted({value for row in self.regions for value in row})

    @property
    def region_count(self) -> int:
        return len(self.region_ids)

    def region_at(self, row: int, col: int) -> int:
        return self.regions[row][col]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "gridSize": self.grid_size,
            "regions": [list(row) for row in self.regions],
        }
