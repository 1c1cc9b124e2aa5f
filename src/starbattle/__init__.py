"""Star Battle puzzle model, rules engine, level catalog and solver."""

from .model import (
    CellOutOfBoundsError,
    CellState,
    EventKind,
    GridNotBuiltError,
    Level,
    LevelFormatError,
    PlacementResult,
    PuzzleEvent,
    RejectionReason,
)
from .engine import PuzzleEngine
from .levels import LEVELS, get_level, list_levels
from .parser import parse_level_text
from .session import PuzzleSession
from .solver_core import solve

__all__ = [
    "CellOutOfBoundsError",
    "CellState",
    "EventKind",
    "GridNotBuiltError",
    "Level",
    "LevelFormatError",
    "PlacementResult",
    "PuzzleEvent",
    "RejectionReason",
    "PuzzleEngine",
    "LEVELS",
    "get_level",
    "list_levels",
    "parse_level_text",
    "PuzzleSession",
    "solve",
]
