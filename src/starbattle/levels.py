"""Bundled level catalog: one region layout per altar in the hub world."""

from typing import Dict, List

from .model import Level

# Each number is a region id; the same id anywhere in the grid is the same region.
_LAYOUTS = [
    (
        "altar_1",
        7,
        [
            [0, 0, 0, 1, 1, 1, 1],
            [2, 2, 0, 1, 1, 1, 1],
            [2, 2, 0, 0, 3, 3, 3],
            [2, 3, 3, 3, 4, 4, 3],
            [2, 3, 5, 5, 3, 3, 3],
            [2, 5, 5, 5, 6, 3, 3],
            [2, 5, 5, 5, 6, 6, 6],
        ],
    ),
    (
        "altar_2",
        5,
        [
            [0, 0, 2, 2, 2],
            [0, 0, 2, 2, 2],
            [3, 1, 1, 6, 6],
            [3, 1, 1, 6, 6],
            [3, 3, 1, 1, 6],
        ],
    ),
    (
        "altar_3",
        8,
        [
            [0, 0, 0, 0, 5, 5, 5, 5],
            [0, 1, 1, 0, 5, 6, 6, 5],
            [0, 0, 1, 1, 6, 6, 7, 5],
            [0, 0, 0, 2, 6, 7, 7, 5],
            [0, 0, 3, 3, 3, 3, 7, 5],
            [0, 0, 3, 4, 4, 3, 7, 5],
            [7, 7, 3, 3, 3, 3, 7, 5],
            [7, 7, 7, 7, 7, 7, 7, 5],
        ],
    ),
    (
        "altar_4",
        7,
        [
            [0, 0, 0, 0, 2, 2, 2],
            [0, 1, 0, 2, 2, 2, 2],
            [0, 1, 2, 2, 3, 3, 2],
            [2, 2, 2, 4, 4, 3, 2],
            [2, 5, 5, 4, 4, 4, 4],
            [2, 5, 5, 6, 4, 4, 4],
            [5, 5, 6, 6, 4, 4, 4],
        ],
    ),
    (
        "altar_5",
        5,
        [
            [0, 0, 0, 2, 2],
            [0, 0, 2, 2, 2],
            [3, 1, 1, 6, 6],
            [3, 1, 1, 6, 6],
            [3, 3, 1, 1, 6],
        ],
    ),
    (
        # Eight regions on a 6x6 grid: shipped content, but it has no solution.
        "altar_6",
        6,
        [
            [0, 0, 1, 1, 1, 1],
            [0, 0, 1, 2, 2, 1],
            [3, 3, 1, 2, 2, 1],
            [3, 4, 4, 4, 1, 1],
            [3, 4, 5, 5, 5, 7],
            [3, 3, 5, 6, 6, 7],
        ],
    ),
]

LEVELS: Dict[str, Level] = {
    level_id: Level(id=level_id, grid_size=size, regions=regions)
    for level_id, size, regions in _LAYOUTS
}


def list_levels() -> List[str]:
    return list(LEVELS)


def get_level(level_id: str) -> Level:
    try:
        return LEVELS[level_id]
    except KeyError:
        raise KeyError(f"Unknown level {level_id!r}; known levels: {', '.join(LEVELS)}") from None
