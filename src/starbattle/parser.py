"""Level parser: convert a plain-text region grid into a Level.

Supported row formats:
- whitespace-separated integers ("0 0 2 2 2")
- packed single characters ("00222" or "AABBB")
- whitespace-separated single characters ("A A B B B")

When every token in the grid is a decimal number the numbers are the region
ids, so the symbols `PuzzleEngine.render` prints for an empty board with ids
below 10 parse back unchanged. Otherwise every token must be a single letter
or digit, and symbols are numbered 0, 1, 2, ... in order of first appearance,
reading rows top to bottom. Symbols are case-sensitive: 'a' and 'A' are
different regions.

A row written as one token is split into characters, except in a one-row
grid, where the single token is the region id of the only cell ("10" is
region 10). Blank lines and lines starting with '#' are ignored.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from .model import Level, LevelFormatError


def _tokenize(line: str, split_packed: bool) -> List[str]:
    tokens = line.split()
    if split_packed and len(tokens) == 1:
        tokens = list(tokens[0])
    return tokens


def _assign_ids(token_rows: List[Tuple[int, List[str]]]) -> List[List[int]]:
    if all(token.isdecimal() for _, tokens in token_rows for token in tokens):
        return [[int(token) for token in tokens] for _, tokens in token_rows]

    ids: Dict[str, int] = {}
    rows = []
    for line_number, tokens in token_rows:
        row = []
        for token in tokens:
            if len(token) != 1 or not token.isalnum():
                raise LevelFormatError(
                    f"Line {line_number}: {token!r} is not a region symbol"
                )
            row.append(ids.setdefault(token, len(ids)))
        rows.append(row)
    return rows


def parse_row(line: str, line_number: int = 1) -> List[int]:
    """Parse a single row on its own; symbols are numbered within this row."""
    return _assign_ids([(line_number, _tokenize(line, split_packed=True))])[0]


def parse_level_text(text: str, level_id: str = "level") -> Level:
    lines = []
    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        lines.append((line_number, line))

    if not lines:
        raise LevelFormatError(f"Level {level_id!r} contains no rows")

    split_packed = len(lines) > 1
    token_rows = [(line_number, _tokenize(line, split_packed)) for line_number, line in lines]
    rows = _assign_ids(token_rows)
    return Level(id=level_id, grid_size=len(rows), regions=rows)
