"""I/O helpers for levels and saved solution snapshots."""

import json
from pathlib import Path
from typing import Any, Iterable, List, Tuple


def load_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def save_json(path: Path, payload: Any) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def save_solution_state(path: Path, level_id: str, positions: Iterable[Tuple[int, int]]) -> None:
    """Persist the queens of one level as {"id": ..., "queens": [[row, col], ...]}."""
    save_json(path, {"id": level_id, "queens": [[row, col] for row, col in positions]})


def load_solution_state(path: Path) -> Tuple[str, List[Tuple[int, int]]]:
    payload = load_json(path)
    if not isinstance(payload, dict) or "queens" not in payload:
        raise ValueError(f"{path} does not contain a saved solution")
    queens = [(int(row), int(col)) for row, col in payload["queens"]]
    return str(payload.get("id", "")), queens
