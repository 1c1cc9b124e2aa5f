import json
import logging
import os
from typing import Any, Dict, List, Optional

import pandas as pd

from .model import Level, LevelFormatError
from .parser import parse_level_text

logger = logging.getLogger(__name__)

_SIZE_KEYS = ("gridSize", "grid_size", "size", "n")
_REGION_KEYS = ("regions", "layout", "grid", "region_matrix")


def _coerce_plain(value: Any) -> Any:
    """Turn numpy arrays (as produced by parquet rows) into nested lists."""
    if hasattr(value, "tolist"):
        value = value.tolist()
    if isinstance(value, (list, tuple)):
        return [_coerce_plain(v) for v in value]
    return value


def _first_present(record: Dict[str, Any], keys) -> Optional[Any]:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def level_from_record(record: Dict[str, Any], fallback_id: str) -> Level:
    """
    Build a Level from a raw record, accepting the key spellings used by
    exported level files. Grid size is inferred from the matrix when absent.
    """
    level_id = str(record.get("id") or fallback_id)

    regions = _first_present(record, _REGION_KEYS)
    if regions is None:
        raise LevelFormatError(f"Level {level_id!r} has no region matrix")
    if isinstance(regions, str):
        regions = parse_level_text(regions, level_id).regions
    regions = _coerce_plain(regions)

    size = _first_present(record, _SIZE_KEYS)
    if size is None:
        size = len(regions) if isinstance(regions, list) else 0
    elif isinstance(size, str) and size.strip().isdigit():
        size = int(size.strip())
    elif hasattr(size, "item"):
        size = size.item()

    try:
        return Level(id=level_id, grid_size=size, regions=regions)
    except LevelFormatError as e:
        raise LevelFormatError(f"Level {level_id!r}: {e}") from e


def _read_json_lines(file_path: str) -> List[Dict[str, Any]]:
    records = []
    with open(file_path, "r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                logger.warning(f"{file_path}:{line_number}: skipping line that is not JSON")
                continue
            if isinstance(obj, dict):
                records.append(obj)
    return records


def _read_records(file_path: str) -> List[Dict[str, Any]]:
    # Case 1: Parquet File (Binary)
    if file_path.endswith(".parquet"):
        df = pd.read_parquet(file_path)
        return df.to_dict(orient="records")

    # Case 2: JSON File (Text; array or object)
    if file_path.endswith(".json"):
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except json.JSONDecodeError:
            # Some sources use ".json" but actually store JSONL.
            return _read_json_lines(file_path)
        if isinstance(payload, list):
            return [p for p in payload if isinstance(p, dict)]
        if isinstance(payload, dict):
            # Either a single level or {"levels": [...]}.
            if isinstance(payload.get("levels"), list):
                return [p for p in payload["levels"] if isinstance(p, dict)]
            return [payload]
        return []

    # Case 3: JSONL File (Text)
    return _read_json_lines(file_path)


def load_levels(file_path: str) -> List[Level]:
    """
    Reads levels from a file. Handles .parquet, .json, .jsonl and plain-text
    .txt grids. Returns the levels in file order.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    stem = os.path.splitext(os.path.basename(file_path))[0]

    if file_path.endswith(".txt"):
        with open(file_path, "r", encoding="utf-8") as f:
            return [parse_level_text(f.read(), stem)]

    records = _read_records(file_path)
    levels = [
        level_from_record(record, f"{stem}_{index}")
        for index, record in enumerate(records, start=1)
    ]
    logger.info(f"Loaded {len(levels)} levels from {file_path}")
    return levels
