"""CLI entrypoint: load level(s), run the solver, verify and report results."""

import argparse
import csv
import json
import logging
import os
from pathlib import Path
from typing import Any

from solver import replay_solution, solve_level
from src.starbattle.levels import LEVELS, get_level
from src.starbattle.loader import load_levels
from src.starbattle.model import Level
from src.utils.trace import get_tracer, reset_tracer

LEVELS_PATH_ENV = "STARBATTLE_LEVELS_PATH"
LEVEL_SUFFIXES = [".json", ".jsonl", ".parquet", ".txt"]


def parse_args():
    parser = argparse.ArgumentParser(description="Solve Star Battle levels and verify the solutions")
    parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        default=None,
        help=f"Level file or directory of level files (default: ${LEVELS_PATH_ENV}, else the bundled catalog)",
    )
    parser.add_argument(
        "--level",
        action="append",
        default=None,
        help="Only solve this level id (repeatable)",
    )
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write results as CSV")
    parser.add_argument("--trace-dir", type=Path, default=None, help="Write one solver trace CSV per level here")
    parser.add_argument("--show", action="store_true", help="Print the solved board for each level")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ...)")
    return parser.parse_args()


def collect_levels(input_path: Path | None, level_ids: list[str] | None = None) -> list[Level]:
    if input_path is None:
        env_path = os.environ.get(LEVELS_PATH_ENV)
        input_path = Path(env_path) if env_path else None

    if input_path is None:
        levels = [get_level(level_id) for level_id in (level_ids or LEVELS)]
        return levels

    if input_path.is_file():
        levels = load_levels(str(input_path))
    elif input_path.is_dir():
        levels = []
        for file_path in sorted(input_path.iterdir()):
            if file_path.suffix in LEVEL_SUFFIXES:
                levels.extend(load_levels(str(file_path)))
    else:
        raise ValueError(f"Input path {input_path} is neither file nor directory")

    if level_ids:
        wanted = set(level_ids)
        levels = [level for level in levels if level.id in wanted]
    return levels


def format_solution(positions: list[tuple[int, int]] | None) -> list[list[int]]:
    if not positions:
        return []
    return [[row, col] for row, col in positions]


def write_results_csv(results: list[dict[str, Any]], output_path: Path):
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "grid_size", "solution", "solved", "steps"])

        for r in results:
            writer.writerow([
                r["id"],
                r["grid_size"],
                json.dumps(r["solution"], separators=(",", ":")),
                r["solved"],
                r["steps"],
            ])


def main():
    args = parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    levels = collect_levels(args.input, args.level)
    results = []

    for level in levels:
        reset_tracer()
        tracer = get_tracer()

        try:
            positions = solve_level(level)
            solved = False
            if positions:
                engine = replay_solution(level, positions)
                solved = engine.is_puzzle_solved()
                if args.show:
                    print(f"{level.id} ({level.grid_size}x{level.grid_size}):")
                    print(engine.render())
                    print()
            elif args.show:
                print(f"{level.id}: no solution\n")

            summary = tracer.summary()
            results.append({
                "id": level.id,
                "grid_size": level.grid_size,
                "solution": format_solution(positions),
                "solved": solved,
                "steps": summary.get("num_assignments", summary["total_steps"]),
            })

            if args.trace_dir:
                tracer.to_csv(args.trace_dir / f"{level.id}_trace.csv")
        except Exception as e:
            print(f"ERROR: Failed to solve level {level.id}: {e}")
            results.append({
                "id": level.id,
                "grid_size": level.grid_size,
                "solution": [],
                "solved": False,
                "steps": -1,
            })

    if args.output:
        write_results_csv(results, args.output)
    else:
        print(results)


if __name__ == "__main__":
    main()
