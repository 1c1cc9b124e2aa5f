"""Tracing module: logs puzzle engine and solver steps and writes them to CSV."""

import csv
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class TraceStep:
    """A single step recorded while playing or solving a puzzle."""

    timestamp: float
    step_number: int
    action_type: str  # 'build', 'place', 'reject', 'remove', 'mark', 'solved', 'assign', 'backtrack', ...
    row: Optional[int] = None
    col: Optional[int] = None
    region_id: Optional[int] = None
    queen_count: Optional[int] = None
    domain_size: Optional[int] = None
    reason: Optional[str] = None


class Tracer:
    """Records engine and solver steps for logging and analysis."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.steps: List[TraceStep] = []
        self.start_time = datetime.now().timestamp()
        self.step_counter = 0

    def _get_timestamp(self) -> float:
        """Get elapsed time in seconds since tracer creation."""
        return datetime.now().timestamp() - self.start_time

    def _record(self, action_type: str, **fields: Any) -> None:
        if not self.enabled:
            return
        self.step_counter += 1
        self.steps.append(TraceStep(
            timestamp=self._get_timestamp(),
            step_number=self.step_counter,
            action_type=action_type,
            **fields,
        ))

    def log_build(self, grid_size: int, region_count: int):
        """Log a fresh grid being built."""
        self._record('build', domain_size=grid_size, reason=f"{region_count} regions")

    def log_place(self, row: int, col: int, region_id: int, queen_count: int):
        """Log an accepted queen placement."""
        self._record('place', row=row, col=col, region_id=region_id, queen_count=queen_count)

    def log_reject(self, row: int, col: int, reason: str):
        """Log a rejected placement."""
        self._record('reject', row=row, col=col, reason=reason)

    def log_remove(self, row: int, col: int, queen_count: int):
        """Log a queen removal."""
        self._record('remove', row=row, col=col, queen_count=queen_count)

    def log_mark(self, row: int, col: int, marked: bool):
        self._record('mark', row=row, col=col, reason="marked" if marked else "unmarked")

    def log_solved(self, queen_count: int):
        """Log the puzzle reaching its solved state."""
        self._record('solved', queen_count=queen_count)

    def log_assign(self, row: int, col: int, domain_size: int, queen_count: int):
        """Log a solver assignment of a queen to a row."""
        self._record('assign', row=row, col=col, domain_size=domain_size, queen_count=queen_count)

    def log_backtrack(self, row: int, reason: str = "No valid columns"):
        """Log a backtrack event."""
        self._record('backtrack', row=row, reason=reason)

    def log_forward_check(self, row: int, columns_pruned: int):
        """Log forward checking."""
        self._record(
            'forward_check',
            row=row,
            reason=f"Pruned {columns_pruned} columns from other rows",
        )

    def log_solution_found(self, queen_count: int):
        """Log when a solution is found."""
        self._record('solution_found', queen_count=queen_count)

    def to_csv(self, filepath: Path) -> None:
        """Write trace to CSV file."""
        if not self.steps:
            print("No trace steps to write")
            return

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        fieldnames = [
            'timestamp', 'step_number', 'action_type', 'row', 'col',
            'region_id', 'queen_count', 'domain_size', 'reason'
        ]

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for step in self.steps:
                writer.writerow(asdict(step))

        print(f"Trace written to {filepath} ({len(self.steps)} steps)")

    def summary(self) -> Dict[str, Any]:
        """Get a summary of the trace."""
        action_counts: Dict[str, int] = {}
        for step in self.steps:
            action_counts[step.action_type] = action_counts.get(step.action_type, 0) + 1

        return {
            'total_steps': len(self.steps),
            'elapsed_time_seconds': self._get_timestamp(),
            'action_counts': action_counts,
            'num_assignments': action_counts.get('assign', 0),
            'num_backtracks': action_counts.get('backtrack', 0),
            'num_rejections': action_counts.get('reject', 0),
        }


# Global tracer instance
_global_tracer: Optional[Tracer] = None


def get_tracer() -> Tracer:
    """Get or create the global tracer."""
    global _global_tracer
    if _global_tracer is None:
        _global_tracer = Tracer(enabled=True)
    return _global_tracer


def reset_tracer() -> None:
    """Reset the global tracer."""
    global _global_tracer
    _global_tracer = None


def enable_tracing(enabled: bool = True) -> None:
    """Enable or disable tracing."""
    get_tracer().enabled = enabled
