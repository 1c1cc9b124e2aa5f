"""Backtracking Star Battle solver with MRV row selection and forward checking."""

from typing import Dict, List, Optional, Set

from .model import Level, Position
from src.utils.trace import Tracer, get_tracer

Assignment = Dict[int, int]  # row -> column of that row's queen
Domains = Dict[int, Set[int]]  # row -> columns still available


def solve(level: Level, tracer: Optional[Tracer] = None) -> Optional[List[Position]]:
    """
    Find one queen per row, column and region with no two queens touching
    diagonally. Returns row-ordered (row, col) positions, or None when the
    level has no solution.
    """
    tracer = tracer or get_tracer()
    if level.region_count != level.grid_size:
        return None

    domains: Domains = {row: set(range(level.grid_size)) for row in range(level.grid_size)}
    result = _backtrack(level, {}, domains, tracer)
    if result is None:
        return None
    return sorted(result.items())


def _backtrack(
    level: Level, assignment: Assignment, domains: Domains, tracer: Optional[Tracer] = None
) -> Optional[Assignment]:
    tracer = tracer or get_tracer()
    if len(assignment) == level.grid_size:
        if _is_complete(level, assignment):
            tracer.log_solution_found(queen_count=len(assignment))
            return dict(assignment)
        return None

    row = _select_unassigned_row(level, assignment, domains)
    if row is None:
        return None

    for col in _order_columns(row, domains):
        if not _is_consistent(level, row, col, assignment):
            continue

        local_assignment = dict(assignment)
        local_assignment[row] = col
        tracer.log_assign(
            row=row,
            col=col,
            domain_size=len(domains[row]),
            queen_count=len(local_assignment),
        )

        local_domains = _copy_domains(domains)
        local_domains[row] = {col}

        if not _forward_check(level, row, local_assignment, local_domains, tracer):
            continue

        result = _backtrack(level, local_assignment, local_domains, tracer)
        if result is not None:
            return result

    tracer.log_backtrack(row)
    return None


def _copy_domains(domains: Domains) -> Domains:
    return {row: set(cols) for row, cols in domains.items()}


def _select_unassigned_row(level: Level, assignment: Assignment, domains: Domains) -> Optional[int]:
    unassigned = [row for row in range(level.grid_size) if row not in assignment]
    if not unassigned:
        return None
    # Minimum Remaining Values (MRV) heuristic.
    return min(unassigned, key=lambda row: (len(domains[row]), row))


def _order_columns(row: int, domains: Domains) -> List[int]:
    # Deterministic ordering for reproducibility.
    return sorted(domains[row])


def _attacks(level: Level, row_a: int, col_a: int, row_b: int, col_b: int) -> bool:
    """Whether queens at the two cells would break a rule together."""
    if col_a == col_b:
        return True
    if level.region_at(row_a, col_a) == level.region_at(row_b, col_b):
        return True
    return abs(row_a - row_b) == 1 and abs(col_a - col_b) == 1


def _is_consistent(level: Level, row: int, col: int, assignment: Assignment) -> bool:
    for other_row, other_col in assignment.items():
        if _attacks(level, row, col, other_row, other_col):
            return False
    return True


def _forward_check(
    level: Level,
    row: int,
    assignment: Assignment,
    domains: Domains,
    tracer: Optional[Tracer] = None,
) -> bool:
    """Prune the other rows' columns after placing a queen in `row`."""
    tracer = tracer or get_tracer()
    col = assignment[row]

    pruned = 0
    for other_row in range(level.grid_size):
        if other_row in assignment:
            continue
        for other_col in list(domains[other_row]):
            if _attacks(level, row, col, other_row, other_col):
                domains[other_row].remove(other_col)
                pruned += 1
        if not domains[other_row]:
            return False

    if not _regions_reachable(level, assignment, domains):
        return False
    if pruned:
        tracer.log_forward_check(row=row, columns_pruned=pruned)
    return True


def _regions_reachable(level: Level, assignment: Assignment, domains: Domains) -> bool:
    """Every region without a queen must keep at least one candidate cell."""
    placed = {level.region_at(row, col) for row, col in assignment.items()}
    reachable: Set[int] = set()
    for row, cols in domains.items():
        if row in assignment:
            continue
        reachable.update(level.region_at(row, col) for col in cols)
    return all(region in placed or region in reachable for region in level.region_ids)


def _is_complete(level: Level, assignment: Assignment) -> bool:
    cols = set(assignment.values())
    regions = {level.region_at(row, col) for row, col in assignment.items()}
    return len(cols) == level.grid_size and regions == set(level.region_ids)
