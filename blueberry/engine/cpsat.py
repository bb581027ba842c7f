"""Independent CP-SAT model of the puzzle rules using OR-Tools.

The backtracking solver is the engine's workhorse; this model restates the
same rules declaratively so generated puzzles can be cross-checked by a
solver that shares none of its pruning code.
"""

from __future__ import annotations

from typing import List, Mapping, Optional, Tuple

from ortools.sat.python import cp_model

from ..core.constants import DEFAULT_SOLUTION_CAP, N, UNIT_TARGET
from ..core.exceptions import SolverTimeout
from ..core.models import Board, Coord
from ..utils.logger import get_logger
from .grid import block_cells, neighbors

LOGGER = get_logger(__name__)


class _BoardCollector(cp_model.CpSolverSolutionCallback):
    """Counts solutions and keeps the first one, stopping at ``cap``."""

    def __init__(self, cells: List[List[cp_model.IntVar]], cap: int) -> None:
        super().__init__()
        self._cells = cells
        self._cap = cap
        self.count = 0
        self.first: Optional[Board] = None

    def on_solution_callback(self) -> None:
        self.count += 1
        if self.first is None:
            self.first = [[int(self.value(var)) for var in row] for row in self._cells]
        if self.count >= self._cap:
            self.stop_search()


def _build_model(clue_map: Mapping[Coord, int]) -> Tuple[cp_model.CpModel, List[List[cp_model.IntVar]]]:
    model = cp_model.CpModel()
    cells = [[model.new_bool_var(f"m_{r}_{c}") for c in range(N)] for r in range(N)]

    for r in range(N):
        model.add(sum(cells[r]) == UNIT_TARGET)
    for c in range(N):
        model.add(sum(cells[r][c] for r in range(N)) == UNIT_TARGET)
    for b in range(N):
        model.add(sum(cells[r][c] for r, c in block_cells(b)) == UNIT_TARGET)

    for (r, c), value in clue_map.items():
        model.add(cells[r][c] == 0)
        model.add(sum(cells[nr][nc] for nr, nc in neighbors(r, c)) == value)

    return model, cells


def _run(clue_map: Mapping[Coord, int], cap: int, timeout: float) -> _BoardCollector:
    model, cells = _build_model(clue_map)
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    solver.parameters.enumerate_all_solutions = True
    solver.parameters.num_workers = 1

    collector = _BoardCollector(cells, cap)
    status = solver.solve(model, collector)
    # A finished enumeration reports OPTIMAL (or INFEASIBLE); anything else
    # short of the cap means the time limit cut the count off.
    finished = status in (cp_model.OPTIMAL, cp_model.INFEASIBLE)
    if not finished and collector.count < cap:
        raise SolverTimeout(f"CP-SAT gave up after {timeout:0.1f}s")
    LOGGER.debug(
        "CP-SAT: %d solution(s) for %d clue(s) (status=%s)",
        collector.count, len(clue_map), solver.status_name(status),
    )
    return collector


def count_solutions_cpsat(
    clue_map: Mapping[Coord, int],
    cap: int = DEFAULT_SOLUTION_CAP,
    timeout: float = 30.0,
) -> int:
    """Solution count up to ``cap`` as seen by CP-SAT."""

    if cap < 1:
        raise ValueError(f"cap must be at least 1, got {cap}")
    return _run(clue_map, cap, timeout).count


def solve_one_cpsat(clue_map: Mapping[Coord, int], timeout: float = 30.0) -> Optional[Board]:
    return _run(clue_map, 1, timeout).first
