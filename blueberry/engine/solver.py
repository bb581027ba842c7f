"""Clue-constrained backtracking solver.

One search core serves two modes:

- count mode (:meth:`ConstrainedSolver.count_solutions`) stops as soon as
  ``cap`` boards were found, which makes ``cap=2`` a cheap uniqueness test;
- first-solution mode (:meth:`ConstrainedSolver.solve_one`) returns the first
  board satisfying every unit and clue, or ``None``.

Clued cells can never hold a marker, so each row only tries the catalog
patterns that leave its clued columns empty. After every placed row the
clues around it are checked against the rows decided so far.
"""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence, Tuple

from ..core.constants import DEFAULT_SOLUTION_CAP, GRID_BOUNDS, N
from ..core.exceptions import InvalidClueMapError
from ..core.models import Board, ClueCell, Coord, RowPattern
from ..utils.logger import get_logger
from .clues import clue_map_from_grid
from .grid import neighbors
from .patterns import all_row_patterns
from .search import SearchState, search_rows


LOGGER = get_logger(__name__)

_ClueArea = Tuple[ClueCell, Tuple[Coord, ...]]


class ConstrainedSolver:
    """Counts or finds boards consistent with a (possibly partial) clue map."""

    def __init__(self, clue_map: Mapping[Coord, int]) -> None:
        self.clues: List[ClueCell] = []
        forbidden: List[set] = [set() for _ in range(N)]
        for (row, col), value in sorted(clue_map.items()):
            if not GRID_BOUNDS.contains(row, col):
                raise InvalidClueMapError(f"Clue at ({row},{col}) lies outside the grid")
            self.clues.append(ClueCell(row=row, col=col, value=value))
            forbidden[row].add(col)

        catalog = all_row_patterns()
        self.row_candidates: List[List[RowPattern]] = [
            [p for p in catalog if not any(p.is_marked(col) for col in forbidden[row])]
            for row in range(N)
        ]

        # A clue only changes status while one of its neighbor rows is being
        # placed; clues further up were settled exactly, clues further down
        # have no decided neighbors yet.
        self._areas_by_row: List[List[_ClueArea]] = [[] for _ in range(N)]
        self._unreachable = False
        for clue in self.clues:
            area = neighbors(clue.row, clue.col)
            if not 0 <= clue.value <= len(area):
                self._unreachable = True
            for row in range(max(0, clue.row - 1), min(N, clue.row + 2)):
                self._areas_by_row[row].append((clue, area))

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------
    def count_solutions(self, cap: int = DEFAULT_SOLUTION_CAP) -> int:
        """Number of consistent boards, counting no further than ``cap``."""

        if cap < 1:
            raise ValueError(f"cap must be at least 1, got {cap}")
        if self._unreachable:
            return 0
        result = search_rows(
            self.row_candidates,
            limit=cap,
            keep=0,
            partial_check=self._partial_ok,
            complete_check=self._complete_ok,
        )
        LOGGER.debug(
            "Counted %d solution(s) for %d clue(s) in %d node(s)",
            result.solutions, len(self.clues), result.nodes,
        )
        return result.solutions

    def solve_one(self) -> Optional[Board]:
        """First consistent board, or ``None`` when the clues admit none."""

        if self._unreachable:
            LOGGER.debug("Clue map holds a value no neighborhood can reach")
            return None
        result = search_rows(
            self.row_candidates,
            limit=1,
            keep=1,
            partial_check=self._partial_ok,
            complete_check=self._complete_ok,
        )
        if not result.boards:
            LOGGER.debug("No solution for %d clue(s)", len(self.clues))
            return None
        return result.boards[0]

    # ------------------------------------------------------------------
    # Clue feasibility
    # ------------------------------------------------------------------
    def _partial_ok(self, state: SearchState, last_row: int) -> bool:
        for clue, area in self._areas_by_row[last_row]:
            placed = 0
            undecided = 0
            for nr, nc in area:
                if nr <= last_row:
                    placed += state.cell(nr, nc)
                else:
                    undecided += 1
            if placed > clue.value:
                return False
            if placed + undecided < clue.value:
                return False
            if undecided == 0 and placed != clue.value:
                return False
        return True

    def _complete_ok(self, state: SearchState) -> bool:
        for clue in self.clues:
            total = sum(state.cell(nr, nc) for nr, nc in neighbors(clue.row, clue.col))
            if total != clue.value:
                return False
        return True


def count_solutions(clue_map: Mapping[Coord, int], cap: int = DEFAULT_SOLUTION_CAP) -> int:
    return ConstrainedSolver(clue_map).count_solutions(cap)


def solve_one(clue_map: Mapping[Coord, int]) -> Optional[Board]:
    return ConstrainedSolver(clue_map).solve_one()


def solve_clue_grid(clue_grid: Sequence[Sequence[Optional[int]]]) -> Optional[Board]:
    """Solve a full 9x9 clue grid where ``None`` marks an unclued cell."""

    return solve_one(clue_map_from_grid(clue_grid))
