"""Row-by-row backtracking shared by board generation and clue solving.

Both the unconstrained generator and the clue-constrained solver place one
catalog pattern per row, top to bottom, and prune with the same three unit
rules:

- no column and no block may exceed three markers;
- when a row closes a band (rows 2, 5 and 8), every block of that band must
  hold exactly three markers;
- every column must still be able to reach three markers with the rows
  that remain.

Callers specialise the search with a per-row candidate list (row-local
shuffles for generation, clue-filtered patterns for solving) and optional
feasibility callbacks run after a row is placed and at a complete board.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from ..core.constants import BLOCK_SIZE, N, UNIT_TARGET
from ..core.models import Board, RowPattern
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

PartialCheck = Callable[["SearchState", int], bool]
CompleteCheck = Callable[["SearchState"], bool]


class SearchBudgetExceeded(Exception):
    """Raised internally when a search visits more nodes than allowed."""


@dataclass
class SearchState:
    """Running counts of one search; never shared between searches."""

    rows: List[Optional[RowPattern]] = field(default_factory=lambda: [None] * N)
    col_counts: List[int] = field(default_factory=lambda: [0] * N)
    block_counts: List[int] = field(default_factory=lambda: [0] * N)

    def fits(self, row: int, pattern: RowPattern) -> bool:
        for col in pattern.marks:
            if self.col_counts[col] >= UNIT_TARGET:
                return False
        base = (row // BLOCK_SIZE) * BLOCK_SIZE
        for stack, added in enumerate(pattern.stack_counts):
            if added and self.block_counts[base + stack] + added > UNIT_TARGET:
                return False
        return True

    def apply(self, row: int, pattern: RowPattern) -> None:
        self.rows[row] = pattern
        for col in pattern.marks:
            self.col_counts[col] += 1
        base = (row // BLOCK_SIZE) * BLOCK_SIZE
        for stack, added in enumerate(pattern.stack_counts):
            self.block_counts[base + stack] += added

    def revert(self, row: int, pattern: RowPattern) -> None:
        self.rows[row] = None
        for col in pattern.marks:
            self.col_counts[col] -= 1
        base = (row // BLOCK_SIZE) * BLOCK_SIZE
        for stack, added in enumerate(pattern.stack_counts):
            self.block_counts[base + stack] -= added

    def band_closed(self, row: int) -> bool:
        """True unless ``row`` ends a band whose blocks are not all full."""

        if row % BLOCK_SIZE != BLOCK_SIZE - 1:
            return True
        base = (row // BLOCK_SIZE) * BLOCK_SIZE
        return all(
            self.block_counts[base + stack] == UNIT_TARGET
            for stack in range(N // BLOCK_SIZE)
        )

    def columns_reachable(self, remaining_rows: int) -> bool:
        return all(count + remaining_rows >= UNIT_TARGET for count in self.col_counts)

    def units_complete(self) -> bool:
        return all(count == UNIT_TARGET for count in self.col_counts) and all(
            count == UNIT_TARGET for count in self.block_counts
        )

    def cell(self, row: int, col: int) -> int:
        pattern = self.rows[row]
        return pattern.cells[col] if pattern is not None else 0

    def to_board(self) -> Board:
        return [list(pattern.cells) if pattern is not None else [0] * N for pattern in self.rows]


@dataclass
class SearchResult:
    solutions: int = 0
    boards: List[Board] = field(default_factory=list)
    nodes: int = 0


def search_rows(
    candidates: Sequence[Sequence[RowPattern]],
    *,
    limit: int = 1,
    keep: int = 1,
    partial_check: Optional[PartialCheck] = None,
    complete_check: Optional[CompleteCheck] = None,
    max_nodes: Optional[int] = None,
) -> SearchResult:
    """Enumerate valid boards built from ``candidates[row]`` patterns.

    The search stops as soon as ``limit`` boards were found. Up to ``keep``
    of them are copied into the result; count-only callers pass ``keep=0``.
    ``partial_check(state, row)`` runs after the unit rules accept a placed
    row; ``complete_check(state)`` must accept a full board before it counts.

    Raises:
        SearchBudgetExceeded: when ``max_nodes`` placements were attempted
            without finishing.
    """

    if len(candidates) != N:
        raise ValueError(f"Expected candidates for {N} rows, got {len(candidates)}")

    state = SearchState()
    result = SearchResult()

    def backtrack(row: int) -> bool:
        if row == N:
            if not state.units_complete():
                return False
            if complete_check is not None and not complete_check(state):
                return False
            result.solutions += 1
            if len(result.boards) < keep:
                result.boards.append(state.to_board())
            return result.solutions >= limit

        remaining_rows = N - (row + 1)
        for pattern in candidates[row]:
            if not state.fits(row, pattern):
                continue
            result.nodes += 1
            if max_nodes is not None and result.nodes > max_nodes:
                raise SearchBudgetExceeded(f"Search exceeded {max_nodes} nodes")
            state.apply(row, pattern)
            try:
                if (
                    state.band_closed(row)
                    and state.columns_reachable(remaining_rows)
                    and (partial_check is None or partial_check(state, row))
                    and backtrack(row + 1)
                ):
                    return True
            finally:
                state.revert(row, pattern)
        return False

    backtrack(0)
    LOGGER.debug(
        "Row search finished: %d solution(s), %d node(s)", result.solutions, result.nodes
    )
    return result
