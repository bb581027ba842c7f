"""Neighbor-count clue derivation and clue map conversions."""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

from ..core.constants import N
from ..core.models import Board, ClueGrid, ClueMap
from .grid import neighbors


def neighbor_count(board: Sequence[Sequence[int]], row: int, col: int) -> int:
    return sum(board[nr][nc] for nr, nc in neighbors(row, col))


def compute_clues(board: Sequence[Sequence[int]]) -> List[List[int]]:
    """Count the markers around every cell of ``board``.

    Off-grid neighbors are ignored, so corner cells see at most three and
    edge cells at most five markers. The cell's own marker never counts.
    """

    return [[neighbor_count(board, r, c) for c in range(N)] for r in range(N)]


def full_clue_map(board: Board) -> ClueMap:
    """Clue map with a clue on every non-marker cell of ``board``."""

    clues = compute_clues(board)
    return {
        (r, c): clues[r][c]
        for r in range(N)
        for c in range(N)
        if board[r][c] == 0
    }


def clue_map_from_grid(clue_grid: Sequence[Sequence[Optional[int]]]) -> ClueMap:
    return {
        (r, c): value
        for r, row in enumerate(clue_grid)
        for c, value in enumerate(row)
        if value is not None
    }


def clue_grid_from_map(clue_map: Mapping[tuple, int]) -> ClueGrid:
    grid: ClueGrid = [[None] * N for _ in range(N)]
    for (r, c), value in clue_map.items():
        grid[r][c] = value
    return grid


def clues_consistent(board: Board, clue_map: Mapping[tuple, int]) -> bool:
    """True when every clue sits on an empty cell and matches ``board``."""

    for (r, c), value in clue_map.items():
        if board[r][c] != 0:
            return False
        if neighbor_count(board, r, c) != value:
            return False
    return True
