"""Live rule checking for a board a player is still marking."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..core.constants import N, UNIT_TARGET, PlayerCell
from .grid import block_cells, neighbors

PlayerBoard = Sequence[Sequence[int]]


@dataclass
class Violations:
    row: List[bool]
    col: List[bool]
    block: List[bool]
    clue_area: List[List[bool]]

    def has_any(self) -> bool:
        return any(self.row) or any(self.col) or any(self.block) or any(
            flag for line in self.clue_area for flag in line
        )


def _tally(values) -> tuple:
    markers = 0
    unknown = 0
    for value in values:
        if value == PlayerCell.MARKER:
            markers += 1
        elif value == PlayerCell.UNKNOWN:
            unknown += 1
    return markers, unknown


def unit_violated(markers: int, unknown: int, required: int = UNIT_TARGET) -> bool:
    if markers > required:
        return True
    if markers + unknown < required:
        return True
    return unknown == 0 and markers != required


def compute_violations(
    board: PlayerBoard,
    clue_grid: Sequence[Sequence[Optional[int]]],
) -> Violations:
    """Flag units and clue cells that can no longer be satisfied.

    Cells hold ``-1`` (marked empty), ``0`` (undecided) or ``1`` (marker).
    A clue is violated when the markers around it already exceed it or
    when markers plus undecided neighbors cannot reach it.
    """

    row = [unit_violated(*_tally(board[r])) for r in range(N)]
    col = [unit_violated(*_tally(board[r][c] for r in range(N))) for c in range(N)]
    block = [
        unit_violated(*_tally(board[r][c] for r, c in block_cells(b)))
        for b in range(N)
    ]

    clue_area = [[False] * N for _ in range(N)]
    for r in range(N):
        for c in range(N):
            clue = clue_grid[r][c]
            if clue is None:
                continue
            markers, unknown = _tally(board[nr][nc] for nr, nc in neighbors(r, c))
            clue_area[r][c] = markers > clue or markers + unknown < clue

    return Violations(row=row, col=col, block=block, clue_area=clue_area)
