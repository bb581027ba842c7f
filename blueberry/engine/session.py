"""Player-side game state: cell cycling, undo/redo and the solution check."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ..core.constants import GRID_BOUNDS, N, PlayerCell
from ..core.models import Board, Puzzle
from .violations import PlayerBoard, Violations, compute_violations

# Keeps saved games bounded; the oldest snapshot is dropped first.
MAX_HISTORY_DEPTH = 500

_NEXT_STATE = {
    PlayerCell.UNKNOWN: PlayerCell.MARKER,
    PlayerCell.MARKER: PlayerCell.EMPTY,
    PlayerCell.EMPTY: PlayerCell.UNKNOWN,
}


def next_cell_state(value: int) -> int:
    """Cycle undecided -> marker -> empty -> undecided."""

    return int(_NEXT_STATE[PlayerCell(value)])


def empty_player_board() -> Board:
    return [[int(PlayerCell.UNKNOWN)] * N for _ in range(N)]


def check_solution(board: PlayerBoard, solution: Board) -> bool:
    """True when the player's markers sit exactly on the solution's markers.

    Cells marked empty and undecided cells both read as "no marker".
    """

    return all(
        (board[r][c] == PlayerCell.MARKER) == (solution[r][c] == 1)
        for r in range(N)
        for c in range(N)
    )


def _snapshot(board: PlayerBoard) -> Board:
    return [list(row) for row in board]


@dataclass
class PlayerSession:
    """A puzzle being played, with linear undo/redo over whole-board snapshots."""

    puzzle: Puzzle
    board: Board = field(default_factory=empty_player_board)
    history: List[Board] = field(default_factory=list)
    future: List[Board] = field(default_factory=list)
    use_dense: bool = False

    @property
    def can_undo(self) -> bool:
        return bool(self.history)

    @property
    def can_redo(self) -> bool:
        return bool(self.future)

    def _record(self) -> None:
        self.history.append(_snapshot(self.board))
        if len(self.history) > MAX_HISTORY_DEPTH:
            del self.history[0]
        self.future.clear()

    def press(self, row: int, col: int) -> bool:
        """Cycle an unclued cell. Clue cells are fixed, so pressing one does nothing."""

        if not GRID_BOUNDS.contains(row, col):
            raise IndexError(f"Cell ({row},{col}) lies outside the grid")
        if self.puzzle.clues[row][col] is not None:
            return False
        self._record()
        self.board[row][col] = next_cell_state(self.board[row][col])
        return True

    def clear(self) -> None:
        self._record()
        self.board = empty_player_board()

    def undo(self) -> bool:
        if not self.history:
            return False
        self.future.append(_snapshot(self.board))
        self.board = self.history.pop()
        return True

    def redo(self) -> bool:
        if not self.future:
            return False
        self.history.append(_snapshot(self.board))
        self.board = self.future.pop()
        return True

    def violations(self) -> Violations:
        return compute_violations(self.board, self.puzzle.clues)

    def is_solved(self) -> bool:
        return check_solution(self.board, self.puzzle.solution)
