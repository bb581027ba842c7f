"""Board geometry helpers shared by the generator, solver and checkers."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from ..core.constants import BLOCK_SIZE, GRID_BOUNDS, N, NEIGHBOR_STEPS
from ..core.models import Board, Coord


def block_index(row: int, col: int) -> int:
    """Index 0..8 of the 3x3 block holding ``(row, col)``, band-major."""

    return (row // BLOCK_SIZE) * BLOCK_SIZE + col // BLOCK_SIZE


def block_cells(block: int) -> List[Coord]:
    top = (block // BLOCK_SIZE) * BLOCK_SIZE
    left = (block % BLOCK_SIZE) * BLOCK_SIZE
    return [
        (r, c)
        for r in range(top, top + BLOCK_SIZE)
        for c in range(left, left + BLOCK_SIZE)
    ]


def _build_neighbor_table() -> Tuple[Tuple[Tuple[Coord, ...], ...], ...]:
    table = []
    for r in range(N):
        row = []
        for c in range(N):
            row.append(tuple(
                (r + dr, c + dc)
                for dr, dc in NEIGHBOR_STEPS
                if GRID_BOUNDS.contains(r + dr, c + dc)
            ))
        table.append(tuple(row))
    return tuple(table)


_NEIGHBORS = _build_neighbor_table()


def neighbors(row: int, col: int) -> Tuple[Coord, ...]:
    """King-move neighbors of a cell that lie inside the grid."""

    return _NEIGHBORS[row][col]


def empty_board() -> Board:
    return [[0] * N for _ in range(N)]


def copy_board(board: Sequence[Sequence[int]]) -> Board:
    return [list(row) for row in board]


def board_from_marks(rows: Iterable[Iterable[int]]) -> Board:
    """Build a board from per-row marked column indices."""

    board = empty_board()
    for r, marks in enumerate(rows):
        for c in marks:
            board[r][c] = 1
    return board


def row_sums(board: Sequence[Sequence[int]]) -> List[int]:
    return [sum(row) for row in board]


def column_sums(board: Sequence[Sequence[int]]) -> List[int]:
    return [sum(board[r][c] for r in range(N)) for c in range(N)]


def block_sums(board: Sequence[Sequence[int]]) -> List[int]:
    sums = [0] * N
    for r in range(N):
        for c in range(N):
            sums[block_index(r, c)] += board[r][c]
    return sums
