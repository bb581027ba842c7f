"""Pretty-print helpers for boards, clue grids and puzzles."""

from __future__ import annotations

import sys
from typing import Optional, Sequence

from ..core.constants import BLOCK_SIZE, N
from ..core.models import Puzzle

MARKER = "o"
EMPTY = "."
BLANK_CLUE = "."


def _render(rows: Sequence[Sequence[str]]) -> str:
    header_cells = [f"{c:>2}" for c in range(N)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * N - 1))
    for r, row in enumerate(rows):
        row_render = " ".join(f"{symbol:>2}" for symbol in row)
        lines.append(f"{r:>2} | {row_render}")
        if r % BLOCK_SIZE == BLOCK_SIZE - 1 and r != N - 1:
            lines.append("    " + "-" * (3 * N - 1))
    return "\n".join(lines)


def format_board(board: Sequence[Sequence[int]]) -> str:
    return _render([[MARKER if value else EMPTY for value in row] for row in board])


def format_clue_grid(clue_grid: Sequence[Sequence[Optional[int]]]) -> str:
    return _render([
        [BLANK_CLUE if value is None else str(value) for value in row] for row in clue_grid
    ])


def format_puzzle(puzzle: Puzzle) -> str:
    """Clue digits on clued cells, markers from the solution elsewhere."""

    rows = []
    for r in range(N):
        row = []
        for c in range(N):
            clue = puzzle.clues[r][c]
            if clue is not None:
                row.append(str(clue))
            else:
                row.append(MARKER if puzzle.solution[r][c] else EMPTY)
        rows.append(row)
    return _render(rows)


def pretty_print_puzzle(puzzle: Puzzle, *, label: str | None = None, stream=None) -> None:
    """Print the puzzle clues and its solution overlay."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_clue_grid(puzzle.clues), file=stream)
    print(file=stream)
    print(format_puzzle(puzzle), file=stream)
    print(f"Clues: {puzzle.clue_count}", file=stream)
