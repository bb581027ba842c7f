"""Data models supporting the puzzle engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .constants import BLOCK_SIZE, N

Coord = Tuple[int, int]
Board = List[List[int]]
ClueGrid = List[List[Optional[int]]]
ClueMap = Dict[Coord, int]


@dataclass(frozen=True)
class RowPattern:
    """One row with exactly three markers; shared read-only by every search."""

    cells: Tuple[int, ...]
    marks: Tuple[int, ...] = field(init=False, repr=False)
    stack_counts: Tuple[int, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        marks = tuple(col for col, value in enumerate(self.cells) if value)
        stacks = [0] * (N // BLOCK_SIZE)
        for col in marks:
            stacks[col // BLOCK_SIZE] += 1
        object.__setattr__(self, "marks", marks)
        object.__setattr__(self, "stack_counts", tuple(stacks))

    def is_marked(self, col: int) -> bool:
        return self.cells[col] == 1


@dataclass(frozen=True)
class ClueCell:
    """A clue value attached to a non-marker cell."""

    row: int
    col: int
    value: int


@dataclass
class Puzzle:
    """A solution board with the clue grid that uniquely determines it."""

    solution: Board
    clues: ClueGrid

    def clue_map(self) -> ClueMap:
        return {
            (r, c): value
            for r, row in enumerate(self.clues)
            for c, value in enumerate(row)
            if value is not None
        }

    @property
    def clue_count(self) -> int:
        return sum(1 for row in self.clues for value in row if value is not None)
