"""Shared constants and enumerations for the blueberry puzzle engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

# Grid side; 3 bands x 3 stacks of 3x3 blocks.
N = 9
BLOCK_SIZE = 3
UNIT_TARGET = 3

MIN_CLUE = 0
MAX_CLUE = 8
NO_CLUE = -1
CLUES81_LENGTH = N * N

DEFAULT_SOLUTION_CAP = 2
MIN_DENSE_CLUES = 22

NEIGHBOR_STEPS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)


class UnitKind(str, Enum):
    """Kinds of units that must hold exactly three markers."""

    ROW = "ROW"
    COLUMN = "COLUMN"
    BLOCK = "BLOCK"


class PlayerCell(int, Enum):
    """Cell states of a board being marked by a player."""

    EMPTY = -1
    UNKNOWN = 0
    MARKER = 1


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols


GRID_BOUNDS = Bounds(rows=N, cols=N)
