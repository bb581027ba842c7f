"""Flat ``clues81`` encoding of clue grids.

A clue grid is stored row-major as 81 integers where ``-1`` means "no clue"
and ``0..8`` is a clue value. Malformed arrays are rejected here, before
they ever reach the solver.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..core.constants import CLUES81_LENGTH, MAX_CLUE, MIN_CLUE, N, NO_CLUE
from ..core.exceptions import ClueDecodeError
from ..core.models import ClueGrid


def _is_valid_value(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return value == NO_CLUE or MIN_CLUE <= value <= MAX_CLUE


def validate_clues81(values: Sequence[object]) -> None:
    if len(values) != CLUES81_LENGTH:
        raise ClueDecodeError(
            f"clues81 must be length {CLUES81_LENGTH}, got {len(values)}"
        )
    for index, value in enumerate(values):
        if not _is_valid_value(value):
            raise ClueDecodeError(f"Invalid clues81 value {value!r} at index {index}")


def encode_clues81(clue_grid: Sequence[Sequence[Optional[int]]]) -> List[int]:
    if len(clue_grid) != N or any(len(row) != N for row in clue_grid):
        raise ClueDecodeError("Clue grid must be 9x9")
    values = [NO_CLUE if value is None else value for row in clue_grid for value in row]
    validate_clues81(values)
    return values


def decode_clues81(values: Sequence[object]) -> ClueGrid:
    validate_clues81(values)
    return [
        [None if values[r * N + c] == NO_CLUE else values[r * N + c] for c in range(N)]
        for r in range(N)
    ]
