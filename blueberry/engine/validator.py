"""Deterministic rule validation for boards and puzzles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from ..core.constants import N, UNIT_TARGET, UnitKind
from ..core.exceptions import ValidationError
from ..core.models import Board, Puzzle
from ..utils.logger import get_logger
from .clues import neighbor_count
from .grid import block_sums, column_sums, row_sums


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class BoardValidator:
    """Runs deterministic validation over a finished board or puzzle."""

    def validate(self, board: Sequence[Sequence[int]]) -> ValidationResult:
        messages: List[str] = []
        try:
            self._check_shape(board)
        except ValidationError as exc:
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=[str(exc)])
        for kind, sums in (
            (UnitKind.ROW, row_sums(board)),
            (UnitKind.COLUMN, column_sums(board)),
            (UnitKind.BLOCK, block_sums(board)),
        ):
            for index, total in enumerate(sums):
                if total != UNIT_TARGET:
                    messages.append(f"{kind.value.title()} {index} has {total} markers")
        if messages:
            LOGGER.error("Validation failed: %s", "; ".join(messages))
        return ValidationResult(ok=not messages, messages=messages)

    def validate_puzzle(self, puzzle: Puzzle) -> ValidationResult:
        result = self.validate(puzzle.solution)
        if not result.ok:
            return result
        messages: List[str] = []
        if len(puzzle.clues) != N or any(len(row) != N for row in puzzle.clues):
            return ValidationResult(ok=False, messages=["Clue grid must be 9x9"])
        for (r, c), value in puzzle.clue_map().items():
            if puzzle.solution[r][c]:
                messages.append(f"Clue at ({r},{c}) sits on a marker")
            elif neighbor_count(puzzle.solution, r, c) != value:
                messages.append(f"Clue at ({r},{c}) does not match the solution")
        if messages:
            LOGGER.error("Puzzle validation failed: %s", "; ".join(messages))
        return ValidationResult(ok=not messages, messages=messages)

    @staticmethod
    def _check_shape(board: Sequence[Sequence[int]]) -> None:
        if len(board) != N or any(len(row) != N for row in board):
            raise ValidationError("Board must be 9x9")
        for r, row in enumerate(board):
            for c, value in enumerate(row):
                if value not in (0, 1):
                    raise ValidationError(f"Invalid cell value {value!r} at ({r},{c})")


def check_board(board: Board) -> None:
    """Raise :class:`ValidationError` unless every unit holds three markers."""

    result = BoardValidator().validate(board)
    if not result.ok:
        raise ValidationError(result.messages[0])
