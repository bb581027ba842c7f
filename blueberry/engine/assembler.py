"""Puzzle assembly orchestration.

Three steps:
  1. Board: generate a full valid board and re-validate it.
  2. Clues: derive a clue for every empty cell.
  3. Minimize: drop clues while the board stays the only solution, then
     optionally restore some for denser puzzles.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_SOLUTION_CAP, MIN_DENSE_CLUES
from ..core.exceptions import GenerationFailure
from ..core.models import Board, Puzzle
from ..utils.logger import get_logger
from .clues import clue_grid_from_map, full_clue_map
from .generator import BoardGenerator
from .minimizer import PuzzleMinimizer
from .validator import check_board


LOGGER = get_logger(__name__)


@dataclass
class PuzzleConfig:
    dense: bool = False
    seed: Optional[int] = None
    solution_cap: int = DEFAULT_SOLUTION_CAP
    min_dense_clues: int = MIN_DENSE_CLUES
    generation_attempts: int = 1
    max_search_nodes: Optional[int] = None


class PuzzleAssembler:
    """High-level orchestrator: board generation, clue derivation, minimization."""

    def __init__(self, config: Optional[PuzzleConfig] = None, rng: Optional[random.Random] = None) -> None:
        self.config = config or PuzzleConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.generator = BoardGenerator(rng=self.rng, max_nodes=self.config.max_search_nodes)
        self.minimizer = PuzzleMinimizer(
            rng=self.rng,
            cap=self.config.solution_cap,
            min_dense_clues=self.config.min_dense_clues,
        )

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def make_puzzle(self) -> Puzzle:
        board = self._generate_board()
        full = full_clue_map(board)
        result = self.minimizer.minimize(full)
        active = self.minimizer.densify(result) if self.config.dense else result.active
        LOGGER.info(
            "Puzzle assembled with %d clue(s) (%d removed, dense=%s)",
            len(active), len(full) - len(active), self.config.dense,
        )
        return Puzzle(solution=board, clues=clue_grid_from_map(active))

    def _generate_board(self) -> Board:
        attempts = max(1, self.config.generation_attempts)
        for attempt in range(1, attempts + 1):
            LOGGER.debug("Board generation attempt %s/%s", attempt, attempts)
            try:
                board = self.generator.generate()
            except GenerationFailure as exc:
                LOGGER.warning("Board generation attempt failed: %s", exc)
                continue
            check_board(board)
            return board
        raise GenerationFailure(f"Unable to generate a board after {attempts} attempt(s)")


def make_puzzle(dense: bool = False, rng: Optional[random.Random] = None) -> Puzzle:
    """Generate a uniquely solvable puzzle; see :class:`PuzzleAssembler`."""

    return PuzzleAssembler(PuzzleConfig(dense=dense), rng=rng).make_puzzle()
