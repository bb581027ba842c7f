"""Greedy clue removal that keeps the solution unique."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from ..core.constants import DEFAULT_SOLUTION_CAP, MIN_DENSE_CLUES, N
from ..core.models import ClueMap, Coord
from ..utils.logger import get_logger
from .grid import block_index
from .solver import count_solutions


LOGGER = get_logger(__name__)


@dataclass
class MinimizationResult:
    active: ClueMap
    removed: ClueMap = field(default_factory=dict)
    recounts: int = 0

    @property
    def clue_count(self) -> int:
        return len(self.active)


class PuzzleMinimizer:
    """Removes clues in random order while the puzzle stays uniquely solvable.

    The result is locally minimal for the shuffle that produced it: every
    remaining clue is needed once the others are fixed. It is not the
    smallest possible clue set, and different seeds give different clue
    counts.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        cap: int = DEFAULT_SOLUTION_CAP,
        min_dense_clues: int = MIN_DENSE_CLUES,
    ) -> None:
        self.rng = rng or random.Random()
        self.cap = cap
        self.min_dense_clues = min_dense_clues

    def minimize(self, full_clue_map: Mapping[Coord, int]) -> MinimizationResult:
        active: Dict[Coord, int] = dict(full_clue_map)
        removed: Dict[Coord, int] = {}
        order: List[Coord] = sorted(active)
        self.rng.shuffle(order)

        recounts = 0
        for coord in order:
            value = active.pop(coord)
            recounts += 1
            if count_solutions(active, self.cap) == 1:
                removed[coord] = value
            else:
                active[coord] = value

        LOGGER.debug(
            "Minimized %d clue(s) down to %d after %d recount(s)",
            len(full_clue_map), len(active), recounts,
        )
        return MinimizationResult(active=active, removed=removed, recounts=recounts)

    def densify(self, result: MinimizationResult) -> ClueMap:
        """Restore removed clues for block coverage and a minimum clue count.

        Restoring a clue can only rule boards out, so the uniqueness reached
        by :meth:`minimize` still holds afterwards.
        """

        active: Dict[Coord, int] = dict(result.active)
        pool: List[Coord] = sorted(result.removed)

        covered = {block_index(r, c) for r, c in active}
        for block in range(N):
            if block in covered:
                continue
            for coord in pool:
                if block_index(*coord) == block:
                    active[coord] = result.removed[coord]
                    pool.remove(coord)
                    break

        if len(active) < self.min_dense_clues:
            self.rng.shuffle(pool)
            while len(active) < self.min_dense_clues and pool:
                coord = pool.pop()
                active[coord] = result.removed[coord]

        LOGGER.debug("Densified %d clue(s) to %d", len(result.active), len(active))
        return active


def minimize_clues(
    full_clue_map: Mapping[Coord, int],
    dense: bool = False,
    rng: Optional[random.Random] = None,
) -> ClueMap:
    minimizer = PuzzleMinimizer(rng=rng)
    result = minimizer.minimize(full_clue_map)
    if dense:
        return minimizer.densify(result)
    return result.active
