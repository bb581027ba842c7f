"""Random full-board generation under the exact-count rules."""

from __future__ import annotations

import random
from typing import List, Optional

from ..core.constants import N
from ..core.exceptions import GenerationFailure
from ..core.models import Board, RowPattern
from ..utils.logger import get_logger
from .patterns import all_row_patterns
from .search import SearchBudgetExceeded, search_rows


LOGGER = get_logger(__name__)


class BoardGenerator:
    """Builds one valid board by backtracking over shuffled row patterns.

    Each row gets its own shuffle of the catalog, which is where variety
    between boards comes from; correctness rests entirely on the pruning in
    :func:`search_rows`. ``max_nodes`` bounds the search so that an
    unexpectedly hard instance surfaces as :class:`GenerationFailure`
    instead of running forever.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        max_nodes: Optional[int] = None,
    ) -> None:
        self.rng = rng or random.Random()
        self.max_nodes = max_nodes

    def generate(self) -> Board:
        candidates = self._shuffled_rows()
        try:
            result = search_rows(candidates, limit=1, keep=1, max_nodes=self.max_nodes)
        except SearchBudgetExceeded as exc:
            raise GenerationFailure(f"Board search gave up: {exc}") from exc
        if not result.boards:
            raise GenerationFailure("Board search exhausted every pattern combination")
        LOGGER.debug("Generated board after %d node(s)", result.nodes)
        return result.boards[0]

    def _shuffled_rows(self) -> List[List[RowPattern]]:
        catalog = all_row_patterns()
        rows = []
        for _ in range(N):
            shuffled = list(catalog)
            self.rng.shuffle(shuffled)
            rows.append(shuffled)
        return rows


def generate_board(rng: Optional[random.Random] = None) -> Board:
    """Return a fresh valid board; see :class:`BoardGenerator`."""

    return BoardGenerator(rng=rng).generate()
