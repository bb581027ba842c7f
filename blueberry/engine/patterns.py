"""Catalog of every row holding exactly three markers."""

from __future__ import annotations

from functools import lru_cache
from itertools import combinations
from typing import Tuple

from ..core.constants import N, UNIT_TARGET
from ..core.models import RowPattern


@lru_cache(maxsize=None)
def all_row_patterns() -> Tuple[RowPattern, ...]:
    """Return the 84 row patterns in combination order.

    Computed on first use and shared by every search afterwards; the
    patterns are frozen, so concurrent readers never observe mutation.
    """

    patterns = []
    for marks in combinations(range(N), UNIT_TARGET):
        cells = [0] * N
        for col in marks:
            cells[col] = 1
        patterns.append(RowPattern(cells=tuple(cells)))
    return tuple(patterns)
