"""Persistent pool of pre-generated puzzles.

The pool is a single JSON document holding many ``clues81`` entries plus
generation metadata. The engine never touches it; the batch CLI appends to
it and callers load entries back to re-solve them.
"""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from ..core.constants import N
from ..core.exceptions import ClueDecodeError, PoolFormatError
from ..core.models import ClueMap, Puzzle
from ..engine.clues import clue_map_from_grid
from ..utils.logger import get_logger
from .codec import decode_clues81, encode_clues81, validate_clues81


LOGGER = get_logger(__name__)

POOL_VERSION = 1
DEFAULT_POOL_PATH = Path("assets/pool/puzzlePool.v1.json")

# Caller-supplied difficulty tags; not a rating computed by the engine.
DENSE_HUMAN_COMPLEXITY = 100
DEFAULT_HUMAN_COMPLEXITY = 200


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class PuzzleEntry:
    gen_seconds: float
    human_complex: int
    clues81: List[int]

    @classmethod
    def from_puzzle(cls, puzzle: Puzzle, gen_seconds: float, dense: bool) -> "PuzzleEntry":
        return cls(
            gen_seconds=round(gen_seconds, 3),
            human_complex=DENSE_HUMAN_COMPLEXITY if dense else DEFAULT_HUMAN_COMPLEXITY,
            clues81=encode_clues81(puzzle.clues),
        )

    def clue_map(self) -> ClueMap:
        return clue_map_from_grid(decode_clues81(self.clues81))

    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "genSeconds": self.gen_seconds,
            "humanComplex": self.human_complex,
            "clues81": list(self.clues81),
        }

    @classmethod
    def from_jsonable(cls, payload: Dict[str, Any]) -> "PuzzleEntry":
        try:
            entry = cls(
                gen_seconds=float(payload.get("genSeconds", 0.0)),
                human_complex=int(payload.get("humanComplex", 0)),
                clues81=list(payload["clues81"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise PoolFormatError(f"Malformed pool entry: {exc}") from exc
        validate_clues81(entry.clues81)
        return entry


@dataclass
class PuzzlePool:
    dense: bool = False
    puzzles: List[PuzzleEntry] = field(default_factory=list)
    generated_at_utc: str = field(default_factory=_utc_now)
    version: int = POOL_VERSION
    n: int = N

    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "N": self.n,
            "generatedAtUtc": self.generated_at_utc,
            "dense": self.dense,
            "puzzles": [entry.to_jsonable() for entry in self.puzzles],
        }


def entry_score(entry: PuzzleEntry) -> float:
    """Sort key: human complexity plus ``100 * sqrt(generation seconds)``."""

    return entry.human_complex + 100 * math.sqrt(max(0.0, entry.gen_seconds))


def sort_pool(pool: PuzzlePool) -> None:
    """Stable ascending sort of ``pool.puzzles`` by :func:`entry_score`."""

    pool.puzzles.sort(key=entry_score)


class PoolStore:
    """Load and save a puzzle pool document on disk."""

    def __init__(self, path: Path | str = DEFAULT_POOL_PATH) -> None:
        self.path = Path(path)

    def load(self, dense: bool = False) -> PuzzlePool:
        """Read the pool, or start an empty one when the file is missing."""

        if not self.path.exists():
            LOGGER.info("No pool at %s; starting empty", self.path)
            return PuzzlePool(dense=dense)

        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise PoolFormatError(f"Pool at {self.path} is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise PoolFormatError("Pool document must be a JSON object")
        version = payload.get("version")
        if isinstance(version, bool) or version != POOL_VERSION:
            raise PoolFormatError(f"Unsupported pool version: {version!r}")
        if payload.get("N") != N:
            raise PoolFormatError(f"Pool N mismatch: file={payload.get('N')}, code={N}")
        raw_puzzles = payload.get("puzzles")
        if not isinstance(raw_puzzles, list):
            raise PoolFormatError("Pool puzzles must be an array")

        puzzles = []
        for index, raw in enumerate(raw_puzzles):
            if not isinstance(raw, dict):
                raise PoolFormatError(f"Pool entry {index} must be an object")
            try:
                puzzles.append(PuzzleEntry.from_jsonable(raw))
            except ClueDecodeError as exc:
                raise PoolFormatError(f"Pool entry {index}: {exc}") from exc

        return PuzzlePool(
            dense=bool(payload.get("dense", dense)),
            puzzles=puzzles,
            generated_at_utc=str(payload.get("generatedAtUtc", _utc_now())),
        )

    def save(self, pool: PuzzlePool) -> None:
        """Write the pool through a temporary file so readers never see half a document."""

        pool.generated_at_utc = _utc_now()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(
            json.dumps(pool.to_jsonable(), indent=2), encoding="utf-8"
        )
        os.replace(tmp_path, self.path)
        LOGGER.debug("Pool saved: %s (%d puzzle(s))", self.path, len(pool.puzzles))
