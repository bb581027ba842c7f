"""Saved-game documents for a player session.

Where the text is kept is the caller's business; this module only builds
documents and validates them in full before a session is rebuilt from one.
"""

from __future__ import annotations

import json
import time
from typing import Any, Callable, Dict, Optional

from ..core.constants import MAX_CLUE, MIN_CLUE, N
from ..core.exceptions import SaveFormatError
from ..core.models import Puzzle
from ..engine.session import MAX_HISTORY_DEPTH, PlayerSession
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

SAVE_VERSION = 1


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_player_cell(value: object) -> bool:
    return _is_int(value) and value in (-1, 0, 1)


def _is_solution_cell(value: object) -> bool:
    return _is_int(value) and value in (0, 1)


def _is_clue_cell(value: object) -> bool:
    return value is None or (_is_int(value) and MIN_CLUE <= value <= MAX_CLUE)


def _is_grid(value: object, cell_ok: Callable[[object], bool]) -> bool:
    if not isinstance(value, list) or len(value) != N:
        return False
    return all(
        isinstance(row, list) and len(row) == N and all(cell_ok(cell) for cell in row)
        for row in value
    )


def _is_board_stack(value: object) -> bool:
    if not isinstance(value, list) or len(value) > MAX_HISTORY_DEPTH:
        return False
    return all(_is_grid(board, _is_player_cell) for board in value)


def validate_saved_game(payload: Any) -> None:
    if not isinstance(payload, dict):
        raise SaveFormatError("Saved game must be a JSON object")
    version = payload.get("v")
    if not _is_int(version) or version != SAVE_VERSION:
        raise SaveFormatError(f"Unsupported saved game version: {version!r}")
    saved_at = payload.get("savedAt")
    if isinstance(saved_at, bool) or not isinstance(saved_at, (int, float)):
        raise SaveFormatError("Saved game savedAt must be a number")
    if not isinstance(payload.get("useDense"), bool):
        raise SaveFormatError("Saved game useDense must be a boolean")

    puzzle = payload.get("puzzle")
    if not isinstance(puzzle, dict):
        raise SaveFormatError("Saved game puzzle must be an object")
    if not _is_grid(puzzle.get("solution"), _is_solution_cell):
        raise SaveFormatError(f"Saved puzzle solution must be a {N}x{N} grid of 0/1")
    if not _is_grid(puzzle.get("puzzleClues"), _is_clue_cell):
        raise SaveFormatError(f"Saved puzzle clues must be a {N}x{N} grid of null or 0..8")

    if not _is_grid(payload.get("playerBoard"), _is_player_cell):
        raise SaveFormatError(f"Saved player board must be a {N}x{N} grid of -1/0/1")
    for key in ("history", "future"):
        if not _is_board_stack(payload.get(key)):
            raise SaveFormatError(
                f"Saved game {key} must hold at most {MAX_HISTORY_DEPTH} player boards"
            )


def session_to_jsonable(session: PlayerSession, saved_at: Optional[float] = None) -> Dict[str, Any]:
    """Document for ``session``; ``saved_at`` is epoch milliseconds, defaulting to now."""

    return {
        "v": SAVE_VERSION,
        "savedAt": int(time.time() * 1000) if saved_at is None else saved_at,
        "puzzle": {
            "solution": [list(row) for row in session.puzzle.solution],
            "puzzleClues": [list(row) for row in session.puzzle.clues],
        },
        "playerBoard": [list(row) for row in session.board],
        "history": [[list(row) for row in board] for board in session.history],
        "future": [[list(row) for row in board] for board in session.future],
        "useDense": session.use_dense,
    }


def session_from_jsonable(payload: Any) -> PlayerSession:
    validate_saved_game(payload)
    puzzle = payload["puzzle"]
    return PlayerSession(
        puzzle=Puzzle(
            solution=[list(row) for row in puzzle["solution"]],
            clues=[list(row) for row in puzzle["puzzleClues"]],
        ),
        board=[list(row) for row in payload["playerBoard"]],
        history=[[list(row) for row in board] for board in payload["history"]],
        future=[[list(row) for row in board] for board in payload["future"]],
        use_dense=payload["useDense"],
    )


def dumps_saved_game(session: PlayerSession, saved_at: Optional[float] = None) -> str:
    return json.dumps(session_to_jsonable(session, saved_at))


def loads_saved_game(text: str) -> PlayerSession:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SaveFormatError(f"Saved game is not valid JSON: {exc}") from exc
    session = session_from_jsonable(payload)
    LOGGER.debug(
        "Saved game restored (%d undo step(s), %d redo step(s))",
        len(session.history), len(session.future),
    )
    return session
