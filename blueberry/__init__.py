"""Puzzle engine for the blueberry grid logic game.

Place exactly three markers in every row, column and 3x3 block; numeric
clues count the markers among the eight cells around them. The public API:

- ``blueberry.engine.assembler.make_puzzle``: generate a uniquely solvable puzzle.
- ``blueberry.engine.solver.ConstrainedSolver``: count or find solutions of a clue map.
- ``blueberry.io.codec`` helpers: flat ``clues81`` encoding of clue grids.
- ``blueberry.engine.session.PlayerSession``: a puzzle being played, with undo/redo.
"""

from .core.exceptions import BlueberryError, GenerationFailure
from .core.models import Puzzle
from .engine.assembler import PuzzleAssembler, PuzzleConfig, make_puzzle
from .engine.clues import compute_clues
from .engine.generator import generate_board
from .engine.solver import ConstrainedSolver, count_solutions, solve_one

__all__ = [
    "BlueberryError",
    "ConstrainedSolver",
    "GenerationFailure",
    "Puzzle",
    "PuzzleAssembler",
    "PuzzleConfig",
    "compute_clues",
    "count_solutions",
    "generate_board",
    "make_puzzle",
    "solve_one",
]

__version__ = "0.1.0"
