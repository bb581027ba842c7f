"""Custom exception hierarchy for puzzle generation and solving."""


class BlueberryError(Exception):
    """Base exception for engine failures."""


class GenerationFailure(BlueberryError):
    """Raised when the board search exhausts without producing a valid board."""


class ValidationError(BlueberryError):
    """Raised when a board or puzzle fails the integrity checks."""


class InvalidClueMapError(BlueberryError, ValueError):
    """Raised when a clue map references cells outside the grid."""


class ClueDecodeError(BlueberryError, ValueError):
    """Raised when a flat clues81 array is malformed."""


class PoolFormatError(BlueberryError):
    """Raised when a puzzle pool document cannot be understood."""


class SolverTimeout(BlueberryError):
    """Raised when the CP-SAT cross-check runs out of time."""


class SaveFormatError(BlueberryError, ValueError):
    """Raised when a saved-game document fails validation."""
