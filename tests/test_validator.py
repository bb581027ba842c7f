import unittest

from blueberry.core.exceptions import ValidationError
from blueberry.core.models import Puzzle
from blueberry.engine.clues import clue_grid_from_map, compute_clues, full_clue_map
from blueberry.engine.grid import board_from_marks, copy_board
from blueberry.engine.validator import BoardValidator, check_board
from blueberry.engine.violations import compute_violations, unit_violated


DIAGONAL_BOARD = board_from_marks([(0, 3, 6), (1, 4, 7), (2, 5, 8)] * 3)


class BoardValidatorTests(unittest.TestCase):
    def test_valid_board_passes(self) -> None:
        result = BoardValidator().validate(DIAGONAL_BOARD)
        self.assertTrue(result.ok)
        self.assertEqual(result.messages, [])
        check_board(DIAGONAL_BOARD)

    def test_moved_marker_breaks_units(self) -> None:
        board = copy_board(DIAGONAL_BOARD)
        board[0][0] = 0
        board[0][1] = 1
        result = BoardValidator().validate(board)
        self.assertFalse(result.ok)
        self.assertIn("Column 0 has 2 markers", result.messages)
        self.assertIn("Column 1 has 4 markers", result.messages)
        with self.assertRaises(ValidationError):
            check_board(board)

    def test_wrong_shape_is_rejected(self) -> None:
        result = BoardValidator().validate(DIAGONAL_BOARD[:8])
        self.assertFalse(result.ok)
        self.assertEqual(result.messages, ["Board must be 9x9"])

    def test_puzzle_clues_must_match_solution(self) -> None:
        clues = clue_grid_from_map(full_clue_map(DIAGONAL_BOARD))
        validator = BoardValidator()
        self.assertTrue(validator.validate_puzzle(Puzzle(DIAGONAL_BOARD, clues)).ok)

        clues[0][1] = 7
        clues[0][0] = 1
        result = validator.validate_puzzle(Puzzle(DIAGONAL_BOARD, clues))
        self.assertFalse(result.ok)
        self.assertIn("Clue at (0,0) sits on a marker", result.messages)
        self.assertIn("Clue at (0,1) does not match the solution", result.messages)


class ViolationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clues = clue_grid_from_map(full_clue_map(DIAGONAL_BOARD))

    def test_unit_rules(self) -> None:
        self.assertFalse(unit_violated(0, 9))
        self.assertFalse(unit_violated(3, 0))
        self.assertTrue(unit_violated(4, 5))
        self.assertTrue(unit_violated(1, 1))
        self.assertTrue(unit_violated(2, 0))

    def test_untouched_board_has_no_violations(self) -> None:
        board = [[0] * 9 for _ in range(9)]
        self.assertFalse(compute_violations(board, self.clues).has_any())

    def test_solved_board_has_no_violations(self) -> None:
        board = [[1 if v else -1 for v in row] for row in DIAGONAL_BOARD]
        self.assertFalse(compute_violations(board, self.clues).has_any())

    def test_extra_marker_flags_row_column_and_clues(self) -> None:
        board = [[1 if v else 0 for v in row] for row in DIAGONAL_BOARD]
        board[0][1] = 1
        violations = compute_violations(board, self.clues)
        self.assertTrue(violations.row[0])
        self.assertTrue(violations.col[1])
        self.assertTrue(violations.block[0])
        self.assertFalse(violations.row[1])
        # (1,0) clue counts the new marker on (0,1).
        self.assertTrue(violations.clue_area[1][0])

    def test_clue_unreachable_when_neighbors_marked_empty(self) -> None:
        clue_values = compute_clues(DIAGONAL_BOARD)
        board = [[0] * 9 for _ in range(9)]
        for r, c in ((0, 0), (1, 1), (0, 1), (1, 0), (0, 2), (1, 2)):
            board[r][c] = -1
        clue_grid = [[None] * 9 for _ in range(9)]
        clue_grid[0][1] = clue_values[0][1]
        violations = compute_violations(board, clue_grid)
        self.assertTrue(violations.clue_area[0][1])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
