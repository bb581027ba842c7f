import random
import unittest
from unittest.mock import patch

from ortools.sat.python import cp_model

from blueberry.core.exceptions import GenerationFailure, SolverTimeout
from blueberry.engine.assembler import PuzzleAssembler, PuzzleConfig, make_puzzle
from blueberry.engine.clues import clues_consistent, full_clue_map
from blueberry.engine.cpsat import count_solutions_cpsat, solve_one_cpsat
from blueberry.engine.grid import block_index, board_from_marks
from blueberry.engine.minimizer import MinimizationResult, PuzzleMinimizer, minimize_clues
from blueberry.engine.solver import count_solutions, solve_one
from blueberry.engine.validator import BoardValidator


DIAGONAL_BOARD = board_from_marks([(0, 3, 6), (1, 4, 7), (2, 5, 8)] * 3)


class PuzzleMinimizerTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.full = full_clue_map(DIAGONAL_BOARD)
        cls.minimizer = PuzzleMinimizer(rng=random.Random(3))
        cls.result = cls.minimizer.minimize(cls.full)

    def test_minimized_clues_stay_unique(self) -> None:
        self.assertEqual(count_solutions(self.result.active, cap=2), 1)
        self.assertEqual(solve_one(self.result.active), DIAGONAL_BOARD)

    def test_active_and_removed_partition_the_full_set(self) -> None:
        self.assertEqual({**self.result.active, **self.result.removed}, self.full)
        self.assertFalse(set(self.result.active) & set(self.result.removed))
        self.assertGreater(len(self.result.removed), 0)
        self.assertEqual(self.result.recounts, len(self.full))

    def test_every_remaining_clue_is_needed(self) -> None:
        for coord in list(self.result.active)[:5]:
            trial = dict(self.result.active)
            del trial[coord]
            self.assertGreater(count_solutions(trial, cap=2), 1)

    def test_densify_covers_blocks_and_meets_floor(self) -> None:
        dense = PuzzleMinimizer(rng=random.Random(5), min_dense_clues=30).densify(self.result)
        self.assertGreaterEqual(len(dense), 30)
        self.assertEqual({block_index(r, c) for r, c in dense}, set(range(9)))
        for coord, value in self.result.active.items():
            self.assertEqual(dense[coord], value)
        self.assertTrue(clues_consistent(DIAGONAL_BOARD, dense))
        self.assertEqual(count_solutions(dense, cap=2), 1)

    def test_densify_stops_when_pool_is_exhausted(self) -> None:
        result = MinimizationResult(active={(0, 1): 2}, removed={(0, 2): 2})
        dense = PuzzleMinimizer(rng=random.Random(0), min_dense_clues=22).densify(result)
        self.assertEqual(dense, {(0, 1): 2, (0, 2): 2})

    def test_minimize_clues_keeps_clues_that_cannot_go(self) -> None:
        # A single clue map that is already ambiguous cannot lose clues.
        clue_map = {(0, 1): 2}
        self.assertEqual(minimize_clues(clue_map, rng=random.Random(1)), clue_map)


class MakePuzzleTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.puzzle = PuzzleAssembler(PuzzleConfig(seed=2024)).make_puzzle()
        cls.dense_puzzle = make_puzzle(dense=True, rng=random.Random(99))

    def test_solution_is_a_valid_board(self) -> None:
        for puzzle in (self.puzzle, self.dense_puzzle):
            self.assertTrue(BoardValidator().validate_puzzle(puzzle).ok)

    def test_uniqueness_invariant(self) -> None:
        for puzzle in (self.puzzle, self.dense_puzzle):
            self.assertEqual(count_solutions(puzzle.clue_map(), cap=2), 1)

    def test_consistency_invariant(self) -> None:
        for puzzle in (self.puzzle, self.dense_puzzle):
            self.assertEqual(solve_one(puzzle.clue_map()), puzzle.solution)

    def test_unclued_cells_are_none(self) -> None:
        clue_map = self.puzzle.clue_map()
        self.assertLess(len(clue_map), 54)
        for r in range(9):
            for c in range(9):
                if (r, c) not in clue_map:
                    self.assertIsNone(self.puzzle.clues[r][c])

    def test_dense_puzzle_covers_every_block(self) -> None:
        blocks = {block_index(r, c) for r, c in self.dense_puzzle.clue_map()}
        self.assertEqual(blocks, set(range(9)))
        self.assertGreaterEqual(self.dense_puzzle.clue_count, 22)

    def test_removing_clues_never_lowers_the_count(self) -> None:
        clue_map = self.puzzle.clue_map()
        fewer = dict(sorted(clue_map.items())[3:])
        self.assertGreaterEqual(count_solutions(fewer, cap=5), count_solutions(clue_map, cap=5))

    def test_same_seed_reproduces_puzzle(self) -> None:
        again = PuzzleAssembler(PuzzleConfig(seed=2024)).make_puzzle()
        self.assertEqual(again.clues, self.puzzle.clues)
        self.assertEqual(again.solution, self.puzzle.solution)

    def test_cpsat_agrees_with_backtracking(self) -> None:
        clue_map = self.puzzle.clue_map()
        self.assertEqual(count_solutions_cpsat(clue_map, cap=2), 1)
        self.assertEqual(solve_one_cpsat(clue_map), self.puzzle.solution)


class CpSatCrossCheckTests(unittest.TestCase):
    def test_empty_clue_map_reaches_cap(self) -> None:
        self.assertEqual(count_solutions_cpsat({}, cap=3), 3)

    def test_full_clues_are_unique(self) -> None:
        clue_map = full_clue_map(DIAGONAL_BOARD)
        self.assertEqual(count_solutions_cpsat(clue_map), 1)
        self.assertEqual(solve_one_cpsat(clue_map), DIAGONAL_BOARD)

    def test_unreachable_clue_has_no_solution(self) -> None:
        self.assertEqual(count_solutions_cpsat({(0, 0): 8}), 0)
        self.assertIsNone(solve_one_cpsat({(0, 0): 8}))

    def test_time_limit_before_cap_raises(self) -> None:
        with self.assertRaises(SolverTimeout):
            count_solutions_cpsat({}, cap=10**9, timeout=0.2)

    def test_feasible_stop_short_of_cap_raises(self) -> None:
        def stop_after_one(model, collector):
            collector.count = 1
            return cp_model.FEASIBLE

        with patch.object(cp_model.CpSolver, "solve", side_effect=stop_after_one):
            with self.assertRaises(SolverTimeout):
                count_solutions_cpsat({}, cap=2)


class GenerationFailureTests(unittest.TestCase):
    def test_failure_propagates_after_attempts(self) -> None:
        assembler = PuzzleAssembler(PuzzleConfig(seed=1, generation_attempts=2))
        with patch.object(
            assembler.generator, "generate", side_effect=GenerationFailure("exhausted")
        ) as generate:
            with self.assertRaises(GenerationFailure):
                assembler.make_puzzle()
        self.assertEqual(generate.call_count, 2)

    def test_tiny_node_budget_fails(self) -> None:
        assembler = PuzzleAssembler(PuzzleConfig(seed=1, max_search_nodes=2))
        with self.assertRaises(GenerationFailure):
            assembler.make_puzzle()


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
