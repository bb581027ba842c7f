import json
import tempfile
import unittest
from pathlib import Path

from blueberry.core.exceptions import ClueDecodeError, PoolFormatError
from blueberry.core.models import Puzzle
from blueberry.engine.clues import clue_grid_from_map, full_clue_map
from blueberry.engine.grid import board_from_marks
from blueberry.engine.solver import count_solutions
from blueberry.io.codec import decode_clues81, encode_clues81, validate_clues81
from blueberry.io.pool import (
    DEFAULT_HUMAN_COMPLEXITY,
    DENSE_HUMAN_COMPLEXITY,
    PoolStore,
    PuzzleEntry,
    PuzzlePool,
    entry_score,
    sort_pool,
)


DIAGONAL_BOARD = board_from_marks([(0, 3, 6), (1, 4, 7), (2, 5, 8)] * 3)


def diagonal_puzzle() -> Puzzle:
    return Puzzle(solution=DIAGONAL_BOARD, clues=clue_grid_from_map(full_clue_map(DIAGONAL_BOARD)))


class Clues81CodecTests(unittest.TestCase):
    def test_encode_marks_missing_clues_with_minus_one(self) -> None:
        values = encode_clues81(diagonal_puzzle().clues)
        self.assertEqual(len(values), 81)
        self.assertEqual(values[0], -1)
        self.assertEqual(values[1], 2)
        self.assertEqual(values.count(-1), 27)

    def test_decode_restores_grid(self) -> None:
        clues = diagonal_puzzle().clues
        self.assertEqual(decode_clues81(encode_clues81(clues)), clues)

    def test_wrong_length_fails_validation(self) -> None:
        with self.assertRaises(ClueDecodeError):
            decode_clues81([-1] * 80)
        with self.assertRaises(ClueDecodeError):
            validate_clues81([-1] * 82)

    def test_out_of_range_value_fails_validation(self) -> None:
        for bad in (9, -2, 3.5, True, None, "1"):
            values = [-1] * 81
            values[40] = bad
            with self.assertRaises(ClueDecodeError):
                decode_clues81(values)

    def test_decode_error_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            validate_clues81([])

    def test_encode_rejects_non_square_grid(self) -> None:
        with self.assertRaises(ClueDecodeError):
            encode_clues81([[None] * 9] * 8)


class PuzzleEntryTests(unittest.TestCase):
    def test_from_puzzle_tags_complexity(self) -> None:
        dense = PuzzleEntry.from_puzzle(diagonal_puzzle(), gen_seconds=1.23456, dense=True)
        plain = PuzzleEntry.from_puzzle(diagonal_puzzle(), gen_seconds=0.5, dense=False)
        self.assertEqual(dense.human_complex, DENSE_HUMAN_COMPLEXITY)
        self.assertEqual(plain.human_complex, DEFAULT_HUMAN_COMPLEXITY)
        self.assertEqual(dense.gen_seconds, 1.235)

    def test_clue_map_feeds_the_solver(self) -> None:
        entry = PuzzleEntry.from_puzzle(diagonal_puzzle(), gen_seconds=0.1, dense=False)
        self.assertEqual(count_solutions(entry.clue_map()), 1)

    def test_score_combines_complexity_and_time(self) -> None:
        entry = PuzzleEntry(gen_seconds=4.0, human_complex=200, clues81=[-1] * 81)
        self.assertAlmostEqual(entry_score(entry), 400.0)
        entry.gen_seconds = -1.0
        self.assertAlmostEqual(entry_score(entry), 200.0)

    def test_sort_is_stable_and_ascending(self) -> None:
        blank = [-1] * 81
        pool = PuzzlePool(puzzles=[
            PuzzleEntry(gen_seconds=1.0, human_complex=200, clues81=blank),
            PuzzleEntry(gen_seconds=0.0, human_complex=100, clues81=blank),
            PuzzleEntry(gen_seconds=1.0, human_complex=200, clues81=[0] + blank[1:]),
            PuzzleEntry(gen_seconds=0.25, human_complex=100, clues81=blank),
        ])
        sort_pool(pool)
        scores = [entry_score(e) for e in pool.puzzles]
        self.assertEqual(scores, sorted(scores))
        self.assertEqual(pool.puzzles[2].clues81[0], -1)
        self.assertEqual(pool.puzzles[3].clues81[0], 0)


class PoolStoreTests(unittest.TestCase):
    def test_missing_file_gives_empty_pool(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            pool = PoolStore(Path(tmpdir) / "pool.json").load(dense=True)
            self.assertEqual(pool.puzzles, [])
            self.assertTrue(pool.dense)

    def test_save_then_load(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "pool.json"
            store = PoolStore(path)
            pool = store.load()
            pool.puzzles.append(PuzzleEntry.from_puzzle(diagonal_puzzle(), 0.75, dense=False))
            store.save(pool)

            payload = json.loads(path.read_text(encoding="utf-8"))
            self.assertEqual(payload["version"], 1)
            self.assertEqual(payload["N"], 9)
            self.assertEqual(payload["puzzles"][0]["genSeconds"], 0.75)
            self.assertFalse(path.with_name("pool.json.tmp").exists())

            loaded = store.load()
            self.assertEqual(len(loaded.puzzles), 1)
            self.assertEqual(loaded.puzzles[0], pool.puzzles[0])

    def test_rejects_foreign_documents(self) -> None:
        cases = [
            {"version": 2, "N": 9, "puzzles": []},
            {"version": True, "N": 9, "puzzles": []},
            {"version": 1, "N": 8, "puzzles": []},
            {"version": 1, "N": 9, "puzzles": {}},
            {"version": 1, "N": 9, "puzzles": [{"clues81": [-1] * 80}]},
            {"version": 1, "N": 9, "puzzles": [{"genSeconds": 1.0}]},
        ]
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "pool.json"
            for payload in cases:
                path.write_text(json.dumps(payload), encoding="utf-8")
                with self.assertRaises(PoolFormatError):
                    PoolStore(path).load()

    def test_rejects_invalid_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "pool.json"
            path.write_text("{not json", encoding="utf-8")
            with self.assertRaises(PoolFormatError):
                PoolStore(path).load()


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
