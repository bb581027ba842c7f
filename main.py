"""CLI entrypoint for generating and maintaining a pool of blueberry puzzles."""

from __future__ import annotations

import argparse
import logging
import random
import time
from pathlib import Path
from typing import List

from blueberry.core.constants import DEFAULT_SOLUTION_CAP
from blueberry.core.exceptions import SolverTimeout
from blueberry.engine.assembler import PuzzleAssembler, PuzzleConfig
from blueberry.engine.solver import count_solutions
from blueberry.io.pool import DEFAULT_POOL_PATH, PoolStore, PuzzleEntry, PuzzlePool, sort_pool
from blueberry.utils.logger import configure_logging, get_logger
from blueberry.utils.pretty import pretty_print_puzzle


LOGGER = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate and maintain a pool of blueberry puzzles",
    )
    parser.add_argument(
        "--count", "-n",
        type=int,
        default=1,
        help="Number of puzzles to generate and append",
    )
    parser.add_argument(
        "--dense", "--more-clues",
        dest="dense",
        action="store_true",
        help="Keep more clues (per-block coverage and a minimum clue count)",
    )
    parser.add_argument(
        "--out", "-o",
        type=Path,
        default=DEFAULT_POOL_PATH,
        help="Pool JSON file path",
    )
    parser.add_argument("--sort", action="store_true", help="Sort the existing pool by score and exit")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Re-solve every stored puzzle and report entries that are not uniquely solvable",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Cross-check uniqueness of each new puzzle with the CP-SAT model",
    )
    parser.add_argument("--show", action="store_true", help="Print each generated puzzle")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def run_sort(store: PoolStore, pool: PuzzlePool) -> None:
    LOGGER.info("Sorting pool in %s (%d puzzle(s))", store.path, len(pool.puzzles))
    sort_pool(pool)
    store.save(pool)


def run_check(pool: PuzzlePool) -> List[int]:
    """Return the indices of stored entries without exactly one solution."""

    bad: List[int] = []
    for index, entry in enumerate(pool.puzzles):
        solutions = count_solutions(entry.clue_map(), DEFAULT_SOLUTION_CAP)
        if solutions != 1:
            LOGGER.warning("Entry #%d has %d solution(s) (capped)", index, solutions)
            bad.append(index)
    LOGGER.info("Checked %d puzzle(s): %d invalid", len(pool.puzzles), len(bad))
    return bad


def run_generate(store: PoolStore, pool: PuzzlePool, args: argparse.Namespace) -> int:
    """Append ``args.count`` puzzles, saving after each one. Returns how many were added."""

    assembler = PuzzleAssembler(PuzzleConfig(dense=args.dense), rng=random.Random(args.seed))
    LOGGER.info(
        "Appending %d puzzle(s) to %s (mode=%s, already in pool: %d)",
        args.count, store.path, "dense" if args.dense else "default", len(pool.puzzles),
    )

    added = 0
    try:
        for index in range(args.count):
            started = time.perf_counter()
            puzzle = assembler.make_puzzle()
            elapsed = time.perf_counter() - started

            if args.verify:
                from blueberry.engine.cpsat import count_solutions_cpsat

                try:
                    solutions = count_solutions_cpsat(puzzle.clue_map())
                except SolverTimeout as exc:
                    LOGGER.error("CP-SAT cross-check did not finish (%s); puzzle discarded", exc)
                    continue
                if solutions != 1:
                    LOGGER.error("CP-SAT found %d solution(s); puzzle discarded", solutions)
                    continue

            entry = PuzzleEntry.from_puzzle(puzzle, gen_seconds=elapsed, dense=args.dense)
            pool.puzzles.append(entry)
            store.save(pool)
            added += 1
            if args.show:
                pretty_print_puzzle(puzzle, label=f"#{len(pool.puzzles)}")
            LOGGER.info(
                "#%d generated in %.3fs with %d clue(s) (this run %d/%d)",
                len(pool.puzzles), entry.gen_seconds, puzzle.clue_count, index + 1, args.count,
            )
    except KeyboardInterrupt:
        LOGGER.warning("Interrupted; pool keeps the %d puzzle(s) saved so far", len(pool.puzzles))

    LOGGER.info("Done. Pool size: %d", len(pool.puzzles))
    return added


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    if args.count <= 0:
        parser.error(f"Invalid --count: {args.count}")
    if args.sort and args.check:
        parser.error("--sort cannot be combined with --check")

    store = PoolStore(args.out)
    pool = store.load(dense=args.dense)

    if args.sort:
        run_sort(store, pool)
        return 0
    if args.check:
        return 1 if run_check(pool) else 0

    run_generate(store, pool, args)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
