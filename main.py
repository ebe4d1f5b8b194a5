from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from model import PuzzleConfigError, load_puzzle
from solver import ZoneSolver

log = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solve a zone grid puzzle (permutation zones, taxicab pairing)."
    )
    parser.add_argument("puzzle", help="Puzzle JSON file")
    parser.add_argument(
        "--step",
        action="store_true",
        help="Run one propagation step and show the candidate grid instead of solving",
    )
    parser.add_argument(
        "--unique", action="store_true", help="Check that the solution is unique"
    )
    parser.add_argument(
        "--max-nodes", type=int, default=None, help="Give up after this many guesses"
    )
    parser.add_argument(
        "--timeout", type=float, default=None, help="Give up after this many seconds"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        model = load_puzzle(args.puzzle)
    except (OSError, PuzzleConfigError) as e:
        log.error("Failed to load puzzle: %s", e)
        return EXIT_CONFIG_ERROR
    log.info("Loaded %s", model)
    solver = ZoneSolver(model, max_nodes=args.max_nodes, timeout_seconds=args.timeout)

    if args.step:
        grid = model.new_grid()
        print(grid.render())
        print()
        step = solver.step(grid)
        removed = sum(len(vals) for vals in step.deltas.values())
        print(f"Removed {removed} candidates from {len(step.deltas)} cells.")
        print(grid.render())
        if not step.ok:
            print("Contradiction.")
            return EXIT_FAILURE
        return EXIT_SUCCESS

    result = solver.solve(require_uniqueness=args.unique)
    print(f"{result.message} ({result.duration_ms} ms, {result.nodes} nodes)")
    if result.solution is not None:
        print(result.solution.render())
    if result.status in ("solved", "multiple"):
        return EXIT_SUCCESS
    return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
