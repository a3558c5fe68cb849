"""Command-line interface: solve a puzzle file and print the result."""

import argparse
import logging
import sys
from typing import List, Optional

from .engine import MalformedPuzzleError, TentsPuzzle
from .solver import TentsSolver

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="tents-solve", description="Tents and Trees backtracking solver"
    )
    ap.add_argument("puzzle", help="Path to a puzzle definition file")
    ap.add_argument(
        "--grass-first",
        action="store_true",
        help="Try grass before a tent at every cell",
    )
    ap.add_argument(
        "--no-prune-starved-trees",
        action="store_true",
        help="Only check that every tree has a tent once the grid is complete",
    )
    ap.add_argument("--stats", action="store_true", help="Print search statistics")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable info logging")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] [%(name)s] %(message)s",
    )

    try:
        puzzle = TentsPuzzle.from_file(args.puzzle)
    except (OSError, MalformedPuzzleError) as e:
        logger.debug("Failed to load %s", args.puzzle, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 2

    print(puzzle.format_board())
    print()

    solver = TentsSolver(
        puzzle,
        successor_order="grass_first" if args.grass_first else "tent_first",
        prune_starved_trees=not args.no_prune_starved_trees,
    )
    status, payload = solver.solve()

    if status == 1:
        print(puzzle.format_board(payload["solution"]))
    else:
        print("No solution.")

    if args.stats:
        print()
        print(f"Nodes expanded: {payload['nodes_expanded']}")
        print(f"States generated: {payload['states_generated']}")
        print(f"States pruned: {payload['states_pruned']}")
        print(f"Max depth: {payload['max_depth']}")
        print(f"Elapsed: {payload['elapsed_seconds']:.3f}s")

    return 0 if status == 1 else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
