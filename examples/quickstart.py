"""
Quickstart example for the Tents and Trees Solver.

This script demonstrates basic usage of the solver.
"""

from pathlib import Path

from tentsandtrees import (
    TentsPuzzle,
    TentsSolver,
    generate_puzzle,
    run_solver_many_tests,
    solve,
)

PUZZLES_DIR = Path(__file__).parent / "puzzles"


def main():
    print("=" * 60)
    print("Tents and Trees Solver - Quickstart Example")
    print("=" * 60)

    # Example 1: Solve a puzzle file
    print("\n1. Solving examples/puzzles/tents-6x6.txt...")
    print("-" * 60)

    puzzle = TentsPuzzle.from_file(PUZZLES_DIR / "tents-6x6.txt")
    print(puzzle.format_board())
    print()

    grid = solve(puzzle)
    if grid is None:
        print("No solution.")
    else:
        print(puzzle.format_board(grid))

    # Example 2: Search statistics on a random puzzle
    print("\n2. Solving a random 8x8 puzzle...")
    print("-" * 60)

    puzzle = generate_puzzle(8, density=0.5, seed=2024)
    status, payload = TentsSolver(puzzle).solve()

    print(f"Result: {'SOLVED' if status == 1 else 'NO SOLUTION'}")
    print(f"Nodes expanded: {payload['nodes_expanded']}")
    print(f"States pruned: {payload['states_pruned']} of {payload['states_generated']}")
    print(f"Time: {payload['elapsed_seconds']:.3f}s")
    print(puzzle.format_board(payload["solution"]))

    # Example 3: Compare grid sizes
    print("\n3. Average search size by grid size (10 puzzles each)...")
    print("-" * 60)

    for dim in (5, 6, 7, 8):
        results = run_solver_many_tests(dim, runs=10, seed=0)
        print(
            f"{dim}x{dim}: {results['avg_nodes_expanded']:10.1f} nodes, "
            f"{results['prune_ratio'] * 100:5.1f}% pruned, "
            f"{results['avg_elapsed_seconds']:.3f}s"
        )

    print("\n" + "=" * 60)
    print("Done! See README.md for more detailed usage instructions.")
    print("=" * 60)


if __name__ == "__main__":
    main()
