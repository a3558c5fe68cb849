"""Analysis and benchmarking tools for the Tents and Trees solver."""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from .engine import generate_puzzle
from .solver import TentsSolver


def format_solver_grid(
    grid: Sequence[Sequence[str]], *, show_coords: bool = True
) -> str:
    """
    Format a (possibly partial) grid as a human-readable string.

    Args:
        grid: Square grid of cell tags.
        show_coords: If True, include coordinate labels and a header.

    Returns:
        A text grid with one cell tag per column.
    """
    n = len(grid)

    lines: List[str] = []
    if show_coords:
        header = " ".join(f"{c:2d}" for c in range(n))
        lines.append("   " + header)
        lines.append("   " + "-" * (3 * n - 1))

    for r in range(n):
        row = " ".join(f" {grid[r][c]}" for c in range(n))
        lines.append(f"{r:2d} |" + row if show_coords else row)

    return "\n".join(lines)


def run_solver_single_test(
    dim: int,
    *,
    density: float = 0.5,
    seed: Optional[int] = None,
    show_boards: bool = False,
    successor_order: str = "tent_first",
    prune_starved_trees: bool = True,
) -> Dict[str, object]:
    """
    Generate one random puzzle and solve it end-to-end with TentsSolver.

    Args:
        dim: Side length of the generated puzzle.
        density: Tree planting probability passed to generate_puzzle().
        seed: Seed for the puzzle generator.
        show_boards: If True, print the puzzle and the solver's result.
        successor_order: "tent_first" or "grass_first".
        prune_starved_trees: Whether to prune starved trees early.

    Returns:
        The solver's payload augmented with "status" (1 solved, 0 unsolvable)
        and "check_errors" (rule violations found in the returned grid).
    """
    puzzle = generate_puzzle(dim, density=density, seed=seed)
    solver = TentsSolver(
        puzzle,
        successor_order=successor_order,
        prune_starved_trees=prune_starved_trees,
        record_steps=False,
    )

    status, payload = solver.solve()
    solution = payload["solution"]
    check_errors = puzzle.check_solution(solution) if solution is not None else []

    if show_boards:
        print("Puzzle:")
        print(puzzle.format_board())
        print()
        if solution is not None:
            print("Solution:")
            print(puzzle.format_board(solution))
        else:
            print("No solution found.")
        print()
        print(f"Finished with status {status}.")

    out = dict(payload)
    out["status"] = status
    out["check_errors"] = check_errors
    return out


def run_solver_many_tests(
    dim: int,
    runs: int,
    *,
    density: float = 0.5,
    seed: Optional[int] = None,
    successor_order: str = "tent_first",
    prune_starved_trees: bool = True,
) -> Dict[str, float]:
    """
    Solve many random puzzles and return averaged metrics plus the solve rate.

    Args:
        dim: Side length of the generated puzzles.
        runs: Number of independent puzzles to solve.
        density: Tree planting probability passed to generate_puzzle().
        seed: Base seed; run i uses seed + i. None for nondeterministic runs.
        successor_order: "tent_first" or "grass_first".
        prune_starved_trees: Whether to prune starved trees early.

    Returns:
        Averages of the numeric payload metrics (prefixed with "avg_"), plus:
        - solve_rate
        - invalid_solution_count
        - prune_ratio
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    sums: Dict[str, float] = defaultdict(float)
    solved = 0
    invalid = 0
    total_generated = 0.0
    total_pruned = 0.0

    for i in range(runs):
        run_seed = None if seed is None else seed + i
        payload = run_solver_single_test(
            dim,
            density=density,
            seed=run_seed,
            successor_order=successor_order,
            prune_starved_trees=prune_starved_trees,
        )
        status = payload["status"]
        if status == 1:
            solved += 1
        elif status != 0:
            raise RuntimeError(f"Unexpected solver status: {status}")
        if payload["check_errors"]:
            invalid += 1

        total_generated += float(payload["states_generated"])
        total_pruned += float(payload["states_pruned"])

        for k, v in payload.items():
            if isinstance(v, (int, float)) and not isinstance(v, bool) and k != "status":
                sums[f"avg_{k}"] += float(v)

    out: Dict[str, float] = {k: total / runs for k, total in sums.items()}
    out["solve_rate"] = solved / runs
    out["invalid_solution_count"] = float(invalid)
    out["prune_ratio"] = (
        (total_pruned / total_generated) if total_generated > 0 else 0.0
    )
    return out


def run_solver_size_analysis(
    dims: Sequence[int],
    runs: int,
    *,
    density: float = 0.5,
    seed: Optional[int] = None,
) -> Dict[int, Dict[str, float]]:
    """
    Run aggregated solver tests over several grid sizes and plot summaries.

    Each size is solved twice over the same puzzles, with and without
    starved-tree pruning, so the plots show how much the early check saves.

    Args:
        dims: Grid sizes to test, e.g. (5, 6, 7, 8).
        runs: Number of puzzles per size.
        density: Tree planting probability passed to generate_puzzle().
        seed: Base seed shared by every size.

    Returns:
        Mapping from size to the run_solver_many_tests() statistics with
        pruning enabled; the unpruned statistics are stored under the same
        keys prefixed with "unpruned_".
    """
    results: Dict[int, Dict[str, float]] = {}
    for dim in dims:
        pruned = run_solver_many_tests(
            dim, runs, density=density, seed=seed, prune_starved_trees=True
        )
        unpruned = run_solver_many_tests(
            dim, runs, density=density, seed=seed, prune_starved_trees=False
        )
        stats = dict(pruned)
        stats.update({f"unpruned_{k}": v for k, v in unpruned.items()})
        results[dim] = stats

    labels = [f"{d}x{d}" for d in dims]
    x = np.arange(len(labels))
    bar_w = 0.35

    # 1) Nodes expanded
    plt.figure()  # type: ignore[misc]
    plt.bar(x - bar_w / 2, [results[d]["avg_nodes_expanded"] for d in dims], width=bar_w, label="starved-tree pruning")  # type: ignore[misc]
    plt.bar(x + bar_w / 2, [results[d]["unpruned_avg_nodes_expanded"] for d in dims], width=bar_w, label="final check only")  # type: ignore[misc]
    plt.xticks(x, labels)  # type: ignore[misc]
    plt.yscale("log")  # type: ignore[misc]
    plt.ylabel("Average nodes expanded")  # type: ignore[misc]
    plt.title("Search size by grid size (per puzzle)")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    # 2) Share of generated states rejected by is_valid()
    plt.figure()  # type: ignore[misc]
    plt.bar(x - bar_w / 2, [results[d]["prune_ratio"] for d in dims], width=bar_w, label="starved-tree pruning")  # type: ignore[misc]
    plt.bar(x + bar_w / 2, [results[d]["unpruned_prune_ratio"] for d in dims], width=bar_w, label="final check only")  # type: ignore[misc]
    plt.xticks(x, labels)  # type: ignore[misc]
    plt.ylabel("Pruned / generated")  # type: ignore[misc]
    plt.ylim(0.0, 1.0)  # type: ignore[misc]
    plt.title("Prune ratio by grid size")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    # 3) Wall-clock time
    plt.figure()  # type: ignore[misc]
    plt.plot(labels, [results[d]["avg_elapsed_seconds"] for d in dims], marker="o", label="starved-tree pruning")  # type: ignore[misc]
    plt.plot(labels, [results[d]["unpruned_avg_elapsed_seconds"] for d in dims], marker="o", label="final check only")  # type: ignore[misc]
    plt.ylabel("Average seconds per puzzle")  # type: ignore[misc]
    plt.title("Solve time by grid size")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    return results


def summarize_pruning(
    results: Dict[int, Dict[str, float]], *, dim: int
) -> Dict[str, float]:
    """
    Summarize how effectively the validity checks prune one grid size.

    Args:
        results: Output of run_solver_size_analysis().
        dim: Which size to summarize.

    Returns:
        Dict with keys:
        - prune_ratio: share of generated states rejected by is_valid()
        - nodes_per_cell: average nodes expanded per grid cell
        - starved_tree_speedup: unpruned / pruned nodes expanded
          (only when the unpruned statistics are present)
    """
    if dim not in results:
        raise KeyError(f"Size {dim!r} not found in results.")
    m = results[dim]

    if "avg_nodes_expanded" not in m:
        raise KeyError(f"Missing key 'avg_nodes_expanded' in metrics for size {dim!r}.")
    nodes = float(m["avg_nodes_expanded"])

    out = {
        "prune_ratio": float(m.get("prune_ratio", 0.0)),
        "nodes_per_cell": nodes / (dim * dim),
    }
    if "unpruned_avg_nodes_expanded" in m:
        if nodes == 0.0:
            raise ZeroDivisionError("avg_nodes_expanded is 0.")
        out["starved_tree_speedup"] = float(m["unpruned_avg_nodes_expanded"]) / nodes
    return out
