"""Tents and Trees solver: backtracking search over row-major cell decisions."""

import logging
import time
from typing import Any, Dict, List, Optional, Tuple

from .backtracker import Backtracker
from .engine import TENT, Grid, TentsPuzzle
from .state import PuzzleState

logger = logging.getLogger(__name__)

SUCCESSOR_ORDERS = ("tent_first", "grass_first")


class TentsSolver:
    """
    Depth-first Tents and Trees solver.

    Every cell is decided in row-major order, tent or grass, and each partial
    grid is checked against the rules the latest decision could break. The
    first complete grid that passes every check is the solution.
    """

    def __init__(
        self,
        puzzle: TentsPuzzle,
        *,
        successor_order: str = "tent_first",
        prune_starved_trees: bool = True,
        record_steps: bool = False,
    ) -> None:
        """
        Initialize a solver bound to a specific puzzle.

        Args:
            puzzle: The puzzle definition to solve.
            successor_order: Which branch is explored first at every cell.
                "tent_first" (default): try a tent, then grass.
                "grass_first": try grass, then a tent.
                Only affects which solution is found when several exist.
            prune_starved_trees: If True, reject a partial grid as soon as a
                tree has all its neighbors decided without a tent, instead of
                waiting for the final cell. Never changes the result.
            record_steps: If True, record every state the search enters for
                replay. Memory grows with the number of visited states, so
                leave this off for benchmarks.
        """
        if successor_order not in SUCCESSOR_ORDERS:
            raise ValueError(
                'successor_order must be "tent_first" or "grass_first".'
            )
        self.puzzle = puzzle
        self.successor_order = successor_order
        self.prune_starved_trees = prune_starved_trees
        self.record_steps = record_steps

        # Step-by-step history for replay functionality
        self.steps_history: List[Dict[str, Any]] = []
        self.solution: Optional[Grid] = None

    def initial_state(self) -> PuzzleState:
        """Build the root search state for the bound puzzle."""
        return PuzzleState.from_puzzle(
            self.puzzle,
            tent_first=self.successor_order == "tent_first",
            prune_starved_trees=self.prune_starved_trees,
        )

    def _record_step(self, state: PuzzleState, depth: int) -> None:
        """Record a visited state for replay functionality."""
        cell = (state.row, state.column) if state.cursor >= 0 else None
        self.steps_history.append({
            "step_number": len(self.steps_history),
            "cursor": state.cursor,
            "cell": cell,
            "value": state.grid[state.row][state.column] if cell else None,
            "depth": depth,
            "grid_snapshot": state.rows(),
        })

    def solve(self) -> Tuple[int, Dict[str, Any]]:
        """
        Run the search to completion.

        Returns:
            Tuple of (status, payload) where status is 1 if a solution was
            found and 0 if the puzzle has none. The payload holds the solution
            grid (or None) and the search metrics.
        """
        self.steps_history = []
        backtracker = Backtracker(
            on_visit=self._record_step if self.record_steps else None
        )

        logger.debug(
            "Solving %dx%d puzzle with %d trees (order=%s, prune_starved_trees=%s)",
            self.puzzle.dim,
            self.puzzle.dim,
            len(self.puzzle.trees),
            self.successor_order,
            self.prune_starved_trees,
        )
        start = time.perf_counter()
        goal = backtracker.solve(self.initial_state())
        elapsed = time.perf_counter() - start

        self.solution = goal.rows() if goal is not None else None
        status = 1 if goal is not None else 0

        logger.info(
            "%s after %d expanded nodes (%d pruned) in %.3fs",
            "Solved" if status == 1 else "No solution",
            backtracker.nodes_expanded,
            backtracker.states_pruned,
            elapsed,
        )

        tents_placed = (
            sum(row.count(TENT) for row in self.solution) if self.solution else 0
        )
        return status, {
            "solution": self.solution,
            "nodes_expanded": backtracker.nodes_expanded,
            "states_generated": backtracker.states_generated,
            "states_pruned": backtracker.states_pruned,
            "max_depth": backtracker.max_depth,
            "tents_placed": tents_placed,
            "elapsed_seconds": elapsed,
            "steps_history": self.steps_history,
        }


def solve(puzzle: TentsPuzzle) -> Optional[Grid]:
    """
    Solve a puzzle with the default settings.

    Returns:
        The fully decided grid (rows of GRASS, TENT and TREE tags), or None if
        the puzzle has no solution.
    """
    _, payload = TentsSolver(puzzle).solve()
    return payload["solution"]
