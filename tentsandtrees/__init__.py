"""
Tents and Trees Solver

A backtracking solver for the Tents and Trees logic puzzle:
- Row-major search: every cell is decided tent or grass, one at a time
- Incremental pruning: each partial grid is checked only against the rules
  its latest decision could break
- First solution: the depth-first search stops at the first complete grid
"""

from .engine import (
    EMPTY,
    GRASS,
    TENT,
    TREE,
    MalformedPuzzleError,
    TentsPuzzle,
    generate_puzzle,
)
from .state import PuzzleState
from .backtracker import Backtracker, Configuration
from .solver import TentsSolver, solve
from .analysis import (
    format_solver_grid,
    run_solver_single_test,
    run_solver_many_tests,
    run_solver_size_analysis,
    summarize_pruning,
)

__version__ = "1.0.0"

__all__ = [
    # Cell tags
    "EMPTY",
    "GRASS",
    "TENT",
    "TREE",
    # Core classes
    "TentsPuzzle",
    "PuzzleState",
    "Backtracker",
    "Configuration",
    "TentsSolver",
    "MalformedPuzzleError",
    # Functions
    "solve",
    "generate_puzzle",
    # Analysis functions
    "format_solver_grid",
    "run_solver_single_test",
    "run_solver_many_tests",
    "run_solver_size_analysis",
    "summarize_pruning",
]
