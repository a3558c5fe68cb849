"""Immutable search state for the Tents and Trees backtracking solver."""

import copy
from typing import List, Optional, Sequence, Tuple

from .engine import EMPTY, GRASS, INPUT_TAGS, TENT, TREE, TentsPuzzle
from .utils import (
    Cell,
    get_diagonal_neighborhoods,
    get_last_neighbor_index,
    get_orthogonal_neighborhoods,
)


class PuzzleState:
    """
    A snapshot of a partially decided grid.

    Cells are decided one at a time in row-major order. The cursor is the
    linear index of the most recently decided cell (-1 for the root, where
    nothing has been decided yet). Every cell at or before the cursor holds
    GRASS, TENT or TREE; every non-tree cell after it is still EMPTY.

    States are never mutated: advance() returns a new state that shares the
    targets and every unchanged row with its parent.
    """

    def __init__(
        self,
        dim: int,
        row_targets: Sequence[int],
        col_targets: Sequence[int],
        grid: Sequence[Sequence[str]],
        *,
        tent_first: bool = True,
        prune_starved_trees: bool = False,
    ) -> None:
        """
        Build the root state of a search.

        Args:
            dim: Side length of the grid.
            row_targets: Exact tent count required in each row.
            col_targets: Exact tent count required in each column.
            grid: Initial grid; every cell must be EMPTY or TREE.
            tent_first: If True, successors() yields the tent branch first.
            prune_starved_trees: If True, is_valid() also rejects a state as
                soon as some tree has all of its orthogonal neighbors decided
                without a tent among them.

        Raises:
            ValueError: If the dimensions disagree or the grid holds anything
                other than EMPTY and TREE cells.
        """
        if dim <= 0:
            raise ValueError("dim must be positive.")
        if len(row_targets) != dim or len(col_targets) != dim:
            raise ValueError("Expected one row target and one column target per line.")
        if len(grid) != dim or any(len(row) != dim for row in grid):
            raise ValueError(f"Grid must be {dim}x{dim}.")
        if any(cell not in INPUT_TAGS for row in grid for cell in row):
            raise ValueError("The initial grid may only contain empty cells and trees.")

        self.dim: int = dim
        self.row_targets: Tuple[int, ...] = tuple(row_targets)
        self.col_targets: Tuple[int, ...] = tuple(col_targets)
        self.grid: Tuple[Tuple[str, ...], ...] = tuple(tuple(row) for row in grid)
        self.cursor: int = -1
        self.tent_first: bool = tent_first

        # Read-only tables shared by every descendant state.
        self._orthogonal = get_orthogonal_neighborhoods(dim)
        self._diagonal = get_diagonal_neighborhoods(dim)
        self._trees: Tuple[Cell, ...] = tuple(
            (r, c) for r in range(dim) for c in range(dim) if self.grid[r][c] == TREE
        )
        self._starved_tree_checks: Optional[Tuple[Tuple[Cell, ...], ...]] = None
        if prune_starved_trees:
            checks: List[List[Cell]] = [[] for _ in range(dim * dim)]
            for r, c in self._trees:
                checks[get_last_neighbor_index(dim, r, c)].append((r, c))
            self._starved_tree_checks = tuple(tuple(trees) for trees in checks)

    @classmethod
    def from_puzzle(
        cls,
        puzzle: TentsPuzzle,
        *,
        tent_first: bool = True,
        prune_starved_trees: bool = False,
    ) -> "PuzzleState":
        """Build the root state for a loaded puzzle definition."""
        return cls(
            puzzle.dim,
            puzzle.row_targets,
            puzzle.col_targets,
            puzzle.grid,
            tent_first=tent_first,
            prune_starved_trees=prune_starved_trees,
        )

    def __repr__(self) -> str:
        return f"PuzzleState(dim={self.dim}, cursor={self.cursor})"

    # -------------------------------------------------------------------------
    # Cursor
    # -------------------------------------------------------------------------

    @property
    def row(self) -> int:
        """Row of the most recently decided cell (0 for the root)."""
        return self.cursor // self.dim if self.cursor >= 0 else 0

    @property
    def column(self) -> int:
        """Column of the most recently decided cell (-1 for the root)."""
        return self.cursor % self.dim if self.cursor >= 0 else -1

    @property
    def decided_cells(self) -> int:
        return self.cursor + 1

    @property
    def depth(self) -> int:
        """Number of decisions taken from the root; equals the search depth."""
        return self.cursor + 1

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def advance(self, place_tent: bool) -> "PuzzleState":
        """
        Decide the next cell and return the resulting state.

        The cursor moves one cell forward in row-major order. The new cell
        becomes TENT or GRASS, unless it is a TREE, which is left as is.

        Raises:
            RuntimeError: If every cell has already been decided.
        """
        position = self.cursor + 1
        if position >= self.dim * self.dim:
            raise RuntimeError("Cannot advance past the last cell of the grid.")

        row, col = divmod(position, self.dim)
        grid = self.grid
        if grid[row][col] != TREE:
            cells = list(grid[row])
            cells[col] = TENT if place_tent else GRASS
            grid = grid[:row] + (tuple(cells),) + grid[row + 1:]

        child = copy.copy(self)
        child.grid = grid
        child.cursor = position
        return child

    def successors(self) -> Tuple["PuzzleState", "PuzzleState"]:
        """Return both children of this state, tent branch first unless configured otherwise."""
        tent = self.advance(True)
        grass = self.advance(False)
        return (tent, grass) if self.tent_first else (grass, tent)

    # -------------------------------------------------------------------------
    # Validity
    # -------------------------------------------------------------------------

    def row_tent_count(self, row: int) -> int:
        return sum(1 for cell in self.grid[row] if cell == TENT)

    def column_tent_count(self, col: int) -> int:
        return sum(1 for row in self.grid if row[col] == TENT)

    def tree_has_tent(self, row: int, col: int) -> bool:
        """True if the cell at (row, col) has a tent directly above, below, left or right."""
        return any(self.grid[r][c] == TENT for r, c in self._orthogonal[(row, col)])

    def is_valid(self) -> bool:
        """
        Check the rules that the most recent decision can break.

        Only the cell under the cursor changed since the parent was validated,
        so only constraints involving it are checked:

        1. a new tent must not touch another tent (orthogonally or diagonally)
           and must have an orthogonally adjacent tree;
        2. a new tent must not push its row or column over its target;
        3. a completed row must hold exactly its target;
        4. a completed column must hold exactly its target;
        5. once the last cell is decided, every tree must have a tent.
        """
        if self.cursor < 0:
            return True

        row, col = self.row, self.column
        grid = self.grid
        last = self.dim - 1

        if grid[row][col] == TENT:
            orthogonal = self._orthogonal[(row, col)]
            if any(grid[r][c] == TENT for r, c in orthogonal):
                return False
            if any(grid[r][c] == TENT for r, c in self._diagonal[(row, col)]):
                return False
            if not any(grid[r][c] == TREE for r, c in orthogonal):
                return False
            if self.row_tent_count(row) > self.row_targets[row]:
                return False
            if self.column_tent_count(col) > self.col_targets[col]:
                return False

        if col == last and self.row_tent_count(row) != self.row_targets[row]:
            return False

        if row == last and self.column_tent_count(col) != self.col_targets[col]:
            return False

        if self._starved_tree_checks is not None:
            for r, c in self._starved_tree_checks[self.cursor]:
                if not self.tree_has_tent(r, c):
                    return False

        if row == last and col == last:
            for r, c in self._trees:
                if not self.tree_has_tent(r, c):
                    return False

        return True

    def is_goal(self) -> bool:
        """True once every cell of the grid has been decided."""
        return self.cursor == self.dim * self.dim - 1

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def rows(self) -> List[List[str]]:
        """Return a mutable copy of the grid."""
        return [list(row) for row in self.grid]

    def undecided_count(self) -> int:
        return sum(1 for row in self.grid for cell in row if cell == EMPTY)
