"""Tents and Trees puzzle definition: loading, validation, generation and rendering."""

import random
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from .utils import (
    Cell,
    get_diagonal_neighborhoods,
    get_orthogonal_neighborhoods,
)

# Cell tags, shared by the input format, the search state and the renderer.
EMPTY = "."
GRASS = "-"
TENT = "^"
TREE = "%"

INPUT_TAGS = frozenset({EMPTY, TREE})
SOLVED_TAGS = frozenset({GRASS, TENT, TREE})

HORIZONTAL_DIVIDER = "-"
VERTICAL_DIVIDER = "|"

Grid = List[List[str]]


class MalformedPuzzleError(ValueError):
    """Raised when a puzzle definition is structurally invalid."""


class TentsPuzzle:
    """An immutable Tents and Trees puzzle: dimension, tent targets and tree layout."""

    def __init__(
        self,
        dim: int,
        row_targets: Sequence[int],
        col_targets: Sequence[int],
        grid: Sequence[Sequence[str]],
    ) -> None:
        """
        Build and validate a puzzle definition.

        Args:
            dim: Side length of the square grid, at least 1.
            row_targets: Required tent count for each row, top to bottom.
            col_targets: Required tent count for each column, left to right.
            grid: dim rows of dim cell tags, each EMPTY (".") or TREE ("%").

        Raises:
            MalformedPuzzleError: If any part of the definition is inconsistent.
        """
        if isinstance(dim, bool) or not isinstance(dim, int):
            raise MalformedPuzzleError(f"dim must be an integer, got {dim!r}.")
        if dim < 1:
            raise MalformedPuzzleError(
                f"dim must be positive, not {dim}."
            )

        self.dim: int = dim
        self.row_targets: Tuple[int, ...] = self._check_targets("row", row_targets)
        self.col_targets: Tuple[int, ...] = self._check_targets("column", col_targets)

        if len(grid) != dim:
            raise MalformedPuzzleError(
                f"Expected {dim} grid rows, got {len(grid)}."
            )
        rows: List[Tuple[str, ...]] = []
        for r, row in enumerate(grid):
            if len(row) != dim:
                raise MalformedPuzzleError(
                    f"Grid row {r} has {len(row)} cells, expected {dim}."
                )
            for c, cell in enumerate(row):
                if cell not in INPUT_TAGS:
                    raise MalformedPuzzleError(
                        f"Unrecognized cell {cell!r} at row {r}, column {c}."
                    )
            rows.append(tuple(row))
        self.grid: Tuple[Tuple[str, ...], ...] = tuple(rows)

    def _check_targets(self, kind: str, targets: Sequence[int]) -> Tuple[int, ...]:
        if len(targets) != self.dim:
            raise MalformedPuzzleError(
                f"Expected {self.dim} {kind} targets, got {len(targets)}."
            )
        for i, t in enumerate(targets):
            if isinstance(t, bool) or not isinstance(t, int):
                raise MalformedPuzzleError(
                    f"{kind.capitalize()} target {i} must be an integer, got {t!r}."
                )
            if t < 0:
                raise MalformedPuzzleError(
                    f"{kind.capitalize()} target {i} must be non-negative, got {t}."
                )
        return tuple(targets)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TentsPuzzle):
            return NotImplemented
        return (
            self.dim == other.dim
            and self.row_targets == other.row_targets
            and self.col_targets == other.col_targets
            and self.grid == other.grid
        )

    def __hash__(self) -> int:
        return hash((self.dim, self.row_targets, self.col_targets, self.grid))

    def __repr__(self) -> str:
        return (
            f"TentsPuzzle(dim={self.dim}, row_targets={list(self.row_targets)}, "
            f"col_targets={list(self.col_targets)}, trees={len(self.trees)})"
        )

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @classmethod
    def from_text(cls, text: str) -> "TentsPuzzle":
        """
        Parse a puzzle from its text encoding.

        The encoding is, for example::

            3        # square dimension of the field
            2 0 1    # row targets, top to bottom
            2 0 1    # column targets, left to right
            . % .    # .=empty, %=tree
            % . .
            . % .

        Cell lines may also be written without separators (".%."). Text after
        "#" is ignored, as are blank lines.

        Raises:
            MalformedPuzzleError: On a wrong token count, a non-integer or
                negative target, an unrecognized cell character or
                inconsistent dimensions.
        """
        lines: List[Tuple[int, str]] = []
        for lineno, raw in enumerate(text.splitlines(), start=1):
            content = raw.split("#", 1)[0].strip()
            if content:
                lines.append((lineno, content))

        if not lines:
            raise MalformedPuzzleError("Puzzle definition is empty.")

        lineno, first = lines[0]
        dim_tokens = first.split()
        if len(dim_tokens) != 1:
            raise MalformedPuzzleError(
                f"Line {lineno}: expected a single dimension, got {first!r}."
            )
        dim = _parse_int(dim_tokens[0], lineno)
        if dim < 1:
            raise MalformedPuzzleError(
                f"Line {lineno}: dimension must be positive, not {dim}."
            )

        if len(lines) != dim + 3:
            raise MalformedPuzzleError(
                f"Expected {dim + 3} non-blank lines for a {dim}x{dim} puzzle, "
                f"got {len(lines)}."
            )

        row_targets = _parse_targets(lines[1], dim, "row")
        col_targets = _parse_targets(lines[2], dim, "column")
        grid = [_parse_cells(line, dim) for line in lines[3:]]

        return cls(dim, row_targets, col_targets, grid)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "TentsPuzzle":
        """Load a puzzle from a text file (see from_text for the format)."""
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_text(f.read())

    def to_text(self) -> str:
        """Serialize the puzzle back into its text encoding."""
        lines = [
            str(self.dim),
            " ".join(str(t) for t in self.row_targets),
            " ".join(str(t) for t in self.col_targets),
        ]
        lines.extend(" ".join(row) for row in self.grid)
        return "\n".join(lines) + "\n"

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def trees(self) -> List[Cell]:
        """Coordinates (row, col) of every tree, in row-major order."""
        return [
            (r, c)
            for r in range(self.dim)
            for c in range(self.dim)
            if self.grid[r][c] == TREE
        ]

    @property
    def tent_total(self) -> int:
        """Total number of tents required by the row targets."""
        return sum(self.row_targets)

    def check_solution(self, grid: Sequence[Sequence[str]]) -> List[str]:
        """
        List every puzzle rule a fully decided grid violates.

        Args:
            grid: A dim x dim grid over {GRASS, TENT, TREE}.

        Returns:
            Human-readable error messages; empty when the grid solves the puzzle.
        """
        if len(grid) != self.dim or any(len(row) != self.dim for row in grid):
            return [f"error: grid is not {self.dim}x{self.dim}."]

        errors: List[str] = []
        orthogonal = get_orthogonal_neighborhoods(self.dim)
        diagonal = get_diagonal_neighborhoods(self.dim)
        row_sums = [0] * self.dim
        col_sums = [0] * self.dim

        for r in range(self.dim):
            for c in range(self.dim):
                cell = grid[r][c]
                if cell not in SOLVED_TAGS:
                    errors.append(f"error: cell {r},{c} is undecided ({cell!r}).")
                    continue
                if (cell == TREE) != (self.grid[r][c] == TREE):
                    errors.append(f"error: cell {r},{c} does not match the tree layout.")
                    continue
                if cell == TREE:
                    if not any(grid[nr][nc] == TENT for nr, nc in orthogonal[(r, c)]):
                        errors.append(f"error: tree at {r},{c} has no adjacent tent.")
                elif cell == TENT:
                    row_sums[r] += 1
                    col_sums[c] += 1
                    if not any(grid[nr][nc] == TREE for nr, nc in orthogonal[(r, c)]):
                        errors.append(f"error: tent at {r},{c} has no adjacent tree.")
                    touching = [
                        (nr, nc)
                        for nr, nc in orthogonal[(r, c)] + diagonal[(r, c)]
                        if (nr, nc) > (r, c) and grid[nr][nc] == TENT
                    ]
                    for nr, nc in touching:
                        errors.append(f"error: tents at {r},{c} and {nr},{nc} touch.")

        for r in range(self.dim):
            if row_sums[r] != self.row_targets[r]:
                errors.append(
                    f"error: row {r} has {row_sums[r]} tents but expected {self.row_targets[r]}."
                )
        for c in range(self.dim):
            if col_sums[c] != self.col_targets[c]:
                errors.append(
                    f"error: col {c} has {col_sums[c]} tents but expected {self.col_targets[c]}."
                )
        return errors

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    def format_board(self, grid: Optional[Sequence[Sequence[str]]] = None) -> str:
        """
        Render a grid framed by dividers and annotated with the targets.

        Args:
            grid: Grid to render; defaults to the puzzle's own (undecided) grid.

        Returns:
            A multi-line string: top divider, one "|cells|target" line per row,
            bottom divider and the column targets.
        """
        cells = self.grid if grid is None else grid
        divider = HORIZONTAL_DIVIDER * (2 * self.dim - 1)

        out = [f" {divider} "]
        for r, row in enumerate(cells):
            body = "".join(f"{cell} " for cell in row)
            out.append(f"{VERTICAL_DIVIDER}{body}{VERTICAL_DIVIDER}{self.row_targets[r]}")
        out.append(f" {divider}")
        out.append(" " + " ".join(str(t) for t in self.col_targets))
        return "\n".join(out)

    def print_board(self, grid: Optional[Sequence[Sequence[str]]] = None) -> None:
        """Print a grid (the puzzle itself by default) to stdout."""
        print(self.format_board(grid))


def _parse_int(token: str, lineno: int) -> int:
    try:
        return int(token)
    except ValueError:
        raise MalformedPuzzleError(
            f"Line {lineno}: expected an integer, got {token!r}."
        ) from None


def _parse_targets(line: Tuple[int, str], dim: int, kind: str) -> List[int]:
    lineno, content = line
    tokens = content.split()
    if len(tokens) != dim:
        raise MalformedPuzzleError(
            f"Line {lineno}: expected {dim} {kind} targets, got {len(tokens)}."
        )
    targets = [_parse_int(tok, lineno) for tok in tokens]
    for t in targets:
        if t < 0:
            raise MalformedPuzzleError(
                f"Line {lineno}: {kind} targets must be non-negative, got {t}."
            )
    return targets


def _parse_cells(line: Tuple[int, str], dim: int) -> List[str]:
    lineno, content = line
    tokens = content.split()
    if len(tokens) == dim and all(len(tok) == 1 for tok in tokens):
        cells = tokens
    elif len(tokens) == 1 and len(tokens[0]) == dim:
        cells = list(tokens[0])
    else:
        raise MalformedPuzzleError(
            f"Line {lineno}: expected {dim} cells, got {content!r}."
        )

    for cell in cells:
        if cell not in INPUT_TAGS:
            raise MalformedPuzzleError(
                f"Line {lineno}: unrecognized cell character {cell!r}."
            )
    return cells


def generate_puzzle(
    dim: int, density: float = 0.5, seed: Optional[int] = None
) -> TentsPuzzle:
    """
    Generate a random puzzle that is guaranteed to have a solution.

    Trees and tents are placed together: each empty cell becomes a tree with
    probability `density`, provided one of its orthogonal neighbors can still
    hold a tent that touches no other tent. Targets are then read off the
    hidden solution and the tents are removed.

    Args:
        dim: Side length of the grid, at least 1.
        density: Probability in (0, 1] of trying to plant a tree at a cell.
        seed: Seed for the random generator; None for a nondeterministic puzzle.

    Raises:
        ValueError: If dim or density is out of range.
    """
    if dim < 1:
        raise ValueError(f"dim must be positive, not {dim}.")
    if not 0.0 < density <= 1.0:
        raise ValueError(f"density must be in (0, 1], not {density}.")

    rng = random.Random(seed)
    orthogonal = get_orthogonal_neighborhoods(dim)
    diagonal = get_diagonal_neighborhoods(dim)
    board: Grid = [[EMPTY for _ in range(dim)] for _ in range(dim)]

    def can_place_tent(r: int, c: int) -> bool:
        if board[r][c] != EMPTY:
            return False
        return not any(
            board[nr][nc] == TENT for nr, nc in orthogonal[(r, c)] + diagonal[(r, c)]
        )

    for r in range(dim):
        for c in range(dim):
            if board[r][c] != EMPTY or rng.random() >= density:
                continue
            candidates = list(orthogonal[(r, c)])
            rng.shuffle(candidates)
            for nr, nc in candidates:
                if can_place_tent(nr, nc):
                    board[nr][nc] = TENT
                    board[r][c] = TREE
                    break

    row_targets = [sum(1 for cell in row if cell == TENT) for row in board]
    col_targets = [
        sum(1 for r in range(dim) if board[r][c] == TENT) for c in range(dim)
    ]
    grid = [[TREE if cell == TREE else EMPTY for cell in row] for row in board]
    return TentsPuzzle(dim, row_targets, col_targets, grid)
