"""Utility functions for the Tents and Trees solver."""

from typing import Dict, List, Tuple

Cell = Tuple[int, int]
Neighborhoods = Dict[Cell, Tuple[Cell, ...]]

ORTHOGONAL_OFFSETS: Tuple[Cell, ...] = ((-1, 0), (0, -1), (0, 1), (1, 0))
DIAGONAL_OFFSETS: Tuple[Cell, ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))

# Module-level caches: (dim, offsets) -> {(row, col): ((nr, nc), ...), ...}
_NEIGHBORHOODS_CACHE: Dict[Tuple[int, Tuple[Cell, ...]], Neighborhoods] = {}


def _build_neighborhoods(dim: int, offsets: Tuple[Cell, ...]) -> Neighborhoods:
    if dim <= 0:
        raise ValueError("dim must be positive.")

    key = (dim, offsets)
    cached = _NEIGHBORHOODS_CACHE.get(key)
    if cached is not None:
        return cached

    neighborhoods: Neighborhoods = {}
    for row in range(dim):
        for col in range(dim):
            nbrs: List[Cell] = []
            for dr, dc in offsets:
                nr, nc = row + dr, col + dc
                if 0 <= nr < dim and 0 <= nc < dim:
                    nbrs.append((nr, nc))
            neighborhoods[(row, col)] = tuple(nbrs)

    _NEIGHBORHOODS_CACHE[key] = neighborhoods
    return neighborhoods


def get_orthogonal_neighborhoods(dim: int) -> Neighborhoods:
    """
    Precompute and cache the up/left/right/down neighbors of every cell in a square grid.

    Args:
        dim: Grid dimension (rows == columns). Must be positive.

    Returns:
        Mapping from each cell (row, col) to a tuple of in-bounds orthogonal
        neighbors (nr, nc), in row-major order.

    Raises:
        ValueError: If dim is non-positive.
    """
    return _build_neighborhoods(dim, ORTHOGONAL_OFFSETS)


def get_diagonal_neighborhoods(dim: int) -> Neighborhoods:
    """Precompute and cache the four diagonal neighbors of every cell in a square grid."""
    return _build_neighborhoods(dim, DIAGONAL_OFFSETS)


def get_last_neighbor_index(dim: int, row: int, col: int) -> int:
    """
    Return the row-major index of the last cell, among (row, col) and its
    orthogonal neighbors, to be decided by a row-major sweep.
    """
    indices = [r * dim + c for r, c in get_orthogonal_neighborhoods(dim)[(row, col)]]
    indices.append(row * dim + col)
    return max(indices)
