import pytest

from tentsandtrees.backtracker import Backtracker
from tentsandtrees.engine import EMPTY, GRASS, TENT, TREE, TentsPuzzle
from tentsandtrees.state import PuzzleState


def grid(*rows):
    return [row.split() for row in rows]


def walk(state, decisions):
    for place_tent in decisions:
        state = state.advance(place_tent)
    return state


@pytest.fixture
def root_3x3():
    puzzle = TentsPuzzle(3, [2, 0, 1], [2, 0, 1], grid(". % .", "% . .", ". % ."))
    return PuzzleState.from_puzzle(puzzle)


def test_root_state(root_3x3):
    assert root_3x3.cursor == -1
    assert (root_3x3.row, root_3x3.column) == (0, -1)
    assert root_3x3.decided_cells == 0
    assert root_3x3.is_valid()
    assert not root_3x3.is_goal()
    assert root_3x3.undecided_count() == 6


def test_root_rejects_decided_cells():
    with pytest.raises(ValueError):
        PuzzleState(2, [0, 0], [0, 0], grid(". ^", ". ."))
    with pytest.raises(ValueError):
        PuzzleState(2, [0, 0], [0], grid(". .", ". ."))
    with pytest.raises(ValueError):
        PuzzleState(2, [0, 0], [0, 0], grid(". .", "."))


def test_advance_decides_next_cell_without_touching_parent(root_3x3):
    child = root_3x3.advance(True)
    assert child.cursor == 0
    assert child.grid[0][0] == TENT
    assert root_3x3.grid[0][0] == EMPTY
    assert root_3x3.cursor == -1
    assert child.undecided_count() == root_3x3.undecided_count() - 1


def test_advance_shares_unchanged_rows_and_targets(root_3x3):
    child = root_3x3.advance(False)
    assert child.grid[0][0] == GRASS
    assert child.grid[1] is root_3x3.grid[1]
    assert child.grid[2] is root_3x3.grid[2]
    assert child.row_targets is root_3x3.row_targets
    assert child.col_targets is root_3x3.col_targets


def test_advance_wraps_to_next_row(root_3x3):
    state = walk(root_3x3, [True, True, True, False])
    assert state.cursor == 3
    assert (state.row, state.column) == (1, 0)


def test_advance_onto_tree_keeps_tree(root_3x3):
    first = root_3x3.advance(True)
    tent, grass = first.successors()
    assert tent.grid[0][1] == TREE
    assert grass.grid[0][1] == TREE
    assert tent.grid == grass.grid
    assert tent.cursor == grass.cursor == 1


def test_successors_tent_first_by_default(root_3x3):
    first, second = root_3x3.successors()
    assert first.grid[0][0] == TENT
    assert second.grid[0][0] == GRASS


def test_successors_grass_first():
    state = PuzzleState(1, [0], [0], grid("."), tent_first=False)
    first, second = state.successors()
    assert first.grid[0][0] == GRASS
    assert second.grid[0][0] == TENT


def test_advance_past_last_cell_raises():
    state = PuzzleState(1, [0], [0], grid(".")).advance(False)
    assert state.is_goal()
    with pytest.raises(RuntimeError):
        state.advance(True)


def test_tent_needs_adjacent_tree():
    state = PuzzleState(2, [1, 0], [1, 0], grid(". .", ". ."))
    assert not state.advance(True).is_valid()
    assert state.advance(False).is_valid()


def test_tent_next_to_tent_is_invalid():
    root = PuzzleState(2, [2, 0], [1, 1], grid(". .", "% %"))
    first = root.advance(True)
    assert first.is_valid()
    assert not first.advance(True).is_valid()


def test_tent_diagonal_to_tent_is_invalid():
    root = PuzzleState(3, [1, 1, 0], [1, 1, 0], grid(". % .", "% . .", ". . ."))
    state = walk(root, [True, False, False, False])
    assert state.is_valid()
    assert not state.advance(True).is_valid()
    assert state.advance(False).is_valid()


def test_tent_over_row_target_is_invalid():
    root = PuzzleState(2, [0, 1], [0, 1], grid("% .", ". ."))
    state = root.advance(False)
    assert not state.advance(True).is_valid()


def test_tent_over_column_target_is_invalid():
    root = PuzzleState(2, [1, 0], [1, 0], grid("% .", ". ."))
    state = root.advance(False)
    assert not state.advance(True).is_valid()


def test_completed_row_must_match_target():
    root = PuzzleState(2, [2, 0], [1, 1], grid(". .", "% %"))
    assert not walk(root, [True, False]).is_valid()


def test_completed_column_must_match_target():
    root = PuzzleState(2, [0, 1], [1, 0], grid("% .", ". ."))
    state = walk(root, [False, False])
    assert state.is_valid()
    assert state.advance(True).is_valid()
    assert not state.advance(False).is_valid()


def test_full_walk_to_goal():
    root = PuzzleState(2, [0, 1], [1, 0], grid("% .", ". ."))
    state = walk(root, [False, False, True, False])
    assert state.is_valid()
    assert state.is_goal()
    assert state.rows() == [[TREE, GRASS], [TENT, GRASS]]


def test_last_cell_requires_every_tree_to_have_a_tent():
    root = PuzzleState(3, [1, 0, 0], [0, 1, 0], grid("% . .", ". . .", ". . %"))
    state = walk(root, [False, True, False, False, False, False, False, False])
    assert state.is_valid()
    final = state.advance(False)
    assert final.grid[2][2] == TREE
    assert not final.is_valid()


def test_starved_tree_pruning_rejects_early():
    rows = grid("% . .", ". . .", ". . .")
    plain = walk(PuzzleState(3, [0, 0, 0], [0, 0, 0], rows), [False] * 4)
    pruned = walk(
        PuzzleState(3, [0, 0, 0], [0, 0, 0], rows, prune_starved_trees=True),
        [False] * 4,
    )
    assert (pruned.row, pruned.column) == (1, 0)
    assert plain.is_valid()
    assert not pruned.is_valid()


def test_starved_tree_pruning_on_single_cell():
    state = PuzzleState(1, [0], [0], grid("%"), prune_starved_trees=True)
    assert not state.advance(False).is_valid()


def test_depth_counts_decisions(root_3x3):
    assert root_3x3.depth == 0
    state = walk(root_3x3, [True, True, False, False])
    assert state.depth == 4
    assert state.depth == state.decided_cells


def test_large_grid_solves_without_recursion_limit():
    dim = 35
    root = PuzzleState(dim, [0] * dim, [0] * dim, [[EMPTY] * dim for _ in range(dim)])
    backtracker = Backtracker()
    goal = backtracker.solve(root)
    assert goal.is_goal()
    assert goal.depth == dim * dim
    assert all(cell == GRASS for row in goal.rows() for cell in row)
    assert backtracker.max_depth == dim * dim
