from tentsandtrees.backtracker import Backtracker


class Bits:
    """Bit strings of length n with `ones` set bits and no two adjacent ones."""

    def __init__(self, n, ones, bits=()):
        self.n = n
        self.ones = ones
        self.bits = bits

    def successors(self):
        return [Bits(self.n, self.ones, self.bits + (1,)), Bits(self.n, self.ones, self.bits + (0,))]

    def is_valid(self):
        if len(self.bits) > self.n or sum(self.bits) > self.ones:
            return False
        return not (len(self.bits) >= 2 and self.bits[-1] == self.bits[-2] == 1)

    def is_goal(self):
        return len(self.bits) == self.n and sum(self.bits) == self.ones


def test_returns_first_solution_in_successor_order():
    solution = Backtracker().solve(Bits(4, 2))
    assert solution.bits == (1, 0, 1, 0)


def test_returns_none_when_exhausted():
    backtracker = Backtracker()
    assert backtracker.solve(Bits(3, 3)) is None
    assert backtracker.nodes_expanded > 0
    assert backtracker.states_pruned > 0
    assert backtracker.states_generated == 2 * backtracker.nodes_expanded


def test_root_goal_is_returned_without_expanding():
    backtracker = Backtracker()
    root = Bits(0, 0)
    assert backtracker.solve(root) is root
    assert backtracker.nodes_expanded == 0
    assert backtracker.max_depth == 0


def test_on_visit_sees_every_entered_state():
    visited = []
    backtracker = Backtracker(on_visit=lambda config, depth: visited.append((config.bits, depth)))
    backtracker.solve(Bits(4, 2))
    assert visited == [
        ((), 0),
        ((1,), 1),
        ((1, 0), 2),
        ((1, 0, 1), 3),
        ((1, 0, 1, 0), 4),
    ]
    assert backtracker.max_depth == 4
    assert backtracker.states_pruned == 2


def test_counters_reset_between_runs():
    backtracker = Backtracker()
    backtracker.solve(Bits(3, 3))
    backtracker.solve(Bits(0, 0))
    assert backtracker.nodes_expanded == 0
    assert backtracker.states_generated == 0
    assert backtracker.states_pruned == 0


def test_states_generated_counts_every_successor():
    backtracker = Backtracker()
    backtracker.solve(Bits(4, 2))
    assert backtracker.nodes_expanded == 4
    assert backtracker.states_generated == 8
    assert backtracker.states_pruned == 2


def test_deep_search_does_not_recurse():
    backtracker = Backtracker()
    solution = backtracker.solve(Bits(2000, 0))
    assert solution.bits == (0,) * 2000
    assert backtracker.max_depth == 2000
