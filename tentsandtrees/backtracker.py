"""Generic depth-first backtracking driver."""

from typing import Callable, Iterable, Iterator, List, Optional, Protocol, Tuple, TypeVar


C = TypeVar("C", bound="Configuration")


class Configuration(Protocol):
    """Anything the backtracker can search: an expandable, checkable partial solution."""

    def successors(self: C) -> Iterable[C]:
        ...

    def is_valid(self) -> bool:
        ...

    def is_goal(self) -> bool:
        ...


class Backtracker:
    """
    Depth-first search returning the first goal configuration found.

    Children are visited in the order successors() yields them; a child is
    only descended into if it is valid. The search stops at the first goal.
    """

    def __init__(
        self, on_visit: Optional[Callable[[Configuration, int], None]] = None
    ) -> None:
        """
        Args:
            on_visit: Optional callback invoked as on_visit(config, depth) for
                the root and for every valid configuration the search enters.
        """
        self.on_visit = on_visit

        # Metrics / counters (for analysis)
        self.nodes_expanded: int = 0
        self.states_generated: int = 0
        self.states_pruned: int = 0
        self.max_depth: int = 0

    def solve(self, config: C) -> Optional[C]:
        """
        Search from config.

        The traversal keeps its own stack of child iterators, so the search
        depth is not bounded by the interpreter's recursion limit.

        Returns:
            The first goal configuration found, or None if none is reachable.
        """
        self.nodes_expanded = 0
        self.states_generated = 0
        self.states_pruned = 0
        self.max_depth = 0

        self._enter(config, 0)
        if config.is_goal():
            return config

        # Each frame: (remaining children of an expanded node, depth of those children)
        stack: List[Tuple[Iterator[C], int]] = [(self._expand(config), 1)]
        while stack:
            children, depth = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                continue
            if not child.is_valid():
                self.states_pruned += 1
                continue

            self._enter(child, depth)
            if child.is_goal():
                return child
            stack.append((self._expand(child), depth + 1))

        return None

    def _enter(self, config: C, depth: int) -> None:
        self.max_depth = max(self.max_depth, depth)
        if self.on_visit is not None:
            self.on_visit(config, depth)

    def _expand(self, config: C) -> Iterator[C]:
        self.nodes_expanded += 1
        children = list(config.successors())
        self.states_generated += len(children)
        return iter(children)
