"""Forest traversal for DazzleForest.

The ForestAdapter gives read-only navigation over a Tree (children,
parent, depth, siblings). Traversers implement different algorithms for
walking the forest through the adapter, either from one start element or
across every root in order.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Deque, Hashable, Iterator, List, Optional, Set, Tuple, Union, TYPE_CHECKING

from .config import TraversalStrategy
from .identity import identity_of

if TYPE_CHECKING:
    from .forest import Tree


class ForestAdapter:
    """Navigation over a Tree's current structure.

    Every call reads the tree's public queries, so the adapter always sees
    the tree as it is now and never holds structural state of its own.
    """

    def __init__(self, tree: 'Tree'):
        self.tree = tree

    def get_roots(self) -> List[Any]:
        return self.tree.roots()

    def get_children(self, element: Any) -> Iterator[Any]:
        """Iterate over the ordered children of element."""
        return iter(self.tree.children(element))

    def get_parent(self, element: Any) -> Optional[Any]:
        return self.tree.parent(element)

    def is_leaf(self, element: Any) -> bool:
        return not self.tree.children(element)

    def get_ancestors(self, element: Any) -> Iterator[Any]:
        """Yield ancestors of element, nearest first."""
        current = self.get_parent(element)
        while current is not None:
            yield current
            current = self.get_parent(current)

    def get_depth(self, element: Any) -> int:
        """Calculate the depth of an element (roots are at depth 0)."""
        depth = 0
        for _ in self.get_ancestors(element):
            depth += 1
        return depth

    def get_siblings(self, element: Any) -> Iterator[Any]:
        """Get siblings of element (excluding element itself).

        Roots are siblings of each other.
        """
        parent = self.get_parent(element)
        if parent is None:
            candidates = self.get_roots()
        else:
            candidates = self.tree.children(parent)

        element_id = identity_of(element)
        for candidate in candidates:
            if identity_of(candidate) != element_id:
                yield candidate


class ForestTraverser(ABC):
    """Abstract base class for traversal strategies."""

    def __init__(self, adapter: ForestAdapter):
        """Initialize traverser with an adapter.

        Args:
            adapter: ForestAdapter for navigating the forest
        """
        self.adapter = adapter

    @abstractmethod
    def traverse(self,
                 start: Any = None,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[Any, int]]:
        """Walk the forest.

        Args:
            start: Element to start from; None walks every root in order
            max_depth: Maximum depth to traverse (None = unlimited)
            min_depth: Minimum depth before yielding elements

        Yields:
            Tuples of (element, depth) where depth is relative to the start
            (or to the roots when walking the whole forest)
        """
        pass

    def _starts(self, start: Any) -> List[Any]:
        if start is None:
            return self.adapter.get_roots()
        return [start]

    def _should_yield(self, depth: int, min_depth: int, max_depth: Optional[int]) -> bool:
        if depth < min_depth:
            return False
        if max_depth is not None and depth > max_depth:
            return False
        return True

    def _should_explore(self, depth: int, max_depth: Optional[int]) -> bool:
        if max_depth is None:
            return True
        return depth < max_depth


class BreadthFirstTraverser(ForestTraverser):
    """Breadth-first traversal.

    Visits every element at depth N (across all starting roots) before
    any element at depth N+1.
    """

    def traverse(self,
                 start: Any = None,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[Any, int]]:
        queue: Deque[Tuple[Any, int]] = deque((root, 0) for root in self._starts(start))
        visited: Set[Hashable] = set()

        while queue:
            element, depth = queue.popleft()

            element_id = identity_of(element)
            if element_id in visited:
                continue
            visited.add(element_id)

            if self._should_yield(depth, min_depth, max_depth):
                yield (element, depth)

            if self._should_explore(depth, max_depth):
                for child in self.adapter.get_children(element):
                    queue.append((child, depth + 1))


class DepthFirstPreOrderTraverser(ForestTraverser):
    """Depth-first pre-order traversal.

    Visits parent before children; the order in which prune() copies a
    subtree.
    """

    def traverse(self,
                 start: Any = None,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[Any, int]]:
        # Explicit stack: deep trees would exhaust the recursion limit
        stack: List[Tuple[Any, int]] = [(root, 0) for root in reversed(self._starts(start))]
        visited: Set[Hashable] = set()

        while stack:
            element, depth = stack.pop()

            element_id = identity_of(element)
            if element_id in visited:
                continue
            visited.add(element_id)

            if self._should_yield(depth, min_depth, max_depth):
                yield (element, depth)

            if self._should_explore(depth, max_depth):
                children = list(self.adapter.get_children(element))
                stack.extend((child, depth + 1) for child in reversed(children))


class DepthFirstPostOrderTraverser(ForestTraverser):
    """Depth-first post-order traversal.

    Visits children before parent. Good for aggregating values up the
    tree or tearing it down bottom-up.
    """

    def traverse(self,
                 start: Any = None,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[Any, int]]:
        # Each entry: (element, depth, children already pushed?)
        stack: List[Tuple[Any, int, bool]] = [
            (root, 0, False) for root in reversed(self._starts(start))
        ]
        visited: Set[Hashable] = set()

        while stack:
            element, depth, expanded = stack.pop()

            if expanded:
                if self._should_yield(depth, min_depth, max_depth):
                    yield (element, depth)
                continue

            element_id = identity_of(element)
            if element_id in visited:
                continue
            visited.add(element_id)

            stack.append((element, depth, True))
            if self._should_explore(depth, max_depth):
                children = list(self.adapter.get_children(element))
                stack.extend((child, depth + 1, False) for child in reversed(children))


class LevelOrderTraverser(ForestTraverser):
    """Level-order traversal.

    Same visiting order as breadth-first, but each level is fully
    collected before the next one is started.
    """

    def traverse(self,
                 start: Any = None,
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple[Any, int]]:
        current_level: List[Any] = self._starts(start)
        current_depth = 0
        visited: Set[Hashable] = set()

        while current_level and (max_depth is None or current_depth <= max_depth):
            next_level: List[Any] = []

            for element in current_level:
                element_id = identity_of(element)
                if element_id in visited:
                    continue
                visited.add(element_id)

                if self._should_yield(current_depth, min_depth, max_depth):
                    yield (element, current_depth)

                if self._should_explore(current_depth, max_depth):
                    next_level.extend(self.adapter.get_children(element))

            current_level = next_level
            current_depth += 1


_STRATEGY_NAMES = {
    'bfs': TraversalStrategy.BREADTH_FIRST,
    'breadth_first': TraversalStrategy.BREADTH_FIRST,
    'dfs': TraversalStrategy.DEPTH_FIRST_PRE,
    'dfs_pre': TraversalStrategy.DEPTH_FIRST_PRE,
    'depth_first_pre': TraversalStrategy.DEPTH_FIRST_PRE,
    'dfs_post': TraversalStrategy.DEPTH_FIRST_POST,
    'depth_first_post': TraversalStrategy.DEPTH_FIRST_POST,
    'level': TraversalStrategy.LEVEL_ORDER,
    'level_order': TraversalStrategy.LEVEL_ORDER,
}

_TRAVERSERS = {
    TraversalStrategy.BREADTH_FIRST: BreadthFirstTraverser,
    TraversalStrategy.DEPTH_FIRST_PRE: DepthFirstPreOrderTraverser,
    TraversalStrategy.DEPTH_FIRST_POST: DepthFirstPostOrderTraverser,
    TraversalStrategy.LEVEL_ORDER: LevelOrderTraverser,
}


def parse_strategy(strategy: Union[TraversalStrategy, str]) -> TraversalStrategy:
    """Parse strategy from string or enum.

    Raises:
        ValueError: If strategy name is not recognized
    """
    if isinstance(strategy, TraversalStrategy):
        return strategy

    strategy_lower = strategy.lower() if isinstance(strategy, str) else str(strategy)
    if strategy_lower in _STRATEGY_NAMES:
        return _STRATEGY_NAMES[strategy_lower]

    raise ValueError(
        f"Unknown traversal strategy: {strategy}. "
        f"Choose from: {', '.join(_STRATEGY_NAMES)}"
    )


def create_traverser(strategy: Union[TraversalStrategy, str],
                     adapter: ForestAdapter) -> ForestTraverser:
    """Create a traverser instance by strategy enum or name.

    Args:
        strategy: TraversalStrategy or name (bfs, dfs_pre, dfs_post, level)
        adapter: ForestAdapter for the tree

    Returns:
        ForestTraverser instance

    Raises:
        ValueError: If strategy name is not recognized
    """
    return _TRAVERSERS[parse_strategy(strategy)](adapter)
