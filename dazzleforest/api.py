"""High-level API for DazzleForest.

This module provides simple, functional interfaces for reading a Tree:
walking it, searching it, gathering statistics, and projecting it into
plain nested data or JSON text. None of these functions modify the tree.
"""

import json
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from .config import TraversalStrategy
from .forest import Tree
from .identity import identity_of
from .traversal import ForestAdapter, create_traverser


def traverse_forest(
    tree: Tree,
    start: Any = None,
    strategy: Union[TraversalStrategy, str] = TraversalStrategy.DEPTH_FIRST_PRE,
    max_depth: Optional[int] = None,
    min_depth: int = 0,
) -> Iterator[Tuple[Any, int]]:
    """Walk a tree, yielding (element, depth) pairs.

    Args:
        tree: Tree to walk
        start: Element to start from; None walks every root in order
        strategy: Traversal strategy (bfs, dfs_pre, dfs_post, level)
        max_depth: Maximum depth to traverse
        min_depth: Minimum depth before yielding elements

    Yields:
        Tuples of (element, depth)

    Raises:
        ElementNotPresentError: If start is given but not in the tree

    Example:
        >>> for element, depth in traverse_forest(tree, strategy="bfs"):
        ...     print("  " * depth, element.identifier())
    """
    if start is not None:
        tree.children(start)  # raises for elements outside the tree
    traverser = create_traverser(strategy, ForestAdapter(tree))
    yield from traverser.traverse(start, max_depth=max_depth, min_depth=min_depth)


def find_elements(
    tree: Tree,
    predicate: Callable[[Any], bool],
    **kwargs
) -> Iterator[Any]:
    """Find elements that match a predicate.

    Args:
        tree: Tree to search
        predicate: Function that returns True for matching elements
        **kwargs: Traversal options (see traverse_forest)

    Yields:
        Matching elements in traversal order
    """
    for element, _ in traverse_forest(tree, **kwargs):
        if predicate(element):
            yield element


def count_elements(tree: Tree, **kwargs) -> int:
    """Count elements reached by a traversal (see traverse_forest)."""
    count = 0
    for _ in traverse_forest(tree, **kwargs):
        count += 1
    return count


def get_leaf_elements(tree: Tree, **kwargs) -> Iterator[Any]:
    """Yield elements that have no children."""
    adapter = ForestAdapter(tree)
    for element, _ in traverse_forest(tree, **kwargs):
        if adapter.is_leaf(element):
            yield element


def get_element_paths(tree: Tree, **kwargs) -> Iterator[List[Any]]:
    """Yield, for every element, the identifiers from its root down to it.

    Example:
        >>> for path in get_element_paths(tree):
        ...     print(" -> ".join(map(str, path)))
    """
    adapter = ForestAdapter(tree)
    for element, _ in traverse_forest(tree, **kwargs):
        lineage = [element] + list(adapter.get_ancestors(element))
        yield [identity_of(node) for node in reversed(lineage)]


def get_forest_stats(tree: Tree) -> Dict[str, Any]:
    """Get statistics about a tree.

    Returns:
        Dictionary with total_elements, root_count, leaf_elements,
        internal_elements, max_depth, depths (count per depth) and
        average_branching (children per internal element)
    """
    adapter = ForestAdapter(tree)
    stats = {
        'total_elements': 0,
        'root_count': len(tree.roots()),
        'leaf_elements': 0,
        'max_depth': 0,
        'depths': {}
    }

    for element, depth in traverse_forest(tree, strategy=TraversalStrategy.BREADTH_FIRST):
        stats['total_elements'] += 1

        if adapter.is_leaf(element):
            stats['leaf_elements'] += 1

        stats['max_depth'] = max(stats['max_depth'], depth)

        if depth not in stats['depths']:
            stats['depths'][depth] = 0
        stats['depths'][depth] += 1

    stats['internal_elements'] = stats['total_elements'] - stats['leaf_elements']
    # Every non-root element is exactly one child of an internal element
    stats['average_branching'] = (
        (stats['total_elements'] - stats['root_count']) / stats['internal_elements']
        if stats['internal_elements'] > 0 else 0
    )

    return stats


def serialize_tree(tree: Tree) -> Dict[str, Any]:
    """Project a tree into nested plain data.

    Returns:
        ``{"roots": [{"element": ..., "children": [...]}, ...]}`` where each
        element slot holds the element's own ``to_dict()`` projection, or
        the element itself when it offers none
    """
    return {"roots": [_serialize_node(tree, root) for root in tree.roots()]}


def _serialize_node(tree: Tree, element: Any) -> Dict[str, Any]:
    # Iterative to stay clear of the recursion limit on deep trees
    root_node = {"element": _project(element), "children": []}
    stack = [(element, root_node)]
    while stack:
        current, node = stack.pop()
        for child in tree.children(current):
            child_node = {"element": _project(child), "children": []}
            node["children"].append(child_node)
            stack.append((child, child_node))
    return root_node


def _project(element: Any) -> Any:
    to_dict = getattr(element, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return element


def tree_to_json(tree: Tree, **json_kwargs) -> str:
    """Render serialize_tree() as JSON text.

    Values the json module cannot encode are rendered with ``str``.

    Args:
        tree: Tree to render
        **json_kwargs: Passed to json.dumps (indent, sort_keys, ...)
    """
    json_kwargs.setdefault("default", str)
    return json.dumps(serialize_tree(tree), **json_kwargs)
