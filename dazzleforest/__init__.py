"""DazzleForest - Ordered multi-root trees with atomic mutation.

DazzleForest keeps an ordered forest of externally identified elements
and lets you reorganize it safely: every merge, prune, and move either
completes or leaves the tree exactly as it was.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from dazzleforest import Tree, Element

    a, b, c = Element(), Element(), Element()
    tree = Tree([a, b])
    tree.add(c, under=b)
    subtree = tree.prune(b)
    tree.merge(subtree, before=a)
━━━━━━━━━━━━━━━━━━━━━━━━━━

Elements only need an ``identifier()`` method; the tree never copies or
inspects them otherwise.
"""

__version__ = "0.1.0"

from .errors import (
    ForestError,
    InvalidElementError,
    ElementNotPresentError,
    DuplicateElementError,
    AmbiguousReferenceError,
    InvariantViolationError,
    InvalidConfigError,
)
from .identity import Identifiable, Element, identity_of, has_identity, generate_uuid
from .config import Placement, Reference, MutationConfig, TraversalStrategy
from .forest import Tree
from .traversal import (
    ForestAdapter,
    ForestTraverser,
    BreadthFirstTraverser,
    DepthFirstPreOrderTraverser,
    DepthFirstPostOrderTraverser,
    LevelOrderTraverser,
    create_traverser,
)
from .api import (
    traverse_forest,
    find_elements,
    count_elements,
    get_leaf_elements,
    get_element_paths,
    get_forest_stats,
    serialize_tree,
    tree_to_json,
)

__all__ = [
    "__version__",
    # Core
    "Tree",
    # Identity
    "Identifiable",
    "Element",
    "identity_of",
    "has_identity",
    "generate_uuid",
    # Errors
    "ForestError",
    "InvalidElementError",
    "ElementNotPresentError",
    "DuplicateElementError",
    "AmbiguousReferenceError",
    "InvariantViolationError",
    "InvalidConfigError",
    # Config
    "Placement",
    "Reference",
    "MutationConfig",
    "TraversalStrategy",
    # Traversal
    "ForestAdapter",
    "ForestTraverser",
    "BreadthFirstTraverser",
    "DepthFirstPreOrderTraverser",
    "DepthFirstPostOrderTraverser",
    "LevelOrderTraverser",
    "create_traverser",
    # API
    "traverse_forest",
    "find_elements",
    "count_elements",
    "get_leaf_elements",
    "get_element_paths",
    "get_forest_stats",
    "serialize_tree",
    "tree_to_json",
]
