"""The Tree: an ordered, multi-root forest of identifiable elements.

Structure is kept in side tables keyed by element identifier, so elements
themselves are never modified, copied, or asked to hold links:

- ``_elements``: identifier -> element, in insertion order
- ``_roots``: elements without a parent, left to right
- ``_parent``: identifier -> parent element (absent for roots)
- ``_children``: identifier -> ordered list of child elements

Every mutating operation (add, merge, prune, move) validates its
preconditions first and then, when atomic, runs against a snapshot that
is restored if anything goes wrong part-way through.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Hashable, Iterator, List, NamedTuple, Optional

from .config import MutationConfig, Placement, Reference
from .errors import (
    DuplicateElementError,
    ElementNotPresentError,
    InvalidElementError,
    InvariantViolationError,
)
from .identity import identity_of, identity_or_self
from .planning import MergePlan, MovePlan, PrunePlan
from .traversal import DepthFirstPreOrderTraverser, ForestAdapter

logger = logging.getLogger(__name__)


class _Snapshot(NamedTuple):
    """Copy of the four structural tables (elements are not cloned)."""
    elements: Dict[Hashable, Any]
    roots: List[Any]
    parent: Dict[Hashable, Any]
    children: Dict[Hashable, List[Any]]


class Tree:
    """Ordered forest with atomic structural mutation.

    Example:
        >>> a, b, c = Element(), Element(), Element()
        >>> tree = Tree([a, b])
        >>> tree.add(c, under=b)
        >>> tree.children(b) == [c]
        True
        >>> subtree = tree.prune(b)
        >>> tree.roots() == [a]
        True
    """

    def __init__(self, elements: Optional[List[Any]] = None):
        """Create a forest whose roots are the given elements.

        Args:
            elements: Initial root elements, in order

        Raises:
            InvalidElementError: If an element has no identifier
            DuplicateElementError: If two elements share an identifier
        """
        elements = list(elements or [])
        keys = [identity_of(element) for element in elements]

        self._elements: Dict[Hashable, Any] = {}
        for key, element in zip(keys, elements):
            if key in self._elements:
                raise DuplicateElementError(element, key)
            self._elements[key] = element

        self._roots: List[Any] = list(elements)
        self._parent: Dict[Hashable, Any] = {}
        self._children: Dict[Hashable, List[Any]] = {key: [] for key in keys}

    # Queries

    def contains(self, element: Any) -> bool:
        """Check whether an element (by identifier) is in this tree."""
        try:
            key = identity_of(element)
        except InvalidElementError:
            return False
        return key in self._children

    def elements(self) -> List[Any]:
        """All elements in insertion order (a copy)."""
        return list(self._elements.values())

    def roots(self) -> List[Any]:
        """Root elements, left to right (a copy)."""
        return list(self._roots)

    def children(self, element: Any = None) -> List[Any]:
        """Ordered children of an element, or the roots when none is given.

        Raises:
            ElementNotPresentError: If element is not in this tree
        """
        if element is None:
            return self.roots()
        return list(self._children[self._require(element)])

    def parent(self, element: Any) -> Optional[Any]:
        """Parent of an element, or None for a root.

        Raises:
            ElementNotPresentError: If element is not in this tree
        """
        return self._parent.get(self._require(element))

    def depth(self, element: Any) -> int:
        """Number of ancestors above element (roots are at depth 0)."""
        self._require(element)
        return ForestAdapter(self).get_depth(element)

    def ancestors(self, element: Any) -> List[Any]:
        """Ancestors of element, nearest first."""
        self._require(element)
        return list(ForestAdapter(self).get_ancestors(element))

    def siblings(self, element: Any) -> List[Any]:
        """Other elements sharing element's sibling list, in order."""
        self._require(element)
        return list(ForestAdapter(self).get_siblings(element))

    def descendants(self, element: Any) -> List[Any]:
        """All descendants of element in depth-first pre-order."""
        self._require(element)
        traverser = DepthFirstPreOrderTraverser(ForestAdapter(self))
        return [node for node, _ in traverser.traverse(element, min_depth=1)]

    def to_dict(self) -> Dict[str, Any]:
        """Nested, read-only projection of the current structure."""
        from .api import serialize_tree
        return serialize_tree(self)

    def __contains__(self, element: Any) -> bool:
        return self.contains(element)

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.elements())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(elements={len(self._elements)}, roots={len(self._roots)})"

    # Mutations

    def add(self,
            element: Any,
            before: Any = None,
            after: Any = None,
            under: Any = None,
            atomic: bool = True,
            config: Optional[MutationConfig] = None) -> None:
        """Insert a single element; same placement rules as merge()."""
        self.merge(Tree([element]), before=before, after=after, under=under,
                   atomic=atomic, config=config)

    def merge(self,
              other: 'Tree',
              before: Any = None,
              after: Any = None,
              under: Any = None,
              atomic: bool = True,
              config: Optional[MutationConfig] = None) -> None:
        """Insert the whole of another tree, keeping its shape and order.

        The other tree's roots are placed immediately before or after a
        reference element (in that element's sibling list), as trailing
        children of a reference element, or at the end of the root list
        when no reference is given. Elements below the other tree's roots
        keep their parents.

        The other tree is not modified, but its elements now also belong
        to this tree, so it should be treated as consumed.

        Args:
            other: Tree to insert
            before: Place other's roots right in front of this element
            after: Place other's roots right behind this element
            under: Append other's roots to this element's children
            atomic: Roll back to the pre-call state if the merge fails
            config: Full MutationConfig, takes precedence over ``atomic``

        Raises:
            AmbiguousReferenceError: If more than one reference is given
            DuplicateElementError: If an element of other is already here
            ElementNotPresentError: If the reference element is not here
        """
        reference = Reference.from_kwargs(before, after, under)
        plan = MergePlan(self, other, reference, MutationConfig.resolve(atomic, config))
        with self._transaction(plan.config, plan.describe()):
            self._apply_merge(plan)

    def prune(self,
              element: Any,
              atomic: bool = True,
              config: Optional[MutationConfig] = None) -> 'Tree':
        """Detach the subtree rooted at element and return it as a new Tree.

        Args:
            element: Root of the subtree to remove
            atomic: Roll back to the pre-call state if the prune fails
            config: Full MutationConfig, takes precedence over ``atomic``

        Returns:
            Independent Tree whose only root is element

        Raises:
            ElementNotPresentError: If element is not in this tree
        """
        plan = PrunePlan(self, element, MutationConfig.resolve(atomic, config))
        with self._transaction(plan.config, plan.describe()):
            return self._detach(plan.key)

    def move(self,
             element: Any,
             before: Any = None,
             after: Any = None,
             under: Any = None,
             atomic: bool = True,
             config: Optional[MutationConfig] = None) -> None:
        """Relocate the subtree rooted at element to a new position.

        Equivalent to pruning element and merging the result back at the
        reference, as one operation.

        Raises:
            AmbiguousReferenceError: If more than one reference is given
            ElementNotPresentError: If element or the reference is not in
                this tree, or the reference lies inside the moved subtree
        """
        reference = Reference.from_kwargs(before, after, under)
        plan = MovePlan(self, element, reference, MutationConfig.resolve(atomic, config))
        with self._transaction(plan.config, plan.describe()):
            subtree = self._detach(plan.key)
            self._apply_merge(MergePlan(self, subtree, reference, MutationConfig.fast()))

    # Internals

    def _require(self, element: Any) -> Hashable:
        """Identifier of element, which must belong to this tree."""
        if not self.contains(element):
            raise ElementNotPresentError(element, identity_or_self(element))
        return identity_of(element)

    @contextmanager
    def _transaction(self, config: MutationConfig, description: str):
        """Run a mutation with the snapshot/verify discipline of config."""
        snapshot = self._backup() if config.atomic else None
        try:
            yield
            if config.verify:
                problems = self._invariant_problems()
                if problems:
                    raise InvariantViolationError(problems, description)
        except Exception as exc:
            if snapshot is not None:
                logger.warning("Rolling back %s after %s: %s",
                               description, type(exc).__name__, exc)
                self._restore(snapshot)
            else:
                logger.warning("Non-atomic %s failed with %s; tree may be inconsistent",
                               description, type(exc).__name__)
            raise
        logger.debug("Applied %s", description)

    def _apply_merge(self, plan: MergePlan) -> None:
        source = plan.source
        for element in plan.incoming:
            key = identity_of(element)
            self._elements[key] = element
            self._children[key] = list(source._children[key])
            if key in source._parent:
                self._parent[key] = source._parent[key]
        self._attach_roots(list(source._roots), plan)

    def _attach_roots(self, roots: List[Any], plan: MergePlan) -> None:
        """Splice roots into place according to the plan's reference."""
        if plan.placement is Placement.APPEND:
            self._roots.extend(roots)
            return

        key = plan.reference_key
        if plan.placement is Placement.UNDER:
            anchor = self._elements[key]
            self._children[key].extend(roots)
            for root in roots:
                self._parent[identity_of(root)] = anchor
            return

        siblings = self._sibling_list(key)
        index = self._index_in(siblings, key)
        if plan.placement is Placement.AFTER:
            index += 1
        siblings[index:index] = roots

        parent = self._parent.get(key)
        if parent is not None:
            for root in roots:
                self._parent[identity_of(root)] = parent

    def _detach(self, key: Hashable) -> 'Tree':
        """Remove the subtree rooted at key and return it as a new Tree."""
        element = self._elements[key]
        siblings = self._sibling_list(key)
        del siblings[self._index_in(siblings, key)]

        subtree = Tree([element])
        stack = [element]
        while stack:
            node = stack.pop()
            node_key = identity_of(node)
            children = self._children.pop(node_key)
            del self._elements[node_key]
            self._parent.pop(node_key, None)

            subtree._elements[node_key] = node
            subtree._children[node_key] = list(children)
            for child in children:
                subtree._parent[identity_of(child)] = node
            stack.extend(reversed(children))
        return subtree

    def _sibling_list(self, key: Hashable) -> List[Any]:
        """The live list holding key: its parent's children or the roots."""
        parent = self._parent.get(key)
        if parent is None:
            return self._roots
        return self._children[identity_of(parent)]

    def _index_in(self, siblings: List[Any], key: Hashable) -> int:
        for index, sibling in enumerate(siblings):
            if identity_of(sibling) == key:
                return index
        raise InvariantViolationError([f"{key!r} is missing from its sibling list"])

    def _backup(self) -> _Snapshot:
        return _Snapshot(
            elements=dict(self._elements),
            roots=list(self._roots),
            parent=dict(self._parent),
            children={key: list(kids) for key, kids in self._children.items()},
        )

    def _restore(self, snapshot: _Snapshot) -> None:
        # Copy again so the same snapshot can be restored more than once
        self._elements = dict(snapshot.elements)
        self._roots = list(snapshot.roots)
        self._parent = dict(snapshot.parent)
        self._children = {key: list(kids) for key, kids in snapshot.children.items()}

    def _invariant_problems(self) -> List[str]:
        """Check every structural invariant.

        Returns:
            List of problems found (empty if the tree is consistent)
        """
        problems = []
        keys = set(self._elements)

        for key, element in self._elements.items():
            if identity_of(element) != key:
                problems.append(f"element stored under {key!r} reports {identity_of(element)!r}")
        if set(self._children) != keys:
            problems.append("children table does not match the element set")
        for key in self._parent:
            if key not in keys:
                problems.append(f"parent entry for unknown element {key!r}")

        placements: Dict[Hashable, int] = {}
        for root in self._roots:
            root_key = identity_of(root)
            placements[root_key] = placements.get(root_key, 0) + 1
            if root_key in self._parent:
                problems.append(f"root {root_key!r} has a parent")
        for parent_key, kids in self._children.items():
            for kid in kids:
                kid_key = identity_of(kid)
                placements[kid_key] = placements.get(kid_key, 0) + 1
                recorded = self._parent.get(kid_key)
                if recorded is None or identity_of(recorded) != parent_key:
                    problems.append(f"{kid_key!r} listed under {parent_key!r} but parent is {recorded!r}")

        for key in keys:
            count = placements.pop(key, 0)
            if count != 1:
                problems.append(f"{key!r} is placed {count} times")
        for key in placements:
            problems.append(f"{key!r} is placed but not an element")

        # Forest check: everything must be reachable from the roots
        reached = set()
        stack = [identity_of(root) for root in self._roots]
        while stack:
            key = stack.pop()
            if key in reached or key not in self._children:
                continue
            reached.add(key)
            stack.extend(identity_of(kid) for kid in self._children[key])
        unreachable = keys - reached
        if unreachable:
            problems.append(f"{len(unreachable)} element(s) unreachable from the roots (cycle?)")

        return problems
