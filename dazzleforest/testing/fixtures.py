"""Test fixtures for DazzleForest consumers.

These fixtures provide controlled access to a Tree's internal state for
testing purposes without making it part of the public API.
"""

from typing import Any, Dict, Hashable, List, Optional, Tuple

from ..errors import InvariantViolationError
from ..forest import Tree
from ..identity import identity_of


class ForestTestHelper:
    """Public test fixture for structural verification.

    Example:
        tree = Tree([a, b])
        helper = ForestTestHelper(tree)
        before = helper.snapshot()
        with pytest.raises(DuplicateElementError):
            tree.merge(Tree([a]))
        assert helper.snapshot() == before
        helper.assert_valid()
    """

    def __init__(self, tree: Tree):
        self._tree = tree

    def check_invariants(self) -> List[str]:
        """Return every invariant problem found (empty if consistent)."""
        return self._tree._invariant_problems()

    def assert_valid(self) -> None:
        """Raise InvariantViolationError if the tree is inconsistent."""
        problems = self.check_invariants()
        if problems:
            raise InvariantViolationError(problems)

    def snapshot(self) -> Dict[str, Any]:
        """Capture the tree's shape by identifiers, for equality checks.

        Returns:
            Dictionary containing:
            - elements: identifiers in insertion order
            - roots: root identifiers, left to right
            - children: identifier -> ordered child identifiers
            - parent: identifier -> parent identifier (None for roots)
        """
        tree = self._tree
        elements = [identity_of(element) for element in tree.elements()]
        return {
            'elements': elements,
            'roots': [identity_of(root) for root in tree.roots()],
            'children': {
                key: [identity_of(kid) for kid in tree._children[key]]
                for key in elements
            },
            'parent': {
                key: self._parent_key(key) for key in elements
            },
        }

    def edges(self) -> List[Tuple[Hashable, Hashable]]:
        """(parent, child) identifier pairs, parents in insertion order."""
        pairs = []
        for key in self.snapshot()['elements']:
            for kid in self._tree._children[key]:
                pairs.append((key, identity_of(kid)))
        return pairs

    def _parent_key(self, key: Hashable) -> Optional[Hashable]:
        parent = self._tree._parent.get(key)
        return None if parent is None else identity_of(parent)
