"""Mutation planning for DazzleForest.

A plan validates every precondition of a mutation before the tree is
touched. Only once a plan has been built successfully does the Tree take
its snapshot and start changing state, so validation failures can never
leave partial changes behind.
"""

from typing import Any, Hashable, Optional, TYPE_CHECKING

from .config import MutationConfig, Placement, Reference
from .errors import DuplicateElementError, ElementNotPresentError, InvalidConfigError
from .identity import identity_of, identity_or_self

if TYPE_CHECKING:
    from .forest import Tree


def _check_config(config: MutationConfig) -> None:
    problems = config.validate()
    if problems:
        raise InvalidConfigError(problems)


class MergePlan:
    """Validated plan for merging one tree into another.

    Attributes:
        target: Tree receiving the elements
        source: Tree whose contents are inserted
        reference: Where the source roots are spliced
        reference_key: Identifier of the reference element (None for APPEND)
        config: Effective MutationConfig
    """

    def __init__(self,
                 target: 'Tree',
                 source: 'Tree',
                 reference: Reference,
                 config: MutationConfig):
        """Create and validate a merge plan.

        Raises:
            InvalidConfigError: If config is inconsistent
            DuplicateElementError: If any source element is already in target
            ElementNotPresentError: If the reference element is not in target
        """
        _check_config(config)
        self.target = target
        self.source = source
        self.reference = reference
        self.config = config

        self.incoming = source.elements()
        for element in self.incoming:
            if target.contains(element):
                raise DuplicateElementError(element, identity_of(element))

        self.reference_key: Optional[Hashable] = None
        if reference.is_relative:
            if not target.contains(reference.element):
                raise ElementNotPresentError(
                    reference.element,
                    identity_or_self(reference.element),
                    role="reference",
                )
            self.reference_key = identity_of(reference.element)

    @property
    def placement(self) -> Placement:
        return self.reference.placement

    def describe(self) -> str:
        """Short human-readable summary, used for debug logging."""
        where = self.placement.value
        if self.reference_key is not None:
            where = f"{where} {self.reference_key!r}"
        return f"merge {len(self.incoming)} element(s), {where}"


class PrunePlan:
    """Validated plan for detaching a subtree."""

    def __init__(self, target: 'Tree', element: Any, config: MutationConfig):
        """Create and validate a prune plan.

        Raises:
            InvalidConfigError: If config is inconsistent
            ElementNotPresentError: If element is not in target
        """
        _check_config(config)
        if not target.contains(element):
            raise ElementNotPresentError(element, identity_or_self(element))
        self.target = target
        self.element = element
        self.key = identity_of(element)
        self.config = config

    def describe(self) -> str:
        return f"prune {self.key!r}"


class MovePlan(PrunePlan):
    """Validated plan for relocating a subtree inside the same tree.

    Checks up front that the reference survives the prune, i.e. that it
    is in the tree and not inside the subtree being moved.
    """

    def __init__(self,
                 target: 'Tree',
                 element: Any,
                 reference: Reference,
                 config: MutationConfig):
        """Create and validate a move plan.

        Raises:
            InvalidConfigError: If config is inconsistent
            ElementNotPresentError: If element or reference is not in target,
                or reference is element itself or one of its descendants
        """
        super().__init__(target, element, config)
        self.reference = reference
        self.reference_key: Optional[Hashable] = None
        if not reference.is_relative:
            return

        if not target.contains(reference.element):
            raise ElementNotPresentError(
                reference.element,
                identity_or_self(reference.element),
                role="reference",
            )
        self.reference_key = identity_of(reference.element)

        current = reference.element
        while current is not None:
            if identity_of(current) == self.key:
                raise ElementNotPresentError(
                    reference.element, self.reference_key,
                    role="reference (inside the moved subtree)",
                )
            current = target.parent(current)

    def describe(self) -> str:
        where = self.reference.placement.value
        if self.reference_key is not None:
            where = f"{where} {self.reference_key!r}"
        return f"move {self.key!r} {where}"
