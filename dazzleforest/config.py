"""Configuration system for DazzleForest.

This module defines how callers describe where merged elements go
(Placement / Reference), how a mutation should behave (MutationConfig),
and how a forest is walked (TraversalStrategy).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from .errors import AmbiguousReferenceError


class Placement(Enum):
    """Where merged roots are spliced relative to a reference element."""
    BEFORE = "before"   # Same sibling list, ahead of the reference
    AFTER = "after"     # Same sibling list, right after the reference
    UNDER = "under"     # Trailing children of the reference
    APPEND = "append"   # End of the root list (no reference)


class TraversalStrategy(Enum):
    """How to walk the forest."""
    BREADTH_FIRST = "bfs"           # Level by level
    DEPTH_FIRST_PRE = "dfs_pre"     # Parent before children
    DEPTH_FIRST_POST = "dfs_post"   # Children before parent
    LEVEL_ORDER = "level"           # Grouped by level


@dataclass(frozen=True)
class Reference:
    """Position at which a merge splices the incoming roots."""

    placement: Placement = Placement.APPEND
    element: Any = None

    @classmethod
    def before(cls, element: Any) -> 'Reference':
        return cls(Placement.BEFORE, element)

    @classmethod
    def after(cls, element: Any) -> 'Reference':
        return cls(Placement.AFTER, element)

    @classmethod
    def under(cls, element: Any) -> 'Reference':
        return cls(Placement.UNDER, element)

    @classmethod
    def append(cls) -> 'Reference':
        return cls(Placement.APPEND, None)

    @classmethod
    def from_kwargs(cls,
                    before: Any = None,
                    after: Any = None,
                    under: Any = None) -> 'Reference':
        """Build a Reference from the keyword style used by Tree methods.

        Args:
            before: Element to insert in front of
            after: Element to insert behind
            under: Element to insert beneath

        Returns:
            Reference for the single given keyword, or an APPEND reference

        Raises:
            AmbiguousReferenceError: If more than one keyword is given
        """
        given = [
            (name, value)
            for name, value in (("before", before), ("after", after), ("under", under))
            if value is not None
        ]
        if len(given) > 1:
            raise AmbiguousReferenceError([name for name, _ in given])
        if not given:
            return cls.append()
        name, value = given[0]
        return cls(Placement(name), value)

    @property
    def is_relative(self) -> bool:
        """True when the placement needs a reference element."""
        return self.placement is not Placement.APPEND


@dataclass(frozen=True)
class MutationConfig:
    """Per-call behaviour of merge / add / prune / move.

    Passed explicitly to each call; the tree keeps no global default.
    """

    atomic: bool = True   # Snapshot before mutating, roll back on failure
    verify: bool = False  # Re-check every invariant once the mutation is done

    @classmethod
    def fast(cls) -> 'MutationConfig':
        """No snapshot, no verification.

        A failure part-way through may leave the tree inconsistent.
        """
        return cls(atomic=False, verify=False)

    @classmethod
    def strict(cls) -> 'MutationConfig':
        """Snapshot and verify; slowest, safest."""
        return cls(atomic=True, verify=True)

    @classmethod
    def resolve(cls,
                atomic: Optional[bool] = True,
                config: Optional['MutationConfig'] = None) -> 'MutationConfig':
        """Pick the effective config for a call; an explicit config wins."""
        if config is not None:
            return config
        return cls(atomic=True if atomic is None else atomic)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if not isinstance(self.atomic, bool):
            errors.append("atomic must be a bool")
        if not isinstance(self.verify, bool):
            errors.append("verify must be a bool")
        return errors
