"""Exception types for DazzleForest.

Every error raised by the forest derives from ForestError. The concrete
classes also derive from the closest builtin exception so callers that
only know about KeyError / ValueError / TypeError still catch them.
"""

from typing import Any, List, Optional


class ForestError(Exception):
    """Base exception for all DazzleForest errors."""
    pass


class InvalidElementError(ForestError, TypeError):
    """Raised when an element does not expose a usable identifier."""

    def __init__(self, element: Any, reason: str = "has no identifier() method"):
        self.element = element
        self.reason = reason
        super().__init__(f"Invalid element {element!r}: {reason}")


class ElementNotPresentError(ForestError, KeyError):
    """Raised when an operation references an element not in the tree."""

    def __init__(self, element: Any, identifier: Any = None, role: str = "element"):
        self.element = element
        self.identifier = identifier
        self.role = role
        super().__init__(element)

    def __str__(self) -> str:
        # KeyError.__str__ would repr the args tuple
        return f"{self.role.capitalize()} not present in tree: {self.identifier!r}"


class DuplicateElementError(ForestError, ValueError):
    """Raised when an identifier would appear twice in the same tree."""

    def __init__(self, element: Any, identifier: Any):
        self.element = element
        self.identifier = identifier
        super().__init__(f"Duplicate element in tree: {identifier!r}")


class AmbiguousReferenceError(ForestError, ValueError):
    """Raised when more than one of before/after/under is given."""

    def __init__(self, given: List[str]):
        self.given = given
        super().__init__(
            f"At most one reference may be given, got: {', '.join(given)}"
        )


class InvariantViolationError(ForestError):
    """Raised when the tree's structural invariants do not hold."""

    def __init__(self, problems: List[str], operation: Optional[str] = None):
        self.problems = problems
        self.operation = operation
        prefix = f"after {operation}: " if operation else ""
        super().__init__(f"Tree invariants violated {prefix}{'; '.join(problems)}")


class InvalidConfigError(ForestError, ValueError):
    """Raised when a MutationConfig fails validation."""

    def __init__(self, problems: List[str]):
        self.problems = problems
        super().__init__(f"Invalid configuration: {'; '.join(problems)}")
