"""Element identity for DazzleForest.

The forest never looks inside the elements it stores. All it needs is a
stable identifier per element, obtained through the ``identifier()``
method. Elements may subclass Identifiable, or simply provide a callable
``identifier`` attribute.

This module also ships a small identifier generator and a ready-made
Element class for applications that do not have identities of their own.
The forest itself never generates identifiers.
"""

import random
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Hashable, Optional

from .errors import InvalidElementError


class Identifiable(ABC):
    """Abstract base class for anything that can live in a Tree.

    The identifier must be:
    - Unique within the tree
    - Stable for the lifetime of the element
    - Hashable, since the tree keys its bookkeeping by it
    """

    @abstractmethod
    def identifier(self) -> Hashable:
        """Return the element's unique, stable identifier."""
        pass


def identity_of(element: Any) -> Hashable:
    """Return the identifier of an element.

    Args:
        element: Any object exposing ``identifier()``

    Returns:
        The element's identifier

    Raises:
        InvalidElementError: If the element has no usable identifier,
            including when identifier() itself raises (the original
            exception is chained as __cause__)
    """
    accessor = getattr(element, "identifier", None)
    if accessor is None or not callable(accessor):
        raise InvalidElementError(element)

    try:
        key = accessor()
    except Exception as exc:
        raise InvalidElementError(
            element, f"identifier() raised {type(exc).__name__}: {exc}"
        ) from exc
    if key is None:
        raise InvalidElementError(element, "identifier() returned None")
    try:
        hash(key)
    except TypeError:
        raise InvalidElementError(
            element, f"identifier {key!r} is not hashable"
        ) from None
    return key


def identity_or_self(element: Any) -> Any:
    """Identifier for error messages; falls back to the element itself."""
    try:
        return identity_of(element)
    except InvalidElementError:
        return element


def has_identity(element: Any) -> bool:
    """Check whether an element satisfies the identity capability."""
    try:
        identity_of(element)
    except InvalidElementError:
        return False
    return True


def generate_uuid(rng: Optional[random.Random] = None) -> str:
    """Generate a time+random identifier in the 8-4-4-4-12 layout.

    The first hex digits are seeded with the current time in milliseconds
    so identifiers created close together still differ. Randomness comes
    from ``random`` and is NOT suitable for anything security related.

    Args:
        rng: Optional random source (for reproducible identifiers in tests)

    Returns:
        A 36 character lowercase identifier, version nibble set to 4
    """
    rng = rng or random
    stamp = int(time.time() * 1000)
    digits = []
    for position in range(32):
        if position == 12:
            digits.append("4")
            continue
        value = (stamp + int(rng.random() * 16)) % 16
        stamp //= 16
        if position == 16:
            value = (value & 0x3) | 0x8  # variant bits 10xx
        digits.append("%x" % value)
    hex_digits = "".join(digits)
    return "-".join((
        hex_digits[0:8],
        hex_digits[8:12],
        hex_digits[12:16],
        hex_digits[16:20],
        hex_digits[20:32],
    ))


class Element(Identifiable):
    """Simple identifiable payload holder.

    Stores arbitrary keyword attributes alongside an identifier. When no
    identifier is given one is generated with generate_uuid().

    Example:
        >>> task = Element(title="Write docs")
        >>> tree = Tree([task])
    """

    def __init__(self, uuid: Optional[Hashable] = None, **attributes: Any):
        self._uuid = uuid if uuid is not None else generate_uuid()
        self.attributes: Dict[str, Any] = dict(attributes)

    def identifier(self) -> Hashable:
        return self._uuid

    def to_dict(self) -> Dict[str, Any]:
        """Serializable projection used by serialize_tree()."""
        data = {"uuid": self._uuid}
        data.update(self.attributes)
        return data

    def __getattr__(self, name: str) -> Any:
        attributes = self.__dict__.get("attributes", {})
        if name in attributes:
            return attributes[name]
        raise AttributeError(f"{self.__class__.__name__!s} has no attribute {name!r}")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(uuid={self._uuid!r})"

    def __eq__(self, other: object) -> bool:
        """Elements are equal if they have the same identifier."""
        if not isinstance(other, Element):
            return NotImplemented
        return self._uuid == other._uuid

    def __hash__(self) -> int:
        return hash(self._uuid)
