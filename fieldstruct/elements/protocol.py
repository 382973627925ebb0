"""Capability contract every element stored in a struct must satisfy."""

from typing import Protocol, runtime_checkable

from ..core.constants import DType


@runtime_checkable
class ElementLike(Protocol):
    """Element capability contract.

    Any object exposing these members can be stored in a
    :class:`~fieldstruct.FieldStruct`. ``operations`` is the allowlist of
    method names a struct may broadcast to all of its elements.
    """

    operations: tuple[str, ...]

    @property
    def dtype(self) -> DType:
        """Storage layout of the element."""

    @property
    def type_id(self) -> str:
        """Stable type identity, used for version compatibility checks."""

    def add(self, other) -> "ElementLike":
        """Elementwise addition."""

    def subtract(self, other) -> "ElementLike":
        """Elementwise subtraction."""

    def multiply(self, other) -> "ElementLike":
        """Elementwise multiplication."""

    def divide(self, other) -> "ElementLike":
        """Elementwise division."""


def is_element(value) -> bool:
    """Check whether *value* satisfies the element contract."""
    if isinstance(value, type):
        return False
    return isinstance(value, ElementLike)


def element_add(a, b):
    """Add element *b* to element *a*."""
    return a.add(b)


def element_subtract(a, b):
    """Subtract element *b* from element *a*."""
    return a.subtract(b)


def element_multiply(a, b):
    """Multiply element *a* by element *b*."""
    return a.multiply(b)


def element_divide(a, b):
    """Divide element *a* by element *b*."""
    return a.divide(b)
