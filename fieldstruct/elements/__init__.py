"""Element types stored in a struct."""

from .datapoints import DataPoints
from .protocol import (
    ElementLike,
    element_add,
    element_divide,
    element_multiply,
    element_subtract,
    is_element,
)

__all__ = [
    "DataPoints",
    "ElementLike",
    "element_add",
    "element_divide",
    "element_multiply",
    "element_subtract",
    "is_element",
]
