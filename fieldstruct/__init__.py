"""Treat a named collection of data containers as a single container."""

from fieldstruct.core import (
    DEFAULT_EXTENSION,
    OBJECT_KEY,
    DispatchTier,
    DType,
    FieldStatus,
    FieldStructError,
    MissingFieldError,
    NameCollisionError,
    OverwritePolicy,
    PersistConfig,
    PersistenceError,
    SchemaMismatchError,
    ShapeMismatchError,
    TypeMismatchError,
    UnsupportedOperationError,
    UnsupportedReferenceError,
)
from fieldstruct.elements import (
    DataPoints,
    ElementLike,
    element_add,
    element_divide,
    element_multiply,
    element_subtract,
    is_element,
)
from fieldstruct.struct import (
    FieldOutcome,
    FieldStruct,
    PersistReport,
    load_each,
    persist_each,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_EXTENSION",
    "OBJECT_KEY",
    "DType",
    "DataPoints",
    "DispatchTier",
    "ElementLike",
    "FieldOutcome",
    "FieldStatus",
    "FieldStruct",
    "FieldStructError",
    "MissingFieldError",
    "NameCollisionError",
    "OverwritePolicy",
    "PersistConfig",
    "PersistReport",
    "PersistenceError",
    "SchemaMismatchError",
    "ShapeMismatchError",
    "TypeMismatchError",
    "UnsupportedOperationError",
    "UnsupportedReferenceError",
    "element_add",
    "element_divide",
    "element_multiply",
    "element_subtract",
    "is_element",
    "load_each",
    "persist_each",
]
