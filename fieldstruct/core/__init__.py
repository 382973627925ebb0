"""Core building blocks: errors, constants, configuration and formatting."""

from .config import PersistConfig, as_overwrite_policy
from .constants import (
    DEFAULT_EXTENSION,
    NAMESPACE_SEPARATOR,
    OBJECT_KEY,
    DispatchTier,
    DType,
    FieldStatus,
    OverwritePolicy,
)
from .errors import (
    FieldStructError,
    MissingFieldError,
    NameCollisionError,
    PersistenceError,
    SchemaMismatchError,
    ShapeMismatchError,
    TypeMismatchError,
    UnsupportedOperationError,
    UnsupportedReferenceError,
)

__all__ = [
    "DEFAULT_EXTENSION",
    "NAMESPACE_SEPARATOR",
    "OBJECT_KEY",
    "DType",
    "DispatchTier",
    "FieldStatus",
    "FieldStructError",
    "MissingFieldError",
    "NameCollisionError",
    "OverwritePolicy",
    "PersistConfig",
    "PersistenceError",
    "SchemaMismatchError",
    "ShapeMismatchError",
    "TypeMismatchError",
    "UnsupportedOperationError",
    "UnsupportedReferenceError",
    "as_overwrite_policy",
]
