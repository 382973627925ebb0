"""Constants and enumerations shared across fieldstruct."""

from enum import Enum

DEFAULT_EXTENSION = ".pkl"
OBJECT_KEY = "obj"
NAMESPACE_SEPARATOR = "__"
GZIP_MAGIC = b"\x1f\x8b"


class DType(Enum):
    """Storage layout of an element."""

    FLAT = "flat"
    RAGGED = "ragged"


class OverwritePolicy(Enum):
    """What to do when a persisted file already exists."""

    FAIL = "fail"
    SKIP = "skip"
    OVERWRITE = "overwrite"


class FieldStatus(Enum):
    """Outcome of persisting a single field."""

    SAVED = "saved"
    SKIPPED = "skipped"
    FAILED = "failed"


class DispatchTier(Enum):
    """Which registry a name resolves against, in priority order."""

    PROPERTY = 1
    STRUCT_OPERATION = 2
    ELEMENT_OPERATION = 3
    FIELD = 4
    UNRESOLVED = 5
