"""Configuration for persisting structs."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from .constants import DEFAULT_EXTENSION, OBJECT_KEY, OverwritePolicy


@dataclass(frozen=True)
class PersistConfig:
    """Persist config.

    Attributes
    ----------
    extension : str
        File extension, including the leading dot.
    object_key : str
        Key under which the element is stored inside each file.
    overwrite : OverwritePolicy
        Policy applied when a file for a field already exists.
    high_capacity : bool
        Write gzip-compressed pickles with the highest protocol.
    create_directory : bool
        Create a missing target directory before writing.
    """

    extension: str = DEFAULT_EXTENSION
    object_key: str = OBJECT_KEY
    overwrite: OverwritePolicy = OverwritePolicy.FAIL
    high_capacity: bool = False
    create_directory: bool = False

    def __post_init__(self):
        if not isinstance(self.extension, str) or not self.extension.startswith("."):
            raise ValueError(f"extension must be a string starting with '.', got {self.extension!r}")
        if len(self.extension) < 2:
            raise ValueError("extension must name at least one character after the dot")
        if not isinstance(self.object_key, str) or not self.object_key:
            raise ValueError("object_key must be a non-empty string")
        # frozen dataclass: bypass __setattr__ to coerce string policies
        object.__setattr__(self, "overwrite", as_overwrite_policy(self.overwrite))

    def with_overrides(self, **overrides) -> "PersistConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {k: v.value if isinstance(v, Enum) else v for k, v in self.__dict__.items()}


def as_overwrite_policy(value) -> OverwritePolicy:
    """Coerce a policy name or member to an :class:`OverwritePolicy`."""
    if isinstance(value, OverwritePolicy):
        return value
    try:
        return OverwritePolicy(str(value).lower())
    except ValueError:
        valid = ", ".join(repr(p.value) for p in OverwritePolicy)
        raise ValueError(f"Unknown overwrite policy {value!r}. Choose one of {valid}.") from None
