"""FieldStruct and its persistence layer."""

from .fieldstruct import (
    STRUCT_OPERATIONS,
    STRUCT_PROPERTIES,
    FieldStruct,
    format_field_struct,
    load_each,
    persist_each,
    validate_fields,
)
from .persistence import read_each, save_each
from .results import FieldOutcome, PersistReport, format_persist_report

__all__ = [
    "STRUCT_OPERATIONS",
    "STRUCT_PROPERTIES",
    "FieldOutcome",
    "FieldStruct",
    "PersistReport",
    "format_field_struct",
    "format_persist_report",
    "load_each",
    "persist_each",
    "read_each",
    "save_each",
    "validate_fields",
]
