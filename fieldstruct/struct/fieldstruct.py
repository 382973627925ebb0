"""Named collection of elements that can be used like a single element.

A :class:`FieldStruct` maps field names to elements. Methods are called on
the struct as they would be on one element and are applied to every element
in the struct; field-wise operations combine two structs that share the same
field names.

Examples
--------
>>> import numpy as np
>>> from fieldstruct import DataPoints, FieldStruct
>>> fs = FieldStruct({"toNormalize": DataPoints([1.0, 2.0]), "baseline": DataPoints([0.5, 0.5])})
>>> fs.mean().field_names()
('toNormalize', 'baseline')
>>> (fs - fs).toNormalize.data
array([0., 0.])
"""

import functools
import logging
import warnings
from collections.abc import Iterable, Mapping
from types import MappingProxyType

import polars as pl

from ..core.config import PersistConfig
from ..core.constants import NAMESPACE_SEPARATOR, DispatchTier
from ..core.errors import (
    MissingFieldError,
    NameCollisionError,
    SchemaMismatchError,
    TypeMismatchError,
    UnsupportedOperationError,
    UnsupportedReferenceError,
)
from ..core.format import adjust_separators, attach_format, format_shape, format_title, make_table
from ..elements.protocol import element_add, element_divide, element_multiply, element_subtract, is_element
from .persistence import read_each, save_each

log = logging.getLogger(__name__)

STRUCT_PROPERTIES = frozenset({"fields"})

STRUCT_OPERATIONS = frozenset(
    {
        "add",
        "add_element",
        "combine_fields",
        "dispatch_tier",
        "divide",
        "equals",
        "field_names",
        "for_each",
        "has_field",
        "items",
        "keys",
        "load_each",
        "merge",
        "multiply",
        "namespace",
        "persist_each",
        "remove_elements",
        "rename",
        "replace_element",
        "resolve",
        "subtract",
        "summary",
        "to_dict",
        "values",
    }
)


class FieldStruct:
    """Named collection of elements.

    Parameters
    ----------
    fields : mapping of {str: element} or FieldStruct
        Field name mapped to an element. The struct keeps its own copy of the
        mapping.

    Raises
    ------
    TypeMismatchError
        If *fields* is not a mapping, or any value is not an element.
    TypeError
        If a field name is not a non-empty string.
    """

    def __init__(self, fields):
        if isinstance(fields, FieldStruct):
            fields = fields._fields
        validate_fields(fields)
        self._fields = dict(fields)

    @property
    def fields(self):
        """Read-only view of the field mapping."""
        return MappingProxyType(self._fields)

    def dispatch_tier(self, name):
        """Return which registry *name* resolves against.

        The registries are consulted in order: struct properties, struct
        operations, operations of the first element, then field names.
        """
        if name in STRUCT_PROPERTIES:
            return DispatchTier.PROPERTY
        if name in STRUCT_OPERATIONS:
            return DispatchTier.STRUCT_OPERATION
        representative = self._representative()
        if representative is not None and name in getattr(representative, "operations", ()):
            return DispatchTier.ELEMENT_OPERATION
        if name in self._fields:
            return DispatchTier.FIELD
        return DispatchTier.UNRESOLVED

    def resolve(self, reference, *args, **kwargs):
        """Resolve a property, operation or field by name.

        Parameters
        ----------
        reference : str
            A name, or a dotted chain such as ``"baseline.mean"``.
        *args, **kwargs
            Arguments for the operation the reference resolves to.

        Returns
        -------
        object
            For a struct operation, its result. For an element operation, a
            new struct with the operation applied to every element. For a
            property or field, the value itself, or the result of resolving
            the rest of the chain against it.

        Raises
        ------
        UnsupportedReferenceError
            If the name matches no property, operation or field.
        UnsupportedOperationError
            If an element other than the first lacks a broadcast operation.
        """
        if not isinstance(reference, str) or not reference:
            raise TypeError("reference must be a non-empty string")

        head, _, rest = reference.partition(".")
        tier = self.dispatch_tier(head)
        log.debug("Resolved %r to %s", head, tier.name)

        if tier in (DispatchTier.STRUCT_OPERATION, DispatchTier.ELEMENT_OPERATION):
            if rest:
                warnings.warn(
                    f"'{head}' is an operation; the remaining reference '{rest}' is ignored",
                    UserWarning,
                    stacklevel=2,
                )
            if tier is DispatchTier.STRUCT_OPERATION:
                return getattr(self, head)(*args, **kwargs)
            return self._broadcast(head, *args, **kwargs)

        if tier is DispatchTier.PROPERTY:
            out = getattr(self, head)
        elif tier is DispatchTier.FIELD:
            out = self._fields[head]
        else:
            raise UnsupportedReferenceError(head)

        if not rest:
            if args or kwargs:
                raise TypeError(f"'{head}' is not callable")
            return out
        return _resolve_chain(out, rest, args, kwargs)

    def __getattr__(self, name):
        # Only reached when normal lookup fails, i.e. after properties and
        # struct methods have been ruled out.
        if name.startswith("_"):
            raise AttributeError(name)
        tier = self.dispatch_tier(name)
        if tier is DispatchTier.ELEMENT_OPERATION:
            return functools.partial(self._broadcast, name)
        if tier is DispatchTier.FIELD:
            return self._fields[name]
        raise UnsupportedReferenceError(name)

    def for_each(self, fn, *args, **kwargs):
        """Apply a function to each element.

        The element is always the first input to *fn*, followed by *args*.
        Useful for functions that are not element methods.

        Returns
        -------
        FieldStruct
            New struct with the same field names.
        """
        if not callable(fn):
            raise TypeError("fn must be callable")
        return self._derive({name: fn(element, *args, **kwargs) for name, element in self._fields.items()})

    def combine_fields(self, other, fn, *args, **kwargs):
        """Apply a function field-wise to this struct and *other*.

        Both structs must have exactly the same field names. For each field,
        computes ``fn(self[name], other[name], *args, **kwargs)``.

        Examples
        --------
        Subtract each element, field by field:

        >>> diff = first.combine_fields(second, element_subtract)  # doctest: +SKIP
        """
        if not callable(fn):
            raise TypeError("fn must be callable")
        self._check_compatible(other)
        return self._derive(
            {name: fn(element, other._fields[name], *args, **kwargs) for name, element in self._fields.items()}
        )

    def add(self, other):
        """Field-wise addition."""
        return self.combine_fields(other, element_add)

    def subtract(self, other):
        """Field-wise subtraction."""
        return self.combine_fields(other, element_subtract)

    def multiply(self, other):
        """Field-wise multiplication."""
        return self.combine_fields(other, element_multiply)

    def divide(self, other):
        """Field-wise division."""
        return self.combine_fields(other, element_divide)

    def field_names(self):
        """Names of the fields, in order."""
        return tuple(self._fields)

    def has_field(self, name):
        """Check whether *name* is a field."""
        return name in self._fields

    def rename(self, old, new):
        """Rename field *old* to *new*, keeping its position."""
        _check_name(new)
        if old not in self._fields:
            raise MissingFieldError(f"The field '{old}' is not in the struct", fields=(old,))
        if new == old:
            warnings.warn(f"Renaming field '{old}' to itself has no effect", UserWarning, stacklevel=2)
            return self._derive(self._fields)
        if new in self._fields:
            raise NameCollisionError(f"The field '{new}' already exists", fields=(new,))
        return self._derive({(new if name == old else name): element for name, element in self._fields.items()})

    def namespace(self, label):
        """Prefix each field name with ``<label>__``."""
        if not isinstance(label, str):
            raise TypeError("<label> must be a string")
        return self._derive({f"{label}{NAMESPACE_SEPARATOR}{name}": element for name, element in self._fields.items()})

    def add_element(self, element, name):
        """Add *element* under a new field *name*."""
        _check_name(name)
        if not is_element(element):
            raise TypeMismatchError(f"Cannot add a {type(element).__name__}: input must be an element", fields=(name,))
        if name in self._fields:
            raise NameCollisionError(f"The field '{name}' already exists", fields=(name,))
        return self._derive({**self._fields, name: element})

    def remove_elements(self, names):
        """Remove one field or several; all names must exist."""
        names = list(dict.fromkeys(_as_name_list(names)))
        missing = [name for name in names if name not in self._fields]
        if missing:
            raise MissingFieldError(f"Field(s) not in the struct: {', '.join(missing)}", fields=missing)
        drop = set(names)
        return self._derive({name: element for name, element in self._fields.items() if name not in drop})

    def replace_element(self, name, element):
        """Replace the element of field *name*."""
        if name not in self._fields:
            raise MissingFieldError(f"The field '{name}' is not in the struct", fields=(name,))
        if not is_element(element):
            raise TypeMismatchError("Can only replace an element with another element", fields=(name,))
        return self._derive({**self._fields, name: element})

    def merge(self, other):
        """Combine the fields of this struct and *other*, which must not overlap."""
        if not isinstance(other, FieldStruct):
            other = FieldStruct(other)
        overlap = [name for name in other._fields if name in self._fields]
        if overlap:
            raise NameCollisionError(
                "Cannot add the contents of the second struct to the first, because the field names "
                f"overlap ({', '.join(overlap)}). Call namespace(<label>) on the second struct first.",
                fields=overlap,
            )
        return self._derive({**self._fields, **other._fields})

    def equals(self, other):
        """Check for the same field names and equal elements."""
        if not isinstance(other, FieldStruct) or set(self._fields) != set(other._fields):
            return False
        for name, element in self._fields.items():
            theirs = other._fields[name]
            same = element.equals(theirs) if hasattr(element, "equals") else element == theirs
            if not same:
                return False
        return True

    def to_dict(self):
        """Copy of the field mapping."""
        return dict(self._fields)

    def summary(self):
        """Describe each field as a Polars DataFrame."""
        rows = [_describe(name, element) for name, element in self._fields.items()]
        return pl.DataFrame(
            {
                "Field": [r[0] for r in rows],
                "DType": [r[1] for r in rows],
                "Shape": [r[2] for r in rows],
                "Type": [r[3] for r in rows],
            },
            schema={"Field": pl.String, "DType": pl.String, "Shape": pl.String, "Type": pl.String},
        )

    def persist_each(self, directory, high_capacity=None, overwrite=None, config=None):
        """Save each element as its own file in *directory*.

        Parameters
        ----------
        directory : str or path-like
            Folder in which to save. Files are named after the fields.
        high_capacity : bool, optional
            Write compressed files with the highest pickle protocol, for
            large elements at the cost of longer save times.
        overwrite : {"fail", "skip", "overwrite"} or OverwritePolicy, optional
            What to do when a field's file already exists. Defaults to the
            config's policy, which is "fail".
        config : PersistConfig, optional
            Base settings; the keyword arguments above take precedence.

        Returns
        -------
        PersistReport
            Which fields were saved, skipped or failed, and why. Errors are
            recorded per field and never raised.
        """
        config = (config or PersistConfig()).with_overrides(high_capacity=high_capacity, overwrite=overwrite)
        return save_each(self._fields, directory, config)

    @classmethod
    def load_each(cls, directory, names=None, config=None):
        """Load elements saved with :meth:`persist_each` into a new struct.

        Parameters
        ----------
        directory : str or path-like
            Folder in which the element files are located.
        names : str or iterable of str, optional
            Fields to load, with or without the file extension. If
            unspecified, every file with the extension is loaded.
        config : PersistConfig, optional
            Extension and object key settings.

        Returns
        -------
        FieldStruct
            New struct.
        """
        return cls(read_each(directory, names, config))

    def keys(self):
        """Return field names."""
        return self._fields.keys()

    def values(self):
        """Return elements."""
        return self._fields.values()

    def items(self):
        """Return (name, element) pairs."""
        return self._fields.items()

    def __getitem__(self, name):
        """Get an element by field name."""
        try:
            return self._fields[name]
        except KeyError:
            raise MissingFieldError(f"The field '{name}' is not in the struct", fields=(name,)) from None

    def __contains__(self, name):
        """Check if field exists."""
        return name in self._fields

    def __iter__(self):
        return iter(self._fields)

    def __len__(self):
        return len(self._fields)

    def __add__(self, other):
        if not isinstance(other, FieldStruct):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, FieldStruct):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, other):
        if not isinstance(other, FieldStruct):
            return NotImplemented
        return self.multiply(other)

    def __truediv__(self, other):
        if not isinstance(other, FieldStruct):
            return NotImplemented
        return self.divide(other)

    def _representative(self):
        return next(iter(self._fields.values()), None)

    def _broadcast(self, name, *args, **kwargs):
        out = {}
        for field, element in self._fields.items():
            if name not in getattr(element, "operations", ()):
                raise UnsupportedOperationError(
                    f"The element in field '{field}' does not support '{name}'", name=name, field=field
                )
            out[field] = getattr(element, name)(*args, **kwargs)
        return self._derive(out)

    def _check_compatible(self, other):
        if not isinstance(other, FieldStruct):
            raise TypeMismatchError(f"Input is not of type FieldStruct, got {type(other).__name__}")
        missing = [name for name in self._fields if name not in other._fields]
        extra = [name for name in other._fields if name not in self._fields]
        if missing or extra:
            details = []
            if missing:
                details.append(f"missing from other: {', '.join(missing)}")
            if extra:
                details.append(f"not in this struct: {', '.join(extra)}")
            raise SchemaMismatchError(
                f"Fields do not match between structs ({'; '.join(details)})", missing=missing, extra=extra
            )

    def _derive(self, fields):
        return type(self)(fields)


def persist_each(struct, directory, high_capacity=None, overwrite=None, config=None):
    """Save each element of *struct*; see :meth:`FieldStruct.persist_each`."""
    if not isinstance(struct, FieldStruct):
        raise TypeMismatchError(f"Expected a FieldStruct, got {type(struct).__name__}")
    return struct.persist_each(directory, high_capacity=high_capacity, overwrite=overwrite, config=config)


def load_each(directory, names=None, config=None):
    """Load a struct saved with :func:`persist_each`."""
    return FieldStruct.load_each(directory, names=names, config=config)


def validate_fields(fields):
    """Check that *fields* maps non-empty string names to elements."""
    msg = "<fields> must be a mapping or FieldStruct, and each value must be an element"
    if not isinstance(fields, Mapping):
        raise TypeMismatchError(f"{msg}; got {type(fields).__name__}")
    for name in fields:
        _check_name(name)
    invalid = [name for name, value in fields.items() if not is_element(value)]
    if invalid:
        raise TypeMismatchError(f"{msg}; invalid field(s): {', '.join(invalid)}", fields=invalid)


def format_field_struct(struct):
    """Format a struct for display."""
    n = len(struct)
    lines = format_title("FieldStruct", f"{n} field{'s' if n != 1 else ''}")
    if n:
        rows = [list(_describe(name, element)) for name, element in struct.items()]
        lines.extend(["", *make_table(["Field", "DType", "Shape", "Type"], rows).split("\n")])
    return "\n".join(adjust_separators(lines))


attach_format(FieldStruct, format_field_struct)


def _resolve_chain(target, reference, args, kwargs):
    if isinstance(target, FieldStruct):
        return target.resolve(reference, *args, **kwargs)

    head, _, rest = reference.partition(".")
    if isinstance(target, Mapping) and head in target:
        out = target[head]
    elif not head.startswith("_") and hasattr(target, head):
        out = getattr(target, head)
    else:
        raise UnsupportedReferenceError(head)

    if rest:
        return _resolve_chain(out, rest, args, kwargs)
    if callable(out):
        return out(*args, **kwargs)
    if args or kwargs:
        raise TypeError(f"'{head}' is not callable")
    return out


def _check_name(name):
    if not isinstance(name, str) or not name:
        raise TypeError(f"Field names must be non-empty strings, got {name!r}")


def _as_name_list(names):
    if isinstance(names, str):
        return [names]
    if not isinstance(names, Iterable):
        raise TypeError("names must be a string or an iterable of strings")
    names = list(names)
    if not all(isinstance(name, str) for name in names):
        raise TypeError("names must be a string or an iterable of strings")
    return names


def _describe(name, element):
    dtype = getattr(element, "dtype", None)
    dtype = getattr(dtype, "value", dtype)
    shape = getattr(element, "shape", None)
    return (
        name,
        "" if dtype is None else str(dtype),
        "" if shape is None else format_shape(shape),
        type(element).__name__,
    )
