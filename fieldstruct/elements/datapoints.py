"""Numeric data container used as the element type of a struct."""

from numbers import Number

import numpy as np

from ..core.constants import DType
from ..core.errors import ShapeMismatchError, TypeMismatchError


class DataPoints:
    """Numeric data with optional per-row labels.

    Data is stored either as one numeric array (``DType.FLAT``) or as a list
    of numeric arrays (``DType.RAGGED``). Binary operations broadcast
    according to the layout: a flat element is combined in a single
    elementwise pass, a ragged element sub-array by sub-array.

    Parameters
    ----------
    data : array_like or sequence of array_like
        The values. A list or tuple whose items are all ndarrays is stored
        ragged unless *dtype* says otherwise.
    labels : dict of {str: sequence}, optional
        Label category mapped to one label per row. For flat data a row is
        an entry along the first axis; for ragged data it is a sub-array.
    dtype : {"flat", "ragged"} or DType, optional
        Force the storage layout.

    Attributes
    ----------
    operations : tuple of str
        Methods a struct may broadcast to every element.
    """

    operations = ("add", "subtract", "multiply", "divide", "abs", "sum", "mean", "apply", "copy")

    # ndarray operands defer to our reflected operators
    __array_ufunc__ = None

    def __init__(self, data, labels=None, dtype=None):
        if isinstance(data, DataPoints):
            if labels is None:
                labels = data._labels
            dtype = data.dtype if dtype is None else dtype
            data = data._data

        self._dtype = _infer_dtype(data) if dtype is None else DType(dtype)
        if self._dtype is DType.FLAT:
            self._data = _as_numeric(data).copy()
        else:
            if isinstance(data, np.ndarray) or not isinstance(data, list | tuple):
                raise TypeMismatchError("Ragged data must be a list or tuple of arrays")
            self._data = [_as_numeric(part).copy() for part in data]
        self._labels = _coerce_labels(labels, self.n_rows)

    @property
    def data(self):
        """The stored array, or list of arrays for ragged data."""
        return self._data

    @property
    def labels(self):
        """Label category mapped to per-row label arrays."""
        return dict(self._labels)

    @property
    def dtype(self):
        """Storage layout."""
        return self._dtype

    @property
    def shape(self):
        """Array shape, or a tuple of sub-array shapes for ragged data."""
        if self._dtype is DType.FLAT:
            return self._data.shape
        return tuple(part.shape for part in self._data)

    @property
    def n_rows(self):
        """Number of rows: first-axis length, or sub-array count if ragged."""
        if self._dtype is DType.FLAT:
            return self._data.shape[0]
        return len(self._data)

    @property
    def type_id(self):
        """Stable type identity."""
        cls = type(self)
        return f"{cls.__module__}.{cls.__qualname__}"

    def add(self, other):
        """Add *other* elementwise."""
        return self._binary(other, np.add, "add")

    def subtract(self, other):
        """Subtract *other* elementwise."""
        return self._binary(other, np.subtract, "subtract")

    def multiply(self, other):
        """Multiply by *other* elementwise."""
        return self._binary(other, np.multiply, "multiply")

    def divide(self, other):
        """Divide by *other* elementwise."""
        return self._binary(other, np.true_divide, "divide")

    def abs(self):
        """Absolute values."""
        return self.apply(np.abs)

    def sum(self, axis=None):
        """Sum values; ragged data is summed per sub-array."""
        return self._reduce(np.sum, axis)

    def mean(self, axis=None):
        """Average values; ragged data is averaged per sub-array."""
        return self._reduce(np.mean, axis)

    def apply(self, func, *args, **kwargs):
        """Apply an array function to the data, or to each ragged sub-array.

        Labels are kept when the number of rows is unchanged.
        """
        if self._dtype is DType.FLAT:
            out = np.atleast_1d(np.asarray(func(self._data, *args, **kwargs)))
            n_out = out.shape[0]
        else:
            out = [np.asarray(func(part, *args, **kwargs)) for part in self._data]
            n_out = len(out)
        labels = self._labels if n_out == self.n_rows else None
        return DataPoints(out, labels=labels, dtype=self._dtype)

    def copy(self):
        """Deep copy of data and labels."""
        return DataPoints(self)

    def equals(self, other):
        """Check that *other* holds the same layout, values and labels."""
        if not isinstance(other, DataPoints) or other.dtype is not self._dtype:
            return False
        if self.shape != other.shape:
            return False
        if self._dtype is DType.FLAT:
            pairs = [(self._data, other._data)]
        else:
            pairs = list(zip(self._data, other._data, strict=True))
        if not all(_arrays_equal(a, b) for a, b in pairs):
            return False
        if self._labels.keys() != other._labels.keys():
            return False
        return all(np.array_equal(v, other._labels[k]) for k, v in self._labels.items())

    def to_numpy(self):
        """Return the data as one array; ragged data is concatenated on axis 0."""
        if self._dtype is DType.FLAT:
            return self._data.copy()
        if not self._data:
            return np.array([])
        return np.concatenate([np.atleast_1d(part) for part in self._data])

    def _binary(self, other, ufunc, name, reflected=False):
        operand = self._check_operand(other, name)
        if reflected:
            op = lambda a, b: ufunc(b, a)  # noqa: E731
        else:
            op = ufunc

        if self._dtype is DType.FLAT:
            out = op(self._data, operand)
        elif not isinstance(operand, list):
            out = [op(part, operand) for part in self._data]
        else:
            out = [op(a, b) for a, b in zip(self._data, operand, strict=True)]
        return DataPoints(out, labels=self._labels, dtype=self._dtype)

    def _check_operand(self, other, name):
        """Validate *other* for a binary operation and return the raw values."""
        if isinstance(other, Number | np.bool_):
            return other

        if isinstance(other, DataPoints):
            if other.dtype is not self._dtype:
                raise ShapeMismatchError(
                    f"Cannot {name} {other.dtype.value} data and {self._dtype.value} data"
                )
            if self._dtype is DType.RAGGED and other.n_rows != self.n_rows:
                raise ShapeMismatchError(
                    f"Cannot {name}: sub-array counts differ ({self.n_rows} vs {other.n_rows})"
                )
            if other.shape != self.shape:
                raise ShapeMismatchError(f"Cannot {name}: shapes differ ({self.shape} vs {other.shape})")
            return other.data

        if self._dtype is DType.FLAT:
            if isinstance(other, np.ndarray | list | tuple):
                values = _as_numeric(other)
                if values.shape != self._data.shape and values.size != 1:
                    raise ShapeMismatchError(
                        f"Cannot {name}: shapes differ ({self._data.shape} vs {values.shape})"
                    )
                return values
            raise TypeMismatchError(f"Unsupported operand type for {name}: {type(other).__name__}")

        if isinstance(other, list | tuple):
            values = [_as_numeric(part) for part in other]
            if len(values) != self.n_rows:
                raise ShapeMismatchError(
                    f"Cannot {name}: sub-array counts differ ({self.n_rows} vs {len(values)})"
                )
            for i, (mine, theirs) in enumerate(zip(self._data, values, strict=True)):
                if theirs.shape != mine.shape and theirs.size != 1:
                    raise ShapeMismatchError(
                        f"Cannot {name}: sub-array {i} shapes differ ({mine.shape} vs {theirs.shape})"
                    )
            return values
        raise TypeMismatchError(f"Unsupported operand type for {name} on ragged data: {type(other).__name__}")

    def _reduce(self, func, axis):
        if self._dtype is DType.FLAT:
            out = np.atleast_1d(func(self._data, axis=axis))
            keeps_rows = axis is not None and _normalize_axis(axis, self._data.ndim) != 0
            labels = self._labels if keeps_rows and out.shape[0] == self.n_rows else None
            return DataPoints(out, labels=labels, dtype=DType.FLAT)

        parts = [func(part, axis=axis) for part in self._data]
        if all(np.ndim(p) == 0 for p in parts):
            return DataPoints(np.asarray(parts), labels=self._labels, dtype=DType.FLAT)
        return DataPoints([np.asarray(p) for p in parts], labels=self._labels, dtype=DType.RAGGED)

    def __add__(self, other):
        return self._binary(other, np.add, "add")

    def __radd__(self, other):
        return self._binary(other, np.add, "add", reflected=True)

    def __sub__(self, other):
        return self._binary(other, np.subtract, "subtract")

    def __rsub__(self, other):
        return self._binary(other, np.subtract, "subtract", reflected=True)

    def __mul__(self, other):
        return self._binary(other, np.multiply, "multiply")

    def __rmul__(self, other):
        return self._binary(other, np.multiply, "multiply", reflected=True)

    def __truediv__(self, other):
        return self._binary(other, np.true_divide, "divide")

    def __rtruediv__(self, other):
        return self._binary(other, np.true_divide, "divide", reflected=True)

    def __neg__(self):
        return self.apply(np.negative)

    def __abs__(self):
        return self.abs()

    def __repr__(self):
        """Return string representation."""
        labels = ", ".join(self._labels) if self._labels else "none"
        return f"DataPoints(dtype={self._dtype.value}, shape={self.shape}, labels=[{labels}])"


def _infer_dtype(data):
    if isinstance(data, list | tuple) and data and all(isinstance(part, np.ndarray) for part in data):
        return DType.RAGGED
    return DType.FLAT


def _as_numeric(values):
    try:
        arr = np.atleast_1d(np.asarray(values))
    except ValueError as e:
        raise TypeMismatchError(f"Data could not be converted to an array: {e}") from e
    if not (np.issubdtype(arr.dtype, np.number) or np.issubdtype(arr.dtype, np.bool_)):
        raise TypeMismatchError(f"Data must be numeric, got dtype {arr.dtype}")
    return arr


def _coerce_labels(labels, n_rows):
    if labels is None:
        return {}
    if not hasattr(labels, "items"):
        raise TypeMismatchError("labels must be a mapping of category to per-row labels")
    out = {}
    for category, values in labels.items():
        if not isinstance(category, str):
            raise TypeMismatchError(f"Label category must be a string, got {type(category).__name__}")
        arr = np.asarray(values).copy()
        if arr.ndim != 1 or arr.shape[0] != n_rows:
            raise ShapeMismatchError(
                f"Label category {category!r} has {arr.size} entries but the data has {n_rows} rows"
            )
        out[category] = arr
    return out


def _normalize_axis(axis, ndim):
    if isinstance(axis, tuple):
        return 0 if any(_normalize_axis(a, ndim) == 0 for a in axis) else 1
    return axis + ndim if axis < 0 else axis


def _arrays_equal(a, b):
    if a.shape != b.shape:
        return False
    equal_nan = np.issubdtype(a.dtype, np.inexact) and np.issubdtype(b.dtype, np.inexact)
    return bool(np.array_equal(a, b, equal_nan=equal_nan))
