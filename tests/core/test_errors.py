"""Tests for the exception hierarchy."""

import pytest

from fieldstruct import (
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


@pytest.mark.parametrize(
    "error,builtin",
    [
        (TypeMismatchError("m"), TypeError),
        (ShapeMismatchError("m"), ValueError),
        (MissingFieldError("m"), KeyError),
        (NameCollisionError("m"), ValueError),
        (SchemaMismatchError("m"), ValueError),
        (UnsupportedOperationError("m"), TypeError),
        (UnsupportedReferenceError("m"), AttributeError),
        (PersistenceError("m"), OSError),
    ],
)
def test_errors_extend_builtins(error, builtin):
    assert isinstance(error, FieldStructError)
    assert isinstance(error, builtin)


def test_missing_field_message_is_not_quoted():
    assert str(MissingFieldError("The field 'z' is not in the struct", fields=["z"])) == (
        "The field 'z' is not in the struct"
    )


def test_error_details():
    assert SchemaMismatchError("m", missing=["a"], extra=["b"]).extra == ("b",)
    assert NameCollisionError("m", fields=["x"]).fields == ("x",)
    assert PersistenceError("bad", path="p").path == "p"
    assert str(PersistenceError("bad", path="p")) == "bad"


def test_unsupported_reference_message():
    error = UnsupportedReferenceError("median")

    assert error.name == "median"
    assert "'median'" in str(error)
