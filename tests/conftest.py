"""Shared fixtures for fieldstruct tests."""

import numpy as np
import pytest

from fieldstruct import DataPoints, FieldStruct


@pytest.fixture
def rng():
    """Seeded random number generator."""
    return np.random.default_rng(42)


@pytest.fixture
def struct_a():
    """Two flat fields, x = [1, 2, 3] and y = [4, 5, 6]."""
    return FieldStruct({"x": DataPoints([1.0, 2.0, 3.0]), "y": DataPoints([4.0, 5.0, 6.0])})


@pytest.fixture
def struct_b():
    """Same field names as ``struct_a``, x = [1, 1, 1] and y = [2, 2, 2]."""
    return FieldStruct({"x": DataPoints([1.0, 1.0, 1.0]), "y": DataPoints([2.0, 2.0, 2.0])})


@pytest.fixture
def ragged_struct():
    """Two ragged fields with labelled sub-arrays."""
    return FieldStruct(
        {
            "trials": DataPoints(
                [np.array([1.0, 2.0]), np.array([3.0, 4.0, 5.0])],
                labels={"session": ["s1", "s2"]},
            ),
            "baseline": DataPoints(
                [np.array([0.5, 0.5]), np.array([1.0, 1.0, 1.0])],
                labels={"session": ["s1", "s2"]},
            ),
        }
    )


@pytest.fixture
def labelled_struct(rng):
    """Flat 2-d fields with per-row labels."""
    labels = {"condition": ["self", "other", "both", "none"]}
    return FieldStruct(
        {
            "toNormalize": DataPoints(rng.normal(size=(4, 3)), labels=labels),
            "baseline": DataPoints(rng.normal(size=(4, 3)), labels=labels),
        }
    )
