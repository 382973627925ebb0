"""Tests for the DataPoints element."""

import numpy as np
import pytest

from fieldstruct import DataPoints, DType, ShapeMismatchError, TypeMismatchError, is_element


def test_flat_creation():
    dp = DataPoints([1, 2, 3], labels={"trial": ["a", "b", "c"]})

    assert dp.dtype is DType.FLAT
    assert dp.shape == (3,)
    assert dp.n_rows == 3
    np.testing.assert_array_equal(dp.data, [1, 2, 3])
    np.testing.assert_array_equal(dp.labels["trial"], ["a", "b", "c"])


def test_ragged_creation_is_inferred_from_arrays():
    dp = DataPoints([np.array([1.0, 2.0]), np.array([3.0])])

    assert dp.dtype is DType.RAGGED
    assert dp.shape == ((2,), (1,))
    assert dp.n_rows == 2


def test_ragged_creation_from_lists_with_explicit_dtype():
    dp = DataPoints([[1, 2], [3]], dtype="ragged")

    assert dp.dtype is DType.RAGGED
    np.testing.assert_array_equal(dp.data[1], [3])


def test_copies_input_data():
    values = np.array([1.0, 2.0])
    dp = DataPoints(values)
    values[0] = 100.0

    assert dp.data[0] == 1.0


@pytest.mark.parametrize("data", [["a", "b"], [object(), object()]])
def test_non_numeric_data_raises(data):
    with pytest.raises(TypeMismatchError, match="numeric"):
        DataPoints(data)


def test_ragged_from_array_raises():
    with pytest.raises(TypeMismatchError, match="Ragged data"):
        DataPoints(np.ones((2, 2)), dtype=DType.RAGGED)


def test_label_length_mismatch_raises():
    with pytest.raises(ShapeMismatchError, match="has 2 entries but the data has 3 rows"):
        DataPoints([1, 2, 3], labels={"trial": ["a", "b"]})


def test_labels_must_be_mapping():
    with pytest.raises(TypeMismatchError, match="mapping"):
        DataPoints([1, 2], labels=["a", "b"])


def test_type_id_is_stable():
    assert DataPoints([1]).type_id == DataPoints([2, 3]).type_id
    assert DataPoints([1]).type_id.endswith("DataPoints")


def test_is_element():
    assert is_element(DataPoints([1.0]))
    assert not is_element(DataPoints)
    assert not is_element(np.array([1.0]))


@pytest.mark.parametrize(
    "method,expected",
    [
        ("add", [5.0, 7.0, 9.0]),
        ("subtract", [-3.0, -3.0, -3.0]),
        ("multiply", [4.0, 10.0, 18.0]),
        ("divide", [0.25, 0.4, 0.5]),
    ],
)
def test_flat_arithmetic(method, expected):
    a = DataPoints([1.0, 2.0, 3.0])
    b = DataPoints([4.0, 5.0, 6.0])

    out = getattr(a, method)(b)

    assert out.dtype is DType.FLAT
    np.testing.assert_array_almost_equal(out.data, expected)


def test_flat_arithmetic_with_scalar_and_array():
    a = DataPoints([2.0, 4.0])

    np.testing.assert_array_equal(a.divide(2).data, [1.0, 2.0])
    np.testing.assert_array_equal(a.subtract(np.array([1.0, 1.0])).data, [1.0, 3.0])


def test_flat_arithmetic_shape_mismatch():
    with pytest.raises(ShapeMismatchError, match="shapes differ"):
        DataPoints([1.0, 2.0]).add(DataPoints([1.0, 2.0, 3.0]))


def test_arithmetic_dtype_mismatch():
    flat = DataPoints([1.0, 2.0])
    ragged = DataPoints([np.array([1.0]), np.array([2.0])])

    with pytest.raises(ShapeMismatchError, match="ragged data and flat data"):
        flat.add(ragged)


def test_arithmetic_unsupported_operand():
    with pytest.raises(TypeMismatchError, match="Unsupported operand type"):
        DataPoints([1.0]).multiply("two")


def test_ragged_arithmetic_is_index_aligned():
    a = DataPoints([np.array([2.0, 4.0]), np.array([9.0])])
    b = DataPoints([np.array([2.0, 2.0]), np.array([3.0])])

    out = a.divide(b)

    assert out.dtype is DType.RAGGED
    np.testing.assert_array_equal(out.data[0], [1.0, 2.0])
    np.testing.assert_array_equal(out.data[1], [3.0])


def test_ragged_arithmetic_with_scalar():
    a = DataPoints([np.array([2.0, 4.0]), np.array([9.0])])

    out = a.multiply(2)

    np.testing.assert_array_equal(out.data[0], [4.0, 8.0])
    np.testing.assert_array_equal(out.data[1], [18.0])


def test_ragged_arithmetic_with_list_of_arrays():
    a = DataPoints([np.array([2.0, 4.0]), np.array([9.0])])

    out = a.subtract([np.array([1.0, 1.0]), np.array([4.0])])

    np.testing.assert_array_equal(out.data[0], [1.0, 3.0])
    np.testing.assert_array_equal(out.data[1], [5.0])


def test_ragged_count_mismatch_raises():
    a = DataPoints([np.array([1.0]), np.array([2.0])])
    b = DataPoints([np.array([1.0]), np.array([2.0]), np.array([3.0])])

    with pytest.raises(ShapeMismatchError, match="sub-array counts differ"):
        a.add(b)
    with pytest.raises(ShapeMismatchError, match="sub-array counts differ"):
        a.add([np.array([1.0])])


def test_ragged_rejects_flat_array_operand():
    a = DataPoints([np.array([1.0]), np.array([2.0])])

    with pytest.raises(TypeMismatchError, match="ragged data"):
        a.add(np.array([1.0, 2.0]))


def test_operators():
    a = DataPoints([1.0, 2.0])
    b = DataPoints([3.0, 5.0])

    np.testing.assert_array_equal((a + b).data, [4.0, 7.0])
    np.testing.assert_array_equal((b - a).data, [2.0, 3.0])
    np.testing.assert_array_equal((a * 2).data, [2.0, 4.0])
    np.testing.assert_array_equal((10 - a).data, [9.0, 8.0])
    np.testing.assert_array_equal((2 / a).data, [2.0, 1.0])
    np.testing.assert_array_equal((-a).data, [-1.0, -2.0])


def test_reflected_operator_with_ndarray():
    a = DataPoints([1.0, 2.0])

    out = np.array([10.0, 10.0]) - a

    assert isinstance(out, DataPoints)
    np.testing.assert_array_equal(out.data, [9.0, 8.0])


def test_arithmetic_keeps_labels():
    a = DataPoints([1.0, 2.0], labels={"trial": ["a", "b"]})

    out = a.add(1)

    np.testing.assert_array_equal(out.labels["trial"], ["a", "b"])


def test_flat_mean_and_sum():
    dp = DataPoints(np.array([[1.0, 3.0], [5.0, 7.0]]), labels={"row": ["r1", "r2"]})

    np.testing.assert_array_equal(dp.mean().data, [4.0])
    assert dp.mean().labels == {}

    by_row = dp.sum(axis=1)
    np.testing.assert_array_equal(by_row.data, [4.0, 12.0])
    np.testing.assert_array_equal(by_row.labels["row"], ["r1", "r2"])

    by_column = dp.mean(axis=0)
    np.testing.assert_array_equal(by_column.data, [3.0, 5.0])
    assert by_column.labels == {}


def test_ragged_mean_is_per_sub_array():
    dp = DataPoints([np.array([1.0, 3.0]), np.array([4.0, 5.0, 6.0])], labels={"session": ["s1", "s2"]})

    out = dp.mean()

    assert out.dtype is DType.FLAT
    np.testing.assert_array_equal(out.data, [2.0, 5.0])
    np.testing.assert_array_equal(out.labels["session"], ["s1", "s2"])


def test_ragged_mean_along_axis_stays_ragged():
    dp = DataPoints([np.ones((2, 3)), np.ones((4, 3))])

    out = dp.mean(axis=0)

    assert out.dtype is DType.RAGGED
    assert out.shape == ((3,), (3,))


def test_abs_and_apply():
    dp = DataPoints([-1.0, 4.0])

    np.testing.assert_array_equal(dp.abs().data, [1.0, 4.0])
    np.testing.assert_array_equal(abs(dp).data, [1.0, 4.0])
    np.testing.assert_array_equal(dp.apply(np.clip, 0.0, 2.0).data, [0.0, 2.0])


def test_apply_drops_labels_when_rows_change():
    dp = DataPoints([1.0, 2.0, 3.0], labels={"trial": ["a", "b", "c"]})

    out = dp.apply(lambda values: values[:2])

    assert out.labels == {}


def test_copy_is_independent():
    dp = DataPoints([1.0, 2.0], labels={"trial": ["a", "b"]})

    clone = dp.copy()
    clone.data[0] = 99.0

    assert dp.data[0] == 1.0
    assert clone.equals(DataPoints([99.0, 2.0], labels={"trial": ["a", "b"]}))


def test_equals():
    dp = DataPoints([1.0, np.nan])

    assert dp.equals(DataPoints([1.0, np.nan]))
    assert not dp.equals(DataPoints([1.0, 2.0]))
    assert not dp.equals(DataPoints([1.0, np.nan], labels={"trial": ["a", "b"]}))
    assert not dp.equals(DataPoints([np.array([1.0]), np.array([np.nan])]))
    assert not dp.equals([1.0, np.nan])


def test_to_numpy():
    ragged = DataPoints([np.array([1.0, 2.0]), np.array([3.0])])

    np.testing.assert_array_equal(ragged.to_numpy(), [1.0, 2.0, 3.0])
    np.testing.assert_array_equal(DataPoints([4.0]).to_numpy(), [4.0])


def test_repr():
    dp = DataPoints([1.0, 2.0], labels={"trial": ["a", "b"]})

    assert repr(dp) == "DataPoints(dtype=flat, shape=(2,), labels=[trial])"
