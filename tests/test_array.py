# tests/test_array.py
"""
Tests for the single-array stream codec and the NumPy value boundary.
"""
import io

import numpy as np
import pytest

from npzio import (
    BaseClass,
    ElementType,
    Endianness,
    NpyArray,
    Scalar,
    StorageOrder,
    TruncatedDataError,
    UnsupportedElementTypeError,
)
from npzio.array import describe, read_array, read_array_header, write_array
from npzio.descr import NATIVE_ENDIANNESS
from npzio.header import ARRAY_ALIGN
from npzio._internal.numpy_utils import from_numpy, to_numpy


def _write(value) -> bytes:
    stream = io.BytesIO()
    written = write_array(stream, value)
    assert written == len(stream.getvalue())
    return stream.getvalue()


@pytest.mark.parametrize("element_type, shape, order", [
    (ElementType(BaseClass.FLOAT, 8, Endianness.LITTLE), (2, 3), StorageOrder.ROW_MAJOR),
    (ElementType(BaseClass.SIGNED_INT, 2, Endianness.BIG), (4,), StorageOrder.ROW_MAJOR),
    (ElementType(BaseClass.UNSIGNED_INT, 1), (3, 2, 2), StorageOrder.COLUMN_MAJOR),
    (ElementType(BaseClass.COMPLEX, 16, Endianness.LITTLE), (1, 2), StorageOrder.COLUMN_MAJOR),
    (ElementType(BaseClass.FLOAT, 4, Endianness.LITTLE), (0, 5), StorageOrder.ROW_MAJOR),
])
def test_array_roundtrip_preserves_bytes(element_type, shape, order):
    size = int(np.prod(shape)) * element_type.byte_width
    original = NpyArray(element_type, shape, bytes(i % 251 for i in range(size)), order)

    restored = read_array(io.BytesIO(_write(original)))

    assert isinstance(restored, NpyArray)
    assert restored == original


def test_data_starts_on_alignment_boundary():
    for shape in [(1,), (7, 3), (2, 2, 2, 2, 2), (123456789,)]:
        header_only = NpyArray(ElementType(BaseClass.BOOL, 1), (0,) + shape, b"")
        raw = _write(header_only)
        assert len(raw) % ARRAY_ALIGN == 0

    raw = _write(np.arange(17, dtype=np.int32))
    assert (len(raw) - 17 * 4) % ARRAY_ALIGN == 0


@pytest.mark.parametrize("value, expected_type", [
    (True, ElementType(BaseClass.BOOL, 1)),
    (7, ElementType(BaseClass.SIGNED_INT, 8, Endianness.LITTLE)),
    (-2 ** 63, ElementType(BaseClass.SIGNED_INT, 8, Endianness.LITTLE)),
    (3.5, ElementType(BaseClass.FLOAT, 8, Endianness.LITTLE)),
    (1 - 2j, ElementType(BaseClass.COMPLEX, 16, Endianness.LITTLE)),
])
def test_scalar_is_read_back_as_scalar(value, expected_type):
    restored = read_array(io.BytesIO(_write(value)))

    assert isinstance(restored, Scalar)
    assert restored.element_type == expected_type
    assert restored.value == value
    assert type(restored.value) is type(value)


def test_typed_scalar_roundtrip():
    scalar = Scalar(ElementType(BaseClass.SIGNED_INT, 2, Endianness.BIG), -5)
    raw = _write(scalar)

    assert raw[-2:] == b"\xff\xfb"
    assert read_array(io.BytesIO(raw)) == scalar
    assert read_array_header(io.BytesIO(raw)).shape == ()


def test_truncated_data():
    raw = _write(np.arange(10, dtype=np.float64))
    with pytest.raises(TruncatedDataError) as excinfo:
        read_array(io.BytesIO(raw[:-3]))
    assert excinfo.value.expected == 80
    assert excinfo.value.actual == 77


@pytest.mark.parametrize("value", [
    "text",
    [1, 2, 3],
    None,
    2 ** 64,
    np.array(["a", "b"]),
    np.array([1, "a"], dtype=object),
    np.zeros(2, dtype=[("a", "<i4"), ("b", "<f8")]),
    np.array(["2020-01-01"], dtype="datetime64[D]"),
    np.str_("abc"),
])
def test_unsupported_values_are_rejected(value):
    with pytest.raises(UnsupportedElementTypeError):
        _write(value)


def test_scalar_value_out_of_range_is_rejected():
    with pytest.raises(UnsupportedElementTypeError, match=r"cannot be stored as '\|u1'"):
        _write(Scalar(ElementType(BaseClass.UNSIGNED_INT, 1), 300))


def test_npy_array_validates_buffer_length():
    with pytest.raises(ValueError, match="needs 24"):
        NpyArray(ElementType(BaseClass.FLOAT, 8, Endianness.LITTLE), (3,), b"\x00" * 23)


# --- NumPy boundary ---

@pytest.mark.parametrize("arr", [
    np.arange(12, dtype=np.int64).reshape(3, 4),
    np.linspace(-1, 1, 7, dtype=np.float16),
    np.array([[True, False], [False, True]]),
    np.arange(6, dtype=">u4").reshape(2, 3),
    (np.arange(4) + 1j * np.arange(4)).astype(np.complex64),
    np.zeros((0, 3), dtype=np.float64),
])
def test_numpy_interop(arr):
    """Our bytes load in NumPy, and NumPy's bytes load here."""
    ours = _write(arr)
    loaded = np.load(io.BytesIO(ours))
    assert loaded.dtype == arr.dtype
    np.testing.assert_array_equal(loaded, arr)

    theirs = io.BytesIO()
    np.save(theirs, arr)
    theirs.seek(0)
    restored = to_numpy(read_array(theirs))
    assert restored.dtype == arr.dtype
    np.testing.assert_array_equal(restored, arr)


def test_fortran_arrays_keep_column_major_layout():
    arr = np.asfortranarray(np.arange(6, dtype=np.int32).reshape(2, 3))
    payload = from_numpy(arr)

    assert payload.storage_order is StorageOrder.COLUMN_MAJOR
    assert payload.data == arr.tobytes(order="F")

    raw = _write(arr)
    assert b"'fortran_order': True" in raw
    np.testing.assert_array_equal(np.load(io.BytesIO(raw)), arr)

    restored = to_numpy(read_array(io.BytesIO(raw)))
    assert restored.shape == (2, 3)
    np.testing.assert_array_equal(restored, arr)


def test_non_contiguous_views_are_written_row_major():
    arr = np.arange(20, dtype=np.int16).reshape(4, 5)[::2, 1:4]
    payload = from_numpy(arr)

    assert payload.storage_order is StorageOrder.ROW_MAJOR
    np.testing.assert_array_equal(to_numpy(payload), arr)


def test_numpy_scalars_keep_their_element_type():
    payload = describe(np.float32(2.5))
    assert payload == Scalar(ElementType(BaseClass.FLOAT, 4, NATIVE_ENDIANNESS), 2.5)

    restored = to_numpy(read_array(io.BytesIO(_write(np.float32(2.5)))))
    assert restored == np.float32(2.5)
    assert restored.dtype == np.float32


def test_zero_dimensional_numpy_array_is_read_as_scalar():
    theirs = io.BytesIO()
    np.save(theirs, np.array(42, dtype=np.uint16))
    theirs.seek(0)

    restored = read_array(theirs)
    assert restored == Scalar(ElementType(BaseClass.UNSIGNED_INT, 2, NATIVE_ENDIANNESS), 42)


def test_returned_arrays_are_writable():
    restored = to_numpy(read_array(io.BytesIO(_write(np.arange(3)))))
    restored[0] = 99
    assert restored[0] == 99
