# npzio/_internal/numpy_utils.py

"""
Internal utilities for interacting with NumPy arrays.

This module handles the conversion between NumPy arrays/scalars and the
`NpyArray`/`Scalar` payloads used by the codec, and registers NumPy types
with `npzio.array.describe`.
"""

from typing import Any

import numpy as np

from ..array import describe
from ..dataclasses import ElementType, NpyArray, Scalar, Value
from ..descr import format_descr, parse_descr
from ..exceptions import UnsupportedDtypeError, UnsupportedElementTypeError
from ..types import StorageOrder


def element_type_from_dtype(dtype: np.dtype, *, what: str = "numpy.ndarray") -> ElementType:
    """
    Maps a NumPy dtype to an `ElementType`.

    Args:
        dtype: The NumPy dtype to classify.
        what: Name of the value kind, used in error messages.

    Raises:
        UnsupportedElementTypeError: If the dtype is structured, a sub-array,
            or of a kind the `.npy` codec does not support (strings, objects,
            datetimes, extended precision floats, ...).
    """
    if dtype.names is not None or dtype.subdtype is not None:
        raise UnsupportedElementTypeError(
            f"{what}[{dtype}]", "structured and sub-array dtypes are not supported"
        )
    try:
        return parse_descr(dtype.str)
    except UnsupportedDtypeError as e:
        raise UnsupportedElementTypeError(f"{what}[{dtype}]", e.reason) from e


def dtype_for(element_type: ElementType) -> np.dtype:
    """Returns the NumPy dtype equivalent to an `ElementType`."""
    return np.dtype(format_descr(element_type))


def from_numpy(arr: np.ndarray) -> Value:
    """
    Converts a NumPy array into a codec payload.

    Fortran-contiguous arrays keep their column-major layout; every other
    array (including non-contiguous views) is serialized row-major.
    Zero-dimensional arrays become a `Scalar`.
    """
    element_type = element_type_from_dtype(arr.dtype)
    if arr.ndim == 0:
        return Scalar(element_type, arr.item())

    if arr.flags["F_CONTIGUOUS"] and not arr.flags["C_CONTIGUOUS"]:
        order = StorageOrder.COLUMN_MAJOR
    else:
        order = StorageOrder.ROW_MAJOR
    return NpyArray(element_type, arr.shape, arr.tobytes(order=order.value), order)


def to_numpy(value: Value) -> Any:
    """
    Converts a codec payload into a NumPy value.

    Returns:
        A writable `np.ndarray` for an `NpyArray` (the caller owns its
        memory), or a NumPy scalar for a `Scalar`.
    """
    match value:
        case NpyArray(element_type=element_type, shape=shape, data=data, storage_order=order):
            flat = np.frombuffer(bytearray(data), dtype=dtype_for(element_type))
            return flat.reshape(shape, order=order.value)
        case Scalar(element_type=element_type, value=scalar):
            return dtype_for(element_type).type(scalar)
        case _:
            raise TypeError(f"Expected NpyArray or Scalar, not {type(value).__name__}")


@describe.register
def _(value: np.ndarray) -> Value:
    return from_numpy(value)


@describe.register
def _(value: np.generic) -> Value:
    element_type = element_type_from_dtype(value.dtype, what=type(value).__name__)
    return Scalar(element_type, value.item())
