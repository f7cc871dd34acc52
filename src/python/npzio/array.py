# npzio/array.py

"""
Reading and writing a single array (header plus raw data) on a byte stream.

Values cross this boundary as the tagged variant `NpyArray | Scalar`.
Zero-dimensional arrays are always read back as a `Scalar`; this is a
convention of the format as used here, applied on every read.

Data is never transposed: an `NpyArray` carries its bytes already laid out
in its declared `storage_order`, and they are written and read verbatim.
"""

import functools
import struct
from typing import Any, BinaryIO

from .dataclasses import ElementType, Header, NpyArray, Scalar, Value
from .descr import format_descr
from .exceptions import TruncatedDataError, UnsupportedElementTypeError
from .header import read_exactly, read_header, write_header
from .types import BaseClass, Endianness

_INT64_MIN, _INT64_MAX = -(2 ** 63), 2 ** 63 - 1

# struct codes for one element; complex values are a (real, imag) pair.
_STRUCT_CODES: dict[tuple[BaseClass, int], str] = {
    (BaseClass.BOOL, 1): "?",
    (BaseClass.SIGNED_INT, 1): "b",
    (BaseClass.SIGNED_INT, 2): "h",
    (BaseClass.SIGNED_INT, 4): "i",
    (BaseClass.SIGNED_INT, 8): "q",
    (BaseClass.UNSIGNED_INT, 1): "B",
    (BaseClass.UNSIGNED_INT, 2): "H",
    (BaseClass.UNSIGNED_INT, 4): "I",
    (BaseClass.UNSIGNED_INT, 8): "Q",
    (BaseClass.FLOAT, 2): "e",
    (BaseClass.FLOAT, 4): "f",
    (BaseClass.FLOAT, 8): "d",
    (BaseClass.COMPLEX, 8): "2f",
    (BaseClass.COMPLEX, 16): "2d",
}

_BYTE_ORDER_CODES: dict[Endianness, str] = {
    Endianness.LITTLE: "<",
    Endianness.BIG: ">",
    Endianness.NOT_APPLICABLE: "<",
}


def _struct_format(element_type: ElementType) -> str:
    code = _STRUCT_CODES[(element_type.base_class, element_type.byte_width)]
    return _BYTE_ORDER_CODES[element_type.endianness] + code


def decode_scalar(element_type: ElementType, raw: bytes) -> bool | int | float | complex:
    """Decodes the bytes of a single element into a Python value."""
    values = struct.unpack(_struct_format(element_type), raw)
    if element_type.base_class is BaseClass.COMPLEX:
        return complex(*values)
    return values[0]


def encode_scalar(element_type: ElementType, value: Any) -> bytes:
    """Encodes a single Python value as the bytes of one element."""
    fmt = _struct_format(element_type)
    try:
        if element_type.base_class is BaseClass.COMPLEX:
            value = complex(value)
            return struct.pack(fmt, value.real, value.imag)
        return struct.pack(fmt, value)
    except (struct.error, TypeError, OverflowError) as e:
        raise UnsupportedElementTypeError(
            type(value).__name__,
            f"value {value!r} cannot be stored as '{format_descr(element_type)}': {e}",
        ) from e


# --- Host value boundary ---

@functools.singledispatch
def describe(value: Any) -> Value:
    """
    Converts a host value into the payload written to an `.npy` stream.

    Each supported host type registers its own implementation, so the
    mapping from Python types to element types is explicit. NumPy arrays
    and scalars are registered by `npzio._internal.numpy_utils`.

    Raises:
        UnsupportedElementTypeError: If the value's type has no registration.
    """
    raise UnsupportedElementTypeError(type(value).__name__)


@describe.register
def _(value: NpyArray) -> Value:
    return value


@describe.register
def _(value: Scalar) -> Value:
    # Validate eagerly so bad values fail before anything is written.
    encode_scalar(value.element_type, value.value)
    return value


@describe.register
def _(value: bool) -> Value:
    return Scalar(ElementType(BaseClass.BOOL, 1), value)


@describe.register
def _(value: int) -> Value:
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise UnsupportedElementTypeError("int", f"{value} does not fit in a 64-bit integer")
    return Scalar(ElementType(BaseClass.SIGNED_INT, 8, Endianness.LITTLE), value)


@describe.register
def _(value: float) -> Value:
    return Scalar(ElementType(BaseClass.FLOAT, 8, Endianness.LITTLE), value)


@describe.register
def _(value: complex) -> Value:
    return Scalar(ElementType(BaseClass.COMPLEX, 16, Endianness.LITTLE), value)


# --- Stream codec ---

def read_array_header(stream: BinaryIO) -> Header:
    """Reads only the header of an array, leaving the data unread."""
    return read_header(stream)


def read_payload(stream: BinaryIO, header: Header) -> Value:
    """
    Reads the raw data described by `header` from `stream`.

    Raises:
        TruncatedDataError: If the stream ends before `header.nbytes` bytes.
    """
    data = read_exactly(stream, header.nbytes)
    if len(data) < header.nbytes:
        raise TruncatedDataError(expected=header.nbytes, actual=len(data))

    if not header.shape:
        return Scalar(header.element_type, decode_scalar(header.element_type, data))
    return NpyArray(header.element_type, header.shape, data, header.storage_order)


def read_array(stream: BinaryIO) -> Value:
    """
    Reads one array from an `.npy` stream.

    Args:
        stream: A readable binary stream positioned at the magic string.

    Returns:
        An `NpyArray`, or a `Scalar` if the stored array is zero-dimensional.

    Raises:
        BadMagicError, UnsupportedVersionError, MalformedHeaderError,
        UnsupportedDtypeError: If the header is invalid.
        TruncatedDataError: If the data section is shorter than declared.
    """
    header = read_header(stream)
    return read_payload(stream, header)


def write_array(stream: BinaryIO, value: Any) -> int:
    """
    Writes `value` as a complete `.npy` stream (header plus data).

    Args:
        stream: A writable binary stream.
        value: Anything `describe` supports: an `NpyArray`, a `Scalar`, a
            Python bool/int/float/complex, or a NumPy array or scalar.

    Returns:
        The total number of bytes written.

    Raises:
        UnsupportedElementTypeError: If the value has no `.npy` element type.
    """
    payload = describe(value)
    match payload:
        case Scalar(element_type=element_type, value=scalar):
            raw = encode_scalar(element_type, scalar)
        case NpyArray(data=data):
            raw = data
        case _:
            raise UnsupportedElementTypeError(type(payload).__name__)

    written = write_header(stream, payload.header)
    stream.write(raw)
    return written + len(raw)
