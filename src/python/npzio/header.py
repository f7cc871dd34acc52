# npzio/header.py

"""
Reading and writing the header of an `.npy` stream.

Layout:

    magic (6 bytes) | major, minor (2 bytes) | header length (<H or <I)
    | dict literal text | space padding | newline | raw data

The text is padded so that the raw data starts at a multiple of ARRAY_ALIGN
bytes from the beginning of the stream.
"""

import ast
import logging
import struct
from typing import Any, BinaryIO

from .dataclasses import Header
from .descr import format_descr, parse_descr
from .exceptions import BadMagicError, MalformedHeaderError, UnsupportedVersionError
from .types import StorageOrder

logger = logging.getLogger(__name__)

MAGIC_PREFIX = b"\x93NUMPY"
MAGIC_LEN = len(MAGIC_PREFIX) + 2
ARRAY_ALIGN = 64
# Room left after the leading dimension so it can grow in place.
GROWTH_AXIS_MAX_DIGITS = 21

# version -> (struct format of the header length field, text encoding)
HEADER_FORMATS: dict[tuple[int, int], tuple[str, str]] = {
    (1, 0): ("<H", "latin1"),
    (2, 0): ("<I", "latin1"),
    (3, 0): ("<I", "utf8"),
}

REQUIRED_KEYS = frozenset({"descr", "fortran_order", "shape"})


def read_exactly(stream: BinaryIO, size: int) -> bytes:
    """Reads up to `size` bytes, stopping early only at end of stream."""
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_header(stream: BinaryIO) -> Header:
    """
    Reads the magic string, version and header dict from an `.npy` stream.

    On return the stream is positioned at the first byte of raw data.

    Args:
        stream: A readable binary stream positioned at the start of the array.

    Returns:
        The decoded Header.

    Raises:
        BadMagicError: If the stream does not start with the `.npy` magic.
        UnsupportedVersionError: If the format version is not 1.0, 2.0 or 3.0.
        MalformedHeaderError: If the header text is truncated or is not a
            dict with exactly the keys `descr`, `fortran_order` and `shape`.
        UnsupportedDtypeError: If `descr` is not a supported descriptor.
    """
    prologue = read_exactly(stream, MAGIC_LEN)
    if prologue[:len(MAGIC_PREFIX)] != MAGIC_PREFIX:
        raise BadMagicError(prologue[:len(MAGIC_PREFIX)])
    if len(prologue) < MAGIC_LEN:
        raise BadMagicError(prologue)

    version = (prologue[6], prologue[7])
    try:
        length_format, encoding = HEADER_FORMATS[version]
    except KeyError:
        raise UnsupportedVersionError(version) from None

    length_size = struct.calcsize(length_format)
    raw_length = read_exactly(stream, length_size)
    if len(raw_length) < length_size:
        raise MalformedHeaderError("Stream ends before the header length field")
    (header_length,) = struct.unpack(length_format, raw_length)

    raw_text = read_exactly(stream, header_length)
    if len(raw_text) < header_length:
        raise MalformedHeaderError(
            f"Header declares {header_length} bytes but only {len(raw_text)} are available"
        )
    try:
        text = raw_text.decode(encoding)
    except UnicodeDecodeError as e:
        raise MalformedHeaderError(f"Header text is not valid {encoding}: {e}") from e

    return parse_header_text(text)


def parse_header_text(text: str) -> Header:
    """Parses the dict literal of an `.npy` header into a `Header`."""
    try:
        fields: Any = ast.literal_eval(text)
    except (SyntaxError, ValueError, TypeError, MemoryError, RecursionError) as e:
        raise MalformedHeaderError("Header is not a valid Python literal", text) from e

    if not isinstance(fields, dict):
        raise MalformedHeaderError("Header is not a dictionary", text)

    keys = set(fields)
    if keys != REQUIRED_KEYS:
        missing = sorted(str(k) for k in REQUIRED_KEYS - keys)
        extra = sorted(str(k) for k in keys - REQUIRED_KEYS)
        raise MalformedHeaderError(
            f"Header keys do not match. Missing keys: {missing or 'None'}. "
            f"Extra keys: {extra or 'None'}",
            text,
        )

    shape = fields["shape"]
    if not isinstance(shape, tuple) or not all(
        isinstance(n, int) and not isinstance(n, bool) and n >= 0 for n in shape
    ):
        raise MalformedHeaderError(
            f"'shape' must be a tuple of non-negative integers, got {shape!r}", text
        )

    fortran_order = fields["fortran_order"]
    if not isinstance(fortran_order, bool):
        raise MalformedHeaderError(
            f"'fortran_order' must be a boolean, got {fortran_order!r}", text
        )

    return Header(
        element_type=parse_descr(fields["descr"]),
        shape=shape,
        storage_order=StorageOrder.COLUMN_MAJOR if fortran_order else StorageOrder.ROW_MAJOR,
    )


def _wrap_header(text: bytes, version: tuple[int, int]) -> bytes:
    """Prepends the prologue and pads `text` so the total is ARRAY_ALIGN-aligned."""
    length_format, _ = HEADER_FORMATS[version]
    text_length = len(text) + 1  # trailing newline
    padding = ARRAY_ALIGN - (
        (MAGIC_LEN + struct.calcsize(length_format) + text_length) % ARRAY_ALIGN
    )
    prologue = MAGIC_PREFIX + bytes(version) + struct.pack(length_format, text_length + padding)
    return prologue + text + b" " * padding + b"\n"


def encode_header(header: Header) -> bytes:
    """
    Serializes a `Header` into the bytes that precede the raw data.

    Version 1.0 is used unless the padded header text does not fit its
    2-byte length field, in which case version 2.0 is used.
    """
    fields = {
        "descr": format_descr(header.element_type),
        "fortran_order": header.fortran_order,
        "shape": tuple(header.shape),
    }
    text = "{" + "".join(f"'{key}': {value!r}, " for key, value in sorted(fields.items())) + "}"

    shape = fields["shape"]
    if shape:
        growth_axis = shape[-1] if header.fortran_order else shape[0]
        text += " " * (GROWTH_AXIS_MAX_DIGITS - len(repr(growth_axis)))

    encoded = text.encode("latin1")
    try:
        return _wrap_header(encoded, (1, 0))
    except struct.error:
        logger.debug("Header of %d bytes exceeds the 1.0 limit, writing version 2.0", len(encoded))
        return _wrap_header(encoded, (2, 0))


def write_header(stream: BinaryIO, header: Header) -> int:
    """Writes the encoded header to `stream` and returns the number of bytes written."""
    encoded = encode_header(header)
    stream.write(encoded)
    return len(encoded)
