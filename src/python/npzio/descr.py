# npzio/descr.py

"""
Conversion between `.npy` dtype descriptors and `ElementType`.

A descriptor is the value of the `descr` key of an `.npy` header, such as
`'<f8'`, `'>i4'` or `'|b1'`: a byte-order character, a class character and
the element width in bytes.
"""

import re
import sys
from typing import Any

from .dataclasses import ElementType
from .exceptions import UnsupportedDtypeError
from .types import BaseClass, Endianness

NATIVE_ENDIANNESS = Endianness.LITTLE if sys.byteorder == "little" else Endianness.BIG

# Maps the byte-order character of a descriptor to an Endianness.
# `|` and `=` both mean "native or irrelevant"; None marks "resolve to native".
_ENDIAN_CHARS: dict[str, Endianness | None] = {
    "<": Endianness.LITTLE,
    ">": Endianness.BIG,
    "|": None,
    "=": None,
}

_CLASS_CHARS: dict[str, BaseClass] = {member.value: member for member in BaseClass}

_TOKEN_RE = re.compile(r"^([A-Za-z])(\d+)$")


def parse_descr(token: Any) -> ElementType:
    """
    Parses a dtype descriptor into an `ElementType`.

    Args:
        token: The `descr` value from an `.npy` header, e.g. `'<f8'`.

    Returns:
        The corresponding ElementType.

    Raises:
        UnsupportedDtypeError: If the descriptor is structured (a field list
            or comma-separated string), uses an unknown class character, or
            has a width that is not valid for its class.
    """
    if isinstance(token, (list, tuple)):
        raise UnsupportedDtypeError(token, "structured (record) dtypes are not supported")
    if not isinstance(token, str):
        raise UnsupportedDtypeError(token, "descriptor must be a string")
    if "," in token:
        raise UnsupportedDtypeError(token, "structured (record) dtypes are not supported")

    body = token
    endian_char = "="
    if body[:1] in _ENDIAN_CHARS:
        endian_char, body = body[0], body[1:]

    match = _TOKEN_RE.match(body)
    if match is None:
        raise UnsupportedDtypeError(token, "expected <byteorder><class><width>")
    class_char, width_str = match.groups()

    try:
        base_class = _CLASS_CHARS[class_char]
    except KeyError:
        raise UnsupportedDtypeError(token, f"unknown type class '{class_char}'") from None

    endianness = _ENDIAN_CHARS[endian_char] or NATIVE_ENDIANNESS
    try:
        return ElementType(base_class, int(width_str), endianness)
    except UnsupportedDtypeError as e:
        raise UnsupportedDtypeError(token, e.reason) from None


def format_descr(element_type: ElementType) -> str:
    """
    Formats an `ElementType` as a dtype descriptor.

    Multi-byte types always get an explicit `<` or `>`; single-byte types
    get `|`.
    """
    return (
        f"{element_type.endianness.value}"
        f"{element_type.base_class.value}"
        f"{element_type.byte_width}"
    )
