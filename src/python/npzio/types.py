# npzio/types.py

"""
Core type-safe enumerations for the npzio library.
"""
import zipfile
from enum import Enum, IntEnum


class BaseClass(Enum):
    """
    The kind of value held by each element of an array.

    The values are the class characters used in `.npy` dtype descriptors.
    """
    BOOL = "b"
    SIGNED_INT = "i"
    UNSIGNED_INT = "u"
    FLOAT = "f"
    COMPLEX = "c"


class Endianness(Enum):
    """Byte order of multi-byte elements, keyed by descriptor character."""
    LITTLE = "<"
    BIG = ">"
    # Single-byte types have no byte order.
    NOT_APPLICABLE = "|"


class StorageOrder(Enum):
    """Memory layout of multi-dimensional data, as declared by `fortran_order`."""
    ROW_MAJOR = "C"
    COLUMN_MAJOR = "F"


class Compression(IntEnum):
    """
    How members of an `.npz` archive are stored.

    These correspond directly to the standard `zipfile` compression constants.
    """
    STORED = zipfile.ZIP_STORED
    DEFLATED = zipfile.ZIP_DEFLATED
