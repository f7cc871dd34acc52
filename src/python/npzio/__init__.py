# npzio/__init__.py
"""
Reading and writing NumPy `.npy` and `.npz` files.
"""
from .file import open, Reader, Writer
from .convenience import read, read_header, write, write_compressed
from .types import BaseClass, Endianness, StorageOrder, Compression
from .dataclasses import ElementType, Header, NpyArray, Scalar
from .descr import parse_descr, format_descr
from .exceptions import (
    NpzError,
    BadMagicError,
    UnsupportedVersionError,
    MalformedHeaderError,
    UnsupportedDtypeError,
    TruncatedDataError,
    UnsupportedElementTypeError,
    MemberNotFoundError,
    DuplicateNameError,
)

__version__ = "0.4.1"

# Define what gets imported with 'from npzio import *'
__all__ = [
    'open',
    'read',
    'read_header',
    'write',
    'write_compressed',
    'Reader',
    'Writer',
    'BaseClass',
    'Endianness',
    'StorageOrder',
    'Compression',
    'ElementType',
    'Header',
    'NpyArray',
    'Scalar',
    'parse_descr',
    'format_descr',
    'NpzError',
    'BadMagicError',
    'UnsupportedVersionError',
    'MalformedHeaderError',
    'UnsupportedDtypeError',
    'TruncatedDataError',
    'UnsupportedElementTypeError',
    'MemberNotFoundError',
    'DuplicateNameError',
    '__version__',
]
