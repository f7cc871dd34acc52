# npzio/convenience.py
"""
High-level functions reading and writing whole `.npy` and `.npz` files.
"""
import builtins
import functools
import logging
import os
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from .array import describe, read_array, read_array_header, write_array
from .container import variable_name, write_members
from .dataclasses import Header, Value
from .exceptions import BadMagicError, DuplicateNameError
from .file import Reader
from .header import MAGIC_PREFIX
from .types import Compression
from ._internal import numpy_utils

logger = logging.getLogger(__name__)

PathType = Union[str, os.PathLike]

# Local file header, or end of central directory for an empty archive.
_ZIP_PREFIXES = (b"PK\x03\x04", b"PK\x05\x06")


def _sniff(f) -> str:
    """Returns 'npy' or 'npz' from the leading bytes of `f`, rewinding it."""
    prefix = f.read(len(MAGIC_PREFIX))
    f.seek(0)
    if prefix == MAGIC_PREFIX:
        return "npy"
    if prefix[:4] in _ZIP_PREFIXES:
        return "npz"
    raise BadMagicError(prefix)


def _selection(names: Optional[Iterable[str]], available: list[str]) -> list[str]:
    if names is None:
        return available
    if isinstance(names, str):
        return [names]
    return list(names)


def read(path: PathType, names: Optional[Iterable[str]] = None, *, raw: bool = False) -> Any:
    """
    Reads a single array from an `.npy` file or a collection from an `.npz` file.

    The file kind is decided from its content, not its extension. For an
    `.npz` file only the requested members are decompressed and decoded.

    Args:
        path: The file to read.
        names: For `.npz` files, the variables to read (default: all). Ignored
               for `.npy` files, which hold a single unnamed array.
        raw: If True, values are returned as `NpyArray`/`Scalar` payloads
             instead of NumPy arrays and scalars.

    Returns:
        For `.npy`, the stored value. For `.npz`, a dict from variable name
        to value. Zero-dimensional arrays are returned as scalars.

    Raises:
        BadMagicError: If the file is neither an `.npy` nor a zip file.
        MemberNotFoundError: If a requested name is not in the archive.
    """
    with builtins.open(path, "rb") as f:
        if _sniff(f) == "npy":
            if names is not None:
                logger.debug("%s is a bare .npy file, ignoring names=%r", path, names)
            value: Value = read_array(f)
            return value if raw else numpy_utils.to_numpy(value)

        with Reader(f) as archive:
            selected = _selection(names, archive.files)
            logger.debug("Reading %d of %d members from %s", len(selected), len(archive), path)
            return {variable_name(name): archive.read(name, raw=raw) for name in selected}


def read_header(
    path: PathType, names: Optional[Iterable[str]] = None
) -> Union[Header, Dict[str, Header]]:
    """
    Reads array headers (element type, shape, order) without reading any data.

    Returns:
        A Header for an `.npy` file, or a dict from variable name to Header
        for an `.npz` file (restricted to `names` if given).
    """
    with builtins.open(path, "rb") as f:
        if _sniff(f) == "npy":
            return read_array_header(f)

        with Reader(f) as archive:
            selected = _selection(names, archive.files)
            return {variable_name(name): archive.header(name) for name in selected}


def _collect(args: tuple, kwargs: Mapping[str, Any]) -> Dict[str, Any]:
    """Names positional values `arr_0`, `arr_1`, ... and merges the named ones."""
    collection: Dict[str, Any] = {f"arr_{i}": value for i, value in enumerate(args)}
    for name, value in kwargs.items():
        if name in collection:
            raise DuplicateNameError(name)
        collection[name] = value
    return collection


def _write_npz(path: PathType, collection: Mapping[str, Any], compression: Compression) -> None:
    # Encode everything up front so an unsupported value leaves the target untouched.
    payloads = {}
    for name, value in collection.items():
        if not isinstance(name, str):
            raise TypeError(f"Variable names must be strings, not {type(name).__name__}")
        payloads[name] = describe(value)

    if os.path.exists(path):
        logger.debug("Replacing existing file %s", path)
    write_members(
        path,
        {name: functools.partial(write_array, value=payload) for name, payload in payloads.items()},
        compression,
    )


def write(path: PathType, *args: Any, **kwargs: Any) -> None:
    """
    Writes values to an `.npy` or `.npz` file.

    - `write(path, x)` writes `x` to a bare `.npy` file.
    - `write(path, {"x": x, "y": y})` writes an `.npz` file with those names.
    - `write(path, a, b, x=x)` writes an `.npz` file with the positional values
      named `arr_0`, `arr_1`, ... and the keyword values under their own names.

    No extension is added to `path`. Any existing file is replaced.

    Raises:
        DuplicateNameError: If a keyword name collides with a default name.
        UnsupportedElementTypeError: If a value has no `.npy` element type.
    """
    if len(args) == 1 and not kwargs:
        (value,) = args
        if isinstance(value, Mapping):
            _write_npz(path, value, Compression.STORED)
            return
        payload = describe(value)
        if os.path.exists(path):
            logger.debug("Replacing existing file %s", path)
        with builtins.open(path, "wb") as f:
            write_array(f, payload)
        return

    _write_npz(path, _collect(args, kwargs), Compression.STORED)


def write_compressed(path: PathType, *args: Any, **kwargs: Any) -> None:
    """
    Writes values to a deflate-compressed `.npz` file.

    Arguments are named as in `write`, except that a single non-mapping
    value is also stored in an archive (as `arr_0`).
    """
    if len(args) == 1 and not kwargs and isinstance(args[0], Mapping):
        collection = args[0]
    else:
        collection = _collect(args, kwargs)
    _write_npz(path, collection, Compression.DEFLATED)
