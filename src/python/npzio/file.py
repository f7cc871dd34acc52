# npzio/file.py
"""High-level Reader, Writer, and the `open` factory function for `.npz` archives."""

import functools
import logging
import zipfile
from functools import cached_property
from typing import Any, Dict, Iterator, List, Optional, Union

from .abc import NpzFileBase
from .array import describe, read_array, read_array_header, write_array
from .container import Source, open_archive_member, resolve_member, variable_name, write_member
from .dataclasses import Header, Value
from .exceptions import DuplicateNameError
from .types import Compression
from ._internal import numpy_utils

logger = logging.getLogger(__name__)


def open(
    path: Source,
    mode: str = 'r',
    *,
    compression: Optional[Compression] = None,
) -> Union["Reader", "Writer"]:
    """
    Opens an `.npz` archive for reading or writing.

    Args:
        path: Path of the archive, or a binary file object.
        mode: 'r' (read-only) or 'w' (write, replaces any existing file).
        compression: For 'w' mode only. Whether members are stored as-is
            (the default) or deflated.

    Returns:
        A Reader or Writer object, typically used within a `with` statement.

    Raises:
        ValueError: If mode or arguments are invalid.
        zipfile.BadZipFile: If a file opened for reading is not a zip archive.
    """
    if mode == 'r':
        if compression is not None:
            raise ValueError("compression can only be provided in 'w' mode.")
        return Reader(path)
    elif mode == 'w':
        return Writer(path, compression=compression or Compression.STORED)
    raise ValueError(f"Unsupported mode: '{mode}'. Must be 'r' or 'w'.")


class Reader(NpzFileBase):
    """
    A handle for reading the arrays of an `.npz` archive on demand.
    Created via `npzio.open(..., mode='r')`.

    Members are only decompressed and decoded when they are accessed.

    Usage:
        with npzio.open("data.npz") as f:
            print(f.files)
            x = f["x"]
    """
    def __init__(self, source: Source):
        self._zipfile = zipfile.ZipFile(source, "r")
        self._closed = False
        self._members = [info.filename for info in self._zipfile.infolist() if not info.is_dir()]

    @cached_property
    def files(self) -> List[str]:
        """The variable names stored in the archive, in archive order."""
        return [variable_name(member) for member in self._members]

    @cached_property
    def headers(self) -> Dict[str, Header]:
        """The header of every member, read without touching the array data."""
        return {name: self.header(name) for name in self.files}

    def header(self, name: str) -> Header:
        """Reads the header of a single member."""
        self._check_open()
        with open_archive_member(self._zipfile, name) as stream:
            return read_array_header(stream)

    def read(self, name: str, *, raw: bool = False) -> Any:
        """
        Decodes a single member.

        Args:
            name: The variable name (`x`) or member name (`x.npy`).
            raw: If True, return the `NpyArray`/`Scalar` payload instead of
                 a NumPy array or scalar.

        Raises:
            MemberNotFoundError: If the archive has no such member.
        """
        self._check_open()
        with open_archive_member(self._zipfile, name) as stream:
            value: Value = read_array(stream)
        return value if raw else numpy_utils.to_numpy(value)

    def __getitem__(self, name: str) -> Any:
        return self.read(name)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        try:
            resolve_member(self._members, name)
        except KeyError:
            return False
        return True

    def __iter__(self) -> Iterator[str]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self._members)

    def close(self) -> None:
        if not self._closed:
            self._zipfile.close()
            self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed


class Writer(NpzFileBase):
    """
    A handle for writing arrays into a new `.npz` archive.
    Created via `npzio.open(..., mode='w')`.

    Each `add` call encodes the value and appends it as a member right away.
    """
    def __init__(self, sink: Source, compression: Compression = Compression.STORED):
        self._compression = Compression(compression)
        self._zipfile = zipfile.ZipFile(sink, "w", compression=int(self._compression), allowZip64=True)
        self._closed = False
        self._names: set[str] = set()

    @property
    def compression(self) -> Compression:
        return self._compression

    @property
    def names(self) -> List[str]:
        """Names written so far."""
        return sorted(self._names)

    def add(self, name: str, value: Any) -> int:
        """
        Encodes `value` and stores it as member `<name>.npy`.

        Args:
            name: The variable name. Must be unique within the archive.
            value: An `NpyArray`, `Scalar`, Python number, or NumPy value.

        Returns:
            The uncompressed size of the member in bytes.

        Raises:
            DuplicateNameError: If `name` was already written.
            UnsupportedElementTypeError: If `value` has no `.npy` element type.
        """
        self._check_open()
        if name in self._names:
            raise DuplicateNameError(name)
        payload = describe(value)
        size = write_member(
            self._zipfile, name, functools.partial(write_array, value=payload), self._compression
        )
        self._names.add(name)
        return size

    def close(self) -> None:
        if not self._closed:
            self._zipfile.close()
            self._closed = True
            logger.debug("Closed archive with %d members", len(self._names))

    @property
    def closed(self) -> bool:
        return self._closed
