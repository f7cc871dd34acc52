# npzio/container.py

"""
Access to the members of an `.npz` archive.

An `.npz` file is a plain zip archive whose members are `.npy` streams named
`<variable>.npy`. Compression and decompression are delegated to `zipfile`.
"""

import contextlib
import io
import logging
import os
import zipfile
from typing import BinaryIO, Callable, Iterator, Mapping, Union

from .exceptions import MemberNotFoundError
from .types import Compression

logger = logging.getLogger(__name__)

NPY_SUFFIX = ".npy"
# Fixed timestamp so identical inputs produce identical archives.
MEMBER_DATE_TIME = (1980, 1, 1, 0, 0, 0)

Source = Union[str, os.PathLike, BinaryIO]
Producer = Callable[[BinaryIO], object]


def member_name(variable: str) -> str:
    """Returns the archive member name used to store `variable`."""
    return variable + NPY_SUFFIX


def variable_name(member: str) -> str:
    """Returns the variable name stored in archive member `member`."""
    return member[:-len(NPY_SUFFIX)] if member.endswith(NPY_SUFFIX) else member


def list_members(source: Source) -> Iterator[str]:
    """
    Yields the member names of an archive, read from its central directory.

    No member is decompressed. The archive is opened when iteration starts
    and closed when it ends; every call starts a fresh enumeration.
    """
    with zipfile.ZipFile(source, "r") as zf:
        for info in zf.infolist():
            if not info.is_dir():
                yield info.filename


def resolve_member(names: list[str], name: str) -> str:
    """
    Finds the member storing `name`, accepting either `x` or `x.npy`.

    Raises:
        MemberNotFoundError: If no member matches.
    """
    for candidate in (member_name(name), name):
        if candidate in names:
            return candidate
    raise MemberNotFoundError(name, [variable_name(n) for n in names])


@contextlib.contextmanager
def open_archive_member(zf: zipfile.ZipFile, name: str) -> Iterator[BinaryIO]:
    """Opens member `name` of an already opened archive as a readable stream."""
    member = resolve_member(zf.namelist(), name)
    logger.debug("Opening archive member '%s'", member)
    with zf.open(member, "r") as stream:
        yield stream


@contextlib.contextmanager
def open_member(source: Source, name: str) -> Iterator[BinaryIO]:
    """
    Opens one member of an archive as a readable, decompressed stream.

    Usage:
        with open_member("data.npz", "x") as stream:
            value = read_array(stream)

    Args:
        source: Path or seekable binary file of the archive.
        name: The variable name (`x`) or member name (`x.npy`).

    Raises:
        MemberNotFoundError: If the archive has no such member.
    """
    with zipfile.ZipFile(source, "r") as zf:
        with open_archive_member(zf, name) as stream:
            yield stream


def write_members(
    sink: Source,
    producers: Mapping[str, Producer],
    compression: Compression = Compression.STORED,
) -> None:
    """
    Writes one `<name>.npy` member per producer into a new archive.

    Each producer is called with an in-memory buffer and writes a complete
    `.npy` stream into it; the buffer is then added to the archive, so the
    member size is known before its local header is written.

    Args:
        sink: Path or writable binary file. An existing file is replaced.
        producers: Mapping from variable name to a callable writing its data.
        compression: Whether members are stored or deflated.
    """
    with zipfile.ZipFile(sink, "w", compression=int(compression), allowZip64=True) as zf:
        for name, produce in producers.items():
            write_member(zf, name, produce, compression)


def write_member(
    zf: zipfile.ZipFile,
    name: str,
    produce: Producer,
    compression: Compression = Compression.STORED,
) -> int:
    """
    Adds member `<name>.npy` to an archive opened for writing.

    Returns:
        The uncompressed size of the member in bytes.
    """
    with io.BytesIO() as buffer:
        produce(buffer)
        info = zipfile.ZipInfo(member_name(name), date_time=MEMBER_DATE_TIME)
        info.compress_type = int(compression)
        info.external_attr = 0o644 << 16
        zf.writestr(info, buffer.getvalue())
        size = buffer.tell()
    logger.debug("Wrote archive member '%s' (%d bytes, %s)", info.filename, size, compression.name)
    return size
