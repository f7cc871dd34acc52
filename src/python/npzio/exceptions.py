# npzio/exceptions.py
"""Custom exception types for the npzio library."""

from typing import Any, Optional


class NpzError(Exception):
    """Base exception for all errors raised by this library."""
    pass


class BadMagicError(NpzError):
    """
    The stream does not start with the `.npy` magic string.

    Attributes:
        found (bytes): The leading bytes actually read from the stream.
    """
    def __init__(self, found: bytes):
        super().__init__(found)
        self.found = found

    def __str__(self) -> str:
        return f"Not an .npy stream: expected magic b'\\x93NUMPY', found {self.found!r}"


class UnsupportedVersionError(NpzError):
    """The `.npy` format version is not one of 1.0, 2.0 or 3.0."""
    def __init__(self, version: tuple[int, int]):
        super().__init__(version)
        self.version = version

    def __str__(self) -> str:
        major, minor = self.version
        return f"Unsupported .npy format version {major}.{minor} (supported: 1.0, 2.0, 3.0)"


class MalformedHeaderError(NpzError):
    """
    The header text could not be parsed into the required dictionary.

    Attributes:
        reason (str): What was wrong with the header.
        header_text (str | None): The offending header text, when available.
    """
    def __init__(self, reason: str, header_text: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.header_text = header_text

    def __str__(self) -> str:
        if self.header_text is None:
            return self.reason
        return f"{self.reason}: {self.header_text!r}"


class UnsupportedDtypeError(NpzError):
    """
    A dtype descriptor is unknown, has an unsupported width, or is structured.

    Attributes:
        token (Any): The offending descriptor as found in the header.
        reason (str): Why it was rejected.
    """
    def __init__(self, token: Any, reason: str):
        super().__init__(token, reason)
        self.token = token
        self.reason = reason

    def __str__(self) -> str:
        return f"Unsupported dtype {self.token!r}: {self.reason}"


class TruncatedDataError(NpzError):
    """
    Fewer data bytes were available than the header declares.

    Attributes:
        expected (int): Number of data bytes required by dtype and shape.
        actual (int): Number of bytes actually read.
    """
    def __init__(self, expected: int, actual: int):
        super().__init__(expected, actual)
        self.expected = expected
        self.actual = actual

    def __str__(self) -> str:
        return f"Truncated array data: expected {self.expected} bytes, got {self.actual}"


class UnsupportedElementTypeError(NpzError, TypeError):
    """A value to be written has no `.npy` element type representation."""
    def __init__(self, value_type: str, reason: str = "no .npy element type for this value"):
        super().__init__(value_type, reason)
        self.value_type = value_type
        self.reason = reason

    def __str__(self) -> str:
        return f"Cannot write value of type '{self.value_type}': {self.reason}"


class MemberNotFoundError(NpzError, KeyError):
    """
    The requested array is not a member of the `.npz` archive.

    Attributes:
        name (str): The requested variable name.
        available (list[str]): The variable names present in the archive.
    """
    def __init__(self, name: str, available: Optional[list[str]] = None):
        super().__init__(name)
        self.name = name
        self.available = available or []

    def __str__(self) -> str:
        return f"'{self.name}' is not a member of the archive (available: {self.available})"


class DuplicateNameError(NpzError, ValueError):
    """Two values to be written into one archive share the same name."""
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Cannot use the name '{self.name}' more than once in the same archive"
