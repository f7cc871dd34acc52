# npzio/dataclasses.py
"""
Dataclasses for structured data within the npzio library.
"""
import math
from dataclasses import dataclass, field
from typing import Tuple, TypeAlias, Union

from .exceptions import UnsupportedDtypeError
from .types import BaseClass, Endianness, StorageOrder

# Valid byte widths for each element class.
_VALID_WIDTHS: dict[BaseClass, tuple[int, ...]] = {
    BaseClass.BOOL: (1,),
    BaseClass.SIGNED_INT: (1, 2, 4, 8),
    BaseClass.UNSIGNED_INT: (1, 2, 4, 8),
    BaseClass.FLOAT: (2, 4, 8),
    BaseClass.COMPLEX: (8, 16),
}


@dataclass(frozen=True, slots=True)
class ElementType:
    """
    The class, width and byte order of a single array element.

    Single-byte types always carry `Endianness.NOT_APPLICABLE`; multi-byte
    types always carry an explicit `LITTLE` or `BIG` order.
    """
    base_class: BaseClass
    byte_width: int
    endianness: Endianness = Endianness.LITTLE

    def __post_init__(self) -> None:
        label = f"{self.base_class.name.lower()}{self.byte_width * 8}"
        if self.byte_width not in _VALID_WIDTHS[self.base_class]:
            valid = ", ".join(str(w) for w in _VALID_WIDTHS[self.base_class])
            raise UnsupportedDtypeError(
                label, f"byte width must be one of {valid} for {self.base_class.name}"
            )
        if self.byte_width == 1 and self.endianness is not Endianness.NOT_APPLICABLE:
            # Byte order is meaningless for single-byte types; normalize it away.
            object.__setattr__(self, "endianness", Endianness.NOT_APPLICABLE)
        elif self.byte_width > 1 and self.endianness is Endianness.NOT_APPLICABLE:
            raise UnsupportedDtypeError(label, "multi-byte types need an explicit byte order")


@dataclass(frozen=True, slots=True)
class Header:
    """The decoded header of an `.npy` stream."""
    element_type: ElementType
    shape: Tuple[int, ...]
    storage_order: StorageOrder = StorageOrder.ROW_MAJOR

    @property
    def fortran_order(self) -> bool:
        return self.storage_order is StorageOrder.COLUMN_MAJOR

    @property
    def ndim(self) -> int:
        return len(self.shape)

    @property
    def size(self) -> int:
        """Number of elements; 1 for a zero-dimensional array."""
        return math.prod(self.shape)

    @property
    def nbytes(self) -> int:
        """Length in bytes of the raw data section that follows the header."""
        return self.size * self.element_type.byte_width


@dataclass(frozen=True, slots=True)
class NpyArray:
    """
    An array payload: element type, shape, and raw bytes.

    `data` is laid out in `storage_order` and is owned by this object.
    """
    element_type: ElementType
    shape: Tuple[int, ...]
    data: bytes = field(repr=False)
    storage_order: StorageOrder = StorageOrder.ROW_MAJOR

    def __post_init__(self) -> None:
        shape = tuple(int(n) for n in self.shape)
        if any(n < 0 for n in shape):
            raise ValueError(f"Array dimensions must be non-negative, got {shape}")
        object.__setattr__(self, "shape", shape)
        object.__setattr__(self, "data", bytes(self.data))
        expected = math.prod(shape) * self.element_type.byte_width
        if len(self.data) != expected:
            raise ValueError(
                f"Buffer holds {len(self.data)} bytes but shape {shape} with "
                f"{self.element_type.byte_width}-byte elements needs {expected}"
            )

    @property
    def header(self) -> Header:
        return Header(self.element_type, self.shape, self.storage_order)


@dataclass(frozen=True, slots=True)
class Scalar:
    """A zero-dimensional value tagged with its element type."""
    element_type: ElementType
    value: Union[bool, int, float, complex]

    @property
    def header(self) -> Header:
        return Header(self.element_type, ())


# The tagged variant returned by the array codec; callers `match` on it.
Value: TypeAlias = Union[NpyArray, Scalar]
