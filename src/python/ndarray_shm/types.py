# ndarray_shm/types.py

"""
Core type-safe enumerations for the ndarray_shm library.
"""
from enum import IntEnum

from .exceptions import InvalidArgumentError

class DType(IntEnum):
    """
    Enumeration of all element data types a shared buffer can hold.

    The lower-case member name (see `label`) is the numpy spelling used on the
    wire, e.g. `DType.FLOAT32.label == "float32"`.
    """
    # Signed integers
    INT8 = 0
    INT16 = 1
    INT32 = 2
    INT64 = 3

    # Unsigned integers
    UINT8 = 4
    UINT16 = 5
    UINT32 = 6
    UINT64 = 7

    # Floating point
    FLOAT32 = 8
    FLOAT64 = 9

    # Complex, two float lanes (real, imag) per element
    COMPLEX64 = 10
    COMPLEX128 = 11

    BOOL = 12

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> "DType":
        """Parses a wire label such as 'uint16' (case-insensitive)."""
        try:
            return cls[str(label).upper()]
        except KeyError:
            raise InvalidArgumentError(f"Unknown dtype label: '{label}'") from None


class Primitive(IntEnum):
    """Storage primitive kinds backing a DType lane."""
    BYTE = 0
    SHORT = 1
    INT = 2
    LONG = 3
    FLOAT = 4
    DOUBLE = 5
    BOOLEAN = 6


class Order(IntEnum):
    """
    Which index varies fastest when elements are laid out linearly.

    C_ORDER: row-major, the last index varies fastest (numpy default).
    F_ORDER: column-major, the first index varies fastest (image libraries).
    """
    C_ORDER = 0
    F_ORDER = 1

    def reverse(self) -> "Order":
        return Order.F_ORDER if self is Order.C_ORDER else Order.C_ORDER

    @property
    def numpy_order(self) -> str:
        """The `order=` argument numpy uses for this layout."""
        return "C" if self is Order.C_ORDER else "F"

    @classmethod
    def from_label(cls, label: "str | Order") -> "Order":
        """Accepts an Order, 'C'/'F', or a member name such as 'F_ORDER'."""
        if isinstance(label, Order):
            return label
        text = str(label).upper()
        if text in ("C", "C_ORDER"):
            return cls.C_ORDER
        if text in ("F", "F_ORDER"):
            return cls.F_ORDER
        raise InvalidArgumentError(f"Unknown order: '{label}'. Must be 'C' or 'F'.")
