# ndarray_shm/shape.py
"""
Dimension extents labelled with the order in which they are laid out.

A `Shape` never transposes data. Switching between C and F order only
reverses the extent list: the extents `(4, 3, 2)` in C order and `(2, 3, 4)`
in F order describe the same bytes, because the fastest-varying axis is the
last one in the first case and the first one in the second.
"""
import operator
from typing import Iterator, Optional, Sequence

from .types import Order
from .exceptions import InvalidArgumentError, OutOfRangeError, SizeOverflowError

# Extents and element counts are unsigned 64-bit quantities.
MAX_ELEMENTS = 2**64 - 1


class Shape:
    """
    An immutable extent list tagged with an `Order`.

    Each Shape is created together with its mirror (reversed extents,
    opposite order), so `as_order()` only ever returns one of the two.

    Usage:
        s = Shape(Order.F_ORDER, 4, 3, 2)
        s.as_order(Order.C_ORDER).to_extents(Order.C_ORDER)  # (2, 3, 4)
        s.num_elements()                                    # 24
    """
    __slots__ = ("_order", "_extents", "_mirror")

    def __init__(self, order: Order, *extents: int):
        order = Order.from_label(order)
        if len(extents) == 1 and isinstance(extents[0], (tuple, list)):
            extents = tuple(extents[0])
        checked = tuple(_check_extent(e) for e in extents)
        self._order = order
        self._extents = checked
        self._mirror = Shape._linked(order.reverse(), checked[::-1], self)

    @classmethod
    def _linked(cls, order: Order, extents: tuple[int, ...], mirror: "Shape") -> "Shape":
        shape = cls.__new__(cls)
        shape._order = order
        shape._extents = extents
        shape._mirror = mirror
        return shape

    @classmethod
    def from_numpy(cls, shape: Sequence[int], order: Order = Order.C_ORDER) -> "Shape":
        """Builds a Shape from a NumPy-style shape tuple."""
        return cls(order, *shape)

    # --- Accessors ---

    @property
    def order(self) -> Order:
        return self._order

    @property
    def rank(self) -> int:
        return len(self._extents)

    def extent(self, d: int) -> int:
        """Extent of dimension `d`, counted in this shape's own order."""
        if not 0 <= d < len(self._extents):
            raise OutOfRangeError(
                f"Dimension {d} out of range for a shape of rank {self.rank}"
            )
        return self._extents[d]

    def as_order(self, order: Order) -> "Shape":
        """Returns the same logical shape expressed in `order`."""
        return self if Order.from_label(order) is self._order else self._mirror

    def to_extents(self, order: Optional[Order] = None) -> tuple[int, ...]:
        """The extents listed in `order` (default: this shape's order)."""
        if order is None:
            return self._extents
        return self.as_order(order)._extents

    def num_elements(self) -> int:
        """
        Product of all extents (1 for rank 0, 0 if any extent is 0).

        Raises:
            SizeOverflowError: If the product does not fit in 64 bits.
        """
        if 0 in self._extents:
            return 0
        n = 1
        for e in self._extents:
            n *= e
            if n > MAX_ELEMENTS:
                raise SizeOverflowError(
                    f"Shape {self._extents} has more than {MAX_ELEMENTS} elements"
                )
        return n

    # --- Strided addressing ---

    def strides(self, order: Optional[Order] = None) -> tuple[int, ...]:
        """
        Element strides for indices given in `order`.

        The stride of dimension d is the product of the extents of all
        dimensions that vary faster than d.
        """
        extents = self.to_extents(order)
        order = self._order if order is None else Order.from_label(order)
        strides = [0] * len(extents)
        step = 1
        # In C order the last index is fastest, in F order the first one
        axes = range(len(extents) - 1, -1, -1) if order is Order.C_ORDER else range(len(extents))
        for d in axes:
            strides[d] = step
            step *= extents[d]
        return tuple(strides)

    def linear_index(self, indices: Sequence[int], order: Optional[Order] = None) -> int:
        """
        Maps a multi-index, given in `order`, to a linear element offset.

        Raises:
            InvalidArgumentError: If the number of indices differs from the rank.
            OutOfRangeError: If an index is outside `[0, extent)`.
        """
        extents = self.to_extents(order)
        if len(indices) != len(extents):
            raise InvalidArgumentError(
                f"Expected {len(extents)} indices, got {len(indices)}"
            )
        offset = 0
        for i, e, stride in zip(indices, extents, self.strides(order)):
            i = operator.index(i)
            if not 0 <= i < e:
                raise OutOfRangeError(f"Index {tuple(indices)} out of range for extents {extents}")
            offset += i * stride
        return offset

    # --- Python protocol ---

    def __len__(self) -> int:
        return len(self._extents)

    def __getitem__(self, d: int) -> int:
        return self.extent(d)

    def __iter__(self) -> Iterator[int]:
        return iter(self._extents)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return self._order is other._order and self._extents == other._extents

    def __hash__(self) -> int:
        return hash((self._order, self._extents))

    def __repr__(self) -> str:
        return f"Shape({self._order.name}, {self._extents})"


def _check_extent(extent: int) -> int:
    if isinstance(extent, bool):
        raise InvalidArgumentError(f"Extent must be an integer, not bool: {extent!r}")
    try:
        value = operator.index(extent)
    except TypeError:
        raise InvalidArgumentError(f"Extent must be an integer, got {extent!r}") from None
    if value < 0:
        raise InvalidArgumentError(f"Extent must be non-negative, got {value}")
    if value > MAX_ELEMENTS:
        raise SizeOverflowError(f"Extent {value} does not fit in 64 bits")
    return value
