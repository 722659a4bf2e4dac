# ndarray_shm/view.py
"""The BufferView: a typed, zero-copy reinterpretation of a segment's bytes."""

from typing import Any, Optional, Sequence, Union
import numpy as np

from . import dtypes, adapters
from .abc import ClosableBase, Segment
from .config import ShmConfig, get_default_config
from .dataclasses import ArrayDescriptor
from .exceptions import InvalidArgumentError, OutOfRangeError, SizeOverflowError
from .lowlevel import SharedMemorySegment
from .ownership import OwnershipWrapper
from .shape import Shape
from .types import DType, Order


def required_byte_length(dtype: DType, shape: Shape, config: Optional[ShmConfig] = None) -> int:
    """
    Number of bytes a view of `dtype` elements with `shape` addresses.

    Raises:
        SizeOverflowError: If the length exceeds `config.max_byte_length`.
    """
    config = config or get_default_config()
    byte_length = shape.num_elements() * dtypes.bytes_per_element(dtype)
    if byte_length > config.max_byte_length:
        raise SizeOverflowError(
            f"{dtype.label} array of shape {shape.to_extents()} needs {byte_length} bytes, "
            f"more than the limit of {config.max_byte_length}"
        )
    return byte_length


class BufferView(ClosableBase):
    """
    A (segment, DType, Shape) triple exposing the segment's first
    `byte_length` bytes as typed elements. Nothing is ever copied.

    Args:
        segment: An `OwnershipWrapper`, or a bare `Segment` to be wrapped.
        dtype: Element type of the data.
        shape: Extents and the order they are laid out in.
        owner: Required when `segment` is a bare Segment: whether closing
            this view releases it. Ignored for an OwnershipWrapper.
        config: (Optional) Overrides the process-wide ShmConfig.

    Raises:
        SizeOverflowError: If the byte length exceeds the configured limit.
        OutOfRangeError: If the byte length exceeds the segment's size.

    Usage:
        with BufferView.allocate(DType.FLOAT32, Shape(Order.F_ORDER, 4, 3, 2)) as view:
            arr = view.ndarray()          # shape (2, 3, 4), shares memory
            view.set_element_at((1, 0, 0), 5.0, order=Order.F_ORDER)
    """
    def __init__(
        self,
        segment: Union[OwnershipWrapper, Segment],
        dtype: DType,
        shape: Shape,
        *,
        owner: Optional[bool] = None,
        config: Optional[ShmConfig] = None,
    ):
        self._config = config or get_default_config()
        if isinstance(segment, OwnershipWrapper):
            wrapper = segment
        elif isinstance(segment, Segment):
            if owner is None:
                raise InvalidArgumentError(
                    "owner must be given explicitly when wrapping a bare Segment."
                )
            wrapper = OwnershipWrapper(segment, owner)
        else:
            raise InvalidArgumentError(
                f"Expected an OwnershipWrapper or Segment, got {type(segment).__name__}"
            )
        if not isinstance(shape, Shape):
            raise InvalidArgumentError(f"Expected a Shape, got {type(shape).__name__}")

        byte_length = required_byte_length(dtype, shape, self._config)
        available = wrapper.segment.rsize
        if byte_length > available:
            raise OutOfRangeError(
                f"{dtype.label} array of shape {shape.to_extents()} needs {byte_length} bytes "
                f"but the segment only has {available}"
            )

        self._wrapper = wrapper
        self._dtype = dtype
        self._shape = shape
        self._byte_length = byte_length
        self._np_dtype = dtypes.numpy_dtype(dtype)

    @classmethod
    def allocate(cls, dtype: DType, shape: Shape, config: Optional[ShmConfig] = None) -> "BufferView":
        """
        Allocates a new shared segment of exactly the required byte length
        and returns a view that owns it.
        """
        config = config or get_default_config()
        byte_length = required_byte_length(dtype, shape, config)
        segment = SharedMemorySegment.allocate(byte_length, config)
        return cls(OwnershipWrapper(segment, owner=True), dtype, shape, config=config)

    @classmethod
    def attach(cls, descriptor: ArrayDescriptor, config: Optional[ShmConfig] = None) -> "BufferView":
        """
        Re-attaches, without ownership, to a segment described by another
        process. Closing the returned view unmaps the segment locally only.
        """
        segment = SharedMemorySegment.attach(descriptor.shm_name, rsize=descriptor.rsize)
        try:
            shape = Shape(descriptor.order, *descriptor.shape)
            wrapper = OwnershipWrapper(segment, owner=False, detach_on_close=True)
            return cls(wrapper, descriptor.dtype, shape, config=config)
        except Exception:
            segment.detach()
            raise

    # --- Metadata ---

    @property
    def dtype(self) -> DType:
        return self._dtype

    @property
    def shape(self) -> Shape:
        return self._shape

    def shape_in(self, order: Order) -> Shape:
        return self._shape.as_order(order)

    @property
    def byte_length(self) -> int:
        return self._byte_length

    @property
    def wrapper(self) -> OwnershipWrapper:
        return self._wrapper

    @property
    def config(self) -> ShmConfig:
        return self._config

    def descriptor(self, order: Order = Order.C_ORDER) -> ArrayDescriptor:
        """
        The record another process needs to re-attach this view.

        Raises:
            InvalidArgumentError: If the segment has no shareable name.
        """
        segment = self._wrapper.segment
        if segment.name is None:
            raise InvalidArgumentError("View is backed by a process-local segment and cannot be shared.")
        return ArrayDescriptor(
            dtype=self._dtype,
            shape=self._shape.to_extents(order),
            order=Order.from_label(order),
            shm_name=segment.name,
            rsize=segment.rsize,
        )

    # --- Data access ---

    def raw_bytes(self) -> memoryview:
        """The bytes `[0, byte_length)` of the segment; valid while it is open."""
        return self._wrapper.buf[:self._byte_length]

    def _element_slot(self, indices: Sequence[int], order: Optional[Order]) -> np.ndarray:
        if len(indices) == 1 and isinstance(indices[0], (tuple, list)):
            indices = tuple(indices[0])
        linear = self._shape.linear_index(indices, order)
        return np.frombuffer(
            self.raw_bytes(),
            dtype=self._np_dtype,
            count=1,
            offset=linear * self._np_dtype.itemsize,
        )

    def element_at(self, *indices: int, order: Optional[Order] = None) -> Any:
        """
        Reads one element. `indices` are listed in `order` (default: the
        view's own shape order). Complex elements come back as `complex`,
        booleans as `bool`, integers as `int`.
        """
        return self._element_slot(indices, order)[0].item()

    def set_element_at(self, indices: Sequence[int], value: Any, order: Optional[Order] = None) -> None:
        """Writes one element at `indices` (listed in `order`)."""
        self._element_slot(tuple(indices), order)[0] = value

    def __getitem__(self, indices):
        if not isinstance(indices, tuple):
            indices = (indices,)
        return self.element_at(*indices)

    def __setitem__(self, indices, value) -> None:
        if not isinstance(indices, tuple):
            indices = (indices,)
        self.set_element_at(indices, value)

    def ndarray(self, order: Optional[Order] = None, element_type: Any = None) -> np.ndarray:
        """Returns an `np.ndarray` sharing this view's bytes. See `adapters.as_array`."""
        return adapters.as_array(self, element_type=element_type, order=order)

    def reinterpret(self, dtype: DType, shape: Shape) -> "BufferView":
        """
        Returns a non-owning view of the same segment with a different DType
        and Shape. Closing it never releases the segment.
        """
        wrapper = OwnershipWrapper(self._wrapper.segment, owner=False)
        return BufferView(wrapper, dtype, shape, config=self._config)

    # --- Lifecycle ---

    def close(self) -> None:
        self._wrapper.close()

    @property
    def closed(self) -> bool:
        return self._wrapper.closed

    def __repr__(self) -> str:
        return (f"BufferView(dtype={self._dtype.label}, shape={self._shape!r}, "
                f"byte_length={self._byte_length}, owner={self._wrapper.owner})")
