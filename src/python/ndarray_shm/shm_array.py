# ndarray_shm/shm_array.py
"""
ShmArray: a NumPy array living in shared memory, bundled with the BufferView
that owns the memory.
"""
from typing import Any, Optional
import numpy as np

from . import dtypes
from .abc import ClosableBase
from .config import ShmConfig
from .dataclasses import ArrayDescriptor
from .shape import Shape
from .types import DType, Order
from .view import BufferView
from ._internal import numpy_utils


class ShmArray(ClosableBase):
    """
    A shared-memory array for image-processing code.

    `array` is an `np.ndarray` over the segment whose axes are listed in
    F order (first index fastest), the way image libraries count dimensions.
    `view` is the underlying BufferView; pass `descriptor()` to another
    process to share the data.

    Usage:
        with ShmArray.new(np.float32, 4, 3, 2) as img:
            img.array[...] = np.arange(24).reshape(img.array.shape, order='F')
            payload = img.descriptor()
    """
    def __init__(self, view: BufferView, element_type: Any = None):
        """
        Wraps an existing view.

        Args:
            view: The BufferView to wrap. The ShmArray closes it on close().
            element_type: (Optional) Element type of `array`. Must match the
                view's storage layout; defaults to the view's own type.

        Raises:
            TypeMismatchError: If `element_type` does not fit the view.
        """
        self._view = view
        self._array = view.ndarray(order=Order.F_ORDER, element_type=element_type)

    @classmethod
    def new(
        cls,
        element_type: Any,
        *dims: int,
        config: Optional[ShmConfig] = None
    ) -> "ShmArray":
        """
        Allocates a zeroed shared array of `element_type` with F-order `dims`.

        Raises:
            InvalidArgumentError: If `element_type` has no DType.
            SizeOverflowError: If the array is too large to address.
        """
        dtype = dtypes.dtype_for(element_type)
        view = BufferView.allocate(dtype, Shape(Order.F_ORDER, *dims), config)
        return cls(view, element_type)

    @classmethod
    def copy_of(cls, data: np.ndarray, config: Optional[ShmConfig] = None) -> "ShmArray":
        """
        Copies an array into a new shared segment.

        `data` is read in its own index order: `copy.array[i, j]` is
        `data[i, j]`, whatever the memory layout of `data`.
        """
        numpy_utils.validate_array_for_copy(data)
        copy = cls.new(data.dtype, *data.shape, config=config)
        copy.array[...] = data
        return copy

    @property
    def view(self) -> BufferView:
        return self._view

    @property
    def array(self) -> np.ndarray:
        return self._array

    @property
    def dtype(self) -> DType:
        return self._view.dtype

    @property
    def shape(self) -> Shape:
        return self._view.shape.as_order(Order.F_ORDER)

    def descriptor(self) -> ArrayDescriptor:
        return self._view.descriptor()

    def copy(self) -> "ShmArray":
        """A new ShmArray, in its own segment, holding the same data."""
        return ShmArray.copy_of(self._array, config=self._view.config)

    def close(self) -> None:
        # Drop the export on the segment before it is unmapped
        self._array = None
        self._view.close()

    @property
    def closed(self) -> bool:
        return self._view.closed

    def __repr__(self) -> str:
        return f"ShmArray(dtype={self.dtype.label}, shape={self.shape.to_extents()})"
