# ndarray_shm/convenience.py
"""
High-level convenience functions for common single-array operations.
"""
from typing import Any, Optional, Union
import numpy as np

from . import dtypes
from .config import ShmConfig
from .exceptions import InvalidArgumentError
from .shape import Shape
from .shm_array import ShmArray
from .types import Order
from .view import BufferView
from ._internal import json_builder

def new_view(
    element_type: Any,
    *dims: int,
    order: Order = Order.F_ORDER,
    config: Optional[ShmConfig] = None
) -> BufferView:
    """
    Allocates an owning BufferView for elements of a native type.

    Args:
        element_type: Anything `np.dtype()` accepts, or a DType.
        *dims: Extents, listed in `order`.
        order: Order of `dims`. Defaults to F order, as image libraries
               count dimensions.
        config: (Optional) Overrides the process-wide ShmConfig.

    Raises:
        InvalidArgumentError: If the element type has no DType.
    """
    return BufferView.allocate(dtypes.dtype_for(element_type), Shape(order, *dims), config)


def as_buffer_view(
    data: Union[BufferView, ShmArray, np.ndarray],
    *,
    allow_copy: bool = True,
    config: Optional[ShmConfig] = None
) -> BufferView:
    """
    Returns a BufferView holding `data`.

    - A BufferView is returned as is.
    - A ShmArray returns its wrapped view.
    - Any other NumPy array is copied into a new segment if `allow_copy`.

    Raises:
        InvalidArgumentError: If `data` is not backed by shared memory and
            copying is not allowed.
    """
    if isinstance(data, BufferView):
        return data
    if isinstance(data, ShmArray):
        return data.view
    if not allow_copy:
        raise InvalidArgumentError(
            f"{type(data).__name__} is not backed by shared memory and copying is not allowed."
        )
    return ShmArray.copy_of(np.asarray(data), config=config).view


def to_json(data: Union[BufferView, ShmArray]) -> str:
    """Encodes the record another process needs to attach to `data`."""
    return json_builder.encode_descriptor(as_buffer_view(data, allow_copy=False).descriptor())


def from_json(text: Union[str, bytes], config: Optional[ShmConfig] = None) -> BufferView:
    """
    Attaches, without ownership, to the array described by `text`.

    Raises:
        InvalidArgumentError: If `text` is not a valid ndarray record.
        SegmentError: If the named segment does not exist.
    """
    return BufferView.attach(json_builder.decode_descriptor(text), config)
