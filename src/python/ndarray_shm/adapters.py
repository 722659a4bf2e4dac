# ndarray_shm/adapters.py
"""
The hand-off from a BufferView to NumPy.

`as_array` returns an `np.ndarray` that shares the view's bytes. The array
constructor for each DType comes from the static `_ARRAY_FACTORIES` table;
caller-supplied element types must match the view's storage layout.
"""
from typing import TYPE_CHECKING, Any, Callable, Optional
import numpy as np

from . import dtypes
from .types import DType, Order
from .exceptions import InvalidArgumentError, TypeMismatchError
from ._internal import numpy_utils

if TYPE_CHECKING:
    from .view import BufferView

ArrayFactory = Callable[[memoryview, tuple[int, ...], str], np.ndarray]

def _factory(np_dtype: Any) -> ArrayFactory:
    def create(buffer: memoryview, extents: tuple[int, ...], order: str) -> np.ndarray:
        return np.ndarray(extents, dtype=np_dtype, buffer=buffer, order=order)
    return create

_ARRAY_FACTORIES: dict[DType, ArrayFactory] = {
    DType.INT8: _factory(np.int8),
    DType.INT16: _factory(np.int16),
    DType.INT32: _factory(np.int32),
    DType.INT64: _factory(np.int64),
    DType.UINT8: _factory(np.uint8),
    DType.UINT16: _factory(np.uint16),
    DType.UINT32: _factory(np.uint32),
    DType.UINT64: _factory(np.uint64),
    DType.FLOAT32: _factory(np.float32),
    DType.FLOAT64: _factory(np.float64),
    DType.COMPLEX64: _factory(np.complex64),
    DType.COMPLEX128: _factory(np.complex128),
    DType.BOOL: _factory(np.bool_),
}

if set(_ARRAY_FACTORIES) != set(DType):
    raise RuntimeError("every DType needs an array factory")


def check_element_type(dtype: DType, element_type: Any) -> np.dtype:
    """
    Verifies that `element_type` can wrap bytes laid out as `dtype`.

    The storage primitive and the lane-equivalent byte width must both match.
    Signedness may differ (an INT32 view can be read as uint32); a narrower,
    wider or differently-laned type cannot.

    Returns:
        The resolved NumPy dtype.

    Raises:
        TypeMismatchError: If the element type does not fit `dtype`.
    """
    expected = dtypes.info(dtype)
    try:
        np_dtype = numpy_utils.resolve_numpy_dtype(element_type)
        primitive, width = dtypes.layout_of(np_dtype)
    except InvalidArgumentError as e:
        raise TypeMismatchError(
            f"Element type {element_type!r} cannot wrap {dtype.label} data. {e}"
        ) from e
    if (primitive, width) != (expected.primitive, expected.bytes_per_element):
        raise TypeMismatchError(
            f"Element type '{np_dtype}' ({primitive.name} x {width} bytes) does not match "
            f"{dtype.label} ({expected.primitive.name} x {expected.bytes_per_element} bytes)"
        )
    return np_dtype


def as_array(
    view: "BufferView",
    element_type: Any = None,
    order: Optional[Order] = None,
) -> np.ndarray:
    """
    Wraps a BufferView as an `np.ndarray` without copying.

    Args:
        view: The view to wrap.
        element_type: (Optional) Element type of the returned array. If None,
            the type registered for `view.dtype` is used.
        order: (Optional) Order in which the returned array lists its axes.
            Defaults to the view's configured default order. Both orders
            address the same bytes: `a_c[i, j, k] == a_f[k, j, i]`.

    Returns:
        An array backed by the view's segment.

    Raises:
        TypeMismatchError: If `element_type` does not fit the view's DType.
    """
    order = view.config.default_order if order is None else Order.from_label(order)
    extents = view.shape.to_extents(order)
    if element_type is None:
        factory = _ARRAY_FACTORIES[view.dtype]
    else:
        factory = _factory(check_element_type(view.dtype, element_type))
    return factory(view.raw_bytes(), extents, order.numpy_order)
