# ndarray_shm/dtypes.py
"""
The DType table: storage primitive, lane width and lane count of every DType.

Every DType appears exactly once in `_TABLE`. New element types are added by
extending the table and the `DType` enumeration together.
"""
from typing import Any, NamedTuple
import numpy as np

from .types import DType, Primitive
from .exceptions import InvalidArgumentError
from ._internal import numpy_utils

class DTypeInfo(NamedTuple):
    """Storage layout of a single DType."""
    primitive: Primitive
    bytes_per_lane: int
    lanes: int

    @property
    def bytes_per_element(self) -> int:
        return self.bytes_per_lane * self.lanes


_TABLE: dict[DType, DTypeInfo] = {
    DType.INT8: DTypeInfo(Primitive.BYTE, 1, 1),
    DType.UINT8: DTypeInfo(Primitive.BYTE, 1, 1),
    DType.INT16: DTypeInfo(Primitive.SHORT, 2, 1),
    DType.UINT16: DTypeInfo(Primitive.SHORT, 2, 1),
    DType.INT32: DTypeInfo(Primitive.INT, 4, 1),
    DType.UINT32: DTypeInfo(Primitive.INT, 4, 1),
    DType.INT64: DTypeInfo(Primitive.LONG, 8, 1),
    DType.UINT64: DTypeInfo(Primitive.LONG, 8, 1),
    DType.FLOAT32: DTypeInfo(Primitive.FLOAT, 4, 1),
    DType.FLOAT64: DTypeInfo(Primitive.DOUBLE, 8, 1),
    DType.COMPLEX64: DTypeInfo(Primitive.FLOAT, 4, 2),
    DType.COMPLEX128: DTypeInfo(Primitive.DOUBLE, 8, 2),
    DType.BOOL: DTypeInfo(Primitive.BOOLEAN, 1, 1),
}

if set(_TABLE) != set(DType):
    raise RuntimeError("DType table must cover every DType member")


def info(dtype: DType) -> DTypeInfo:
    """
    Looks up the storage layout of `dtype`.

    Raises:
        InvalidArgumentError: If `dtype` is not a DType member.
    """
    if not isinstance(dtype, DType):
        raise InvalidArgumentError(f"Not a DType: {dtype!r}")
    return _TABLE[dtype]

def storage_primitive(dtype: DType) -> Primitive:
    return info(dtype).primitive

def bytes_per_lane(dtype: DType) -> int:
    return info(dtype).bytes_per_lane

def lanes(dtype: DType) -> int:
    return info(dtype).lanes

def bytes_per_element(dtype: DType) -> int:
    return info(dtype).bytes_per_element

def numpy_dtype(dtype: DType) -> np.dtype:
    info(dtype)
    return numpy_utils.to_numpy_dtype(dtype)

def dtype_for(element_type: Any) -> DType:
    """
    Returns the DType for a caller's native element type.

    Args:
        element_type: A DType, or anything `np.dtype()` accepts
            (e.g. `np.float32`, `"uint16"`, `complex`, `bool`).

    Raises:
        InvalidArgumentError: If the element type has no DType counterpart.
    """
    if isinstance(element_type, DType):
        return element_type
    np_dtype = numpy_utils.resolve_numpy_dtype(element_type)
    return numpy_utils.from_numpy_dtype(np_dtype)

def layout_of(np_dtype: np.dtype) -> tuple[Primitive, int]:
    """
    Returns the (storage primitive, lane-equivalent byte width) of a NumPy
    element type, for comparing caller element types against a DType.

    Raises:
        InvalidArgumentError: If the NumPy dtype has no storage layout here.
    """
    dtype = numpy_utils.from_numpy_dtype(np_dtype)
    layout = _TABLE[dtype]
    return layout.primitive, layout.bytes_per_element
