# ndarray_shm/_internal/numpy_utils.py

"""
Internal utilities for interacting with NumPy dtypes and arrays.

This module handles conversion between NumPy's data types and the `DType`
enumeration, and validation of arrays that are about to be copied into a
shared segment.
"""

from typing import Any
import numpy as np

from ..types import DType
from ..exceptions import InvalidArgumentError

# --- Mappings ---

# Maps each DType to its native-byte-order NumPy dtype.
_DTYPE_TO_NP: dict[DType, np.dtype] = {
    DType.INT8: np.dtype('int8'),
    DType.INT16: np.dtype('int16'),
    DType.INT32: np.dtype('int32'),
    DType.INT64: np.dtype('int64'),
    DType.UINT8: np.dtype('uint8'),
    DType.UINT16: np.dtype('uint16'),
    DType.UINT32: np.dtype('uint32'),
    DType.UINT64: np.dtype('uint64'),
    DType.FLOAT32: np.dtype('float32'),
    DType.FLOAT64: np.dtype('float64'),
    DType.COMPLEX64: np.dtype('complex64'),
    DType.COMPLEX128: np.dtype('complex128'),
    DType.BOOL: np.dtype('bool'),
}

# Maps NumPy dtype objects back to DType members.
_NP_TO_DTYPE: dict[np.dtype, DType] = {
    v: k for k, v in _DTYPE_TO_NP.items()
}

# --- Functions ---

def resolve_numpy_dtype(element_type: Any) -> np.dtype:
    """
    Resolves anything `np.dtype()` accepts (`np.float32`, `"uint16"`,
    `complex`, an `np.dtype`, ...) into a NumPy dtype.

    Raises:
        InvalidArgumentError: If NumPy cannot interpret `element_type`.
    """
    if isinstance(element_type, DType):
        return _DTYPE_TO_NP[element_type]
    if element_type is None:
        # np.dtype(None) silently means float64
        raise InvalidArgumentError("Element type must not be None.")
    try:
        return np.dtype(element_type)
    except TypeError as e:
        raise InvalidArgumentError(f"Not a NumPy element type: {element_type!r}. {e}") from e

def to_numpy_dtype(dtype: DType) -> np.dtype:
    """Returns the NumPy dtype for a DType member."""
    try:
        return _DTYPE_TO_NP[dtype]
    except (KeyError, TypeError):
        raise InvalidArgumentError(f"Not a DType: {dtype!r}") from None

def from_numpy_dtype(np_dtype: np.dtype) -> DType:
    """
    Converts a NumPy dtype to its DType.

    Raises:
        InvalidArgumentError: If the dtype has no DType counterpart
            (e.g. float16, strings, objects, non-native byte order).
    """
    try:
        return _NP_TO_DTYPE[np_dtype]
    except KeyError:
        supported_types = ", ".join(d.name for d in _DTYPE_TO_NP.values())
        raise InvalidArgumentError(
            f"Unsupported NumPy dtype: '{np_dtype}'. "
            f"Supported types are: {supported_types}"
        ) from None

def validate_array_for_copy(arr: np.ndarray) -> DType:
    """
    Ensures a NumPy array can be copied into a shared segment.

    Args:
        arr: The NumPy array to validate.

    Returns:
        The DType the array's elements map to.

    Raises:
        InvalidArgumentError: If the object is not an array or its dtype is
            not supported.
    """
    if not isinstance(arr, np.ndarray):
        raise InvalidArgumentError(
            f"Expected a numpy.ndarray, got {type(arr).__name__}."
        )
    return from_numpy_dtype(arr.dtype)
