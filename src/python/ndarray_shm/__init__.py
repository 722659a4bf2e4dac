# ndarray_shm/__init__.py
"""
Zero-copy typed NumPy views over shared memory segments.
"""
from .types import DType, Order, Primitive
from .dtypes import (
    DTypeInfo, storage_primitive, bytes_per_lane, lanes, bytes_per_element,
    numpy_dtype, dtype_for,
)
from .shape import Shape
from .config import ShmConfig, get_default_config, set_default_config, INT32_MAX_BYTES
from .abc import Segment
from .lowlevel import SharedMemorySegment, BytesSegment
from .ownership import OwnershipWrapper
from .view import BufferView, required_byte_length
from .adapters import as_array, check_element_type
from .dataclasses import ArrayDescriptor
from .shm_array import ShmArray
from .convenience import new_view, as_buffer_view, to_json, from_json
from .exceptions import (
    NdShmError, InvalidArgumentError, SizeOverflowError, OutOfRangeError,
    TypeMismatchError, ClosedError, SegmentError,
)

__version__ = "0.1.0"


# Define what gets imported with 'from ndarray_shm import *'
__all__ = [
    'DType',
    'Order',
    'Primitive',
    'DTypeInfo',
    'storage_primitive',
    'bytes_per_lane',
    'lanes',
    'bytes_per_element',
    'numpy_dtype',
    'dtype_for',
    'Shape',
    'ShmConfig',
    'get_default_config',
    'set_default_config',
    'INT32_MAX_BYTES',
    'Segment',
    'SharedMemorySegment',
    'BytesSegment',
    'OwnershipWrapper',
    'BufferView',
    'required_byte_length',
    'as_array',
    'check_element_type',
    'ArrayDescriptor',
    'ShmArray',
    'new_view',
    'as_buffer_view',
    'to_json',
    'from_json',
    'NdShmError',
    'InvalidArgumentError',
    'SizeOverflowError',
    'OutOfRangeError',
    'TypeMismatchError',
    'ClosedError',
    'SegmentError',
    '__version__',
]
