# ndarray_shm/exceptions.py
"""Custom exception types for the ndarray_shm library."""

from typing import Optional

class NdShmError(Exception):
    """Base exception for all errors raised by this library."""
    pass

class InvalidArgumentError(NdShmError, ValueError):
    """An unmapped dtype, a malformed extent, or a malformed descriptor."""
    pass

class SizeOverflowError(NdShmError, OverflowError):
    """Element count times element width exceeds the addressable limit."""
    pass

class OutOfRangeError(NdShmError, IndexError):
    """A view or an index reaches past the bytes that back it."""
    pass

class TypeMismatchError(NdShmError, TypeError):
    """A caller element type is incompatible with a view's DType."""
    pass

class ClosedError(NdShmError, ValueError):
    """Access attempted through a wrapper that has already been closed."""
    pass

class SegmentError(NdShmError, OSError):
    """
    Error raised when the shared memory collaborator fails to allocate,
    attach or release a segment.

    This wraps the OS-level exception raised by `multiprocessing.shared_memory`.

    Attributes:
        message (str): The primary error message.
        segment_name (str | None): Name of the segment involved, if known.
    """
    def __init__(self, message: str, *, segment_name: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.segment_name = segment_name

    def __str__(self) -> str:
        if self.segment_name is None:
            return self.message
        return f"{self.message} (segment='{self.segment_name}')"

    @classmethod
    def from_os_error(cls, exc: Exception, *, segment_name: Optional[str] = None) -> "SegmentError":
        """Factory method to create a SegmentError from a stdlib exception."""
        message = getattr(exc, "strerror", None) or str(exc) or type(exc).__name__
        return cls(message, segment_name=segment_name)
