# ndarray_shm/lowlevel.py
"""
Concrete segments on top of `multiprocessing.shared_memory`.

This module isolates the shared memory boundary from the rest of the library:
it is the only place that allocates, attaches or frees OS-level segments.
"""

import logging
import os
import sys
import uuid
import weakref
from multiprocessing.shared_memory import SharedMemory
from typing import Any, Optional

from .abc import Segment
from .config import ShmConfig, get_default_config
from .exceptions import ClosedError, InvalidArgumentError, OutOfRangeError, SegmentError

logger = logging.getLogger(__name__)


class SharedMemorySegment(Segment):
    """
    A thin wrapper over a `SharedMemory` block.
    It remembers the requested size and translates OS errors.

    Example:
        seg = SharedMemorySegment.allocate(96)
        other = SharedMemorySegment.attach(seg.name, rsize=96)
        other.detach()
        seg.release()
    """
    def __init__(self, shm: SharedMemory, rsize: int):
        self._shm = shm
        self._rsize = rsize
        self._detached = False
        self._released = False

    @classmethod
    def allocate(cls, byte_length: int, config: Optional[ShmConfig] = None) -> "SharedMemorySegment":
        """
        Creates a new segment of at least `byte_length` bytes.

        Zero-byte requests map a single byte because the OS refuses empty
        segments; `rsize` still reports 0.

        Raises:
            InvalidArgumentError: If `byte_length` is negative.
            SegmentError: If the OS refuses the allocation.
        """
        config = config or get_default_config()
        if byte_length < 0:
            raise InvalidArgumentError(f"byte_length must be non-negative, got {byte_length}")
        name = f"{config.name_prefix}{uuid.uuid4().hex[:16]}"
        try:
            shm = SharedMemory(name=name, create=True, size=max(byte_length, 1))
        except (OSError, ValueError) as e:
            raise SegmentError.from_os_error(e, segment_name=name) from e
        logger.debug("Allocated shared memory %s (%d bytes requested, %d mapped)",
                     shm.name, byte_length, shm.size)
        return cls(shm, byte_length)

    @classmethod
    def attach(cls, name: str, rsize: Optional[int] = None) -> "SharedMemorySegment":
        """
        Attaches to an existing segment by name, without taking ownership.

        Raises:
            SegmentError: If no segment with that name exists.
            OutOfRangeError: If the segment is smaller than `rsize`.
        """
        kwargs: dict[str, Any] = {}
        if sys.version_info >= (3, 13):
            # The creator is responsible for unlinking
            kwargs["track"] = False
        try:
            shm = SharedMemory(name=name, **kwargs)
        except (OSError, ValueError) as e:
            raise SegmentError.from_os_error(e, segment_name=name) from e
        if rsize is None:
            rsize = shm.size
        elif rsize > shm.size:
            shm.close()
            raise OutOfRangeError(
                f"Segment '{name}' maps {shm.size} bytes but {rsize} were requested"
            )
        logger.debug("Attached shared memory %s (%d bytes)", shm.name, shm.size)
        return cls(shm, rsize)

    @property
    def name(self) -> str:
        return self._shm.name

    @property
    def size(self) -> int:
        return self._shm.size

    @property
    def rsize(self) -> int:
        return self._rsize

    @property
    def buf(self) -> memoryview:
        if self._detached:
            raise ClosedError(f"Shared memory '{self.name}' is no longer mapped.")
        return self._shm.buf

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        try:
            self._shm.unlink()
        except FileNotFoundError as e:
            raise SegmentError.from_os_error(e, segment_name=self.name) from e
        finally:
            self.detach()
        logger.debug("Released shared memory %s", self.name)

    def detach(self) -> None:
        if self._detached:
            return
        self._detached = True
        shm = self._shm
        # SharedMemory.close() unmaps even while numpy arrays still point into
        # the mapping. Only this object's references are dropped; the mmap is
        # unmapped when its last referent is collected.
        mapping = weakref.ref(shm._mmap)
        shm._buf = None
        shm._mmap = None
        if shm._fd >= 0:
            os.close(shm._fd)
            shm._fd = -1
        if mapping() is not None:
            logger.warning("Shared memory %s is still referenced by live views; "
                           "its mapping will be freed with the last one", self.name)

    def __repr__(self) -> str:
        return f"SharedMemorySegment(name='{self.name}', rsize={self._rsize}, size={self.size})"


class BytesSegment(Segment):
    """
    A process-local segment over an existing buffer (e.g. a `bytearray`).

    Useful for wrapping a foreign in-process buffer without copying it.
    Read-only buffers produce read-only views.
    """
    def __init__(self, data: Any, name: Optional[str] = None):
        try:
            view = memoryview(data)
        except TypeError as e:
            raise InvalidArgumentError(f"Object does not expose a buffer: {type(data).__name__}") from e
        if not view.c_contiguous:
            raise InvalidArgumentError("Buffer must be C-contiguous.")
        self._view: Optional[memoryview] = view.cast('B')
        self._name = name

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def size(self) -> int:
        return self.buf.nbytes

    @property
    def readonly(self) -> bool:
        return self.buf.readonly

    @property
    def buf(self) -> memoryview:
        if self._view is None:
            raise ClosedError("Segment has been released.")
        return self._view

    def release(self) -> None:
        self._view = None

    def detach(self) -> None:
        self._view = None
