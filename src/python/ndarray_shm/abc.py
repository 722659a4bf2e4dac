# ndarray_shm/abc.py
"""Abstract Base Classes for the ndarray_shm library."""

import abc
from typing import Optional

from .exceptions import ClosedError

class ClosableBase(abc.ABC):
    """Abstract base class for objects that hold on to a segment."""

    @abc.abstractmethod
    def close(self) -> None:
        """
        Closes the handle. Calling it again has no effect.
        Subsequent operations on the object will raise an error.
        """
        raise NotImplementedError

    @property
    @abc.abstractmethod
    def closed(self) -> bool:
        """Returns True if the handle is closed."""
        raise NotImplementedError

    def __enter__(self):
        if self.closed:
            raise ClosedError(f"Cannot enter context with a closed {type(self).__name__}.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class Segment(abc.ABC):
    """
    A block of bytes owned by something outside this library, typically a
    named shared memory segment.

    Implementations must expose the bytes without copying them.
    """

    @property
    @abc.abstractmethod
    def name(self) -> Optional[str]:
        """Identifier another process can use to attach, or None if local."""
        raise NotImplementedError

    @property
    @abc.abstractmethod
    def size(self) -> int:
        """Number of addressable bytes (may exceed the requested size)."""
        raise NotImplementedError

    @property
    def rsize(self) -> int:
        """Number of bytes originally requested."""
        return self.size

    @property
    @abc.abstractmethod
    def buf(self) -> memoryview:
        """A byte-formatted memoryview over the whole segment."""
        raise NotImplementedError

    @abc.abstractmethod
    def release(self) -> None:
        """Frees the segment for every process using it."""
        raise NotImplementedError

    @abc.abstractmethod
    def detach(self) -> None:
        """Drops this process's mapping without freeing the segment."""
        raise NotImplementedError
