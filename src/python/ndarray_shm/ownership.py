# ndarray_shm/ownership.py
"""
Ties a segment's lifetime to a single releasing owner.

Several views may share one segment, but only the wrapper created with
`owner=True` frees it. Views must not be used once their wrapper is closed;
nothing here can stop a caller from doing so through a numpy array it kept.
"""
import logging

from .abc import ClosableBase, Segment
from .exceptions import ClosedError, InvalidArgumentError

logger = logging.getLogger(__name__)


class OwnershipWrapper(ClosableBase):
    """
    Lifecycle guard around a `Segment`.

    Args:
        segment: The segment to guard.
        owner: Whether closing this wrapper releases the segment. There is no
            default: callers state whether they own what they wrap.
        detach_on_close: For non-owning wrappers, drop this process's mapping
            on close (never frees the segment itself).
    """
    def __init__(self, segment: Segment, owner: bool, *, detach_on_close: bool = False):
        if not isinstance(segment, Segment):
            raise InvalidArgumentError(f"Expected a Segment, got {type(segment).__name__}")
        if not isinstance(owner, bool):
            raise InvalidArgumentError(f"owner must be a bool, got {owner!r}")
        self._segment = segment
        self._owner = owner
        self._detach_on_close = detach_on_close
        self._closed = False

    @classmethod
    def wrap(cls, segment: Segment, owner: bool, *, detach_on_close: bool = False) -> "OwnershipWrapper":
        return cls(segment, owner, detach_on_close=detach_on_close)

    @property
    def segment(self) -> Segment:
        return self._segment

    @property
    def owner(self) -> bool:
        return self._owner

    @property
    def buf(self) -> memoryview:
        if self._closed:
            raise ClosedError("Operation attempted on a closed OwnershipWrapper.")
        return self._segment.buf

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._owner:
            logger.debug("Closing owner of segment %s", self._segment.name)
            self._segment.release()
        elif self._detach_on_close:
            self._segment.detach()

    @property
    def closed(self) -> bool:
        return self._closed

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"OwnershipWrapper({self._segment!r}, owner={self._owner}, {state})"
