# tests/conftest.py
"""
Pytest configuration and shared fixtures for the test suite.
"""
import pytest
import numpy as np

from ndarray_shm import BufferView, BytesSegment, DType, Order, Shape

class RecordingSegment(BytesSegment):
    """A process-local segment that counts calls made by its owner."""
    def __init__(self, size: int):
        super().__init__(bytearray(size), name="recording")
        self.release_calls = 0
        self.detach_calls = 0

    def release(self) -> None:
        self.release_calls += 1

    def detach(self) -> None:
        self.detach_calls += 1

@pytest.fixture
def recording_segment():
    """A 64-byte segment whose release/detach calls are counted."""
    return RecordingSegment(64)

@pytest.fixture
def float_view():
    """
    A FLOAT32 view of F-order extents (4, 3, 2) over fresh shared memory,
    filled with 0..23 in memory order.
    """
    view = BufferView.allocate(DType.FLOAT32, Shape(Order.F_ORDER, 4, 3, 2))
    np.frombuffer(view.raw_bytes(), dtype=np.float32)[:] = np.arange(24, dtype=np.float32)
    yield view
    view.close()
