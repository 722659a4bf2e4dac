# tests/test_ownership.py
"""
Tests for OwnershipWrapper: a segment is released exactly once, and only by
its owner.
"""
import pytest
import numpy as np

from ndarray_shm import (
    BufferView, DType, Order, OwnershipWrapper, Shape, ShmArray,
    SharedMemorySegment, ClosedError, InvalidArgumentError, SegmentError,
)

def test_double_close_releases_once(recording_segment):
    wrapper = OwnershipWrapper(recording_segment, owner=True)
    wrapper.close()
    wrapper.close()

    assert wrapper.closed
    assert recording_segment.release_calls == 1

def test_non_owner_never_releases(recording_segment):
    wrapper = OwnershipWrapper.wrap(recording_segment, owner=False)
    wrapper.close()
    wrapper.close()

    assert recording_segment.release_calls == 0
    assert recording_segment.detach_calls == 0

def test_non_owner_can_detach_on_close(recording_segment):
    wrapper = OwnershipWrapper(recording_segment, owner=False, detach_on_close=True)
    wrapper.close()
    wrapper.close()

    assert recording_segment.release_calls == 0
    assert recording_segment.detach_calls == 1

def test_wrap_passes_detach_on_close(recording_segment):
    wrapper = OwnershipWrapper.wrap(recording_segment, owner=False, detach_on_close=True)
    wrapper.close()

    assert recording_segment.detach_calls == 1

def test_owner_flag_must_be_a_bool(recording_segment):
    with pytest.raises(InvalidArgumentError, match="owner must be a bool"):
        OwnershipWrapper(recording_segment, owner=1)
    with pytest.raises(InvalidArgumentError, match="Expected a Segment"):
        OwnershipWrapper(bytearray(4), owner=True)

def test_context_manager_closes(recording_segment):
    with OwnershipWrapper(recording_segment, owner=True) as wrapper:
        assert len(wrapper.buf) == 64
    assert wrapper.closed
    assert recording_segment.release_calls == 1
    with pytest.raises(ClosedError, match="closed OwnershipWrapper"):
        _ = wrapper.buf

def test_views_over_non_owning_wrapper_do_not_release(recording_segment):
    owner = OwnershipWrapper(recording_segment, owner=True)
    borrowed = BufferView(recording_segment, DType.INT32, Shape(Order.C_ORDER, 4), owner=False)
    borrowed.close()
    assert recording_segment.release_calls == 0

    owning = BufferView(owner, DType.INT32, Shape(Order.C_ORDER, 16))
    owning.close()
    owning.close()
    assert recording_segment.release_calls == 1

def test_shared_memory_is_gone_after_owner_closes():
    view = BufferView.allocate(DType.UINT8, Shape(Order.C_ORDER, 16))
    name = view.wrapper.segment.name
    view.close()

    with pytest.raises(SegmentError) as excinfo:
        SharedMemorySegment.attach(name)
    assert excinfo.value.segment_name == name

def test_non_owning_attachment_keeps_segment_alive():
    with BufferView.allocate(DType.UINT8, Shape(Order.C_ORDER, 16)) as view:
        view[3] = 7
        attached = BufferView(
            SharedMemorySegment.attach(view.wrapper.segment.name),
            DType.UINT8, Shape(Order.C_ORDER, 16), owner=False,
        )
        attached.close()
        # Still attachable: the non-owner did not unlink it
        again = SharedMemorySegment.attach(view.wrapper.segment.name, rsize=16)
        assert again.buf[3] == 7
        again.detach()

def test_release_with_live_numpy_view_still_frees_the_name(caplog):
    img = ShmArray.new(np.int16, 3, 2)
    name = img.view.wrapper.segment.name
    leaked = img.array
    leaked[2, 1] = 7
    with caplog.at_level("WARNING", logger="ndarray_shm.lowlevel"):
        img.close()
    assert "still referenced by live views" in caplog.text
    with pytest.raises(SegmentError):
        SharedMemorySegment.attach(name)

    # The mapping outlives the segment name until the array is dropped
    assert leaked[2, 1] == 7
    leaked[0, 0] = 3
    np.testing.assert_array_equal(leaked.sum(), 10)
    del leaked

def test_detached_view_keeps_arrays_readable():
    with ShmArray.new(np.float64, 3) as img:
        img.array[1] = 2.5
        attached = BufferView.attach(img.descriptor())
        arr = attached.ndarray()
        attached.close()
        assert attached.closed
        assert arr[1] == 2.5
        img.array[2] = 4.0
        assert arr[2] == 4.0
        del arr

def test_release_without_views_logs_nothing(caplog):
    segment = SharedMemorySegment.allocate(8)
    with caplog.at_level("WARNING", logger="ndarray_shm.lowlevel"):
        segment.release()
    assert caplog.text == ""
