# tests/test_view.py
"""
Tests for BufferView construction, byte-length checks and element access.
"""
import itertools
import sys
import pytest
import numpy as np

from ndarray_shm import (
    BufferView, BytesSegment, DType, Order, Shape, ShmConfig, OwnershipWrapper,
    SharedMemorySegment, bytes_per_element, required_byte_length,
    ClosedError, InvalidArgumentError, OutOfRangeError, SizeOverflowError,
)

C, F = Order.C_ORDER, Order.F_ORDER

@pytest.mark.parametrize("dtype", list(DType))
@pytest.mark.parametrize("extents", [(), (7,), (4, 3, 2), (3, 0)])
def test_raw_bytes_length_matches_shape_and_dtype(dtype, extents):
    shape = Shape(C, *extents)
    expected = shape.num_elements() * bytes_per_element(dtype)
    segment = BytesSegment(bytearray(expected + 5))

    view = BufferView(segment, dtype, shape, owner=True)
    assert view.byte_length == expected
    assert len(view.raw_bytes()) == expected

def test_view_does_not_copy():
    data = bytearray(8)
    view = BufferView(BytesSegment(data), DType.INT32, Shape(C, 2), owner=False)
    view[1] = 7
    assert np.frombuffer(data, dtype=np.int32)[1] == 7
    data[0:4] = np.array([42], dtype=np.int32).tobytes()
    assert view[0] == 42

def test_construct_fails_when_segment_is_too_small():
    segment = BytesSegment(bytearray(95))
    with pytest.raises(OutOfRangeError, match="needs 96 bytes"):
        BufferView(segment, DType.FLOAT32, Shape(F, 4, 3, 2), owner=False)

def test_oversized_shape_fails_with_size_overflow():
    segment = BytesSegment(bytearray(16))
    huge = Shape(C, 2**40, 2**20)
    with pytest.raises(SizeOverflowError):
        BufferView(segment, DType.FLOAT64, huge, owner=False)

def test_configured_byte_limit_is_enforced():
    config = ShmConfig(max_byte_length=100)
    assert required_byte_length(DType.INT8, Shape(C, 100), config) == 100
    with pytest.raises(SizeOverflowError, match="limit of 100"):
        required_byte_length(DType.INT16, Shape(C, 51), config)

def test_allocate_rejects_oversized_before_allocating():
    with pytest.raises(SizeOverflowError):
        BufferView.allocate(DType.COMPLEX128, Shape(C, sys.maxsize // 8))

def test_owner_flag_is_required_for_bare_segments():
    with pytest.raises(InvalidArgumentError, match="owner must be given"):
        BufferView(BytesSegment(bytearray(4)), DType.INT8, Shape(C, 4))

def test_rejects_bad_arguments():
    segment = BytesSegment(bytearray(4))
    with pytest.raises(InvalidArgumentError):
        BufferView(segment, DType.INT8, (4,), owner=False)
    with pytest.raises(InvalidArgumentError):
        BufferView(segment, "int8", Shape(C, 4), owner=False)
    with pytest.raises(InvalidArgumentError):
        BufferView(b"\x00" * 4, DType.INT8, Shape(C, 4), owner=False)

def test_element_at_reproduces_linear_writes_row_major():
    view = BufferView.allocate(DType.FLOAT32, Shape(C, 4, 3, 2))
    with view:
        n = 0
        for i, j, k in itertools.product(range(4), range(3), range(2)):
            view.set_element_at((i, j, k), n)
            n += 1
        flat = np.frombuffer(view.raw_bytes(), dtype=np.float32)
        np.testing.assert_array_equal(flat, np.arange(24, dtype=np.float32))
        del flat
        n = 0
        for i, j, k in itertools.product(range(4), range(3), range(2)):
            assert view.element_at(i, j, k) == float(n)
            assert view.element_at(i, j, k) == float(i * 3 * 2 + j * 2 + k)
            n += 1

def test_element_at_reproduces_linear_writes_column_major(float_view):
    # float_view holds 0..23 in memory order under F-order extents (4, 3, 2)
    for i, j, k in itertools.product(range(4), range(3), range(2)):
        assert float_view.element_at(i, j, k, order=F) == float(i + j * 4 + k * 4 * 3)
        # The same element, addressed from the C-order side
        assert float_view.element_at(k, j, i, order=C) == float(i + j * 4 + k * 4 * 3)

def test_item_protocol_uses_shape_order(float_view):
    assert float_view[1, 0, 0] == 1.0
    assert float_view[0, 1, 0] == 4.0
    float_view[3, 2, 1] = -1.5
    assert float_view.element_at(1, 2, 3, order=C) == -1.5

def test_element_access_errors(float_view):
    with pytest.raises(OutOfRangeError):
        float_view.element_at(4, 0, 0)
    with pytest.raises(InvalidArgumentError):
        float_view.element_at(0, 0)

@pytest.mark.parametrize("dtype, value", [
    (DType.INT8, -5),
    (DType.UINT16, 65535),
    (DType.INT64, -(2**62)),
    (DType.UINT64, 2**64 - 1),
    (DType.FLOAT64, 0.1),
    (DType.COMPLEX64, complex(1.5, -2.0)),
    (DType.COMPLEX128, complex(0.1, 0.2)),
    (DType.BOOL, True),
])
def test_element_values_by_dtype(dtype, value):
    shape = Shape(C, 2, 2)
    size = required_byte_length(dtype, shape)
    view = BufferView(BytesSegment(bytearray(size)), dtype, shape, owner=False)
    view.set_element_at((1, 0), value)
    got = view.element_at(1, 0)
    assert got == value
    assert type(got) is type(value)

def test_complex_lanes_are_adjacent_real_and_imaginary():
    shape = Shape(C, 2)
    data = bytearray(16)
    view = BufferView(BytesSegment(data), DType.COMPLEX64, shape, owner=False)
    view[1] = complex(3.0, 4.0)
    lanes = np.frombuffer(data, dtype=np.float32)
    np.testing.assert_array_equal(lanes, [0.0, 0.0, 3.0, 4.0])

def test_read_only_buffer_rejects_writes():
    view = BufferView(BytesSegment(bytes(4)), DType.INT8, Shape(C, 4), owner=False)
    assert view[2] == 0
    with pytest.raises(ValueError):
        view[2] = 1

def test_reinterpret_shares_bytes_without_ownership():
    view = BufferView.allocate(DType.UINT8, Shape(C, 8))
    with view:
        view[0] = 1
        as_int = view.reinterpret(DType.UINT32, Shape(C, 2))
        assert not as_int.wrapper.owner
        assert as_int[0] == int.from_bytes(bytes(view.raw_bytes()[:4]), sys.byteorder)
        as_int.close()
        # Closing the derived view leaves the owner usable
        assert view[0] == 1
        with pytest.raises(OutOfRangeError):
            view.reinterpret(DType.UINT32, Shape(C, 3))
    assert view.closed

def test_closed_view_refuses_access(float_view):
    float_view.close()
    assert float_view.closed
    with pytest.raises(ClosedError):
        float_view.raw_bytes()
    with pytest.raises(ClosedError):
        with float_view:
            pass

def test_views_may_share_one_wrapper():
    segment = BytesSegment(bytearray(8))
    wrapper = OwnershipWrapper(segment, owner=False)
    a = BufferView(wrapper, DType.INT8, Shape(C, 8))
    b = BufferView(wrapper, DType.INT16, Shape(C, 4))
    a[0] = 1
    a[1] = 1
    assert b[0] == 257
    assert a.wrapper is b.wrapper

def test_allocated_segment_has_exact_requested_size():
    view = BufferView.allocate(DType.INT16, Shape(F, 5, 3))
    with view:
        segment = view.wrapper.segment
        assert isinstance(segment, SharedMemorySegment)
        assert segment.rsize == 30
        assert segment.size >= 30
        assert view.wrapper.owner

def test_empty_view_can_be_allocated():
    with BufferView.allocate(DType.FLOAT32, Shape(C, 0, 4)) as view:
        assert view.byte_length == 0
        assert view.wrapper.segment.rsize == 0
        assert view.ndarray().shape == (0, 4)

def test_descriptor_and_attach_share_data(float_view):
    desc = float_view.descriptor()
    assert desc.dtype is DType.FLOAT32
    assert desc.shape == (2, 3, 4)
    assert desc.order is C
    assert desc.rsize == 96

    other = BufferView.attach(desc)
    try:
        assert not other.wrapper.owner
        assert other.shape == float_view.shape.as_order(C)
        assert other.element_at(1, 2, 3) == float_view.element_at(3, 2, 1, order=F)
        other[0, 0, 0] = 99.0
        assert float_view[0, 0, 0] == 99.0
    finally:
        other.close()
    # Closing the attached view does not free the segment
    assert float_view[0, 0, 0] == 99.0

def test_descriptor_requires_a_named_segment():
    view = BufferView(BytesSegment(bytearray(4)), DType.INT8, Shape(C, 4), owner=False)
    with pytest.raises(InvalidArgumentError, match="process-local"):
        view.descriptor()

def test_repr(float_view):
    assert "float32" in repr(float_view)
    assert "owner=True" in repr(float_view)

def test_zero_extent_after_huge_extents_is_empty():
    shape = Shape(C, 2**40, 2**40, 0)
    view = BufferView(BytesSegment(bytearray(0)), DType.INT8, shape, owner=False)
    assert view.byte_length == 0
    assert view.raw_bytes().nbytes == 0
