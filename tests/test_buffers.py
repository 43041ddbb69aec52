import numpy as np

from ffnn import ComputeBuffer, TrainBuffer


def test_begin_returns_view_of_requested_length():
    buffer = ComputeBuffer()
    a = buffer.begin_a(5)
    b = buffer.begin_b(3)
    assert a.shape == (5,)
    assert b.shape == (3,)
    a[:] = 1.0
    assert buffer.A[:5].sum() == 5.0


def test_buffers_only_grow():
    buffer = ComputeBuffer()
    buffer.begin_a(8)
    buffer.begin_a(2)
    buffer.begin_b(4)
    buffer.begin_b(1)
    assert buffer.A.size == 8
    assert buffer.B.size == 4
    assert buffer.begin_a(2).shape == (2,)


def test_growth_preserves_contents():
    buffer = ComputeBuffer()
    buffer.begin_b(3)[:] = [1.0, 2.0, 3.0]
    grown = buffer.begin_b(6)
    np.testing.assert_array_equal(grown[:3], [1.0, 2.0, 3.0])


def test_no_reallocation_when_large_enough():
    buffer = ComputeBuffer()
    buffer.begin_a(10)
    storage = buffer.A
    buffer.begin_a(4)
    buffer.begin_a(10)
    assert buffer.A is storage


def test_dtype_is_kept():
    buffer = ComputeBuffer(np.float32)
    assert buffer.begin_a(3).dtype == np.float32
    assert buffer.begin_b(3).dtype == np.float32


def test_train_buffer_reserve_only_grows():
    buffer = TrainBuffer()
    buffer.reserve(3)
    first = buffer[0]
    buffer.reserve(1)
    assert len(buffer) == 3
    assert buffer[0] is first
    buffer.reserve(5)
    assert len(buffer) == 5
    assert all(isinstance(slot, ComputeBuffer) for slot in buffer)


def test_train_buffer_slots_are_independent():
    buffer = TrainBuffer().reserve(2)
    buffer[0].begin_a(2)[:] = 7.0
    assert buffer[1].begin_a(2).sum() == 0.0
