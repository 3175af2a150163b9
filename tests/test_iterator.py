import numpy as np
import pytest

from ndinterleave import (
    MISSING,
    IterationConfig,
    IteratorResult,
    nditer_interleave_subarrays,
)


def _pair(shape=(2, 2, 2)):
    size = int(np.prod(shape))
    x = np.arange(1, size + 1).reshape(shape)
    y = np.arange(size + 1, 2 * size + 1).reshape(shape)
    return x, y


def _drain(it):
    values = []
    while True:
        result = it.next()
        if result.done:
            return values, result
        values.append(result.value)


def test_interleaves_rows_for_ndims_1():
    x, y = _pair()
    it = nditer_interleave_subarrays([x, y], 1)
    expected = [
        x[0, 0, :],
        y[0, 0, :],
        x[0, 1, :],
        y[0, 1, :],
        x[1, 0, :],
        y[1, 0, :],
        x[1, 1, :],
        y[1, 1, :],
    ]
    for want in expected:
        result = it.next()
        assert result.done is False
        assert isinstance(result.value, np.ndarray)
        assert result.value.shape == (2,)
        assert result.value.flags.writeable is False
        np.testing.assert_array_equal(result.value, want)
    assert it.next() == IteratorResult(done=True)


def test_interleaves_matrices_for_ndims_2():
    x, y = _pair()
    values, last = _drain(nditer_interleave_subarrays([x, y], 2))
    expected = [x[0], y[0], x[1], y[1]]
    assert len(values) == len(expected)
    for got, want in zip(values, expected):
        np.testing.assert_array_equal(got, want)
    assert last.done and not last.has_value


def test_four_dimensional_inputs_step_outer_axis_after_stack():
    base = np.array([[[1, 2], [3, 4]], [[5, 6], [7, 8]]])
    x = np.stack([base, base])
    y = x + 8
    values, _ = _drain(nditer_interleave_subarrays([x, y], 2))
    expected = [
        x[0, 0],
        y[0, 0],
        x[0, 1],
        y[0, 1],
        x[1, 0],
        y[1, 0],
        x[1, 1],
        y[1, 1],
    ]
    assert len(values) == 8
    for got, want in zip(values, expected):
        assert got.shape == (2, 2)
        np.testing.assert_array_equal(got, want)


def test_views_share_memory_with_inputs():
    x, y = _pair()
    first = nditer_interleave_subarrays([x, y], 1).next().value
    assert np.shares_memory(first, x)
    with pytest.raises(ValueError):
        first[0] = 100
    assert x[0, 0, 0] == 1


def test_empty_broadcast_shape_is_exhausted_immediately():
    x = np.zeros((2, 0, 2, 2, 2))
    it = nditer_interleave_subarrays([x, x], 2)
    assert it.remaining == 0
    for _ in range(3):
        assert it.next() == IteratorResult(done=True)


def test_zero_extent_in_kept_axes_yields_nothing():
    x = np.zeros((3, 2, 0))
    it = nditer_interleave_subarrays([x], 1)
    assert list(it) == []
    assert it.next().done


def test_exhaustion_is_idempotent():
    x, y = _pair()
    it = nditer_interleave_subarrays([x, y], 2)
    _drain(it)
    for _ in range(5):
        result = it.next()
        assert result.done
        assert not result.has_value


def test_single_array_walks_every_leading_position():
    x = np.arange(24).reshape(2, 3, 4)
    values, _ = _drain(nditer_interleave_subarrays([x], 1))
    assert len(values) == 6
    np.testing.assert_array_equal(np.stack(values), x.reshape(6, 4))


def test_minimal_rank_iterates_stacking_axis_only():
    x = np.arange(6).reshape(3, 2)
    y = -x
    values, _ = _drain(nditer_interleave_subarrays([x, y], 1))
    expected = [x[0], y[0], x[1], y[1], x[2], y[2]]
    assert len(values) == 6
    for got, want in zip(values, expected):
        np.testing.assert_array_equal(got, want)


def test_inputs_are_broadcast_before_iterating():
    x = np.arange(4).reshape(2, 1, 2)
    y = np.array([[10, 20], [30, 40], [50, 60]])
    it = nditer_interleave_subarrays([x, y], 1)
    assert it.shape == (2, 3, 2)
    values, _ = _drain(it)
    assert len(values) == 2 * 3 * 2
    np.testing.assert_array_equal(values[0], [0, 1])
    np.testing.assert_array_equal(values[1], [10, 20])
    np.testing.assert_array_equal(values[2], [0, 1])
    np.testing.assert_array_equal(values[3], [30, 40])
    np.testing.assert_array_equal(values[6], [2, 3])
    np.testing.assert_array_equal(values[7], [10, 20])
    assert all(v.flags.writeable is False for v in values)


def test_column_major_order_steps_first_outer_axis_fastest():
    x = np.arange(2 * 3 * 2 * 2).reshape(2, 3, 2, 2)
    it = nditer_interleave_subarrays([x], 1, config=IterationConfig(order="column-major"))
    values, _ = _drain(it)
    expected = [x[i, j, s] for j in range(3) for i in range(2) for s in range(2)]
    assert len(values) == len(expected)
    for got, want in zip(values, expected):
        np.testing.assert_array_equal(got, want)


def test_stop_without_value():
    x, y = _pair()
    it = nditer_interleave_subarrays([x, y], 2)
    assert it.next().done is False
    assert it.next().done is False

    result = it.stop()
    assert result.done is True
    assert result.has_value is False
    assert result.value is MISSING

    assert it.next() == IteratorResult(done=True)


def test_stop_echoes_value_once():
    x, y = _pair()
    it = nditer_interleave_subarrays([x, y], 2)
    it.next()

    result = it.stop("finished")
    assert result == IteratorResult(done=True, value="finished")
    assert result.has_value

    later = it.next()
    assert later.done and not later.has_value


def test_stop_echoes_explicit_none():
    x, _ = _pair()
    result = nditer_interleave_subarrays([x], 1).stop(None)
    assert result.done
    assert result.has_value
    assert result.value is None


def test_close_finishes_iterator():
    x, y = _pair()
    it = nditer_interleave_subarrays([x, y], 1)
    it.close()
    assert it.remaining == 0
    assert it.next().done


def test_python_iteration_protocol():
    x, y = _pair()
    it = nditer_interleave_subarrays([x, y], 1)
    first = next(it)
    np.testing.assert_array_equal(first, x[0, 0])
    remaining = [next(it) for _ in range(7)]
    assert len(remaining) == 7
    with pytest.raises(StopIteration):
        next(it)


def test_fresh_iterator_restarts_after_partial_consumption():
    x, y = _pair()
    original = nditer_interleave_subarrays([x, y], 1)
    reference, _ = _drain(original.fresh())

    for _ in range(3):
        original.next()
    restarted, _ = _drain(original.fresh())
    assert len(restarted) == len(reference)
    for got, want in zip(restarted, reference):
        np.testing.assert_array_equal(got, want)

    # the original keeps its own position
    np.testing.assert_array_equal(original.next().value, y[0, 1])


def test_fresh_iterator_after_stop():
    x, y = _pair()
    it = nditer_interleave_subarrays([x, y], 2)
    it.stop()
    clone = it.fresh()
    assert clone is not it
    values, _ = _drain(clone)
    assert len(values) == 4
    assert clone.config == it.config


def test_for_loop_uses_fresh_iterator():
    x, y = _pair()
    it = nditer_interleave_subarrays([x, y], 2)
    it.next()
    it.next()
    assert iter(it) is not it
    assert len([view for view in it]) == 4
    # the loop did not advance the original
    assert it.remaining == 2


def test_remaining_counts_down():
    x, y = _pair()
    it = nditer_interleave_subarrays([x, y], 1)
    assert it.remaining == 8
    it.next()
    assert it.remaining == 7
    assert "remaining=7" in repr(it)


def test_construction_logs_plan(caplog):
    x, y = _pair()
    with caplog.at_level("DEBUG", logger="ndinterleave.core.iterator"):
        it = nditer_interleave_subarrays([x, y], 1)
        _drain(it)
    messages = [record.getMessage() for record in caplog.records]
    assert any("broadcast shape (2, 2, 2)" in msg and "subarrays=8" in msg for msg in messages)
    assert any("exhausted after 8 view(s)" in msg for msg in messages)
