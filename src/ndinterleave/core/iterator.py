from __future__ import annotations

import logging
import math
import numbers
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from .backends import ArrayBackend, resolve_backend
from .config import IterationConfig
from .exceptions import InvalidArgumentError
from .shape import FULL, args_to_multislice, next_cartesian_index, numel, shape_of

logger = logging.getLogger(__name__)


class _Missing:
    def __repr__(self) -> str:
        return "<missing>"


MISSING: Any = _Missing()


@dataclass(frozen=True)
class IteratorResult:
    """One step of the iterator protocol: ``done`` plus an optional ``value``."""

    done: bool
    value: Any = MISSING

    @property
    def has_value(self) -> bool:
        return self.value is not MISSING


def nditer_interleave_subarrays(
    arrays: Sequence[Any],
    ndims: int,
    config: Optional[IterationConfig] = None,
) -> "InterleaveSubarraysIterator":
    """
    Return an iterator over interleaved subarrays of broadcast inputs.

    All ``arrays`` are broadcast to a common shape of rank ``M`` and each
    pull yields a read-only view spanning the last ``ndims`` axes of one
    array. Views are emitted round-robin across the inputs: for every
    combination of the outer axes, position ``0`` of the stacking axis
    (axis ``M - ndims - 1``) is taken from every array in turn, then
    position ``1``, and so on.

    >>> import numpy as np
    >>> x = np.arange(1, 9).reshape(2, 2, 2)
    >>> y = np.arange(9, 17).reshape(2, 2, 2)
    >>> [v.tolist() for v in nditer_interleave_subarrays([x, y], 1)][:3]
    [[1, 2], [9, 10], [3, 4]]
    """

    return InterleaveSubarraysIterator(arrays, ndims, config=config)


class InterleaveSubarraysIterator:
    """
    Pull-based iterator over interleaved subarray views.

    ``next()`` returns an :class:`IteratorResult` and ``stop()`` finishes the
    iterator early. Python iteration (``next(it)``, ``for`` loops) is layered
    on top; ``iter(it)`` hands out a fresh iterator that starts from the
    beginning, regardless of how far this one has advanced.

    An instance is not safe to share between threads; pulls mutate the index
    state in place. Independent instances from :meth:`fresh` share nothing.
    """

    def __init__(
        self,
        arrays: Sequence[Any],
        ndims: int,
        config: Optional[IterationConfig] = None,
    ) -> None:
        _validate_arrays(arrays)
        ndims = _validate_ndims(ndims)
        cfg = (config or IterationConfig()).normalized()

        # Kept unbroadcast so that ``fresh`` can rebuild from scratch.
        self._arrays = arrays
        self._ndims = ndims
        self._config = cfg

        self._backend: ArrayBackend = resolve_backend(cfg.backend, arrays)
        try:
            self._list = self._backend.broadcast(arrays)
        except (ValueError, RuntimeError, TypeError) as exc:
            raise InvalidArgumentError(
                "First argument must be a sequence of ndarrays which are broadcast-compatible.",
                value=_describe_shapes(arrays),
            ) from exc

        shape = shape_of(self._list[0])
        ndim = len(shape)
        if ndim <= ndims:
            raise InvalidArgumentError(
                "First argument must be a sequence of ndarrays having at least "
                f"{ndims + 1} dimensions after broadcasting.",
                value=shape,
            )

        self._shape: Tuple[int, ...] = shape
        self._dim = ndim - ndims - 1
        self._stack_size = shape[self._dim]
        self._count = len(self._list)
        self._total = numel(shape[: self._dim + 1]) * self._count
        # An empty broadcast shape wins over every other count.
        self._done = numel(shape) == 0

        self._index: List[List[Optional[int]]] = []
        for _ in range(self._count):
            state: List[Optional[int]] = [0] * ndim
            for axis in range(self._dim + 1, ndim):
                state[axis] = FULL
            self._index.append(state)

        self._emitted = 0
        self._slot = -1
        logger.debug(
            "interleaving %d array(s) of broadcast shape %s: ndims=%d, stacking axis=%d, "
            "subarrays=%d%s",
            self._count,
            shape,
            ndims,
            self._dim,
            self._total,
            " (empty)" if self._done else "",
        )

    @property
    def shape(self) -> Tuple[int, ...]:
        """Broadcast shape shared by all inputs."""
        return self._shape

    @property
    def ndims(self) -> int:
        return self._ndims

    @property
    def config(self) -> IterationConfig:
        return self._config

    @property
    def remaining(self) -> int:
        """Number of views left to emit."""
        if self._done:
            return 0
        return self._total - self._emitted

    def next(self) -> IteratorResult:
        if self._done or self._emitted >= self._total:
            if not self._done:
                logger.debug("interleaved iteration exhausted after %d view(s)", self._emitted)
            self._done = True
            return IteratorResult(done=True)

        self._slot = (self._slot + 1) % self._count
        state = self._index[self._slot]
        index = args_to_multislice(state)

        # Prepare this array's state for its next visit.
        pos = (state[self._dim] + 1) % self._stack_size
        state[self._dim] = pos
        if pos == 0 and self._dim > 0:
            next_cartesian_index(
                self._shape, state, self._dim - 1, order=self._config.order, out=state
            )

        self._emitted += 1
        return IteratorResult(done=False, value=self._backend.view(self._list[self._slot], index))

    def stop(self, value: Any = MISSING) -> IteratorResult:
        """Finish the iterator; ``value`` is echoed back on this call only."""
        if not self._done:
            logger.debug("interleaved iteration stopped after %d view(s)", self._emitted)
        self._done = True
        return IteratorResult(done=True, value=value)

    def close(self) -> None:
        self.stop()

    def fresh(self) -> "InterleaveSubarraysIterator":
        """Build a new iterator from the original arguments."""
        return type(self)(self._arrays, self._ndims, config=self._config)

    def __iter__(self) -> "InterleaveSubarraysIterator":
        return self.fresh()

    def __length_hint__(self) -> int:
        return self.remaining

    def __next__(self) -> Any:
        result = self.next()
        if result.done:
            raise StopIteration
        return result.value

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(arrays={self._count}, shape={self._shape}, "
            f"ndims={self._ndims}, remaining={self.remaining})"
        )


def _is_ndarray_like(value: Any) -> bool:
    return hasattr(value, "shape") and hasattr(value, "ndim")


def _validate_arrays(arrays: Any) -> None:
    valid = (
        isinstance(arrays, Sequence)
        and not isinstance(arrays, (str, bytes, bytearray))
        and len(arrays) > 0
        and all(_is_ndarray_like(arr) for arr in arrays)
    )
    if not valid:
        raise InvalidArgumentError("First argument must be a sequence of ndarrays.", value=arrays)


def _validate_ndims(ndims: Any) -> int:
    if isinstance(ndims, bool):
        value = None
    elif isinstance(ndims, numbers.Integral):
        value = int(ndims)
    elif isinstance(ndims, float) and math.isfinite(ndims) and ndims.is_integer():
        value = int(ndims)
    else:
        value = None
    if value is None or value < 1:
        raise InvalidArgumentError("Second argument must be a positive integer.", value=ndims)
    return value


def _describe_shapes(arrays: Sequence[Any]) -> List[Tuple[int, ...]]:
    return [shape_of(arr) for arr in arrays]
