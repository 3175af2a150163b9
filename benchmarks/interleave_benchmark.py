#!/usr/bin/env python3
"""
Interleaved subarray iteration benchmark.

Measures construction cost and per-view pull cost of
``nditer_interleave_subarrays`` for a handful of shapes.
"""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ndinterleave import nditer_interleave_subarrays


@dataclass
class BenchmarkResult:
    name: str
    shape: Tuple[int, ...]
    ndims: int
    views: int
    min_s: float
    mean_s: float
    views_per_s: Optional[float]


def _time(fn, iterations: int) -> List[float]:
    timings = []
    for _ in range(iterations):
        start = time.perf_counter()
        fn()
        timings.append(time.perf_counter() - start)
    return timings


def bench_construction(shape: Sequence[int], ndims: int, iterations: int) -> BenchmarkResult:
    x = np.zeros(shape)
    timings = _time(lambda: nditer_interleave_subarrays([x, x], ndims), iterations)
    return BenchmarkResult(
        name="construct",
        shape=tuple(shape),
        ndims=ndims,
        views=0,
        min_s=min(timings),
        mean_s=sum(timings) / len(timings),
        views_per_s=None,
    )


def bench_iteration(shape: Sequence[int], ndims: int, iterations: int) -> BenchmarkResult:
    x = np.zeros(shape)
    y = np.ones(shape)
    counted = [0]

    def _drain() -> None:
        it = nditer_interleave_subarrays([x, y], ndims)
        count = 0
        while not it.next().done:
            count += 1
        counted[0] = count

    timings = _time(_drain, iterations)
    best = min(timings)
    return BenchmarkResult(
        name="iterate",
        shape=tuple(shape),
        ndims=ndims,
        views=counted[0],
        min_s=best,
        mean_s=sum(timings) / len(timings),
        views_per_s=counted[0] / best if best > 0 else None,
    )


def _print(result: BenchmarkResult) -> None:
    rate = f"{result.views_per_s:,.0f} views/s" if result.views_per_s else "-"
    print(
        f"{result.name:<10} shape={result.shape!s:<16} ndims={result.ndims} "
        f"views={result.views:<6} min={result.min_s * 1e3:.3f}ms "
        f"mean={result.mean_s * 1e3:.3f}ms {rate}"
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--iterations", type=int, default=20)
    args = parser.parse_args(argv)

    cases = [
        ((1, 1, 4), 1),
        ((8, 8, 8), 1),
        ((8, 8, 8), 2),
        ((4, 4, 16, 16), 2),
        ((2, 0, 2, 2, 2), 2),
    ]
    for shape, ndims in cases:
        _print(bench_construction(shape, ndims, args.iterations))
        _print(bench_iteration(shape, ndims, args.iterations))
    return 0


if __name__ == "__main__":
    sys.exit(main())
