"""Performance tests — deep and wide graphs must stay tractable.

These are regression gates, not benchmarks (use benchmarks/ for numbers).
Thresholds are deliberately loose.
"""

import sys
import time

import pytest

from fieldgrad import Value, Identity, Sin


def cpu_time(fn):
    start = time.perf_counter()
    fn()
    return time.perf_counter() - start


class TestDeepGraphs:
    def test_chain_deeper_than_recursion_limit(self):
        depth = sys.getrecursionlimit() * 5
        x = Value(1.0, requires_grad=True)
        y = x
        for _ in range(depth):
            y = Identity.apply(y)
        y.backward()
        assert x.grad == 1.0

    def test_long_chain_is_linear(self):
        def run(n):
            x = Value(0.1, requires_grad=True)
            y = x
            for _ in range(n):
                y = Sin.apply(y) + Value(0.1)
            y.backward()

        small = cpu_time(lambda: run(2_000))
        large = cpu_time(lambda: run(20_000))
        assert large < small * 40, f"10x graph took {large / small:.1f}x longer"


class TestWideGraphs:
    @pytest.mark.parametrize("width", [1_000, 10_000])
    def test_fan_in(self, width):
        x = Value(2.0, requires_grad=True)
        total = Value(0.0)
        for _ in range(width):
            total = total + x * x
        elapsed = cpu_time(total.backward)
        assert x.grad == pytest.approx(4.0 * width)
        assert elapsed < 5.0
