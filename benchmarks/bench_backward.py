"""fieldgrad graph benchmark suite.

Times graph construction (forward) and the backward pass for chains,
fan-in sums, diamonds and n-ary primitives, and reports per-node cost.
"""

import sys
from pathlib import Path

_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_root / "python"))

import time
from dataclasses import dataclass
from fractions import Fraction

import numpy as np

import fieldgrad
from fieldgrad import Value, Identity, Sin, Distance, no_grad


# ---------------------------------------------------------------------------
# Timing helpers
# ---------------------------------------------------------------------------

def cpu_bench(build, warmup=2, iters=10):
    """Median forward/backward milliseconds for graphs produced by *build*."""
    fwd, bwd = [], []
    for i in range(warmup + iters):
        t0 = time.perf_counter()
        root = build()
        t1 = time.perf_counter()
        root.backward()
        t2 = time.perf_counter()
        if i >= warmup:
            fwd.append((t1 - t0) * 1000)
            bwd.append((t2 - t1) * 1000)
    return float(np.median(fwd)), float(np.median(bwd))


@dataclass
class Result:
    name: str
    nodes: int
    fwd_ms: float
    bwd_ms: float

    @property
    def us_per_node(self):
        return (self.fwd_ms + self.bwd_ms) * 1000 / self.nodes


# ---------------------------------------------------------------------------
# Graph shapes
# ---------------------------------------------------------------------------

def bench_chains():
    results = []
    for n in (1_000, 10_000, 100_000):
        def build(n=n):
            y = Value(0.5, requires_grad=True)
            for _ in range(n):
                y = Identity.apply(y)
            return y
        fwd, bwd = cpu_bench(build)
        results.append(Result(f"Identity chain {n}", n + 1, fwd, bwd))

        def build_sin(n=n):
            y = Value(0.5, requires_grad=True)
            for _ in range(n):
                y = Sin.apply(y)
            return y
        fwd, bwd = cpu_bench(build_sin)
        results.append(Result(f"Sin chain {n}", n + 1, fwd, bwd))
    return results


def bench_fan_in():
    results = []
    for n in (1_000, 10_000, 100_000):
        def build(n=n):
            x = Value(2.0, requires_grad=True)
            total = Value(0.0)
            for _ in range(n):
                total = total + x * x
            return total
        fwd, bwd = cpu_bench(build)
        results.append(Result(f"Fan-in x*x sum {n}", 2 * n + 2, fwd, bwd))
    return results


def bench_diamonds():
    results = []
    for n in (1_000, 10_000):
        def build(n=n):
            y = Value(0.5, requires_grad=True)
            for _ in range(n):
                y = (y * y + y) * Value(0.25)
            return y
        fwd, bwd = cpu_bench(build)
        results.append(Result(f"Diamond ladder {n}", 4 * n + 1, fwd, bwd))
    return results


def bench_multi():
    results = []
    n = 10_000

    def build():
        pts = [Value(float(i), requires_grad=True) for i in range(4)]
        total = Value(0.0)
        for _ in range(n):
            total = total + Distance.apply(*pts)
        return total
    fwd, bwd = cpu_bench(build)
    results.append(Result(f"Distance sum {n}", 2 * n + 5, fwd, bwd))
    return results


def bench_fields():
    results = []
    n = 10_000
    for name, make in (("float", float), ("Fraction", Fraction), ("float64", np.float64)):
        def build(make=make):
            x = Value(make(1) / make(3), requires_grad=True)
            total = Value(make(0))
            for _ in range(n):
                total = total + x * x
            return total
        fwd, bwd = cpu_bench(build, iters=3)
        results.append(Result(f"Fan-in {n} [{name}]", 2 * n + 2, fwd, bwd))
    return results


def bench_no_grad():
    n = 100_000

    def forward():
        y = Value(0.5, requires_grad=True)
        for _ in range(n):
            y = Identity.apply(y)
        return y

    t0 = time.perf_counter()
    forward()
    tracked = (time.perf_counter() - t0) * 1000
    with no_grad():
        t0 = time.perf_counter()
        forward()
        untracked = (time.perf_counter() - t0) * 1000
    return [
        Result(f"Forward tracked {n}", n + 1, tracked, 0.0),
        Result(f"Forward no_grad {n}", n + 1, untracked, 0.0),
    ]


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

def print_section(title, results):
    print(f"\n{'=' * 78}")
    print(f"  {title}")
    print(f"{'=' * 78}")
    print(f"  {'Graph':<30s}  {'Nodes':>8s}  {'Fwd ms':>9s}  {'Bwd ms':>9s}  {'us/node':>8s}")
    print(f"  {'-' * 30}  {'-' * 8}  {'-' * 9}  {'-' * 9}  {'-' * 8}")
    for r in results:
        print(f"  {r.name:<30s}  {r.nodes:8d}  {r.fwd_ms:9.3f}  {r.bwd_ms:9.3f}  {r.us_per_node:8.3f}")


def main():
    print("=" * 78)
    print("  fieldgrad Graph Benchmark Suite")
    print("=" * 78)
    print(f"  fieldgrad       : {fieldgrad.__version__}")
    print(f"  Python          : {sys.version.split()[0]}")
    print(f"  NumPy           : {np.__version__}")

    sections = [
        ("Chains",             bench_chains),
        ("Fan-in",             bench_fan_in),
        ("Diamonds",           bench_diamonds),
        ("N-ary Primitives",   bench_multi),
        ("Scalar Fields",      bench_fields),
        ("Gradient Mode",      bench_no_grad),
    ]

    total_benchmarks = 0
    for title, fn in sections:
        try:
            results = fn()
            print_section(title, results)
            total_benchmarks += len(results)
        except Exception as e:
            print(f"\n  [ERROR] {title}: {e}")

    print(f"\n{'=' * 78}")
    print(f"  Benchmark complete. {total_benchmarks} measurements across {len(sections)} categories.")
    print(f"{'=' * 78}")


if __name__ == "__main__":
    main()
