"""Root finding with Newton's method, derivatives from fieldgrad.

Solves f(x) = x ** 3 - 2 * x - 5 = 0 (Wallis' example).
"""

import sys
from pathlib import Path

_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_root / "python"))

from fieldgrad import Value


def f(x):
    return x ** 3 - 2 * x - 5


def newton(x0, steps=8):
    x = x0
    for step in range(steps):
        v = Value(x, requires_grad=True)
        y = f(v)
        y.backward()
        x = x - y.data / v.grad
        print(f"step {step}  x = {x:.12f}  f(x) = {y.data:+.3e}")
    return x


if __name__ == "__main__":
    root = newton(2.0)
    print(f"\nRoot: {root:.12f}")
