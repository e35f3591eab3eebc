"""Basic gradient computation with fieldgrad."""

import sys
from fractions import Fraction
from pathlib import Path

_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_root / "python"))


def main():
    from fieldgrad import Value, Identity, Pow, Distance, no_grad

    # Identity: dy/dx = 1
    x = Value(2.0, requires_grad=True)
    y = Identity.apply(x)
    y.backward()
    print("x:", x)

    # Operators
    a = Value(2.0, requires_grad=True)
    b = Value(3.0, requires_grad=True)
    c = a * b + a / b
    c.backward()
    print("a * b + a / b =", c.data)
    print("  da:", a.grad, " db:", b.grad)

    # Integer powers
    p = Value(2.0, requires_grad=True)
    q = Pow.apply(p, 5)
    q.backward()
    print("p ** 5 =", q.data, " dp:", p.grad)

    # Four-argument primitive
    pts = [Value(v, requires_grad=True) for v in (1.0, 0.0, 4.0, 4.0)]
    d = Distance.apply(*pts)
    d.backward()
    print("distance =", d.data, " grads:", [v.grad for v in pts])

    # Exact arithmetic over the rationals
    r = Value(Fraction(1, 3), requires_grad=True)
    s = r * r - Fraction(1, 2) / r
    s.backward()
    print("r * r - 1/(2r) =", s.data, " dr:", r.grad)

    # No graph is recorded under no_grad
    with no_grad():
        untracked = a * b
    print("under no_grad:", repr(untracked))


if __name__ == "__main__":
    main()
