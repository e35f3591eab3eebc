"""Differentiable scalar handle.

``Value`` wraps a graph node. Arithmetic on values dispatches through the
autograd primitives below, so ``z.backward()`` populates ``.grad`` on every
tracked leaf that ``z`` was computed from.
"""

from __future__ import annotations

import operator

from fieldgrad.autograd import BiFunction, Function, ScalarFunction
from fieldgrad.field import as_field, one, reverse
from fieldgrad.graph import Node


class Value:
    """Autograd-enabled scalar.

    Wraps a ``Node``; several values may share one node, and ``copy``
    creates a fresh, detached leaf.
    """

    __slots__ = ("_node",)

    def __init__(self, data, requires_grad=False):
        self._node = Node(as_field(data), bool(requires_grad))

    @classmethod
    def _wrap(cls, node: Node) -> Value:
        v = object.__new__(cls)
        v._node = node
        return v

    # ---- Properties ----

    @property
    def data(self):
        return self._node.data

    @data.setter
    def data(self, value):
        self._node.data = as_field(value)

    @property
    def grad(self):
        """Accumulated gradient, or ``None`` if no pass has reached this value."""
        return self._node.grad

    @property
    def has_grad(self) -> bool:
        return self._node.grad is not None

    @property
    def is_leaf(self) -> bool:
        return self._node.is_leaf

    @property
    def requires_grad(self) -> bool:
        return self._node.requires_backward()

    @requires_grad.setter
    def requires_grad(self, value: bool):
        self._node.set_requires_grad(value)

    # ---- Graph ----

    def connect(self, other: Value) -> None:
        self._node.add_dependency(other._node)

    def backward(self):
        self._node.backward()

    def copy(self, requires_grad=False) -> Value:
        return Value(self._node.data, requires_grad)

    # ---- Arithmetic (with autograd) ----

    def __add__(self, other):
        return Add.apply(self, other)

    def __radd__(self, other):
        return Add.apply(other, self)

    def __sub__(self, other):
        return Subtract.apply(self, other)

    def __rsub__(self, other):
        return Subtract.apply(other, self)

    def __mul__(self, other):
        return Mul.apply(self, other)

    def __rmul__(self, other):
        return Mul.apply(other, self)

    def __truediv__(self, other):
        return Div.apply(self, other)

    def __rtruediv__(self, other):
        return Div.apply(other, self)

    def __neg__(self):
        return FlipSign.apply(self)

    def __pow__(self, exponent):
        return Pow.apply(self, exponent)

    # ---- Repr ----

    def __str__(self):
        return f"data: {self.data} grad: {self.grad}"

    def __repr__(self):
        s = f"Value(data={self.data!r}"
        if self.requires_grad:
            s += ", requires_grad=True"
            if not self.is_leaf:
                s += f", grad_fn={self._node.backward_fn!r}"
        return s + ")"


# ---------------------------------------------------------------------------
# Autograd primitives
# ---------------------------------------------------------------------------

class Identity(Function):
    @staticmethod
    def forward(x):
        return x

    @staticmethod
    def backward(x):
        return one(type(x))


class FlipSign(Function):
    @staticmethod
    def forward(x):
        return -x

    @staticmethod
    def backward(x):
        return -one(type(x))


class Add(BiFunction):
    @staticmethod
    def forward(x, y):
        return x + y

    @staticmethod
    def backward(x, y):
        return one(type(x)), one(type(y))


class Subtract(BiFunction):
    @staticmethod
    def forward(x, y):
        return x - y

    @staticmethod
    def backward(x, y):
        return one(type(x)), -one(type(y))


class Mul(BiFunction):
    @staticmethod
    def forward(x, y):
        return x * y

    @staticmethod
    def backward(x, y):
        return y, x


class Div(BiFunction):
    @staticmethod
    def forward(x, y):
        return x / y

    @staticmethod
    def backward(x, y):
        return reverse(y), -(x / (y * y))


def _power(x, n: int):
    """Exponentiation by squaring; negative exponents go through ``reverse``."""
    if n < 0:
        return reverse(_power(x, -n))
    result = one(type(x))
    base = x
    while n:
        if n & 1:
            result = result * base
        n >>= 1
        if n:
            base = base * base
    return result


class Pow(ScalarFunction):
    """``x ** n`` for an integer exponent ``n``."""

    @staticmethod
    def forward(x, exponent):
        return _power(x, operator.index(exponent))

    @staticmethod
    def backward(x, exponent):
        if exponent == 0:
            return x - x
        return exponent * _power(x, exponent - 1)
