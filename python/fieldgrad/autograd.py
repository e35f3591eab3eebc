"""Reverse-mode automatic differentiation engine for fieldgrad.

Gradient-mode control plus the dispatch wrappers that wire primitives into
the computation graph. A primitive subclasses one of ``Function``,
``BiFunction``, ``ScalarFunction`` or ``MultiFunction`` and supplies static
``forward`` and ``backward`` methods; ``apply`` evaluates the forward formula
and, when tracking is on, records the operands and the matching backward
function on the result node.
"""

from __future__ import annotations

import contextlib
import threading
from typing import Callable

from fieldgrad.field import as_field
from fieldgrad.graph import (
    BackwardFunction,
    BinaryBackward,
    MultiBackward,
    Node,
    ScalarBackward,
    UnaryBackward,
)

# Per-thread suspension counters, keyed by field type. ``None`` counts
# contexts that suspend every field.
_state = threading.local()


def _counters() -> dict:
    counters = getattr(_state, "counters", None)
    if counters is None:
        counters = _state.counters = {}
    return counters


class no_grad(contextlib.ContextDecorator):
    """Context manager that disables gradient tracking.

    Usage::

        with fieldgrad.no_grad():
            y = x * x  # no graph built

    ``no_grad(float)`` only suspends tracking of ``float`` values and of
    subclasses such as ``numpy.float64``. Contexts
    nest; tracking resumes once every context for the field has exited.
    """

    def __init__(self, *fields: type):
        self.fields = fields or (None,)

    def __enter__(self):
        counters = _counters()
        for key in self.fields:
            counters[key] = counters.get(key, 0) + 1
        return self

    def __exit__(self, *args):
        counters = _counters()
        for key in self.fields:
            counters[key] -= 1
        return False


def is_grad_enabled(field: type = float) -> bool:
    counters = _counters()
    if counters.get(None, 0):
        return False
    return not any(counters.get(base, 0) for base in field.__mro__)


def _as_value(x):
    from fieldgrad.value import Value

    return x if isinstance(x, Value) else Value(x)


def _record(output, operands: tuple, make_backward: Callable[[], BackwardFunction]):
    """Wrap *output* in a new node, linking *operands* if tracking applies."""
    from fieldgrad.value import Value

    output = as_field(output)
    result = Value._wrap(Node(output))
    if is_grad_enabled(type(output)) and any(op.requires_grad for op in operands):
        for op in operands:
            result.connect(op)
        result._node.set_backward_function(make_backward())
    return result


class Function:
    """Unary primitive: ``forward(x)`` and ``backward(x) -> dx``."""

    @staticmethod
    def forward(x):
        raise NotImplementedError

    @staticmethod
    def backward(x):
        raise NotImplementedError

    @classmethod
    def apply(cls, x):
        x = _as_value(x)
        output = cls.forward(x.data)
        return _record(output, (x,), lambda: UnaryBackward(cls.backward))

    call = apply


class BiFunction:
    """Binary primitive: ``backward(x, y)`` returns ``(dx, dy)``."""

    @staticmethod
    def forward(x, y):
        raise NotImplementedError

    @staticmethod
    def backward(x, y):
        raise NotImplementedError

    @classmethod
    def apply(cls, x, y):
        x, y = _as_value(x), _as_value(y)
        output = cls.forward(x.data, y.data)
        return _record(output, (x, y), lambda: BinaryBackward(cls.backward))

    call = apply


class ScalarFunction:
    """Unary primitive with a non-differentiable parameter, e.g. an exponent."""

    @staticmethod
    def forward(x, parameter):
        raise NotImplementedError

    @staticmethod
    def backward(x, parameter):
        raise NotImplementedError

    @classmethod
    def apply(cls, x, parameter):
        x = _as_value(x)
        output = cls.forward(x.data, parameter)
        return _record(output, (x,), lambda: ScalarBackward(cls.backward, parameter))

    call = apply


class MultiFunction:
    """Fixed-arity primitive over three or more operands.

    The arity is declared at class definition::

        class Distance(MultiFunction, arity=4):
            ...

    ``backward(*args)`` returns one partial per operand.
    """

    arity: int

    def __init_subclass__(cls, arity=None, **kwargs):
        super().__init_subclass__(**kwargs)
        if arity is None:
            arity = getattr(cls, "arity", None)
        if not isinstance(arity, int):
            raise TypeError(f"{cls.__name__} must declare an integer arity")
        if arity < 3:
            raise TypeError(
                f"{cls.__name__}: arity {arity} is not allowed for MultiFunction, "
                "use Function, BiFunction or ScalarFunction"
            )
        cls.arity = arity

    @staticmethod
    def forward(*args):
        raise NotImplementedError

    @staticmethod
    def backward(*args):
        raise NotImplementedError

    @classmethod
    def apply(cls, *operands):
        if len(operands) != cls.arity:
            raise TypeError(
                f"{cls.__name__} takes {cls.arity} operands, got {len(operands)}"
            )
        operands = tuple(_as_value(op) for op in operands)
        output = cls.forward(*(op.data for op in operands))
        return _record(output, operands, lambda: MultiBackward(cls.backward, cls.arity))

    call = apply
