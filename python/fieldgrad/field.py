"""Scalar field contract for fieldgrad.

Every value flowing through the graph belongs to a registered scalar type.
Besides the arithmetic operators, the engine needs two things from the type:
a multiplicative identity (used to seed the backward pass) and ``reverse``,
the multiplicative inverse used by division and negative powers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Any, Callable, Optional, Protocol

import numpy as np

logger = logging.getLogger(__name__)

_OPERATORS = ("__add__", "__sub__", "__mul__", "__truediv__", "__neg__")


class GradientField(Protocol):
    """Structural type of a scalar usable as a node value."""

    def __add__(self, other): ...

    def __sub__(self, other): ...

    def __mul__(self, other): ...

    def __truediv__(self, other): ...

    def __neg__(self): ...


@dataclass(frozen=True)
class FieldTraits:
    one: Any
    reverse: Callable[[Any], Any]


_registry: dict[type, FieldTraits] = {}


def register_field(ftype: type, one, reverse: Optional[Callable] = None) -> FieldTraits:
    """Register *ftype* as a scalar field.

    ``reverse`` defaults to ``one / x``.
    """
    missing = [op for op in _OPERATORS if not hasattr(ftype, op)]
    if missing:
        raise TypeError(
            f"{ftype.__name__} cannot be used as a field: missing {', '.join(missing)}"
        )
    if reverse is None:
        def reverse(x, _one=one):
            return _one / x
    traits = FieldTraits(one=one, reverse=reverse)
    _registry[ftype] = traits
    logger.debug("registered field %s", ftype.__name__)
    return traits


def field_traits(ftype: type) -> FieldTraits:
    for base in ftype.__mro__:
        traits = _registry.get(base)
        if traits is not None:
            return traits
    raise TypeError(f"{ftype.__name__} is not a registered field type")


def is_field(ftype: type) -> bool:
    return any(base in _registry for base in ftype.__mro__)


def one(ftype: type) -> GradientField:
    return field_traits(ftype).one


def reverse(x: GradientField) -> GradientField:
    return field_traits(type(x)).reverse(x)


def as_field(data) -> GradientField:
    """Return *data* as a value of a registered field type.

    Plain integers are promoted to ``float``.
    """
    if isinstance(data, int) and not isinstance(data, bool):
        return float(data)
    if is_field(type(data)):
        return data
    raise TypeError(f"Cannot use {type(data).__name__} as a field value")


register_field(float, 1.0)
register_field(complex, complex(1.0))
register_field(Fraction, Fraction(1))
register_field(Decimal, Decimal(1))
for _np_type in (np.float16, np.float32, np.float64, np.longdouble):
    register_field(_np_type, _np_type(1))
del _np_type
