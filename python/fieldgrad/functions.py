"""Elementary real functions as autograd primitives.

All primitives here operate on ``float`` values.
"""

from __future__ import annotations

import math

from fieldgrad.autograd import Function, MultiFunction, ScalarFunction


class Sqrt(Function):
    @staticmethod
    def forward(x):
        return math.sqrt(x)

    @staticmethod
    def backward(x):
        return 1.0 / (2.0 * math.sqrt(x))


class Exp(Function):
    @staticmethod
    def forward(x):
        return math.exp(x)

    @staticmethod
    def backward(x):
        return math.exp(x)


class Ln(Function):
    @staticmethod
    def forward(x):
        return math.log(x)

    @staticmethod
    def backward(x):
        return 1.0 / x


class Log(ScalarFunction):
    """Logarithm with the base as parameter."""

    @staticmethod
    def forward(x, base):
        return math.log(x) / math.log(base)

    @staticmethod
    def backward(x, base):
        return 1.0 / (x * math.log(base))


class Abs(Function):
    @staticmethod
    def forward(x):
        return abs(x)

    @staticmethod
    def backward(x):
        if x > 0:
            return 1.0
        if x < 0:
            return -1.0
        return 0.0


class Distance(MultiFunction, arity=4):
    """Euclidean distance between points ``(x1, y1)`` and ``(x2, y2)``."""

    @staticmethod
    def forward(x1, y1, x2, y2):
        return math.hypot(x1 - x2, y1 - y2)

    @staticmethod
    def backward(x1, y1, x2, y2):
        dist = Distance.forward(x1, y1, x2, y2)
        dx = (x1 - x2) / dist
        dy = (y1 - y2) / dist
        return dx, dy, -dx, -dy


# ---- Trigonometric ----

class Sin(Function):
    @staticmethod
    def forward(x):
        return math.sin(x)

    @staticmethod
    def backward(x):
        return math.cos(x)


class Cos(Function):
    @staticmethod
    def forward(x):
        return math.cos(x)

    @staticmethod
    def backward(x):
        return -math.sin(x)


class Tan(Function):
    @staticmethod
    def forward(x):
        return math.tan(x)

    @staticmethod
    def backward(x):
        cos = math.cos(x)
        return 1.0 / (cos * cos)


class Ctg(Function):
    @staticmethod
    def forward(x):
        return 1.0 / math.tan(x)

    @staticmethod
    def backward(x):
        sin = math.sin(x)
        return -1.0 / (sin * sin)


class ArcTan(Function):
    @staticmethod
    def forward(x):
        return math.atan(x)

    @staticmethod
    def backward(x):
        return 1.0 / (x * x + 1.0)


class ArcSin(Function):
    @staticmethod
    def forward(x):
        return math.asin(x)

    @staticmethod
    def backward(x):
        return 1.0 / math.sqrt(1.0 - x * x)


class ArcCos(Function):
    @staticmethod
    def forward(x):
        return math.acos(x)

    @staticmethod
    def backward(x):
        return -1.0 / math.sqrt(1.0 - x * x)


# ---- Functional API ----

def sqrt(x):   return Sqrt.apply(x)
def exp(x):    return Exp.apply(x)
def ln(x):     return Ln.apply(x)
def log(x, base=math.e):
    return Log.apply(x, base)
def abs_(x):   return Abs.apply(x)
def distance(x1, y1, x2, y2):
    return Distance.apply(x1, y1, x2, y2)
def sin(x):    return Sin.apply(x)
def cos(x):    return Cos.apply(x)
def tan(x):    return Tan.apply(x)
def ctg(x):    return Ctg.apply(x)
def arctan(x): return ArcTan.apply(x)
def arcsin(x): return ArcSin.apply(x)
def arccos(x): return ArcCos.apply(x)
