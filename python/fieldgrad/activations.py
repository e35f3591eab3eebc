"""Activation functions as autograd primitives over ``float``."""

from __future__ import annotations

import math

from fieldgrad.autograd import Function, ScalarFunction


class Tanh(Function):
    @staticmethod
    def forward(x):
        return math.tanh(x)

    @staticmethod
    def backward(x):
        cosh = math.cosh(x)
        return 1.0 / (cosh * cosh)


class Sigmoid(Function):
    @staticmethod
    def forward(x):
        # Numerically stable on both tails
        if x >= 0:
            return 1.0 / (1.0 + math.exp(-x))
        e = math.exp(x)
        return e / (1.0 + e)

    @staticmethod
    def backward(x):
        s = Sigmoid.forward(x)
        return s * (1.0 - s)


class ReLU(Function):
    @staticmethod
    def forward(x):
        return x if x >= 0 else 0.0

    @staticmethod
    def backward(x):
        return 1.0 if x > 0 else 0.0


class LeakyReLU(ScalarFunction):
    """ReLU with ``slope`` applied to negative inputs."""

    @staticmethod
    def forward(x, slope):
        return x if x >= 0 else slope * x

    @staticmethod
    def backward(x, slope):
        return 1.0 if x > 0 else slope


# ---- Functional API ----

def tanh(x):    return Tanh.apply(x)
def sigmoid(x): return Sigmoid.apply(x)
def relu(x):    return ReLU.apply(x)
def leaky_relu(x, slope=0.01):
    return LeakyReLU.apply(x, slope)
