"""fieldgrad: reverse-mode automatic differentiation over scalar fields."""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from fieldgrad.field import (
    GradientField, FieldTraits,
    register_field, field_traits, is_field, as_field, one, reverse,
)
from fieldgrad.graph import (
    Node, GraphError, BackwardError, SecondBackwardError, LeafOnlyError,
)
from fieldgrad.autograd import (
    Function, BiFunction, ScalarFunction, MultiFunction,
    no_grad, is_grad_enabled,
)
from fieldgrad.value import (
    Value,
    Identity, FlipSign, Add, Subtract, Mul, Div, Pow,
)
from fieldgrad.functions import (
    Sqrt, Exp, Ln, Log, Abs, Distance,
    Sin, Cos, Tan, Ctg, ArcTan, ArcSin, ArcCos,
)
from fieldgrad.activations import Tanh, Sigmoid, ReLU, LeakyReLU
from fieldgrad import functions
from fieldgrad import activations
from fieldgrad import utils

__all__ = [
    "GradientField", "FieldTraits",
    "register_field", "field_traits", "is_field", "as_field", "one", "reverse",
    "Node", "GraphError", "BackwardError", "SecondBackwardError", "LeafOnlyError",
    "Function", "BiFunction", "ScalarFunction", "MultiFunction",
    "no_grad", "is_grad_enabled",
    "Value", "Identity", "FlipSign", "Add", "Subtract", "Mul", "Div", "Pow",
    "Sqrt", "Exp", "Ln", "Log", "Abs", "Distance",
    "Sin", "Cos", "Tan", "Ctg", "ArcTan", "ArcSin", "ArcCos",
    "Tanh", "Sigmoid", "ReLU", "LeakyReLU",
    "functions", "activations", "utils",
]
