"""Shared pytest fixtures for fieldgrad tests."""

import os
import sys
from fractions import Fraction

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../python"))


@pytest.fixture(autouse=True)
def grad_mode_isolation():
    """Fail loudly if a test leaves a no_grad context open."""
    from fieldgrad import autograd
    yield
    counters = autograd._counters()
    leaked = {k: v for k, v in counters.items() if v}
    counters.clear()
    assert not leaked, f"no_grad context leaked: {leaked}"


@pytest.fixture(params=[float, Fraction, np.float64], ids=["float", "fraction", "float64"])
def field_type(request):
    return request.param


@pytest.fixture
def make_value(field_type):
    """Returns a factory building values of the parametrised field type."""
    from fieldgrad import Value

    def _make(data, requires_grad=False):
        return Value(field_type(data), requires_grad=requires_grad)

    return _make
