"""Utility functions for fieldgrad."""

from __future__ import annotations

import logging

import numpy as np

from fieldgrad.autograd import no_grad
from fieldgrad.value import Value

logger = logging.getLogger(__name__)


def numerical_grad(fn, *points, eps=1e-6) -> np.ndarray:
    """Central finite-difference gradient of *fn* at *points*.

    *fn* takes one ``Value`` per point and returns a ``Value``.
    """
    base = np.asarray(points, dtype=np.float64)
    grad = np.zeros_like(base)
    with no_grad():
        for i in range(base.size):
            shifted = base.copy()
            shifted[i] = base[i] + eps
            fp = fn(*(Value(float(p)) for p in shifted)).data
            shifted[i] = base[i] - eps
            fm = fn(*(Value(float(p)) for p in shifted)).data
            grad[i] = (fp - fm) / (2 * eps)
    return grad


def analytic_grad(fn, *points) -> np.ndarray:
    """Gradient of *fn* at *points* from a single backward pass."""
    inputs = [Value(float(p), requires_grad=True) for p in points]
    fn(*inputs).backward()
    return np.array([x.grad if x.has_grad else 0.0 for x in inputs], dtype=np.float64)


def gradcheck(fn, *points, eps=1e-6, atol=1e-5, rtol=1e-4) -> bool:
    """Compare backward-pass gradients of *fn* against finite differences."""
    analytic = analytic_grad(fn, *points)
    numeric = numerical_grad(fn, *points, eps=eps)
    ok = bool(np.allclose(analytic, numeric, atol=atol, rtol=rtol))
    if not ok:
        logger.warning("gradcheck mismatch: analytic=%s numeric=%s", analytic, numeric)
    return ok
