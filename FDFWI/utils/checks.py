"""
FDFWI.utils.checks
========================

Finite-difference consistency checks for a misfit implementation:

* ``gradient_check``  – central differences of f against <g, d>
* ``hessian_check``   – central differences of g against H d
* ``symmetry_check``  – <H x1, x2> against <x1, H x2>

Each takes plain callables so it works with :class:`RegularizedLS`,
:func:`FDFWI.evaluate` wrapped in a lambda, or anything else.
"""
from __future__ import annotations
from typing import Callable, Iterable, List, NamedTuple

import numpy as np


class DerivativeCheck(NamedTuple):
    step: float
    finite_difference: float | np.ndarray
    analytic: float | np.ndarray
    error: float


def gradient_check(
        value: Callable[[np.ndarray], float],
        gradient: Callable[[np.ndarray], np.ndarray],
        m: np.ndarray,
        direction: np.ndarray,
        steps: Iterable[float] = (1e-2, 1e-3, 1e-4),
) -> List[DerivativeCheck]:
    """
    Compare (f(m + t d) - f(m - t d)) / (2 t) with <g(m), d> for each t.

    ``direction`` is normalised to unit length first, so ``t`` equals
    ||delta||. The reported error is absolute; for a correct gradient it
    decreases like t^2 until round-off takes over.
    """
    m = np.asarray(m, float)
    d = np.asarray(direction, float)
    d = d / np.linalg.norm(d)
    gd = float(np.vdot(np.ravel(gradient(m)), np.ravel(d)).real)

    out = []
    for t in steps:
        fd = (value(m + t * d) - value(m - t * d)) / (2 * t)
        out.append(DerivativeCheck(float(t), float(fd), gd, abs(fd - gd)))
    return out


def hessian_check(
        gradient: Callable[[np.ndarray], np.ndarray],
        hessp: Callable[[np.ndarray], np.ndarray],
        m: np.ndarray,
        direction: np.ndarray,
        eps: float = 1e-4,
) -> DerivativeCheck:
    """
    Compare (g(m + eps d) - g(m - eps d)) / (2 eps) with H d.

    ``hessp`` is H(m) applied to a vector. For a Gauss-Newton H the two
    agree only up to the dropped second-order term, i.e. exactly (up to
    O(eps^2)) when the residual at ``m`` vanishes. The reported error is
    relative to ||H d||.
    """
    m = np.asarray(m, float)
    d = np.asarray(direction, float)
    fd = (np.asarray(gradient(m + eps * d)) - np.asarray(gradient(m - eps * d))) / (2 * eps)
    Hd = np.asarray(hessp(d))
    err = np.linalg.norm(fd - Hd) / max(np.linalg.norm(Hd), np.finfo(float).tiny)
    return DerivativeCheck(float(eps), fd, Hd, float(err))


def symmetry_check(hessp: Callable[[np.ndarray], np.ndarray], x1: np.ndarray, x2: np.ndarray) -> float:
    """Relative asymmetry |<H x1, x2> - <x1, H x2>| / (||H x1|| ||x2|| + ||x1|| ||H x2||)."""
    Hx1, Hx2 = np.asarray(hessp(x1)), np.asarray(hessp(x2))
    a, b = float(Hx1 @ x2), float(x1 @ Hx2)
    scale = np.linalg.norm(Hx1) * np.linalg.norm(x2) + np.linalg.norm(x1) * np.linalg.norm(Hx2)
    return abs(a - b) / max(scale, np.finfo(float).tiny)
