"""
Synthetic single-frequency data D = P^T A(m)^-1 Q.
"""
from __future__ import annotations
import numpy as np

from ...config import ModelConfig, SolverConfig
from .base import Discretization, HELMHOLTZ_5PT
from .functions.linear_solver import LinearSolver


def simulate(
        model: np.ndarray,
        config,
        *,
        solver: SolverConfig | None = None,
        discretization: Discretization = HELMHOLTZ_5PT,
) -> np.ndarray:
    """
    Return the complex (n_rec, n_src) data matrix predicted by ``model``.

    Rows follow the receiver order and columns the source order of
    ``config`` (a :class:`ModelConfig` or equivalent mapping).
    """
    cfg = ModelConfig.coerce(config)
    A = discretization.forward(cfg.f, model, cfg.h, cfg.n)
    P = discretization.sampling(cfg.h, cfg.n, cfg.zr, cfg.xr)
    Q = discretization.sampling(cfg.h, cfg.n, cfg.zs, cfg.xs)
    U = LinearSolver(A, solver).solve(Q)
    return np.asarray(P.T @ U)
