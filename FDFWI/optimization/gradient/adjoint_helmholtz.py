"""
FDFWI.optimization.gradient.adjoint_helmholtz
==================================================

Regularised least-squares misfit for single-frequency Helmholtz FWI,

    f(m) = 0.5 ||P^T A(m)^-1 Q - D||_F^2 + 0.5 alpha ||L m||^2,

its adjoint-state gradient and its Gauss-Newton Hessian.

Flow of one evaluation
----------------------
1. build L, A, P, Q (and the Jacobian action G) from model + config
2. forward solve       A U = Q                 (all sources at once)
3. residual            R = P^T U - D           (n_rec x n_src)
4. value               0.5 ||R||^2 + 0.5 alpha ||L m||^2
5. adjoint solve       A^H V = P (D - P^T U)   (only if a gradient is wanted)
   gradient            alpha L^T L m + sum_k Re( G(U_k)^H V_k )
6. Hessian             HessianOperator bound to U and the factorised A

Nothing survives the call except the returned values; a returned Hessian
keeps U and the factorisation of A alive for its own lifetime.
"""
from __future__ import annotations

import time
import warnings
from functools import partial
from typing import Any, NamedTuple, Optional

import numpy as np
from tqdm import tqdm

from ...config import ModelConfig, SolverConfig
from ...errors import DimensionMismatchError
from ..operator.base import Discretization, HELMHOLTZ_5PT, adjoint_apply
from ..operator.functions.linear_solver import LinearSolver
from ..operator.helmholtz import check_model
from ..operator.hessian import HessianOperator
from .base import GradientEvaluator


class MisfitResult(NamedTuple):
    """(value, gradient, hessian); parts that were not requested are None."""
    value: float
    gradient: Optional[np.ndarray]
    hessian: Optional[HessianOperator]


class MisfitEvaluator(GradientEvaluator):
    """
    Misfit, adjoint-state gradient and Gauss-Newton Hessian evaluator.

    Parameters
    ----------
    config : ModelConfig or mapping
        Grid, frequency and acquisition geometry (keys h, n, f, zs, xs, zr, xr).
    solver : SolverConfig, optional
        Linear-solve settings; default is a sparse direct LU.
    discretization : Discretization, optional
        Operator providers; default is the 5-point Helmholtz scheme.
    verbose : bool
        Print one line per evaluation (and tqdm bars over sources).
    logger : logging.Logger-like, optional
        Receives the messages via ``.info`` instead of stdout.
    """

    def __init__(
            self,
            config,
            *,
            solver: SolverConfig | None = None,
            discretization: Discretization = HELMHOLTZ_5PT,
            verbose: bool = False,
            logger: Any | None = None,
    ):
        super().__init__(verbose=verbose, logger=logger)
        self.config = ModelConfig.coerce(config)
        self.solver = solver or SolverConfig()
        self.discretization = discretization

    # ------------------------------------------------------------------ #
    def evaluate(
            self,
            model: np.ndarray,
            data: np.ndarray,
            alpha: float,
            *,
            gradient: bool = True,
            hessian: bool = False,
    ) -> MisfitResult:
        """
        Evaluate the misfit for ``model`` against the data matrix ``data``.

        Parameters
        ----------
        model : np.ndarray
            Squared slowness [s^2/km^2], length-N vector or (n1, n2) image.
        data : np.ndarray
            Complex (n_rec, n_src) data matrix at ``config.f``.
        alpha : float
            Regularisation weight (>= 0).
        gradient, hessian : bool
            Which derivatives to return.

        Returns
        -------
        MisfitResult
            ``gradient`` has the shape of ``model``.
        """
        cfg = self.config
        grid, acq = cfg.grid, cfg.acquisition
        ops = self.discretization

        alpha = float(alpha)
        if not np.isfinite(alpha) or alpha < 0:
            raise ValueError(f"alpha must be non-negative, got {alpha}")
        model_shape = np.shape(model)
        if model_shape not in (grid.shape, (grid.N,)):
            raise DimensionMismatchError(
                f"model has shape {model_shape}, grid needs {grid.shape} or ({grid.N},)")
        m = check_model(model, grid.N)
        D = acq.check_data(data)
        if not np.any(D):
            warnings.warn("data matrix is identically zero", RuntimeWarning)

        tic = time.perf_counter()

        # --- 1) operators ---------------------------------------------- #
        L = ops.regularization(cfg.h, cfg.n)
        A = ops.forward(cfg.f, m, cfg.h, cfg.n)
        P = ops.sampling(cfg.h, cfg.n, cfg.zr, cfg.xr)
        Q = ops.sampling(cfg.h, cfg.n, cfg.zs, cfg.xs)
        G = partial(ops.jacobian, cfg.f, m, h=cfg.h, n=cfg.n)
        self._check_operators(A, L, P, Q, grid.N, acq.n_rec, acq.n_src)

        # --- 2) forward solve ------------------------------------------ #
        solver = LinearSolver(A, self.solver)
        U = solver.solve(Q)  # (N, n_src)

        # --- 3-4) residual & value ------------------------------------- #
        R = np.asarray(P.T @ U) - D
        Lm = L @ m
        value = 0.5 * np.vdot(R, R).real + 0.5 * alpha * float(Lm @ Lm)

        # --- 5) adjoint solve & gradient ------------------------------- #
        g = None
        if gradient:
            V = solver.solve(P @ (-R), adjoint=True)  # A^H V = P (D - P^T U)
            g = alpha * (L.T @ Lm)
            for k in tqdm(range(acq.n_src), desc="Gradient", disable=not self._verbose):
                g += np.real(adjoint_apply(G(U[:, k]), V[:, k]))
            g = grid.image(g) if model_shape == grid.shape else g

        # --- 6) Hessian ------------------------------------------------ #
        H = None
        if hessian:
            H = HessianOperator(U, alpha, L=L, P=P, jacobian=G, solver=solver,
                                verbose=self._verbose, logger=self._logger)
        else:
            solver.release()

        self._log(f"[Misfit] f={cfg.f:g} Hz | sources={acq.n_src}, receivers={acq.n_rec}, "
                  f"misfit={value:.6e}, {time.perf_counter() - tic:6.3f} s")
        return MisfitResult(value, g, H)

    # ------------------------------------------------------------------ #
    @staticmethod
    def _check_operators(A, L, P, Q, N, n_rec, n_src):
        if A.shape != (N, N):
            raise DimensionMismatchError(f"forward operator is {A.shape}, expected {(N, N)}")
        if L.shape[1] != N:
            raise DimensionMismatchError(f"regularization operator has {L.shape[1]} columns, expected {N}")
        if P.shape != (N, n_rec):
            raise DimensionMismatchError(f"receiver operator is {P.shape}, expected {(N, n_rec)}")
        if Q.shape != (N, n_src):
            raise DimensionMismatchError(f"source operator is {Q.shape}, expected {(N, n_src)}")


def evaluate(
        model: np.ndarray,
        data: np.ndarray,
        alpha: float,
        config,
        *,
        gradient: bool = True,
        hessian: bool = False,
        solver: SolverConfig | None = None,
        discretization: Discretization = HELMHOLTZ_5PT,
        verbose: bool = False,
        logger: Any | None = None,
) -> MisfitResult:
    """
    One-shot form of :meth:`MisfitEvaluator.evaluate`.

    >>> f, g, H = evaluate(m, D, 0.0, cfg, hessian=True)
    >>> y = H.apply(x)
    """
    ev = MisfitEvaluator(config, solver=solver, discretization=discretization,
                         verbose=verbose, logger=logger)
    return ev.evaluate(model, data, alpha, gradient=gradient, hessian=hessian)
