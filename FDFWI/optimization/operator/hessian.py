"""
FDFWI.optimization.operator.hessian
==========================================

Matrix-free Gauss-Newton Hessian of the regularised least-squares misfit

    H x = alpha L^T L x + sum_k Re( G_k^H A^-H P P^T A^-1 G_k x ),

with G_k = G(U[:, k]) the Jacobian action at the k-th forward wavefield.
Each application costs one forward and one adjoint solve per source; the
N x N matrix is never formed.

The operator is a :class:`scipy.sparse.linalg.LinearOperator`, so it can be
passed straight to ``cg``/``minres``. It is self-adjoint by construction:
``H.adjoint() is H`` and ``rmatvec == matvec``.
"""
from __future__ import annotations
import time
from typing import Any, Callable

import numpy as np
import scipy.sparse.linalg as spla
from tqdm import tqdm

from ...errors import DimensionMismatchError
from .base import adjoint_apply
from .functions.linear_solver import LinearSolver


class HessianOperator(spla.LinearOperator):
    """
    Gauss-Newton Hessian bound to one misfit evaluation.

    Parameters
    ----------
    U : np.ndarray
        Forward wavefields (N, n_src), read-only.
    alpha : float
        Regularisation weight.
    L : sparse matrix
        Regularisation operator (columns = N).
    P : sparse matrix
        Receiver sampling operator (N, n_rec).
    jacobian : callable
        ``jacobian(u) -> G(u)``, already bound to frequency/model/grid.
    solver : LinearSolver
        Holds the factorised forward operator of the evaluation.
    verbose, logger
        Progress output, as for :class:`MisfitEvaluator`.

    Notes
    -----
    All bound state is captured at evaluation time and never mutated, so
    one instance may be applied repeatedly (and by several readers);
    repeated applications to the same vector give identical results.
    """

    def __init__(
            self,
            U: np.ndarray,
            alpha: float,
            *,
            L,
            P,
            jacobian: Callable[[np.ndarray], Any],
            solver: LinearSolver,
            verbose: bool = False,
            logger: Any | None = None,
    ):
        N = U.shape[0]
        super().__init__(dtype=np.float64, shape=(N, N))
        self._U = U
        self._U.setflags(write=False)
        self._alpha = float(alpha)
        self._LtL = (L.T @ L).tocsr()
        self._PPt = (P @ P.T).tocsr()
        self._jacobian = jacobian
        self._solver = solver
        self._verbose = verbose
        self._logger = logger
        self.n_applied = 0

    # ------------------------------------------------------------------ #
    @property
    def n_src(self) -> int:
        return self._U.shape[1]

    def apply(self, x: np.ndarray) -> np.ndarray:
        """y = H x for a real model-space vector x of length N."""
        x = np.asarray(x)
        if x.ndim != 1 or x.size != self.shape[1]:
            raise DimensionMismatchError(
                f"Hessian acts on vectors of length {self.shape[1]}, got shape {x.shape}")
        return self._matvec(x)

    apply_adjoint = apply

    # ------------------------------------------------------------------ #
    # LinearOperator protocol
    # ------------------------------------------------------------------ #
    def _matvec(self, x):
        x = np.asarray(x).ravel()
        if np.iscomplexobj(x):
            raise ValueError("Hessian acts on real model-space vectors")
        x = x.astype(np.float64, copy=False)

        tic = time.perf_counter()
        y = self._alpha * (self._LtL @ x)
        for k in tqdm(range(self.n_src), desc="Hessian", disable=not self._verbose):
            G = self._jacobian(self._U[:, k])
            q = self._solver.solve(G @ x)                    # A q = G x
            s = self._solver.solve(self._PPt @ q, adjoint=True)  # A^H s = P P^T q
            y += np.real(adjoint_apply(G, s))

        self.n_applied += 1
        self._log(f"[Hessian] apply #{self.n_applied} | sources={self.n_src}, "
                  f"{time.perf_counter() - tic:6.3f} s")
        return y

    _rmatvec = _matvec

    def _adjoint(self):
        return self

    def release(self) -> None:
        """Drop the factorisation held for this operator (rebuilt on next use)."""
        self._solver.release()

    def _log(self, msg: str) -> None:
        if self._logger is not None:
            self._logger.info(msg)
        elif self._verbose:
            print(msg)
