from __future__ import annotations

import numpy as np
from types import SimpleNamespace
from typing import Any

from ...config import ModelConfig, SolverConfig
from ..gradient.adjoint_helmholtz import MisfitEvaluator, MisfitResult
from ..operator.base import Discretization, HELMHOLTZ_5PT
from ..operator.hessian import HessianOperator
from .base import Function


class RegularizedLS(Function):
    """
    Regularised least-squares objective

        f(m) = 0.5 ||P^T A(m)^-1 Q - D||_F^2 + 0.5 alpha ||L m||^2

    wrapped for an outer optimiser. The callables follow the SciPy
    conventions, e.g.::

        fun = RegularizedLS(D, alpha, cfg)
        scipy.optimize.minimize(fun.value, m0, jac=fun.gradient,
                                hessp=fun.hessp, method="Newton-CG")

    Parameters
    ----------
    data : np.ndarray
        Observed (n_rec, n_src) data matrix.
    alpha : float
        Regularisation weight (>= 0).
    config : ModelConfig or mapping
    solver, discretization, verbose, logger
        Forwarded to :class:`MisfitEvaluator`.

    Attributes
    ----------
    _cache : types.SimpleNamespace | None
        Most recent (model copy, MisfitResult). value/gradient/Hessian for
        the same model reuse it; any other model triggers a fresh
        evaluation, which replaces the cache.
    n_evals : int
        Number of misfit evaluations performed.
    """

    def __init__(
            self,
            data: np.ndarray,
            alpha: float,
            config,
            *,
            solver: SolverConfig | None = None,
            discretization: Discretization = HELMHOLTZ_5PT,
            verbose: bool = False,
            logger: Any | None = None,
    ):
        if alpha < 0:
            raise ValueError("alpha must be non-negative")
        self._ev = MisfitEvaluator(ModelConfig.coerce(config), solver=solver,
                                   discretization=discretization,
                                   verbose=verbose, logger=logger)
        self._ev.config.acquisition.check_data(data)
        self._D = np.array(data, dtype=np.complex128)
        self._alpha = float(alpha)
        self._cache: SimpleNamespace | None = None
        self.n_evals = 0

    @property
    def config(self) -> ModelConfig:
        return self._ev.config

    @property
    def last_misfit(self) -> float:
        """
        Return the most recently computed misfit f(m).
        Must call value(m) or gradient(m) first.
        """
        if self._cache is None:
            raise RuntimeError("No misfit cached. Call value(m) or gradient(m) first.")
        return self._cache.result.value

    # ------------------------------------------------------------------ #
    def _result(self, m: np.ndarray, *, hessian: bool = False) -> MisfitResult:
        c = self._cache
        if (c is not None and np.array_equal(c.model, m)
                and (c.result.hessian is not None or not hessian)):
            return c.result
        res = self._ev.evaluate(m, self._D, self._alpha, gradient=True, hessian=hessian)
        self.n_evals += 1
        if c is not None and c.result.hessian is not None:
            c.result.hessian.release()
        self._cache = SimpleNamespace(model=np.array(m, copy=True), result=res)
        return res

    def value(self, m: np.ndarray) -> float:
        return self._result(m).value

    def gradient(self, m: np.ndarray) -> np.ndarray:
        return self._result(m).gradient

    def hessian(self, m: np.ndarray) -> HessianOperator:
        """Gauss-Newton Hessian at ``m`` as a LinearOperator."""
        return self._result(m, hessian=True).hessian

    def hessp(self, m: np.ndarray, p: np.ndarray) -> np.ndarray:
        p = np.asarray(p)
        Hp = self.hessian(m).apply(self.config.grid.vector(p))
        return Hp.reshape(p.shape, order="F")
