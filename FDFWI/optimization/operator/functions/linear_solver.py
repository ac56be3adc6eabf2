import time

import numpy as np
import scipy.sparse as sp
import scipy.sparse.linalg as spla

from ....config import SolverConfig
from ....errors import DimensionMismatchError, SingularOperatorError, SolverNotConvergedError


class LinearSolver:
    """
    Forward/adjoint solver for one (Helmholtz) operator A.

    One instance belongs to one misfit evaluation: the LU (or ILU) factors
    are computed lazily on the first solve and reused for every further
    right-hand side, for A and for A^H alike (``trans='H'``). A
    HessianOperator keeps the instance, and therefore the factors, alive
    for its own lifetime; ``release()`` drops them.

    Every solution is verified against ``config.residual_tol``.
    """

    def __init__(self, A, config: SolverConfig | None = None):
        self.A = sp.csc_matrix(A)
        if self.A.shape[0] != self.A.shape[1]:
            raise DimensionMismatchError(f"operator must be square, got {self.A.shape}")
        self.config = config or SolverConfig()
        self.N = self.A.shape[0]
        self._lu = None  # splu (direct) or spilu (gmres preconditioner)
        self._AH = None

    # ------------------------------------------------------------------ #
    def factorize(self):
        if self._lu is not None:
            return self._lu
        try:
            if self.config.method == "direct":
                self._lu = spla.splu(self.A)
            elif self.config.preconditioner == "ilu":
                self._lu = spla.spilu(self.A)
        except RuntimeError as exc:
            # SuperLU: "Factor is exactly singular"
            raise SingularOperatorError(f"factorisation failed: {exc}") from exc
        return self._lu

    def release(self) -> None:
        self._lu = None
        self._AH = None

    # ------------------------------------------------------------------ #
    def solve(self, rhs, *, adjoint: bool = False) -> np.ndarray:
        """
        Solve A X = rhs (or A^H X = rhs when ``adjoint``).

        rhs : shape (N,) or (N, K), dense or sparse.
        Returns a complex array of the same shape.
        """
        if sp.issparse(rhs):
            rhs = rhs.toarray()
        B = np.asarray(rhs, dtype=np.complex128)
        vec = B.ndim == 1
        if vec:
            B = B[:, None]
        if B.ndim != 2 or B.shape[0] != self.N:
            raise DimensionMismatchError(
                f"right-hand side has shape {np.shape(rhs)}, operator is {self.A.shape}")

        if self.config.method == "direct":
            X = self._solve_direct(B, adjoint)
        else:
            X = self._solve_gmres(B, adjoint)

        self._check(X, B, adjoint)
        return X[:, 0] if vec else X

    # ------------------------------------------------------------------ #
    def _solve_direct(self, B, adjoint):
        lu = self.factorize()
        # trans='N' → solve A x = b; trans='H' → solve Aᴴ x = b
        return lu.solve(B, trans='H' if adjoint else 'N')

    def _operator(self, adjoint):
        if not adjoint:
            return self.A
        if self._AH is None:
            self._AH = self.A.conj().T.tocsc()
        return self._AH

    def _solve_gmres(self, B, adjoint):
        cfg = self.config
        M_op = self._operator(adjoint)
        ilu = self.factorize()
        M = None
        if ilu is not None:
            trans = 'H' if adjoint else 'N'
            M = spla.LinearOperator(self.A.shape, matvec=lambda v: ilu.solve(v, trans=trans),
                                    dtype=np.complex128)

        t0 = time.perf_counter()

        def budget(_):
            if cfg.time_budget is not None and time.perf_counter() - t0 >= cfg.time_budget:
                raise SolverNotConvergedError(
                    f"GMRES exceeded time budget of {cfg.time_budget:g} s")

        X = np.zeros_like(B)
        for k in range(B.shape[1]):
            budget(None)
            if not np.any(B[:, k]):
                continue
            try:
                x, info = spla.gmres(M_op, B[:, k], rtol=cfg.rtol, atol=0.0,
                                     restart=cfg.restart, maxiter=cfg.maxiter, M=M,
                                     callback=budget, callback_type="pr_norm")
            except (ValueError, np.linalg.LinAlgError) as exc:
                raise SingularOperatorError(f"GMRES failed on column {k}: {exc}") from exc
            if info > 0:
                raise SolverNotConvergedError(
                    f"GMRES did not reach rtol={cfg.rtol:g} on column {k} "
                    f"within {info} iterations")
            if info < 0:
                raise SingularOperatorError(f"GMRES breakdown on column {k} (info={info})")
            X[:, k] = x
        return X

    def _check(self, X, B, adjoint):
        if not np.all(np.isfinite(X)):
            which = "adjoint" if adjoint else "forward"
            raise SingularOperatorError(f"{which} solve produced non-finite values")
        R = self._operator(adjoint) @ X - B
        res = np.linalg.norm(R)
        ref = np.linalg.norm(B)
        if res > self.config.residual_tol * ref:
            which = "adjoint" if adjoint else "forward"
            raise SingularOperatorError(
                f"{which} solve inaccurate: relative residual {res / max(ref, 1e-300):.2e} "
                f"> {self.config.residual_tol:g}")
