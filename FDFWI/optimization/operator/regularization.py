from __future__ import annotations
import numpy as np
import scipy.sparse as sp


def build_regularization_operator(h, n) -> sp.csr_matrix:
    """
    First-order finite-difference operator for the smoothing penalty
    0.5 * alpha * ||L m||^2.

    Rows hold the forward differences along z followed by those along x,
    so L has N columns and (n1-1)*n2 + n1*(n2-1) rows. Only L^T L enters
    the gradient and Hessian.
    """
    n1, n2 = int(n[0]), int(n[1])
    D1 = sp.diags([-1., 1.], [0, 1], shape=(n1 - 1, n1)) / h[0]
    D2 = sp.diags([-1., 1.], [0, 1], shape=(n2 - 1, n2)) / h[1]
    L = sp.vstack([sp.kron(sp.identity(n2), D1), sp.kron(D2, sp.identity(n1))])
    return sp.csr_matrix(L, dtype=np.float64)
