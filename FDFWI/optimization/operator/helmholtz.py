"""
FDFWI.optimization.operator.helmholtz
==========================================

5-point Helmholtz discretisation with a first-order absorbing boundary.

For squared slowness ``m`` [s^2/km^2] on a grid with spacing ``h`` [m]

    A(m) = omega^2 diag(a * m) + i omega diag(b * sqrt(m)) + Lap_h,

where omega = 2 pi f 1e-3 (the factor converts s^2/km^2 to s^2/m^2 under the
square), ``a`` is 1 in the interior and 1/2 on the edges, and ``b`` marks
the boundary nodes. The sensitivity of A(m)u to the model is the diagonal

    G(u) = d(A(m) u)/dm = diag(omega^2 a * u + i omega b * u / (2 sqrt(m))).

All builders are pure functions returning ``scipy.sparse`` matrices in the
column-major (z fastest) ordering of :class:`FDFWI.geometry.Grid2D`.
"""
from __future__ import annotations
import numpy as np
import scipy.sparse as sp

from ...errors import DimensionMismatchError, InvalidModelError


def angular_frequency(f: float) -> float:
    """omega for m in s^2/km^2 and h in m."""
    return 1e-3 * 2 * np.pi * float(f)


def boundary_weights(n) -> tuple[np.ndarray, np.ndarray]:
    """Mass weights ``a`` and absorbing-boundary indicator ``b`` (length N)."""
    n1, n2 = int(n[0]), int(n[1])
    a = np.ones((n1, n2))
    a[:, [0, -1]] = .5
    a[[0, -1], :] = .5
    b = np.zeros((n1, n2))
    b[:, [0, -1]] = 1.
    b[[0, -1], :] = 1.
    return a.ravel(order="F"), b.ravel(order="F")


def laplacian(h, n) -> sp.csr_matrix:
    """Second-order 5-point Laplacian, kron(I, D11) + kron(D22, I)."""
    n1, n2 = int(n[0]), int(n[1])
    D1 = sp.diags([1., -2., 1.], [-1, 0, 1], shape=(n1, n1)) / h[0] ** 2
    D2 = sp.diags([1., -2., 1.], [-1, 0, 1], shape=(n2, n2)) / h[1] ** 2
    return (sp.kron(sp.identity(n2), D1) + sp.kron(D2, sp.identity(n1))).tocsr()


def check_model(m, N: int) -> np.ndarray:
    """Return ``m`` as a float vector of length N, or raise."""
    m = np.asarray(m)
    if np.iscomplexobj(m):
        raise InvalidModelError("model must be real")
    m = m.astype(np.float64, copy=False).ravel(order="F")
    if m.size != N:
        raise DimensionMismatchError(f"model has {m.size} entries, grid has {N}")
    if not np.all(np.isfinite(m)):
        raise InvalidModelError("model contains non-finite values")
    if np.any(m <= 0):
        raise InvalidModelError("squared slowness must be strictly positive")
    return m


def build_forward_operator(f: float, m: np.ndarray, h, n) -> sp.csc_matrix:
    """Helmholtz operator A(m) at frequency ``f`` (complex, N x N)."""
    N = int(n[0]) * int(n[1])
    m = check_model(m, N)
    omega = angular_frequency(f)
    a, b = boundary_weights(n)
    A = (omega ** 2 * sp.diags(a * m)
         + 1j * omega * sp.diags(b * np.sqrt(m))
         + laplacian(h, n))
    return A.tocsc()


def build_jacobian_action(f: float, m: np.ndarray, u: np.ndarray, h, n) -> sp.dia_matrix:
    """G(u): model perturbation -> first-order change of A(m) u (N x N)."""
    N = int(n[0]) * int(n[1])
    m = check_model(m, N)
    u = np.asarray(u).ravel()
    if u.size != N:
        raise DimensionMismatchError(f"wavefield has {u.size} entries, grid has {N}")
    omega = angular_frequency(f)
    a, b = boundary_weights(n)
    return sp.diags(omega ** 2 * a * u + 1j * omega * b * u / (2 * np.sqrt(m)))
