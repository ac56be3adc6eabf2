from __future__ import annotations
import numpy as np
import scipy.sparse as sp

from ...geometry import Grid2D


def build_sampling_operator(h, n, z, x) -> sp.csr_matrix:
    """
    Point injection operator P (N x k) for the k node coordinates (z, x).

    ``P @ s`` puts the k values ``s`` on their nodes, ``P.T @ u`` samples
    the field ``u`` there. Column order follows the coordinate order.
    Coordinates off the grid nodes raise InvalidGeometryError.
    """
    grid = Grid2D(h=h, n=n)
    idx = grid.coords2lin(z, x)
    k = idx.size
    return sp.csr_matrix((np.ones(k), (idx, np.arange(k))), shape=(grid.N, k))
