# FDFWI/optimization/operator/base.py
from __future__ import annotations
from typing import Callable, NamedTuple

import numpy as np
import scipy.sparse.linalg as spla

from .helmholtz import build_forward_operator, build_jacobian_action
from .regularization import build_regularization_operator
from .sampling import build_sampling_operator


class Discretization(NamedTuple):
    """
    The four operator providers of one discretisation scheme.

    ================ =============================================== ==========
    field            signature                                       returns
    ---------------- ----------------------------------------------- ----------
    forward          (f, m, h, n)                                    A   N x N
    regularization   (h, n)                                          L   . x N
    sampling         (h, n, z, x)                                    P   N x k
    jacobian         (f, m, u, h, n)                                 G(u) N x N
    ================ =============================================== ==========

    Each provider must be a deterministic, pure function returning an
    object that supports ``@``, ``.shape`` and ``.conj().T`` (any
    ``scipy.sparse`` matrix does). Another scheme is another record,
    e.g. ``HELMHOLTZ_5PT._replace(forward=my_builder)``.
    """
    forward: Callable
    regularization: Callable
    sampling: Callable
    jacobian: Callable


HELMHOLTZ_5PT = Discretization(
    forward=build_forward_operator,
    regularization=build_regularization_operator,
    sampling=build_sampling_operator,
    jacobian=build_jacobian_action,
)


def adjoint_apply(op, v: np.ndarray) -> np.ndarray:
    """Return op^H v for a sparse matrix or a scipy LinearOperator."""
    if isinstance(op, spla.LinearOperator):
        return op.rmatvec(v)
    return op.conj().T @ v
