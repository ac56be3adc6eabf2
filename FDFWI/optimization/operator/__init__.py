from .base import Discretization, HELMHOLTZ_5PT, adjoint_apply
from .helmholtz import build_forward_operator, build_jacobian_action
from .regularization import build_regularization_operator
from .sampling import build_sampling_operator
from .functions import LinearSolver
from .hessian import HessianOperator
from .modeling import simulate

__all__ = [
    "Discretization", "HELMHOLTZ_5PT", "adjoint_apply",
    "build_forward_operator", "build_jacobian_action",
    "build_regularization_operator", "build_sampling_operator",
    "LinearSolver", "HessianOperator", "simulate",
]
