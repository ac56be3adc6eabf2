from .gradient import MisfitEvaluator, MisfitResult, evaluate
from .operator import HessianOperator, LinearSolver, Discretization, HELMHOLTZ_5PT, simulate
from .function import Function, RegularizedLS

__all__ = [
    "MisfitEvaluator", "MisfitResult", "evaluate",
    "HessianOperator", "LinearSolver", "Discretization", "HELMHOLTZ_5PT", "simulate",
    "Function", "RegularizedLS",
]
