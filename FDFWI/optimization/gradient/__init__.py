from .adjoint_helmholtz import MisfitEvaluator, MisfitResult, evaluate
from .base import GradientEvaluator

__all__ = ["MisfitEvaluator", "MisfitResult", "evaluate", "GradientEvaluator"]
