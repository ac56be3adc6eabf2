"""
FDFWI
=====

Single-frequency Helmholtz full-waveform inversion kernel: regularised
least-squares misfit, adjoint-state gradient and matrix-free Gauss-Newton
Hessian with respect to squared slowness.

>>> from FDFWI import ModelConfig, evaluate, simulate
>>> cfg = ModelConfig(h=(10, 10), n=(5, 5), f=5.0,
...                   zs=[20.], xs=[20.], zr=[0.], xr=[0.])
>>> D = simulate(m, cfg)
>>> f, g, H = evaluate(m, D, 0.0, cfg, hessian=True)
"""
from .errors import (
    FWIError,
    DimensionMismatchError,
    InvalidFrequencyError,
    InvalidGeometryError,
    InvalidModelError,
    SingularOperatorError,
    SolverNotConvergedError,
)
from .config import ModelConfig, SolverConfig
from .optimization import (
    MisfitEvaluator,
    MisfitResult,
    evaluate,
    HessianOperator,
    LinearSolver,
    Discretization,
    HELMHOLTZ_5PT,
    simulate,
    Function,
    RegularizedLS,
)

__version__ = "0.1.0"

__all__ = [
    "FWIError", "DimensionMismatchError", "InvalidFrequencyError", "InvalidGeometryError",
    "InvalidModelError", "SingularOperatorError", "SolverNotConvergedError",
    "ModelConfig", "SolverConfig",
    "MisfitEvaluator", "MisfitResult", "evaluate", "HessianOperator", "LinearSolver",
    "Discretization", "HELMHOLTZ_5PT", "simulate", "Function", "RegularizedLS",
]
