from .checks import DerivativeCheck, gradient_check, hessian_check, symmetry_check

__all__ = ["DerivativeCheck", "gradient_check", "hessian_check", "symmetry_check"]
