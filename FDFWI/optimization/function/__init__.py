from .base import Function
from .least_squares import RegularizedLS

__all__ = ["Function", "RegularizedLS"]
