from .linear_solver import LinearSolver

__all__ = ["LinearSolver"]
