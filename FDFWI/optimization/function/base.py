from __future__ import annotations
import numpy as np
from abc import ABC, abstractmethod


class Function(ABC):
    """
    Objective f(m) seen by an outer optimiser.

    ``value``/``gradient`` are mandatory; ``hessp`` (Hessian-vector
    product) is optional and raises unless a subclass provides it.
    """
    @abstractmethod
    def value(self, m: np.ndarray) -> float: ...

    @abstractmethod
    def gradient(self, m: np.ndarray) -> np.ndarray: ...

    def hessp(self, m: np.ndarray, p: np.ndarray) -> np.ndarray:
        raise NotImplementedError(f"{type(self).__name__} has no Hessian-vector product")

    def __call__(self, m: np.ndarray) -> float:
        return self.value(m)
