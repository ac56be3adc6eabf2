import abc
import numpy as np
from typing import Any, Optional


class GradientEvaluator(abc.ABC):
    """
    Base class for model-space misfit/gradient computation.

    Subclasses implement ``evaluate(model, data, alpha)`` for a particular
    forward problem and report progress through ``_log``.
    """

    def __init__(self, *, verbose: bool = False, logger: Optional[Any] = None):
        """
        Parameters
        ----------
        verbose : bool
            Print progress to stdout.
        logger : logging.Logger-like, optional
            If supplied, messages go to ``logger.info`` instead of stdout.
        """
        self._verbose = bool(verbose)
        self._logger = logger

    @abc.abstractmethod
    def evaluate(
        self,
        model: np.ndarray,
        data: np.ndarray,
        alpha: float,
    ):
        """
        Compute misfit value (and optionally gradient / Hessian) for `model`.

        Parameters
        ----------
        model : ndarray
            Model parameters array.
        data : ndarray
            Observed data.
        alpha : float
            Regularisation weight.
        """
        ...
        raise NotImplementedError("Subclasses must implement evaluate()")

    def _log(self, msg: str) -> None:
        if self._logger is not None:
            self._logger.info(msg)
        elif self._verbose:
            print(msg)
