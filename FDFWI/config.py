# FDFWI/config.py
"""
Configuration records for a single-frequency misfit evaluation.

``ModelConfig`` mirrors the fields of the classic ``model`` struct used to
drive frequency-domain FWI experiments:

    h        grid spacing (h1, h2) [m]
    n        number of grid points (n1, n2)
    f        frequency [Hz]
    zs, xs   source coordinates [m] (must coincide with grid nodes)
    zr, xr   receiver coordinates [m] (must coincide with grid nodes)

``SolverConfig`` selects how the forward/adjoint Helmholtz systems are solved.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

import numpy as np

from .errors import InvalidFrequencyError
from .geometry import Grid2D, Acquisition


def _as_tuple(v) -> Tuple[float, ...]:
    return tuple(float(c) for c in np.atleast_1d(np.asarray(v, dtype=float)).ravel())


@dataclass(frozen=True)
class ModelConfig:
    h: Tuple[float, float]
    n: Tuple[int, int]
    f: float
    zs: Tuple[float, ...]
    xs: Tuple[float, ...]
    zr: Tuple[float, ...]
    xr: Tuple[float, ...]
    grid: Grid2D = field(init=False, repr=False, compare=False)
    acquisition: Acquisition = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # frozen dataclass: normalise through object.__setattr__
        for name in ("zs", "xs", "zr", "xr"):
            object.__setattr__(self, name, _as_tuple(getattr(self, name)))
        object.__setattr__(self, "h", _as_tuple(self.h))
        object.__setattr__(self, "n", tuple(int(v) if float(v).is_integer() else v
                                            for v in np.ravel(self.n)))
        self._validate()

    def _validate(self) -> None:
        # runs once; the derived grid and acquisition are fixed afterwards
        try:
            f = float(self.f)
        except (TypeError, ValueError) as exc:
            raise InvalidFrequencyError(f"frequency must be a number, got {self.f!r}") from exc
        if not np.isfinite(f) or f <= 0:
            raise InvalidFrequencyError(f"frequency must be positive, got {self.f}")
        object.__setattr__(self, "f", f)

        grid = Grid2D(h=self.h, n=self.n)
        acq = Acquisition(grid, zs=self.zs, xs=self.xs, zr=self.zr, xr=self.xr)
        object.__setattr__(self, "grid", grid)
        object.__setattr__(self, "acquisition", acq)

    # ----------------------------------------------------------------
    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "ModelConfig":
        """Build from a mapping with keys h, n, f, zs, xs, zr, xr."""
        missing = [k for k in ("h", "n", "f", "zs", "xs", "zr", "xr") if k not in d]
        if missing:
            raise KeyError(f"model configuration is missing {missing}")
        return cls(h=d["h"], n=d["n"], f=d["f"],
                   zs=d["zs"], xs=d["xs"], zr=d["zr"], xr=d["xr"])

    @classmethod
    def coerce(cls, cfg) -> "ModelConfig":
        if isinstance(cfg, cls):
            return cfg
        if isinstance(cfg, Mapping):
            return cls.from_dict(cfg)
        raise TypeError(f"expected ModelConfig or mapping, got {type(cfg).__name__}")

    def with_frequency(self, f: float) -> "ModelConfig":
        """Return a validated copy at another frequency."""
        return dataclasses.replace(self, f=f)

    # ----------------------------------------------------------------
    @property
    def N(self) -> int:
        return self.grid.N

    @property
    def n_src(self) -> int:
        return self.acquisition.n_src

    @property
    def n_rec(self) -> int:
        return self.acquisition.n_rec


@dataclass
class SolverConfig:
    """
    Linear-solve settings shared by the forward, adjoint and Hessian solves.

    - method: 'direct' (sparse LU, factorised once per evaluation) or 'gmres'
    - residual_tol: max. relative residual ||A x - b|| / ||b|| accepted
    - rtol, restart, maxiter: GMRES controls (maxiter = restart cycles)
    - preconditioner: 'ilu' or None (GMRES only)
    - time_budget: wall-clock seconds per solve() call, None = unlimited
      (GMRES only; the direct LU has no budget)
    """
    method: str = "direct"
    residual_tol: float = 1e-6
    rtol: float = 1e-10
    restart: int = 50
    maxiter: Optional[int] = None
    preconditioner: Optional[str] = "ilu"
    time_budget: Optional[float] = None

    def __post_init__(self):
        if self.method not in ("direct", "gmres"):
            raise ValueError("method must be 'direct' or 'gmres'")
        if self.preconditioner not in (None, "ilu"):
            raise ValueError("preconditioner must be 'ilu' or None")
        if self.residual_tol <= 0 or self.rtol <= 0:
            raise ValueError("tolerances must be positive")
        if self.restart < 1 or (self.maxiter is not None and self.maxiter < 1):
            raise ValueError("restart and maxiter must be >= 1")
        if self.time_budget is not None and self.time_budget < 0:
            raise ValueError("time_budget must be non-negative")
        if self.time_budget is not None and self.method == "direct":
            raise ValueError("time_budget applies to method='gmres' only")
