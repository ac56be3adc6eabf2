# File: FDFWI/geometry/acquisition.py
import numpy as np
from typing import Sequence
from FDFWI.errors import DimensionMismatchError, InvalidGeometryError
from FDFWI.geometry.grid_2D import Grid2D


class Acquisition:
    """
    Ordered source and receiver positions on a :class:`Grid2D`.

    The order given here is the canonical one: column ``k`` of a data
    matrix belongs to source ``k`` and row ``j`` to receiver ``j``.

    Parameters
    ----------
    grid : Grid2D
    zs, xs : sequence of float
        Source coordinates (must coincide with grid nodes).
    zr, xr : sequence of float
        Receiver coordinates (must coincide with grid nodes).
    """

    def __init__(
            self,
            grid: Grid2D,
            *,
            zs: Sequence[float],
            xs: Sequence[float],
            zr: Sequence[float],
            xr: Sequence[float],
    ):
        zs, xs = np.atleast_1d(np.asarray(zs, float)), np.atleast_1d(np.asarray(xs, float))
        zr, xr = np.atleast_1d(np.asarray(zr, float)), np.atleast_1d(np.asarray(xr, float))
        if zs.shape != xs.shape:
            raise DimensionMismatchError("zs and xs must have the same length")
        if zr.shape != xr.shape:
            raise DimensionMismatchError("zr and xr must have the same length")
        if zs.ndim != 1 or zr.ndim != 1:
            raise DimensionMismatchError("coordinate lists must be 1-D")
        if zs.size == 0 or zr.size == 0:
            raise InvalidGeometryError("at least one source and one receiver are required")

        self.grid = grid
        self.src_positions = np.stack([zs, xs])  # (2, n_src)
        self.rec_positions = np.stack([zr, xr])  # (2, n_rec)
        self.src_idx = grid.coords2lin(zs, xs)
        self.rec_idx = grid.coords2lin(zr, xr)

    @property
    def n_src(self) -> int:
        """Number of sources (columns of the data matrix)."""
        return self.src_idx.size

    @property
    def n_rec(self) -> int:
        """Number of receivers (rows of the data matrix)."""
        return self.rec_idx.size

    def __repr__(self):
        return f"Acquisition(n_src={self.n_src}, n_rec={self.n_rec}, grid={self.grid!r})"

    @property
    def data_shape(self) -> tuple[int, int]:
        return self.n_rec, self.n_src

    def check_data(self, D) -> np.ndarray:
        """Return D as a complex array, or raise if its shape is not (n_rec, n_src)."""
        D = np.asarray(D)
        if D.shape != self.data_shape:
            raise DimensionMismatchError(
                f"data matrix has shape {D.shape}, geometry needs {self.data_shape} "
                "(receivers x sources)")
        return D.astype(np.complex128, copy=False)
