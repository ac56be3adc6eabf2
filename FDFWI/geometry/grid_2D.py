import numpy as np
from FDFWI.errors import DimensionMismatchError, InvalidGeometryError


class Grid2D:
    """2-D regular finite-difference grid.

    >>> Grid2D(h=(10.0, 10.0), n=(5, 5))

    Notes
    -----
    Node coordinates start at the origin:
        z[i1] = i1 * h1,
        x[i2] = i2 * h2.
    Unknowns are flattened column-major (z runs fastest):
        lin_idx(i1, i2) = i1 + n1 * i2
    Every operator, model vector and wavefield uses this ordering.
    """

    # relative tolerance (in units of the spacing) for node coincidence
    _node_tol = 1e-9

    def __init__(self, *, h, n):
        h = tuple(float(v) for v in np.ravel(h))
        n_raw = np.ravel(n)
        if len(h) != 2 or n_raw.size != 2:
            raise InvalidGeometryError("h and n must each contain 2 entries")
        if not all(np.isfinite(v) and v > 0 for v in h):
            raise InvalidGeometryError(f"grid spacing must be positive, got {h}")
        if not all(float(v).is_integer() and v >= 2 for v in n_raw):
            raise InvalidGeometryError(f"grid size must be integers >= 2, got {tuple(n_raw)}")

        self.h1, self.h2 = h
        self.n1, self.n2 = int(n_raw[0]), int(n_raw[1])
        self.z = np.arange(self.n1, dtype=float) * self.h1
        self.x = np.arange(self.n2, dtype=float) * self.h2

        self.shape = (self.n1, self.n2)
        self.extent = (0.0, float(self.z[-1]), 0.0, float(self.x[-1]))  # (zmin, zmax, xmin, xmax)

    # ----------------------------------------------------------------
    # derived properties
    # ----------------------------------------------------------------
    @property
    def h(self) -> tuple[float, float]:
        return self.h1, self.h2

    @property
    def n(self) -> tuple[int, int]:
        return self.n1, self.n2

    @property
    def N(self) -> int:
        """Number of unknowns n1 * n2."""
        return self.n1 * self.n2

    # ----------------------------------------------------------------
    # helper methods
    # ----------------------------------------------------------------
    def lin_idx(self, i1, i2):
        return np.asarray(i1) + self.n1 * np.asarray(i2)

    def coord2index(self, z: float, x: float) -> tuple[int, int]:
        """Return (i1, i2) of the node at (z, x); the point must be a node."""
        fz, fx = z / self.h1, x / self.h2
        i1, i2 = int(round(fz)), int(round(fx))
        if abs(fz - i1) > self._node_tol or abs(fx - i2) > self._node_tol:
            raise InvalidGeometryError(f"coordinate (z={z}, x={x}) is not a grid node")
        if not (0 <= i1 < self.n1 and 0 <= i2 < self.n2):
            raise InvalidGeometryError(f"coordinate (z={z}, x={x}) out of grid")
        return i1, i2

    def coords2lin(self, z, x) -> np.ndarray:
        """Linear indices of a list of node coordinates, in the given order."""
        z = np.atleast_1d(np.asarray(z, float))
        x = np.atleast_1d(np.asarray(x, float))
        if z.shape != x.shape:
            raise DimensionMismatchError("z and x coordinate lists differ in length")
        idx = [self.lin_idx(*self.coord2index(zk, xk)) for zk, xk in zip(z, x)]
        return np.asarray(idx, dtype=np.int64)

    def vector(self, arr) -> np.ndarray:
        """Flatten an (n1, n2) image (or pass through a length-N vector)."""
        arr = np.asarray(arr)
        if arr.shape == self.shape:
            return arr.ravel(order="F")
        if arr.ndim == 1 and arr.size == self.N:
            return arr
        raise DimensionMismatchError(
            f"expected shape {self.shape} or ({self.N},), got {arr.shape}")

    def image(self, vec) -> np.ndarray:
        """Reshape a length-N vector to an (n1, n2) image."""
        vec = np.asarray(vec)
        if vec.size != self.N:
            raise DimensionMismatchError(f"expected {self.N} values, got {vec.size}")
        return vec.reshape(self.shape, order="F")

    def meshgrid(self, indexing: str = "ij"):
        return np.meshgrid(self.z, self.x, indexing=indexing)

    def __repr__(self):
        return f"Grid2D(h={self.h}, n={self.n})"
