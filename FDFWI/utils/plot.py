import numpy as np
import matplotlib.pyplot as plt
from matplotlib.colors import TwoSlopeNorm

from ..geometry import Grid2D


def plot_model(grid: Grid2D, vec: np.ndarray, *, ax=None, title: str | None = None,
               cmap: str | None = None, centered: bool = False, label: str | None = None):
    """
    Show a length-N model/gradient vector as a (z down, x right) image.

    centered=True uses a diverging, zero-centred colour scale (gradients,
    model updates); otherwise a sequential one (squared slowness).
    Returns the AxesImage.
    """
    img = grid.image(np.real(vec))
    if ax is None:
        _, ax = plt.subplots(figsize=(5, 4))

    if centered:
        A = float(np.max(np.abs(img))) or 1.0
        norm = TwoSlopeNorm(vmin=-A, vcenter=0.0, vmax=A)
        cmap = cmap or "seismic"
    else:
        norm = None
        cmap = cmap or "viridis"

    z0, z1, x0, x1 = grid.extent
    im = ax.imshow(img, extent=[x0, x1, z1, z0], origin="upper",
                   aspect="equal", cmap=cmap, norm=norm)
    ax.set_xlabel("x (m)")
    ax.set_ylabel("z (m)")
    if title:
        ax.set_title(title)
    ax.figure.colorbar(im, ax=ax, label=label, shrink=0.8)
    return im


def plot_acquisition(grid: Grid2D, acquisition, ax):
    """Overlay sources (stars) and receivers (triangles) on an image axis."""
    zs, xs = acquisition.src_positions
    zr, xr = acquisition.rec_positions
    ax.scatter(xs, zs, marker="*", s=60, c="r", edgecolors="k", label="sources")
    ax.scatter(xr, zr, marker="v", s=30, c="w", edgecolors="k", label="receivers")
    ax.set_xlim(grid.extent[2], grid.extent[3])
    ax.set_ylim(grid.extent[1], grid.extent[0])
    ax.legend(loc="lower right", fontsize="small")
