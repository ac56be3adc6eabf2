from .grid_2D import Grid2D
from .acquisition import Acquisition

__all__ = ['Grid2D', 'Acquisition']
