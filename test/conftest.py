import numpy as np
import pytest

from FDFWI import ModelConfig, simulate


@pytest.fixture
def corner_config():
    """5 x 5 grid, one source at the centre node, one receiver in a corner."""
    return ModelConfig(h=(10.0, 10.0), n=(5, 5), f=5.0,
                       zs=[20.0], xs=[20.0], zr=[0.0], xr=[0.0])


@pytest.fixture
def config():
    """11 x 11 transmission geometry: 3 sources at the top, 6 receivers at the bottom."""
    return ModelConfig(h=(10.0, 10.0), n=(11, 11), f=5.0,
                       zs=[10.0] * 3, xs=[20.0, 50.0, 80.0],
                       zr=[90.0] * 6, xr=[0.0, 20.0, 40.0, 60.0, 80.0, 100.0])


@pytest.fixture
def background(config):
    """Constant 2 km/s background, squared slowness in s^2/km^2."""
    return np.full(config.N, 0.25)


@pytest.fixture
def true_model(config, background):
    img = config.grid.image(background).copy()
    img[3:6, 5:8] += 0.05
    return config.grid.vector(img)


@pytest.fixture
def observed(config, true_model):
    return simulate(true_model, config)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
