import numpy as np
import pytest

from FDFWI import DimensionMismatchError, InvalidFrequencyError, InvalidGeometryError, ModelConfig
from FDFWI.geometry import Acquisition, Grid2D
from FDFWI.optimization.operator import (
    build_forward_operator,
    build_jacobian_action,
    build_regularization_operator,
    build_sampling_operator,
)
from FDFWI.optimization.operator.helmholtz import angular_frequency, boundary_weights


# ------------------------------------------------------------
# grid & acquisition
# ------------------------------------------------------------
def test_grid_ordering_is_column_major():
    grid = Grid2D(h=(10.0, 5.0), n=(4, 3))
    assert grid.N == 12
    assert grid.extent == (0.0, 30.0, 0.0, 10.0)
    assert grid.coord2index(20.0, 5.0) == (2, 1)
    assert int(grid.lin_idx(2, 1)) == 2 + 4 * 1
    img = np.arange(12).reshape(4, 3)
    vec = grid.vector(img)
    assert vec[grid.lin_idx(2, 1)] == img[2, 1]
    np.testing.assert_array_equal(grid.image(vec), img)


@pytest.mark.parametrize("h, n", [((0.0, 1.0), (4, 4)), ((1.0, -1.0), (4, 4)),
                                  ((1.0, 1.0), (1, 4)), ((1.0, 1.0), (4, 2.5)),
                                  ((1.0,), (4, 4))])
def test_invalid_grid(h, n):
    with pytest.raises(InvalidGeometryError):
        Grid2D(h=h, n=n)


def test_off_grid_and_outside_coordinates():
    grid = Grid2D(h=(10.0, 10.0), n=(5, 5))
    with pytest.raises(InvalidGeometryError):
        grid.coord2index(15.0, 0.0)
    with pytest.raises(InvalidGeometryError):
        grid.coord2index(50.0, 0.0)
    with pytest.raises(InvalidGeometryError):
        grid.coord2index(-10.0, 0.0)


def test_acquisition_keeps_order():
    grid = Grid2D(h=(10.0, 10.0), n=(5, 5))
    acq = Acquisition(grid, zs=[0.0, 40.0], xs=[0.0, 40.0], zr=[10.0, 0.0, 20.0], xr=[0.0] * 3)
    np.testing.assert_array_equal(acq.src_idx, [0, 24])
    np.testing.assert_array_equal(acq.rec_idx, [1, 0, 2])
    assert acq.data_shape == (3, 2)
    with pytest.raises(DimensionMismatchError):
        acq.check_data(np.zeros((2, 3)))


def test_acquisition_validation():
    grid = Grid2D(h=(10.0, 10.0), n=(5, 5))
    with pytest.raises(DimensionMismatchError):
        Acquisition(grid, zs=[0.0, 10.0], xs=[0.0], zr=[0.0], xr=[0.0])
    with pytest.raises(InvalidGeometryError):
        Acquisition(grid, zs=[], xs=[], zr=[0.0], xr=[0.0])


# ------------------------------------------------------------
# configuration
# ------------------------------------------------------------
def test_config_from_dict_and_with_frequency(corner_config):
    d = dict(h=[10, 10], n=[5, 5], f=5, zs=20, xs=20, zr=[0], xr=[0])
    cfg = ModelConfig.from_dict(d)
    assert cfg == corner_config
    assert cfg.f == 5.0 and isinstance(cfg.f, float)
    assert (cfg.N, cfg.n_src, cfg.n_rec) == (25, 1, 1)

    cfg10 = cfg.with_frequency(10.0)
    assert cfg10.f == 10.0 and cfg.f == 5.0
    with pytest.raises(InvalidFrequencyError):
        cfg.with_frequency(0.0)


def test_config_missing_key():
    with pytest.raises(KeyError):
        ModelConfig.from_dict(dict(h=(1, 1), n=(3, 3), f=1.0, zs=[0], xs=[0], zr=[0]))


def test_config_coerce_rejects_other_types():
    with pytest.raises(TypeError):
        ModelConfig.coerce([1, 2, 3])


@pytest.mark.parametrize("f", [0, -1.0, np.nan, "abc"])
def test_config_invalid_frequency(f):
    with pytest.raises(InvalidFrequencyError):
        ModelConfig(h=(10, 10), n=(5, 5), f=f, zs=[0], xs=[0], zr=[0], xr=[0])


def test_config_is_frozen(corner_config):
    with pytest.raises(AttributeError):
        corner_config.f = 1.0


def test_coerce_returns_same_instance(corner_config):
    grid = corner_config.grid
    assert ModelConfig.coerce(corner_config) is corner_config
    assert corner_config.grid is grid


# ------------------------------------------------------------
# operator providers
# ------------------------------------------------------------
def test_forward_operator_structure(corner_config):
    cfg = corner_config
    m = np.full(cfg.N, 0.25)
    A = build_forward_operator(cfg.f, m, cfg.h, cfg.n)
    assert A.shape == (25, 25)
    # complex symmetric, damped only on the boundary
    np.testing.assert_allclose((A - A.T).toarray(), 0.0)
    a, b = boundary_weights(cfg.n)
    interior = cfg.grid.lin_idx(2, 2)
    assert b[interior] == 0 and a[interior] == 1
    assert A[interior, interior].imag == 0
    corner = cfg.grid.lin_idx(0, 0)
    w = angular_frequency(cfg.f)
    assert A[corner, corner].imag == pytest.approx(w * 0.5)


def test_jacobian_action_matches_operator_derivative(corner_config, rng):
    cfg = corner_config
    m = 0.25 + 0.01 * rng.random(cfg.N)
    u = rng.standard_normal(cfg.N) + 1j * rng.standard_normal(cfg.N)
    dm = rng.standard_normal(cfg.N)
    eps = 1e-6
    Ap = build_forward_operator(cfg.f, m + eps * dm, cfg.h, cfg.n)
    Am = build_forward_operator(cfg.f, m - eps * dm, cfg.h, cfg.n)
    fd = (Ap @ u - Am @ u) / (2 * eps)
    G = build_jacobian_action(cfg.f, m, u, cfg.h, cfg.n)
    np.testing.assert_allclose(G @ dm, fd, rtol=1e-6, atol=1e-10)


def test_regularization_operator():
    L = build_regularization_operator((10.0, 5.0), (4, 3))
    assert L.shape == (3 * 3 + 4 * 2, 12)
    np.testing.assert_allclose(L @ np.ones(12), 0.0)
    ramp = np.repeat(np.arange(3.0), 4)  # x-ramp, constant along z
    Lr = L @ ramp
    np.testing.assert_allclose(Lr[:9], 0.0)
    np.testing.assert_allclose(Lr[9:], 1.0 / 5.0)


def test_sampling_operator(corner_config):
    cfg = corner_config
    P = build_sampling_operator(cfg.h, cfg.n, [0.0, 40.0], [0.0, 10.0])
    assert P.shape == (25, 2)
    u = np.arange(25.0)
    np.testing.assert_array_equal(P.T @ u, [0.0, 4.0 + 5.0])
    with pytest.raises(InvalidGeometryError):
        build_sampling_operator(cfg.h, cfg.n, [5.0], [0.0])
