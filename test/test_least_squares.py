import numpy as np
import pytest

from FDFWI import Function, HessianOperator, RegularizedLS, evaluate, DimensionMismatchError


@pytest.fixture
def fun(config, observed):
    return RegularizedLS(observed, 0.05, config)


def test_is_function(fun):
    assert isinstance(fun, Function)


def test_matches_evaluate(fun, config, background, observed):
    f, g, _ = evaluate(background, observed, 0.05, config)
    assert fun.value(background) == pytest.approx(f, rel=1e-14)
    assert fun(background) == pytest.approx(f, rel=1e-14)
    np.testing.assert_allclose(fun.gradient(background), g, rtol=1e-12)


def test_cache_reuses_evaluation(fun, background):
    with pytest.raises(RuntimeError):
        fun.last_misfit
    f = fun.value(background)
    fun.gradient(background)
    assert fun.n_evals == 1
    assert fun.last_misfit == f

    fun.hessian(background)
    fun.hessp(background, np.ones_like(background))
    assert fun.n_evals == 2

    fun.value(background * 1.01)
    assert fun.n_evals == 3


def test_hessp_matches_hessian(fun, background, rng):
    p = rng.standard_normal(background.size)
    H = fun.hessian(background)
    assert isinstance(H, HessianOperator)
    np.testing.assert_allclose(fun.hessp(background, p), H.apply(p), rtol=1e-12)


def test_hessp_on_image_model(fun, config, background, rng):
    m = config.grid.image(background)
    p = rng.standard_normal(config.grid.shape)
    Hp = fun.hessp(m, p)
    assert Hp.shape == p.shape
    np.testing.assert_allclose(config.grid.vector(Hp),
                               fun.hessian(background).apply(config.grid.vector(p)), rtol=1e-12)


def test_negative_gradient_is_descent_direction(fun, background):
    g = fun.gradient(background)
    f0 = fun.value(background)
    f1 = fun.value(background - 1e-4 * g / np.linalg.norm(g))
    assert f1 < f0


def test_rejects_bad_input(config, observed):
    with pytest.raises(ValueError):
        RegularizedLS(observed, -1.0, config)
    with pytest.raises(DimensionMismatchError):
        RegularizedLS(observed.T, 0.0, config)
