import numpy as np
import pytest
import scipy.sparse as sp

from FDFWI import (
    DimensionMismatchError,
    LinearSolver,
    SingularOperatorError,
    SolverConfig,
    SolverNotConvergedError,
)
from FDFWI.optimization.operator import build_forward_operator


@pytest.fixture
def helmholtz(config, true_model):
    return build_forward_operator(config.f, true_model, config.h, config.n)


@pytest.fixture
def rhs(config, rng):
    return rng.standard_normal((config.N, 3)) + 1j * rng.standard_normal((config.N, 3))


@pytest.mark.parametrize("cfg", [SolverConfig(), SolverConfig(method="gmres", rtol=1e-12),
                                 SolverConfig(method="gmres", rtol=1e-12, preconditioner=None,
                                              restart=200)])
def test_forward_and_adjoint_solves(helmholtz, rhs, cfg):
    solver = LinearSolver(helmholtz, cfg)
    X = solver.solve(rhs)
    Y = solver.solve(rhs, adjoint=True)
    A = helmholtz.toarray()
    np.testing.assert_allclose(A @ X, rhs, atol=1e-8 * np.abs(rhs).max())
    np.testing.assert_allclose(A.conj().T @ Y, rhs, atol=1e-8 * np.abs(rhs).max())
    # A is complex symmetric, not Hermitian: the adjoint solve must differ
    assert not np.allclose(X, Y)


def test_single_vector_and_sparse_rhs(helmholtz, config):
    solver = LinearSolver(helmholtz)
    e = np.zeros(config.N)
    e[5] = 1.0
    x = solver.solve(e)
    assert x.shape == (config.N,)
    X = solver.solve(sp.csr_matrix(e[:, None]))
    assert X.shape == (config.N, 1)
    np.testing.assert_allclose(X[:, 0], x)


def test_factorisation_is_reused(helmholtz, rhs):
    solver = LinearSolver(helmholtz)
    solver.solve(rhs)
    lu = solver._lu
    solver.solve(rhs, adjoint=True)
    assert solver._lu is lu
    solver.release()
    assert solver._lu is None
    solver.solve(rhs[:, 0])
    assert solver._lu is not None


def test_bad_rhs_shape(helmholtz, config):
    with pytest.raises(DimensionMismatchError):
        LinearSolver(helmholtz).solve(np.ones(config.N + 1))


def test_non_square_operator():
    with pytest.raises(DimensionMismatchError):
        LinearSolver(sp.csc_matrix(np.ones((3, 4))))


def test_exactly_singular():
    A = sp.csc_matrix(np.array([[1.0, 2.0], [2.0, 4.0]], dtype=complex))
    with pytest.raises(SingularOperatorError):
        LinearSolver(A).solve(np.ones(2))


def test_residual_check(helmholtz, rhs):
    with pytest.raises(SingularOperatorError):
        LinearSolver(helmholtz, SolverConfig(residual_tol=1e-300)).solve(rhs)


def test_gmres_iteration_budget(helmholtz, rhs):
    cfg = SolverConfig(method="gmres", rtol=1e-14, restart=1, maxiter=1, preconditioner=None)
    with pytest.raises(SolverNotConvergedError):
        LinearSolver(helmholtz, cfg).solve(rhs)


def test_gmres_time_budget(helmholtz, rhs):
    cfg = SolverConfig(method="gmres", time_budget=0.0)
    with pytest.raises(SolverNotConvergedError):
        LinearSolver(helmholtz, cfg).solve(rhs)


def test_gmres_skips_zero_columns(helmholtz, config):
    B = np.zeros((config.N, 2), dtype=complex)
    B[0, 1] = 1.0
    X = LinearSolver(helmholtz, SolverConfig(method="gmres")).solve(B)
    np.testing.assert_array_equal(X[:, 0], 0.0)
    assert np.any(X[:, 1])


@pytest.mark.parametrize("kwargs", [dict(method="cholesky"), dict(preconditioner="amg"),
                                    dict(rtol=0.0), dict(restart=0), dict(maxiter=0),
                                    dict(time_budget=-1.0), dict(time_budget=1.0)])
def test_invalid_solver_config(kwargs):
    with pytest.raises(ValueError):
        SolverConfig(**kwargs)
