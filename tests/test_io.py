"""Unit tests for saving and loading trajectories."""

import numpy as np
import jax.numpy as jnp

from jax_bbm import RK4, Semidiscretization, analysis_history, semidiscretize, solve_with_history
from jax_bbm.io import load_trajectory, save_trajectory

from conftest import initial_condition_gaussian


def test_round_trip(tmp_path, mesh, equations, upwind_solver):
    semi = Semidiscretization(mesh, equations, initial_condition_gaussian, upwind_solver)
    fun, t_span, q0, _ = semidiscretize(semi, (0.0, 0.01))
    ts, ys = solve_with_history(fun, t_span, q0, RK4(), step_size=5e-3)
    history = analysis_history(ts, ys, semi)
    path = tmp_path / "runs" / "gaussian.h5"

    save_trajectory(str(path), ts, ys, semi, history=history, metadata={"dt": 5e-3})
    t, q, analysis, attrs = load_trajectory(str(path))

    np.testing.assert_allclose(t, np.asarray(ts))
    np.testing.assert_allclose(q, np.asarray(ys))
    np.testing.assert_allclose(analysis["entropy"], history["entropy"])
    assert attrs["N"] == mesh.N
    assert attrs["operator_family"] == "upwind"
    assert attrs["initial_condition"] == "initial_condition_gaussian"
    assert attrs["dt"] == 5e-3


def test_without_history(tmp_path, mesh, equations, central_solver):
    semi = Semidiscretization(mesh, equations, initial_condition_gaussian, central_solver)
    q0 = semi.compute_coefficients(initial_condition_gaussian, 0.0)
    path = tmp_path / "state.h5"

    save_trajectory(str(path), jnp.zeros(1), q0[None], semi)
    t, q, analysis, attrs = load_trajectory(str(path))

    assert q.shape == (1, 3, mesh.N)
    assert analysis == {}
    assert attrs["gravity"] == equations.gravity
