"""Shared pytest fixtures for the BBM-BBM test suite."""

import pytest
import jax
jax.config.update("jax_enable_x64", True)
import jax.numpy as jnp

from jax_bbm import (
    BBMBBMVariableEquations1D,
    Solver,
    create_periodic_mesh,
    periodic_derivative_operator,
    upwind_operators,
)


def initial_condition_gaussian(x, t, equations, mesh):
    """Gaussian hump at rest over a smooth periodic bottom on [-1, 1)."""
    eta = equations.eta0 + 0.1 * jnp.exp(-50.0 * x**2)
    v = jnp.zeros_like(x)
    D = 1.0 + 0.2 * jnp.cos(jnp.pi * x)
    return jnp.array([eta, v, D])


def initial_condition_lake_at_rest(x, t, equations, mesh):
    """Flat free surface eta0 and zero velocity over a smooth periodic bottom."""
    eta = jnp.full_like(x, equations.eta0)
    v = jnp.zeros_like(x)
    D = 1.0 + 0.2 * jnp.cos(jnp.pi * x) + 0.1 * jnp.sin(3 * jnp.pi * x)
    return jnp.array([eta, v, D])


@pytest.fixture
def equations():
    return BBMBBMVariableEquations1D(gravity=9.81, eta0=2.0)


@pytest.fixture
def mesh():
    """N=64 nodes on [-1, 1)."""
    return create_periodic_mesh(-1.0, 1.0, 64)


@pytest.fixture
def central_solver(mesh):
    """Central operators with the energy-conserving wide-stencil D2 = D1²."""
    D1 = periodic_derivative_operator(1, 4, mesh.xmin, mesh.xmax, mesh.N)
    return Solver(D1, D1.compose(D1))


@pytest.fixture
def upwind_solver(mesh):
    """Upwind operators with the energy-conserving D2 = D+ D-."""
    D1 = upwind_operators(4, mesh.xmin, mesh.xmax, mesh.N)
    return Solver(D1, D1.plus.compose(D1.minus))


@pytest.fixture(params=["central", "upwind"])
def solver(request, central_solver, upwind_solver):
    """Both operator families."""
    return central_solver if request.param == "central" else upwind_solver
