"""Unit tests for the right-hand side of the BBM-BBM equations."""

import pytest
import jax
import jax.numpy as jnp

from jax_bbm import (
    BBMBBMVariableEquations1D,
    Semidiscretization,
    Solver,
    create_cache,
    create_periodic_mesh,
    initial_condition_manufactured,
    lake_at_rest_error,
    rhs,
    source_terms_manufactured,
)

from conftest import initial_condition_gaussian, initial_condition_lake_at_rest


def initial_condition_still(x, t, equations, mesh):
    return jnp.array([0.0 * x, 0.0 * x, 2.0 + 0.0 * x])


class TestRHS:

    def test_zero_state(self):
        """N=4 nodes, D=2, η=v=0 and no source terms give exactly zero."""
        mesh = create_periodic_mesh(0.0, 1.0, 4)
        equations = BBMBBMVariableEquations1D(gravity=9.81)
        solver = Solver.from_accuracy_order(mesh, 2)
        cache = create_cache(mesh, equations, solver, initial_condition_still)
        q = jnp.array([jnp.zeros(4), jnp.zeros(4), jnp.full(4, 2.0)])

        dq = rhs(0.0, q, mesh, equations, None, solver, cache)

        assert dq.shape == (3, 4)
        assert jnp.array_equal(dq, jnp.zeros((3, 4)))

    def test_lake_at_rest(self, mesh, equations, solver):
        semi = Semidiscretization(mesh, equations, initial_condition_lake_at_rest, solver)
        q = semi.compute_coefficients(initial_condition_lake_at_rest, 0.0)

        dq = semi.rhs(0.0, q)

        assert jnp.array_equal(dq[0], jnp.zeros(mesh.N))
        assert jnp.allclose(dq[1], 0.0, atol=1e-10)
        assert jnp.allclose(lake_at_rest_error(q, equations), 0.0)

    def test_bathymetry_is_constant_in_time(self, mesh, equations, solver):
        semi = Semidiscretization(mesh, equations, initial_condition_gaussian, solver,
                                  source_terms=source_terms_manufactured)
        q = semi.compute_coefficients(initial_condition_gaussian, 0.0)
        q = q.at[1].set(jnp.sin(jnp.pi * mesh.grid()))
        assert jnp.array_equal(semi.rhs(0.3, q)[2], jnp.zeros(mesh.N))

    def test_hyperbolic_and_elliptic_steps(self, mesh, equations, solver):
        semi = Semidiscretization(mesh, equations, initial_condition_gaussian, solver)
        q = semi.compute_coefficients(initial_condition_gaussian, 0.0)
        q = q.at[1].set(0.1 * jnp.cos(jnp.pi * mesh.grid()))
        eta, v, D = q
        g = equations.gravity

        # (Op1, Op2) = (D1, D1) for central and (D1.minus, D1.plus) for upwind
        if solver.family.name == "UPWIND":
            op1, op2 = solver.D1.minus, solver.D1.plus
        else:
            op1, op2 = solver.D1, solver.D1
        deta = semi.cache.invImDKD.matrix @ (-op1.to_dense() @ ((D + eta) * v))
        dv = semi.cache.invImD2K.matrix @ (-op2.to_dense() @ (g * eta + 0.5 * v**2))

        dq = semi.rhs(0.0, q)
        assert jnp.allclose(dq[0], deta, atol=1e-10)
        assert jnp.allclose(dq[1], dv, atol=1e-10)

    def test_upwind_pair_is_not_symmetric(self, mesh, equations, upwind_solver):
        """Swapping D1.minus and D1.plus changes the result."""
        semi = Semidiscretization(mesh, equations, initial_condition_gaussian, upwind_solver)
        q = semi.compute_coefficients(initial_condition_gaussian, 0.0)
        q = q.at[1].set(0.1 * jnp.cos(jnp.pi * mesh.grid()))
        eta, v, D = q
        swapped = semi.cache.invImDKD.matrix @ (
            -upwind_solver.D1.plus.to_dense() @ ((D + eta) * v))
        assert not jnp.allclose(semi.rhs(0.0, q)[0], swapped, atol=1e-6)

    def test_source_terms(self, mesh, equations, central_solver):
        with_sources = Semidiscretization(mesh, equations, initial_condition_manufactured,
                                          central_solver, source_terms=source_terms_manufactured)
        without_sources = Semidiscretization(mesh, equations, initial_condition_manufactured,
                                             central_solver)
        t = 0.2
        q = with_sources.compute_coefficients(initial_condition_manufactured, t)
        x = mesh.grid()
        s = source_terms_manufactured(q, x, t, equations)

        difference = with_sources.rhs(t, q) - without_sources.rhs(t, q)
        cache = with_sources.cache
        assert jnp.allclose(difference[0], cache.invImDKD(s[0]), atol=1e-10)
        assert jnp.allclose(difference[1], cache.invImD2K(s[1]), atol=1e-10)
        assert jnp.array_equal(difference[2], jnp.zeros(mesh.N))

    def test_jit(self, mesh, equations, solver):
        semi = Semidiscretization(mesh, equations, initial_condition_manufactured, solver,
                                  source_terms=source_terms_manufactured)
        q = semi.compute_coefficients(initial_condition_manufactured, 0.1)
        rhs_jit = jax.jit(semi.rhs)
        assert jnp.allclose(rhs_jit(0.1, q), semi.rhs(0.1, q), atol=1e-10)
