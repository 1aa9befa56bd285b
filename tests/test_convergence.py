"""
Consistency of the semidiscretization with exact solutions.

The truncation error rhs(t, q_exact(t)) - dq_exact/dt is measured on two
grids; the time derivative of the exact solution comes from forward-mode
differentiation of the initial condition.
"""

import pytest
import jax
import jax.numpy as jnp

from jax_bbm import (
    BBMBBMVariableEquations1D,
    Semidiscretization,
    Solver,
    create_periodic_mesh,
    initial_condition_convergence_test,
    initial_condition_manufactured,
    periodic_derivative_operator,
    source_terms_manufactured,
    upwind_operators,
)


def central(mesh, accuracy_order):
    D1 = periodic_derivative_operator(1, accuracy_order, mesh.xmin, mesh.xmax, mesh.N)
    return Solver(D1, D1.compose(D1))


def upwind(mesh, accuracy_order):
    D1 = upwind_operators(accuracy_order, mesh.xmin, mesh.xmax, mesh.N)
    return Solver(D1, D1.plus.compose(D1.minus))


def narrow(mesh, accuracy_order):
    return Solver.from_accuracy_order(mesh, accuracy_order)


def truncation_error(semi, t):
    t = jnp.asarray(t)
    q, dq_exact = jax.jvp(
        lambda s: semi.compute_coefficients(semi.initial_condition, s), (t,), (jnp.ones_like(t),)
    )
    residual = semi.rhs(t, q) - dq_exact
    return float(jnp.max(jnp.abs(residual[:2])))


def observed_order(make_solver, initial_condition, source_terms, xmin, xmax, Ns, t):
    equations = BBMBBMVariableEquations1D(gravity=9.81)
    errors = []
    for N in Ns:
        mesh = create_periodic_mesh(xmin, xmax, N)
        semi = Semidiscretization(mesh, equations, initial_condition, make_solver(mesh, 4),
                                  source_terms=source_terms)
        errors.append(truncation_error(semi, t))
    return jnp.log(errors[0] / errors[1]) / jnp.log(Ns[1] / Ns[0]), errors


class TestManufacturedSolution:

    @pytest.mark.parametrize("make_solver, min_order", [
        (central, 3.5),
        (narrow, 3.5),
        (upwind, 3.3),
    ])
    def test_order(self, make_solver, min_order):
        eoc, errors = observed_order(make_solver, initial_condition_manufactured,
                                     source_terms_manufactured, 0.0, 1.0, (64, 128), 0.3)
        assert errors[1] < 1e-2
        assert eoc > min_order

    def test_missing_sources_are_inconsistent(self):
        eoc, errors = observed_order(central, initial_condition_manufactured, None,
                                     0.0, 1.0, (64, 128), 0.3)
        assert errors[1] > 0.1


class TestTravellingWave:

    @pytest.mark.parametrize("make_solver, min_order", [
        (central, 3.5),
        (upwind, 3.3),
    ])
    def test_order(self, make_solver, min_order):
        eoc, errors = observed_order(make_solver, initial_condition_convergence_test, None,
                                     -35.0, 35.0, (256, 512), 0.5)
        assert eoc > min_order
