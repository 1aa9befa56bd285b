"""Unit tests for the construction of the elliptic operators."""

import typing
import pytest
import jax.numpy as jnp

from jax_bbm import (
    DenseInverse,
    DenseLU,
    Solver,
    create_cache,
    create_periodic_mesh,
    initial_condition_manufactured,
    source_terms_manufactured,
    Semidiscretization,
)

from jax_bbm.equations import BBMBBMVariableCache

from conftest import initial_condition_gaussian


def bathymetry_squared(mesh, equations, initial_condition):
    x = mesh.grid()
    return jnp.diag(initial_condition(x, 0.0, equations, mesh)[2]**2)


class TestCreateCache:

    def test_central_operators(self, mesh, equations, central_solver):
        cache = create_cache(mesh, equations, central_solver, initial_condition_gaussian)
        K = bathymetry_squared(mesh, equations, initial_condition_gaussian)
        D1 = central_solver.D1.to_dense()
        D2 = central_solver.D2.to_dense()
        I = jnp.eye(mesh.N)
        assert jnp.allclose(cache.invImDKD.matrix @ (I - D1 @ K @ D1 / 6), I, atol=1e-10)
        assert jnp.allclose(cache.invImD2K.matrix @ (I - D2 @ K / 6), I, atol=1e-10)

    def test_upwind_operators(self, mesh, equations, upwind_solver):
        cache = create_cache(mesh, equations, upwind_solver, initial_condition_gaussian)
        K = bathymetry_squared(mesh, equations, initial_condition_gaussian)
        Dm = upwind_solver.D1.minus.to_dense()
        Dp = upwind_solver.D1.plus.to_dense()
        D2 = upwind_solver.D2.to_dense()
        I = jnp.eye(mesh.N)
        assert jnp.allclose(cache.invImDKD.matrix @ (I - Dm @ K @ Dp / 6), I, atol=1e-10)
        assert jnp.allclose(cache.invImD2K.matrix @ (I - D2 @ K / 6), I, atol=1e-10)

    def test_idempotent(self, mesh, equations, solver):
        cache1 = create_cache(mesh, equations, solver, initial_condition_gaussian)
        cache2 = create_cache(mesh, equations, solver, initial_condition_gaussian)
        assert jnp.array_equal(cache1.invImDKD.matrix, cache2.invImDKD.matrix)
        assert jnp.array_equal(cache1.invImD2K.matrix, cache2.invImD2K.matrix)

    def test_bathymetry_sampled_at_initial_time(self, mesh, equations, central_solver):
        def moving_bottom(x, t, equations, mesh):
            eta, v, D = initial_condition_gaussian(x, t, equations, mesh)
            return jnp.array([eta, v, D + t])

        cache = create_cache(mesh, equations, central_solver, moving_bottom)
        reference = create_cache(mesh, equations, central_solver, initial_condition_gaussian)
        assert jnp.array_equal(cache.invImDKD.matrix, reference.invImDKD.matrix)

    def test_scratch(self, mesh, equations, central_solver):
        cache = create_cache(mesh, equations, central_solver, initial_condition_gaussian)
        assert cache.tmp1.shape == (mesh.N,)

    def test_lu_factorization(self, mesh, equations, solver):
        dense = create_cache(mesh, equations, solver, initial_condition_gaussian)
        lu = create_cache(mesh, equations, solver, initial_condition_gaussian,
                          elliptic_solver=DenseLU)
        assert isinstance(dense.invImDKD, DenseInverse)
        assert isinstance(lu.invImDKD, DenseLU)
        b = jnp.sin(jnp.pi * mesh.grid())
        assert jnp.allclose(lu.invImDKD(b), dense.invImDKD(b), atol=1e-12)
        assert jnp.allclose(lu.invImD2K(b), dense.invImD2K(b), atol=1e-12)
        assert jnp.allclose(lu.invImD2K.matrix, dense.invImD2K.matrix, atol=1e-12)

    def test_cache_field_types(self):
        """Both elliptic solver kinds are valid cache entries."""
        hints = typing.get_type_hints(BBMBBMVariableCache)
        for name in ("invImDKD", "invImD2K"):
            assert set(typing.get_args(hints[name])) == {DenseInverse, DenseLU}

    def test_mesh_mismatch(self, equations, central_solver):
        other = create_periodic_mesh(-1.0, 1.0, 32)
        with pytest.raises(ValueError):
            create_cache(other, equations, central_solver, initial_condition_gaussian)

    def test_invalid_elliptic_solver(self, mesh, equations, central_solver):
        with pytest.raises(TypeError):
            create_cache(mesh, equations, central_solver, initial_condition_gaussian,
                         elliptic_solver="inverse")


class TestSemidiscretization:

    def test_cache_built_once(self, mesh, equations, central_solver, capsys):
        semi = Semidiscretization(mesh, equations, initial_condition_manufactured,
                                  central_solver, source_terms=source_terms_manufactured,
                                  verbose=True)
        cache = semi.cache
        q = semi.compute_coefficients(initial_condition_manufactured, 0.0)
        semi.rhs(0.0, q)
        semi.rhs(0.1, q)
        assert semi.cache is cache
        assert "64 nodes" in capsys.readouterr().out

    def test_compute_coefficients(self, mesh, equations):
        semi = Semidiscretization(mesh, equations, initial_condition_manufactured,
                                  Solver.from_accuracy_order(mesh, 2))
        q = semi.compute_coefficients(initial_condition_manufactured, 0.5)
        x = mesh.grid()
        assert q.shape == (3, mesh.N)
        assert jnp.allclose(q[0], jnp.exp(0.5) * jnp.cos(2 * jnp.pi * (x - 1.0)))
        assert jnp.allclose(q[2], 5 + 2 * jnp.cos(2 * jnp.pi * x))
