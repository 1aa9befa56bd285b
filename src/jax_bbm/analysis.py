"""
Integral and error diagnostics.

On a periodic uniform mesh the finite difference mass matrix is dx * I, so
integrals are dx-weighted sums. Mass of η and v is conserved to round-off by
the semidiscretization; the energy integral is conserved by the
semidiscretization when D2 is compatible with D1 and drifts only through the
time integration error.
"""

from typing import Callable, Dict

import numpy as np
import jax.numpy as jnp
from jax import Array

from .equations import (
    prim2cons,
    waterheight_total,
    velocity,
    entropy,
    lake_at_rest_error,
)
from .semidiscretization import Semidiscretization


def integrate_field(field: Array, semi: Semidiscretization) -> Array:
    return semi.mesh.dx * jnp.sum(field)


def integrate_quantity(func: Callable, q: Array, semi: Semidiscretization) -> Array:
    """Integral of a pointwise quantity func(q, equations) over the domain."""
    return integrate_field(func(q, semi.equations), semi)


def calc_error_norms(q: Array, t, semi: Semidiscretization):
    """
    Discrete L2 and L∞ errors against the initial condition evaluated at t.

    Returns:
        l2: Array of shape (3,), sqrt(dx * sum(err²)) per variable
        linf: Array of shape (3,), max |err| per variable
    """
    q_exact = semi.compute_coefficients(semi.initial_condition, t)
    err = q - q_exact
    l2 = jnp.sqrt(semi.mesh.dx * jnp.sum(err**2, axis=1))
    linf = jnp.max(jnp.abs(err), axis=1)
    return l2, linf


def analyze(t, q: Array, semi: Semidiscretization) -> Dict[str, Array]:
    """Error norms and conserved integrals of a single state."""
    l2, linf = calc_error_norms(q, t, semi)
    hv = prim2cons(q, semi.equations)[1]
    return {
        "l2": l2,
        "linf": linf,
        "waterheight_total": integrate_quantity(waterheight_total, q, semi),
        "velocity": integrate_quantity(velocity, q, semi),
        "hv": integrate_field(hv, semi),
        "entropy": integrate_quantity(entropy, q, semi),
        "lake_at_rest_error": integrate_quantity(lake_at_rest_error, q, semi),
    }


def analysis_history(
    ts: Array,
    ys: Array,
    semi: Semidiscretization,
    verbose: bool = False,
) -> Dict[str, np.ndarray]:
    """
    Run `analyze` over a saved trajectory, e.g. from `solve_with_history`.

    Args:
        ts: Times, shape (n_points,)
        ys: States, shape (n_points, 3, N)
        semi: Semidiscretization that produced the trajectory
        verbose: Print the final errors and the drift of the integrals

    Returns:
        Dictionary of NumPy arrays, one row per saved time
    """
    rows = [analyze(t, y, semi) for t, y in zip(ts, ys)]
    history = {"t": np.asarray(ts)}
    for key in rows[0]:
        history[key] = np.stack([np.asarray(row[key]) for row in rows])

    if verbose:
        print(f"Analysis at t={float(history['t'][-1]):.3f}:")
        print(f"  l2:   {history['l2'][-1]}")
        print(f"  linf: {history['linf'][-1]}")
        for key in ("waterheight_total", "velocity", "hv", "entropy", "lake_at_rest_error"):
            drift = history[key][-1] - history[key][0]
            print(f"  ∫{key}: {history[key][-1]:.12e} (change {drift:+.3e})")

    return history
