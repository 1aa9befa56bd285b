from dataclasses import dataclass
from typing import Callable, NamedTuple, Optional, Union

import jax
import jax.numpy as jnp
from jax import Array

from ..custom_types import InitialCondition, SourceTerms
from ..elliptic import DenseInverse, DenseLU
from ..mesh import Mesh1D
from ..solver import Solver


@dataclass(frozen=True)
class BBMBBMVariableEquations1D:
    """
    BBM-BBM system in 1D with spatially varying bathymetry:

        η_t + ((η + D)v)_x - 1/6 (D² η_xt)_x = 0
        v_t + gη_x + (v²/2)_x - 1/6 (D² v_t)_xx = 0

    The unknowns are the total water height η and the velocity v. The
    bottom topography is b = -D, so the water height above the bathymetry
    is h = η + D. The primitive state at a node is the vector (η, v, D).

    Reference:
        Israwi, Kalisch, Katsaounis, Mitsotakis (2022), "A regularized
        shallow-water waves system with slip-wall boundary conditions in a
        basin: theory and numerical analysis", Nonlinearity 35.

    Attributes:
        gravity: Gravitational constant g
        eta0: Constant "lake-at-rest" total water height
    """
    gravity: float
    eta0: float = 1.0

    @classmethod
    def from_constants(cls, *, gravity_constant: float, eta0: float = 1.0):
        return cls(gravity=gravity_constant, eta0=eta0)


class BBMBBMVariableCache(NamedTuple):
    """
    Quantities precomputed once per mesh and operator choice.

    invImDKD: Solver for (I - 1/6 D1 K D1), K = diag(D²)
    invImD2K: Solver for (I - 1/6 D2 K)
    tmp1: Scratch vector of length N; written before it is read
    """
    invImDKD: Union[DenseInverse, DenseLU]
    invImD2K: Union[DenseInverse, DenseLU]
    tmp1: Array


# Conversion between variables

def prim2prim(q: Array, equations: BBMBBMVariableEquations1D) -> Array:
    return q


def prim2cons(q: Array, equations: BBMBBMVariableEquations1D) -> Array:
    """(η, v, D) -> (h, hv, b). Works on a node vector or a (3, N) field."""
    eta, v, D = q[0], q[1], q[2]
    h = eta + D
    hv = h * v
    b = -D
    return jnp.stack([h, hv, b])


def cons2prim(u: Array, equations: BBMBBMVariableEquations1D) -> Array:
    """(h, hv, b) -> (η, v, D). Undefined for dry states h = 0."""
    h, hv, b = u[0], u[1], u[2]
    eta = h + b
    v = hv / h
    D = -b
    return jnp.stack([eta, v, D])


def varnames(conversion: Callable, equations: BBMBBMVariableEquations1D) -> tuple:
    if conversion is prim2prim:
        return ("η", "v", "D")
    if conversion is prim2cons:
        return ("h", "hv", "b")
    raise ValueError(f"No variable names for conversion {conversion.__name__}")


# Pointwise diagnostics

def waterheight_total(q: Array, equations: BBMBBMVariableEquations1D) -> Array:
    return q[0]


def velocity(q: Array, equations: BBMBBMVariableEquations1D) -> Array:
    return q[1]


def bathymetry(q: Array, equations: BBMBBMVariableEquations1D) -> Array:
    return -q[2]


def waterheight(q: Array, equations: BBMBBMVariableEquations1D) -> Array:
    return waterheight_total(q, equations) - bathymetry(q, equations)


def energy_total(q: Array, equations: BBMBBMVariableEquations1D) -> Array:
    """Energy density 0.5 (g η² + (D + η) v²)."""
    eta, v, D = q[0], q[1], q[2]
    return 0.5 * (equations.gravity * eta**2 + (D + eta) * v**2)


def entropy(q: Array, equations: BBMBBMVariableEquations1D) -> Array:
    return energy_total(q, equations)


def lake_at_rest_error(q: Array, equations: BBMBBMVariableEquations1D) -> Array:
    """Deviation of η from eta0; stays constant for the lake-at-rest test case."""
    return jnp.abs(equations.eta0 - q[0])


# Initial conditions and source terms

def initial_condition_convergence_test(
    x: Array, t: Array, equations: BBMBBMVariableEquations1D, mesh: Mesh1D
) -> Array:
    """
    Travelling wave over constant bathymetry for convergence tests on a
    periodic domain (Example 5 in Section 3 of Chen (1997), "Exact
    Traveling-Wave Solutions to Bidirectional Wave Equations", written for
    the dimensional equations).
    """
    g = equations.gravity
    D = 2.0  # constant bathymetry in this case
    c = 5 / 2 * jnp.sqrt(D * g)
    rho = 18 / 5
    x_t = jnp.mod(x - c * t - mesh.xmin, mesh.xmax - mesh.xmin) + mesh.xmin

    theta = 0.5 * jnp.sqrt(rho) * x_t / D
    sech2 = 1.0 / jnp.cosh(theta)**2
    eta = (-D + c**2 * rho**2 / (81 * g)
           + 5 * c**2 * rho**2 / (108 * g) * (2 * sech2 - 3 * sech2**2))
    v = c * (1 - 5 * rho / 18) + 5 * c * rho / 6 * sech2
    return jnp.array([eta, v, jnp.full_like(eta, D)])


def initial_condition_manufactured(
    x: Array, t: Array, equations: BBMBBMVariableEquations1D, mesh: Mesh1D
) -> Array:
    """Smooth manufactured solution, see `source_terms_manufactured`."""
    eta = jnp.exp(t) * jnp.cos(2 * jnp.pi * (x - 2 * t))
    v = jnp.exp(t / 2) * jnp.sin(2 * jnp.pi * (x - t / 2))
    D = 5 + 2 * jnp.cos(2 * jnp.pi * x)
    return jnp.array([eta, v, D])


def source_terms_manufactured(
    q: Array, x: Array, t: Array, equations: BBMBBMVariableEquations1D
) -> Array:
    """Source terms matching `initial_condition_manufactured`."""
    g = equations.gravity
    pi = jnp.pi
    a1 = jnp.cos(pi * (2 * x))
    a2 = jnp.sin(pi * (2 * x))
    a3 = jnp.cos(pi * (t - 2 * x))
    a4 = jnp.sin(pi * (t - 2 * x))
    a5 = jnp.sin(pi * (2 * t - 4 * x))
    a6 = jnp.sin(pi * (4 * t - 2 * x))
    a7 = jnp.cos(pi * (4 * t - 2 * x))
    sx = jnp.sin(pi * x)

    dq1 = (-2 * pi**2 * (4 * pi * a6 - a7) * (2 * a1 + 5)**2 * jnp.exp(t) / 3
           + 8 * pi**2 * (a6 + 4 * pi * a7) * (2 * a1 + 5) * jnp.exp(t) * a2 / 3
           + 2 * pi * (2 * a1 + 5) * jnp.exp(t / 2) * a3
           - 2 * pi * jnp.exp(3 * t / 2) * a4 * a6
           + 2 * pi * jnp.exp(3 * t / 2) * a3 * a7
           + 4 * pi * jnp.exp(t / 2) * a2 * a4
           - 4 * pi * jnp.exp(t) * a6 + jnp.exp(t) * a7)
    dq2 = (2 * pi * g * jnp.exp(t) * a6
           - pi**2 * (8 * (2 * pi * a4 - a3) * (2 * a1 + 5) * a2
                      + (a4 + 2 * pi * a3) * (2 * a1 + 5)**2
                      + 4 * (a4 + 2 * pi * a3) * (16 * sx**4 - 26 * sx**2 + 7))
           * jnp.exp(t / 2) / 3
           - jnp.exp(t / 2) * a4 / 2 - pi * jnp.exp(t / 2) * a3
           - pi * jnp.exp(t) * a5)
    return jnp.array([dq1, dq2, jnp.zeros_like(dq1)])


def initial_condition_dingemans(
    x: Array, t: Array, equations: BBMBBMVariableEquations1D, mesh: Mesh1D
) -> Array:
    """
    Waves generated by a wave maker over a trapezoidal bar, approximated with
    the dispersion relation of the Euler equations as in the experiments of
    Dingemans (1994). See also Svärd and Kalisch (2023), arXiv:2302.09924.
    """
    eta0 = 0.8
    A = 0.02
    # root of omega^2 - g k tanh(k eta0) for omega = 2 pi / (2.02 sqrt(2))
    k = 0.8406220896381442
    outside = (x < -30.5 * jnp.pi / k) | (x > -8.5 * jnp.pi / k)
    h = jnp.where(outside, 0.0, A * jnp.cos(k * x))
    v = jnp.sqrt(equations.gravity / k * jnp.tanh(k * eta0)) * h / eta0

    b = jnp.where(
        (11.01 <= x) & (x < 23.04), 0.6 * (x - 11.01) / (23.04 - 11.01),
        jnp.where(
            (23.04 <= x) & (x < 27.04), 0.6,
            jnp.where(
                (27.04 <= x) & (x < 33.07), 0.6 * (33.07 - x) / (33.07 - 27.04),
                0.0)))
    eta = h + eta0
    D = -b
    return jnp.array([eta, v, D])


# Semidiscretization

def evaluate_nodes(func: Callable, x: Array, t, equations, mesh: Mesh1D) -> Array:
    """Evaluate `func(x_i, t, equations, mesh)` at every node; shape (3, N)."""
    return jax.vmap(
        lambda xi: jnp.asarray(func(xi, t, equations, mesh)), out_axes=1
    )(x)


def create_cache(
    mesh: Mesh1D,
    equations: BBMBBMVariableEquations1D,
    solver: Solver,
    initial_condition: InitialCondition,
    elliptic_solver: Callable = DenseInverse,
) -> BBMBBMVariableCache:
    """
    Build the elliptic solvers of the dispersive terms.

    D is assumed independent of time, so it is sampled from the initial
    condition at t = 0 once and K = diag(D²) stays fixed for the whole run.
    Central operators give (I - 1/6 D1 K D1), upwind operators give
    (I - 1/6 D1.minus K D1.plus); the momentum equation always uses
    (I - 1/6 D2 K).

    Args:
        mesh: Periodic mesh
        equations: Equation parameters
        solver: First- and second-derivative operators
        initial_condition: Function (x, t, equations, mesh) -> (η, v, D)
        elliptic_solver: Factory A -> solver object, e.g. `DenseInverse`
            (explicit inverse) or `DenseLU` (cached factorisation)

    Returns:
        BBMBBMVariableCache
    """
    if not callable(elliptic_solver):
        raise TypeError(f"elliptic_solver must be callable, got {elliptic_solver!r}")
    if solver.size != mesh.nnodes:
        raise ValueError(
            f"Solver acts on {solver.size} nodes, but the mesh has {mesh.nnodes}"
        )

    D = evaluate_nodes(initial_condition, mesh.grid(), 0.0, equations, mesh)[2]
    K = jnp.diag(D**2)
    I = jnp.eye(mesh.nnodes, dtype=D.dtype)

    D1_left = solver.op_eta.to_dense()
    D1_right = solver.op_v.to_dense()
    invImDKD = elliptic_solver(I - 1 / 6 * D1_left @ K @ D1_right)
    invImD2K = elliptic_solver(I - 1 / 6 * solver.D2.to_dense() @ K)

    tmp1 = jnp.zeros(mesh.nnodes, dtype=D.dtype)
    return BBMBBMVariableCache(invImDKD=invImDKD, invImD2K=invImD2K, tmp1=tmp1)


def calc_sources(
    q: Array,
    t,
    source_terms: SourceTerms,
    equations: BBMBBMVariableEquations1D,
    mesh: Mesh1D,
) -> Array:
    """Evaluate `source_terms(q_i, x_i, t, equations)` at every node; shape (3, N)."""
    return jax.vmap(
        lambda qi, xi: jnp.asarray(source_terms(qi, xi, t, equations)),
        in_axes=(1, 0),
        out_axes=1,
    )(q, mesh.grid())


def rhs(
    t,
    q: Array,
    mesh: Mesh1D,
    equations: BBMBBMVariableEquations1D,
    source_terms: Optional[SourceTerms],
    solver: Solver,
    cache: BBMBBMVariableCache,
) -> Array:
    """
    Time derivative of the primitive variables q = (η, v, D), shape (3, N).

    Discretization that conserves the mass of η and v and the energy for
    periodic boundary conditions (Ranocha, Mitsotakis, Ketcheson (2020),
    "A Broad Class of Conservative Numerical Methods for Dispersive Wave
    Equations"), adapted to variable bathymetry.

    Args:
        t: Current time
        q: Current state
        mesh: Periodic mesh
        equations: Equation parameters
        source_terms: Optional function (q, x, t, equations) -> (s1, s2, s3)
        solver: Derivative operators
        cache: Output of `create_cache`

    Returns:
        dq with dD = 0
    """
    eta, v, D = q[0], q[1], q[2]

    with jax.named_scope("deta hyperbolic"):
        deta = -solver.op_eta(D * v + eta * v)
    with jax.named_scope("dv hyperbolic"):
        dv = -solver.op_v(equations.gravity * eta + 0.5 * v**2)

    if source_terms is not None:
        with jax.named_scope("source terms"):
            sources = calc_sources(q, t, source_terms, equations, mesh)
            deta = deta + sources[0]
            dv = dv + sources[1]

    with jax.named_scope("deta elliptic"):
        deta = cache.invImDKD(deta)
    with jax.named_scope("dv elliptic"):
        dv = cache.invImD2K(dv)

    dD = jnp.zeros_like(D)
    return jnp.stack([deta, dv, dD])
