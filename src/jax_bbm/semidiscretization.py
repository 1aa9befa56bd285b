"""Semidiscretization of the BBM-BBM equations on a periodic mesh."""

import time
from typing import Callable, NamedTuple, Optional, Tuple

from jax import Array

from .custom_types import InitialCondition, RHSFunction, SourceTerms
from .elliptic import DenseInverse
from .equations import BBMBBMVariableEquations1D, create_cache, evaluate_nodes, rhs
from .mesh import Mesh1D
from .solver import Solver


class ODEProblem(NamedTuple):
    """Arguments for `solve_ivp` / `solve_with_history`."""
    fun: RHSFunction
    t_span: Tuple[float, float]
    y0: Array
    args: tuple = ()


class Semidiscretization:
    """
    Mesh, equations, operators and precomputed cache of one simulation.

    The cache (dense elliptic solvers, O(N^3) to build) is created exactly
    once, here. Rebuild the semidiscretization if the mesh or the operators
    change; never during time stepping.

    Args:
        mesh: Periodic mesh
        equations: Equation parameters
        initial_condition: Function (x, t, equations, mesh) -> (η, v, D).
            Also the source of the time-invariant bathymetry.
        solver: Derivative operators
        source_terms: Optional function (q, x, t, equations) -> (s_η, s_v, 0)
        elliptic_solver: `DenseInverse` (default) or `DenseLU`
        verbose: Print a summary after building the cache

    Example:
        ```python
        from jax_bbm import (
            create_periodic_mesh, Solver, Semidiscretization, semidiscretize,
            BBMBBMVariableEquations1D, initial_condition_manufactured,
            source_terms_manufactured, solve_ivp, RK4,
        )

        mesh = create_periodic_mesh(0.0, 1.0, 64)
        equations = BBMBBMVariableEquations1D(gravity=9.81)
        solver = Solver.from_accuracy_order(mesh, 4)
        semi = Semidiscretization(mesh, equations, initial_condition_manufactured,
                                  solver, source_terms=source_terms_manufactured)
        fun, t_span, q0, args = semidiscretize(semi, (0.0, 1.0))
        t, q = solve_ivp(fun, t_span, q0, RK4(), step_size=1e-3)
        ```
    """

    def __init__(
        self,
        mesh: Mesh1D,
        equations: BBMBBMVariableEquations1D,
        initial_condition: InitialCondition,
        solver: Solver,
        source_terms: Optional[SourceTerms] = None,
        elliptic_solver: Callable = DenseInverse,
        verbose: bool = False,
    ):
        self.mesh = mesh
        self.equations = equations
        self.initial_condition = initial_condition
        self.solver = solver
        self.source_terms = source_terms

        start_wallclock = time.time()
        self.cache = create_cache(
            mesh, equations, solver, initial_condition, elliptic_solver=elliptic_solver
        )
        elapsed_wallclock = time.time() - start_wallclock

        if verbose:
            print(
                f"Built {type(self.cache.invImDKD).__name__} elliptic operators for "
                f"{mesh.nnodes} nodes ({solver.family.name.lower()} operators) "
                f"in {elapsed_wallclock:.3f}s"
            )

    def grid(self) -> Array:
        return self.mesh.grid()

    def compute_coefficients(self, func: Callable, t) -> Array:
        """Evaluate an initial condition at time t on the grid; shape (3, N)."""
        return evaluate_nodes(func, self.grid(), t, self.equations, self.mesh)

    def rhs(self, t, q: Array) -> Array:
        """Right-hand side with the signature (t, y) expected by the integrators."""
        return rhs(t, q, self.mesh, self.equations, self.source_terms, self.solver, self.cache)

    def __repr__(self) -> str:
        return (
            f"Semidiscretization({type(self.equations).__name__}, {self.solver!r}, "
            f"source_terms={getattr(self.source_terms, '__name__', None)})"
        )


def semidiscretize(semi: Semidiscretization, t_span: Tuple[float, float]) -> ODEProblem:
    """Wrap the semidiscretization as an ODE problem starting from the initial condition."""
    y0 = semi.compute_coefficients(semi.initial_condition, t_span[0])
    return ODEProblem(fun=semi.rhs, t_span=t_span, y0=y0)
