"""
JAX BBM-BBM

A JAX implementation of the BBM-BBM dispersive shallow water equations with
variable bathymetry on periodic domains.

Main components:
- operators: periodic central and upwind finite difference operators
- equations: cache construction, right-hand side, diagnostics, test cases
- semidiscretization: mesh, equations and operators bundled for time stepping
- integrate: explicit time integration
"""

from .mesh import Mesh1D, create_periodic_mesh
from .operators import (
    PeriodicDerivativeOperator,
    MatrixOperator,
    PeriodicUpwindOperators,
    periodic_derivative_operator,
    upwind_operators,
)
from .solver import OperatorFamily, Solver
from .elliptic import DenseInverse, DenseLU
from .equations import (
    BBMBBMVariableEquations1D,
    create_cache,
    rhs,
    prim2prim,
    prim2cons,
    cons2prim,
    waterheight_total,
    velocity,
    bathymetry,
    waterheight,
    energy_total,
    entropy,
    lake_at_rest_error,
    initial_condition_convergence_test,
    initial_condition_manufactured,
    source_terms_manufactured,
    initial_condition_dingemans,
)
from .semidiscretization import ODEProblem, Semidiscretization, semidiscretize
from .analysis import integrate_field, integrate_quantity, calc_error_norms, analyze, analysis_history

# Time integration
from .integrate import solve_ivp, solve_with_history, ForwardEuler, SSPRK33, RK4

__all__ = [
    # Mesh and operators
    "Mesh1D",
    "create_periodic_mesh",
    "PeriodicDerivativeOperator",
    "MatrixOperator",
    "PeriodicUpwindOperators",
    "periodic_derivative_operator",
    "upwind_operators",
    "OperatorFamily",
    "Solver",

    # Elliptic solvers
    "DenseInverse",
    "DenseLU",

    # Equations
    "BBMBBMVariableEquations1D",
    "create_cache",
    "rhs",
    "prim2prim",
    "prim2cons",
    "cons2prim",
    "waterheight_total",
    "velocity",
    "bathymetry",
    "waterheight",
    "energy_total",
    "entropy",
    "lake_at_rest_error",
    "initial_condition_convergence_test",
    "initial_condition_manufactured",
    "source_terms_manufactured",
    "initial_condition_dingemans",

    # Semidiscretization and analysis
    "ODEProblem",
    "Semidiscretization",
    "semidiscretize",
    "integrate_field",
    "integrate_quantity",
    "calc_error_norms",
    "analyze",
    "analysis_history",

    # ODE integration methods
    "solve_ivp",
    "solve_with_history",
    "ForwardEuler",
    "SSPRK33",
    "RK4",
]
