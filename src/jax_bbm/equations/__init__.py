"""
Built-in equations

BBM-BBM equations with variable bathymetry: cache construction, right-hand
side, variable conversions, pointwise diagnostics, initial conditions and
source terms.

Initial conditions follow the interface
    initial_condition(x, t, equations, mesh) -> (η, v, D)
and source terms
    source_terms(q, x, t, equations) -> (s_η, s_v, 0)
"""

from .bbm_bbm_variable_bathymetry_1d import (
    BBMBBMVariableEquations1D,
    BBMBBMVariableCache,
    create_cache,
    rhs,
    calc_sources,
    evaluate_nodes,
    prim2prim,
    prim2cons,
    cons2prim,
    varnames,
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

__all__ = [
    # Equations and semidiscretization
    "BBMBBMVariableEquations1D",
    "BBMBBMVariableCache",
    "create_cache",
    "rhs",
    "calc_sources",
    "evaluate_nodes",

    # Variable conversions
    "prim2prim",
    "prim2cons",
    "cons2prim",
    "varnames",

    # Diagnostics
    "waterheight_total",
    "velocity",
    "bathymetry",
    "waterheight",
    "energy_total",
    "entropy",
    "lake_at_rest_error",

    # Test cases
    "initial_condition_convergence_test",
    "initial_condition_manufactured",
    "source_terms_manufactured",
    "initial_condition_dingemans",
]
