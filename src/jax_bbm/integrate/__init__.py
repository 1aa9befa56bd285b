"""
Time integration of the semidiscretized equations, written in JAX.

These explicit schemes stand in for the external ODE stepper: they call the
right-hand side once per stage and never modify the semidiscretization.
"""

# Solver interfaces
from .solve import solve_with_history, solve_ivp

# Time-stepping schemes
from .timesteppers import StepperProtocol, ForwardEuler, SSPRK33, RK4

__all__ = [
    # Solver interfaces
    'solve_ivp',
    'solve_with_history',

    # Time-stepping methods
    'StepperProtocol',
    'ForwardEuler',
    'SSPRK33',
    'RK4',
]
