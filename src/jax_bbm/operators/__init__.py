"""
Periodic derivative operators

Summation-by-parts finite difference operators on uniform periodic grids,
consumed by the semidiscretization through `LinearOperatorProtocol`.
"""

from .protocol import LinearOperatorProtocol
from .periodic import (
    PeriodicDerivativeOperator,
    MatrixOperator,
    PeriodicOperator,
    periodic_derivative_operator,
    stencil_operator,
    stencil_weights,
)
from .upwind import PeriodicUpwindOperators, upwind_operators

__all__ = [
    # Protocol
    "LinearOperatorProtocol",

    # Central and assembled operators
    "PeriodicDerivativeOperator",
    "MatrixOperator",
    "PeriodicOperator",
    "periodic_derivative_operator",
    "stencil_operator",
    "stencil_weights",

    # Upwind operators
    "PeriodicUpwindOperators",
    "upwind_operators",
]
