"""Time-stepping schemes for the semidiscretized equations."""

from .protocol import StepperProtocol
from .explicit import ForwardEuler, SSPRK33, RK4

__all__ = [
    # Protocol
    'StepperProtocol',

    # Explicit methods
    'ForwardEuler',
    'SSPRK33',
    'RK4',
]
