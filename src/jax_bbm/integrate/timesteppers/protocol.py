"""Protocol for time-stepping schemes."""

from typing import Protocol, runtime_checkable, Callable
from jax import Array


@runtime_checkable
class StepperProtocol(Protocol):
    """
    Protocol for time-stepping schemes.

    Any class implementing a step() method with this signature can drive a
    semidiscretization in `solve_ivp`. The right-hand side is called once per
    stage, strictly sequentially.
    """

    def step(
        self,
        fun: Callable,
        t: Array,
        y: Array,
        h: Array,
        args: tuple = ()
    ) -> Array:
        """
        Take a single time step.

        Args:
            fun: Right-hand side function.
            t: Current time. Type: 0-dimensional JAX array.
            y: Current solution.
            h: Time step size. Type: 0-dimensional JAX array.
            args: Additional arguments to pass to fun.

        Returns:
            Solution at t + h.
        """
        ...
