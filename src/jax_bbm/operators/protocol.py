"""Protocol for the linear operators consumed by the semidiscretization."""

from typing import Protocol, runtime_checkable

from jax import Array


@runtime_checkable
class LinearOperatorProtocol(Protocol):
    """
    Protocol for periodic linear operators acting on grid functions.

    The right-hand side only needs two things from a derivative operator:
    applying it to a vector every time step, and materialising it as a
    dense matrix once when the elliptic operators are built.
    """

    @property
    def size(self) -> int:
        """Number of grid nodes the operator acts on."""
        ...

    def __call__(self, u: Array) -> Array:
        """
        Apply the operator.

        Args:
            u: Grid function of length `size`

        Returns:
            Operator applied to u
        """
        ...

    def to_dense(self) -> Array:
        """Dense `(size, size)` matrix representation."""
        ...
