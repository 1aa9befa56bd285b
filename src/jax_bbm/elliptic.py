"""Solvers for the elliptic operators of the dispersive terms."""

from flax import nnx
from jax import Array
import jax.numpy as jnp
import jax.scipy.linalg as jax_linalg


class DenseInverse(nnx.Module):
    """
    Explicit inverse of a dense matrix.

    The inverse is computed once (O(N^3)) and every solve is a dense
    matrix-vector product. Only suitable for moderate N.
    """

    def __init__(self, A: Array):
        self._inverse = nnx.Variable(jnp.linalg.inv(A))

    @property
    def matrix(self) -> Array:
        """Dense inverse matrix."""
        return self._inverse.get_value()

    def __call__(self, b: Array) -> Array:
        """
        Solve A*x = b.

        Args:
            b: Right-hand side vector

        Returns:
            Solution x
        """
        return self._inverse.get_value() @ b


class DenseLU(nnx.Module):
    """
    Cached LU factorisation of a dense matrix.

    Same contract as `DenseInverse`, but each call performs forward and
    backward substitution instead of a product with an explicit inverse.
    """

    def __init__(self, A: Array):
        lu, piv = jax_linalg.lu_factor(A)
        self._lu = nnx.Variable(lu)
        self._piv = nnx.Variable(piv)

    @property
    def matrix(self) -> Array:
        """Dense inverse matrix, assembled on demand."""
        lu = self._lu.get_value()
        return self(jnp.eye(lu.shape[0], dtype=lu.dtype))

    def __call__(self, b: Array) -> Array:
        """
        Solve A*x = b.

        Args:
            b: Right-hand side vector

        Returns:
            Solution x
        """
        return jax_linalg.lu_solve((self._lu.get_value(), self._piv.get_value()), b)
