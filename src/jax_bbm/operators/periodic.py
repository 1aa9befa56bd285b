"""
Periodic finite difference operators.

Weights are computed exactly in rational arithmetic and applied with
`jnp.roll`, so the operators work for any stencil width and order.
"""

from dataclasses import dataclass
from fractions import Fraction
from math import factorial
from typing import Sequence, TypeAlias, Union

import jax.numpy as jnp
from jax import Array


def stencil_weights(offsets: Sequence[int], derivative_order: int) -> list[Fraction]:
    """
    Finite difference weights for a derivative on a unit-spaced stencil.

    Solves the moment conditions sum_j w_j s_j^k = m! delta_{km},
    k = 0, ..., len(offsets) - 1, by exact Gauss-Jordan elimination.

    Args:
        offsets: Distinct integer stencil offsets
        derivative_order: Order m of the derivative

    Returns:
        Weights w_j matching `offsets`
    """
    n = len(offsets)
    if len(set(offsets)) != n:
        raise ValueError(f"Stencil offsets must be distinct, got {offsets}")
    if not 0 <= derivative_order < n:
        raise ValueError(
            f"A stencil with {n} points cannot approximate a derivative "
            f"of order {derivative_order}"
        )

    rows = []
    for k in range(n):
        rhs = Fraction(factorial(k)) if k == derivative_order else Fraction(0)
        rows.append([Fraction(s) ** k for s in offsets] + [rhs])

    for col in range(n):
        pivot = next(r for r in range(col, n) if rows[r][col] != 0)
        rows[col], rows[pivot] = rows[pivot], rows[col]
        p = rows[col][col]
        rows[col] = [a / p for a in rows[col]]
        for r in range(n):
            if r != col and rows[r][col] != 0:
                f = rows[r][col]
                rows[r] = [a - f * b for a, b in zip(rows[r], rows[col])]

    return [rows[r][n] for r in range(n)]


@dataclass(frozen=True)
class PeriodicDerivativeOperator:
    """
    Periodic stencil operator (D u)_i = sum_j c_j u_{i + s_j}.

    Attributes:
        offsets: Stencil offsets s_j
        coefficients: Weights c_j, already scaled by the grid spacing
        N: Number of grid nodes
        dx: Grid spacing
        derivative_order: Order of the approximated derivative
        accuracy_order: Formal order of accuracy
    """
    offsets: tuple[int, ...]
    coefficients: tuple[float, ...]
    N: int
    dx: float
    derivative_order: int
    accuracy_order: int

    @property
    def size(self) -> int:
        return self.N

    def __call__(self, u: Array) -> Array:
        out = jnp.zeros_like(u)
        for s, c in zip(self.offsets, self.coefficients):
            if c != 0.0:
                out = out + c * jnp.roll(u, -s)  # u[i+s]
        return out

    def __matmul__(self, u: Array) -> Array:
        return self(u)

    def to_dense(self) -> Array:
        """Circulant matrix; offsets wider than the grid wrap around."""
        eye = jnp.eye(self.N)
        matrix = jnp.zeros((self.N, self.N))
        for s, c in zip(self.offsets, self.coefficients):
            matrix = matrix + c * jnp.roll(eye, s, axis=1)
        return matrix

    def compose(self, other: "PeriodicOperator") -> "PeriodicOperator":
        """
        Operator product `self @ other`.

        Two stencil operators compose into another stencil operator (the
        wide-stencil second derivative is `D1.compose(D1)`). Anything else
        is densified.
        """
        if not isinstance(other, PeriodicDerivativeOperator):
            return MatrixOperator(self.to_dense() @ other.to_dense())
        if other.N != self.N:
            raise ValueError(f"Cannot compose operators of sizes {self.N} and {other.N}")

        weights = {}
        for s1, c1 in zip(self.offsets, self.coefficients):
            for s2, c2 in zip(other.offsets, other.coefficients):
                weights[s1 + s2] = weights.get(s1 + s2, 0.0) + c1 * c2
        offsets = tuple(sorted(weights))
        return PeriodicDerivativeOperator(
            offsets=offsets,
            coefficients=tuple(weights[s] for s in offsets),
            N=self.N,
            dx=self.dx,
            derivative_order=self.derivative_order + other.derivative_order,
            accuracy_order=min(self.accuracy_order, other.accuracy_order),
        )


class MatrixOperator:
    """
    Linear operator given by an explicit dense matrix.

    Used for operators that are only available in assembled form, such as
    coupled (e.g. continuous Galerkin) derivative operators or products of
    operators.
    """

    def __init__(self, matrix: Array):
        matrix = jnp.asarray(matrix)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ValueError(f"Expected a square matrix, got shape {matrix.shape}")
        self.matrix = matrix

    @property
    def size(self) -> int:
        return self.matrix.shape[0]

    def __call__(self, u: Array) -> Array:
        return self.matrix @ u

    def __matmul__(self, u: Array) -> Array:
        return self(u)

    def to_dense(self) -> Array:
        return self.matrix

    def compose(self, other) -> "MatrixOperator":
        return MatrixOperator(self.matrix @ other.to_dense())


PeriodicOperator: TypeAlias = Union[PeriodicDerivativeOperator, MatrixOperator]


def stencil_operator(
    offsets: Sequence[int],
    derivative_order: int,
    accuracy_order: int,
    xmin: float,
    xmax: float,
    N: int,
) -> PeriodicDerivativeOperator:
    """Build a periodic operator from stencil offsets on a uniform grid."""
    dx = (xmax - xmin) / N
    weights = stencil_weights(offsets, derivative_order)
    scale = dx ** derivative_order
    return PeriodicDerivativeOperator(
        offsets=tuple(int(s) for s in offsets),
        coefficients=tuple(float(w) / scale for w in weights),
        N=int(N),
        dx=dx,
        derivative_order=derivative_order,
        accuracy_order=accuracy_order,
    )


def periodic_derivative_operator(
    derivative_order: int,
    accuracy_order: int,
    xmin: float,
    xmax: float,
    N: int,
) -> PeriodicDerivativeOperator:
    """
    Central periodic finite difference operator.

    Args:
        derivative_order: Order of the derivative (>= 1)
        accuracy_order: Even order of accuracy
        xmin: Left domain boundary
        xmax: Right domain boundary
        N: Number of grid nodes

    Example:
        >>> D1 = periodic_derivative_operator(1, 2, 0.0, 1.0, 8)
        >>> D1.offsets
        (-1, 0, 1)
    """
    if derivative_order < 1:
        raise ValueError(f"Derivative order must be positive, got {derivative_order}")
    if accuracy_order < 2 or accuracy_order % 2 != 0:
        raise ValueError(
            f"Central operators need an even accuracy order, got {accuracy_order}"
        )
    half_width = (derivative_order + 1) // 2 - 1 + accuracy_order // 2
    offsets = range(-half_width, half_width + 1)
    return stencil_operator(offsets, derivative_order, accuracy_order, xmin, xmax, N)
