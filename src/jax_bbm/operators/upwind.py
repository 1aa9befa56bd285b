"""Periodic upwind first-derivative operators."""

from dataclasses import dataclass

from .periodic import PeriodicDerivativeOperator, stencil_operator


@dataclass(frozen=True)
class PeriodicUpwindOperators:
    """
    Triple of periodic first-derivative operators.

    `minus` is biased to the left, `plus` to the right, and `central` is
    their average. On a periodic grid `minus.T == -plus`, which is what the
    energy estimate of upwind discretizations relies on.
    """
    minus: PeriodicDerivativeOperator
    central: PeriodicDerivativeOperator
    plus: PeriodicDerivativeOperator

    @property
    def size(self) -> int:
        return self.central.size


def _average(a: PeriodicDerivativeOperator, b: PeriodicDerivativeOperator) -> PeriodicDerivativeOperator:
    weights = {}
    for op in (a, b):
        for s, c in zip(op.offsets, op.coefficients):
            weights[s] = weights.get(s, 0.0) + 0.5 * c
    offsets = tuple(sorted(weights))
    return PeriodicDerivativeOperator(
        offsets=offsets,
        coefficients=tuple(weights[s] for s in offsets),
        N=a.N,
        dx=a.dx,
        derivative_order=a.derivative_order,
        accuracy_order=a.accuracy_order,
    )


def upwind_operators(accuracy_order: int, xmin: float, xmax: float, N: int) -> PeriodicUpwindOperators:
    """
    Build periodic upwind operators of a given order of accuracy.

    `plus` uses the p + 1 offsets -(p-1)//2, ..., p - (p-1)//2, e.g.
    (0, 1, 2) for p = 2 and (-1, 0, 1, 2, 3) for p = 4. `minus` is its
    mirror image with negated weights.

    Args:
        accuracy_order: Order of accuracy p >= 1
        xmin: Left domain boundary
        xmax: Right domain boundary
        N: Number of grid nodes
    """
    if accuracy_order < 1:
        raise ValueError(f"Accuracy order must be positive, got {accuracy_order}")

    left = (accuracy_order - 1) // 2
    offsets = range(-left, accuracy_order - left + 1)
    plus = stencil_operator(offsets, 1, accuracy_order, xmin, xmax, N)
    minus = PeriodicDerivativeOperator(
        offsets=tuple(-s for s in reversed(plus.offsets)),
        coefficients=tuple(-c for c in reversed(plus.coefficients)),
        N=plus.N,
        dx=plus.dx,
        derivative_order=1,
        accuracy_order=accuracy_order,
    )
    return PeriodicUpwindOperators(minus=minus, central=_average(minus, plus), plus=plus)
