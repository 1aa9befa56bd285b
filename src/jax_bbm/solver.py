from enum import IntEnum
from typing import Union

from .mesh import Mesh1D
from .operators import (
    LinearOperatorProtocol,
    PeriodicUpwindOperators,
    periodic_derivative_operator,
)


class OperatorFamily(IntEnum):
    """
    Families of first-derivative operators.

    Currently supported families:
        CENTRAL (single central or coupled operator)
        UPWIND (pair of one-sided operators)
    """
    CENTRAL = 0
    UPWIND = 1


class Solver:
    """
    Pair of first- and second-derivative operators.

    The operator family is decided here, once, so that an unsupported
    first-derivative operator is rejected before any time stepping and the
    right-hand side never has to inspect operator types again.

    Args:
        D1: First-derivative operator, or `PeriodicUpwindOperators`
        D2: Second-derivative operator
    """

    def __init__(
        self,
        D1: Union[LinearOperatorProtocol, PeriodicUpwindOperators],
        D2: LinearOperatorProtocol,
    ):
        if isinstance(D1, PeriodicUpwindOperators):
            family = OperatorFamily.UPWIND
        elif isinstance(D1, LinearOperatorProtocol):
            family = OperatorFamily.CENTRAL
        else:
            raise TypeError(
                f"unknown type of first-derivative operator: {type(D1).__name__}"
            )
        if not isinstance(D2, LinearOperatorProtocol):
            raise TypeError(
                f"unknown type of second-derivative operator: {type(D2).__name__}"
            )
        if D1.size != D2.size:
            raise ValueError(
                f"Operator sizes do not match: D1 has {D1.size} nodes, D2 has {D2.size}"
            )

        self.D1 = D1
        self.D2 = D2
        self.family = family

        # Operators applied to the mass and momentum fluxes. The elliptic
        # operator of the mass equation is op_eta K op_v, in this order.
        if family == OperatorFamily.UPWIND:
            self.op_eta, self.op_v = D1.minus, D1.plus
        else:
            self.op_eta, self.op_v = D1, D1

    @classmethod
    def from_accuracy_order(cls, mesh: Mesh1D, accuracy_order: int) -> "Solver":
        """Central first- and second-derivative operators of the same order."""
        D1 = periodic_derivative_operator(1, accuracy_order, mesh.xmin, mesh.xmax, mesh.N)
        D2 = periodic_derivative_operator(2, accuracy_order, mesh.xmin, mesh.xmax, mesh.N)
        return cls(D1, D2)

    @property
    def size(self) -> int:
        return self.D2.size

    def __repr__(self) -> str:
        return f"Solver(family={self.family.name}, N={self.size})"
