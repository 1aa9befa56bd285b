"""Type aliases to improve type hint readability."""

from typing import Any, Callable, TypeAlias
from jax import Array

InitialCondition: TypeAlias = Callable[[Array, Array, Any, Any], Array]
SourceTerms: TypeAlias = Callable[[Array, Array, Array, Any], Array]
RHSFunction: TypeAlias = Callable[[Array, Array], Array]
