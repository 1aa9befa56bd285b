from dataclasses import dataclass

import jax.numpy as jnp


@dataclass(frozen=True)
class Mesh1D:
    """
    Uniform periodic mesh on [xmin, xmax).

    The right end point is identified with the left one, so the mesh
    carries N distinct nodes and the spacing is (xmax - xmin) / N.
    """
    xmin: float
    xmax: float
    N: int

    @property
    def nnodes(self) -> int:
        return self.N

    @property
    def dx(self) -> float:
        return (self.xmax - self.xmin) / self.N

    @property
    def length(self) -> float:
        return self.xmax - self.xmin

    def grid(self) -> jnp.ndarray:
        """Node coordinates, endpoint excluded."""
        return jnp.linspace(self.xmin, self.xmax, self.N, endpoint=False)


def create_periodic_mesh(xmin: float, xmax: float, N: int) -> Mesh1D:
    """
    Create a uniform periodic mesh.

    Args:
        xmin: Left domain boundary
        xmax: Right domain boundary
        N: Number of grid nodes

    Returns:
        Mesh1D
    """
    if N < 1:
        raise ValueError(f"Number of nodes must be positive, got N={N}")
    if not xmax > xmin:
        raise ValueError(f"Expected xmax > xmin, got xmin={xmin}, xmax={xmax}")
    return Mesh1D(float(xmin), float(xmax), int(N))
