"""Explicit Runge-Kutta time-stepping schemes."""

from typing import Callable

from flax import nnx
from jax import Array


class ForwardEuler(nnx.Module):
    """
    Forward Euler method.

    Discretisation:
        $$ \\frac{(y_{n+1} - y_n)}{h} = f(t_n, y_n) $$
    """

    def step(
        self,
        fun: Callable,
        t: Array,
        y: Array,
        h: Array,
        args: tuple = ()
    ) -> Array:
        """Computes $$ y_{n+1} = y_n + h f(t_n, y_n, *args). $$"""
        return y + h * fun(t, y, *args)


class SSPRK33(nnx.Module):
    """
    Three-stage, third-order strong stability preserving Runge-Kutta method
    of Shu and Osher, written as convex combinations of Euler steps.

    Implements: StepperProtocol
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
        Perform a single SSPRK33 step.

        Args:
            fun: Right-hand side of system dy/dt = f(t, y, *args).
            t: Current time.
            y: Current solution.
            h: Time step size.
            args: Additional arguments to pass to fun.

        Returns:
            Solution at t + h.
        """
        y1 = y + h * fun(t, y, *args)
        y2 = 0.75 * y + 0.25 * (y1 + h * fun(t + h, y1, *args))
        return y / 3.0 + 2.0 / 3.0 * (y2 + h * fun(t + 0.5 * h, y2, *args))


class RK4(nnx.Module):
    """
    Fourth (4th) order Runge-Kutta method.

    Implements: StepperProtocol
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
        Perform a single RK4 step.

        Args:
            fun: Right-hand side of system dy/dt = f(t, y, *args).
            t: Current time.
            y: Current solution.
            h: Time step size.
            args: Additional arguments to pass to fun.

        Returns:
            Solution at t + h.
        """
        k1 = fun(t, y, *args)
        k2 = fun(t + 0.5 * h, y + 0.5 * h * k1, *args)
        k3 = fun(t + 0.5 * h, y + 0.5 * h * k2, *args)
        k4 = fun(t + h, y + h * k3, *args)
        return y + (h / 6.0) * (k1 + 2.0 * k2 + 2.0 * k3 + k4)
