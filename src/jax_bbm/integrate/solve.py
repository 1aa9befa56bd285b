import time
from typing import Callable, Tuple, Optional

import jax
from jax import Array
import jax.numpy as jnp

from .timesteppers import StepperProtocol


def solve_ivp(
    fun: Callable,
    t_span: Tuple[float, float],
    y0: Array,
    method: StepperProtocol,
    step_size: float,
    args: tuple = ()
) -> Tuple[Array, Array]:
    """
    Integrate dy/dt = fun(t, y, *args) over the time interval t_span.

    The last step is shortened so that the integration ends exactly at
    t_end.

    Args:
        fun: Callable right-hand side of system dy/dt = fun(t, y, *args)
        t_span: (t_start, t_end) time interval
        y0: Initial condition
        method: Time-stepping method instance (e.g., RK4(), SSPRK33())
        step_size: Time step size
        args: Additional arguments to pass to fun

    Returns:
        t_final: Final time
        y_final: Solution at t_end

    Example usage:
    ```python
    from jax_bbm import (
        create_periodic_mesh, Solver, Semidiscretization, semidiscretize,
        BBMBBMVariableEquations1D, initial_condition_convergence_test,
    )
    from jax_bbm.integrate import solve_ivp, RK4

    mesh = create_periodic_mesh(-35.0, 35.0, 256)
    equations = BBMBBMVariableEquations1D(gravity=9.81)
    semi = Semidiscretization(mesh, equations, initial_condition_convergence_test,
                              Solver.from_accuracy_order(mesh, 4))
    fun, t_span, q0, args = semidiscretize(semi, (0.0, 1.0))
    t, q = solve_ivp(fun, t_span, q0, RK4(), step_size=1e-2)
    ```
    """
    t_start, t_end = t_span

    def cond_fn(carry):
        t, _ = carry
        return t < t_end

    def body_fn(carry):
        t, y = carry

        # Adjust final step to hit t_end exactly
        h = jax.lax.max(0.0, jax.lax.min(step_size, t_end - t))

        y_next = method.step(fun, t, y, h, args)

        return (t + h, y_next)

    t_final, y_final = jax.lax.while_loop(cond_fn, body_fn, (t_start, y0))

    return t_final, y_final


def solve_with_history(
    fun: Callable,
    t_span: Tuple[float, float],
    y0: Array,
    method: StepperProtocol,
    step_size: float,
    t_eval: Optional[Array] = None,
    args: tuple = (),
    verbose: bool = False
) -> Tuple[Array, Array]:
    """
    Integrate dy/dt = fun(t, y, *args) and save the solution at times t_eval.

    The integration is done in chunks between consecutive evaluation times
    by a JIT-compiled `solve_ivp`, so the right-hand side is traced once and
    the compiled program is reused for every chunk. Not compatible with JAX
    transformations itself.

    Args:
        fun: Right-hand side function with signature (t, y, *args) -> dydt
        t_span: (t_start, t_end) time interval
        y0: Initial condition
        method: Time-stepping method instance (e.g., RK4(), SSPRK33())
        step_size: Time step size for integration.
        t_eval: Times at which to store the computed solution.
            If None, returns only the initial and final states.
            Must be sorted and lie within t_span.
        args: Additional arguments to pass to fun
        verbose: Print progress information

    Returns:
        t: Array of time points, shape (n_points,)
        y: Array of solution values at times t, shape (n_points, *y0.shape)
    """
    t_start, t_end = t_span

    if t_eval is None:
        # Only save initial and final states
        t_eval = jnp.array([t_start, t_end])
    else:
        t_eval = jnp.asarray(t_eval)
        if jnp.any(t_eval < t_start) or jnp.any(t_eval > t_end):
            raise ValueError("All values in t_eval must be within t_span")
        if jnp.any(jnp.diff(t_eval) < 0):
            raise ValueError("t_eval must be sorted in increasing order")

        # Ensure t_start is included
        if t_eval[0] != t_start:
            t_eval = jnp.concatenate([jnp.array([t_start]), t_eval])

    n_steps_total = int(jnp.ceil((t_end - t_start) / step_size))

    if verbose:
        method_name = type(method).__name__
        print(f"Solving with {method_name}")
        print(
            f"Time: [{t_start}, {t_end}], dt={step_size}, "
            f"~{n_steps_total} total steps"
        )
        print(f"Evaluating at {len(t_eval)} time points")

    integrate_jit = jax.jit(solve_ivp, static_argnames=['fun', 'method'])

    y_save = [y0]
    t_save = [jnp.asarray(t_eval[0])]
    y = y0

    start_wallclock = time.time()

    for i in range(len(t_eval) - 1):
        t_i = float(t_eval[i])
        t_ip1 = float(t_eval[i + 1])
        t, y = integrate_jit(fun, (t_i, t_ip1), y, method, step_size, args)
        t_save.append(t)
        y_save.append(y)

    t_arr = jnp.stack(t_save)
    y_arr = jnp.stack(y_save, axis=0)

    elapsed_wallclock = time.time() - start_wallclock

    if verbose:
        print(
            f"Completed in {elapsed_wallclock:.3f}s "
            f"({n_steps_total / elapsed_wallclock:.1f} steps/s)"
        )

    return t_arr, y_arr
