import jax
jax.config.update("jax_enable_x64", True)
import jax.numpy as jnp
from matplotlib import pyplot as plt

from jax_bbm import (
    BBMBBMVariableEquations1D,
    RK4,
    Semidiscretization,
    Solver,
    analysis_history,
    bathymetry,
    create_periodic_mesh,
    initial_condition_dingemans,
    semidiscretize,
    solve_with_history,
    upwind_operators,
)


def main(N=512, t_end=70.0, dt=0.01, n_save=8):
    """
    Waves from a wave maker travelling over the submerged trapezoidal bar of
    the Dingemans experiments, discretized with energy-conserving upwind
    operators. Prints the drift of the conserved integrals and plots the
    free surface at the saved times.

    Arguments:
        N - Number of grid nodes (default 512)
        t_end - Final time (default 70.0)
        dt - Time step size (default 0.01)
        n_save - Number of saved states (default 8)
    """
    equations = BBMBBMVariableEquations1D(gravity=9.81, eta0=0.8)
    mesh = create_periodic_mesh(-138.0, 46.0, N)
    D1 = upwind_operators(4, mesh.xmin, mesh.xmax, mesh.N)
    solver = Solver(D1, D1.plus.compose(D1.minus))

    semi = Semidiscretization(mesh, equations, initial_condition_dingemans, solver, verbose=True)
    fun, t_span, q0, args = semidiscretize(semi, (0.0, t_end))

    t, q = solve_with_history(fun, t_span, q0, RK4(), step_size=dt,
                              t_eval=jnp.linspace(0.0, t_end, n_save), verbose=True)

    # Only the conserved integrals are meaningful, there is no exact solution
    analysis_history(t, q, semi, verbose=True)

    x = semi.grid()
    fig, ax = plt.subplots()
    for i in range(len(t)):
        ax.plot(x, q[i, 0], label=f"$t={t[i]:.1f}$")
    ax.plot(x, bathymetry(q[0], equations), 'k-', label='b')
    ax.set_xlim(-30.0, 46.0)
    ax.legend()
    ax.set_xlabel('x')
    ax.set_ylabel('η')
    plt.show()


if __name__ == "__main__":
    main()
