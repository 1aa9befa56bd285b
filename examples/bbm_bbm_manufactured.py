import jax
jax.config.update("jax_enable_x64", True)
import jax.numpy as jnp
from matplotlib import pyplot as plt

from jax_bbm import (
    BBMBBMVariableEquations1D,
    RK4,
    Semidiscretization,
    Solver,
    calc_error_norms,
    create_periodic_mesh,
    initial_condition_manufactured,
    semidiscretize,
    solve_ivp,
    source_terms_manufactured,
    upwind_operators,
)


def make_solver(mesh, accuracy_order, upwind):
    if upwind:
        D1 = upwind_operators(accuracy_order, mesh.xmin, mesh.xmax, mesh.N)
        return Solver(D1, D1.plus.compose(D1.minus))
    return Solver.from_accuracy_order(mesh, accuracy_order)


def main(Ns=(16, 32, 64, 128), accuracy_order=4, t_end=1.0, upwind=False):
    """
    Run the manufactured solution on a sequence of grids and report the
    experimental order of convergence of the L2 error in η and v.

    Arguments:
        Ns - Numbers of grid nodes (default (16, 32, 64, 128))
        accuracy_order - Order of the derivative operators (default 4)
        t_end - Final time (default 1.0)
        upwind - Use upwind instead of central operators (default False)
    """
    equations = BBMBBMVariableEquations1D(gravity=9.81)

    errors = []
    for N in Ns:
        mesh = create_periodic_mesh(0.0, 1.0, N)
        semi = Semidiscretization(mesh, equations, initial_condition_manufactured,
                                  make_solver(mesh, accuracy_order, upwind),
                                  source_terms=source_terms_manufactured, verbose=True)
        fun, t_span, q0, args = semidiscretize(semi, (0.0, t_end))

        # RK4 error stays below the spatial error for dt ~ dx / 10
        dt = 0.1 / N
        t, q = jax.jit(solve_ivp, static_argnames=['fun', 'method'])(fun, t_span, q0, RK4(), dt)
        l2, _ = calc_error_norms(q, t, semi)
        errors.append(l2[:2])

    errors = jnp.stack(errors)
    print(f"{'N':>6} {'l2 η':>12} {'EOC':>6} {'l2 v':>12} {'EOC':>6}")
    for i, N in enumerate(Ns):
        if i == 0:
            eoc = ("", "")
        else:
            rate = jnp.log(errors[i - 1] / errors[i]) / jnp.log(Ns[i] / Ns[i - 1])
            eoc = tuple(f"{r:.2f}" for r in rate)
        print(f"{N:>6} {errors[i, 0]:>12.4e} {eoc[0]:>6} {errors[i, 1]:>12.4e} {eoc[1]:>6}")

    fig, ax = plt.subplots()
    ax.loglog(Ns, errors[:, 0], marker='o', label='η')
    ax.loglog(Ns, errors[:, 1], marker='s', label='v')
    ax.loglog(Ns, errors[0, 0] * (Ns[0] / jnp.asarray(Ns))**accuracy_order, 'k--',
              label=f'$N^{{-{accuracy_order}}}$')
    ax.legend()
    ax.set_xlabel('N')
    ax.set_ylabel('L2 error')
    plt.show()


if __name__ == "__main__":
    main()
