"""
Run one of the BBM-BBM test cases and save the trajectory to HDF5.

Test cases:
    manufactured      smooth manufactured solution with source terms on [0, 1)
    convergence_test  travelling wave over constant bathymetry on [-35, 35)
    dingemans         wave maker over a trapezoidal bar on [-138, 46)
"""

import os
import time
import argparse

import jax
jax.config.update("jax_enable_x64", True)
import jax.numpy as jnp

from jax_bbm import (
    BBMBBMVariableEquations1D,
    DenseInverse,
    DenseLU,
    RK4,
    SSPRK33,
    Semidiscretization,
    Solver,
    analysis_history,
    create_periodic_mesh,
    initial_condition_convergence_test,
    initial_condition_dingemans,
    initial_condition_manufactured,
    periodic_derivative_operator,
    semidiscretize,
    solve_with_history,
    source_terms_manufactured,
    upwind_operators,
)
from jax_bbm.io import save_trajectory


TEST_CASES = {
    # name: (initial condition, source terms, xmin, xmax, eta0)
    "manufactured": (initial_condition_manufactured, source_terms_manufactured, 0.0, 1.0, 1.0),
    "convergence_test": (initial_condition_convergence_test, None, -35.0, 35.0, 1.0),
    "dingemans": (initial_condition_dingemans, None, -138.0, 46.0, 0.8),
}


def build_solver(mesh, accuracy_order, operators):
    if operators == "upwind":
        D1 = upwind_operators(accuracy_order, mesh.xmin, mesh.xmax, mesh.N)
        return Solver(D1, D1.plus.compose(D1.minus))
    if operators == "central-wide":
        D1 = periodic_derivative_operator(1, accuracy_order, mesh.xmin, mesh.xmax, mesh.N)
        return Solver(D1, D1.compose(D1))
    return Solver.from_accuracy_order(mesh, accuracy_order)


def main():
    parser = argparse.ArgumentParser(description='Run a BBM-BBM simulation and save it to HDF5')
    parser.add_argument('--case', choices=sorted(TEST_CASES), default='manufactured', help='Test case (default: manufactured)')
    parser.add_argument('--N', type=int, default=128, help='Number of grid nodes (default: 128)')
    parser.add_argument('--accuracy_order', type=int, default=4, help='Order of the derivative operators (default: 4)')
    parser.add_argument('--operators', choices=['central', 'central-wide', 'upwind'], default='central', help='Operator family (default: central)')
    parser.add_argument('--elliptic', choices=['inverse', 'lu'], default='inverse', help='Elliptic solver (default: inverse)')
    parser.add_argument('--method', choices=['rk4', 'ssprk33'], default='rk4', help='Time integrator (default: rk4)')
    parser.add_argument('--t_end', type=float, default=1.0, help='Final time (default: 1.0)')
    parser.add_argument('--dt', type=float, default=1e-3, help='Time step size (default: 1e-3)')
    parser.add_argument('--n_save', type=int, default=11, help='Number of saved states (default: 11)')
    parser.add_argument('--gravity', type=float, default=9.81, help='Gravitational constant (default: 9.81)')
    parser.add_argument('--output_dir', type=str, default='data/bbm_bbm', help='Output directory (default: data/bbm_bbm)')

    args = parser.parse_args()

    initial_condition, source_terms, xmin, xmax, eta0 = TEST_CASES[args.case]

    print("=" * 60)
    print(f"BBM-BBM simulation: {args.case}")
    print("=" * 60)
    print(f"Domain: [{xmin}, {xmax}), N={args.N}")
    print(f"Operators: {args.operators}, order {args.accuracy_order}")
    print(f"Time: [0, {args.t_end}], dt={args.dt}, {args.method}")
    print(f"JAX backend: {jax.default_backend()}")
    print()

    mesh = create_periodic_mesh(xmin, xmax, args.N)
    equations = BBMBBMVariableEquations1D(gravity=args.gravity, eta0=eta0)
    solver = build_solver(mesh, args.accuracy_order, args.operators)
    elliptic_solver = DenseLU if args.elliptic == 'lu' else DenseInverse
    semi = Semidiscretization(mesh, equations, initial_condition, solver,
                              source_terms=source_terms, elliptic_solver=elliptic_solver,
                              verbose=True)

    fun, t_span, q0, _ = semidiscretize(semi, (0.0, args.t_end))
    method = RK4() if args.method == 'rk4' else SSPRK33()

    start_time = time.time()
    ts, ys = solve_with_history(fun, t_span, q0, method, step_size=args.dt,
                                t_eval=jnp.linspace(0.0, args.t_end, args.n_save), verbose=True)
    t_elapsed = time.time() - start_time

    history = analysis_history(ts, ys, semi, verbose=True)

    metadata = {
        'case': args.case,
        'accuracy_order': args.accuracy_order,
        'elliptic_solver': elliptic_solver.__name__,
        'method': type(method).__name__,
        'dt': args.dt,
        'run_time': t_elapsed,
        'jax_backend': jax.default_backend(),
    }

    filename = f"{args.case}_{args.operators}_N{args.N}.h5"
    save_path = os.path.join(args.output_dir, filename)
    print(f"Saving trajectory to {save_path}...")
    save_trajectory(save_path, ts, ys, semi, history=history, metadata=metadata)


if __name__ == "__main__":
    main()
