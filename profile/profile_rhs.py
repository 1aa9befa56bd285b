"""
Simple profiling script for the cache construction and the right-hand side.

The stages of `rhs` carry `jax.named_scope` annotations ("deta hyperbolic",
"dv hyperbolic", "source terms", "deta elliptic", "dv elliptic"), which show
up in traces written with `--trace DIR` and viewed in Perfetto/TensorBoard.
"""

import argparse
import time
import cProfile
import pstats
import io
from contextlib import contextmanager
import jax
jax.config.update("jax_enable_x64", True)
import jax.numpy as jnp
from jax_bbm import (
    BBMBBMVariableEquations1D,
    DenseInverse,
    DenseLU,
    Semidiscretization,
    Solver,
    create_periodic_mesh,
    initial_condition_manufactured,
    source_terms_manufactured,
)


@contextmanager
def timer(description):
    """Simple timing context manager."""
    start = time.perf_counter()
    print(f"Starting: {description}")
    yield
    elapsed = time.perf_counter() - start
    print(f"Completed: {description} in {elapsed:.3f}s")


def create_test_problem(N=256, elliptic_solver=DenseInverse):
    """Manufactured solution with source terms on [0, 1)."""
    mesh = create_periodic_mesh(0.0, 1.0, N)
    equations = BBMBBMVariableEquations1D(gravity=9.81)
    solver = Solver.from_accuracy_order(mesh, 4)
    semi = Semidiscretization(mesh, equations, initial_condition_manufactured, solver,
                              source_terms=source_terms_manufactured,
                              elliptic_solver=elliptic_solver)
    q = semi.compute_coefficients(initial_condition_manufactured, 0.0)
    return semi, q


def profile_cache_cprofile(N=256):
    """Profile the construction of the elliptic solvers using cProfile."""
    print(f"\n{'='*60}")
    print(f"Profiling create_cache with cProfile (N={N})")
    print(f"{'='*60}")

    profiler = cProfile.Profile()
    profiler.enable()
    semi, _ = create_test_problem(N)
    semi.cache.invImDKD.matrix.block_until_ready()
    profiler.disable()

    s = io.StringIO()
    ps = pstats.Stats(profiler, stream=s)
    ps.sort_stats('cumulative')
    ps.print_stats(20)  # Top 20 functions

    print(s.getvalue())

    return profiler


def profile_rhs(Ns=(64, 128, 256, 512), n_runs=100):
    """Wall clock time of a JIT-compiled rhs call for both elliptic solvers."""
    print(f"\n{'='*60}")
    print(f"Timing rhs (runs={n_runs})")
    print(f"{'='*60}")

    for elliptic_solver in (DenseInverse, DenseLU):
        for N in Ns:
            semi, q = create_test_problem(N, elliptic_solver)
            rhs = jax.jit(semi.rhs)

            # First call (includes compilation)
            rhs(0.0, q).block_until_ready()

            start = time.perf_counter()
            for _ in range(n_runs):
                dq = rhs(0.0, q)
            dq.block_until_ready()
            elapsed = (time.perf_counter() - start) / n_runs
            print(f"{elliptic_solver.__name__:>12} N={N:>5}: {1e6 * elapsed:10.1f} µs per call")


def profile_compilation_overhead(N=128):
    print(f"\n{'='*60}")
    print("JAX Compilation Overhead Analysis")
    print(f"{'='*60}")

    semi, q = create_test_problem(N)
    rhs = jax.jit(semi.rhs)

    jax.config.update('jax_log_compiles', True)

    print("=== FIRST CALL (expect compilation) ===")
    with timer("First call (with compilation)"):
        rhs(0.0, q).block_until_ready()

    print("\n=== SECOND CALL (should be fast, no compilation) ===")
    with timer("Second call (compiled)"):
        rhs(0.1, q).block_until_ready()

    print("\n=== DIFFERENT STATE VALUES (should re-use compilation) ===")
    with timer("Different state"):
        rhs(0.1, 2.0 * q).block_until_ready()

    jax.config.update('jax_log_compiles', False)


def trace_rhs(log_dir, N=256):
    """Write a profiler trace of a few rhs calls to log_dir."""
    semi, q = create_test_problem(N)
    rhs = jax.jit(semi.rhs)
    rhs(0.0, q).block_until_ready()

    with jax.profiler.trace(log_dir):
        for _ in range(10):
            q = q + 1e-3 * rhs(0.0, q)
        q.block_until_ready()
    print(f"Trace written to {log_dir}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--trace", metavar="DIR", help="write a profiler trace to DIR")
    args = parser.parse_args()

    profile_cache_cprofile()
    profile_rhs()
    profile_compilation_overhead()
    if args.trace:
        trace_rhs(args.trace)
