"""Polynomial sweep: both strategies on 2x^2 + 3x + 0.5 over [2, 20].

Integrates for n = 10, 100, ..., 1_000_000 with dedicated threads and with
a shared pool, printing the approximation and the wall time of each call,
then lets the refinement driver pick n on its own.

Run:
    python examples/polynomial_sweep.py
"""

from __future__ import annotations

import time

from trapezoidal import (
    create_pool,
    enable_console_logging,
    get_config,
    integrate_pooled,
    integrate_threaded,
    refine,
)


def polynomial(x: float) -> float:
    return 2 * x**2 + 3 * x + 0.5


def antiderivative(x: float) -> float:
    return (2 / 3) * x**3 + 1.5 * x**2 + 0.5 * x


A, B = 2.0, 20.0
EXACT = antiderivative(B) - antiderivative(A)


def _timed(fn, *args, **kwargs) -> tuple[float, float]:
    start = time.perf_counter()
    value = fn(*args, **kwargs)
    return value, (time.perf_counter() - start) * 1000


def main() -> None:
    enable_console_logging(level="INFO")
    workers = get_config().default_workers

    print(f"Exact value: {EXACT:.6f}")
    print(f"Dedicated threads ({workers} per call)")
    print("=" * 46)
    n = 10
    while n <= 1_000_000:
        value, ms = _timed(integrate_threaded, polynomial, A, B, n, workers)
        print(f"n={n}: area={value:.6f}, time={ms:.3f} ms")
        n *= 10

    with create_pool() as pool:
        print(f"\nThread pool with {pool.capacity} workers")
        print("=" * 46)
        n = 10
        while n <= 1_000_000:
            value, ms = _timed(integrate_pooled, polynomial, A, B, n, pool)
            print(f"n={n}: area={value:.6f}, time={ms:.3f} ms")
            n *= 10

        result = refine(
            polynomial, A, B,
            tolerance=1e-6, n_start=1, n_step=50,
            strategy=lambda f, a, b, n: integrate_pooled(f, a, b, n, pool),
        )

    print(f"\nRefined: area={result.value:.9f} at n={result.n} "
          f"after {result.iterations} iterations (error {abs(result.value - EXACT):.3e})")


if __name__ == "__main__":
    main()
