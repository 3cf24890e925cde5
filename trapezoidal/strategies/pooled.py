"""Pool-based strategy: over-partitioned tasks on a shared WorkerPool."""

from __future__ import annotations

import logging
from concurrent.futures import CancelledError, Future

from trapezoidal.concurrency.pool import WorkerPool
from trapezoidal.errors import (
    EvaluationError,
    InvalidArgumentError,
    PoolUnavailableError,
    WorkerError,
)
from trapezoidal.numerics.partition import partition, validate_interval, validate_partition_count
from trapezoidal.numerics.reduction import Integrand, combine, compute_partial, evaluate

logger = logging.getLogger(__name__)


def integrate_pooled(
    f: Integrand,
    a: float,
    b: float,
    n: int,
    pool: WorkerPool,
    oversubscription: int | None = None,
) -> float:
    """Integrate f over [a, b] with n trapezoids on a shared WorkerPool.

    Submits ``pool.capacity * oversubscription`` tasks so that workers which
    finish early pick up more chunks, then awaits the futures in submission
    order. The pool stays usable after the call.

    Args:
        f: Integrand, callable from several threads at once.
        a: Lower bound.
        b: Upper bound, strictly greater than a.
        n: Number of trapezoids.
        pool: A live WorkerPool.
        oversubscription: Tasks per pool worker. Defaults to the pool's
            own setting.

    Returns:
        The trapezoidal approximation of the integral.

    Raises:
        InvalidArgumentError: If n or oversubscription is not positive, or a >= b.
        PoolUnavailableError: If the pool has been shut down.
        EvaluationError: If f raised in any task or at an endpoint.
        WorkerError: If a task was cancelled or failed for another reason.
    """
    validate_partition_count(n)
    validate_interval(a, b)
    if oversubscription is None:
        oversubscription = pool.oversubscription
    if oversubscription <= 0:
        raise InvalidArgumentError(f"oversubscription must be positive, got {oversubscription}")
    if pool.is_shutdown:
        raise PoolUnavailableError(f"pool {pool.name} has been shut down")

    h = (b - a) / n
    task_count = pool.capacity * oversubscription
    chunks = partition(n, task_count)
    logger.debug(
        "Pooled integration: n=%d, tasks=%d on %d workers, h=%g",
        n, task_count, pool.capacity, h,
    )

    futures: list[Future] = []
    try:
        for chunk in chunks:
            futures.append(pool.submit(compute_partial, f, a, h, chunk))
        interior = [_await(future, index) for index, future in enumerate(futures)]
    except BaseException:
        _cancel_pending(futures)
        raise

    return combine(evaluate(f, a), evaluate(f, b), interior, h)


def _await(future: Future, index: int) -> float:
    try:
        return future.result()
    except CancelledError as exc:
        raise WorkerError(f"task {index} was cancelled") from exc
    except (EvaluationError, KeyboardInterrupt):
        raise
    except BaseException as exc:
        raise WorkerError(f"task {index} failed: {exc!r}") from exc


def _cancel_pending(futures: list[Future]) -> None:
    cancelled = sum(1 for future in futures if future.cancel())
    if cancelled:
        logger.debug("Cancelled %d pending tasks after a failed integration", cancelled)
