"""Dedicated-thread strategy: one fresh thread per chunk, joined per call."""

from __future__ import annotations

import logging

from trapezoidal.concurrency.threads import JoinHandle, spawn
from trapezoidal.config import get_config
from trapezoidal.errors import EvaluationError, InvalidArgumentError, WorkerError
from trapezoidal.numerics.partition import partition, validate_interval, validate_partition_count
from trapezoidal.numerics.reduction import Integrand, combine, compute_partial, evaluate

logger = logging.getLogger(__name__)


def integrate_threaded(
    f: Integrand,
    a: float,
    b: float,
    n: int,
    num_workers: int | None = None,
) -> float:
    """Integrate f over [a, b] with n trapezoids on dedicated threads.

    Spawns exactly ``num_workers`` threads, each bound to one chunk of the
    interior indices. Every thread is joined before the partial sums are
    combined, including when some of them failed. Workers beyond ``n - 1``
    get empty chunks and contribute zero.

    Args:
        f: Integrand, callable from several threads at once.
        a: Lower bound.
        b: Upper bound, strictly greater than a.
        n: Number of trapezoids.
        num_workers: Threads to spawn. Defaults to the configured
            ``default_workers``.

    Returns:
        The trapezoidal approximation of the integral.

    Raises:
        InvalidArgumentError: If n or num_workers is not positive, or a >= b.
        EvaluationError: If f raised in any worker or at an endpoint.
        WorkerError: If a worker exited abnormally for another reason,
            including SystemExit raised by f.
    """
    if num_workers is None:
        num_workers = get_config().default_workers
    if num_workers <= 0:
        raise InvalidArgumentError(f"num_workers must be positive, got {num_workers}")
    validate_partition_count(n)
    validate_interval(a, b)

    h = (b - a) / n
    chunks = partition(n, num_workers)
    logger.debug("Threaded integration: n=%d, workers=%d, h=%g", n, num_workers, h)

    handles: list[JoinHandle[float]] = [
        spawn(compute_partial, f, a, h, chunk, name=f"trapezoid-worker-{t}")
        for t, chunk in enumerate(chunks)
    ]

    partials, failure = _join_all(handles)

    if failure is not None:
        raise failure
    return combine(evaluate(f, a), evaluate(f, b), partials, h)


def _join_all(handles: list[JoinHandle[float]]) -> tuple[list[float], BaseException | None]:
    """Join every handle; return the partials and the first failure seen.

    Failures that are not an EvaluationError become a WorkerError, except
    KeyboardInterrupt, which is passed through once every handle is joined.
    """
    partials: list[float] = []
    failure: BaseException | None = None
    for handle in handles:
        try:
            partials.append(handle.join())
        except (EvaluationError, KeyboardInterrupt) as exc:
            failure = failure or exc
        except BaseException as exc:  # e.g. SystemExit raised by f
            logger.error("Worker %s exited abnormally: %r", handle.name, exc)
            failure = failure or _worker_error(handle, exc)
    return partials, failure


def _worker_error(handle: JoinHandle[float], exc: BaseException) -> WorkerError:
    error = WorkerError(f"worker {handle.name} exited abnormally: {exc!r}")
    error.__cause__ = exc
    return error
