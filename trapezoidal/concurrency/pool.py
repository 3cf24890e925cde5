"""Fixed-size thread pool with a bounded FIFO task queue.

A WorkerPool owns ``capacity`` long-lived threads that pull work items from
a FIFO queue holding at most ``queue_size`` pending tasks. submit() returns a
concurrent.futures.Future; when every slot is taken, submit() blocks until a
worker frees one. Stop signals for the workers bypass the slot limit, so
shutdown never waits for queue space. Tasks run in the order
they were submitted, across every caller sharing the pool.

Lifecycle is explicit: create → submit* → shutdown. A graceful shutdown lets
queued and running tasks finish. A hard shutdown cancels queued tasks and
resolves the futures of running tasks with CancelledError; those threads
finish their current call in the background and the result is discarded.

Example:
    with create_pool(capacity=4) as pool:
        future = pool.submit(sum, [1, 2, 3])
        assert future.result() == 6
"""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import CancelledError, Future, InvalidStateError
from dataclasses import dataclass, field
from typing import Any, Callable

from trapezoidal.config import get_config
from trapezoidal.errors import InvalidArgumentError, PoolUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class _WorkItem:
    future: Future
    fn: Callable[..., Any]
    args: tuple[Any, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PoolStats:
    """Frozen snapshot of pool counters."""

    capacity: int
    tasks_submitted: int = 0
    tasks_completed: int = 0
    tasks_failed: int = 0
    tasks_cancelled: int = 0
    pending: int = 0


def _settle(setter: Callable[[Any], None], value: Any) -> bool:
    """Set a future's outcome unless it was already abandoned."""
    try:
        setter(value)
    except InvalidStateError:
        return False
    return True


class WorkerPool:
    """Bounded pool of reusable worker threads.

    Args:
        capacity: Number of worker threads. Defaults to the configured
            pool capacity (the host's available parallelism).
        queue_size: Maximum pending tasks. Defaults to
            ``capacity * config.queue_factor``.
        oversubscription: Tasks per worker used by integrate_pooled.
            Defaults to ``config.oversubscription``.
        name: Prefix for worker thread names.

    Raises:
        InvalidArgumentError: If any size is not positive.
    """

    def __init__(
        self,
        capacity: int | None = None,
        queue_size: int | None = None,
        oversubscription: int | None = None,
        name: str = "trapezoidal-pool",
    ) -> None:
        config = get_config()
        capacity = config.pool_capacity if capacity is None else capacity
        oversubscription = config.oversubscription if oversubscription is None else oversubscription
        if capacity <= 0:
            raise InvalidArgumentError(f"pool capacity must be positive, got {capacity}")
        if oversubscription <= 0:
            raise InvalidArgumentError(f"oversubscription must be positive, got {oversubscription}")
        if queue_size is None:
            queue_size = capacity * config.queue_factor
        if queue_size <= 0:
            raise InvalidArgumentError(f"queue_size must be positive, got {queue_size}")

        self._capacity = capacity
        self._oversubscription = oversubscription
        self._name = name
        self._tasks: queue.Queue[_WorkItem | None] = queue.Queue()
        self._slots = threading.BoundedSemaphore(queue_size)

        # _submit_lock orders submissions against shutdown; _state_lock guards
        # the running set and counters, touched by worker threads.
        self._submit_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._shutdown = False
        self._abandoned = False
        self._running: set[Future] = set()
        self._submitted = 0
        self._completed = 0
        self._failed = 0
        self._cancelled = 0
        self._pending = 0

        self._threads = [
            threading.Thread(target=self._work, name=f"{name}-{i}", daemon=True)
            for i in range(capacity)
        ]
        for thread in self._threads:
            thread.start()
        logger.info("Started pool %s with %d workers (queue size %d)", name, capacity, queue_size)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def oversubscription(self) -> int:
        return self._oversubscription

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    @property
    def stats(self) -> PoolStats:
        with self._state_lock:
            return PoolStats(
                capacity=self._capacity,
                tasks_submitted=self._submitted,
                tasks_completed=self._completed,
                tasks_failed=self._failed,
                tasks_cancelled=self._cancelled,
                pending=self._pending,
            )

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        """Queue ``fn(*args)`` and return its future.

        Blocks while the queue is full.

        Raises:
            PoolUnavailableError: If the pool has been shut down.
        """
        if self._shutdown:
            raise PoolUnavailableError(f"pool {self._name} has been shut down")
        self._slots.acquire()
        with self._submit_lock:
            if self._shutdown:
                self._slots.release()
                raise PoolUnavailableError(f"pool {self._name} has been shut down")
            future: Future = Future()
            with self._state_lock:
                self._submitted += 1
                self._pending += 1
            self._tasks.put(_WorkItem(future, fn, args))
        return future

    def _work(self) -> None:
        while True:
            item = self._tasks.get()
            if item is None:
                return
            self._slots.release()

            with self._state_lock:
                self._pending -= 1
                if self._abandoned:
                    if item.future.cancel():
                        self._cancelled += 1
                    continue
                if not item.future.set_running_or_notify_cancel():
                    continue
                self._running.add(item.future)
            try:
                result = item.fn(*item.args)
            except BaseException as exc:  # delivered through the future
                settled = _settle(item.future.set_exception, exc)
                outcome = "failed"
            else:
                settled = _settle(item.future.set_result, result)
                outcome = "completed"
            with self._state_lock:
                self._running.discard(item.future)
                if not settled:
                    logger.debug("Discarding result of abandoned task in %s", self._name)
                elif outcome == "failed":
                    self._failed += 1
                else:
                    self._completed += 1

    def shutdown(self, graceful: bool = True, wait: bool = True) -> None:
        """Stop accepting work and release the worker threads.

        Args:
            graceful: Let queued and running tasks finish. When False, queued
                tasks are cancelled and running tasks' futures fail with
                CancelledError.
            wait: Block until every worker thread has exited. A hard
                shutdown still waits for in-flight calls to return.

        Calling shutdown more than once is a no-op.
        """
        with self._submit_lock:
            if self._shutdown:
                return
            self._shutdown = True

            if not graceful:
                self._abandon_outstanding()

            for _ in self._threads:
                self._tasks.put(None)

        logger.info("Shutting down pool %s (graceful=%s)", self._name, graceful)
        if wait:
            for thread in self._threads:
                thread.join()

    def _abandon_outstanding(self) -> None:
        cancelled = 0
        while True:
            try:
                item = self._tasks.get_nowait()
            except queue.Empty:
                break
            if item is None:
                continue
            self._slots.release()
            with self._state_lock:
                self._pending -= 1
            if item.future.cancel():
                cancelled += 1

        with self._state_lock:
            self._abandoned = True
            for future in list(self._running):
                if _settle(future.set_exception, CancelledError(f"pool {self._name} shut down")):
                    cancelled += 1
            self._cancelled += cancelled
        if cancelled:
            logger.warning("Pool %s abandoned %d outstanding tasks", self._name, cancelled)

    def __enter__(self) -> WorkerPool:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(graceful=True)

    def __repr__(self) -> str:
        state = "shutdown" if self._shutdown else "running"
        return f"WorkerPool({self._name!r}, capacity={self._capacity}, {state})"


def create_pool(capacity: int | None = None, **kwargs: Any) -> WorkerPool:
    """Create a WorkerPool; see WorkerPool for keyword arguments."""
    return WorkerPool(capacity=capacity, **kwargs)
