"""Execution primitives used by the integration strategies."""

from trapezoidal.concurrency.pool import PoolStats, WorkerPool, create_pool
from trapezoidal.concurrency.threads import JoinHandle, spawn

__all__ = [
    "JoinHandle",
    "PoolStats",
    "WorkerPool",
    "create_pool",
    "spawn",
]
