"""The two concurrency strategies for the trapezoidal sum.

- integrate_threaded: spawn and join one thread per chunk on every call
- integrate_pooled: submit over-partitioned tasks to a long-lived WorkerPool
"""

from trapezoidal.strategies.pooled import integrate_pooled
from trapezoidal.strategies.threaded import integrate_threaded

__all__ = [
    "integrate_pooled",
    "integrate_threaded",
]
