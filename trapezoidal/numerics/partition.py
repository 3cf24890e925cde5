"""Splitting the interior sample indices of a trapezoidal sum into chunks.

The endpoints 0 and n are weighted by 1/2 and handled by the combiner, so
only the interior indices [1, n-1] are handed out to workers. The last
chunk absorbs the remainder of the integer division.
"""

from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass

from trapezoidal.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubRange:
    """Inclusive block of sample indices owned by one worker.

    A range with ``start > end`` is empty and owns no samples.
    """

    start: int
    end: int

    @property
    def is_empty(self) -> bool:
        return self.start > self.end

    def __len__(self) -> int:
        if self.is_empty:
            return 0
        return self.end - self.start + 1

    def indices(self) -> range:
        """Owned indices in ascending order."""
        if self.is_empty:
            return range(0)
        return range(self.start, self.end + 1)


def validate_partition_count(n: int) -> None:
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise InvalidArgumentError(f"n must be an integer, got {n!r}")
    if n <= 0:
        raise InvalidArgumentError(f"n must be positive, got {n}")


def validate_interval(a: float, b: float) -> None:
    """Reject non-finite bounds and degenerate or inverted intervals."""
    if not (math.isfinite(a) and math.isfinite(b)):
        raise InvalidArgumentError(f"bounds must be finite, got a={a!r}, b={b!r}")
    if a >= b:
        raise InvalidArgumentError(f"interval requires a < b, got a={a!r}, b={b!r}")


def partition(n: int, k: int) -> list[SubRange]:
    """Split [1, n-1] into k contiguous, non-overlapping ranges.

    Each range gets ``(n - 1) // k`` indices and the last one also takes the
    remainder. When ``k > n - 1`` the leading ranges are empty.

    Args:
        n: Number of trapezoids.
        k: Number of chunks.

    Returns:
        Exactly k SubRanges in index order.

    Raises:
        InvalidArgumentError: If n or k is not a positive integer.
    """
    validate_partition_count(n)
    if isinstance(k, bool) or not isinstance(k, numbers.Integral) or k <= 0:
        raise InvalidArgumentError(f"chunk count must be a positive integer, got {k!r}")

    block = (n - 1) // k
    ranges = []
    for t in range(k):
        start = t * block + 1
        end = n - 1 if t == k - 1 else start + block - 1
        ranges.append(SubRange(start, end))

    if block == 0 and k > 1:
        logger.debug("partition(n=%d, k=%d): %d empty chunks", n, k, k - 1)
    return ranges
