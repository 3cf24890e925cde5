"""Building blocks of the composite trapezoidal rule.

- partition: split interior sample indices into worker chunks
- compute_partial: sum the integrand over one chunk
- combine: apply the trapezoidal weighting to endpoints and partial sums
"""

from trapezoidal.numerics.partition import (
    SubRange,
    partition,
    validate_interval,
    validate_partition_count,
)
from trapezoidal.numerics.reduction import Integrand, combine, compute_partial, evaluate

__all__ = [
    "Integrand",
    "SubRange",
    "combine",
    "compute_partial",
    "evaluate",
    "partition",
    "validate_interval",
    "validate_partition_count",
]
