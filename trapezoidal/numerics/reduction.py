"""Partial sums and the trapezoidal combine step."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable

from trapezoidal.errors import EvaluationError
from trapezoidal.numerics.partition import SubRange

Integrand = Callable[[float], float]


def evaluate(f: Integrand, x: float) -> float:
    """Call the integrand, wrapping any failure in EvaluationError."""
    try:
        return f(x)
    except Exception as exc:
        raise EvaluationError(x, exc) from exc


def compute_partial(f: Integrand, a: float, h: float, sub_range: SubRange) -> float:
    """Unweighted sum of f(a + i*h) over the indices of ``sub_range``.

    Returns 0.0 for an empty range without evaluating f.

    Raises:
        EvaluationError: If f raises for any sample point.
    """
    if sub_range.is_empty:
        return 0.0

    return math.fsum(evaluate(f, a + i * h) for i in sub_range.indices())


def combine(fa: float, fb: float, partials: Iterable[float], h: float) -> float:
    """Composite trapezoidal rule: (h/2) * (f(a) + f(b) + 2 * sum(partials)).

    The endpoint values carry weight 1/2 and must not be part of
    ``partials``.
    """
    interior = math.fsum(partials)
    return (h / 2.0) * (fa + fb + 2.0 * interior)
