"""Exception types raised by the integrators.

Every error derives from IntegrationError so callers can catch the whole
family at once. Argument problems also subclass ValueError and pool state
problems subclass RuntimeError, matching what plain Python code would raise
for the same situations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from trapezoidal.refinement import RefinementResult


class IntegrationError(Exception):
    """Base class for all integration failures."""


class InvalidArgumentError(IntegrationError, ValueError):
    """An argument is out of range (n <= 0, workers <= 0, a >= b, ...)."""


class EvaluationError(IntegrationError):
    """The integrand raised while being evaluated.

    Attributes:
        x: The sample point that failed.
    """

    def __init__(self, x: float, cause: BaseException) -> None:
        super().__init__(f"integrand failed at x={x!r}: {cause!r}")
        self.x = x


class WorkerError(IntegrationError):
    """A worker ended abnormally for a reason other than evaluation.

    Cancelled pool tasks surface as this error with the CancelledError
    chained as ``__cause__``.
    """


class PoolUnavailableError(IntegrationError, RuntimeError):
    """Work was submitted to a pool that has been shut down."""


class NonConvergenceError(IntegrationError):
    """The refinement driver hit its iteration cap before stabilising.

    Attributes:
        result: The last RefinementResult, with ``converged=False``.
    """

    def __init__(self, result: RefinementResult) -> None:
        super().__init__(
            f"no convergence after {result.iterations} iterations "
            f"(n={result.n}, value={result.value!r})"
        )
        self.result = result
