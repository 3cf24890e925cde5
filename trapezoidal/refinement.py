"""Refinement driver: integrate with growing n until the value stabilises.

The driver is a small state machine. advance() is a pure transition
function from the current state and a fresh approximation to the next state
plus an action; refine() runs that machine against an integration strategy.

States:
    ITERATING  keep increasing n
    CONVERGED  two successive approximations differ by less than tolerance
    EXHAUSTED  the iteration cap was reached first

Example:
    result = refine(lambda x: x * x, 0.0, 1.0, tolerance=1e-8, n_step=50)
    print(result.value, result.n, result.converged)
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum

from trapezoidal.config import get_config
from trapezoidal.errors import InvalidArgumentError, NonConvergenceError
from trapezoidal.numerics.partition import validate_interval
from trapezoidal.numerics.reduction import Integrand
from trapezoidal.strategies.threaded import integrate_threaded

logger = logging.getLogger(__name__)

Strategy = Callable[[Integrand, float, float, int], float]


class RefinementPhase(Enum):
    ITERATING = "iterating"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


class RefinementAction(Enum):
    CONTINUE = "continue"
    STOP = "stop"


@dataclass(frozen=True)
class RefinementPolicy:
    """Stopping rule and schedule for n.

    Attributes:
        tolerance: Stop once |current - previous| < tolerance.
        n_start: First partition count.
        n_step: Increment of n per iteration.
        max_iterations: Optional cap on the number of integrations.
    """

    tolerance: float
    n_start: int = 1
    n_step: int = 50
    max_iterations: int | None = None

    def __post_init__(self) -> None:
        if not self.tolerance > 0:
            raise InvalidArgumentError(f"tolerance must be positive, got {self.tolerance}")
        if self.n_start <= 0:
            raise InvalidArgumentError(f"n_start must be positive, got {self.n_start}")
        if self.n_step <= 0:
            raise InvalidArgumentError(f"n_step must be positive, got {self.n_step}")
        if self.max_iterations is not None and self.max_iterations <= 0:
            raise InvalidArgumentError(
                f"max_iterations must be positive, got {self.max_iterations}"
            )

    def initial_state(self) -> RefinementState:
        return RefinementState(phase=RefinementPhase.ITERATING, n=self.n_start)


@dataclass(frozen=True)
class RefinementState:
    """Snapshot of the driver.

    ``n`` is the partition count to evaluate next while iterating, and the
    partition count that produced ``current`` once terminal.
    """

    phase: RefinementPhase
    n: int
    previous: float = 0.0
    current: float | None = None
    iterations: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.phase is not RefinementPhase.ITERATING


def advance(
    state: RefinementState,
    approximation: float,
    policy: RefinementPolicy,
) -> tuple[RefinementState, RefinementAction]:
    """Feed the approximation computed at ``state.n`` into the machine.

    Raises:
        ValueError: If ``state`` is already terminal.
    """
    if state.is_terminal:
        raise ValueError(f"cannot advance a {state.phase.value} refinement")

    iterations = state.iterations + 1
    delta = abs(approximation - state.previous)

    if state.n > policy.n_start and delta < policy.tolerance:
        return (
            replace(state, phase=RefinementPhase.CONVERGED, current=approximation,
                    iterations=iterations),
            RefinementAction.STOP,
        )

    if policy.max_iterations is not None and iterations >= policy.max_iterations:
        return (
            replace(state, phase=RefinementPhase.EXHAUSTED, current=approximation,
                    iterations=iterations),
            RefinementAction.STOP,
        )

    return (
        RefinementState(
            phase=RefinementPhase.ITERATING,
            n=state.n + policy.n_step,
            previous=approximation,
            current=approximation,
            iterations=iterations,
        ),
        RefinementAction.CONTINUE,
    )


@dataclass(frozen=True)
class RefinementStep:
    """One integration performed by the driver."""

    n: int
    value: float
    delta: float | None


@dataclass(frozen=True)
class RefinementResult:
    """Outcome of refine().

    Attributes:
        value: Last approximation.
        n: Partition count that produced ``value``.
        converged: True if the tolerance was met.
        iterations: Number of integrations performed.
        history: Every step, in order.
    """

    value: float
    n: int
    converged: bool
    iterations: int
    history: tuple[RefinementStep, ...] = field(default_factory=tuple)

    def __iter__(self):
        # Unpacks as (value, n, converged).
        return iter((self.value, self.n, self.converged))


def refine(
    f: Integrand,
    a: float,
    b: float,
    tolerance: float | None = None,
    n_start: int = 1,
    n_step: int | None = None,
    strategy: Strategy | None = None,
    max_iterations: int | None = None,
    raise_on_exhaustion: bool = True,
) -> RefinementResult:
    """Integrate repeatedly with n = n_start, n_start + n_step, ... until stable.

    Args:
        f: Integrand.
        a: Lower bound.
        b: Upper bound.
        tolerance: Stop when successive values differ by less than this.
            Defaults to the configured ``refine_tolerance``.
        n_start: First partition count.
        n_step: Increment of n. Defaults to the configured ``refine_step``.
        strategy: Callable ``(f, a, b, n) -> float``. Defaults to
            integrate_threaded with the configured worker count.
        max_iterations: Optional cap on iterations. Defaults to the
            configured ``max_iterations``.
        raise_on_exhaustion: Raise NonConvergenceError when the cap is hit;
            otherwise return a result with ``converged=False``.

    Raises:
        InvalidArgumentError: For a non-positive tolerance, n_start, n_step
            or max_iterations, or an invalid interval.
        NonConvergenceError: If the cap is hit and raise_on_exhaustion is set.
        IntegrationError: Any failure raised by the strategy, unchanged.
    """
    config = get_config()
    policy = RefinementPolicy(
        tolerance=config.refine_tolerance if tolerance is None else tolerance,
        n_start=n_start,
        n_step=config.refine_step if n_step is None else n_step,
        max_iterations=config.max_iterations if max_iterations is None else max_iterations,
    )
    validate_interval(a, b)
    if strategy is None:
        strategy = functools.partial(integrate_threaded, num_workers=config.default_workers)

    state = policy.initial_state()
    history: list[RefinementStep] = []
    action = RefinementAction.CONTINUE

    while action is RefinementAction.CONTINUE:
        n = state.n
        value = strategy(f, a, b, n)
        delta = abs(value - state.previous) if state.iterations else None
        history.append(RefinementStep(n=n, value=value, delta=delta))
        logger.debug("refine: n=%d value=%.12g delta=%s", n, value, delta)
        state, action = advance(state, value, policy)

    result = RefinementResult(
        value=state.current,
        n=state.n,
        converged=state.phase is RefinementPhase.CONVERGED,
        iterations=state.iterations,
        history=tuple(history),
    )

    if result.converged:
        logger.info("Converged after %d iterations at n=%d: %.12g",
                    result.iterations, result.n, result.value)
        return result

    logger.warning("No convergence after %d iterations (n=%d, tolerance=%g)",
                   result.iterations, result.n, policy.tolerance)
    if raise_on_exhaustion:
        raise NonConvergenceError(result)
    return result
