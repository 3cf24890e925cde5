"""Runtime configuration for the integrators.

IntegratorConfig collects the tunables that the strategies and the
refinement driver fall back to when a caller does not pass them explicitly.
A process default is held here and can be replaced with set_config() or
loaded from the environment.

Environment variables:
    TRAP_POOL_CAPACITY: Worker threads in a new WorkerPool.
    TRAP_QUEUE_FACTOR: Pending-task queue slots per pool worker.
    TRAP_OVERSUBSCRIPTION: Pooled tasks submitted per pool worker.
    TRAP_WORKERS: Threads used by integrate_threaded.
    TRAP_REFINE_STEP: Increment of n between refinement iterations.
    TRAP_REFINE_TOLERANCE: Stabilisation tolerance for refine().
    TRAP_MAX_ITERATIONS: Iteration cap for refine() (empty for none).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Callable, TypeVar

from trapezoidal.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def available_parallelism() -> int:
    """Number of CPUs usable by this process, at least 1."""
    if hasattr(os, "sched_getaffinity"):
        return max(1, len(os.sched_getaffinity(0)))
    return os.cpu_count() or 1


@dataclass(frozen=True)
class IntegratorConfig:
    """Defaults for pools, strategies and the refinement driver.

    Attributes:
        pool_capacity: Worker threads in a new WorkerPool.
        queue_factor: Queue slots per worker; the pool queue holds
            ``pool_capacity * queue_factor`` pending tasks.
        oversubscription: Tasks per pool worker for one pooled call.
        default_workers: Threads spawned by integrate_threaded.
        refine_step: Increment of n between refinement iterations.
        refine_tolerance: Stabilisation tolerance.
        max_iterations: Optional cap on refinement iterations.
    """

    pool_capacity: int = available_parallelism()
    queue_factor: int = 10
    oversubscription: int = 4
    default_workers: int = available_parallelism()
    refine_step: int = 50
    refine_tolerance: float = 1e-9
    max_iterations: int | None = None

    def __post_init__(self) -> None:
        for name in ("pool_capacity", "queue_factor", "oversubscription",
                     "default_workers", "refine_step"):
            value = getattr(self, name)
            if value <= 0:
                raise InvalidArgumentError(f"{name} must be positive, got {value}")
        if self.refine_tolerance <= 0:
            raise InvalidArgumentError(
                f"refine_tolerance must be positive, got {self.refine_tolerance}"
            )
        if self.max_iterations is not None and self.max_iterations <= 0:
            raise InvalidArgumentError(
                f"max_iterations must be positive, got {self.max_iterations}"
            )

    def with_overrides(self, **changes) -> IntegratorConfig:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_env(cls, base: IntegratorConfig | None = None) -> IntegratorConfig:
        """Build a config from TRAP_* environment variables.

        Unset variables keep the value from ``base`` (or the dataclass
        defaults).

        Raises:
            InvalidArgumentError: If a variable is set but malformed.
        """
        base = base or cls()
        changes = {}
        for field_name, env_name, parse in _ENV_FIELDS:
            raw = os.environ.get(env_name, "").strip()
            if not raw:
                continue
            changes[field_name] = _parse(env_name, raw, parse)
        if changes:
            logger.debug("Config overrides from environment: %s", changes)
        return replace(base, **changes)


def _parse(env_name: str, raw: str, parse: Callable[[str], T]) -> T:
    try:
        return parse(raw)
    except ValueError as exc:
        raise InvalidArgumentError(f"{env_name}={raw!r} is not valid") from exc


def _optional_int(raw: str) -> int | None:
    if raw.lower() == "none":
        return None
    return int(raw)


_ENV_FIELDS: tuple[tuple[str, str, Callable[[str], object]], ...] = (
    ("pool_capacity", "TRAP_POOL_CAPACITY", int),
    ("queue_factor", "TRAP_QUEUE_FACTOR", int),
    ("oversubscription", "TRAP_OVERSUBSCRIPTION", int),
    ("default_workers", "TRAP_WORKERS", int),
    ("refine_step", "TRAP_REFINE_STEP", int),
    ("refine_tolerance", "TRAP_REFINE_TOLERANCE", float),
    ("max_iterations", "TRAP_MAX_ITERATIONS", _optional_int),
)

_config = IntegratorConfig()


def get_config() -> IntegratorConfig:
    """Return the process-wide default configuration."""
    return _config


def set_config(config: IntegratorConfig) -> IntegratorConfig:
    """Replace the process-wide default configuration.

    Returns:
        The previous configuration, so tests can restore it.
    """
    global _config
    previous = _config
    _config = config
    return previous
