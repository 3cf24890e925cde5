"""trapezoidal: parallel composite trapezoidal integration.

Two interchangeable strategies compute the same sum:

    from trapezoidal import create_pool, integrate_pooled, integrate_threaded, refine

    f = lambda x: 2 * x**2 + 3 * x + 0.5

    integrate_threaded(f, 2.0, 20.0, n=100_000, num_workers=8)

    with create_pool(capacity=8) as pool:
        integrate_pooled(f, 2.0, 20.0, n=100_000, pool=pool)

    result = refine(f, 2.0, 20.0, tolerance=1e-6, n_step=50)

The library is silent by default; see trapezoidal.logging_config.
"""

import logging

from trapezoidal.concurrency import JoinHandle, PoolStats, WorkerPool, create_pool, spawn
from trapezoidal.config import IntegratorConfig, get_config, set_config
from trapezoidal.errors import (
    EvaluationError,
    IntegrationError,
    InvalidArgumentError,
    NonConvergenceError,
    PoolUnavailableError,
    WorkerError,
)
from trapezoidal.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_logging,
    set_level,
)
from trapezoidal.numerics import SubRange, combine, compute_partial, partition
from trapezoidal.refinement import (
    RefinementAction,
    RefinementPhase,
    RefinementPolicy,
    RefinementResult,
    RefinementState,
    RefinementStep,
    advance,
    refine,
)
from trapezoidal.strategies import integrate_pooled, integrate_threaded

logging.getLogger("trapezoidal").addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Strategies
    "integrate_pooled",
    "integrate_threaded",
    # Building blocks
    "SubRange",
    "combine",
    "compute_partial",
    "partition",
    # Concurrency
    "JoinHandle",
    "PoolStats",
    "WorkerPool",
    "create_pool",
    "spawn",
    # Refinement
    "RefinementAction",
    "RefinementPhase",
    "RefinementPolicy",
    "RefinementResult",
    "RefinementState",
    "RefinementStep",
    "advance",
    "refine",
    # Configuration
    "IntegratorConfig",
    "get_config",
    "set_config",
    # Errors
    "EvaluationError",
    "IntegrationError",
    "InvalidArgumentError",
    "NonConvergenceError",
    "PoolUnavailableError",
    "WorkerError",
    # Logging
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "set_level",
]
