"""
Shared pytest fixtures for trapezoidal tests.
"""

import logging
from pathlib import Path

import pytest

from trapezoidal.concurrency.pool import WorkerPool
from trapezoidal.config import get_config, set_config


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: long-running refinement cases")


@pytest.fixture(scope="session")
def test_output_root() -> Path:
    """
    Returns the root test_output directory. Created once per test session.
    Files here persist after tests complete for easy access.
    """
    output_dir = Path(__file__).parent.parent / "test_output"
    output_dir.mkdir(exist_ok=True)
    return output_dir


@pytest.fixture
def test_output_dir(request, test_output_root) -> Path:
    """
    Returns a directory for the current test to write output files.
    Directory structure: test_output/<module_name>/<test_name>/
    """
    module_name = request.module.__name__.split(".")[-1]
    test_name = request.node.name

    test_dir = test_output_root / module_name / test_name
    test_dir.mkdir(parents=True, exist_ok=True)
    return test_dir


@pytest.fixture
def pool():
    """A four-worker pool, shut down after the test."""
    worker_pool = WorkerPool(capacity=4, name="test-pool")
    yield worker_pool
    worker_pool.shutdown(graceful=False)


@pytest.fixture
def restore_config():
    """Put the process-wide IntegratorConfig back after the test."""
    original = get_config()
    yield
    set_config(original)


@pytest.fixture(autouse=True)
def reset_trapezoidal_logging():
    """Reset logging state before each test.

    Removes all handlers except NullHandler and resets the level, so that
    logging configured by one test does not leak into another.
    """
    logger = logging.getLogger("trapezoidal")

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        if not isinstance(handler, logging.NullHandler):
            handler.close()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)

    yield

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        if not isinstance(handler, logging.NullHandler):
            handler.close()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)
