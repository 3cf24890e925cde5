"""Convergence tables and charts for refinement runs.

These tests are intentionally "visual": they run the refinement driver on
a few integrands and save the history (CSV) plus matplotlib charts under
test_output/.

Run:
    pytest tests/integration/test_convergence_visualization.py -v

Output:
    test_output/test_convergence_visualization/<test_name>/...
"""

from __future__ import annotations

import functools
import math

import pandas as pd
import pytest

from trapezoidal import WorkerPool, integrate_pooled, integrate_threaded, refine
from trapezoidal.analysis import history_frame, plot_convergence


def quadratic(x: float) -> float:
    return 2 * x**2 + 3 * x + 0.5


QUADRATIC_EXACT = (2 / 3) * (20**3 - 2**3) + 1.5 * (20**2 - 2**2) + 0.5 * 18


class TestHistoryFrame:
    def test_columns_and_rows(self):
        result = refine(quadratic, 2.0, 20.0, tolerance=1e-3, n_step=50,
                        strategy=functools.partial(integrate_threaded, num_workers=2))
        frame = history_frame(result)

        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == ["n", "value", "delta"]
        assert len(frame) == result.iterations
        assert frame["n"].tolist() == [step.n for step in result.history]
        assert math.isnan(frame["delta"].iloc[0])
        assert frame["delta"].iloc[-1] < 1e-3

    def test_error_columns(self):
        result = refine(quadratic, 2.0, 20.0, tolerance=1e-2, n_step=50)
        frame = history_frame(result, exact=QUADRATIC_EXACT)

        assert {"abs_error", "rel_error"} <= set(frame.columns)
        expected = [1944 / n**2 for n in frame["n"]]
        assert frame["abs_error"].tolist() == pytest.approx(expected, rel=1e-6)
        assert frame["abs_error"].is_monotonic_decreasing

    def test_zero_exact_value(self):
        result = refine(math.sin, -1.0, 1.0, tolerance=1e-9, n_step=10)
        frame = history_frame(result, exact=0.0)
        assert frame["rel_error"].isna().all()


def test_quadratic_convergence_plot(test_output_dir):
    pytest.importorskip("matplotlib")

    with WorkerPool(capacity=4) as pool:
        result = refine(
            quadratic, 2.0, 20.0, tolerance=1e-6, n_start=1, n_step=50,
            strategy=lambda f, a, b, n: integrate_pooled(f, a, b, n, pool),
        )

    frame = history_frame(result, exact=QUADRATIC_EXACT)
    frame.to_csv(test_output_dir / "history.csv", index=False)

    path = plot_convergence(result, test_output_dir / "convergence.png", exact=QUADRATIC_EXACT)

    assert path.exists()
    assert path.stat().st_size > 0
    assert (test_output_dir / "history.csv").exists()


def test_unconverged_run_plot(test_output_dir):
    pytest.importorskip("matplotlib")

    result = refine(math.exp, 0.0, 3.0, tolerance=1e-12, n_step=5,
                    max_iterations=10, raise_on_exhaustion=False)
    path = plot_convergence(result, test_output_dir / "nested" / "exhausted.png",
                            title="exp(x) on [0, 3], capped")

    assert not result.converged
    assert path.exists()
