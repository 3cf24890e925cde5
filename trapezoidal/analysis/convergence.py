"""Tabulating and plotting a refinement history.

history_frame() turns the steps recorded by refine() into a pandas
DataFrame; plot_convergence() draws the approximation and the change
between successive steps against n.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from trapezoidal.refinement import RefinementResult

logger = logging.getLogger(__name__)

COLUMNS = ["n", "value", "delta"]


def history_frame(result: RefinementResult, exact: float | None = None) -> pd.DataFrame:
    """One row per refinement step.

    Args:
        result: Output of refine().
        exact: Known value of the integral. When given, ``abs_error`` and
            ``rel_error`` columns are added.

    Returns:
        DataFrame with columns n, value, delta (NaN for the first step) and
        optionally abs_error, rel_error.
    """
    frame = pd.DataFrame(
        [(step.n, step.value, step.delta) for step in result.history],
        columns=COLUMNS,
    )
    frame["delta"] = frame["delta"].astype(float)
    if exact is not None:
        frame["abs_error"] = (frame["value"] - exact).abs()
        frame["rel_error"] = frame["abs_error"] / abs(exact) if exact != 0 else float("nan")
    return frame


def plot_convergence(
    result: RefinementResult,
    path: str | Path,
    exact: float | None = None,
    title: str | None = None,
) -> Path:
    """Save a two-panel chart of value and |delta| versus n.

    Args:
        result: Output of refine().
        path: Output image path. Parent directories are created.
        exact: Known value, drawn as a reference line.
        title: Figure title.

    Returns:
        The path written.
    """
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    frame = history_frame(result, exact=exact)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fig, (ax_value, ax_delta) = plt.subplots(2, 1, figsize=(10, 7), sharex=True)

    ax_value.plot(frame["n"], frame["value"], marker=".", label="approximation")
    if exact is not None:
        ax_value.axhline(exact, color="tab:red", linestyle="--", label="exact")
    ax_value.set_ylabel("value")
    ax_value.grid(True, alpha=0.3)
    ax_value.legend()

    deltas = frame.dropna(subset=["delta"])
    deltas = deltas[deltas["delta"] > 0]
    ax_delta.plot(deltas["n"], deltas["delta"], marker=".", color="tab:green")
    if not deltas.empty:
        ax_delta.set_yscale("log")
    ax_delta.set_xlabel("n")
    ax_delta.set_ylabel("|delta|")
    ax_delta.grid(True, alpha=0.3)

    status = "converged" if result.converged else "not converged"
    fig.suptitle(title or f"Refinement ({status} at n={result.n})")
    fig.tight_layout()
    fig.savefig(path, dpi=120)
    plt.close(fig)

    logger.debug("Wrote convergence plot to %s", path)
    return path
