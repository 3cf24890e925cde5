"""Post-run analysis of refinement histories."""

from trapezoidal.analysis.convergence import history_frame, plot_convergence

__all__ = [
    "history_frame",
    "plot_convergence",
]
