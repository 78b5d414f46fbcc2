"""Visualization: matplotlib previews of allocated logs."""

from pyborelog.visualization.plot2d import plot_allocation, plot_log

__all__ = [
    "plot_log",
    "plot_allocation",
]
