"""2-D preview plots of allocated borehole logs.

Functions
---------
plot_log
    Sketch one boring stick with its relocated descriptions.
plot_allocation
    Bar chart of original versus allocated interval heights.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from pyborelog.dxf.style import SheetStyle
from pyborelog.layout.placement import label_placements, track_end


def plot_log(
    allocation: Any,
    ax: Any = None,
    title: str = "",
    fontsize: float = 6.0,
    style: SheetStyle | None = None,
) -> Any:
    """Sketch one allocated borehole log.

    The depth rail is drawn at x = 0 with true depth ticks; each
    description sits in its allocated slot to the left, joined to its
    true depth by a jogged connector when the slot was moved.

    Args:
        allocation: A :class:`~pyborelog.layout.batch.BoreholeAllocation`.
        ax: Matplotlib axes (creates new figure if None).
        title: Plot title; defaults to the hole identifier.
        fontsize: Font size of the descriptions.
        style: Sheet style supplying the depth-line geometry; defaults
            to :class:`~pyborelog.dxf.style.SheetStyle`.

    Returns:
        Matplotlib axes.
    """
    import matplotlib.pyplot as plt

    style = style or SheetStyle()
    log = allocation.log
    clusters = allocation.clusters
    x_bend, x_jog, x_end = -style.bend_start, -style.bend_end, -style.depth_line_length
    depth = max(log.final_depth, track_end(clusters))

    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(4, max(4.0, depth / 2)))

    ax.plot([0, 0], [0, log.final_depth], "r-", linewidth=2)
    for placement in label_placements(clusters):
        d = placement.original_depth
        if placement.bent:
            c = placement.corrected_depth
            ax.plot([0, x_bend, x_jog, x_end], [d, d, c, c], "k--", linewidth=0.6)
        else:
            ax.plot([0, x_end], [d, d], "k--", linewidth=0.6)
        ax.text(
            x_end - 0.18, placement.center, log.description(placement.layer_index),
            ha="right", va="center", fontsize=fontsize, wrap=True,
        )

    if log.water_level is not None:
        ax.plot([0.3], [log.water_level], "bv")

    ax.set_ylim(depth + 1.0, -0.5)
    ax.set_xlim(-12.0, 1.0)
    ax.set_xticks([])
    ax.set_ylabel("Depth (m)")
    ax.set_title(title or log.hole_id)
    return ax


def plot_allocation(allocation: Any, ax: Any = None) -> Any:
    """Compare original and allocated heights per interval.

    Args:
        allocation: A :class:`~pyborelog.layout.batch.BoreholeAllocation`.
        ax: Matplotlib axes (creates new figure if None).

    Returns:
        Matplotlib axes.
    """
    import matplotlib.pyplot as plt

    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(8, 3))

    sizes = [ls for c in allocation.clusters for ls in c.layer_sizes]
    idx = np.arange(len(sizes))
    original = np.array([ls.original_height for ls in sizes])
    final = np.array([ls.final_height for ls in sizes])

    ax.bar(idx - 0.2, original, width=0.4, label="original")
    ax.bar(idx + 0.2, final, width=0.4, label="allocated")
    ax.set_xticks(idx)
    ax.set_xlabel("Layer")
    ax.set_ylabel("Height (m)")
    ax.legend()
    ax.grid(True, alpha=0.3)
    return ax
