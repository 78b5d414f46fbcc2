"""Vertical placement of descriptions from allocated clusters.

Walks the clusters of one borehole in order and turns final heights
into drawing offsets.  The running offset restarts at the true top of
each cluster, so a stretched cluster overhangs the next one rather than
pushing the rest of the log down.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

from pyborelog.layout.clusters import Cluster, LayerSize

#: Boundaries closer than this are drawn as straight depth lines (m).
BEND_TOLERANCE = 1e-6


@dataclass(frozen=True)
class LabelPlacement:
    """Where one description and its depth line go.

    Attributes:
        size: Allocation of the interval.
        top: Offset of the top of the description slot (m below origin).
        center: Offset of the centre of the slot.
        original_depth: True depth of the bottom of the interval.
        corrected_depth: Bottom of the slot for merged clusters, ``None``
            for unchanged intervals.
    """

    size: LayerSize
    top: float
    center: float
    original_depth: float
    corrected_depth: float | None

    @property
    def layer_index(self) -> int:
        return self.size.layer_index

    @property
    def bent(self) -> bool:
        """True when the depth line must jog to the relocated boundary."""
        return (
            self.corrected_depth is not None
            and abs(self.corrected_depth - self.original_depth) > BEND_TOLERANCE
        )


def label_placements(clusters: Sequence[Cluster]) -> Iterator[LabelPlacement]:
    """Yield one :class:`LabelPlacement` per interval, top to bottom."""
    for cluster in clusters:
        if not cluster.layer_sizes:
            continue
        y = cluster.layer_sizes[0].top
        for size in cluster.layer_sizes:
            bottom = y + size.final_height
            yield LabelPlacement(
                size=size,
                top=y,
                center=y + size.final_height / 2.0,
                original_depth=size.bottom,
                corrected_depth=None if cluster.unchanged else bottom,
            )
            y = bottom


def track_end(clusters: Sequence[Cluster]) -> float:
    """Offset reached after the last description slot (m)."""
    end = 0.0
    for placement in label_placements(clusters):
        end = placement.top + placement.size.final_height
    return end
