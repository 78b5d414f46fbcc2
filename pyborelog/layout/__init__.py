"""Layout: vertical space allocation for layer descriptions.

Workflow::

    intervals = log.intervals()

    # Which descriptions do not fit their interval?
    conflicts = analyze_conflicts(intervals)

    # Merge neighbours and share their space
    clusters = description_clusters(intervals)

    # Offsets for drawing
    for placement in label_placements(clusters):
        print(placement.layer_index, placement.center, placement.bent)
"""

from pyborelog.layout.intervals import Interval, LabelMetrics
from pyborelog.layout.conflicts import ConflictRecord, analyze_conflicts
from pyborelog.layout.clusters import (
    AllocationContext,
    Cluster,
    LayerSize,
    build_clusters,
    description_clusters,
    distribute_space,
)
from pyborelog.layout.placement import LabelPlacement, label_placements, track_end
from pyborelog.layout.batch import (
    BatchAllocation,
    BoreholeAllocation,
    allocate,
    allocate_batch,
)

__all__ = [
    "Interval",
    "LabelMetrics",
    "ConflictRecord",
    "analyze_conflicts",
    "AllocationContext",
    "Cluster",
    "LayerSize",
    "build_clusters",
    "description_clusters",
    "distribute_space",
    "LabelPlacement",
    "label_placements",
    "track_end",
    "BatchAllocation",
    "BoreholeAllocation",
    "allocate",
    "allocate_batch",
]
