"""Cluster building and space distribution for layer descriptions.

When a description is taller than the interval it annotates, the
interval borrows room from its neighbours.  Starting at each overflowing
interval (the *seed*), a cluster grows one neighbour at a time towards
the side with more slack until the absorbed slack covers the seed's
overflow.  If both sides run out, the cluster stretches the track by the
missing amount.  The cluster's total space is then shared among its
members in proportion to the height of their labels, never giving a
member less than its own label needs.

Example::

    intervals = log.intervals()
    clusters = description_clusters(intervals)
    for cluster in clusters:
        for size in cluster.layer_sizes:
            print(size.layer_index, size.final_height)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from pyborelog.layout.conflicts import ConflictRecord, analyze_conflicts
from pyborelog.layout.intervals import Interval, LabelMetrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayerSize:
    """Allocated height of one interval.

    Attributes:
        layer_index: Interval index.
        original_height: Physical thickness of the interval (m).
        text_height: Estimated label height (m).
        final_height: Height given to the label on the drawing (m).
        top: True depth of the top of the interval (m).
        bottom: True depth of the bottom of the interval (m).
    """

    layer_index: int
    original_height: float
    text_height: float
    final_height: float
    top: float
    bottom: float


@dataclass
class Cluster:
    """Contiguous run of intervals sharing their vertical space.

    Attributes:
        start_index: First interval of the run.
        end_index: Last interval of the run (inclusive).
        layers: Interval indices ``start_index..end_index``.
        total_needed: Overflow of the seed interval (m).
        total_available: Slack absorbed from merged neighbours (m).
        needs_extra_space: Stretch added to the track (m).
        layer_sizes: Allocation result, aligned with *layers*.
        unchanged: True for a single interval kept at its own height.
    """

    start_index: int
    end_index: int
    layers: list[int]
    total_needed: float = 0.0
    total_available: float = 0.0
    needs_extra_space: float = 0.0
    layer_sizes: list[LayerSize] = field(default_factory=list)
    unchanged: bool = False

    @property
    def original_space(self) -> float:
        """Sum of the members' physical thicknesses (m)."""
        return float(sum(ls.original_height for ls in self.layer_sizes))

    @property
    def target_space(self) -> float:
        """Space the cluster is entitled to: original plus stretch (m)."""
        return self.original_space + self.needs_extra_space

    @property
    def allocated_space(self) -> float:
        """Sum of the final heights actually handed out (m)."""
        return float(sum(ls.final_height for ls in self.layer_sizes))

    @property
    def floor_excess(self) -> float:
        """Space handed out beyond :attr:`target_space` by label floors."""
        return max(self.allocated_space - self.target_space, 0.0)

    def size_of(self, layer_index: int) -> LayerSize:
        for size in self.layer_sizes:
            if size.layer_index == layer_index:
                return size
        raise KeyError(layer_index)


@dataclass
class AllocationContext:
    """Inputs of one allocation pass plus the claimed-interval mask.

    Args:
        intervals: Ordered interval sequence of one borehole.
        conflicts: Conflict records aligned with *intervals*.
        metrics: Label metrics (for the fit margin).
    """

    intervals: Sequence[Interval]
    conflicts: Sequence[ConflictRecord]
    metrics: LabelMetrics = field(default_factory=LabelMetrics)
    claimed: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        if len(self.intervals) != len(self.conflicts):
            raise ValueError("intervals and conflicts must have the same length.")
        self.claimed = np.zeros(len(self.intervals), dtype=bool)

    @property
    def n(self) -> int:
        return len(self.intervals)

    def can_grow_up(self, cluster: Cluster) -> bool:
        return cluster.start_index > 0 and not self.claimed[cluster.start_index - 1]

    def can_grow_down(self, cluster: Cluster) -> bool:
        return (
            cluster.end_index < self.n - 1
            and not self.claimed[cluster.end_index + 1]
        )

    def claim(self, index: int) -> None:
        self.claimed[index] = True


# ----------------------------------------------------------------------
# Cluster building
# ----------------------------------------------------------------------

def _grow(ctx: AllocationContext, seed: ConflictRecord) -> Cluster:
    """Grow a cluster around *seed* until its overflow is covered."""
    cluster = Cluster(
        start_index=seed.index,
        end_index=seed.index,
        layers=[seed.index],
        total_needed=seed.overflow,
    )

    while cluster.total_available < cluster.total_needed:
        up = ctx.can_grow_up(cluster)
        down = ctx.can_grow_down(cluster)
        if not (up or down):
            break

        if up and down:
            # Equal slack on both sides goes up.
            above = ctx.conflicts[cluster.start_index - 1].available_space
            below = ctx.conflicts[cluster.end_index + 1].available_space
            go_down = above < below
        else:
            go_down = down

        if go_down:
            cluster.end_index += 1
            neighbour = cluster.end_index
            cluster.layers.append(neighbour)
        else:
            cluster.start_index -= 1
            neighbour = cluster.start_index
            cluster.layers.insert(0, neighbour)

        cluster.total_available += max(
            0.0, ctx.conflicts[neighbour].available_space
        )
        ctx.claim(neighbour)

    if cluster.total_available < cluster.total_needed:
        cluster.needs_extra_space = cluster.total_needed - cluster.total_available

    ctx.claim(seed.index)
    logger.debug(
        "cluster %d..%d: needed %.3f, available %.3f, extra %.3f",
        cluster.start_index, cluster.end_index, cluster.total_needed,
        cluster.total_available, cluster.needs_extra_space,
    )
    return cluster


def build_clusters(ctx: AllocationContext) -> list[Cluster]:
    """Partition the intervals of *ctx* into clusters.

    Overflowing intervals are visited in ascending order; each one not
    already absorbed by an earlier cluster seeds a new cluster.  Every
    interval left unclaimed becomes a singleton ``unchanged`` cluster.

    Returns:
        Clusters sorted by ``start_index``.  Only the singleton clusters
        have ``layer_sizes`` filled in; see :func:`distribute_space`.
    """
    clusters: list[Cluster] = []
    for record in ctx.conflicts:
        if record.has_overflow and not ctx.claimed[record.index]:
            clusters.append(_grow(ctx, record))

    for i in np.flatnonzero(~ctx.claimed):
        i = int(i)
        iv = ctx.intervals[i]
        clusters.append(Cluster(
            start_index=i,
            end_index=i,
            layers=[i],
            total_available=ctx.conflicts[i].available_space,
            layer_sizes=[LayerSize(
                layer_index=i,
                original_height=iv.thickness,
                text_height=iv.text_height,
                final_height=iv.thickness,
                top=iv.top,
                bottom=iv.bottom,
            )],
            unchanged=True,
        ))

    clusters.sort(key=lambda c: c.start_index)
    return clusters


# ----------------------------------------------------------------------
# Space distribution
# ----------------------------------------------------------------------

def distribute_space(cluster: Cluster, ctx: AllocationContext) -> Cluster:
    """Fill in ``layer_sizes`` of a merged cluster.

    The cluster's space (original thicknesses plus stretch) is split in
    proportion to the label heights.  Each member gets at least its label
    height plus the fit margin, even if the total then exceeds the
    cluster's space; :attr:`Cluster.floor_excess` reports by how much.
    A cluster whose labels are all empty keeps the original thicknesses.
    """
    if cluster.unchanged:
        return cluster

    members = [ctx.intervals[i] for i in cluster.layers]
    original = np.array([iv.thickness for iv in members], dtype=float)
    text = np.array([iv.text_height for iv in members], dtype=float)

    total_text = text.sum()
    if total_text > 0:
        final_total = original.sum() + cluster.needs_extra_space
        final = np.maximum(
            text + ctx.metrics.fit_margin,
            final_total * text / total_text,
        )
    else:
        final = original

    cluster.layer_sizes = [
        LayerSize(
            layer_index=i,
            original_height=float(original[k]),
            text_height=float(text[k]),
            final_height=float(final[k]),
            top=iv.top,
            bottom=iv.bottom,
        )
        for k, (i, iv) in enumerate(zip(cluster.layers, members))
    ]
    return cluster


def description_clusters(
    intervals: Sequence[Interval],
    metrics: LabelMetrics | None = None,
) -> list[Cluster]:
    """Allocate vertical space to every description of one borehole.

    Args:
        intervals: Ordered interval sequence (see
            :meth:`~pyborelog.stratigraphy.borehole.BoreholeLog.intervals`).
        metrics: Label metrics; defaults to :class:`LabelMetrics`.

    Returns:
        Clusters sorted by ``start_index``, together covering every
        interval exactly once, each with its ``layer_sizes`` filled in.
    """
    if not intervals:
        return []
    ctx = AllocationContext(
        intervals=intervals,
        conflicts=analyze_conflicts(intervals),
        metrics=metrics or LabelMetrics(),
    )
    clusters = build_clusters(ctx)
    for cluster in clusters:
        distribute_space(cluster, ctx)
    return clusters
