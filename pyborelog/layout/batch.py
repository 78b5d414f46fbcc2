"""Allocation of a whole set of boreholes with per-borehole isolation.

Each borehole is laid out independently.  A borehole whose record is
structurally broken is logged and reported by identifier; the others
are unaffected.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Iterable

from pyborelog.layout.clusters import Cluster, description_clusters
from pyborelog.layout.intervals import LabelMetrics

logger = logging.getLogger(__name__)

#: Errors that mark a single borehole record as unusable.
RECORD_ERRORS = (ValueError, KeyError, TypeError, IndexError)


@dataclass
class BoreholeAllocation:
    """A borehole log together with its description clusters.

    Attributes:
        log: The :class:`~pyborelog.stratigraphy.borehole.BoreholeLog`.
        index: Position of the log in the input batch.
        clusters: Allocated clusters, top to bottom.
    """

    log: Any
    index: int
    clusters: list[Cluster]

    @property
    def stretch(self) -> float:
        """Total track stretch over all clusters (m)."""
        return float(sum(c.needs_extra_space for c in self.clusters))


@dataclass
class BatchAllocation:
    """Outcome of :func:`allocate_batch`.

    Attributes:
        allocations: Successful allocations in input order.
        failures: Identifiers of the boreholes that could not be laid
            out, keyed by their position in the batch.
    """

    allocations: list[BoreholeAllocation] = field(default_factory=list)
    failures: dict[int, str] = field(default_factory=dict)

    @property
    def failed(self) -> list[str]:
        """Failed identifiers in input order."""
        return [self.failures[i] for i in sorted(self.failures)]

    @property
    def total(self) -> int:
        return len(self.allocations) + len(self.failures)

    def __iter__(self):
        return iter(self.allocations)

    def __len__(self) -> int:
        return len(self.allocations)


def allocate(
    log: Any,
    index: int = 0,
    metrics: LabelMetrics | None = None,
) -> BoreholeAllocation:
    """Allocate description space for a single borehole log.

    Raises:
        MalformedBoreholeError: If the log cannot be laid out.
    """
    intervals = log.intervals(metrics)
    return BoreholeAllocation(
        log=log,
        index=index,
        clusters=description_clusters(intervals, metrics),
    )


def _try_allocate(
    log: Any, index: int, metrics: LabelMetrics | None
) -> BoreholeAllocation | None:
    try:
        return allocate(log, index, metrics)
    except RECORD_ERRORS:
        logger.exception(
            "Borehole %s (index %d) could not be laid out",
            getattr(log, "hole_id", "?"), index,
        )
        return None


def allocate_batch(
    logs: Iterable[Any],
    metrics: LabelMetrics | None = None,
    max_workers: int | None = None,
) -> BatchAllocation:
    """Allocate every log of a batch.

    Args:
        logs: Borehole logs, in drawing order.
        metrics: Label metrics shared by all boreholes.
        max_workers: If greater than 1, boreholes are allocated on a
            thread pool of that size.  Output order never changes.

    Returns:
        A :class:`BatchAllocation` with the successful allocations and
        the identifiers of the failed boreholes.
    """
    logs = list(logs)
    indices = range(len(logs))

    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            outcomes = list(pool.map(
                _try_allocate, logs, indices, [metrics] * len(logs)
            ))
    else:
        outcomes = [_try_allocate(log, i, metrics) for i, log in zip(indices, logs)]

    result = BatchAllocation()
    for i, (log, outcome) in enumerate(zip(logs, outcomes)):
        if outcome is None:
            result.failures[i] = getattr(log, "hole_id", "")
        else:
            result.allocations.append(outcome)
    return result
