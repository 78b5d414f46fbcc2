"""Conflict analysis: does each description fit its depth interval?"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from pyborelog.layout.intervals import Interval


@dataclass(frozen=True)
class ConflictRecord:
    """Fit of one label inside its interval.

    Attributes:
        index: Interval index.
        has_overflow: True if the label is taller than the interval.
        overflow: Height missing for the label to fit (m), never negative.
        available_space: Interval height minus label height (m).
            Negative when the interval itself overflows.
    """

    index: int
    has_overflow: bool
    overflow: float
    available_space: float


def analyze_conflicts(intervals: Sequence[Interval]) -> list[ConflictRecord]:
    """Compare every label height with its interval thickness.

    Args:
        intervals: Ordered interval sequence of one borehole.

    Returns:
        One :class:`ConflictRecord` per interval, in input order.
    """
    thickness = np.array([iv.thickness for iv in intervals], dtype=float)
    text_height = np.array([iv.text_height for iv in intervals], dtype=float)
    available = thickness - text_height
    overflow = np.maximum(-available, 0.0)

    return [
        ConflictRecord(
            index=i,
            has_overflow=bool(text_height[i] > thickness[i]),
            overflow=float(overflow[i]),
            available_space=float(available[i]),
        )
        for i in range(len(intervals))
    ]
