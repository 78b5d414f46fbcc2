"""Depth intervals and label-height estimation.

The drawing has no text-shaping engine, so the height a description
needs is estimated from its length: the label is broken into lines of a
fixed number of characters, each line taking a fixed height.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class LabelMetrics:
    """Constant-width text metrics used to size descriptions.

    Args:
        line_width_chars: Characters that fit on one description line.
        line_height: Height of one description line (m).
        line_margin: Height removed from the last line (m).
        fit_margin: Clearance added around a label when it is given its
            own slot (m).
    """

    line_width_chars: int = 35
    line_height: float = 0.45
    line_margin: float = 0.1
    fit_margin: float = 0.1

    def __post_init__(self) -> None:
        if self.line_width_chars <= 0:
            raise ValueError("line_width_chars must be positive.")
        if self.line_height <= 0:
            raise ValueError("line_height must be positive.")

    def n_lines(self, label: str) -> int:
        return math.ceil(len(label) / self.line_width_chars)

    def estimate_height(self, label: str) -> float:
        """Estimated height of *label*; zero for an empty label."""
        lines = self.n_lines(label)
        if lines == 0:
            return 0.0
        return max(lines * self.line_height - self.line_margin, 0.0)


@dataclass(frozen=True)
class Interval:
    """One depth segment of a borehole and its description.

    Args:
        index: Position in the borehole's interval sequence.
        top: Depth of the top of the segment (m).
        bottom: Depth of the bottom of the segment (m).
        label: Resolved, upper-cased description.
        text_height: Estimated height the label needs (m).
    """

    index: int
    top: float
    bottom: float
    label: str
    text_height: float

    @property
    def thickness(self) -> float:
        return self.bottom - self.top
