"""Borehole log containers for soil boring sticks.

Provides :class:`SPTSeries`, :class:`BoreholeLog`, and
:class:`BoreholeLogSet` for loading, validating, and querying the
per-borehole records a sheet of boring sticks is drawn from.

One record looks like::

    {
        "hole_id": "SP-01",
        "max_depth": 12.45,
        "z": 731.2,
        "water_level": 3.1,
        "depths": [0, 1.2, 4.0, 12.45],
        "geology": ["Argila siltosa", "Areia fina", "Silte arenoso"],
        "interp": ["Aterro", "Solo residual", "Solo residual"],
        "nspt": {"start_depth": 1, "interval": 1, "values": ["3", "5", ...]}
    }
"""

from __future__ import annotations

import json
import logging
import numbers
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Sequence

import numpy as np

from pyborelog.layout.intervals import Interval, LabelMetrics

logger = logging.getLogger(__name__)


class MalformedBoreholeError(ValueError):
    """Raised when a borehole record cannot be laid out.

    Attributes:
        hole_id: Identifier of the offending borehole.
    """

    def __init__(self, hole_id: str, message: str) -> None:
        super().__init__(f"{hole_id or '<unnamed>'}: {message}")
        self.hole_id = hole_id


@dataclass
class SPTSeries:
    """Standard penetration test readings along a borehole.

    Args:
        start_depth: Depth of the first reading (m).
        interval: Depth step between consecutive readings (m).
        values: Blow counts as printed on the log (e.g. ``"12"`` or
            ``"30/15"``).
    """

    start_depth: float = 1.0
    interval: float = 1.0
    values: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, record: dict[str, Any] | None) -> SPTSeries:
        """Build a series from the ``nspt`` object of a record.

        Fields are stored as given; :meth:`BoreholeLog.validate` checks
        that they are numeric.
        """
        if not record:
            return cls()
        values = record.get("values") or []
        return cls(
            start_depth=record.get("start_depth", 1.0),
            interval=record.get("interval") or 1.0,
            values=[str(v) for v in values] if isinstance(values, list) else values,
        )

    def depths(self) -> np.ndarray:
        """Depth of every reading, shape ``(n_values,)``."""
        return self.start_depth + self.interval * np.arange(len(self.values))

    def readings(self) -> list[tuple[float, str]]:
        """``(depth, value)`` pairs from top to bottom."""
        return list(zip(self.depths().tolist(), self.values))


@dataclass
class BoreholeLog:
    """A single borehole log: depth breakpoints plus layer descriptions.

    Args:
        hole_id: Borehole identifier printed in the header.
        depths: Layer boundary depths (m), top to bottom.  Segment *i*
            spans ``depths[i]`` to ``depths[i + 1]``.
        geology: Geological description of each segment.
        interp: Optional interpretation (e.g. ``"Aterro"``) of each
            segment, printed as a prefix to the description.
        max_depth: Final depth of the borehole.  Defaults to the last
            entry of *depths*.
        z: Ground elevation at the collar.
        water_level: Depth of the water table, or ``None`` when dry.
        nspt: SPT readings.
    """

    hole_id: str
    depths: list[float]
    geology: list[str]
    interp: list[str | None] | None = None
    max_depth: float | None = None
    z: float | None = None
    water_level: float | None = None
    nspt: SPTSeries = field(default_factory=SPTSeries)

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> BoreholeLog:
        """Build a log from one JSON record.

        Construction never fails: values are stored as given and missing
        keys get empty defaults, so that structural problems surface in
        :meth:`validate`, where they are reported against this borehole
        alone.
        """
        nspt = record.get("nspt")
        if nspt is None or isinstance(nspt, dict):
            nspt = SPTSeries.from_dict(nspt)
        return cls(
            hole_id=str(record.get("hole_id") or ""),
            depths=record.get("depths") or [],
            geology=record.get("geology") or [],
            interp=record.get("interp"),
            max_depth=record.get("max_depth"),
            z=record.get("z"),
            water_level=record.get("water_level"),
            nspt=nspt,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def n_segments(self) -> int:
        return max(len(self.depths) - 1, 0)

    @property
    def final_depth(self) -> float:
        """Depth at which the boring stopped (m)."""
        if self.max_depth:
            return float(self.max_depth)
        if not self.depths:
            return 0.0
        return float(self.depths[-1])

    def description(self, i: int) -> str:
        """Resolved label of segment *i*: ``"INTERP - GEOLOGY"``.

        The interpretation prefix is dropped when absent or blank.
        """
        geology = str(self.geology[i] or "").strip().upper()
        interp = ""
        if self.interp is not None and i < len(self.interp):
            interp = str(self.interp[i] or "").strip().upper()
        if interp:
            return f"{interp} - {geology}"
        return geology

    def validate(self) -> None:
        """Check that every segment can be described and drawn.

        Surplus geology or interp entries are ignored with a warning.

        Raises:
            MalformedBoreholeError: If there are fewer than two depths,
                depths are non-numeric or decrease, a label array is
                shorter than the number of segments, a geology entry is
                missing, or an elevation, level or SPT field is not a
                number.
        """
        if not isinstance(self.depths, (list, tuple, np.ndarray)):
            raise self._malformed("depths must be a list.")
        if len(self.depths) < 2:
            raise self._malformed("at least two depths are required.")
        depths = np.array([self._number("depth", d) for d in self.depths])
        if np.any(np.diff(depths) < 0):
            raise self._malformed("depths must be non-decreasing.")

        n = self.n_segments
        self._check_labels("geology", self.geology, n)
        for i in range(n):
            if self.geology[i] is None:
                raise self._malformed(f"missing geology for segment {i}.")
        if self.interp is not None:
            self._check_labels("interp", self.interp, n)

        for name in ("max_depth", "z", "water_level"):
            value = getattr(self, name)
            if value is not None:
                self._number(name, value)

        if not isinstance(self.nspt, SPTSeries):
            raise self._malformed("nspt must be an object.")
        self._number("nspt start_depth", self.nspt.start_depth)
        self._number("nspt interval", self.nspt.interval)
        if not isinstance(self.nspt.values, list):
            raise self._malformed("nspt values must be a list.")

    def _malformed(self, message: str) -> MalformedBoreholeError:
        return MalformedBoreholeError(self.hole_id, message)

    def _number(self, name: str, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise self._malformed(f"{name} must be a number, got {value!r}.")
        return float(value)

    def _check_labels(self, name: str, labels: Any, n: int) -> None:
        if not isinstance(labels, (list, tuple)):
            raise self._malformed(f"{name} must be a list.")
        if len(labels) < n:
            raise self._malformed(f"{len(labels)} {name} entries for {n} segments.")
        if len(labels) > n:
            logger.warning(
                "%s: ignoring %d %s entries beyond the last depth",
                self.hole_id, len(labels) - n, name,
            )

    def intervals(self, metrics: LabelMetrics | None = None) -> list[Interval]:
        """Derive the ordered interval sequence of this log.

        The bottom of the last interval is clamped to :attr:`final_depth`
        when the boring stopped above the last listed depth.

        Raises:
            MalformedBoreholeError: See :meth:`validate`.
        """
        self.validate()
        metrics = metrics or LabelMetrics()
        depths = np.asarray(self.depths, dtype=float)
        n = self.n_segments

        intervals: list[Interval] = []
        for i in range(n):
            top = float(depths[i])
            bottom = float(depths[i + 1])
            if i == n - 1 and self.max_depth:
                bottom = max(top, min(bottom, self.final_depth))
            label = self.description(i)
            intervals.append(Interval(
                index=i,
                top=top,
                bottom=bottom,
                label=label,
                text_height=metrics.estimate_height(label),
            ))
        return intervals


class BoreholeLogSet:
    """Ordered collection of borehole logs drawn on one sheet.

    Args:
        logs: List of :class:`BoreholeLog` instances.
    """

    def __init__(self, logs: Iterable[BoreholeLog]) -> None:
        self.logs = list(logs)

    # ------------------------------------------------------------------
    # I/O
    # ------------------------------------------------------------------

    @classmethod
    def from_records(cls, records: Sequence[dict[str, Any]]) -> BoreholeLogSet:
        """Build a set from already-decoded JSON records."""
        return cls(BoreholeLog.from_dict(rec) for rec in records)

    @classmethod
    def from_json(cls, filename: str | Path) -> BoreholeLogSet:
        """Load boreholes from a JSON file holding a list of records.

        Raises:
            ValueError: If the payload is not a list of objects.
        """
        with open(filename, encoding="utf-8") as fh:
            payload = json.load(fh)
        if not isinstance(payload, list):
            raise ValueError(
                f"{filename}: expected a JSON list of borehole records, "
                f"got {type(payload).__name__}."
            )
        if not all(isinstance(rec, dict) for rec in payload):
            raise ValueError(f"{filename}: every borehole record must be an object.")
        return cls.from_records(payload)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def __iter__(self):
        return iter(self.logs)

    def __len__(self) -> int:
        return len(self.logs)

    def __getitem__(self, idx: int) -> BoreholeLog:
        return self.logs[idx]

    def hole_ids(self) -> list[str]:
        return [log.hole_id for log in self.logs]

    def __repr__(self) -> str:
        return f"BoreholeLogSet(n_boreholes={len(self.logs)})"
