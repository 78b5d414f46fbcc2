"""Stratigraphy: borehole log records.

Workflow::

    logs = BoreholeLogSet.from_json("sp10.json")

    for log in logs:
        log.validate()
        for interval in log.intervals():
            print(interval.top, interval.bottom, interval.label)
"""

from pyborelog.stratigraphy.borehole import (
    BoreholeLog,
    BoreholeLogSet,
    MalformedBoreholeError,
    SPTSeries,
)

__all__ = [
    "SPTSeries",
    "BoreholeLog",
    "BoreholeLogSet",
    "MalformedBoreholeError",
]
