"""Sheet generation: every borehole of a batch on one DXF drawing."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, Iterable

from ezdxf.document import Drawing
from ezdxf.layouts import BaseLayout

from pyborelog.dxf.document import create_document
from pyborelog.dxf.draw import draw_borehole
from pyborelog.dxf.style import SheetStyle
from pyborelog.layout.batch import RECORD_ERRORS, allocate_batch
from pyborelog.layout.intervals import LabelMetrics

logger = logging.getLogger(__name__)


@dataclass
class RenderReport:
    """Summary of a sheet generation run.

    Attributes:
        total: Number of boreholes submitted.
        failed: Identifiers of the boreholes left off the sheet.
    """

    total: int = 0
    failed: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return self.total - len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed


def generate_dxf(
    logs: Iterable[Any],
    target: str | Path | IO[str] | None = None,
    style: SheetStyle | None = None,
    metrics: LabelMetrics | None = None,
    max_workers: int | None = None,
) -> tuple[Drawing, RenderReport]:
    """Draw a batch of boreholes side by side.

    Boreholes are placed left to right in input order, ``style.gap``
    apart.  A borehole that cannot be laid out or drawn is skipped and
    reported in input order; its slot on the sheet stays empty and any
    entity it had already drawn is removed.

    Args:
        logs: Borehole logs to draw.
        target: Output file path or text stream.  Nothing is written if
            ``None``.
        style: Sheet style; defaults to :class:`SheetStyle`.
        metrics: Label metrics for the description layout.
        max_workers: Thread count for the layout step.

    Returns:
        ``(doc, report)``.
    """
    style = style or SheetStyle()
    logs = list(logs)
    doc = create_document(style)
    msp = doc.modelspace()

    batch = allocate_batch(logs, metrics=metrics, max_workers=max_workers)
    failures = dict(batch.failures)

    for allocation in batch:
        n_before = len(msp)
        try:
            draw_borehole(msp, allocation, style)
        except RECORD_ERRORS:
            logger.exception(
                "Borehole %s (index %d) could not be drawn",
                allocation.log.hole_id, allocation.index,
            )
            _discard_since(msp, n_before)
            failures[allocation.index] = allocation.log.hole_id

    report = RenderReport(
        total=len(logs), failed=[failures[i] for i in sorted(failures)],
    )

    logger.info(
        "Drew %d of %d boreholes", report.succeeded, report.total,
    )
    if target is not None:
        save(doc, target)
    return doc, report


def _discard_since(msp: BaseLayout, n_before: int) -> None:
    """Delete the entities added to *msp* after the first *n_before*."""
    for entity in list(msp)[n_before:]:
        msp.delete_entity(entity)


def save(doc: Drawing, target: str | Path | IO[str]) -> None:
    """Write *doc* to a file path or an open text stream."""
    if isinstance(target, (str, Path)):
        doc.saveas(target)
    else:
        doc.write(target)
