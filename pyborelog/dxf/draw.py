"""Drawing of a single boring stick.

Functions
---------
draw_borehole
    Draw every element of one allocated borehole.
draw_header
    Hole identifier and collar elevation.
draw_scale
    Red depth scale with alternating filled metres.
draw_descriptions
    Depth lines, depth labels, and layer descriptions.
draw_spt
    SPT blow counts next to the scale.
draw_water_level
    Water-table marker and note.
draw_final_depth
    Final-depth note below the descriptions.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from ezdxf.enums import MTextEntityAlignment, TextEntityAlignment
from ezdxf.layouts import BaseLayout

from pyborelog.dxf.style import (
    DEPTH_LINES_LAYER,
    DESCRIPTION_LAYER,
    FINAL_DEPTH_LAYER,
    RED,
    SCALE_BLOCK,
    TEXT_STYLE,
    TITLES_LAYER,
    WATER_LEVEL_BLOCK,
    WATER_TEXT_LAYER,
    SheetStyle,
    format_decimal,
)
from pyborelog.layout.batch import BoreholeAllocation
from pyborelog.layout.placement import LabelPlacement, label_placements, track_end

logger = logging.getLogger(__name__)

Point = tuple[float, float]


def _text(
    msp: BaseLayout,
    text: str,
    at: Point,
    height: float,
    layer: str,
    align: TextEntityAlignment,
) -> Any:
    entity = msp.add_text(
        text,
        height=height,
        dxfattribs={"layer": layer, "style": TEXT_STYLE},
    )
    entity.set_placement(at, align=align)
    return entity


def draw_header(msp: BaseLayout, log: Any, origin: Point, style: SheetStyle) -> None:
    x, y = origin
    attribs = {"layer": TITLES_LAYER}
    msp.add_line((x + 0.1, y), (x + 0.1, y + 2.45), dxfattribs=attribs)
    msp.add_line((x + 0.1, y + 2.45), (x - 4.95, y + 2.45), dxfattribs=attribs)

    _text(msp, log.hole_id.upper(), (x - 0.18, y + 2.67), style.title_height,
          TITLES_LAYER, TextEntityAlignment.BOTTOM_RIGHT)
    elevation = f"COTA={format_decimal(log.z)}" if log.z else "COTA=0"
    _text(msp, elevation, (x - 0.18, y + 1.6), style.elevation_height,
          TITLES_LAYER, TextEntityAlignment.BOTTOM_RIGHT)


def draw_scale(
    msp: BaseLayout, depth: float, origin: Point, style: SheetStyle
) -> None:
    """Draw the depth scale down to *depth*.

    One :data:`SCALE_BLOCK` fills the first metre of every
    ``scale_step`` metres.  A final fractional metre that falls on a
    filled step is hatched separately.
    """
    x, y = origin
    w = style.scale_width
    red = {"color": RED}
    msp.add_line((x, y), (x, y - depth), dxfattribs=red)
    msp.add_line((x + w, y), (x + w, y - depth), dxfattribs=red)

    i = 0.0
    while i < depth - 1:
        msp.add_blockref(SCALE_BLOCK, (x, y - i), dxfattribs=red)
        i += style.scale_step

    floor = math.floor(depth)
    if floor != depth and floor % 2 == 0:
        hatch = msp.add_hatch(color=RED)
        hatch.paths.add_polyline_path(
            [(x, y - floor), (x + w, y - floor), (x + w, y - depth), (x, y - depth)],
            is_closed=True,
        )
    msp.add_line((x, y - depth), (x + w, y - depth), dxfattribs=red)


def draw_depth_line(
    msp: BaseLayout, placement: LabelPlacement, origin: Point, style: SheetStyle
) -> None:
    """Dashed line at the true depth, jogging to the relocated boundary."""
    x, y = origin
    depth = placement.original_depth
    if placement.bent:
        corrected = placement.corrected_depth
        points = [
            (x, y - depth),
            (x - style.bend_start, y - depth),
            (x - style.bend_end, y - corrected),
            (x - style.depth_line_length, y - corrected),
        ]
    else:
        points = [(x, y - depth), (x - style.depth_line_length, y - depth)]
    msp.add_lwpolyline(points, dxfattribs={"layer": DEPTH_LINES_LAYER})

    _text(msp, format_decimal(depth), (x - 0.15, y - depth - 0.07),
          style.depth_text_height, DEPTH_LINES_LAYER,
          TextEntityAlignment.BOTTOM_RIGHT)


def draw_description(
    msp: BaseLayout,
    placement: LabelPlacement,
    text: str,
    origin: Point,
    style: SheetStyle,
) -> Any:
    """Description MText, vertically centred on its slot."""
    x, y = origin
    insert = (
        x - style.description_x,
        y - placement.center + placement.size.text_height / 2.0,
    )
    mtext = msp.add_mtext(text, dxfattribs={
        "layer": DESCRIPTION_LAYER,
        "style": TEXT_STYLE,
        "char_height": style.description_height,
        "width": style.description_width,
    })
    mtext.set_location(insert, attachment_point=MTextEntityAlignment.TOP_RIGHT)
    return mtext


def draw_descriptions(
    msp: BaseLayout, allocation: BoreholeAllocation, origin: Point, style: SheetStyle
) -> None:
    log = allocation.log
    for placement in label_placements(allocation.clusters):
        text = log.description(placement.layer_index)
        if not text:
            logger.warning(
                "%s: empty description for layer %d, skipped",
                log.hole_id, placement.layer_index,
            )
            continue
        draw_depth_line(msp, placement, origin, style)
        draw_description(msp, placement, text, origin, style)


def draw_spt(msp: BaseLayout, log: Any, origin: Point, style: SheetStyle) -> None:
    x, y = origin
    for depth, value in log.nspt.readings():
        _text(msp, value, (x + 0.57, y - depth - 0.12), style.spt_text_height,
              DEPTH_LINES_LAYER, TextEntityAlignment.TOP_LEFT)


def draw_water_level(
    msp: BaseLayout, log: Any, origin: Point, style: SheetStyle
) -> None:
    """Water-table marker, or a dry-hole note at the final depth."""
    x, y = origin
    if log.water_level is not None:
        level = float(log.water_level)
        note = f"NA={format_decimal(level)}"
        note_x = x + 2.86
    else:
        level = log.final_depth
        note = "NA SECO"
        note_x = x + 2.76
    msp.add_blockref(WATER_LEVEL_BLOCK, (x + 2.9136, y - level))
    _text(msp, note, (note_x, y - level + 0.48), style.water_text_height,
          WATER_TEXT_LAYER, TextEntityAlignment.BOTTOM_LEFT)


def draw_final_depth(
    msp: BaseLayout, log: Any, end: float, origin: Point, style: SheetStyle
) -> None:
    """``PROFUNDIDADE FINAL`` note just below offset *end*."""
    x, y = origin
    note = f"PROFUNDIDADE FINAL = {format_decimal(log.final_depth)} m."
    _text(msp, note, (x - 5.72, y - 0.87 - end), style.final_depth_height,
          FINAL_DEPTH_LAYER, TextEntityAlignment.TOP_LEFT)


def draw_borehole(
    msp: BaseLayout, allocation: BoreholeAllocation, style: SheetStyle
) -> None:
    """Draw one allocated borehole at its slot on the sheet."""
    log = allocation.log
    origin = style.borehole_origin(allocation.index)

    draw_header(msp, log, origin, style)
    draw_scale(msp, log.final_depth, origin, style)
    draw_descriptions(msp, allocation, origin, style)
    draw_spt(msp, log, origin, style)
    draw_water_level(msp, log, origin, style)
    draw_final_depth(msp, log, track_end(allocation.clusters), origin, style)
