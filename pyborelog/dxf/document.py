"""DXF document setup: layers, line types, text style, and blocks."""

from __future__ import annotations

import ezdxf
from ezdxf import units
from ezdxf.document import Drawing

from pyborelog.dxf.style import (
    DASHED,
    DEPTH_LINES_LAYER,
    DESCRIPTION_LAYER,
    FINAL_DEPTH_LAYER,
    RED,
    SCALE_BLOCK,
    SCALE_LAYER,
    TEXT_STYLE,
    TITLES_LAYER,
    WATER_LEVEL_BLOCK,
    WATER_SHAPE_LAYER,
    WATER_TEXT_LAYER,
    YELLOW,
    SheetStyle,
)

_LAYERS = [
    (SCALE_LAYER, RED, "Continuous"),
    (TITLES_LAYER, YELLOW, "Continuous"),
    (FINAL_DEPTH_LAYER, YELLOW, "Continuous"),
    (WATER_SHAPE_LAYER, RED, "Continuous"),
    (WATER_TEXT_LAYER, YELLOW, "Continuous"),
    (DEPTH_LINES_LAYER, YELLOW, DASHED),
    (DESCRIPTION_LAYER, YELLOW, "Continuous"),
]


def create_document(style: SheetStyle | None = None) -> Drawing:
    """Create an empty sheet with every shared table entry defined.

    Args:
        style: Sheet style; defaults to :class:`SheetStyle`.

    Returns:
        A new R2010 :class:`ezdxf.document.Drawing` in metres.
    """
    style = style or SheetStyle()
    doc = ezdxf.new("R2010")
    doc.units = units.M

    # Pattern: total length, then dash / gap lengths.
    doc.linetypes.add(DASHED, pattern=[0.375, 0.25, -0.125], description="__ __ __")
    for name, color, linetype in _LAYERS:
        doc.layers.add(name, color=color, linetype=linetype)
    doc.styles.add(TEXT_STYLE, font=style.font)

    _add_scale_block(doc, style)
    _add_water_level_block(doc)
    return doc


def _add_scale_block(doc: Drawing, style: SheetStyle) -> None:
    """Filled one-metre tick of the depth scale, hanging below the insert."""
    w = style.scale_width
    block = doc.blocks.new(name=SCALE_BLOCK)
    attribs = {"layer": SCALE_LAYER}
    hatch = block.add_hatch(color=RED, dxfattribs=attribs)
    hatch.paths.add_polyline_path([(0, 0), (w, 0), (w, -1), (0, -1)], is_closed=True)
    block.add_line((0, -1), (w, -1), dxfattribs=attribs)


def _add_water_level_block(doc: Drawing) -> None:
    """Inverted triangle pointing at the water level, with a leader."""
    block = doc.blocks.new(name=WATER_LEVEL_BLOCK)
    attribs = {"layer": WATER_SHAPE_LAYER}
    hatch = block.add_hatch(color=RED, dxfattribs=attribs)
    hatch.paths.add_polyline_path(
        [(0, 0), (-0.2754, 0.4406), (0.2754, 0.4406)], is_closed=True
    )
    block.add_line((-0.2754, 0.4406), (1.574, 0.4406), dxfattribs=attribs)
