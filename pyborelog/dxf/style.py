"""Drawing constants of a boring-stick sheet.

All lengths are in drawing units (metres, one unit per metre of depth).
Horizontal offsets are measured from the borehole origin, which sits on
the left rail of the depth scale at ground level.
"""

from __future__ import annotations

from dataclasses import dataclass

# ACI colour numbers
RED = 1
YELLOW = 2

SCALE_LAYER = "scaleLayer"
TITLES_LAYER = "titlesLayer"
FINAL_DEPTH_LAYER = "finalDepthLayer"
WATER_SHAPE_LAYER = "waterLevelShapeLayer"
WATER_TEXT_LAYER = "waterLevelTextLayer"
DEPTH_LINES_LAYER = "depthsLineLayer"
DESCRIPTION_LAYER = "descriptionTextLayer"

DASHED = "DASHED"
TEXT_STYLE = "arialText"
SCALE_BLOCK = "scaleBlock"
WATER_LEVEL_BLOCK = "waterLevelBlock"


@dataclass(frozen=True)
class SheetStyle:
    """Geometry and typography of the sheet.

    Args:
        origin: Ground-level origin of the first borehole.
        gap: Horizontal distance between consecutive boreholes.
        scale_width: Width of the red depth scale.
        scale_step: Depth covered by one scale block (every other metre
            is filled).
        depth_line_length: Length of a depth line to the left of the
            scale.
        bend_start: Where a bent depth line leaves the true depth.
        bend_end: Where a bent depth line reaches the relocated depth.
        description_x: Right edge of the description column.
        description_width: Width of the description column.
        font: Font file of the text style.
    """

    origin: tuple[float, float] = (0.0, 100.0)
    gap: float = 15.0
    scale_width: float = 0.2
    scale_step: float = 2.0
    depth_line_length: float = 2.72
    bend_start: float = 1.35
    bend_end: float = 1.45
    description_x: float = 1.55
    description_width: float = 8.0
    font: str = "arial.ttf"

    title_height: float = 0.65
    elevation_height: float = 0.45
    depth_text_height: float = 0.35
    spt_text_height: float = 0.35
    description_height: float = 0.25
    water_text_height: float = 0.25
    final_depth_height: float = 0.35

    def borehole_origin(self, index: int) -> tuple[float, float]:
        """Origin of the *index*-th borehole on the sheet."""
        x0, y0 = self.origin
        return (x0 + self.gap * index, y0)


def format_decimal(value: float, decimals: int = 2) -> str:
    """Format *value* with a decimal comma, e.g. ``3.5 -> "3,50"``."""
    return f"{value:.{decimals}f}".replace(".", ",")
