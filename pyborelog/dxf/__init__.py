"""DXF output of boring-stick sheets (built on ezdxf).

Example::

    from pyborelog.dxf import generate_dxf
    from pyborelog.stratigraphy import BoreholeLogSet

    logs = BoreholeLogSet.from_json("sp10.json")
    doc, report = generate_dxf(logs, "palitos.dxf")
    print(report.succeeded, report.failed)
"""

from pyborelog.dxf.style import SheetStyle, format_decimal
from pyborelog.dxf.document import create_document
from pyborelog.dxf.draw import draw_borehole
from pyborelog.dxf.sheet import RenderReport, generate_dxf, save

__all__ = [
    "SheetStyle",
    "format_decimal",
    "create_document",
    "draw_borehole",
    "RenderReport",
    "generate_dxf",
    "save",
]
