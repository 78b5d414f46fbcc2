"""
pyborelog: Geotechnical borehole logs ("soil boring sticks") as DXF
drawings.

Subpackages
-----------
stratigraphy
    Borehole log records: depths, descriptions, SPT, water level.
layout
    Vertical space allocation for layer descriptions that do not fit
    their depth interval.
dxf
    Sheet drawing with ezdxf.
visualization
    Matplotlib previews of allocated logs.
"""

from pyborelog import (
    layout,
    stratigraphy,
    dxf,
    visualization,
)

__version__ = "0.1.0"

__all__ = [
    "layout",
    "stratigraphy",
    "dxf",
    "visualization",
]
