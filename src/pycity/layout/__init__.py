"""Layout engine for 3D code city visualization.

This module contains the force-directed layout that positions
repository files and folders as boxes on a ground plane.
"""

from pycity.layout.box import BoundingBox
from pycity.layout.config import LayoutConfig
from pycity.layout.engine import LayoutEngine, LayoutResult, generate_city_layout

__all__ = ["BoundingBox", "LayoutConfig", "LayoutEngine", "LayoutResult", "generate_city_layout"]
