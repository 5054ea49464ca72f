"""Per-shape toolpath builders.

Usage:
    from toolpath.builders import BuildContext, build_geometry_toolpath

    segments = build_geometry_toolpath(ctx, RectangleGeometry(100, 50))
"""
from typing import List

from ..models import Geometry, MotionSegment
from .base import BuildContext, closed_pass, full_circle
from .elements import ELEMENT_BUILDERS, build_selected_toolpath
from .profiles import (
    build_circle_toolpath,
    build_custom_toolpath,
    build_polygon_toolpath,
    build_rectangle_toolpath,
)
from .solids import SOLID_BUILDERS


GEOMETRY_BUILDERS = {
    'rectangle': build_rectangle_toolpath,
    'circle': build_circle_toolpath,
    'polygon': build_polygon_toolpath,
    'custom': build_custom_toolpath,
    'selected': lambda ctx, geometry: build_selected_toolpath(ctx, geometry.element),
}


def build_geometry_toolpath(ctx: BuildContext, geometry: Geometry) -> List[MotionSegment]:
    """Run the builder registered for ``geometry.kind``."""
    return GEOMETRY_BUILDERS[geometry.kind](ctx, geometry)


__all__ = [
    'BuildContext',
    'ELEMENT_BUILDERS',
    'GEOMETRY_BUILDERS',
    'SOLID_BUILDERS',
    'build_geometry_toolpath',
    'build_selected_toolpath',
    'closed_pass',
    'full_circle',
]
