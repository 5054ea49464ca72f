"""Origin transform from centred geometry to machine coordinates.

Builders lay shapes out around (0, 0) and pass every emitted point through
:func:`apply_origin_offset`.
"""
from typing import Optional, Tuple

from .models import (
    CircleGeometry,
    Geometry,
    MachiningSettings,
    Point3,
    PolygonGeometry,
    RectangleGeometry,
    SelectedGeometry,
    Workpiece,
)


def geometry_half_extents(geometry: Optional[Geometry]) -> Optional[Tuple[float, float]]:
    """
    Half width and half height of the active geometry.

    Selected rectangles and circles use their own dimensions. Returns None
    for anything without a known extent.
    """
    if isinstance(geometry, RectangleGeometry):
        return geometry.width / 2, geometry.height / 2
    if isinstance(geometry, (CircleGeometry, PolygonGeometry)):
        return geometry.radius, geometry.radius
    if isinstance(geometry, SelectedGeometry) and geometry.element is not None:
        element = geometry.element
        if element.type == 'rectangle':
            return (element.width or 0) / 2, (element.height or 0) / 2
        if element.type == 'circle':
            return element.radius or 0, element.radius or 0
    return None


def apply_origin_offset(
    x: float,
    y: float,
    z: float = 0,
    origin_type: str = 'workpiece-center',
    geometry: Optional[Geometry] = None,
    workpiece: Optional[Workpiece] = None,
    settings: Optional[MachiningSettings] = None
) -> Point3:
    """
    Translate a centred point according to the origin policy.

    Args:
        x, y, z: Point relative to the geometry centre
        origin_type: One of ORIGIN_TYPES; unknown values are the identity
        geometry: Active geometry (corner policies)
        workpiece: External stock (machine-zero and workpiece-corner2)
        settings: Source of the custom origin

    Returns:
        Point3 in machine coordinates
    """
    if origin_type == 'workpiece-corner':
        extents = geometry_half_extents(geometry)
        if extents is None:
            return Point3(x, y, z)
        return Point3(x + extents[0], y + extents[1], z)

    if origin_type == 'workpiece-corner2':
        # Z is pinned to mid-stock regardless of the incoming value
        if workpiece is not None:
            z = workpiece.depth / 2
        extents = geometry_half_extents(geometry)
        if extents is None:
            return Point3(x, y, z)
        return Point3(x + extents[0], y + extents[1], z)

    if origin_type == 'machine-zero':
        if workpiece is None:
            return Point3(x, y, z)
        return Point3(
            x + (workpiece.width or 0),
            y + (workpiece.depth or 0),
            z + (workpiece.height or 0),
        )

    if origin_type == 'custom' and settings is not None:
        return Point3(x + settings.origin_x, y + settings.origin_y, z + settings.origin_z)

    return Point3(x, y, z)


class OriginTransform:
    """apply_origin_offset bound to one generation call's context."""

    def __init__(self, settings: MachiningSettings, geometry: Optional[Geometry] = None,
                 workpiece: Optional[Workpiece] = None):
        self.settings = settings
        self.geometry = geometry
        self.workpiece = workpiece

    def __call__(self, x: float, y: float, z: float = 0) -> Point3:
        return apply_origin_offset(
            x, y, z,
            origin_type=self.settings.origin_type,
            geometry=self.geometry,
            workpiece=self.workpiece,
            settings=self.settings,
        )

    def xy(self, x: float, y: float) -> Tuple[float, float]:
        point = self(x, y)
        return point.x, point.y
