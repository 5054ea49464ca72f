"""Tool offset and cutter radius compensation utilities."""
from typing import Optional, Tuple


# (offset, direction) -> compensation word
COMPENSATION_TABLE = {
    ('outside', 'climb'): 'G41',
    ('outside', 'conventional'): 'G42',
    ('inside', 'climb'): 'G42',
    ('inside', 'conventional'): 'G41',
}

COMPENSATED_OPERATIONS = ('contour', 'profile')


def calculate_offset_radius(radius: float, tool_diameter: float, offset: str) -> float:
    """
    Radius of the tool centre path around a round feature.

    Args:
        radius: Feature radius
        tool_diameter: Cutter diameter
        offset: 'outside', 'inside' or 'center'

    Returns:
        Offset radius (may be zero or negative for features smaller than the tool)
    """
    if offset == 'outside':
        return radius + tool_diameter / 2
    if offset == 'inside':
        return radius - tool_diameter / 2
    return radius


def calculate_offset_size(width: float, height: float, tool_diameter: float,
                          offset: str) -> Tuple[float, float]:
    """
    Width and height of the tool centre path around a rectangular feature.

    Each side moves by half the tool diameter, so each dimension changes
    by one full diameter.
    """
    if offset == 'outside':
        return width + tool_diameter, height + tool_diameter
    if offset == 'inside':
        return width - tool_diameter, height - tool_diameter
    return width, height


def get_compensation_code(operation_type: str, offset: str, direction: str) -> Optional[str]:
    """
    G41/G42 word for a compensated contour, or None when not applicable.

    Only contour and profile operations with a side offset are compensated.
    """
    if operation_type not in COMPENSATED_OPERATIONS:
        return None
    return COMPENSATION_TABLE.get((offset, direction))
