"""Parameter validation utilities.

Each validator returns plain message lists. Errors block generation in the
web layer; warnings are reported alongside the generated program.
"""
from typing import List, Tuple

from ..models import (
    CircleGeometry,
    Geometry,
    MACHINE_OPERATIONS,
    MachiningSettings,
    PolygonGeometry,
    RectangleGeometry,
)


def validate_stepdown(
    pass_depth: float,
    tool_diameter: float,
    max_stepdown_factor: float = 0.5
) -> Tuple[List[str], List[str]]:
    """
    Validate stepdown (pass depth) against tool diameter.

    - ERROR if pass_depth > tool_diameter
    - WARNING if pass_depth > tool_diameter * max_stepdown_factor

    Args:
        pass_depth: Depth per pass (mm)
        tool_diameter: End mill diameter (mm)
        max_stepdown_factor: Maximum safe ratio of pass_depth to tool_diameter

    Returns:
        Tuple of (errors, warnings) lists
    """
    errors = []
    warnings = []

    if pass_depth <= 0 or tool_diameter <= 0:
        return errors, warnings

    ratio = pass_depth / tool_diameter

    if ratio > 1.0:
        errors.append(
            f"Stepdown ({pass_depth:.3f}mm) exceeds tool diameter ({tool_diameter:.3f}mm). "
            f"Reduce the stepdown."
        )
    elif ratio > max_stepdown_factor:
        warnings.append(
            f"Stepdown ({pass_depth:.3f}mm) is {ratio * 100:.0f}% of tool diameter "
            f"({tool_diameter:.3f}mm). Recommended maximum is {max_stepdown_factor * 100:.0f}%."
        )

    return errors, warnings


def validate_feed_rates(feed_rate: float, plunge_rate: float) -> List[str]:
    """
    Validate feed rate and plunge rate relationship.

    Plunge rate typically should not exceed feed rate.

    Returns:
        List of warning messages
    """
    warnings = []

    if plunge_rate > feed_rate:
        warnings.append(
            f"Plunge rate ({plunge_rate} mm/min) exceeds feed rate ({feed_rate} mm/min). "
            f"Verify this is intentional for your material and tool."
        )

    return warnings


def validate_geometry(geometry: Geometry) -> List[str]:
    """Check primitive dimensions are positive."""
    errors = []
    if isinstance(geometry, RectangleGeometry):
        if geometry.width <= 0 or geometry.height <= 0:
            errors.append("Rectangle width and height must be positive")
    elif isinstance(geometry, CircleGeometry):
        if geometry.radius <= 0:
            errors.append("Circle radius must be positive")
    elif isinstance(geometry, PolygonGeometry):
        if geometry.sides < 3:
            errors.append("Polygon needs at least 3 sides")
        if geometry.radius <= 0:
            errors.append("Polygon radius must be positive")
    return errors


def validate_settings(settings: MachiningSettings) -> Tuple[List[str], List[str]]:
    """
    Validate a settings record before generation.

    Returns:
        Tuple of (errors, warnings) lists
    """
    errors = []
    warnings = []

    operations = MACHINE_OPERATIONS.get(settings.machine_type)
    if operations is None:
        errors.append(f"Unknown machine type: {settings.machine_type}")
    elif settings.operation_type not in operations:
        errors.append(
            f"Operation '{settings.operation_type}' is not available for {settings.machine_type}"
        )

    if settings.depth <= 0:
        errors.append("Depth must be positive")
    if settings.feedrate <= 0:
        errors.append("Feed rate must be positive")

    if settings.machine_type == 'printer':
        if settings.printer.layer_height <= 0:
            errors.append("Layer height must be positive")
        return errors, warnings

    if settings.tool_diameter <= 0:
        errors.append("Tool diameter must be positive")
    if settings.stepdown <= 0:
        errors.append("Stepdown must be positive")
    if not 0 < settings.stepover <= 100:
        errors.append("Stepover must be between 0 and 100 percent")

    if settings.machine_type == 'mill':
        stepdown_errors, stepdown_warnings = validate_stepdown(
            settings.stepdown, settings.tool_diameter
        )
        errors.extend(stepdown_errors)
        warnings.extend(stepdown_warnings)
        warnings.extend(validate_feed_rates(settings.feedrate, settings.plungerate))

    return errors, warnings
