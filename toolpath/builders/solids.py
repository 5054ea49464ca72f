"""Toolpaths for selected 3D solids.

Solids are cut as horizontal slices from their top surface downward; cones
rise from their base instead. Each slice computes its own outline (circle
or rectangle) from the solid's shape, approaches 5mm above the slice,
plunges, and cuts one closed loop.
Slices with no material left after the tool offset are skipped.
"""
import math
from typing import List, Optional

from ..models import ArcCut, Comment, MotionSegment, RapidMove, SelectedElement
from ..utils.arc_utils import calculate_ij_offsets, close_loop, opposite_arc_command, rectangle_vertices
from ..utils.gcode_format import format_coordinate
from ..utils.multipass import iter_z_levels
from ..utils.tool_compensation import calculate_offset_radius, calculate_offset_size
from .base import (
    APPROACH_CLEARANCE,
    BuildContext,
    closed_pass,
    full_circle,
    iter_rising_levels,
    iter_slice_levels,
    level_comment,
)


def _value(value, default):
    """Element dimension, falling back when missing or zero."""
    return value if value else default


def _circle_slice(ctx: BuildContext, element: SelectedElement, radius: float, z: float,
                  label: str) -> List[MotionSegment]:
    center = ctx.point(element.x, element.y)
    segments: List[MotionSegment] = [
        Comment(f"{label} at Z={format_coordinate(z)}, Radius={format_coordinate(radius)}")
    ]
    segments.extend(full_circle(ctx, center, radius, z, approach_z=z + APPROACH_CLEARANCE))
    return segments


def _rectangle_slice(ctx: BuildContext, element: SelectedElement, width: float, height: float,
                     z: float, detail: Optional[str] = None) -> List[MotionSegment]:
    loop = close_loop(rectangle_vertices(width, height), ctx.settings.direction)
    points = [ctx.point(element.x + x, element.y + y) for x, y in loop]
    segments: List[MotionSegment] = [level_comment(z, detail)]
    segments.extend(closed_pass(ctx, points, z, approach_z=z + APPROACH_CLEARANCE))
    return segments


def build_cube(ctx: BuildContext, element: SelectedElement) -> List[MotionSegment]:
    """Contour the width x depth footprint down from the top face."""
    settings = ctx.settings
    width = _value(element.width, 50)
    height = _value(element.height, 50)
    depth = _value(element.depth, 50)
    segments: List[MotionSegment] = [Comment(
        f"Cube: center ({element.x:g}, {element.y:g}, {element.z:g}), "
        f"width {width:g}mm, height {height:g}mm, depth {depth:g}mm"
    )]

    cut_width, cut_depth = calculate_offset_size(width, depth, settings.tool_diameter, settings.offset)
    if cut_width <= 0 or cut_depth <= 0:
        segments.append(Comment('Cannot generate toolpath: cube after offset is too small'))
        return segments

    top = element.z + height / 2
    for z in iter_slice_levels(top, height, ctx):
        segments.extend(_rectangle_slice(ctx, element, cut_width, cut_depth, z))
    return segments


def build_sphere(ctx: BuildContext, element: SelectedElement) -> List[MotionSegment]:
    """Concentric circles whose radius follows the sphere surface."""
    settings = ctx.settings
    radius = _value(element.radius, 25)
    segments: List[MotionSegment] = [Comment(
        f"Sphere: center ({element.x:g}, {element.y:g}, {element.z:g}), radius {radius:g}mm"
    )]

    top = element.z + radius
    # Slices run from the top down to `depth` below the centre plane
    extent = min(radius + settings.depth, 2 * radius)
    for offset_z in iter_z_levels(extent, settings.stepdown):
        z = top + offset_z
        distance = abs(z - element.z)
        if distance >= radius:
            continue
        slice_radius = calculate_offset_radius(
            math.sqrt(radius * radius - distance * distance), settings.tool_diameter, settings.offset
        )
        if slice_radius <= 0:
            continue
        segments.extend(_circle_slice(ctx, element, slice_radius, z, 'Sphere slice'))
    return segments


def build_hemisphere(ctx: BuildContext, element: SelectedElement) -> List[MotionSegment]:
    """Half sphere; ``direction`` up has the dome above the base plane."""
    settings = ctx.settings
    radius = _value(element.radius, 25)
    direction = element.direction or 'up'
    segments: List[MotionSegment] = [Comment(
        f"Hemisphere: center ({element.x:g}, {element.y:g}, {element.z:g}), "
        f"radius {radius:g}mm, direction {direction}"
    )]

    top = element.z + radius if direction == 'up' else element.z
    for z in iter_slice_levels(top, radius, ctx):
        distance = abs(z - element.z)
        slice_radius = calculate_offset_radius(
            math.sqrt(max(0.0, radius * radius - distance * distance)),
            settings.tool_diameter, settings.offset,
        )
        if slice_radius <= 0:
            segments.append(level_comment(z, 'Radius too small, skipping'))
            continue
        segments.extend(_circle_slice(ctx, element, slice_radius, z, 'Hemisphere slice'))
    return segments


def build_cylinder(ctx: BuildContext, element: SelectedElement) -> List[MotionSegment]:
    settings = ctx.settings
    radius = _value(element.radius, 25)
    height = _value(element.height, 50)
    segments: List[MotionSegment] = [Comment(
        f"Cylinder: center ({element.x:g}, {element.y:g}, {element.z:g}), "
        f"radius {radius:g}mm, height {height:g}mm"
    )]

    cut_radius = calculate_offset_radius(radius, settings.tool_diameter, settings.offset)
    if cut_radius <= 0:
        segments.append(Comment('Cannot generate toolpath: radius after offset is too small'))
        return segments

    top = element.z + height / 2
    for z in iter_slice_levels(top, height, ctx):
        segments.extend(_circle_slice(ctx, element, cut_radius, z, 'Cylinder slice'))
    return segments


def build_cone(ctx: BuildContext, element: SelectedElement) -> List[MotionSegment]:
    """
    Circles shrinking linearly from the base radius to the apex.

    Unlike the other solids, slices start at the base and rise by
    ``stepdown`` for ``depth``.
    """
    settings = ctx.settings
    radius = _value(element.radius, 25)
    height = _value(element.height, 50)
    segments: List[MotionSegment] = [Comment(
        f"Cone: center ({element.x:g}, {element.y:g}, {element.z:g}), "
        f"base radius {radius:g}mm, height {height:g}mm"
    )]

    base = element.z - height / 2
    for z in iter_rising_levels(base, height, ctx):
        slice_radius = radius * (1 - (z - base) / height)
        if slice_radius <= settings.tool_diameter / 2:
            continue
        cut_radius = calculate_offset_radius(slice_radius, settings.tool_diameter, settings.offset)
        if cut_radius <= 0:
            continue
        segments.extend(_circle_slice(ctx, element, cut_radius, z, 'Cone slice'))
    return segments


def build_torus(ctx: BuildContext, element: SelectedElement) -> List[MotionSegment]:
    """
    Outer and inner wall of a torus per slice.

    The inner wall is cut in the opposite arc direction to the outer one.
    """
    settings = ctx.settings
    major = _value(element.radius, 30)
    minor = _value(element.tube_radius, 10)
    half_tool = settings.tool_diameter / 2
    segments: List[MotionSegment] = [Comment(
        f"Torus: center ({element.x:g}, {element.y:g}, {element.z:g}), "
        f"major radius {major:g}mm, minor radius {minor:g}mm"
    )]

    center = ctx.point(element.x, element.y)
    top = element.z + minor
    for z in iter_slice_levels(top, 2 * minor, ctx, include_top=True):
        distance = abs(z - element.z)
        if distance > minor:
            continue
        wall = math.sqrt(minor * minor - distance * distance)
        outer = major + wall
        inner = major - wall
        if settings.offset == 'outside':
            outer += half_tool
            inner -= half_tool
        elif settings.offset == 'inside':
            outer -= half_tool
            inner += half_tool
        if inner >= outer:
            continue

        segments.append(Comment(
            f"Torus slice at Z={format_coordinate(z)}, "
            f"Outer={format_coordinate(outer)}, Inner={format_coordinate(inner)}"
        ))
        segments.extend(full_circle(ctx, center, outer, z, approach_z=z + APPROACH_CLEARANCE,
                                    comment='Outer circle'))
        if inner <= 0:
            continue
        start = (center[0] + inner, center[1])
        i, j = calculate_ij_offsets(start, center)
        segments.append(RapidMove(x=start[0], y=start[1], comment='Move to inner circle'))
        segments.append(ArcCut(
            command=opposite_arc_command(ctx.arc_command),
            x=start[0], y=start[1], i=i, j=j, f=settings.feedrate,
            comment='Inner circle',
        ))
    return segments


def build_extrude(ctx: BuildContext, element: SelectedElement) -> List[MotionSegment]:
    """Follow a rectangular or circular base profile down the extrusion."""
    settings = ctx.settings
    height = _value(element.height, 10)
    shape = element.shape_type
    segments: List[MotionSegment] = [Comment(
        f"Extrude: base at ({element.x:g}, {element.y:g}, {element.z:g}), "
        f"shape type: {shape or 'custom'}, height: {height:g}mm"
    )]
    top = element.z + height

    if shape == 'rectangle':
        width, length = calculate_offset_size(
            _value(element.width, 50), _value(element.length, 50),
            settings.tool_diameter, settings.offset,
        )
        if width <= 0 or length <= 0:
            segments.append(Comment('Cannot generate toolpath: profile after offset is too small'))
            return segments
        for z in iter_slice_levels(top, height, ctx):
            segments.extend(_rectangle_slice(ctx, element, width, length, z))
    elif shape == 'circle':
        radius = calculate_offset_radius(_value(element.radius, 25), settings.tool_diameter, settings.offset)
        if radius <= 0:
            segments.append(Comment('Cannot generate toolpath: radius after offset is too small'))
            return segments
        for z in iter_slice_levels(top, height, ctx):
            segments.extend(_circle_slice(ctx, element, radius, z, 'Extrusion slice'))
    else:
        segments.append(Comment('Complex extrusion path not supported - convert to basic shapes first'))
    return segments


def build_pyramid(ctx: BuildContext, element: SelectedElement) -> List[MotionSegment]:
    """Rectangular slices that grow linearly from apex to base."""
    settings = ctx.settings
    base_width = element.base_width or _value(element.width, 50)
    base_depth = element.base_depth or _value(element.depth, 50)
    height = _value(element.height, 50)
    segments: List[MotionSegment] = [Comment(
        f"Pyramid: center ({element.x:g}, {element.y:g}, {element.z:g}), "
        f"base width {base_width:g}mm, base depth {base_depth:g}mm, height {height:g}mm"
    )]

    top = element.z + height / 2
    bottom = element.z - height / 2
    for z in iter_slice_levels(top, height, ctx):
        ratio = 1 - (z - bottom) / height
        width, depth = calculate_offset_size(
            base_width * ratio, base_depth * ratio, settings.tool_diameter, settings.offset
        )
        if width <= 0 or depth <= 0:
            segments.append(level_comment(z, 'Offset dimensions too small, skipping'))
            continue
        detail = f"Slice width: {format_coordinate(width)}, Slice depth: {format_coordinate(depth)}"
        segments.extend(_rectangle_slice(ctx, element, width, depth, z, detail))
    return segments


SOLID_BUILDERS = {
    'cube': build_cube,
    'sphere': build_sphere,
    'hemisphere': build_hemisphere,
    'cylinder': build_cylinder,
    'cone': build_cone,
    'torus': build_torus,
    'extrude': build_extrude,
    'pyramid': build_pyramid,
}
