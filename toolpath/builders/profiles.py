"""Toolpaths for the primitive 2D profiles: rectangle, circle, polygon.

Contour and profile operations cut one closed boundary per Z level.
Pocket operations start at the centre and grow outward ring by ring
without retracting.
"""
from typing import List

from ..models import (
    ArcCut,
    CircleGeometry,
    Comment,
    CustomGeometry,
    LinearCut,
    MotionSegment,
    PolygonGeometry,
    RapidMove,
    RawLine,
    RectangleGeometry,
)
from ..utils.arc_utils import calculate_ij_offsets, close_loop, polygon_vertices, rectangle_vertices
from ..utils.multipass import calculate_step_count, iter_z_levels
from ..utils.tool_compensation import calculate_offset_radius, calculate_offset_size
from .base import BuildContext, closed_pass, level_comment


def _stepover(ctx: BuildContext) -> float:
    return ctx.settings.tool_diameter * ctx.settings.stepover / 100


def _pocket_entry(ctx: BuildContext, z: float, label: str) -> List[MotionSegment]:
    step = _stepover(ctx)
    center = ctx.point(0, 0)
    return [
        Comment(f"{label} - Stepover: {ctx.settings.stepover:g}% ({step:.2f}mm)"),
        RapidMove(x=center[0], y=center[1], comment='Move to center'),
        LinearCut(z=z, f=ctx.settings.plungerate, comment='Plunge to cutting depth'),
    ]


def build_rectangle_toolpath(ctx: BuildContext, geometry: RectangleGeometry) -> List[MotionSegment]:
    """Contour or pocket a centred rectangle."""
    settings = ctx.settings
    segments: List[MotionSegment] = [Comment('Rectangle toolpath')]

    width, height = calculate_offset_size(
        geometry.width, geometry.height, settings.tool_diameter, settings.offset
    )
    if width <= 0 or height <= 0:
        segments.append(Comment('Cannot generate toolpath: rectangle after offset is too small'))
        return segments

    pocket = settings.operation_type == 'pocket'
    if pocket and _stepover(ctx) <= 0:
        segments.append(Comment('Cannot generate pocket: stepover must be positive'))
        return segments

    for z in iter_z_levels(settings.depth, settings.stepdown):
        segments.append(level_comment(z))
        if pocket:
            segments.extend(_rectangle_pocket(ctx, width, height, z))
        else:
            loop = close_loop(rectangle_vertices(width, height), settings.direction)
            segments.extend(closed_pass(ctx, [ctx.point(x, y) for x, y in loop], z))
    return segments


def _rectangle_pocket(ctx: BuildContext, width: float, height: float, z: float) -> List[MotionSegment]:
    step = _stepover(ctx)
    segments = _pocket_entry(ctx, z, 'Pocket operation')
    steps = max(calculate_step_count(width, step), calculate_step_count(height, step))

    for current_step in range(1, steps + 1):
        half_x = min(width / 2, current_step * step / 2)
        half_y = min(height / 2, current_step * step / 2)
        corners = [(half_x, -half_y), (half_x, half_y), (-half_x, half_y), (-half_x, -half_y)]
        loop = close_loop(corners, ctx.settings.direction)
        for index, (x, y) in enumerate(loop, start=1):
            px, py = ctx.point(x, y)
            segments.append(LinearCut(
                x=px, y=py, f=ctx.settings.feedrate,
                comment=f"Step {current_step} corner {index}",
            ))
    return segments


def build_circle_toolpath(ctx: BuildContext, geometry: CircleGeometry) -> List[MotionSegment]:
    """Contour a circle as one full arc, or pocket it with concentric rings."""
    settings = ctx.settings
    segments: List[MotionSegment] = [Comment('Circle toolpath')]

    radius = calculate_offset_radius(geometry.radius, settings.tool_diameter, settings.offset)
    if radius <= 0:
        segments.append(Comment('Cannot generate toolpath: radius after offset is too small'))
        return segments

    pocket = settings.operation_type == 'pocket'
    if pocket and _stepover(ctx) <= 0:
        segments.append(Comment('Cannot generate pocket: stepover must be positive'))
        return segments

    center = ctx.point(0, 0)
    for z in iter_z_levels(settings.depth, settings.stepdown):
        segments.append(level_comment(z))
        if pocket:
            segments.extend(_circle_pocket(ctx, radius, z))
            continue

        start = ctx.point(radius, 0)
        i, j = calculate_ij_offsets(start, center)
        segments.extend([
            RapidMove(x=start[0], y=start[1], comment='Move to start position'),
            LinearCut(z=z, f=settings.plungerate, comment='Plunge to cutting depth'),
            ArcCut(command=ctx.arc_command, x=start[0], y=start[1], i=i, j=j,
                   f=settings.feedrate, comment='Full circle'),
        ])
    return segments


def _circle_pocket(ctx: BuildContext, radius: float, z: float) -> List[MotionSegment]:
    step = _stepover(ctx)
    segments = _pocket_entry(ctx, z, 'Circular pocket operation')
    center = ctx.point(0, 0)

    for ring in range(1, calculate_step_count(radius, step) + 1):
        ring_radius = min(ring * step, radius)
        start = ctx.point(ring_radius, 0)
        i, j = calculate_ij_offsets(start, center)
        segments.append(LinearCut(x=start[0], y=start[1], f=ctx.settings.feedrate,
                                  comment=f"Step out to radius {ring_radius:.3f}"))
        segments.append(ArcCut(command=ctx.arc_command, x=start[0], y=start[1], i=i, j=j,
                               f=ctx.settings.feedrate,
                               comment=f"Circle at radius {ring_radius:.3f}mm"))
    return segments


def build_polygon_toolpath(ctx: BuildContext, geometry: PolygonGeometry) -> List[MotionSegment]:
    """Contour or pocket a regular polygon with its first vertex on +X."""
    settings = ctx.settings
    segments: List[MotionSegment] = [Comment(f"Polygon toolpath ({geometry.sides} sides)")]

    if geometry.sides < 3:
        segments.append(Comment('Cannot generate toolpath: polygon needs at least 3 sides'))
        return segments

    radius = calculate_offset_radius(geometry.radius, settings.tool_diameter, settings.offset)
    if radius <= 0:
        segments.append(Comment('Cannot generate toolpath: radius after offset is too small'))
        return segments

    pocket = settings.operation_type == 'pocket'
    step = _stepover(ctx)
    if pocket and step <= 0:
        segments.append(Comment('Cannot generate pocket: stepover must be positive'))
        return segments

    for z in iter_z_levels(settings.depth, settings.stepdown):
        segments.append(level_comment(z))
        if not pocket:
            loop = close_loop(polygon_vertices(geometry.sides, radius), settings.direction)
            segments.extend(closed_pass(ctx, [ctx.point(x, y) for x, y in loop], z, label='Point'))
            continue

        segments.extend(_pocket_entry(ctx, z, 'Polygon pocket operation'))
        for ring in range(1, calculate_step_count(radius, step) + 1):
            ring_radius = min(ring * step, radius)
            loop = close_loop(polygon_vertices(geometry.sides, ring_radius), settings.direction)
            for index, (x, y) in enumerate(loop, start=1):
                px, py = ctx.point(x, y)
                segments.append(LinearCut(
                    x=px, y=py, f=settings.feedrate,
                    comment=f"Point {index} at radius {ring_radius:.3f}",
                ))
    return segments


def build_custom_toolpath(ctx: BuildContext, geometry: CustomGeometry) -> List[MotionSegment]:
    """Pass user-supplied G-code through untouched."""
    if not geometry.text:
        return []
    segments: List[MotionSegment] = [Comment('Custom path')]
    segments.extend(RawLine(code=line) for line in geometry.text.splitlines())
    return segments
