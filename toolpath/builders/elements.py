"""Toolpaths for a CAD element selected by the user.

2D elements are profiled at the element's own Z minus each cutting level.
Solids are delegated to :mod:`toolpath.builders.solids`.
"""
import math
from typing import List, Optional

from ..models import ArcCut, Comment, LinearCut, MotionSegment, RapidMove, SelectedElement
from ..utils.arc_utils import calculate_ij_offsets, close_loop, polygon_vertices, rectangle_vertices
from ..utils.multipass import iter_z_levels
from ..utils.tool_compensation import calculate_offset_radius, calculate_offset_size
from .base import APPROACH_CLEARANCE, BuildContext, closed_pass, full_circle, level_comment
from .solids import SOLID_BUILDERS


ELLIPSE_SEGMENTS = 72
RADIUS_TOO_SMALL = 'Cannot generate toolpath: radius after offset is too small'


def build_rectangle_element(ctx: BuildContext, element: SelectedElement) -> List[MotionSegment]:
    settings = ctx.settings
    width = element.width or 0
    height = element.height or 0
    segments: List[MotionSegment] = [Comment(
        f"Rectangle: center ({element.x:g}, {element.y:g}), width {width:g}mm, height {height:g}mm"
    )]

    cut_width, cut_height = calculate_offset_size(width, height, settings.tool_diameter, settings.offset)
    if cut_width <= 0 or cut_height <= 0:
        segments.append(Comment('Cannot generate toolpath: rectangle after offset is too small'))
        return segments

    loop = close_loop(rectangle_vertices(cut_width, cut_height), settings.direction)
    points = [ctx.point(element.x + x, element.y + y) for x, y in loop]
    for z in iter_z_levels(settings.depth, settings.stepdown):
        level = element.z + z
        segments.append(level_comment(level))
        segments.extend(closed_pass(ctx, points, level))
    return segments


def build_circle_element(ctx: BuildContext, element: SelectedElement) -> List[MotionSegment]:
    settings = ctx.settings
    radius = element.radius or 0
    segments: List[MotionSegment] = [Comment(
        f"Circle: center ({element.x:g}, {element.y:g}), radius {radius:g}mm"
    )]

    cut_radius = calculate_offset_radius(radius, settings.tool_diameter, settings.offset)
    if cut_radius <= 0:
        segments.append(Comment(RADIUS_TOO_SMALL))
        return segments

    center = ctx.point(element.x, element.y)
    for z in iter_z_levels(settings.depth, settings.stepdown):
        level = element.z + z
        segments.append(level_comment(level))
        segments.extend(full_circle(ctx, center, cut_radius, level))
    return segments


def build_line_element(ctx: BuildContext, element: SelectedElement) -> List[MotionSegment]:
    """Straight cut between two points; lines take no tool offset."""
    settings = ctx.settings
    x1, y1 = element.x1 or 0, element.y1 or 0
    x2, y2 = element.x2 or 0, element.y2 or 0
    segments: List[MotionSegment] = [Comment(f"Line: from ({x1:g}, {y1:g}) to ({x2:g}, {y2:g})")]

    start = ctx.point(x1, y1)
    end = ctx.point(x2, y2)
    for z in iter_z_levels(settings.depth, settings.stepdown):
        level = element.z + z
        segments.append(level_comment(level))
        segments.append(RapidMove(x=start[0], y=start[1], comment='Move to start position'))
        segments.append(LinearCut(z=level, f=settings.plungerate, comment='Plunge to cutting depth'))
        segments.append(LinearCut(x=end[0], y=end[1], f=settings.feedrate, comment='Linear move to end'))
    return segments


def build_polygon_element(ctx: BuildContext, element: SelectedElement) -> List[MotionSegment]:
    """
    Regular polygon around the element centre.

    When the offset leaves no radius, the single comment line is the whole
    result.
    """
    settings = ctx.settings
    sides = element.sides or 6
    radius = calculate_offset_radius(element.radius or 30, settings.tool_diameter, settings.offset)
    if radius <= 0:
        return [Comment(RADIUS_TOO_SMALL)]

    segments: List[MotionSegment] = [Comment(
        f"Polygon: center ({element.x:g}, {element.y:g}, {element.z:g}), "
        f"sides: {sides}, radius: {element.radius or 30:g}mm"
    )]
    loop = close_loop(polygon_vertices(sides, radius), settings.direction)
    points = [ctx.point(element.x + x, element.y + y) for x, y in loop]
    for z in iter_z_levels(settings.depth, settings.stepdown):
        level = element.z + z
        segments.append(level_comment(level))
        segments.extend(closed_pass(ctx, points, level,
                                    approach_z=element.z + APPROACH_CLEARANCE, label='Point'))
    return segments


def build_ellipse_element(ctx: BuildContext, element: SelectedElement) -> List[MotionSegment]:
    """Ellipse approximated by straight segments; each radius is offset on its own."""
    settings = ctx.settings
    radius_x = element.radius_x or (element.width / 2 if element.width else 25)
    radius_y = element.radius_y or (element.height / 2 if element.height else 15)
    segments: List[MotionSegment] = [Comment(
        f"Ellipse: center ({element.x:g}, {element.y:g}, {element.z:g}), "
        f"radiusX {radius_x:g}mm, radiusY {radius_y:g}mm"
    )]

    cut_x = calculate_offset_radius(radius_x, settings.tool_diameter, settings.offset)
    cut_y = calculate_offset_radius(radius_y, settings.tool_diameter, settings.offset)
    outline = [
        (cut_x * math.cos(2 * math.pi * i / ELLIPSE_SEGMENTS),
         cut_y * math.sin(2 * math.pi * i / ELLIPSE_SEGMENTS))
        for i in range(ELLIPSE_SEGMENTS)
    ]
    loop = close_loop(outline, settings.direction)
    points = [ctx.point(element.x + x, element.y + y) for x, y in loop]

    for z in iter_z_levels(settings.depth, settings.stepdown):
        level = element.z + z
        if cut_x <= 0 or cut_y <= 0:
            segments.append(level_comment(level, 'Offset dimensions too small, skipping'))
            continue
        segments.append(level_comment(level))
        segments.extend(closed_pass(ctx, points, level, approach_z=level + APPROACH_CLEARANCE,
                                    label='Ellipse point'))
    return segments


def _is_full_turn(start_angle: float, end_angle: float) -> bool:
    span = abs(end_angle - start_angle) % 360
    return span < 1e-3 or span > 360 - 1e-3


def build_arc_element(ctx: BuildContext, element: SelectedElement) -> List[MotionSegment]:
    """Circular arc between two angles (degrees); equal angles cut a full circle."""
    settings = ctx.settings
    radius = element.radius or 25
    start_angle = element.start_angle or 0
    end_angle = 360 if element.end_angle is None else element.end_angle
    cut_radius = calculate_offset_radius(radius, settings.tool_diameter, settings.offset)
    if cut_radius <= 0:
        return [Comment('Arc radius after offset too small, cannot generate toolpath')]

    segments: List[MotionSegment] = [Comment(
        f"Arc: center ({element.x:g}, {element.y:g}, {element.z:g}), radius {radius:g}mm, "
        f"startAngle {start_angle:g}, endAngle {end_angle:g}"
    )]
    center = ctx.point(element.x, element.y)
    start = ctx.point(element.x + cut_radius * math.cos(math.radians(start_angle)),
                      element.y + cut_radius * math.sin(math.radians(start_angle)))
    if _is_full_turn(start_angle, end_angle):
        end = start
    else:
        end = ctx.point(element.x + cut_radius * math.cos(math.radians(end_angle)),
                        element.y + cut_radius * math.sin(math.radians(end_angle)))
    i, j = calculate_ij_offsets(start, center)

    for z in iter_z_levels(settings.depth, settings.stepdown):
        level = element.z + z
        segments.append(level_comment(level))
        segments.append(RapidMove(x=start[0], y=start[1], z=level + APPROACH_CLEARANCE,
                                  comment='Move to start position'))
        segments.append(LinearCut(z=level, f=settings.plungerate, comment='Plunge to cutting depth'))
        segments.append(ArcCut(command=ctx.arc_command, x=end[0], y=end[1], i=i, j=j,
                               f=settings.feedrate, comment='Arc'))
    return segments


def build_text_element(ctx: BuildContext, element: SelectedElement) -> List[MotionSegment]:
    return [
        Comment(f"Text: position ({element.x:g}, {element.y:g}, {element.z:g}), "
                f"content: \"{element.text or 'Text'}\""),
        Comment('Text engraving requires conversion to paths - please use CAM software for text operations'),
        Comment('Recommend using outline paths or importing as SVG for text machining'),
    ]


ELEMENT_BUILDERS = {
    'rectangle': build_rectangle_element,
    'circle': build_circle_element,
    'line': build_line_element,
    'polygon': build_polygon_element,
    'ellipse': build_ellipse_element,
    'arc': build_arc_element,
    'text': build_text_element,
    **SOLID_BUILDERS,
}


def build_selected_toolpath(ctx: BuildContext, element: Optional[SelectedElement]) -> List[MotionSegment]:
    """Dispatch on the element type."""
    if element is None:
        return [Comment('No element selected for toolpath generation')]

    segments: List[MotionSegment] = [Comment(f"Toolpath from selected element ({element.type})")]
    builder = ELEMENT_BUILDERS.get(element.type)
    if builder is None:
        segments.append(Comment(f"Unsupported element type: {element.type}"))
        return segments
    segments.extend(builder(ctx, element))
    return segments
