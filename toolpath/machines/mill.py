"""Mill program assembler."""
from typing import List

from ..builders import build_geometry_toolpath, closed_pass, full_circle
from ..models import (
    CircleGeometry,
    Comment,
    MILL_OPERATIONS,
    MotionSegment,
    PolygonGeometry,
    RapidMove,
    RawLine,
    RectangleGeometry,
)
from ..utils.arc_utils import close_loop, polygon_vertices, rectangle_vertices
from ..utils.tool_compensation import (
    calculate_offset_radius,
    calculate_offset_size,
    get_compensation_code,
)
from .base import MachineAssembler


SAFE_HEIGHT = 10
FINISHING_HEIGHT = 5
RETRACT_HEIGHT = 30
FINISHING_FEED_FACTOR = 0.8


class MillAssembler(MachineAssembler):
    """XY-plane milling: every operation runs the geometry builder."""

    machine_type = 'mill'
    title = 'Toolpath Generator - Mill program'

    @property
    def operations(self):
        return {operation: self.geometry_body for operation in MILL_OPERATIONS}

    def header(self) -> List[str]:
        s = self.settings
        return [
            self.title,
            f"Operation: {s.operation_type}",
            f"Material: {s.material}",
            f"Tool: {s.tool_type} Ø{s.tool_diameter:g}mm",
            f"Date: {self.timestamp()}",
        ]

    def setup(self) -> List[MotionSegment]:
        segments: List[MotionSegment] = [
            RawLine('G90', 'Absolute positioning'),
            RawLine('G21', 'Metric units'),
            RawLine('G17', 'XY plane selection'),
            RawLine(f"M3 S{self.settings.rpm}", 'Start spindle'),
        ]
        if self.settings.coolant:
            segments.append(RawLine('M8', 'Coolant on'))
        segments.append(RapidMove(z=SAFE_HEIGHT, comment='Move to safe height'))
        segments.append(RawLine())
        return segments

    def geometry_body(self) -> List[MotionSegment]:
        """Geometry toolpath, compensated when enabled, then the finishing pass."""
        s = self.settings
        segments = build_geometry_toolpath(self.ctx, self.geometry)

        code = get_compensation_code(s.operation_type, s.offset, s.direction)
        if s.tool_compensation and code:
            segments = (
                [RawLine(f"{code} D1", 'Cutter radius compensation on')]
                + segments
                + [RawLine('G40', 'Cutter radius compensation off')]
            )

        if s.finishing_pass:
            segments.extend(self.finishing_pass())
        return segments

    def finishing_pass(self) -> List[MotionSegment]:
        """
        One boundary pass at full depth with a reduced feed.

        Only the contour strategy on a primitive geometry has a toolpath;
        other strategies leave a note in the program.
        """
        s = self.settings
        segments: List[MotionSegment] = [
            RawLine(),
            Comment('Finishing pass'),
            Comment(f"Finishing allowance: {s.finishing_allowance:g}mm"),
            Comment(f"Finishing strategy: {s.finishing_strategy}"),
            RapidMove(z=FINISHING_HEIGHT, comment='Move to safe height for finishing pass'),
        ]
        if s.finishing_strategy != 'contour':
            segments.append(Comment(f"Finishing strategy '{s.finishing_strategy}' has no toolpath yet"))
            return segments

        feed = s.feedrate * FINISHING_FEED_FACTOR
        geometry = self.geometry
        point = self.ctx.point
        if isinstance(geometry, RectangleGeometry):
            width, height = calculate_offset_size(geometry.width, geometry.height, s.tool_diameter, s.offset)
            if width > 0 and height > 0:
                loop = close_loop(rectangle_vertices(width, height), s.direction)
                segments.extend(closed_pass(self.ctx, [point(x, y) for x, y in loop], -s.depth,
                                            feed=feed, label='Finishing corner'))
        elif isinstance(geometry, CircleGeometry):
            radius = calculate_offset_radius(geometry.radius, s.tool_diameter, s.offset)
            if radius > 0:
                segments.extend(full_circle(self.ctx, point(0, 0), radius, -s.depth,
                                            feed=feed, comment='Finishing circle'))
        elif isinstance(geometry, PolygonGeometry) and geometry.sides >= 3:
            radius = calculate_offset_radius(geometry.radius, s.tool_diameter, s.offset)
            if radius > 0:
                loop = close_loop(polygon_vertices(geometry.sides, radius), s.direction)
                segments.extend(closed_pass(self.ctx, [point(x, y) for x, y in loop], -s.depth,
                                            feed=feed, label='Finishing point'))
        return segments

    def teardown(self) -> List[MotionSegment]:
        segments: List[MotionSegment] = [
            RawLine(),
            Comment('End of program'),
            RapidMove(z=RETRACT_HEIGHT, comment='Move to safe height'),
        ]
        if self.settings.coolant:
            segments.append(RawLine('M9', 'Coolant off'))
        segments.append(RawLine('M5', 'Stop spindle'))
        segments.append(RawLine('M30', 'Program end'))
        return segments
