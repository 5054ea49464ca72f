"""Lathe program assembler.

Lathe strategies are fixed multi-pass cycles over the stock diameter and
length. X values are diameters. The constants below (thread pitch, groove
width, boring start hole ...) are part of the program format and are not
derived from tool geometry.
"""
import math
from typing import List

from ..models import Comment, LinearCut, MotionSegment, RapidMove, RawLine
from ..utils.gcode_format import format_coordinate, format_feed
from ..utils.multipass import iter_passes, iter_z_levels
from .base import MachineAssembler


APPROACH_CLEARANCE = 2
RETRACT_CLEARANCE = 5
START_Z = 2
INTERNAL_HOLE_RATIO = 0.5
INTERNAL_LENGTH_RATIO = 0.7
BORING_HOLE_RATIO = 0.3
BORING_LENGTH_RATIO = 0.5
THREAD_PITCH = 1.5
THREAD_LENGTH_RATIO = 0.7
THREAD_PASS_DEPTH = 0.1
GROOVE_WIDTH = 3
GROOVE_POSITION_Z = 20
GROOVE_PASS_DEPTH = 0.5
PARTING_POSITION_Z = 30
KNURL_START_Z = 5
KNURL_LENGTH = 30
KNURL_PRESSURE = 0.2


class LatheAssembler(MachineAssembler):
    """XZ-plane turning cycles."""

    machine_type = 'lathe'
    title = 'Toolpath Generator - Lathe program'

    @property
    def operations(self):
        return {
            'facing': self.facing,
            'turning': self.turning,
            'boring': self.boring,
            'threading': self.threading,
            'grooving': self.grooving,
            'parting': self.parting,
            'knurling': self.knurling,
        }

    @property
    def stock_diameter(self) -> float:
        return self.settings.lathe.stock_diameter

    @property
    def stock_length(self) -> float:
        return self.settings.lathe.stock_length

    def header(self) -> List[str]:
        s = self.settings
        return [
            self.title,
            f"Operation: {s.operation_type}",
            f"Material: {s.material}",
            f"Tool: {s.tool_type}",
            f"Stock: Ø{self.stock_diameter:g}mm x {self.stock_length:g}mm",
            f"Date: {self.timestamp()}",
        ]

    def setup(self) -> List[MotionSegment]:
        rotation = 'clockwise' if self.settings.lathe.spindle_direction == 'cw' else 'counter-clockwise'
        segments: List[MotionSegment] = [
            RawLine('G90', 'Absolute positioning'),
            RawLine('G21', 'Metric units'),
            RawLine('G18', 'XZ plane selection'),
            RawLine(f"M3 S{self.settings.rpm}", f"Start spindle {rotation}"),
        ]
        if self.settings.coolant:
            segments.append(RawLine('M8', 'Coolant on'))
        return segments

    def facing(self) -> List[MotionSegment]:
        """Face the stock end, one stepdown per pass."""
        clear_x = self.stock_diameter + APPROACH_CLEARANCE
        segments: List[MotionSegment] = [
            RawLine(),
            Comment('Facing operation'),
            RapidMove(x=clear_x, z=START_Z, comment='Position tool'),
        ]
        for z in iter_z_levels(self.settings.depth, self.settings.stepdown):
            segments.append(RapidMove(x=clear_x, z=z, comment='Rapid to start position'))
            segments.append(LinearCut(x=-1, f=self.settings.feedrate, comment='Face cut'))
            segments.append(RapidMove(x=clear_x, comment='Retract'))
        return segments

    def turning(self) -> List[MotionSegment]:
        mode = self.settings.lathe.turning_operation
        if mode == 'face':
            return self.facing()
        if mode == 'internal':
            return self._internal_turning()
        return self._external_turning()

    def _external_turning(self) -> List[MotionSegment]:
        s = self.settings
        clear_x = self.stock_diameter + APPROACH_CLEARANCE
        segments: List[MotionSegment] = [
            RawLine(),
            Comment('Turning operation'),
            RapidMove(x=clear_x, z=START_Z, comment='Position tool'),
            RapidMove(z=0, comment='Move to face'),
        ]
        for _, cut_depth in iter_passes(s.depth, s.stepdown):
            diameter = self.stock_diameter - cut_depth * 2
            segments.extend([
                RapidMove(x=diameter + 1, comment='Rapid to diameter'),
                LinearCut(x=diameter, f=s.feedrate / 2, comment='Plunge to depth'),
                LinearCut(z=self.stock_length, f=s.feedrate, comment='Turn along Z'),
                RapidMove(x=clear_x, comment='Retract'),
                RapidMove(z=0, comment='Return to face'),
            ])
        return segments

    def _internal_turning(self) -> List[MotionSegment]:
        s = self.settings
        hole = self.stock_diameter * INTERNAL_HOLE_RATIO
        segments: List[MotionSegment] = [
            RawLine(),
            Comment('Turning operation'),
            RapidMove(x=hole - 1, z=START_Z, comment='Position tool'),
            RapidMove(z=0, comment='Move to face'),
        ]
        for _, cut_depth in iter_passes(s.depth, s.stepdown):
            diameter = hole + cut_depth * 2
            segments.extend([
                RapidMove(x=diameter - 1, comment='Rapid to diameter'),
                LinearCut(x=diameter, f=s.feedrate / 2, comment='Plunge to depth'),
                LinearCut(z=self.stock_length * INTERNAL_LENGTH_RATIO, f=s.feedrate, comment='Turn along Z'),
                RapidMove(x=hole - 1, comment='Retract'),
                RapidMove(z=0, comment='Return to face'),
            ])
        return segments

    def boring(self) -> List[MotionSegment]:
        """Open a pre-drilled hole of 30% stock diameter."""
        s = self.settings
        start_hole = self.stock_diameter * BORING_HOLE_RATIO
        segments: List[MotionSegment] = [
            RawLine(),
            Comment('Boring operation'),
            RapidMove(x=start_hole - 1, z=START_Z, comment='Position tool'),
            RapidMove(z=0, comment='Move to hole entrance'),
        ]
        for _, cut_depth in iter_passes(s.depth, s.stepdown):
            segments.extend([
                LinearCut(x=start_hole + cut_depth * 2, f=s.feedrate / 2, comment='Bore to diameter'),
                LinearCut(z=-self.stock_length * BORING_LENGTH_RATIO, f=s.feedrate, comment='Bore along Z'),
                RapidMove(x=start_hole - 1, comment='Retract'),
                RapidMove(z=0, comment='Return to hole entrance'),
            ])
        return segments

    def threading(self) -> List[MotionSegment]:
        """Single-point threading with G32 at a fixed pitch, 0.1mm per pass."""
        end_z = START_Z + self.stock_length * THREAD_LENGTH_RATIO
        segments: List[MotionSegment] = [
            RawLine(),
            Comment('Threading operation'),
            RapidMove(x=self.stock_diameter + RETRACT_CLEARANCE, z=START_Z, comment='Position tool'),
        ]
        passes = math.floor(round(self.settings.depth / THREAD_PASS_DEPTH, 9))
        for k in range(1, passes + 1):
            segments.extend([
                RapidMove(x=self.stock_diameter - k * THREAD_PASS_DEPTH * 2, comment='Rapid to thread diameter'),
                RawLine(f"G32 Z{format_coordinate(end_z)} F{format_feed(THREAD_PITCH)}", 'Thread cutting move'),
                RapidMove(x=self.stock_diameter + APPROACH_CLEARANCE, comment='Retract'),
                RapidMove(z=START_Z, comment='Return to start'),
            ])
        return segments

    def grooving(self) -> List[MotionSegment]:
        s = self.settings
        clear_x = self.stock_diameter + APPROACH_CLEARANCE
        segments: List[MotionSegment] = [
            RawLine(),
            Comment('Grooving operation'),
            RapidMove(x=clear_x, z=GROOVE_POSITION_Z, comment='Position tool'),
        ]
        for _, cut_depth in iter_passes(s.depth, GROOVE_PASS_DEPTH):
            segments.append(LinearCut(x=self.stock_diameter - cut_depth * 2, f=s.feedrate / 2,
                                      comment='Plunge to depth'))
            segments.append(RapidMove(x=clear_x, comment='Retract'))

        segments.extend([
            RapidMove(z=GROOVE_POSITION_Z - GROOVE_WIDTH / 2, comment='Position to groove start'),
            LinearCut(x=self.stock_diameter - s.depth * 2, f=s.feedrate / 2, comment='Plunge to depth'),
            LinearCut(z=GROOVE_POSITION_Z + GROOVE_WIDTH / 2, f=s.feedrate, comment='Cut to groove end'),
            RapidMove(x=clear_x, comment='Retract'),
        ])
        return segments

    def parting(self) -> List[MotionSegment]:
        return [
            RawLine(),
            Comment('Parting operation'),
            RapidMove(x=self.stock_diameter + APPROACH_CLEARANCE, z=PARTING_POSITION_Z, comment='Position tool'),
            LinearCut(x=-1, f=self.settings.feedrate / 3, comment='Part off'),
            RapidMove(x=self.stock_diameter + RETRACT_CLEARANCE, comment='Retract'),
        ]

    def knurling(self) -> List[MotionSegment]:
        """Two knurling passes, the second with extra pressure."""
        feed = self.settings.feedrate
        end_z = KNURL_START_Z + KNURL_LENGTH
        retract_x = self.stock_diameter + RETRACT_CLEARANCE
        return [
            RawLine(),
            Comment('Knurling operation'),
            RapidMove(x=self.stock_diameter + APPROACH_CLEARANCE, z=KNURL_START_Z, comment='Position tool'),
            LinearCut(x=self.stock_diameter, f=feed / 2, comment='Approach to diameter'),
            LinearCut(z=end_z, f=feed / 4, comment='Knurl along length'),
            RapidMove(x=retract_x, comment='Retract'),
            RapidMove(z=KNURL_START_Z, comment='Return to start'),
            LinearCut(x=self.stock_diameter + KNURL_PRESSURE, f=feed / 2, comment='Approach with pressure'),
            LinearCut(z=end_z, f=feed / 4, comment='Knurl along length again'),
            RapidMove(x=retract_x, comment='Retract'),
        ]

    def teardown(self) -> List[MotionSegment]:
        segments: List[MotionSegment] = [
            RawLine(),
            Comment('End of program'),
            RapidMove(x=50, z=50, comment='Retract to safe position'),
        ]
        if self.settings.coolant:
            segments.append(RawLine('M9', 'Coolant off'))
        segments.append(RawLine('M5', 'Stop spindle'))
        segments.append(RawLine('M30', 'Program end'))
        return segments
