"""3D printer program assembler.

Printer strategies are layer based. The E axis is absolute (``M82``); an
:class:`ExtrusionTracker` accumulates it and emits ``G92 E0`` whenever a
strategy resets it, so E never decreases between two resets.
"""
import math
from typing import List, Tuple

from ..models import (
    ArcCut,
    CircleGeometry,
    Comment,
    LinearCut,
    MotionSegment,
    PolygonGeometry,
    RawLine,
    RectangleGeometry,
)
from ..utils.multipass import calculate_num_passes
from .base import MachineAssembler


TRAVEL_FEED = 3000
PRIME_AMOUNT = 0.5
DEFAULT_FOOTPRINT = (100, 50)
DEFAULT_VASE_RADIUS = 25
VASE_TAPER = 0.8
VASE_RING_FACTOR = 1.2
VASE_SEGMENTS = 32
STANDARD_INFILL_FACTOR = 2
SUPPORT_FLOW = 0.8
SUPPORT_SPACING = 5
INFILL_DENSITY = 20  # percent
RAFT_MARGIN = 10
# (spacing factor, speed factor, flow factor) for the first, middle and top layers
RAFT_LAYERS = (
    (3, 0.6, 1.5),
    (2, 0.7, 1.2),
    (1.2, 0.8, 1.0),
)
BRIM_LOOPS = 5
BRIM_SPACING_FACTOR = 1.1


def extrusion_multiplier(extrusion_width: float, layer_height: float, filament_diameter: float) -> float:
    """
    Filament length fed per millimetre of printed line.

    Args:
        extrusion_width: Width of the printed line (mm)
        layer_height: Layer height (mm)
        filament_diameter: Filament diameter (mm)

    Returns:
        Ratio of the extruded cross-section to the filament cross-section
    """
    filament_area = math.pi * (filament_diameter / 2) ** 2
    return (extrusion_width * layer_height) / filament_area


class ExtrusionTracker:
    """Running absolute E value."""

    def __init__(self, multiplier: float):
        self.multiplier = multiplier
        self.e = 0.0

    def extrude(self, length: float, flow: float = 1.0) -> float:
        """Advance E for ``length`` mm of printed line and return the new value."""
        self.e += self.multiplier * flow * length
        return self.e

    def prime(self, amount: float = PRIME_AMOUNT) -> float:
        self.e += amount
        return self.e

    def reset(self) -> RawLine:
        self.e = 0.0
        return RawLine('G92 E0', 'Reset extruder position')


def _grid_positions(size: float, spacing: float) -> List[float]:
    """Line positions from -size/2 to size/2 inclusive."""
    if spacing <= 0:
        return []
    count = math.floor(round(size / spacing, 9)) + 1
    return [-size / 2 + k * spacing for k in range(count)]


class PrinterAssembler(MachineAssembler):
    """FDM printing strategies."""

    machine_type = 'printer'
    title = 'Toolpath Generator - 3D printer program'

    def __init__(self, request):
        super().__init__(request)
        self.printer = self.settings.printer
        self.multiplier = extrusion_multiplier(
            self.printer.extrusion_width, self.printer.layer_height, self.printer.filament_diameter
        )
        self.tracker = ExtrusionTracker(self.multiplier)

    @property
    def operations(self):
        return {
            'standard': self.standard,
            'vase': self.vase,
            'support': self.support,
            'infill': self.infill,
            'raft': self.raft,
            'brim': self.brim,
        }

    @property
    def layer_count(self) -> int:
        return calculate_num_passes(self.settings.depth, self.printer.layer_height)

    def footprint(self) -> Tuple[float, float]:
        """Width and height of the printed area."""
        geometry = self.geometry
        if isinstance(geometry, RectangleGeometry):
            return geometry.width, geometry.height
        if isinstance(geometry, (CircleGeometry, PolygonGeometry)):
            return geometry.radius * 2, geometry.radius * 2
        return DEFAULT_FOOTPRINT

    def vase_radius(self) -> float:
        geometry = self.geometry
        if isinstance(geometry, (CircleGeometry, PolygonGeometry)):
            return geometry.radius
        if isinstance(geometry, RectangleGeometry):
            return min(geometry.width, geometry.height) / 2
        return DEFAULT_VASE_RADIUS

    def header(self) -> List[str]:
        s = self.settings
        material = 'PLA' if s.material == 'plastic' else s.material
        return [
            self.title,
            f"Operation: {s.operation_type}",
            f"Material: {material}",
            f"Nozzle: {self.printer.nozzle_diameter:g}mm",
            f"Layer Height: {self.printer.layer_height:g}mm",
            f"Date: {self.timestamp()}",
        ]

    def setup(self) -> List[MotionSegment]:
        p = self.printer
        return [
            RawLine('M82', 'Set extruder to absolute mode'),
            RawLine('G21', 'Set units to millimeters'),
            RawLine('G90', 'Use absolute coordinates'),
            RawLine(f"M104 S{p.print_temperature:g}", 'Set extruder temperature'),
            RawLine(f"M140 S{p.bed_temperature:g}", 'Set bed temperature'),
            RawLine(f"M109 S{p.print_temperature:g}", 'Wait for extruder temperature'),
            RawLine(f"M190 S{p.bed_temperature:g}", 'Wait for bed temperature'),
            RawLine('G28', 'Home all axes'),
            RawLine('G1 Z5 F5000', 'Move Z up a bit'),
            RawLine('G1 X0 Y0 Z0.3 F3000', 'Move to start position'),
            RawLine('G1 E5 F1800', 'Prime the extruder'),
            RawLine('G92 E0', 'Reset extruder position'),
            RawLine(),
        ]

    def _layer_start(self, label: str, z: float) -> List[MotionSegment]:
        return [
            RawLine(),
            Comment(f"{label}, Z={z:.3f}"),
            LinearCut(z=z, f=TRAVEL_FEED, comment='Move to new layer'),
        ]

    def _square_loop(self, size: float, comment: str) -> List[MotionSegment]:
        """Four extruded edges around a centred square, starting bottom-left."""
        half = size / 2
        corners = [(half, -half), (half, half), (-half, half), (-half, -half)]
        return [
            LinearCut(x=x, y=y, e=self.tracker.extrude(size), comment=comment)
            for x, y in corners
        ]

    def _line_grid(self, size: float, spacing: float, along_x: bool, feed: float,
                   flow: float, comment: str) -> List[MotionSegment]:
        """Parallel extruded lines across a centred square, each preceded by a travel."""
        half = size / 2
        segments: List[MotionSegment] = []
        for position in _grid_positions(size, spacing):
            if along_x:
                start, end = (-half, position), (half, position)
            else:
                start, end = (position, -half), (position, half)
            segments.append(LinearCut(x=start[0], y=start[1], f=TRAVEL_FEED, comment='Move to start line'))
            segments.append(LinearCut(x=end[0], y=end[1], f=feed,
                                      e=self.tracker.extrude(size, flow), comment=comment))
        return segments

    def standard(self) -> List[MotionSegment]:
        """Square perimeter on every layer with zig-zag infill on the inner ones."""
        width, height = self.footprint()
        size = min(width, height)
        half = size / 2
        speed = self.printer.print_speed
        spacing = self.printer.extrusion_width * STANDARD_INFILL_FACTOR
        layers = self.layer_count

        segments: List[MotionSegment] = [RawLine(), Comment('Standard printing operation')]
        for layer in range(layers):
            z = self.printer.layer_height * (layer + 1)
            segments.extend(self._layer_start(f"Layer {layer + 1}", z))
            segments.append(LinearCut(f=speed, comment='Set print speed'))
            segments.append(LinearCut(x=-half, y=-half, e=self.tracker.prime(),
                                      comment='Move to start position'))
            segments.extend(self._square_loop(size, 'Draw line'))

            if 0 < layer < layers - 1:
                segments.append(self.tracker.reset())
                for k in range(1, math.ceil(round(size / spacing, 9))):
                    y = -half + k * spacing
                    start, end = (-half, half) if k % 2 == 0 else (half, -half)
                    segments.append(LinearCut(x=start, y=y, f=TRAVEL_FEED,
                                              comment='Move to start infill line'))
                    segments.append(LinearCut(x=end, y=y, f=speed, e=self.tracker.extrude(size),
                                              comment='Infill line'))

            segments.append(self.tracker.reset())
        return segments

    def vase(self) -> List[MotionSegment]:
        """
        Solid concentric base followed by one continuous tapered spiral.

        The wall rises through each layer while it turns, so Z changes on
        every segment instead of once per layer.
        """
        p = self.printer
        radius = self.vase_radius()
        top_radius = radius * VASE_TAPER
        layers = self.layer_count

        segments: List[MotionSegment] = [RawLine(), Comment('Vase mode printing operation')]
        segments.extend(self._layer_start('Base layer', p.layer_height))

        ring_step = p.extrusion_width * VASE_RING_FACTOR
        for k in range(math.ceil(round(radius / ring_step, 9))):
            ring = radius - k * ring_step
            segments.append(LinearCut(x=ring, y=0, f=TRAVEL_FEED, comment='Move to radius'))
            segments.append(ArcCut(command='G2', x=ring, y=0, i=-ring, j=0, f=p.print_speed,
                                   e=self.tracker.extrude(2 * math.pi * ring), comment='Print circle'))

        segments.append(self.tracker.reset())
        segments.extend([
            RawLine(),
            Comment('Spiral vase walls'),
            RawLine('M106 S255', 'Fan on full'),
            LinearCut(f=TRAVEL_FEED, comment='Set move speed'),
            LinearCut(x=radius, y=0, comment='Move to start position'),
            self.tracker.reset(),
            LinearCut(f=p.print_speed, comment='Set print speed'),
        ])

        for layer in range(1, layers):
            z = p.layer_height * (layer + 1)
            current = radius - (radius - top_radius) * (layer / layers)
            step = 2 * math.pi * current / VASE_SEGMENTS
            for i in range(VASE_SEGMENTS):
                angle = 2 * math.pi * i / VASE_SEGMENTS
                segments.append(LinearCut(
                    x=current * math.cos(angle),
                    y=current * math.sin(angle),
                    z=z + (i / VASE_SEGMENTS) * p.layer_height,
                    e=self.tracker.extrude(step),
                    comment='Spiral',
                ))
        return segments

    def support(self) -> List[MotionSegment]:
        """Sparse grid, alternating X and Y lines by layer."""
        size = max(self.footprint())
        segments: List[MotionSegment] = [RawLine(), Comment('Support structure printing operation')]
        for layer in range(self.layer_count):
            z = self.printer.layer_height * (layer + 1)
            segments.extend(self._layer_start(f"Support Layer {layer + 1}", z))
            segments.append(self.tracker.reset())
            segments.extend(self._line_grid(size, SUPPORT_SPACING, layer % 2 == 0,
                                            self.printer.print_speed, SUPPORT_FLOW, 'Support line'))
        return segments

    def infill(self) -> List[MotionSegment]:
        size = min(self.footprint())
        spacing = self.printer.extrusion_width * (100 / INFILL_DENSITY)
        segments: List[MotionSegment] = [RawLine(), Comment('Infill structure printing operation')]
        for layer in range(self.layer_count):
            z = self.printer.layer_height * (layer + 1)
            segments.extend(self._layer_start(f"Infill Layer {layer + 1}", z))
            segments.append(self.tracker.reset())
            segments.extend(self._line_grid(size, spacing, layer % 2 == 0,
                                            self.printer.print_speed, 1.0, 'Infill line'))
        return segments

    def raft(self) -> List[MotionSegment]:
        """Three raft layers, coarse and slow at the bottom, dense at the top."""
        size = max(self.footprint()) + RAFT_MARGIN
        segments: List[MotionSegment] = [RawLine(), Comment('Raft printing operation')]
        for layer, (spacing_factor, speed_factor, flow) in enumerate(RAFT_LAYERS):
            z = self.printer.layer_height * (layer + 1)
            segments.extend(self._layer_start(f"Raft Layer {layer + 1}", z))
            segments.append(self.tracker.reset())
            segments.extend(self._line_grid(
                size,
                self.printer.extrusion_width * spacing_factor,
                layer % 2 == 0,
                self.printer.print_speed * speed_factor,
                flow,
                'Raft line',
            ))
        return segments

    def brim(self) -> List[MotionSegment]:
        p = self.printer
        size = min(self.footprint())
        segments: List[MotionSegment] = [RawLine(), Comment('Brim printing operation')]
        segments.extend(self._layer_start('Brim Layer', p.layer_height))
        segments.append(self.tracker.reset())

        for i in range(1, BRIM_LOOPS + 1):
            loop_size = size + i * p.extrusion_width * BRIM_SPACING_FACTOR
            half = loop_size / 2
            segments.append(Comment(f"Brim loop {i}"))
            segments.append(LinearCut(x=-half, y=-half, f=TRAVEL_FEED, comment='Move to start'))
            segments.append(LinearCut(f=p.print_speed, e=self.tracker.prime(), comment='Prepare to print'))
            segments.extend(self._square_loop(loop_size, 'Brim line'))

        segments.append(self.tracker.reset())
        return segments

    def teardown(self) -> List[MotionSegment]:
        return [
            RawLine(),
            Comment('End of print'),
            RawLine('G1 E-2 F1800', 'Retract filament'),
            RawLine(f"G1 Z{self.settings.depth + 5:.2f} F3000", 'Move Z up'),
            RawLine('G1 X0 Y200 F3000', 'Move to front'),
            RawLine('M104 S0', 'Turn off extruder'),
            RawLine('M140 S0', 'Turn off bed'),
            RawLine('M84', 'Disable motors'),
        ]
