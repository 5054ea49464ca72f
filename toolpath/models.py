"""Data model for toolpath generation.

Settings and geometry records are frozen dataclasses built once per
generation call. Builders and assemblers return lists of motion segments;
the emitter in ``toolpath.utils.gcode_format`` turns them into text.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, List, NamedTuple, Optional, Union


MILL_OPERATIONS = (
    'contour', 'pocket', 'drill', 'engrave', 'profile', 'threading', '3d_surface'
)
LATHE_OPERATIONS = (
    'facing', 'turning', 'boring', 'threading', 'grooving', 'parting', 'knurling'
)
PRINTER_OPERATIONS = ('standard', 'vase', 'support', 'infill', 'raft', 'brim')

MACHINE_OPERATIONS = {
    'mill': MILL_OPERATIONS,
    'lathe': LATHE_OPERATIONS,
    'printer': PRINTER_OPERATIONS,
}

OFFSET_TYPES = ('inside', 'outside', 'center')
DIRECTIONS = ('climb', 'conventional')
FINISHING_STRATEGIES = ('contour', 'parallel', 'spiral', 'radial')
ORIGIN_TYPES = (
    'workpiece-center', 'workpiece-corner', 'workpiece-corner2', 'machine-zero', 'custom'
)


@dataclass(frozen=True)
class PrinterSettings:
    """3D printer parameters (mm, mm/s, degrees C)."""
    nozzle_diameter: float = 0.4
    filament_diameter: float = 1.75
    layer_height: float = 0.2
    extrusion_width: float = 0.4
    print_speed: float = 60
    print_temperature: float = 200
    bed_temperature: float = 60


@dataclass(frozen=True)
class LatheSettings:
    """Lathe stock and spindle parameters."""
    stock_diameter: float = 50
    stock_length: float = 100
    spindle_direction: str = 'cw'  # 'cw' or 'ccw'
    turning_operation: str = 'external'  # 'external', 'internal', 'face'
    apply_tool_compensation: bool = True


@dataclass(frozen=True)
class MachiningSettings:
    """Single configuration record driving generation.

    Only the fields relevant to ``machine_type`` are read by the
    generator; the rest are carried along unchanged.
    """
    machine_type: str = 'mill'
    operation_type: str = 'contour'
    material: str = 'aluminum'
    tool_type: str = 'endmill'
    tool_diameter: float = 6
    flutes: int = 2
    depth: float = 5
    stepdown: float = 1
    stepover: float = 40  # percent of tool diameter
    feedrate: float = 800
    plungerate: float = 300
    rpm: int = 10000
    tolerance: float = 0.01
    offset: str = 'outside'
    direction: str = 'climb'
    coolant: bool = True
    finishing_pass: bool = False
    finishing_allowance: float = 0.2
    finishing_strategy: str = 'contour'
    tool_compensation: bool = False
    origin_type: str = 'workpiece-center'
    origin_x: float = 0
    origin_y: float = 0
    origin_z: float = 0
    remove_redundant_moves: bool = False
    fit_arcs: bool = False
    printer: PrinterSettings = field(default_factory=PrinterSettings)
    lathe: LatheSettings = field(default_factory=LatheSettings)


@dataclass(frozen=True)
class RectangleGeometry:
    kind: ClassVar[str] = 'rectangle'
    width: float = 100
    height: float = 50


@dataclass(frozen=True)
class CircleGeometry:
    kind: ClassVar[str] = 'circle'
    radius: float = 25


@dataclass(frozen=True)
class PolygonGeometry:
    kind: ClassVar[str] = 'polygon'
    sides: int = 6
    radius: float = 30


@dataclass(frozen=True)
class CustomGeometry:
    """Raw G-code passed through verbatim."""
    kind: ClassVar[str] = 'custom'
    text: str = ''


@dataclass(frozen=True)
class SelectedElement:
    """Read-only snapshot of a CAD element chosen by the user.

    Only ``type`` and the position are always present; every dimension is
    optional and each builder applies its own defaults.
    """
    type: str
    x: float = 0
    y: float = 0
    z: float = 0
    width: Optional[float] = None
    height: Optional[float] = None
    depth: Optional[float] = None
    length: Optional[float] = None
    radius: Optional[float] = None
    tube_radius: Optional[float] = None
    sides: Optional[int] = None
    x1: Optional[float] = None
    y1: Optional[float] = None
    x2: Optional[float] = None
    y2: Optional[float] = None
    shape_type: Optional[str] = None
    text: Optional[str] = None
    start_angle: Optional[float] = None
    end_angle: Optional[float] = None
    radius_x: Optional[float] = None
    radius_y: Optional[float] = None
    base_width: Optional[float] = None
    base_depth: Optional[float] = None
    direction: Optional[str] = None


@dataclass(frozen=True)
class SelectedGeometry:
    kind: ClassVar[str] = 'selected'
    element: Optional[SelectedElement] = None


Geometry = Union[RectangleGeometry, CircleGeometry, PolygonGeometry, CustomGeometry, SelectedGeometry]


@dataclass(frozen=True)
class Workpiece:
    """External stock descriptor, used by some origin policies."""
    width: float = 0
    height: float = 0
    depth: float = 0
    material: str = 'aluminum'


class Point3(NamedTuple):
    x: float
    y: float
    z: float


# Motion segments, in execution order

@dataclass(frozen=True)
class RapidMove:
    """G0 positioning move. Omitted axes keep their current value."""
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None
    comment: Optional[str] = None


@dataclass(frozen=True)
class LinearCut:
    """G1 feed move, optionally extruding (printer E axis)."""
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None
    f: Optional[float] = None
    e: Optional[float] = None
    comment: Optional[str] = None


@dataclass(frozen=True)
class ArcCut:
    """G2/G3 arc. I and J are offsets from the start point to the centre."""
    command: str  # 'G2' or 'G3'
    x: float
    y: float
    i: float
    j: float
    z: Optional[float] = None
    f: Optional[float] = None
    e: Optional[float] = None
    comment: Optional[str] = None


@dataclass(frozen=True)
class RawLine:
    """Any other command (spindle, coolant, heaters, G32, G92 ...).

    An empty ``code`` with no comment renders as a blank line.
    """
    code: str = ''
    comment: Optional[str] = None


@dataclass(frozen=True)
class Comment:
    text: str


MotionSegment = Union[RapidMove, LinearCut, ArcCut, RawLine, Comment]


@dataclass
class Program:
    """Header comments, ordered segments and footer comments."""
    header: List[str] = field(default_factory=list)
    segments: List[MotionSegment] = field(default_factory=list)
    footer: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class GenerationRequest:
    """Everything one generation call needs."""
    settings: MachiningSettings = field(default_factory=MachiningSettings)
    geometry: Geometry = field(default_factory=RectangleGeometry)
    workpiece: Optional[Workpiece] = None
    title: str = 'CNC Program'
    generated_at: Optional[datetime] = None


@dataclass
class GenerationResult:
    """Result of G-code generation."""
    success: bool
    gcode: str = ''
    program: Optional[Program] = None
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
