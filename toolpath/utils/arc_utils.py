"""Arc direction and offset calculation utilities."""
import math
from typing import List, Tuple


Point2 = Tuple[float, float]


def arc_command_for_direction(direction: str) -> str:
    """Arc mnemonic used for full circles cut in the given direction."""
    return "G2" if direction == 'conventional' else "G3"


def opposite_arc_command(command: str) -> str:
    return "G3" if command == "G2" else "G2"


def cross_product(p0: Point2, p1: Point2, p2: Point2) -> float:
    """
    Z component of (p1 - p0) x (p2 - p1).

    Positive when p0 -> p1 -> p2 turns counter-clockwise.
    """
    ax, ay = p1[0] - p0[0], p1[1] - p0[1]
    bx, by = p2[0] - p1[0], p2[1] - p1[1]
    return ax * by - ay * bx


def calculate_ij_offsets(current: Point2, center: Point2) -> Tuple[float, float]:
    """
    Calculate I, J offsets for arc commands.

    I and J are the offsets from the current position to the arc center.
    """
    return (center[0] - current[0], center[1] - current[1])


def distance(a: Point2, b: Point2) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def polygon_vertices(sides: int, radius: float) -> List[Point2]:
    """Vertices of a regular polygon centred on the origin, first vertex on +X."""
    return [
        (radius * math.cos(2 * math.pi * j / sides), radius * math.sin(2 * math.pi * j / sides))
        for j in range(sides)
    ]


def rectangle_vertices(width: float, height: float) -> List[Point2]:
    """Corners of a centred rectangle, counter-clockwise from bottom-left."""
    half_w = width / 2
    half_h = height / 2
    return [(-half_w, -half_h), (half_w, -half_h), (half_w, half_h), (-half_w, half_h)]


def close_loop(vertices: List[Point2], direction: str = 'climb') -> List[Point2]:
    """
    Closed vertex list for a boundary pass.

    Conventional milling reverses the order; the first vertex stays the
    start point so both directions begin at the same corner.
    """
    ordered = list(vertices)
    if direction == 'conventional':
        ordered = [ordered[0]] + ordered[:0:-1]
    return ordered + [ordered[0]]
