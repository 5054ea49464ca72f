"""G-code formatting utilities.

Coordinates are written with 3 decimals and extrusion with 5. Comments
use the ``;`` style understood by both Marlin and common mill controllers.
"""
import re
from typing import List, Optional

from ..models import (
    ArcCut,
    Comment,
    LinearCut,
    MotionSegment,
    Program,
    RapidMove,
    RawLine,
)


COORDINATE_PRECISION = 3
EXTRUSION_PRECISION = 5


def format_coordinate(value: float, precision: int = COORDINATE_PRECISION) -> str:
    """
    Format a coordinate value with a fixed number of decimal places.

    Negative zero is written as zero.

    Args:
        value: The coordinate value
        precision: Number of decimal places (default 3)

    Returns:
        Formatted string representation
    """
    text = f"{value:.{precision}f}"
    if text.startswith('-') and float(text) == 0:
        return text[1:]
    return text


def format_extrusion(value: float) -> str:
    """Format an E axis value (5 decimals)."""
    return format_coordinate(value, EXTRUSION_PRECISION)


def format_feed(value: float) -> str:
    """
    Format a feed rate.

    Whole numbers are written without decimals (``F800``); fractional feeds
    keep up to 3 decimals with trailing zeros removed (``F266.667``).
    """
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.3f}".rstrip('0').rstrip('.')


def _with_comment(parts: List[str], comment: Optional[str]) -> str:
    line = " ".join(parts)
    if comment:
        return f"{line} ; {comment}" if line else f"; {comment}"
    return line


def generate_rapid_move(
    x: Optional[float] = None,
    y: Optional[float] = None,
    z: Optional[float] = None,
    comment: Optional[str] = None
) -> str:
    """
    Generate a G0 rapid move command.

    Args:
        x: X coordinate (optional)
        y: Y coordinate (optional)
        z: Z coordinate (optional)
        comment: Inline comment (optional)

    Returns:
        G0 command string
    """
    parts = ["G0"]
    if x is not None:
        parts.append(f"X{format_coordinate(x)}")
    if y is not None:
        parts.append(f"Y{format_coordinate(y)}")
    if z is not None:
        parts.append(f"Z{format_coordinate(z)}")
    return _with_comment(parts, comment)


def generate_linear_move(
    x: Optional[float] = None,
    y: Optional[float] = None,
    z: Optional[float] = None,
    feed: Optional[float] = None,
    extrusion: Optional[float] = None,
    comment: Optional[str] = None
) -> str:
    """
    Generate a G1 linear move command.

    Args:
        x: X coordinate (optional)
        y: Y coordinate (optional)
        z: Z coordinate (optional)
        feed: Feed rate (optional)
        extrusion: Absolute E value (optional)
        comment: Inline comment (optional)

    Returns:
        G1 command string
    """
    parts = ["G1"]
    if x is not None:
        parts.append(f"X{format_coordinate(x)}")
    if y is not None:
        parts.append(f"Y{format_coordinate(y)}")
    if z is not None:
        parts.append(f"Z{format_coordinate(z)}")
    if feed is not None:
        parts.append(f"F{format_feed(feed)}")
    if extrusion is not None:
        parts.append(f"E{format_extrusion(extrusion)}")
    return _with_comment(parts, comment)


def generate_arc_move(
    direction: str,
    x: float,
    y: float,
    i: float,
    j: float,
    feed: Optional[float] = None,
    z: Optional[float] = None,
    extrusion: Optional[float] = None,
    comment: Optional[str] = None
) -> str:
    """
    Generate a G2/G3 arc move command.

    Args:
        direction: "G2" for CW, "G3" for CCW
        x: Destination X coordinate
        y: Destination Y coordinate
        i: I offset (X distance from start to arc center)
        j: J offset (Y distance from start to arc center)
        feed: Feed rate (optional)
        z: Destination Z coordinate (optional, helical)
        extrusion: Absolute E value (optional)
        comment: Inline comment (optional)

    Returns:
        Arc command string
    """
    parts = [
        direction,
        f"X{format_coordinate(x)}",
        f"Y{format_coordinate(y)}"
    ]
    if z is not None:
        parts.append(f"Z{format_coordinate(z)}")
    parts.append(f"I{format_coordinate(i)}")
    parts.append(f"J{format_coordinate(j)}")
    if feed is not None:
        parts.append(f"F{format_feed(feed)}")
    if extrusion is not None:
        parts.append(f"E{format_extrusion(extrusion)}")
    return _with_comment(parts, comment)


def render_segment(segment: MotionSegment) -> str:
    """Render one motion segment as a single G-code line."""
    if isinstance(segment, RapidMove):
        return generate_rapid_move(segment.x, segment.y, segment.z, segment.comment)
    if isinstance(segment, LinearCut):
        return generate_linear_move(
            segment.x, segment.y, segment.z, segment.f, segment.e, segment.comment
        )
    if isinstance(segment, ArcCut):
        return generate_arc_move(
            segment.command, segment.x, segment.y, segment.i, segment.j,
            feed=segment.f, z=segment.z, extrusion=segment.e, comment=segment.comment
        )
    if isinstance(segment, RawLine):
        return _with_comment([segment.code] if segment.code else [], segment.comment)
    if isinstance(segment, Comment):
        return f"; {segment.text}"
    raise TypeError(f"Unknown segment type: {type(segment).__name__}")


def render_segments(segments: List[MotionSegment]) -> List[str]:
    return [render_segment(segment) for segment in segments]


def render_program(program: Program) -> str:
    """
    Render a full program to text.

    Header comments come first, followed by a blank line, then the
    segments and the footer comments. The text ends with a newline.
    """
    lines = [f"; {text}" for text in program.header]
    if lines:
        lines.append("")
    lines.extend(render_segments(program.segments))
    lines.extend(f"; {text}" for text in program.footer)
    return "\n".join(lines) + "\n"


def sanitize_program_name(name: str) -> str:
    """
    Clean a program name for filesystem use.

    - Replace spaces with underscores
    - Remove special characters except underscores and hyphens
    - Truncate to 50 characters max

    Falls back to ``program`` when nothing is left.
    """
    sanitized = name.replace(" ", "_")
    sanitized = re.sub(r'[^a-zA-Z0-9_-]', '', sanitized)
    return sanitized[:50] or 'program'
