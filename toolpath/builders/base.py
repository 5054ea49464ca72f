"""Shared pieces for the per-shape toolpath builders.

Every builder takes a :class:`BuildContext` and returns a list of motion
segments. Points handed to the helpers here are already in machine
coordinates; builders run each local point through ``ctx.point``.
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..models import ArcCut, Comment, LinearCut, MachiningSettings, MotionSegment, RapidMove
from ..origin import OriginTransform
from ..utils.arc_utils import arc_command_for_direction, calculate_ij_offsets
from ..utils.gcode_format import format_coordinate
from ..utils.multipass import iter_z_levels


Point2 = Tuple[float, float]

APPROACH_CLEARANCE = 5.0


@dataclass
class BuildContext:
    """Settings and origin transform for one generation call."""
    settings: MachiningSettings
    transform: OriginTransform

    def point(self, x: float, y: float) -> Point2:
        """Local XY to machine XY."""
        return self.transform.xy(x, y)

    @property
    def arc_command(self) -> str:
        return arc_command_for_direction(self.settings.direction)


def level_comment(z: float, detail: Optional[str] = None) -> Comment:
    text = f"Z Level: {format_coordinate(z)}"
    if detail:
        text = f"{text}, {detail}"
    return Comment(text)


def iter_slice_levels(top: float, extent: float, ctx: BuildContext, include_top: bool = False):
    """
    Absolute slice heights from just below ``top`` down through ``extent``.

    With ``include_top`` the first slice is ``top`` itself.
    """
    if include_top:
        yield top
    for z in iter_z_levels(min(ctx.settings.depth, extent), ctx.settings.stepdown):
        yield top + z


def iter_rising_levels(bottom: float, extent: float, ctx: BuildContext):
    """Absolute slice heights from ``bottom`` up through ``extent``."""
    yield bottom
    for z in iter_z_levels(min(ctx.settings.depth, extent), ctx.settings.stepdown):
        yield bottom - z


def closed_pass(
    ctx: BuildContext,
    points: List[Point2],
    z: float,
    approach_z: Optional[float] = None,
    feed: Optional[float] = None,
    label: str = 'Corner'
) -> List[MotionSegment]:
    """
    Rapid to the first point, plunge to ``z`` and cut through the rest.

    Args:
        ctx: Build context
        points: Machine XY points; the first is the start, the last
            normally repeats it to close the loop
        z: Cutting depth
        approach_z: Z for the approach rapid (None keeps the current Z)
        feed: Cutting feed (defaults to settings.feedrate)
        label: Comment prefix for each cut
    """
    settings = ctx.settings
    feed = settings.feedrate if feed is None else feed
    start = points[0]
    segments: List[MotionSegment] = [
        RapidMove(x=start[0], y=start[1], z=approach_z, comment='Move to start position'),
        LinearCut(z=z, f=settings.plungerate, comment='Plunge to cutting depth'),
    ]
    for index, (x, y) in enumerate(points[1:], start=1):
        segments.append(LinearCut(x=x, y=y, f=feed, comment=f"{label} {index}"))
    return segments


def full_circle(
    ctx: BuildContext,
    center: Point2,
    radius: float,
    z: float,
    approach_z: Optional[float] = None,
    command: Optional[str] = None,
    feed: Optional[float] = None,
    comment: str = 'Full circle'
) -> List[MotionSegment]:
    """
    Rapid to (center.x + radius, center.y), plunge and cut one full circle.

    The arc command defaults to the mapping for the configured direction.
    """
    settings = ctx.settings
    start = (center[0] + radius, center[1])
    i, j = calculate_ij_offsets(start, center)
    return [
        RapidMove(x=start[0], y=start[1], z=approach_z, comment='Move to start position'),
        LinearCut(z=z, f=settings.plungerate, comment='Plunge to cutting depth'),
        ArcCut(
            command=command or ctx.arc_command,
            x=start[0], y=start[1], i=i, j=j,
            f=settings.feedrate if feed is None else feed,
            comment=comment,
        ),
    ]
