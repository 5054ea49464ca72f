"""Line-to-arc fitting.

Replaces two consecutive, equally long planar G1 segments with a single
arc through their end point.
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple, TYPE_CHECKING

from ...models import ArcCut, LinearCut, MotionSegment, RapidMove, RawLine
from ..arc_utils import calculate_ij_offsets, cross_product, distance
from .dedup import UNKNOWN, Position, invalidates_position

if TYPE_CHECKING:
    from ...models import MachiningSettings


@dataclass
class ArcFitter:
    """Fits arcs over a sliding window of three G1 endpoints.

    With endpoints p0, p1, p2 buffered, the pair p0->p1->p2 becomes one
    arc when both segments have the same length (within tolerance) and
    the points are not collinear. The arc centre is the midpoint of p0
    and p2. Otherwise the oldest line is emitted and the window slides.

    Attributes:
        settings: MachiningSettings with tolerance and fit_arcs
    """
    settings: 'MachiningSettings'

    def is_enabled(self) -> bool:
        return self.settings.fit_arcs

    def try_fit(self, window: List[Tuple[LinearCut, Tuple[float, float]]]) -> Optional[ArcCut]:
        """
        Build the arc replacing the last two lines of a full window.

        Args:
            window: Three (segment, endpoint) pairs

        Returns:
            The fitted ArcCut, or None when the points do not qualify
        """
        tolerance = self.settings.tolerance
        (_, p0), (middle, p1), (last, p2) = window
        if abs(distance(p0, p1) - distance(p1, p2)) > tolerance:
            return None
        cross = cross_product(p0, p1, p2)
        if abs(cross) <= tolerance ** 2:
            return None

        center = ((p0[0] + p2[0]) / 2, (p0[1] + p2[1]) / 2)
        i, j = calculate_ij_offsets(p0, center)
        return ArcCut(
            command='G3' if cross > 0 else 'G2',
            x=p2[0],
            y=p2[1],
            i=i,
            j=j,
            f=last.f if last.f is not None else middle.f,
            comment='Fitted arc',
        )

    def process(self, segments: List[MotionSegment]) -> List[MotionSegment]:
        output: List[MotionSegment] = []
        window: List[Tuple[LinearCut, Tuple[float, float]]] = []
        position: Position = UNKNOWN

        def flush():
            output.extend(segment for segment, _ in window)
            window.clear()

        for segment in segments:
            if isinstance(segment, LinearCut):
                x = position[0] if segment.x is None else segment.x
                y = position[1] if segment.y is None else segment.y
                planar = (
                    segment.e is None
                    and x is not None
                    and y is not None
                    and position[2] is not None
                    and (segment.z is None or segment.z == position[2])
                    and (segment.x is not None or segment.y is not None)
                )
                if planar:
                    window.append((segment, (x, y)))
                    position = (x, y, position[2])
                    if len(window) == 3:
                        arc = self.try_fit(window)
                        if arc is not None:
                            output.append(window[0][0])
                            output.append(arc)
                            window.clear()
                        else:
                            output.append(window.pop(0)[0])
                    continue
                flush()
                position = (x, y, position[2] if segment.z is None else segment.z)

            else:
                flush()
                if isinstance(segment, (RapidMove, ArcCut)):
                    position = (
                        position[0] if segment.x is None else segment.x,
                        position[1] if segment.y is None else segment.y,
                        position[2] if segment.z is None else segment.z,
                    )
                elif isinstance(segment, RawLine) and invalidates_position(segment):
                    position = UNKNOWN

            output.append(segment)

        flush()
        return output
