"""Redundant move removal.

Drops motion lines that leave the machine exactly where it already is, or
that move it by less than the geometric tolerance.
"""
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple, TYPE_CHECKING

from ...models import ArcCut, LinearCut, MotionSegment, RapidMove, RawLine

if TYPE_CHECKING:
    from ...models import MachiningSettings


# G words that never move the machine or redefine its position
MODAL_SETUP_WORDS = ('G17', 'G18', 'G21', 'G40', 'G90')

Position = Tuple[Optional[float], Optional[float], Optional[float]]
UNKNOWN: Position = (None, None, None)


def _carry(current: Position, x, y, z) -> Position:
    return (
        current[0] if x is None else x,
        current[1] if y is None else y,
        current[2] if z is None else z,
    )


def _displacement(current: Position, target: Position) -> Optional[float]:
    """Euclidean distance, or None when a moved axis had no known value."""
    total = 0.0
    for before, after in zip(current, target):
        if before == after:
            continue
        if before is None or after is None:
            return None
        total += (after - before) ** 2
    return math.sqrt(total)


def invalidates_position(line: RawLine) -> bool:
    """True for raw G commands that may move or redefine the position (G28, G32, G92 ...)."""
    words = line.code.split()
    if not words:
        return False
    word = words[0].upper()
    return word.startswith('G') and word not in MODAL_SETUP_WORDS


@dataclass
class RedundantMoveFilter:
    """Removes no-op and sub-tolerance G0/G1 moves.

    The filter tracks (x, y, z, f), carrying unspecified axes forward.
    Dropped moves do not update that state, which makes the pass
    idempotent. Extruding moves and feed-only moves are always kept.

    Attributes:
        settings: MachiningSettings with tolerance and remove_redundant_moves
    """
    settings: 'MachiningSettings'

    def is_enabled(self) -> bool:
        return self.settings.remove_redundant_moves

    def process(self, segments: List[MotionSegment]) -> List[MotionSegment]:
        tolerance = self.settings.tolerance
        position: Position = UNKNOWN
        feed: Optional[float] = None
        kept: List[MotionSegment] = []

        for segment in segments:
            if isinstance(segment, RapidMove):
                target = _carry(position, segment.x, segment.y, segment.z)
                if target == position:
                    continue
                position = target

            elif isinstance(segment, LinearCut):
                target = _carry(position, segment.x, segment.y, segment.z)
                new_feed = feed if segment.f is None else segment.f
                has_axes = not (segment.x is None and segment.y is None and segment.z is None)
                if segment.e is None and has_axes and new_feed == feed:
                    if target == position:
                        continue
                    moved = _displacement(position, target)
                    if moved is not None and moved < tolerance:
                        continue
                position = target
                feed = new_feed

            elif isinstance(segment, ArcCut):
                position = _carry(position, segment.x, segment.y, segment.z)
                if segment.f is not None:
                    feed = segment.f

            elif isinstance(segment, RawLine) and invalidates_position(segment):
                position = UNKNOWN

            kept.append(segment)
        return kept
