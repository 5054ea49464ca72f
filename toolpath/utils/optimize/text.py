"""Post-processing for G-code text received from outside the generator."""
from typing import Tuple

from ...models import MachiningSettings
from ..gcode_format import render_segments
from ..gcode_parser import parse_gcode
from .base import create_pipeline


def optimize_gcode_text(
    text: str,
    tolerance: float = 0.01,
    remove_redundant: bool = True,
    fit_arcs: bool = False
) -> Tuple[str, int]:
    """
    Run the post-processing pipeline over a G-code program.

    Motion lines are re-emitted in the generator's number format; every
    other line is kept as it was.

    Args:
        text: G-code program text
        tolerance: Geometric tolerance (mm)
        remove_redundant: Enable redundant move removal
        fit_arcs: Enable line-to-arc fitting

    Returns:
        Tuple of (optimized text, number of lines removed)
    """
    settings = MachiningSettings(
        tolerance=tolerance,
        remove_redundant_moves=remove_redundant,
        fit_arcs=fit_arcs,
    )
    segments = parse_gcode(text)
    optimized = create_pipeline(settings).run(segments)
    lines = render_segments(optimized)
    return "\n".join(lines) + "\n", len(segments) - len(optimized)
