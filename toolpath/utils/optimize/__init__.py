"""Toolpath post-processing passes.

Each pass implements the PostProcessor protocol and can be enabled or
disabled independently through the settings.

Passes:
- RedundantMoveFilter: Drops no-op and sub-tolerance moves
- ArcFitter: Replaces pairs of equal planar lines with an arc

Usage:
    from toolpath.utils.optimize import create_pipeline

    pipeline = create_pipeline(settings)
    segments = pipeline.run(program.segments)
"""
from .base import (
    PostProcessor,
    PostProcessingPipeline,
    create_pipeline,
)
from .dedup import RedundantMoveFilter
from .arc_fit import ArcFitter
from .text import optimize_gcode_text

__all__ = [
    'PostProcessor',
    'PostProcessingPipeline',
    'create_pipeline',
    'RedundantMoveFilter',
    'ArcFitter',
    'optimize_gcode_text',
]
