"""Base classes for toolpath post-processing.

This module defines the protocol every post-processing pass implements
and the pipeline that chains them. Passes operate on motion segments,
never on text, so they run before the emitter.
"""
from dataclasses import dataclass, field
from typing import List, Protocol, TYPE_CHECKING

from ...models import MotionSegment

if TYPE_CHECKING:
    from ...models import MachiningSettings


class PostProcessor(Protocol):
    """Protocol for toolpath post-processing passes.

    Methods:
        process: Return a new segment list; the input is not modified
        is_enabled: Check if this pass should run
    """

    def process(self, segments: List[MotionSegment]) -> List[MotionSegment]:
        """Transform a segment list.

        Args:
            segments: Segments in execution order

        Returns:
            The transformed segment list
        """
        ...

    def is_enabled(self) -> bool:
        """Check if this pass is enabled based on settings.

        Returns:
            True if this pass should be applied
        """
        ...


@dataclass
class PostProcessingPipeline:
    """Runs the enabled post-processors in registration order.

    Example:
        pipeline = create_pipeline(settings)
        segments = pipeline.run(program.segments)
    """
    processors: List[PostProcessor] = field(default_factory=list)

    def register(self, processor: PostProcessor) -> None:
        """Append a pass to the pipeline.

        Args:
            processor: PostProcessor implementation to add
        """
        self.processors.append(processor)

    def run(self, segments: List[MotionSegment]) -> List[MotionSegment]:
        """Apply every enabled pass in turn.

        Args:
            segments: Segments in execution order

        Returns:
            Segments after all applicable passes
        """
        for processor in self.processors:
            if processor.is_enabled():
                segments = processor.process(segments)
        return segments


def create_pipeline(settings: 'MachiningSettings') -> PostProcessingPipeline:
    """Factory function to create the post-processing pipeline.

    Move deduplication runs before arc fitting so the fitter never sees
    zero-length moves.

    Args:
        settings: MachiningSettings with tolerance and the optimisation flags

    Returns:
        PostProcessingPipeline with both passes registered
    """
    # Import here to avoid circular imports
    from .dedup import RedundantMoveFilter
    from .arc_fit import ArcFitter

    pipeline = PostProcessingPipeline()
    pipeline.register(RedundantMoveFilter(settings))
    pipeline.register(ArcFitter(settings))
    return pipeline
