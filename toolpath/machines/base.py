"""Base class for the per-machine program assemblers.

An assembler wraps the operation strategy for its machine with the
machine's setup and teardown blocks. Strategies are looked up in the
``operations`` dispatch table by ``settings.operation_type``.
"""
import logging
from datetime import datetime, UTC
from typing import Callable, Dict, List

from ..builders import BuildContext
from ..models import Comment, GenerationRequest, MotionSegment, Program
from ..origin import OriginTransform

logger = logging.getLogger(__name__)


class MachineAssembler:
    """Builds a :class:`Program` for one machine type."""

    machine_type = ''
    title = ''

    def __init__(self, request: GenerationRequest):
        self.request = request
        self.settings = request.settings
        self.geometry = request.geometry
        self.ctx = BuildContext(
            settings=request.settings,
            transform=OriginTransform(request.settings, request.geometry, request.workpiece),
        )

    @property
    def operations(self) -> Dict[str, Callable[[], List[MotionSegment]]]:
        """Operation type -> strategy method."""
        raise NotImplementedError

    def header(self) -> List[str]:
        raise NotImplementedError

    def setup(self) -> List[MotionSegment]:
        raise NotImplementedError

    def teardown(self) -> List[MotionSegment]:
        raise NotImplementedError

    def timestamp(self) -> str:
        generated_at = self.request.generated_at or datetime.now(UTC)
        return generated_at.isoformat()

    def body(self) -> List[MotionSegment]:
        """Run the strategy registered for the configured operation."""
        strategy = self.operations.get(self.settings.operation_type)
        if strategy is None:
            logger.warning(
                f"No {self.machine_type} strategy for operation '{self.settings.operation_type}'"
            )
            return [Comment(f"Unsupported operation: {self.settings.operation_type}")]
        return strategy()

    def assemble(self) -> Program:
        segments = self.setup()
        segments.extend(self.body())
        segments.extend(self.teardown())
        return Program(header=self.header(), segments=segments)
