"""G-code generation entry point.

This module ties the machine assemblers, the post-processing passes and
the emitter together:
- Mill programs from the per-shape builders
- Lathe turning cycles
- 3D printer layer strategies
- Optional redundant move removal and arc fitting
"""
import logging

from .machines import ASSEMBLERS
from .models import GenerationRequest, GenerationResult, Program
from .utils.gcode_format import render_program
from .utils.optimize import create_pipeline
from .utils.validators import validate_settings

logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = "G-code generation failed. Check the settings."


class ToolpathGenerator:
    """Generates a complete program for one request."""

    ASSEMBLERS = ASSEMBLERS

    def __init__(self, request: GenerationRequest):
        self.request = request
        self.settings = request.settings

    def build_program(self) -> Program:
        """
        Assemble the program and run the enabled post-processing passes.

        Raises:
            ValueError: If the machine type has no assembler
        """
        assembler_class = self.ASSEMBLERS.get(self.settings.machine_type)
        if assembler_class is None:
            raise ValueError(f"Unknown machine type: {self.settings.machine_type}")

        program = assembler_class(self.request).assemble()
        before = len(program.segments)
        program.segments = create_pipeline(self.settings).run(program.segments)
        removed = before - len(program.segments)
        if removed:
            logger.debug(f"Post-processing removed {removed} segments")
        return program

    def generate(self) -> GenerationResult:
        """
        Generate the G-code text.

        Any failure is logged and reported through the result; partial
        output is discarded.

        Returns:
            GenerationResult with the text, the structured program and warnings
        """
        try:
            _, warnings = validate_settings(self.settings)
            program = self.build_program()
            gcode = render_program(program)
        except Exception:
            logger.exception(
                f"Generation failed for {self.settings.machine_type}/{self.settings.operation_type}"
            )
            return GenerationResult(success=False, error=GENERATION_FAILED_MESSAGE)

        logger.info(
            f"Generated {self.settings.machine_type} program "
            f"({self.settings.operation_type}, {len(program.segments)} segments)"
        )
        return GenerationResult(success=True, gcode=gcode, program=program, warnings=warnings)


def generate_gcode(request: GenerationRequest) -> GenerationResult:
    """Shortcut for ``ToolpathGenerator(request).generate()``."""
    return ToolpathGenerator(request).generate()
