"""G-code generation service."""
import logging
from typing import Dict, List, Optional, Tuple

from flask import current_app

from toolpath.gcode_generator import ToolpathGenerator
from toolpath.models import GenerationRequest, GenerationResult
from toolpath.settings_parser import ParseError, parse_request
from toolpath.utils.file_manager import write_program_file
from toolpath.utils.gcode_format import sanitize_program_name
from toolpath.utils.optimize import optimize_gcode_text
from toolpath.utils.validators import validate_geometry, validate_settings
from toolpath.visualizer import render_preview_png

logger = logging.getLogger(__name__)


class GCodeService:
    """Service for G-code generation, validation and post-processing."""

    @staticmethod
    def validation_errors(gen_request: GenerationRequest) -> List[str]:
        """Blocking errors for an already parsed request."""
        errors, _ = validate_settings(gen_request.settings)
        if gen_request.settings.machine_type == 'mill':
            errors.extend(validate_geometry(gen_request.geometry))
        return errors

    @staticmethod
    def validate(data: Optional[Dict]) -> List[str]:
        """
        Validate a request body before generating G-code.

        Returns list of error messages (empty if valid).
        """
        try:
            gen_request = parse_request(data)
        except ParseError as e:
            return [str(e)]
        return GCodeService.validation_errors(gen_request)

    @staticmethod
    def prepare(data: Optional[Dict]) -> Tuple[Optional[GenerationRequest], Optional[str]]:
        """
        Parse and validate a request body.

        Returns:
            Tuple of (request, error message); one of them is None
        """
        try:
            gen_request = parse_request(data)
        except ParseError as e:
            return None, str(e)

        errors = GCodeService.validation_errors(gen_request)
        if errors:
            return None, '; '.join(errors)
        return gen_request, None

    @staticmethod
    def generate(data: Optional[Dict]) -> GenerationResult:
        """
        Parse, validate and generate.

        Parse and validation errors are reported through the result the
        same way as generation failures.
        """
        gen_request, error = GCodeService.prepare(data)
        if error:
            return GenerationResult(success=False, error=error)
        return ToolpathGenerator(gen_request).generate()

    @staticmethod
    def to_response_data(result: GenerationResult) -> Dict:
        return {
            'gcode': result.gcode,
            'warnings': result.warnings,
            'line_count': len(result.gcode.splitlines())
        }

    @staticmethod
    def optimize(data: Dict) -> Tuple[str, int]:
        """
        Post-process G-code text from the request body.

        Returns:
            Tuple of (optimized text, number of removed lines)

        Raises:
            ParseError: If the G-code is not text or the tolerance is not a
                positive number
        """
        gcode = data.get('gcode') or ''
        if not isinstance(gcode, str):
            raise ParseError(f"Field 'gcode' must be a string, got {type(gcode).__name__}")

        try:
            tolerance = float(data.get('tolerance', 0.01))
        except (TypeError, ValueError):
            raise ParseError(f"Field 'tolerance' must be a number, got {data.get('tolerance')!r}")
        if tolerance <= 0:
            raise ParseError("Tolerance must be positive")

        return optimize_gcode_text(
            gcode,
            tolerance=tolerance,
            remove_redundant=bool(data.get('remove_redundant', True)),
            fit_arcs=bool(data.get('fit_arcs', False))
        )

    @staticmethod
    def preview(data: Optional[Dict]) -> Tuple[Optional[bytes], Optional[str]]:
        """
        Render a PNG preview of the generated toolpath.

        Returns:
            Tuple of (png bytes, error message); one of them is None
        """
        gen_request, error = GCodeService.prepare(data)
        if error:
            return None, error

        result = ToolpathGenerator(gen_request).generate()
        if not result.success:
            return None, result.error
        return render_preview_png(result.program, gen_request.settings.machine_type), None

    @staticmethod
    def generate_download(data: Dict, name: str) -> Tuple[Optional[str], str, Optional[str]]:
        """
        Generate a program and write it to the output directory.

        Args:
            data: Request body (settings, geometry, workpiece)
            name: Program name used for the file name

        Returns:
            Tuple of (gcode, filename, error message)
        """
        filename = f"{sanitize_program_name(name)}.gcode"
        result = GCodeService.generate(data)
        if not result.success:
            return None, filename, result.error

        path = write_program_file(current_app.config['GCODE_OUTPUT_DIR'], name, result.gcode)
        logger.info(f"Wrote {path}")
        return result.gcode, filename, None
