"""Shared utility modules for toolpath generation."""

from .multipass import (
    calculate_num_passes,
    calculate_step_count,
    iter_passes,
    iter_z_levels,
)
from .tool_compensation import (
    calculate_offset_radius,
    calculate_offset_size,
    get_compensation_code,
)
from .arc_utils import (
    arc_command_for_direction,
    calculate_ij_offsets,
    close_loop,
)
from .gcode_format import (
    format_coordinate,
    format_extrusion,
    format_feed,
    generate_rapid_move,
    generate_linear_move,
    generate_arc_move,
    render_program,
    render_segment,
    sanitize_program_name,
)
from .gcode_parser import parse_gcode, parse_line
from .validators import (
    validate_feed_rates,
    validate_geometry,
    validate_settings,
    validate_stepdown,
)
from .file_manager import (
    create_output_directory,
    build_program_path,
    write_program_file,
)

__all__ = [
    # multipass
    'calculate_num_passes',
    'calculate_step_count',
    'iter_passes',
    'iter_z_levels',
    # tool_compensation
    'calculate_offset_radius',
    'calculate_offset_size',
    'get_compensation_code',
    # arc_utils
    'arc_command_for_direction',
    'calculate_ij_offsets',
    'close_loop',
    # gcode_format
    'format_coordinate',
    'format_extrusion',
    'format_feed',
    'generate_rapid_move',
    'generate_linear_move',
    'generate_arc_move',
    'render_program',
    'render_segment',
    'sanitize_program_name',
    # gcode_parser
    'parse_gcode',
    'parse_line',
    # validators
    'validate_feed_rates',
    'validate_geometry',
    'validate_settings',
    'validate_stepdown',
    # file_manager
    'create_output_directory',
    'build_program_path',
    'write_program_file',
]
