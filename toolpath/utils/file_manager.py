"""Output directory and file management utilities."""
import os

from .gcode_format import sanitize_program_name


GCODE_EXTENSION = '.gcode'


def create_output_directory(base_path: str) -> str:
    """
    Create the output directory for generated programs.

    Args:
        base_path: Output directory path

    Returns:
        The same path, now guaranteed to exist
    """
    os.makedirs(base_path, exist_ok=True)
    return base_path


def build_program_path(directory: str, name: str) -> str:
    """Path of ``<directory>/<sanitized name>.gcode``."""
    return os.path.join(directory, f"{sanitize_program_name(name)}{GCODE_EXTENSION}")


def write_program_file(directory: str, name: str, content: str) -> str:
    """
    Write a G-code program to the output directory.

    Args:
        directory: Output directory
        name: Program name (sanitized before use)
        content: G-code content

    Returns:
        Full path to the written file
    """
    create_output_directory(directory)
    file_path = build_program_path(directory, name)
    with open(file_path, 'w') as f:
        f.write(content)
    return file_path
