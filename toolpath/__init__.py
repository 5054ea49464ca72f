"""Toolpath and G-code generation for mills, lathes and 3D printers.

Usage:
    from toolpath import GenerationRequest, MachiningSettings, ToolpathGenerator

    request = GenerationRequest(settings=MachiningSettings(depth=3))
    result = ToolpathGenerator(request).generate()
"""
from .gcode_generator import GENERATION_FAILED_MESSAGE, ToolpathGenerator, generate_gcode
from .models import (
    CircleGeometry,
    CustomGeometry,
    GenerationRequest,
    GenerationResult,
    LatheSettings,
    MachiningSettings,
    PolygonGeometry,
    PrinterSettings,
    Program,
    RectangleGeometry,
    SelectedElement,
    SelectedGeometry,
    Workpiece,
)
from .settings_parser import ParseError, parse_request

__all__ = [
    'GENERATION_FAILED_MESSAGE',
    'ToolpathGenerator',
    'generate_gcode',
    'CircleGeometry',
    'CustomGeometry',
    'GenerationRequest',
    'GenerationResult',
    'LatheSettings',
    'MachiningSettings',
    'PolygonGeometry',
    'PrinterSettings',
    'Program',
    'RectangleGeometry',
    'SelectedElement',
    'SelectedGeometry',
    'Workpiece',
    'ParseError',
    'parse_request',
]
