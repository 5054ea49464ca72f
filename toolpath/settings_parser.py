"""Request parsing: JSON dictionaries to settings and geometry records.

Keys may be camelCase (as sent by the browser) or snake_case. Printer
and lathe fields may be given flat on the settings object or nested
under ``printer`` / ``lathe``.
"""
import json
import re
from dataclasses import fields, replace
from typing import Any, Dict, Optional

from .models import (
    CircleGeometry,
    CustomGeometry,
    Geometry,
    GenerationRequest,
    LatheSettings,
    MACHINE_OPERATIONS,
    MachiningSettings,
    PolygonGeometry,
    PrinterSettings,
    RectangleGeometry,
    SelectedElement,
    SelectedGeometry,
    Workpiece,
)


class ParseError(Exception):
    """Custom exception for parsing errors."""
    pass


MACHINE_ALIASES = {'3dprinter': 'printer'}
BOOLEAN_STRINGS = {'true': True, 'yes': True, '1': True, 'false': False, 'no': False, '0': False}


def to_snake_case(name: str) -> str:
    """``toolDiameter`` -> ``tool_diameter``; ``originX`` -> ``origin_x``."""
    return re.sub(r'(?<!^)(?=[A-Z])', '_', name).lower()


def normalize_keys(data: Dict[str, Any], section: str = 'request') -> Dict[str, Any]:
    """Snake-case the keys of a JSON object; anything else is a ParseError."""
    if not isinstance(data, dict):
        raise ParseError(f"Field '{section}' must be an object, got {type(data).__name__}")
    return {to_snake_case(key): value for key, value in data.items()}


def _coerce(name: str, value: Any, default: Any) -> Any:
    """Convert ``value`` to the type of the field default."""
    if value is None:
        return default
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in BOOLEAN_STRINGS:
            return BOOLEAN_STRINGS[value.strip().lower()]
        if isinstance(value, (int, float)):
            return bool(value)
        raise ParseError(f"Field '{name}' must be true or false, got {value!r}")
    if isinstance(default, (int, float)):
        if isinstance(value, bool):
            raise ParseError(f"Field '{name}' must be a number, got {value!r}")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ParseError(f"Field '{name}' must be a number, got {value!r}")
        if isinstance(default, int) and number.is_integer():
            return int(number)
        return number
    return str(value)


def _build(record_class, data: Dict[str, Any]):
    """Instantiate a settings dataclass from the keys it knows about."""
    values = {}
    for f in fields(record_class):
        if f.name in data and f.name not in ('printer', 'lathe'):
            default = record_class.__dataclass_fields__[f.name].default
            values[f.name] = _coerce(f.name, data[f.name], default)
    return record_class(**values)


def parse_settings(data: Optional[Dict[str, Any]]) -> MachiningSettings:
    """
    Parse the settings object of a request.

    Args:
        data: Settings dictionary (camelCase or snake_case keys)

    Returns:
        MachiningSettings

    Raises:
        ParseError: On a non-numeric value, unknown machine type or an
            operation outside the machine's set
    """
    data = normalize_keys(data or {}, 'settings')
    machine = str(data.get('machine_type', 'mill')).lower()
    data['machine_type'] = MACHINE_ALIASES.get(machine, machine)

    operations = MACHINE_OPERATIONS.get(data['machine_type'])
    if operations is None:
        raise ParseError(f"Unknown machine type: {data['machine_type']}")
    if 'operation_type' not in data:
        data['operation_type'] = operations[0]
    if data['operation_type'] not in operations:
        raise ParseError(
            f"Operation '{data['operation_type']}' is not available for {data['machine_type']}"
        )

    printer_data = dict(data)
    printer_data.update(normalize_keys(data.get('printer') or {}, 'printer'))
    lathe_data = dict(data)
    lathe_data.update(normalize_keys(data.get('lathe') or {}, 'lathe'))

    return replace(
        _build(MachiningSettings, data),
        printer=_build(PrinterSettings, printer_data),
        lathe=_build(LatheSettings, lathe_data),
    )


ELEMENT_FLOAT_FIELDS = (
    'x', 'y', 'z', 'width', 'height', 'depth', 'length', 'radius', 'tube_radius',
    'x1', 'y1', 'x2', 'y2', 'start_angle', 'end_angle', 'radius_x', 'radius_y',
    'base_width', 'base_depth',
)


def parse_element(data: Optional[Dict[str, Any]]) -> Optional[SelectedElement]:
    """Parse a selected CAD element; ``None`` stays ``None``."""
    if not data:
        return None
    data = normalize_keys(data, 'element')
    if not data.get('type'):
        raise ParseError("Selected element has no type")

    values: Dict[str, Any] = {'type': str(data['type'])}
    for name in ELEMENT_FLOAT_FIELDS:
        if data.get(name) is not None:
            values[name] = _coerce(name, data[name], 0.0)
    if data.get('sides') is not None:
        values['sides'] = _coerce('sides', data['sides'], 0)
    for name in ('shape_type', 'text', 'direction'):
        if data.get(name) is not None:
            values[name] = str(data[name])
    return SelectedElement(**values)


def parse_geometry(data: Optional[Dict[str, Any]]) -> Geometry:
    """
    Parse the geometry object of a request.

    The variant is chosen by ``type`` (or ``kind``); rectangle is the default.

    Raises:
        ParseError: On an unknown geometry kind or a non-numeric dimension
    """
    data = normalize_keys(data or {}, 'geometry')
    kind = data.get('type') or data.get('kind') or 'rectangle'

    if kind == 'rectangle':
        return RectangleGeometry(
            width=_coerce('width', data.get('width'), RectangleGeometry.width),
            height=_coerce('height', data.get('height'), RectangleGeometry.height),
        )
    if kind == 'circle':
        return CircleGeometry(radius=_coerce('radius', data.get('radius'), CircleGeometry.radius))
    if kind == 'polygon':
        return PolygonGeometry(
            sides=_coerce('sides', data.get('sides'), PolygonGeometry.sides),
            radius=_coerce('radius', data.get('radius'), PolygonGeometry.radius),
        )
    if kind == 'custom':
        return CustomGeometry(text=str(data.get('text') or data.get('gcode') or ''))
    if kind == 'selected':
        return SelectedGeometry(element=parse_element(data.get('element')))
    raise ParseError(f"Unknown geometry type: {kind}")


def parse_workpiece(data: Optional[Dict[str, Any]]) -> Optional[Workpiece]:
    if not data:
        return None
    return _build(Workpiece, normalize_keys(data, 'workpiece'))


def parse_request(data: Optional[Dict[str, Any]]) -> GenerationRequest:
    """
    Parse a full generation request ``{settings, geometry, workpiece?, title?}``.

    Raises:
        ParseError: If any part of the request is malformed
    """
    if data is None:
        raise ParseError("Request body is empty")
    if not isinstance(data, dict):
        raise ParseError("Request body must be a JSON object")

    values = {
        'settings': parse_settings(data.get('settings')),
        'geometry': parse_geometry(data.get('geometry')),
        'workpiece': parse_workpiece(data.get('workpiece')),
    }
    if data.get('title'):
        values['title'] = str(data['title'])
    return GenerationRequest(**values)


def parse_job_file(file_path: str) -> GenerationRequest:
    """Read a JSON job file and parse it as a generation request."""
    try:
        with open(file_path, 'r') as f:
            content = f.read()
    except FileNotFoundError:
        raise ParseError(f"Input file not found: {file_path}")

    if not content.strip():
        raise ParseError("Input file is empty")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in {file_path}: {e}")
    return parse_request(data)
