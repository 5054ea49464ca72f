"""Tests for request parsing."""
import json

import pytest

from toolpath.models import (
    CircleGeometry,
    CustomGeometry,
    PolygonGeometry,
    RectangleGeometry,
    SelectedGeometry,
    Workpiece,
)
from toolpath.settings_parser import (
    ParseError,
    normalize_keys,
    parse_element,
    parse_geometry,
    parse_job_file,
    parse_request,
    parse_settings,
    parse_workpiece,
    to_snake_case,
)


class TestKeyNormalization:
    """Tests for camelCase key handling."""

    @pytest.mark.parametrize("name,expected", [
        ('toolDiameter', 'tool_diameter'),
        ('originX', 'origin_x'),
        ('tool_diameter', 'tool_diameter'),
        ('depth', 'depth'),
    ])
    def test_to_snake_case(self, name, expected):
        assert to_snake_case(name) == expected

    def test_normalize_keys(self):
        assert normalize_keys({'feedRate': 1, 'rpm': 2}) == {'feed_rate': 1, 'rpm': 2}

    @pytest.mark.parametrize("value", [[1], 'mill', 3])
    def test_normalize_keys_rejects_non_objects(self, value):
        with pytest.raises(ParseError, match="Field 'settings' must be an object"):
            normalize_keys(value, 'settings')


class TestParseSettings:
    """Tests for parse_settings."""

    def test_defaults(self):
        settings = parse_settings(None)
        assert settings.machine_type == 'mill'
        assert settings.operation_type == 'contour'
        assert settings.tool_diameter == 6

    def test_camel_case_values(self):
        settings = parse_settings({'toolDiameter': '3.175', 'stepdown': 0.5, 'coolant': 'false'})
        assert settings.tool_diameter == 3.175
        assert settings.stepdown == 0.5
        assert settings.coolant is False

    def test_integer_fields_stay_integers(self):
        settings = parse_settings({'rpm': '12000', 'flutes': 4.0})
        assert settings.rpm == 12000
        assert isinstance(settings.rpm, int)
        assert settings.flutes == 4

    def test_printer_alias(self):
        settings = parse_settings({'machineType': '3dprinter', 'operationType': 'vase'})
        assert settings.machine_type == 'printer'
        assert settings.operation_type == 'vase'

    def test_operation_defaults_to_first_for_machine(self):
        assert parse_settings({'machineType': 'lathe'}).operation_type == 'facing'
        assert parse_settings({'machineType': 'printer'}).operation_type == 'standard'

    def test_flat_printer_fields(self):
        settings = parse_settings({'machineType': 'printer', 'layerHeight': 0.1, 'printTemperature': 215})
        assert settings.printer.layer_height == 0.1
        assert settings.printer.print_temperature == 215

    def test_nested_lathe_fields(self):
        settings = parse_settings({
            'machineType': 'lathe',
            'lathe': {'stockDiameter': 30, 'spindleDirection': 'ccw'},
        })
        assert settings.lathe.stock_diameter == 30
        assert settings.lathe.spindle_direction == 'ccw'
        assert settings.lathe.stock_length == 100

    def test_unknown_machine(self):
        with pytest.raises(ParseError, match="Unknown machine type: plasma"):
            parse_settings({'machineType': 'plasma'})

    def test_operation_not_available(self):
        with pytest.raises(ParseError, match="not available for lathe"):
            parse_settings({'machineType': 'lathe', 'operationType': 'pocket'})

    def test_non_numeric_value(self):
        with pytest.raises(ParseError, match="'depth' must be a number"):
            parse_settings({'depth': 'deep'})

    def test_boolean_for_number(self):
        with pytest.raises(ParseError):
            parse_settings({'depth': True})

    def test_invalid_boolean(self):
        with pytest.raises(ParseError, match="must be true or false"):
            parse_settings({'coolant': 'maybe'})

    def test_nested_printer_must_be_object(self):
        with pytest.raises(ParseError, match="Field 'printer' must be an object, got list"):
            parse_settings({'machineType': 'printer', 'printer': [0.4]})


class TestParseGeometry:
    """Tests for parse_geometry and parse_element."""

    def test_default_rectangle(self):
        assert parse_geometry(None) == RectangleGeometry(100, 50)

    def test_rectangle(self):
        assert parse_geometry({'type': 'rectangle', 'width': '40', 'height': 20}) == RectangleGeometry(40, 20)

    def test_circle(self):
        assert parse_geometry({'type': 'circle', 'radius': 12.5}) == CircleGeometry(12.5)

    def test_polygon(self):
        assert parse_geometry({'kind': 'polygon', 'sides': 8}) == PolygonGeometry(sides=8, radius=30)

    def test_custom_accepts_gcode_key(self):
        assert parse_geometry({'type': 'custom', 'gcode': 'G0 X0'}) == CustomGeometry('G0 X0')

    def test_selected_element(self):
        geometry = parse_geometry({
            'type': 'selected',
            'element': {'type': 'torus', 'x': 1, 'radius': 30, 'tubeRadius': 8},
        })
        assert isinstance(geometry, SelectedGeometry)
        assert geometry.element.type == 'torus'
        assert geometry.element.tube_radius == 8
        assert geometry.element.width is None

    def test_selected_without_element(self):
        assert parse_geometry({'type': 'selected'}) == SelectedGeometry(None)

    def test_element_without_type(self):
        with pytest.raises(ParseError, match="no type"):
            parse_element({'x': 1})

    def test_element_must_be_object(self):
        with pytest.raises(ParseError, match="Field 'element' must be an object, got str"):
            parse_geometry({'type': 'selected', 'element': 'cone'})

    def test_element_sides_is_integer(self):
        element = parse_element({'type': 'polygon', 'sides': '5'})
        assert element.sides == 5

    def test_unknown_geometry(self):
        with pytest.raises(ParseError, match="Unknown geometry type: spline"):
            parse_geometry({'type': 'spline'})


class TestParseRequest:
    """Tests for parse_request, parse_workpiece and parse_job_file."""

    def test_full_request(self, sample_request_data):
        request = parse_request(sample_request_data)
        assert request.title == 'Bracket'
        assert request.settings.depth == 3
        assert request.geometry == RectangleGeometry(40, 20)
        assert request.workpiece is None

    def test_workpiece(self):
        assert parse_workpiece({'width': 120, 'height': 60, 'depth': 20}) == Workpiece(120, 60, 20)
        assert parse_workpiece(None) is None

    def test_default_title(self):
        assert parse_request({}).title == 'CNC Program'

    def test_empty_body(self):
        with pytest.raises(ParseError, match="empty"):
            parse_request(None)

    def test_non_object_body(self):
        with pytest.raises(ParseError, match="JSON object"):
            parse_request([1, 2])

    def test_job_file(self, tmp_path, sample_request_data):
        path = tmp_path / 'job.json'
        path.write_text(json.dumps(sample_request_data))
        assert parse_job_file(str(path)).settings.tool_diameter == 6

    def test_missing_job_file(self, tmp_path):
        with pytest.raises(ParseError, match="not found"):
            parse_job_file(str(tmp_path / 'missing.json'))

    def test_empty_job_file(self, tmp_path):
        path = tmp_path / 'empty.json'
        path.write_text('  \n')
        with pytest.raises(ParseError, match="empty"):
            parse_job_file(str(path))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / 'bad.json'
        path.write_text('{"settings": ')
        with pytest.raises(ParseError, match="Invalid JSON"):
            parse_job_file(str(path))
