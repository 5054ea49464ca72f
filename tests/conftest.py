"""Test configuration and fixtures."""
import pytest

from app import create_app
from toolpath.models import (
    CircleGeometry,
    GenerationRequest,
    LatheSettings,
    MachiningSettings,
    PrinterSettings,
    RectangleGeometry,
)
from web.extensions import db
from web.models import SetupPreset


class TestConfig:
    """Test configuration."""
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    GCODE_OUTPUT_DIR = 'output'
    LOG_LEVEL = 'WARNING'


@pytest.fixture
def app(tmp_path):
    """Create and configure a test application instance."""
    config = type('TmpConfig', (TestConfig,), {'GCODE_OUTPUT_DIR': str(tmp_path / 'output')})
    app = create_app(config)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """Create a test CLI runner."""
    return app.test_cli_runner()


@pytest.fixture
def db_session(app):
    """Provide a database session for tests."""
    with app.app_context():
        yield db.session


@pytest.fixture
def mill_settings():
    """Default mill settings: 6mm tool, 5mm deep in 1mm steps, outside offset."""
    return MachiningSettings()


@pytest.fixture
def mill_request(mill_settings):
    """Mill contour of the default 100 x 50 rectangle."""
    return GenerationRequest(settings=mill_settings, geometry=RectangleGeometry())


@pytest.fixture
def lathe_settings():
    """Lathe settings on 50 x 100 stock."""
    return MachiningSettings(
        machine_type='lathe',
        operation_type='facing',
        tool_type='turning',
        depth=2,
        stepdown=0.5,
        feedrate=200,
        rpm=1200,
        lathe=LatheSettings(stock_diameter=50, stock_length=100),
    )


@pytest.fixture
def printer_settings():
    """Printer settings with 0.2mm layers, 1mm tall."""
    return MachiningSettings(
        machine_type='printer',
        operation_type='standard',
        material='plastic',
        depth=1,
        printer=PrinterSettings(),
    )


@pytest.fixture
def printer_request(printer_settings):
    """Printer job on a 20 x 20 square footprint."""
    return GenerationRequest(settings=printer_settings, geometry=RectangleGeometry(width=20, height=20))


@pytest.fixture
def circle_request(mill_settings):
    return GenerationRequest(settings=mill_settings, geometry=CircleGeometry(radius=20))


@pytest.fixture
def sample_request_data():
    """Request body as sent by the browser (camelCase keys)."""
    return {
        'title': 'Bracket',
        'settings': {
            'machineType': 'mill',
            'operationType': 'contour',
            'toolDiameter': 6,
            'depth': 3,
            'stepdown': 1,
            'feedrate': 800,
            'plungerate': 300,
            'offset': 'outside',
            'direction': 'climb',
            'coolant': True,
        },
        'geometry': {'type': 'rectangle', 'width': 40, 'height': 20},
    }


@pytest.fixture
def sample_preset(app, sample_request_data):
    """Create a saved preset for testing."""
    with app.app_context():
        preset = SetupPreset(
            name='Test Bracket',
            machine_type='mill',
            settings=sample_request_data['settings'],
            geometry=sample_request_data['geometry'],
        )
        db.session.add(preset)
        db.session.commit()
        yield preset
