"""Setup preset management service."""
from datetime import datetime, UTC
from typing import Dict, List, Optional
import uuid

from web.extensions import db
from web.models import SetupPreset


DEFAULT_GEOMETRY = {'type': 'rectangle', 'width': 100, 'height': 50}


def _machine_type(settings: Dict) -> str:
    machine = settings.get('machineType') or settings.get('machine_type') or 'mill'
    return 'printer' if machine == '3dprinter' else machine


class PresetService:
    """Service for managing setup presets."""

    @staticmethod
    def get_all() -> List[SetupPreset]:
        """Get all presets, ordered by modified_at descending."""
        return SetupPreset.query.order_by(SetupPreset.modified_at.desc()).all()

    @staticmethod
    def get(preset_id: str) -> Optional[SetupPreset]:
        """Get a single preset by UUID."""
        return SetupPreset.query.get(preset_id)

    @staticmethod
    def to_dict(preset: SetupPreset) -> Dict:
        return {
            'id': preset.id,
            'name': preset.name,
            'machine_type': preset.machine_type,
            'settings': preset.settings or {},
            'geometry': preset.geometry or {},
            'workpiece': preset.workpiece,
            'created_at': preset.created_at.isoformat() if preset.created_at else None,
            'modified_at': preset.modified_at.isoformat() if preset.modified_at else None
        }

    @staticmethod
    def get_as_dict(preset_id: str) -> Optional[Dict]:
        """Get a preset as dict for JSON serialization."""
        preset = PresetService.get(preset_id)
        if not preset:
            return None
        return PresetService.to_dict(preset)

    @staticmethod
    def create(data: Dict) -> SetupPreset:
        """Create a new preset; geometry defaults to the 100 x 50 rectangle."""
        settings = data.get('settings') or {}
        preset = SetupPreset(
            id=str(uuid.uuid4()),
            name=data['name'],
            machine_type=_machine_type(settings),
            settings=settings,
            geometry=data.get('geometry') or DEFAULT_GEOMETRY.copy(),
            workpiece=data.get('workpiece')
        )
        db.session.add(preset)
        db.session.commit()
        return preset

    @staticmethod
    def save(preset_id: str, data: Dict) -> Optional[SetupPreset]:
        """Update a preset from editor data."""
        preset = SetupPreset.query.get(preset_id)
        if not preset:
            return None

        if 'name' in data:
            preset.name = data['name']
        if 'settings' in data:
            preset.settings = data['settings']
            preset.machine_type = _machine_type(data['settings'] or {})
        if 'geometry' in data:
            preset.geometry = data['geometry']
        if 'workpiece' in data:
            preset.workpiece = data['workpiece']

        preset.modified_at = datetime.now(UTC)
        db.session.commit()
        return preset

    @staticmethod
    def delete(preset_id: str) -> bool:
        """Delete a preset."""
        preset = SetupPreset.query.get(preset_id)
        if not preset:
            return False

        db.session.delete(preset)
        db.session.commit()
        return True

    @staticmethod
    def to_request_data(preset: SetupPreset) -> Dict:
        """The preset in the body shape accepted by the generate endpoint."""
        return {
            'title': preset.name,
            'settings': preset.settings or {},
            'geometry': preset.geometry or {},
            'workpiece': preset.workpiece
        }
