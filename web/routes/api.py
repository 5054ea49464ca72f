"""API routes - JSON endpoints for the frontend."""
from flask import Blueprint, request, send_file
import io

from toolpath.settings_parser import ParseError
from web.services.gcode_service import GCodeService
from web.services.preset_service import PresetService
from web.utils.responses import success_response, error_response, validation_response

api_bp = Blueprint('api', __name__)


@api_bp.route('/generate', methods=['POST'])
def generate_gcode():
    """Generate G-code from settings and geometry."""
    data = request.get_json(silent=True)
    if not data:
        return error_response('No data provided')

    result = GCodeService.generate(data)
    if not result.success:
        return error_response(result.error)

    return success_response(data=GCodeService.to_response_data(result))


@api_bp.route('/validate', methods=['POST'])
def validate_request():
    """Validate settings and geometry before generating G-code."""
    data = request.get_json(silent=True)
    if not data:
        return error_response('No data provided')

    errors = GCodeService.validate(data)
    return validation_response(errors)


@api_bp.route('/optimize', methods=['POST'])
def optimize_gcode():
    """Remove redundant moves and fit arcs in existing G-code."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data.get('gcode'):
        return error_response('No G-code provided')

    try:
        gcode, removed = GCodeService.optimize(data)
    except ParseError as e:
        return error_response(str(e))

    return success_response(data={'gcode': gcode, 'removed_lines': removed})


@api_bp.route('/preview', methods=['POST'])
def preview_toolpath():
    """Render a PNG preview of the toolpath."""
    data = request.get_json(silent=True)
    if not data:
        return error_response('No data provided')

    png, error = GCodeService.preview(data)
    if error:
        return error_response(error)

    return send_file(io.BytesIO(png), mimetype='image/png')


@api_bp.route('/presets', methods=['GET'])
def list_presets():
    """List saved setup presets."""
    presets = PresetService.get_all()
    return success_response(data=[PresetService.to_dict(p) for p in presets])


@api_bp.route('/presets', methods=['POST'])
def create_preset():
    """Create a setup preset."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data.get('name'):
        return error_response('Preset name is required')

    preset = PresetService.create(data)
    return success_response(data=PresetService.to_dict(preset), message='Preset created')


@api_bp.route('/presets/<preset_id>', methods=['GET'])
def get_preset(preset_id):
    """Get a single preset."""
    preset = PresetService.get_as_dict(preset_id)
    if not preset:
        return error_response('Preset not found', 404)

    return success_response(data=preset)


@api_bp.route('/presets/<preset_id>/save', methods=['POST'])
def save_preset(preset_id):
    """Save preset data from the editor."""
    data = request.get_json(silent=True)
    if not data:
        return error_response('No data provided')

    preset = PresetService.save(preset_id, data)
    if not preset:
        return error_response('Preset not found', 404)

    return success_response(data={'modified_at': preset.modified_at.isoformat()})


@api_bp.route('/presets/<preset_id>', methods=['DELETE'])
def delete_preset(preset_id):
    """Delete a preset."""
    if not PresetService.delete(preset_id):
        return error_response('Preset not found', 404)

    return success_response(message='Preset deleted')


@api_bp.route('/presets/<preset_id>/generate', methods=['POST'])
def generate_preset(preset_id):
    """Generate G-code from a saved preset."""
    preset = PresetService.get(preset_id)
    if not preset:
        return error_response('Preset not found', 404)

    result = GCodeService.generate(PresetService.to_request_data(preset))
    if not result.success:
        return error_response(result.error)

    return success_response(data=GCodeService.to_response_data(result))


@api_bp.route('/presets/<preset_id>/download')
def download_preset(preset_id):
    """Download the generated G-code file for a preset."""
    preset = PresetService.get(preset_id)
    if not preset:
        return error_response('Preset not found', 404)

    gcode, filename, error = GCodeService.generate_download(
        PresetService.to_request_data(preset), preset.name
    )
    if error:
        return error_response(error)

    buffer = io.BytesIO(gcode.encode('utf-8'))
    buffer.seek(0)

    return send_file(
        buffer,
        mimetype='text/plain',
        as_attachment=True,
        download_name=filename
    )
