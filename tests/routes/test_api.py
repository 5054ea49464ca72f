"""Tests for API routes."""
import json

from web.models import SetupPreset


class TestGenerateAPI:
    """Tests for POST /api/generate endpoint."""

    def test_generate(self, client, sample_request_data):
        response = client.post(
            '/api/generate',
            data=json.dumps(sample_request_data),
            content_type='application/json'
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['status'] == 'ok'
        assert data['data']['gcode'].startswith('; Toolpath Generator - Mill program')
        assert data['data']['line_count'] > 0
        assert data['data']['warnings'] == []

    def test_generate_printer(self, client):
        response = client.post(
            '/api/generate',
            data=json.dumps({
                'settings': {'machineType': '3dprinter', 'operationType': 'brim', 'depth': 0.2},
                'geometry': {'type': 'circle', 'radius': 10}
            }),
            content_type='application/json'
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert '; Brim loop 5' in data['data']['gcode']

    def test_generate_no_data(self, client):
        """Test generating without a body returns an error."""
        response = client.post('/api/generate', content_type='application/json')

        assert response.status_code == 400
        data = json.loads(response.data)
        assert data['message'] == 'No data provided'

    def test_generate_invalid_settings(self, client):
        response = client.post(
            '/api/generate',
            data=json.dumps({'settings': {'machineType': 'lathe', 'operationType': 'pocket'}}),
            content_type='application/json'
        )

        assert response.status_code == 400
        data = json.loads(response.data)
        assert data['status'] == 'error'
        assert data['message'] == "Operation 'pocket' is not available for lathe"

    def test_generate_settings_not_an_object(self, client):
        response = client.post(
            '/api/generate',
            data=json.dumps({'settings': [1], 'geometry': {'type': 'circle', 'radius': 10}}),
            content_type='application/json'
        )

        assert response.status_code == 400
        data = json.loads(response.data)
        assert data['status'] == 'error'
        assert data['message'] == "Field 'settings' must be an object, got list"

    def test_generate_geometry_not_an_object(self, client, sample_request_data):
        sample_request_data['geometry'] = 'circle'
        response = client.post(
            '/api/generate',
            data=json.dumps(sample_request_data),
            content_type='application/json'
        )

        assert response.status_code == 400
        assert json.loads(response.data)['message'] == "Field 'geometry' must be an object, got str"


class TestValidateAPI:
    """Tests for POST /api/validate endpoint."""

    def test_valid(self, client, sample_request_data):
        response = client.post(
            '/api/validate',
            data=json.dumps(sample_request_data),
            content_type='application/json'
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data == {'valid': True, 'errors': []}

    def test_invalid(self, client, sample_request_data):
        sample_request_data['geometry'] = {'type': 'rectangle', 'width': 0, 'height': 10}
        response = client.post(
            '/api/validate',
            data=json.dumps(sample_request_data),
            content_type='application/json'
        )

        data = json.loads(response.data)
        assert data['valid'] is False
        assert data['errors'] == ["Rectangle width and height must be positive"]


class TestOptimizeAPI:
    """Tests for POST /api/optimize endpoint."""

    def test_optimize(self, client):
        response = client.post(
            '/api/optimize',
            data=json.dumps({'gcode': "G0 X0 Y0 Z5\nG0 X0 Y0 Z5\nM30\n"}),
            content_type='application/json'
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['data'] == {'gcode': "G0 X0.000 Y0.000 Z5.000\nM30\n", 'removed_lines': 1}

    def test_optimize_without_gcode(self, client):
        response = client.post(
            '/api/optimize',
            data=json.dumps({'tolerance': 0.1}),
            content_type='application/json'
        )

        assert response.status_code == 400
        assert json.loads(response.data)['message'] == 'No G-code provided'

    def test_optimize_bad_tolerance(self, client):
        response = client.post(
            '/api/optimize',
            data=json.dumps({'gcode': "G0 Z5\n", 'tolerance': -1}),
            content_type='application/json'
        )

        assert response.status_code == 400
        assert json.loads(response.data)['message'] == 'Tolerance must be positive'

    def test_optimize_gcode_not_a_string(self, client):
        response = client.post(
            '/api/optimize',
            data=json.dumps({'gcode': ['G0 Z5']}),
            content_type='application/json'
        )

        assert response.status_code == 400
        assert json.loads(response.data)['message'] == "Field 'gcode' must be a string, got list"

    def test_optimize_body_not_an_object(self, client):
        response = client.post(
            '/api/optimize',
            data=json.dumps(['G0 Z5']),
            content_type='application/json'
        )

        assert response.status_code == 400
        assert json.loads(response.data)['message'] == 'No G-code provided'


class TestPreviewAPI:
    """Tests for POST /api/preview endpoint."""

    def test_preview(self, client, sample_request_data):
        response = client.post(
            '/api/preview',
            data=json.dumps(sample_request_data),
            content_type='application/json'
        )

        assert response.status_code == 200
        assert response.mimetype == 'image/png'
        assert response.data.startswith(b'\x89PNG')

    def test_preview_lathe(self, client):
        response = client.post(
            '/api/preview',
            data=json.dumps({'settings': {'machineType': 'lathe', 'operationType': 'turning'}}),
            content_type='application/json'
        )

        assert response.status_code == 200

    def test_preview_error(self, client):
        response = client.post(
            '/api/preview',
            data=json.dumps({'settings': {'depth': 'x'}}),
            content_type='application/json'
        )

        assert response.status_code == 400


class TestPresetAPI:
    """Tests for the /api/presets endpoints."""

    def test_list_presets(self, client, sample_preset):
        response = client.get('/api/presets')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert [p['name'] for p in data['data']] == ['Test Bracket']

    def test_create_preset(self, client, app, sample_request_data):
        response = client.post(
            '/api/presets',
            data=json.dumps({'name': 'New preset', **sample_request_data}),
            content_type='application/json'
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['message'] == 'Preset created'
        with app.app_context():
            assert SetupPreset.query.get(data['data']['id']) is not None

    def test_create_preset_without_name(self, client):
        response = client.post(
            '/api/presets',
            data=json.dumps({'settings': {}}),
            content_type='application/json'
        )

        assert response.status_code == 400
        assert json.loads(response.data)['message'] == 'Preset name is required'

    def test_get_preset(self, client, app, sample_preset):
        with app.app_context():
            preset_id = sample_preset.id

        response = client.get(f'/api/presets/{preset_id}')

        assert response.status_code == 200
        assert json.loads(response.data)['data']['id'] == preset_id

    def test_get_preset_not_found(self, client):
        response = client.get('/api/presets/nonexistent-id')

        assert response.status_code == 404
        assert json.loads(response.data)['message'] == 'Preset not found'

    def test_save_preset(self, client, app, sample_preset):
        with app.app_context():
            preset_id = sample_preset.id

        response = client.post(
            f'/api/presets/{preset_id}/save',
            data=json.dumps({'name': 'Renamed'}),
            content_type='application/json'
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert 'modified_at' in data['data']

    def test_save_preset_not_found(self, client):
        response = client.post(
            '/api/presets/nonexistent-id/save',
            data=json.dumps({'name': 'Test'}),
            content_type='application/json'
        )

        assert response.status_code == 404

    def test_delete_preset(self, client, app, sample_preset):
        with app.app_context():
            preset_id = sample_preset.id

        response = client.delete(f'/api/presets/{preset_id}')

        assert response.status_code == 200
        assert json.loads(response.data)['message'] == 'Preset deleted'
        assert client.get(f'/api/presets/{preset_id}').status_code == 404

    def test_delete_preset_not_found(self, client):
        assert client.delete('/api/presets/nonexistent-id').status_code == 404

    def test_generate_from_preset(self, client, app, sample_preset):
        with app.app_context():
            preset_id = sample_preset.id

        response = client.post(f'/api/presets/{preset_id}/generate')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert 'G0 X-23.000 Y-13.000 ; Move to start position' in data['data']['gcode']

    def test_download_preset(self, client, app, sample_preset):
        with app.app_context():
            preset_id = sample_preset.id

        response = client.get(f'/api/presets/{preset_id}/download')

        assert response.status_code == 200
        assert response.mimetype == 'text/plain'
        assert 'Test_Bracket.gcode' in response.headers['Content-Disposition']
        assert response.data.startswith(b'; Toolpath Generator - Mill program')

    def test_download_preset_not_found(self, client):
        assert client.get('/api/presets/nonexistent-id/download').status_code == 404
