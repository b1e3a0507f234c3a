"""Tests for API routes."""
import json

BOARD = [[[0.0, 0.0], [20.0, 0.0], [20.0, 10.0]]]


def post_json(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type='application/json')


class TestDialectsAPI:
    """Tests for GET /api/dialects endpoint."""

    def test_list_dialects(self, client):
        response = client.get('/api/dialects')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['status'] == 'ok'
        assert [entry['name'] for entry in data['data']] == ['linuxcnc', 'mach4', 'mach3', 'custom']


class TestAutolevelAPI:
    """Tests for POST /api/autolevel endpoint."""

    def test_generate(self, client):
        response = post_json(client, '/api/autolevel', {'toolpaths': BOARD})

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['status'] == 'ok'
        assert data['data']['gcode'].startswith("G90\nG21\n")
        assert data['data']['grid']['point_count'] == 6

    def test_generate_custom_dialect(self, client):
        response = post_json(client, '/api/autolevel', {
            'toolpaths': BOARD,
            'settings': {'software': 'custom', 'custom_probe_code': 'G38.3'},
        })

        assert response.status_code == 200
        gcode = json.loads(response.data)['data']['gcode']
        assert "G38.3 Z-3.000 F50 ( Z-probe )" in gcode
        assert "G01 Z[#3+#4]" in gcode

    def test_grid_overflow(self, client):
        response = post_json(client, '/api/autolevel', {
            'toolpaths': [[[0.0, 0.0], [300.0, 300.0]]],
            'settings': {'software': 'mach3'},
        })

        assert response.status_code == 400
        data = json.loads(response.data)
        assert data['status'] == 'error'
        assert data['message'].startswith("Requested probe resolution too fine for board size")
        assert data['grid']['num_x_points'] == 31

    def test_no_data(self, client):
        response = post_json(client, '/api/autolevel', {})

        assert response.status_code == 400
        assert json.loads(response.data)['message'] == 'No data provided'

    def test_missing_toolpaths(self, client):
        response = post_json(client, '/api/autolevel', {'settings': {}})

        assert response.status_code == 400
        assert json.loads(response.data)['message'].startswith('Invalid request')

    def test_empty_toolpaths(self, client):
        response = post_json(client, '/api/autolevel', {'toolpaths': [[]]})

        assert response.status_code == 400
        assert 'No toolpath points' in json.loads(response.data)['message']

    def test_unknown_setting(self, client):
        response = post_json(client, '/api/autolevel', {'toolpaths': BOARD, 'settings': {'zwork': 1}})

        assert response.status_code == 400
        assert 'Unknown settings: zwork' in json.loads(response.data)['message']

    def test_malformed_point(self, client):
        response = post_json(client, '/api/autolevel', {'toolpaths': [[[1.0]]]})

        assert response.status_code == 400


class TestGridAPI:
    """Tests for POST /api/autolevel/grid endpoint."""

    def test_plan(self, client):
        response = post_json(client, '/api/autolevel/grid', {'toolpaths': BOARD})

        assert response.status_code == 200
        data = json.loads(response.data)['data']
        assert data['fits'] is True
        assert data['grid']['num_x_points'] == 3
        assert len(data['probe_points']) == 6

    def test_plan_overflow_is_reported(self, client):
        response = post_json(client, '/api/autolevel/grid', {
            'toolpaths': [[[0.0, 0.0], [300.0, 300.0]]],
            'settings': {'software': 'mach3'},
        })

        assert response.status_code == 200
        assert json.loads(response.data)['data']['fits'] is False


class TestDownloadAPI:
    """Tests for POST /api/autolevel/download endpoint."""

    def test_download(self, client):
        response = post_json(client, '/api/autolevel/download', {'toolpaths': BOARD, 'name': 'board'})

        assert response.status_code == 200
        assert response.mimetype == 'text/plain'
        assert 'board_autolevel.ngc' in response.headers['Content-Disposition']
        assert response.data.startswith(b"G90\nG21\n")

    def test_download_default_name(self, client):
        response = post_json(client, '/api/autolevel/download', {'toolpaths': BOARD})

        assert 'toolpaths_autolevel.ngc' in response.headers['Content-Disposition']

    def test_download_overflow(self, client):
        response = post_json(client, '/api/autolevel/download', {
            'toolpaths': [[[0.0, 0.0], [300.0, 300.0]]],
            'settings': {'software': 'mach3'},
        })

        assert response.status_code == 400
        assert json.loads(response.data)['grid']['point_count'] == 961
