"""
Tests for the style API endpoints.

Covers:
- Public CSS endpoints (no auth, never erroring on missing styles, CORS)
- Admin CRUD and apply endpoints
- Standardized JSON errors for validation and invariant failures
"""

import pytest

from sitecms.models import Theme, ButtonPreset, User


THEME = {
    'name': 'Classic Kennel',
    'slug': 'classic-kennel',
    'colors': {'primary': '#8b5cf6', 'background': '#fafafa'},
}

PRESET = {
    'name': 'Pill Style',
    'slug': 'pill-style',
    'border_radius': 'pill',
}


def _create(client, path, payload):
    response = client.post(path, json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


class TestPublicCss:

    def test_no_active_theme(self, client):
        response = client.get('/api/themes/active-css')
        assert response.status_code == 200
        assert response.get_json() == {'css': None}

    def test_no_active_preset(self, client):
        response = client.get('/api/button-presets/active-css')
        assert response.status_code == 200
        assert response.get_json() == {'css': None}

    def test_apply_theme_scenario(self, admin_client):
        _create(admin_client, '/api/themes', dict(THEME, slug='older', name='Older', is_default=True))
        theme = _create(admin_client, '/api/themes', THEME)['theme']

        response = admin_client.post('/api/themes/apply', json={'theme_id': theme['id']})
        assert response.status_code == 200
        assert response.get_json()['settings']['active_theme'] == 'classic-kennel'

        css = admin_client.get('/api/themes/active-css').get_json()['css']
        assert '--primary: 258 90% 66%' in css
        assert Theme.query.filter_by(is_default=True).count() == 1

    def test_apply_preset_scenario(self, admin_client):
        preset = _create(admin_client, '/api/button-presets', PRESET)['preset']
        response = admin_client.post('/api/button-presets/apply', json={'preset_id': preset['id']})
        assert response.status_code == 200

        css = admin_client.get('/api/button-presets/active-css').get_json()['css']
        assert '--button-border-radius: 9999px;' in css

    def test_by_slug_unknown(self, client):
        response = client.get('/api/button-presets/by-slug/unknown-slug')
        assert response.status_code == 404
        data = response.get_json()
        assert data['css'] is None
        assert data['error'] == 'not_found'

    def test_by_slug(self, admin_client):
        _create(admin_client, '/api/button-presets', PRESET)
        response = admin_client.get('/api/button-presets/by-slug/pill-style')
        assert response.status_code == 200
        data = response.get_json()
        assert '--button-border-radius: 9999px;' in data['css']
        assert data['preset']['slug'] == 'pill-style'
        assert 'id' not in data['preset']

    def test_cors_allows_any_origin(self, client):
        response = client.get('/api/themes/active-css', headers={'Origin': 'https://elsewhere.example'})
        assert response.headers.get('Access-Control-Allow-Origin') == '*'

    def test_lookup_failure_degrades_to_null(self, client, monkeypatch):
        import sitecms.api.themes as themes_api

        def broken():
            raise RuntimeError('cache down')
        monkeypatch.setattr(themes_api, 'active_theme_css', broken)
        response = client.get('/api/themes/active-css')
        assert response.status_code == 200
        assert response.get_json() == {'css': None}


class TestAuth:

    def test_anonymous_gets_json_401(self, client):
        response = client.post('/api/themes', json=THEME)
        assert response.status_code == 401
        assert response.get_json()['error'] == 'unauthorized'

    def test_non_admin_gets_json_403(self, client, db):
        user = User(username='editor', email='editor@example.com', is_admin=False)
        user.set_password('pw')
        db.session.add(user)
        db.session.commit()
        with client.session_transaction() as session:
            session['_user_id'] = str(user.id)
        response = client.get('/api/themes')
        assert response.status_code == 403
        assert response.get_json()['error'] == 'forbidden'


class TestThemeAdmin:

    def test_list(self, admin_client):
        _create(admin_client, '/api/themes', dict(THEME, is_default=True))
        data = admin_client.get('/api/themes').get_json()
        assert [t['slug'] for t in data['themes']] == ['classic-kennel']
        assert data['active_theme'] == 'classic-kennel'

    def test_get_missing(self, admin_client):
        response = admin_client.get('/api/themes/999')
        assert response.status_code == 404
        assert response.get_json()['error'] == 'not_found'

    def test_invalid_colour(self, admin_client):
        response = admin_client.post('/api/themes', json=dict(THEME, colors={'primary': 'purple'}))
        assert response.status_code == 400
        assert response.get_json()['error'] == 'invalid_color'
        assert Theme.query.count() == 0

    def test_invalid_enum(self, admin_client):
        response = admin_client.post('/api/themes', json=dict(THEME, styles={'button_style': 'blob'}))
        assert response.status_code == 400
        assert response.get_json()['error'] == 'invalid_data'

    def test_missing_body(self, admin_client):
        response = admin_client.post('/api/themes', data='nope', content_type='text/plain')
        assert response.status_code == 400

    def test_duplicate_slug(self, admin_client):
        _create(admin_client, '/api/themes', THEME)
        response = admin_client.post('/api/themes', json=THEME)
        assert response.status_code == 400
        assert response.get_json()['error'] == 'invariant_violation'

    def test_patch_reports_active_style(self, admin_client):
        theme = _create(admin_client, '/api/themes', dict(THEME, is_default=True))['theme']
        response = admin_client.patch(f"/api/themes/{theme['id']}", json={'colors': {'primary': '#10b981'}})
        data = response.get_json()
        assert response.status_code == 200
        assert data['is_active_style'] is True
        assert data['theme']['colors']['primary'] == '#10b981'
        css = admin_client.get('/api/themes/active-css').get_json()['css']
        assert '--primary: 160 84% 39%' in css

    def test_delete_default_rejected(self, admin_client):
        theme = _create(admin_client, '/api/themes', dict(THEME, is_default=True))['theme']
        response = admin_client.delete(f"/api/themes/{theme['id']}")
        assert response.status_code == 400
        body = response.get_json()
        assert body['error'] == 'invariant_violation'
        assert 'default' in body['message']

    def test_delete_non_default(self, admin_client):
        theme = _create(admin_client, '/api/themes', THEME)['theme']
        response = admin_client.delete(f"/api/themes/{theme['id']}")
        assert response.status_code == 200
        assert Theme.query.count() == 0

    def test_apply_requires_id(self, admin_client):
        response = admin_client.post('/api/themes/apply', json={})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'missing_theme_id'

    def test_apply_unknown(self, admin_client):
        response = admin_client.post('/api/themes/apply', json={'theme_id': 42})
        assert response.status_code == 404

    def test_apply_inactive_rejected(self, admin_client):
        theme = _create(admin_client, '/api/themes', dict(THEME, is_active=False))['theme']
        response = admin_client.post('/api/themes/apply', json={'theme_id': theme['id']})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'invariant_violation'


class TestPresetAdmin:

    def test_sequential_apply(self, admin_client):
        x = _create(admin_client, '/api/button-presets', dict(PRESET, name='X', slug='x'))['preset']
        y = _create(admin_client, '/api/button-presets', dict(PRESET, name='Y', slug='y'))['preset']
        admin_client.post('/api/button-presets/apply', json={'preset_id': x['id']})
        response = admin_client.post('/api/button-presets/apply', json={'preset_id': y['id']})
        assert response.get_json()['settings']['active_button_preset'] == 'y'
        assert ButtonPreset.query.filter_by(slug='x').one().is_default is False

    def test_clear(self, admin_client):
        _create(admin_client, '/api/button-presets', dict(PRESET, is_default=True))
        response = admin_client.post('/api/button-presets/clear')
        assert response.status_code == 200
        assert response.get_json()['settings']['active_button_preset'] is None
        assert admin_client.get('/api/button-presets/active-css').get_json() == {'css': None}

    def test_patch_inactive_preset_not_active_style(self, admin_client):
        preset = _create(admin_client, '/api/button-presets', PRESET)['preset']
        response = admin_client.patch(f"/api/button-presets/{preset['id']}", json={'description': 'spare'})
        assert response.get_json()['is_active_style'] is False

    def test_delete_default_rejected(self, admin_client):
        preset = _create(admin_client, '/api/button-presets', dict(PRESET, is_default=True))['preset']
        response = admin_client.delete(f"/api/button-presets/{preset['id']}")
        assert response.status_code == 400

    def test_invalid_size_payload(self, admin_client):
        response = admin_client.post('/api/button-presets', json=dict(PRESET, sizes='large'))
        assert response.status_code == 400


class TestSettings:

    def test_before_anything_applied(self, admin_client):
        assert admin_client.get('/api/settings').get_json() == {'settings': None}

    def test_after_apply(self, admin_client):
        _create(admin_client, '/api/themes', dict(THEME, is_default=True))
        settings = admin_client.get('/api/settings').get_json()['settings']
        assert settings['active_theme'] == 'classic-kennel'
        assert settings['primary_color'] == '#8b5cf6'
