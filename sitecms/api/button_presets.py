"""
Button Preset API Endpoints

Public:
    GET  /api/button-presets/active-css         {"css": str|null}
    GET  /api/button-presets/by-slug/<slug>     {"css": str, "preset": summary}

Admin (JSON):
    GET  /api/button-presets
    POST /api/button-presets
    GET/PATCH/DELETE /api/button-presets/<id>
    POST /api/button-presets/apply              {"preset_id": int}
    POST /api/button-presets/clear
"""
from flask import Blueprint, jsonify, current_app

from sitecms import db, limiter
from sitecms.decorators import admin_required
from sitecms.models import ButtonPreset
from sitecms.api.errors import api_error
from sitecms.api.utils import style_rate_limit, json_body, acting_user
from sitecms.styles import service
from sitecms.styles.lookup import (
    active_button_preset_css, button_preset_css_by_slug, get_singleton_settings,
)

button_presets_bp = Blueprint('button_presets_api', __name__)


@button_presets_bp.route('/button-presets/active-css', methods=['GET'])
@limiter.limit(style_rate_limit)
def get_active_button_preset_css():
    try:
        css = active_button_preset_css()
    except Exception as e:
        current_app.logger.error(f"Active button preset CSS unavailable: {e}")
        css = None
    return jsonify({'css': css})


@button_presets_bp.route('/button-presets/by-slug/<slug>', methods=['GET'])
@limiter.limit(style_rate_limit)
def get_button_preset_css_by_slug(slug):
    """
    CSS and summary for one active preset, used for per-button overrides.

    Unknown or inactive slugs return 404 with ``"css": null``.
    """
    try:
        css, summary = button_preset_css_by_slug(slug)
    except Exception as e:
        current_app.logger.error(f"Button preset '{slug}' CSS unavailable: {e}")
        css, summary = None, None
    if css is None:
        return api_error('not_found', 'Button preset not found or inactive.', 404, css=None, preset=None)
    return jsonify({'css': css, 'preset': summary})


@button_presets_bp.route('/button-presets', methods=['GET'])
@admin_required
def list_button_presets():
    presets = ButtonPreset.query.order_by(ButtonPreset.is_default.desc(), ButtonPreset.name).all()
    settings = get_singleton_settings()
    return jsonify({
        'presets': [preset.to_dict() for preset in presets],
        'active_button_preset': settings.active_button_preset if settings else None,
    })


@button_presets_bp.route('/button-presets', methods=['POST'])
@admin_required
def create_button_preset():
    data = json_body()
    if data is None:
        return api_error('bad_request', 'A JSON object body is required.', 400)
    preset = service.create_button_preset(data, user=acting_user())
    return jsonify({'preset': preset.to_dict()}), 201


@button_presets_bp.route('/button-presets/<int:preset_id>', methods=['GET'])
@admin_required
def get_button_preset(preset_id):
    preset = db.get_or_404(ButtonPreset, preset_id, description='Button preset not found.')
    return jsonify({'preset': preset.to_dict()})


@button_presets_bp.route('/button-presets/<int:preset_id>', methods=['PATCH'])
@admin_required
def update_button_preset(preset_id):
    preset = db.get_or_404(ButtonPreset, preset_id, description='Button preset not found.')
    data = json_body()
    if data is None:
        return api_error('bad_request', 'A JSON object body is required.', 400)
    preset, is_active_style = service.update_button_preset(preset, data)
    return jsonify({'preset': preset.to_dict(), 'is_active_style': is_active_style})


@button_presets_bp.route('/button-presets/<int:preset_id>', methods=['DELETE'])
@admin_required
def delete_button_preset(preset_id):
    preset = db.get_or_404(ButtonPreset, preset_id, description='Button preset not found.')
    service.delete_button_preset(preset)
    return jsonify({'deleted': True, 'id': preset_id})


@button_presets_bp.route('/button-presets/apply', methods=['POST'])
@admin_required
def apply_button_preset():
    data = json_body() or {}
    preset_id = data.get('preset_id')
    if not preset_id:
        return api_error('missing_preset_id', 'preset_id is required.', 400)
    try:
        preset_id = int(preset_id)
    except (TypeError, ValueError):
        return api_error('invalid_preset_id', 'preset_id must be an integer.', 400)
    preset = db.get_or_404(ButtonPreset, preset_id, description='Button preset not found.')
    service.apply_button_preset(preset)
    return jsonify({
        'preset': preset.to_dict(),
        'settings': get_singleton_settings().to_dict(),
    })


@button_presets_bp.route('/button-presets/clear', methods=['POST'])
@admin_required
def clear_button_preset():
    service.clear_button_preset()
    return jsonify({'settings': get_singleton_settings().to_dict()})
