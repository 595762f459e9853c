"""
Theme API Endpoints

Public:
    GET  /api/themes/active-css        {"css": str|null}

Admin (JSON):
    GET  /api/themes                   list themes
    POST /api/themes                   create
    GET/PATCH/DELETE /api/themes/<id>
    POST /api/themes/apply             {"theme_id": int}
"""
from flask import Blueprint, jsonify, current_app

from sitecms import db, limiter
from sitecms.decorators import admin_required
from sitecms.models import Theme
from sitecms.api.errors import api_error
from sitecms.api.utils import style_rate_limit, json_body, acting_user
from sitecms.styles import service
from sitecms.styles.lookup import active_theme_css, get_singleton_settings

themes_bp = Blueprint('themes_api', __name__)


@themes_bp.route('/themes/active-css', methods=['GET'])
@limiter.limit(style_rate_limit)
def get_active_theme_css():
    """
    CSS for the active theme.

    Returns ``{"css": null}`` when no theme is active or the lookup fails;
    this endpoint never errors on missing styles.
    """
    try:
        css = active_theme_css()
    except Exception as e:
        current_app.logger.error(f"Active theme CSS unavailable: {e}")
        css = None
    return jsonify({'css': css})


@themes_bp.route('/themes', methods=['GET'])
@admin_required
def list_themes():
    themes = Theme.query.order_by(Theme.is_default.desc(), Theme.name).all()
    settings = get_singleton_settings()
    return jsonify({
        'themes': [theme.to_dict() for theme in themes],
        'active_theme': settings.active_theme if settings else None,
    })


@themes_bp.route('/themes', methods=['POST'])
@admin_required
def create_theme():
    data = json_body()
    if data is None:
        return api_error('bad_request', 'A JSON object body is required.', 400)
    theme = service.create_theme(data, user=acting_user())
    return jsonify({'theme': theme.to_dict()}), 201


@themes_bp.route('/themes/<int:theme_id>', methods=['GET'])
@admin_required
def get_theme(theme_id):
    theme = db.get_or_404(Theme, theme_id, description='Theme not found.')
    return jsonify({'theme': theme.to_dict()})


@themes_bp.route('/themes/<int:theme_id>', methods=['PATCH'])
@admin_required
def update_theme(theme_id):
    """
    Update a theme.

    ``is_active_style`` in the response tells the editor this is the theme
    currently served, so open pages should be asked to refresh.
    """
    theme = db.get_or_404(Theme, theme_id, description='Theme not found.')
    data = json_body()
    if data is None:
        return api_error('bad_request', 'A JSON object body is required.', 400)
    theme, is_active_style = service.update_theme(theme, data)
    return jsonify({'theme': theme.to_dict(), 'is_active_style': is_active_style})


@themes_bp.route('/themes/<int:theme_id>', methods=['DELETE'])
@admin_required
def delete_theme(theme_id):
    theme = db.get_or_404(Theme, theme_id, description='Theme not found.')
    service.delete_theme(theme)
    return jsonify({'deleted': True, 'id': theme_id})


@themes_bp.route('/themes/apply', methods=['POST'])
@admin_required
def apply_theme():
    data = json_body() or {}
    theme_id = data.get('theme_id')
    if not theme_id:
        return api_error('missing_theme_id', 'theme_id is required.', 400)
    try:
        theme_id = int(theme_id)
    except (TypeError, ValueError):
        return api_error('invalid_theme_id', 'theme_id must be an integer.', 400)
    theme = db.get_or_404(Theme, theme_id, description='Theme not found.')
    service.apply_theme(theme)
    return jsonify({
        'theme': theme.to_dict(),
        'settings': get_singleton_settings().to_dict(),
    })
