from flask import Blueprint, jsonify

from sitecms.decorators import admin_required
from sitecms.styles.lookup import get_singleton_settings

settings_bp = Blueprint('settings_api', __name__)


@settings_bp.route('/settings', methods=['GET'])
@admin_required
def get_settings():
    """Current active-style pointers; ``null`` before anything was applied."""
    settings = get_singleton_settings()
    return jsonify({'settings': settings.to_dict() if settings else None})
