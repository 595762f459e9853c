"""Shared helpers for the style API views."""
from flask import request, current_app
from flask_login import current_user


def style_rate_limit():
    """Limit string for the public CSS endpoints, read from config per request."""
    return current_app.config.get('STYLE_API_RATE_LIMIT', '120 per minute')


def json_body():
    """The request's JSON object, or None when the body is missing or not an object."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def acting_user():
    if current_user.is_authenticated:
        return current_user._get_current_object()
    return None
