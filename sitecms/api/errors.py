"""
Standardized API Error Responses

All API errors return: {"error": "code", "message": "human readable message"}
"""
from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException

from sitecms.styles.errors import InvalidColor, InvariantViolation


def api_error(code: str, message: str, status_code: int = 400, **extra):
    """
    Create a standardized API error response.

    Args:
        code: Machine-readable error code (e.g., 'invalid_color', 'not_found')
        message: Human-readable error message
        status_code: HTTP status code (default 400)
        **extra: Additional top-level fields, e.g. ``css=None``

    Example:
        return api_error('missing_theme_id', 'theme_id is required.', 400)
    """
    response = jsonify({
        **extra,
        'error': code,
        'message': message
    })
    response.status_code = status_code
    return response


def register_error_handlers(blueprint):
    """
    Register error handlers for an API blueprint.
    Ensures all errors return JSON, not HTML.
    """

    @blueprint.errorhandler(InvariantViolation)
    def invariant_violation(e):
        current_app.logger.info(f'Rejected style mutation: {e.reason}')
        return api_error('invariant_violation', e.reason, 400)

    @blueprint.errorhandler(InvalidColor)
    def invalid_color(e):
        return api_error('invalid_color', str(e), 400)

    @blueprint.errorhandler(ValueError)
    def invalid_data(e):
        return api_error('invalid_data', str(e), 400)

    @blueprint.errorhandler(400)
    def bad_request(e):
        message = str(e.description) if hasattr(e, 'description') else 'Bad request'
        return api_error('bad_request', message, 400)

    @blueprint.errorhandler(401)
    def unauthorized(e):
        return api_error('unauthorized', 'Authentication required.', 401)

    @blueprint.errorhandler(403)
    def forbidden(e):
        return api_error('forbidden', 'Access denied.', 403)

    @blueprint.errorhandler(404)
    def not_found(e):
        message = str(e.description) if hasattr(e, 'description') else 'Resource not found'
        return api_error('not_found', message, 404)

    @blueprint.errorhandler(429)
    def rate_limited(e):
        return api_error(
            'rate_limited',
            'Too many requests. Please retry in 60 seconds.',
            429
        )

    @blueprint.errorhandler(500)
    def internal_error(e):
        current_app.logger.error(f'API Internal Error: {e}')
        return api_error(
            'internal_error',
            'An internal error occurred. Please try again later.',
            500
        )

    @blueprint.errorhandler(HTTPException)
    def handle_http_exception(e):
        """Handle any other HTTP exceptions with JSON response."""
        return api_error(
            e.name.lower().replace(' ', '_'),
            e.description or str(e),
            e.code
        )
