"""
Style API Blueprints

- Public CSS endpoints for themes and button presets (cross-origin, rate limited)
- Admin JSON endpoints for creating, editing and applying styles
- Settings pointers

All endpoints return JSON and use the standardized error format.
"""
from flask_cors import CORS

from sitecms import csrf
from sitecms.api.errors import register_error_handlers
from sitecms.api.themes import themes_bp
from sitecms.api.button_presets import button_presets_bp
from sitecms.api.settings import settings_bp

API_BLUEPRINTS = (themes_bp, button_presets_bp, settings_bp)


def init_api(app):
    """
    Register the API blueprints under /api with CORS and error handlers.

    Args:
        app: Flask application instance
    """
    for blueprint in API_BLUEPRINTS:
        # Blueprint objects are module singletons; guard against re-registering
        # handlers when create_app() is called multiple times in tests.
        if not getattr(blueprint, '_sitecms_error_handlers_registered', False):
            register_error_handlers(blueprint)
            blueprint._sitecms_error_handlers_registered = True
        csrf.exempt(blueprint)
        app.register_blueprint(blueprint, url_prefix='/api')

    # Stylesheets are public information needed by any page rendering the site.
    CORS(
        app,
        resources={
            r"/api/themes/active-css": {"origins": "*", "methods": ['GET', 'OPTIONS']},
            r"/api/button-presets/active-css": {"origins": "*", "methods": ['GET', 'OPTIONS']},
            r"/api/button-presets/by-slug/*": {"origins": "*", "methods": ['GET', 'OPTIONS']},
        },
        supports_credentials=False,
        max_age=86400,
    )

    app.logger.info("Style API initialized")


__all__ = ['init_api', 'themes_bp', 'button_presets_bp', 'settings_bp']
