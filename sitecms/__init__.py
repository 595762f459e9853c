from flask import Flask, render_template
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager, current_user
from flask_talisman import Talisman
from flask_wtf.csrf import CSRFProtect
from config import Config, config_dict
import os
import time
import logging
from logging.config import dictConfig
import sentry_sdk
from sentry_sdk.integrations.flask import FlaskIntegration
from flask_session import Session
from flask_caching import Cache
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Generated theme/preset stylesheets and button style snapshots are inline,
# so style-src has to allow them.
csp = {
    'default-src': ["'self'", "https:", "data:", "blob:"],
    'img-src': ["'self'", "data:", "https:", "blob:"],
    'connect-src': ["'self'", "https:"],
    'font-src': ["'self'", "data:", "https:"],
    'style-src': [
        "'self'",
        "'unsafe-inline'",
        "https://fonts.googleapis.com",
    ],
    'script-src': ["'self'"],
    'object-src': ["'none'"],
    'base-uri': ["'self'"],
    'form-action': ["'self'"]
}


db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
sess = Session()
cache = Cache()
csrf = CSRFProtect()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["1000 per hour"]
)


def try_connect_db(app):
    retries = app.config['DB_RETRY_ATTEMPTS']
    for attempt in range(retries):
        try:
            with app.app_context():
                with db.engine.connect():
                    return True
        except Exception as e:
            app.logger.error(f"Database connection attempt {attempt + 1} failed: {e}")
            time.sleep(app.config['DB_RETRY_DELAY'])
    return False


def create_app(config_name=None):
    env = config_name or os.getenv('FLASK_ENV', 'development')

    if env == 'production' and os.getenv('SENTRY_DSN'):
        sentry_sdk.init(
            dsn=os.getenv('SENTRY_DSN'),
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.2,
        )

    app = Flask(__name__)

    dictConfig(Config.LOGGING_CONFIG)

    app.config.from_object(Config)
    app.config.from_object(config_dict.get(env, Config))

    Talisman(
        app,
        force_https=env == 'production',
        session_cookie_secure=env == 'production',
        content_security_policy=csp,
        content_security_policy_nonce_in=None
    )

    try:
        if app.config.get('SESSION_TYPE') == 'redis':
            try:
                app.config['SESSION_REDIS'].ping()
            except Exception as e:
                app.logger.warning(f"Redis connection test failed: {e}, falling back to filesystem")
                app.config['SESSION_TYPE'] = 'filesystem'
        sess.init_app(app)
    except Exception as e:
        app.logger.error(f"Session initialization error: {e}")
        app.config['SESSION_TYPE'] = 'filesystem'
        sess.init_app(app)

    redis_url = os.getenv('REDIS_URL')
    if redis_url and redis_url.strip() and not app.config.get('TESTING'):
        cache.init_app(app, config={
            'CACHE_TYPE': 'RedisCache',
            'CACHE_REDIS_URL': redis_url,
            'CACHE_DEFAULT_TIMEOUT': app.config['STYLE_CSS_CACHE_TIMEOUT'],
            'CACHE_KEY_PREFIX': 'sitecms_',
        })
        app.logger.info("Cache initialized with Redis URL")
    else:
        if not app.config.get('TESTING'):
            app.logger.warning("No REDIS_URL available, using simple cache")
        cache.init_app(app, config={
            'CACHE_TYPE': 'SimpleCache',
            'CACHE_DEFAULT_TIMEOUT': app.config['STYLE_CSS_CACHE_TIMEOUT'],
        })

    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)
    login_manager.init_app(app)
    login_manager.login_view = 'auth.login'
    login_manager.login_message_category = "info"
    app.jinja_env.globals.update(current_user=current_user)

    app.config.setdefault('RATELIMIT_STORAGE_URI', app.config.get('RATELIMIT_STORAGE_URL', 'memory://'))
    limiter.init_app(app)

    if not try_connect_db(app):
        raise RuntimeError("Could not establish database connection")

    app.config.update(
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE=app.config.get('SESSION_COOKIE_SAMESITE') or 'Lax',
    )

    from sitecms.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    from sitecms.public.routes import public_bp
    from sitecms.auth.routes import auth_bp
    from sitecms.admin import admin_bp
    from sitecms.api import init_api

    init_api(app)
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(admin_bp, url_prefix='/admin')
    # Registered last: the public catch-all "/<slug>" must not shadow other routes.
    app.register_blueprint(public_bp)

    from sitecms.commands import init_commands
    init_commands(app)

    @app.errorhandler(403)
    def forbidden(e):
        app.logger.warning(f"403 Forbidden: {e}")
        return render_template('errors/error.html', error_code=403,
                               error_message="You don't have permission to access this resource."), 403

    @app.errorhandler(404)
    def page_not_found(e):
        app.logger.warning(f"404 Page Not Found: {e}")
        return render_template('errors/error.html', error_code=404,
                               error_message="The page you're looking for doesn't exist."), 404

    @app.errorhandler(500)
    def internal_server_error(e):
        app.logger.error(f"500 Internal Server Error: {e}")
        return render_template('errors/error.html', error_code=500,
                               error_message="An internal server error occurred. Please try again later."), 500

    return app
