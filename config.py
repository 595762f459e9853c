import redis
from redis.backoff import ExponentialBackoff
from redis.retry import Retry
from redis.exceptions import ConnectionError, TimeoutError
from dotenv import load_dotenv
from datetime import timedelta
import os
import logging

load_dotenv()

class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL')

    if not SQLALCHEMY_DATABASE_URI:
        raise ValueError("DATABASE_URL environment variable not set")

    if SQLALCHEMY_DATABASE_URI and SQLALCHEMY_DATABASE_URI.startswith('postgres://'):
        SQLALCHEMY_DATABASE_URI = SQLALCHEMY_DATABASE_URI.replace('postgres://', 'postgresql://', 1)

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
        'pool_size': 5,
        'max_overflow': 10,
        'pool_timeout': 30,
    }

    LOGGING_CONFIG = {
        'version': 1,
        'disable_existing_loggers': False,
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'level': 'INFO',
            },
        },
        'root': {
            'handlers': ['console'],
            'level': 'INFO',
        }
    }

    DB_RETRY_ATTEMPTS = 3
    DB_RETRY_DELAY = 1  # seconds

    SESSION_TYPE = 'redis'
    SESSION_PERMANENT = True
    SESSION_USE_SIGNER = True
    PERMANENT_SESSION_LIFETIME = timedelta(hours=3)
    REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')

    # Session directory for filesystem fallback
    SESSION_FILE_DIR = './flask_session'

    if os.getenv('REDIS_URL'):
        try:
            redis_pool = redis.ConnectionPool.from_url(
                os.getenv('REDIS_URL'),
                max_connections=20,
                socket_timeout=10.0,
                socket_connect_timeout=5.0,
                socket_keepalive=True,
                health_check_interval=30,
            )
            SESSION_REDIS = redis.Redis(
                connection_pool=redis_pool,
                retry=Retry(ExponentialBackoff(0.5), 3),
                retry_on_error=[TimeoutError, ConnectionError],
            )
            SESSION_REDIS.ping()
            logging.info("Redis connection established successfully")
        except Exception as e:
            logging.warning(f"Failed to connect to Redis: {e}, falling back to filesystem sessions")
            SESSION_TYPE = 'filesystem'
            SESSION_REDIS = None
    else:
        SESSION_TYPE = 'filesystem'

    # Site
    SITE_NAME = os.getenv('SITE_NAME', 'Site CMS')
    BASE_URL = os.getenv('BASE_URL', 'http://localhost:5000')

    # Theme / button preset delivery
    STYLE_CSS_CACHE_TIMEOUT = int(os.getenv('STYLE_CSS_CACHE_TIMEOUT', '300'))
    STYLE_API_RATE_LIMIT = os.getenv('STYLE_API_RATE_LIMIT', '120 per minute')
    STYLE_FETCH_TIMEOUT = float(os.getenv('STYLE_FETCH_TIMEOUT', '5'))
    DEFAULT_BORDER_RADIUS = os.getenv('DEFAULT_BORDER_RADIUS', '0.5rem')

    RATELIMIT_STORAGE_URL = os.getenv('REDIS_URL', 'memory://')


class DevelopmentConfig(Config):
    FLASK_ENV = 'development'
    DEBUG = True
    SQLALCHEMY_ECHO = True


class ProductionConfig(Config):
    FLASK_ENV = 'production'
    DEBUG = False
    SESSION_COOKIE_SECURE = True
    PREFERRED_URL_SCHEME = 'https'
    REMEMBER_COOKIE_SECURE = True
    REMEMBER_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Strict'
    PERMANENT_SESSION_LIFETIME = timedelta(minutes=60)
    SENTRY_DSN = os.getenv('SENTRY_DSN')
    CACHE_DEFAULT_TIMEOUT = 300


class TestingConfig(Config):
    FLASK_ENV = 'testing'
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URL = 'memory://'
    SESSION_TYPE = 'filesystem'
    SESSION_REDIS = None


# Dictionary to easily access configurations
config_dict = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
}
