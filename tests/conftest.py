"""
Pytest configuration and shared fixtures.
"""

import pytest
import os

# Set DATABASE_URL before Config class is imported (it validates at class-definition time)
os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')


@pytest.fixture
def app():
    """Create application for testing."""
    from sitecms import create_app
    app = create_app('testing')
    return app


@pytest.fixture
def app_context(app):
    """Application context for testing."""
    with app.app_context():
        yield


@pytest.fixture
def db(app, app_context):
    """Database for testing."""
    from sitecms import db as _db

    _db.create_all()
    yield _db
    _db.session.remove()
    _db.drop_all()


@pytest.fixture
def client(app, db):
    """Flask test client with database tables created."""
    return app.test_client()


@pytest.fixture
def admin_user(db):
    from sitecms.models import User
    user = User(username='admin', email='admin@example.com', is_admin=True)
    user.set_password('correct horse')
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def admin_client(client, admin_user):
    """Test client with an admin logged in."""
    with client.session_transaction() as session:
        session['_user_id'] = str(admin_user.id)
        session['_fresh'] = True
    return client


def theme_payload(name='Classic Kennel', **overrides):
    data = {
        'name': name,
        'colors': {'primary': '#8b5cf6', 'background': '#fafafa'},
    }
    data.update(overrides)
    return data


def preset_payload(name='Pill Style', **overrides):
    data = {
        'name': name,
        'border_radius': 'pill',
        'colors': {'primary': '#0f766e', 'primary_hover': '#115e59'},
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_theme(db):
    from sitecms.styles import service

    def _make(name='Classic Kennel', **overrides):
        return service.create_theme(theme_payload(name, **overrides))
    return _make


@pytest.fixture
def make_preset(db):
    from sitecms.styles import service

    def _make(name='Pill Style', **overrides):
        return service.create_button_preset(preset_payload(name, **overrides))
    return _make
