import os
import sys
import pytest

# Ensure the backend root (containing the `scoreboard` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from scoreboard import create_app, db
from scoreboard.config import Config


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    # Cheapest cost bcrypt allows; keeps the suite fast
    BCRYPT_LOG_ROUNDS = 4
    AUTH_COOKIE_NAME = 'sid'
    AUTH_COOKIE_SECURE = False
    AUTH_COOKIE_SAMESITE = 'Lax'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        import scoreboard.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def identity(flask_app):
    return flask_app.extensions['scoreboard']['identity']


@pytest.fixture()
def ledger(flask_app):
    return flask_app.extensions['scoreboard']['ledger']


def register(client, name='Alice', email='alice@example.com', password='hunter22'):
    return client.post('/api/register', json={'name': name, 'email': email, 'password': password})


def login(client, email='alice@example.com', password='hunter22', **extra):
    return client.post('/api/login', json={'email': email, 'password': password, **extra})


@pytest.fixture()
def file_app(tmp_path):
    """App on a file-backed SQLite database, shared by several threads."""

    class FileConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'scoreboard.db'}"
        # Writers queue on SQLite's lock instead of failing fast
        SQLALCHEMY_ENGINE_OPTIONS = {'connect_args': {'timeout': 30}}

    application = create_app(FileConfig)
    with application.app_context():
        import scoreboard.models  # noqa: F401
        db.create_all()
    yield application
    with application.app_context():
        db.drop_all()
        db.engine.dispose()
