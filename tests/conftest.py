import os
import sys
from urllib.parse import urlencode

import pytest

# Ensure the project root (containing the `scrumpoker` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from scrumpoker import REGISTRY_KEY, SESSIONS_KEY, create_app, socketio
from scrumpoker import models

FROZEN_NOW = 1590254186705


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    LOG_LEVEL = 'INFO'
    SOCKETIO_NAMESPACE = '/'
    CORS_ALLOWED_ORIGINS = None
    STATIC_CACHE_MAX_AGE = 31536000
    MAX_PLAYER_NAME_LENGTH = 16


@pytest.fixture()
def frozen_now(monkeypatch):
    monkeypatch.setattr(models, '_now', lambda: FROZEN_NOW)
    return FROZEN_NOW


@pytest.fixture()
def public_dir(tmp_path):
    root = tmp_path / 'public'
    (root / 'static' / 'js').mkdir(parents=True)
    (root / 'index.html').write_text('<div id="root"></div>')
    (root / 'manifest.json').write_text('{}')
    (root / 'static' / 'js' / 'main.abc123.js').write_text('console.log(1);')
    return root


@pytest.fixture()
def flask_app(public_dir):
    config = type('Config', (TestConfig,), {'PUBLIC_DIR': str(public_dir)})
    application = create_app(config)
    with application.app_context():
        yield application


@pytest.fixture()
def registry(flask_app):
    return flask_app.extensions[REGISTRY_KEY]


@pytest.fixture()
def session_handler(flask_app):
    return flask_app.extensions[SESSIONS_KEY]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def connect(flask_app):
    """Open Socket.IO test clients bound to a room through the query string."""
    opened = []

    def _connect(room_name='test-room'):
        query = urlencode({'roomName': room_name}) if room_name is not None else None
        test_client = socketio.test_client(flask_app, query_string=query)
        opened.append(test_client)
        return test_client

    yield _connect
    for test_client in opened:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


@pytest.fixture()
def states():
    """Drain a test client and return the room views it was pushed."""
    def _states(test_client):
        return [pkt['args'][0] for pkt in test_client.get_received() if pkt['name'] == 'state']

    return _states
