import os
import sys
import pytest

# Ensure the backend root (containing the `faxhunt` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from faxhunt import create_app, socketio
from faxhunt.client_secret import get_client_secret


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    GAME_SECRET = 'foobar'
    LOG_LEVEL = 'DEBUG'
    RANDOM_SEED = 1234
    TARGET_AREA = 15
    TARGET_QUERY_DELAY_MS = 0
    MAX_PLAYERS = 10
    RATE_LIMITS = {
        'join': (60000, 10),
        'fire': (2000, 1),
        'target': (1000, 1),
    }


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, start=1_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds

    # Doubles as a sleep() replacement
    def sleep(self, seconds):
        self.now += seconds


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def flask_app():
    # No app context held open here: requests would share it, and with it
    # Flask-Login's cached user on ``g``
    return create_app(TestConfig)


@pytest.fixture()
def session(flask_app, clock):
    game_session = flask_app.extensions['game_session']
    game_session.clock = clock
    return game_session


@pytest.fixture()
def client(flask_app, session):
    return flask_app.test_client()


@pytest.fixture()
def join(client):
    """Join as ``name`` and return the response JSON plus auth headers."""
    def _join(name):
        res = client.post('/api/join', json={
            'clientId': name,
            'secret': get_client_secret(name, TestConfig.GAME_SECRET),
        })
        assert res.status_code == 200, res.get_json()
        data = res.get_json()
        data['headers'] = {'Authorization': f"Bearer {data['token']}"}
        return data
    return _join


@pytest.fixture()
def sio_client(flask_app, session):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
    )
    yield test_client
    try:
        test_client.disconnect()
    except Exception:
        pass


def place_target(game_session, x, y):
    game_session.motion.target.x = x
    game_session.motion.target.y = y
