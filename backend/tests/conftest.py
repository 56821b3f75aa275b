import os
import sys
import pytest

# Ensure the backend root (containing the `mission` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from mission import create_app, socketio
from mission.services.rooms import RoomCoordinator, RoomRegistry, TimerHandle


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    REQUIRED_PLAYERS = 2
    LEADERBOARD_DURATION_MS = 5000
    START_COUNTDOWN_MS = 3000
    HOST = '127.0.0.1'
    PORT = 3001
    CORS_ALLOWED_ORIGINS = '*'
    SOCKETIO_PING_TIMEOUT = 60
    SOCKETIO_PING_INTERVAL = 25


class RecordingTransport:
    """Stands in for Socket.IO: records every outbound event in order."""

    def __init__(self):
        self.events = []
        self.members = {}

    def broadcast(self, room_id, event, payload):
        self.events.append(('broadcast', room_id, event, payload))

    def send(self, sid, event, payload):
        self.events.append(('send', sid, event, payload))

    def enter(self, sid, room_id):
        self.members.setdefault(room_id, set()).add(sid)

    def leave(self, sid, room_id):
        self.members.get(room_id, set()).discard(sid)

    def named(self, event):
        return [e for e in self.events if e[2] == event]

    def last(self, event):
        matches = self.named(event)
        return matches[-1] if matches else None

    def clear(self):
        self.events = []


class ManualScheduler:
    """Holds timers until the test decides the delay has elapsed."""

    def __init__(self):
        self.pending = []

    def call_later(self, delay, callback, *args):
        handle = TimerHandle(delay)
        self.pending.append((handle, callback, args))
        return handle

    def run_pending(self):
        due, self.pending = self.pending, []
        fired = 0
        for handle, callback, args in due:
            if handle.cancelled:
                continue
            callback(*args)
            fired += 1
        return fired


class FixedClock:
    def __init__(self, now=1_700_000_000_000):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture()
def transport():
    return RecordingTransport()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def clock():
    return FixedClock()


@pytest.fixture()
def coordinator(transport, scheduler, clock):
    return RoomCoordinator(
        registry=RoomRegistry(),
        transport=transport,
        scheduler=scheduler,
        required_players=2,
        leaderboard_duration_ms=5000,
        start_countdown_ms=3000,
        clock=clock,
    )


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def manual_timers(flask_app):
    # Swap the background scheduler so reset timers fire on demand
    timers = ManualScheduler()
    flask_app.extensions['mission'].scheduler = timers
    return timers


@pytest.fixture()
def connect(flask_app):
    clients = []

    def _connect():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
        )
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
