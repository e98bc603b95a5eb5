import io
import queue
from unittest.mock import Mock

import pytest

from ollama_dashboard.core.environment import EnvironmentStore
from ollama_dashboard.core.events import EventBus
from ollama_dashboard.dashboard_app import DashboardApp


class FakeProcess:
    """Stand-in for a Popen with text pipes"""

    def __init__(self, stdout='', stderr='', returncode=0):
        self.stdout = io.StringIO(stdout)
        self.stderr = io.StringIO(stderr)
        self.returncode = returncode
        self.pid = 4242

    def wait(self, timeout=None):
        return self.returncode

    def poll(self):
        return self.returncode


def drain(subscriber):
    """All events currently queued for a subscriber"""
    events = []
    while True:
        try:
            events.append(subscriber.get_nowait())
        except queue.Empty:
            return events


@pytest.fixture
def event_bus():
    return EventBus(maxsize=100)


@pytest.fixture
def subscriber(event_bus):
    return event_bus.subscribe()


@pytest.fixture
def fake_client():
    client = Mock()
    client.is_running.return_value = True
    client.version.return_value = '0.9.0'
    client.port_in_use.return_value = False
    client.list_models.return_value = []
    return client


@pytest.fixture
def fake_supervisor():
    supervisor = Mock()
    supervisor.stop.return_value = True
    supervisor.uptime_seconds.return_value = None
    return supervisor


@pytest.fixture
def environment_store(tmp_path):
    return EnvironmentStore({'OLLAMA_NUM_CTX': 2048, 'OLLAMA_DEBUG': False}, tmp_path / 'environment.json')


@pytest.fixture
def app():
    dashboard = DashboardApp()
    return dashboard.create_app({'TESTING': True, 'RATELIMIT_ENABLED': False, 'FRONTEND_DIST': ''})


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_process():
    return FakeProcess


@pytest.fixture
def drain_events():
    return drain
