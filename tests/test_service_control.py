import pytest

import ollama_dashboard.components.service_control.routes as service_control_routes
from ollama_dashboard.components.service_control.service import ServiceControlService
from ollama_dashboard.core.errors import ServiceError


@pytest.fixture
def control(fake_supervisor, fake_client, event_bus):
    return ServiceControlService(supervisor=fake_supervisor, client=fake_client,
                                 event_bus=event_bus, host_label='127.0.0.1:11434')


def statuses(drain_events, subscriber):
    return [e['data']['status'] for e in drain_events(subscriber) if e['event'] == 'service_status']


class TestServiceControl:

    def test_start_emits_running(self, control, fake_supervisor, subscriber, drain_events):
        result = control.start_service(wait=True)

        assert result == {'message': 'Service starting...', 'success': True}
        fake_supervisor.start.assert_called_once()
        assert statuses(drain_events, subscriber) == ['running']

    def test_start_failure_emits_error(self, control, fake_supervisor, subscriber, drain_events):
        fake_supervisor.start.side_effect = ServiceError('Port 11434 is in use')

        result = control.start_service(wait=True)

        assert result['success'] is True
        events = drain_events(subscriber)
        assert events[0]['data'] == {'status': 'error', 'message': 'Port 11434 is in use'}

    def test_stop(self, control, subscriber, drain_events):
        assert control.stop_service() == {'message': 'Service stopping...'}
        assert statuses(drain_events, subscriber) == ['stopped']

    def test_stop_without_child_is_quiet(self, control, fake_supervisor, subscriber, drain_events):
        fake_supervisor.stop.return_value = False

        control.stop_service()

        assert drain_events(subscriber) == []

    def test_status_running(self, control):
        assert control.get_status() == {'running': True, 'host': '127.0.0.1:11434', 'version': '0.9.0'}

    def test_status_stopped(self, control, fake_client):
        fake_client.is_running.return_value = False

        assert control.get_status() == {'running': False, 'host': '127.0.0.1:11434', 'version': 'unknown'}
        fake_client.version.assert_not_called()


class TestServiceControlRoutes:

    @pytest.fixture(autouse=True)
    def install_service(self, monkeypatch, control):
        monkeypatch.setattr(service_control_routes, 'service', control)

    def test_start(self, client):
        response = client.post('/api/service/start')

        assert response.status_code == 200
        assert response.get_json()['message'] == 'Service starting...'

    def test_stop(self, client):
        assert client.post('/api/service/stop').get_json() == {'message': 'Service stopping...'}

    def test_status(self, client):
        assert client.get('/api/service/status').get_json()['running'] is True

    def test_available(self, client, fake_client):
        fake_client.is_running.return_value = False

        assert client.get('/api/service/available').get_json() == {'available': False}
