import json
import logging
from collections import deque

import ollama_dashboard.components.system_logs.routes as system_logs_routes
from ollama_dashboard.components.system_logs.service import SystemLogsService
from ollama_dashboard.components.system_logs.sse_handler import EventSSEHandler
from ollama_dashboard.core.events import EventBus, format_sse
from ollama_dashboard.core.log_relay import LOG_FORMAT, EventLogHandler


class TestEventBus:

    def test_emit_reaches_every_subscriber(self, event_bus, drain_events):
        first = event_bus.subscribe()
        second = event_bus.subscribe()

        event_bus.emit('log', {'message': 'hello'})

        for subscriber in (first, second):
            events = drain_events(subscriber)
            assert len(events) == 1
            assert events[0]['event'] == 'log'
            assert events[0]['data'] == {'message': 'hello'}

    def test_full_subscriber_does_not_block_others(self, drain_events):
        bus = EventBus(maxsize=1)
        slow = bus.subscribe()
        fast = bus.subscribe(maxsize=10)

        bus.emit('log', 1)
        bus.emit('log', 2)

        assert [e['data'] for e in drain_events(slow)] == [1]
        assert [e['data'] for e in drain_events(fast)] == [1, 2]

    def test_unsubscribe_stops_delivery(self, event_bus, drain_events):
        subscriber = event_bus.subscribe()
        event_bus.unsubscribe(subscriber)

        event_bus.emit('log', 'ignored')

        assert drain_events(subscriber) == []
        assert event_bus.subscriber_count() == 0

    def test_format_sse(self):
        frame = format_sse({'event': 'chat_stream', 'data': {'content': 'hi'}})

        assert frame.startswith('event: chat_stream\n')
        assert frame.endswith('\n\n')
        assert json.loads(frame.split('data: ', 1)[1]) == {'content': 'hi'}


class TestEventLogHandler:

    def _logger(self, handler):
        logger = logging.getLogger('test.relay')
        logger.handlers = [handler]
        logger.propagate = False
        logger.setLevel(logging.DEBUG)
        return logger

    def test_records_are_buffered_and_emitted(self, event_bus, subscriber, drain_events):
        buffer = deque(maxlen=10)
        logger = self._logger(EventLogHandler(event_bus, buffer))

        logger.warning('model list is empty')

        assert len(buffer) == 1
        assert buffer[0]['level'] == 'WARNING'
        assert buffer[0]['message'] == 'model list is empty'
        events = drain_events(subscriber)
        assert events[0]['event'] == 'log'
        assert events[0]['data']['message'] == 'model list is empty'

    def test_message_is_unformatted(self, event_bus, subscriber, drain_events):
        buffer = deque(maxlen=10)
        handler = EventLogHandler(event_bus, buffer)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger = self._logger(handler)

        logger.info('pulled %s', 'llama3:8b')

        assert buffer[0]['message'] == 'pulled llama3:8b'
        assert buffer[0]['logger'] == 'test.relay'
        assert drain_events(subscriber)[0]['data']['message'] == 'pulled llama3:8b'

    def test_address_in_arguments_is_dropped(self, event_bus, subscriber, drain_events):
        buffer = deque(maxlen=10)
        logger = self._logger(EventLogHandler(event_bus, buffer))

        logger.info('fault at %s', '0xdeadbeef')

        assert len(buffer) == 0

    def test_memory_addresses_are_dropped(self, event_bus, subscriber, drain_events):
        buffer = deque(maxlen=10)
        logger = self._logger(EventLogHandler(event_bus, buffer))

        logger.info('goroutine 1 [running]: pc=0x7ff6a3b2c1d0')

        assert len(buffer) == 0
        assert drain_events(subscriber) == []


class TestSystemLogs:

    def test_level_filter_and_limit(self):
        buffer = deque([
            {'level': 'INFO', 'message': 'a'},
            {'level': 'ERROR', 'message': 'b'},
            {'level': 'INFO', 'message': 'c'},
            {'level': 'INFO', 'message': 'd'},
        ])
        service = SystemLogsService(log_buffer=buffer)

        assert [log['message'] for log in service.get_logs('INFO', limit=2)] == ['c', 'd']
        assert [log['message'] for log in service.get_logs('error')] == ['b']
        assert len(service.get_logs('ALL', limit=0)) == 4

    def test_logs_route(self, client, monkeypatch):
        buffer = deque([{'level': 'INFO', 'message': 'started'}])
        monkeypatch.setattr(system_logs_routes, 'service', SystemLogsService(log_buffer=buffer))

        response = client.get('/api/logs?level=INFO&limit=5')

        assert response.status_code == 200
        assert response.get_json() == [{'level': 'INFO', 'message': 'started'}]

    def test_sse_generator_streams_events_and_unsubscribes(self, event_bus):
        handler = EventSSEHandler(event_bus=event_bus, heartbeat_seconds=0.01)
        stream = handler.generate(max_idle_beats=1)

        first = next(stream)
        assert event_bus.subscriber_count() == 1
        event_bus.emit('model_pull_progress', {'progress': 50.0})
        frames = [first] + list(stream)

        assert frames[0] == ': connected\n\n'
        assert frames[1].startswith('event: model_pull_progress\n')
        assert frames[-1] == ': heartbeat\n\n'
        assert event_bus.subscriber_count() == 0

    def test_sse_generator_subscribes_only_when_iterated(self, event_bus):
        handler = EventSSEHandler(event_bus=event_bus, heartbeat_seconds=0.01)

        stream = handler.generate()
        assert event_bus.subscriber_count() == 0

        next(stream)
        assert event_bus.subscriber_count() == 1
        stream.close()
        assert event_bus.subscriber_count() == 0

    def test_non_positive_limit_uses_default(self):
        buffer = deque({'level': 'INFO', 'message': str(i)} for i in range(60))
        service = SystemLogsService(log_buffer=buffer)

        for limit in (-1, 0):
            logs = service.get_logs(limit=limit)
            assert len(logs) == 50
            assert logs[-1]['message'] == '59'

        assert [log['message'] for log in service.get_logs(limit=-1)][:1] == ['10']

    def test_negative_limit_route(self, client, monkeypatch):
        buffer = deque({'level': 'INFO', 'message': str(i)} for i in range(5))
        monkeypatch.setattr(system_logs_routes, 'service', SystemLogsService(log_buffer=buffer))

        response = client.get('/api/logs?limit=-1')

        assert [log['message'] for log in response.get_json()] == ['0', '1', '2', '3', '4']
