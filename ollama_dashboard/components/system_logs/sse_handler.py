"""
Event stream SSE Handler
Pushes event bus traffic (logs, pull progress, chat chunks) to the UI
"""
import queue

from flask import Response, stream_with_context

from ...core.events import format_sse


class EventSSEHandler:
    """Handle SSE streaming of event bus events"""

    def __init__(self, event_bus=None, heartbeat_seconds=None):
        from ... import core
        from ...config.settings import DashboardConfig

        self.event_bus = event_bus or core.event_bus
        self.heartbeat_seconds = heartbeat_seconds or DashboardConfig.SSE_HEARTBEAT_SECONDS

    def generate(self, max_idle_beats=None):
        """Yield SSE frames, with a heartbeat comment after each idle interval

        The subscription lives only while the generator runs.
        """
        idle_beats = 0
        subscriber = self.event_bus.subscribe()
        try:
            yield ": connected\n\n"
            while True:
                try:
                    event = subscriber.get(timeout=self.heartbeat_seconds)
                except queue.Empty:
                    idle_beats += 1
                    yield ": heartbeat\n\n"
                    if max_idle_beats is not None and idle_beats >= max_idle_beats:
                        return
                    continue
                yield format_sse(event)
        finally:
            self.event_bus.unsubscribe(subscriber)

    def stream_events(self):
        """SSE endpoint response"""
        return Response(
            stream_with_context(self.generate()),
            mimetype="text/event-stream",
            headers={
                'Cache-Control': 'no-cache',
                'X-Accel-Buffering': 'no'
            }
        )
