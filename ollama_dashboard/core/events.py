"""
Application event bus
Carries log lines, pull progress and chat chunks to the UI over SSE
"""
import json
import queue
import threading
from datetime import datetime


class EventBus:
    """Fan-out of named events to subscriber queues"""

    def __init__(self, maxsize=500):
        self.maxsize = maxsize
        self._subscribers = set()
        self._lock = threading.Lock()

    def subscribe(self, maxsize=None):
        """Register a new subscriber and return its queue"""
        subscriber = queue.Queue(maxsize=maxsize or self.maxsize)
        with self._lock:
            self._subscribers.add(subscriber)
        return subscriber

    def unsubscribe(self, subscriber):
        with self._lock:
            self._subscribers.discard(subscriber)

    def subscriber_count(self):
        with self._lock:
            return len(self._subscribers)

    def emit(self, name, data):
        """Publish an event to every subscriber without blocking

        A subscriber whose queue is full misses the event; the others still get it.
        """
        event = {
            'event': name,
            'data': data,
            'timestamp': datetime.now().isoformat(),
        }
        with self._lock:
            subscribers = list(self._subscribers)
        for subscriber in subscribers:
            try:
                subscriber.put_nowait(event)
            except queue.Full:
                continue
        return event


def format_sse(event):
    """Render a bus event as a Server-Sent Events frame"""
    payload = json.dumps(event['data'], ensure_ascii=False, default=str)
    return f"event: {event['event']}\ndata: {payload}\n\n"
