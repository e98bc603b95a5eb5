"""
Log relay
Mirrors log records into the UI log view and the "log" event stream
"""
import logging
import re
from datetime import datetime

# Daemon debug output full of pointers is noise for the log view
MEMORY_ADDRESS_PATTERN = re.compile(r'0x[0-9a-fA-F]+')

LOG_FORMAT = '%(asctime)s %(name)s:%(lineno)d %(message)s'


class EventLogHandler(logging.Handler):
    """Logging handler that feeds the system log buffer and the event bus"""

    def __init__(self, event_bus, log_buffer, level=logging.NOTSET):
        super().__init__(level)
        self.event_bus = event_bus
        self.log_buffer = log_buffer

    def emit(self, record):
        try:
            if MEMORY_ADDRESS_PATTERN.search(self.format(record)):
                return

            entry = {
                'timestamp': datetime.fromtimestamp(record.created).isoformat(),
                'level': record.levelname,
                'logger': record.name,
                'message': record.getMessage(),
            }
            self.log_buffer.append(entry)
            self.event_bus.emit('log', entry)
        except Exception:
            self.handleError(record)


def install_log_relay(event_bus, log_buffer, level=logging.INFO):
    """Attach the relay to the root logger, once"""
    root = logging.getLogger()
    for handler in root.handlers:
        if isinstance(handler, EventLogHandler):
            return handler

    handler = EventLogHandler(event_bus, log_buffer, level=level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    if root.level > level or root.level == logging.NOTSET:
        root.setLevel(level)
    return handler
