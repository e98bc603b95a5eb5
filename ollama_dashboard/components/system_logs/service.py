"""
System Logs Service
"""
from .. import register_component

DEFAULT_LOG_LIMIT = 50


@register_component('system_logs')
class SystemLogsService:
    """Service for the log view, reading the relayed log buffer"""

    def __init__(self, log_buffer=None):
        from ... import core

        self.log_buffer = log_buffer if log_buffer is not None else core.system_logs

    def get_logs(self, level_filter='ALL', limit=DEFAULT_LOG_LIMIT):
        """Most recent log entries, optionally filtered by level"""
        logs = list(self.log_buffer)

        if level_filter and level_filter.upper() != 'ALL':
            level_filter = level_filter.upper()
            logs = [log for log in logs if log.get('level') == level_filter]

        if not isinstance(limit, int) or limit < 1:
            limit = DEFAULT_LOG_LIMIT
        if len(logs) > limit:
            logs = logs[-limit:]
        return logs
