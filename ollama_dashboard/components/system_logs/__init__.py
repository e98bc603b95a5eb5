"""
System Logs Component
Handles the log view and real-time updates via SSE
"""
from .routes import system_logs_bp, init_system_logs
from .service import SystemLogsService
from .sse_handler import EventSSEHandler

__all__ = ['system_logs_bp', 'init_system_logs', 'SystemLogsService', 'EventSSEHandler']
