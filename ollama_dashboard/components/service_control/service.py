"""
Service Control Service
Start, stop and probe the local Ollama daemon
"""
import logging
import threading

from .. import register_component
from ...core import errors

logger = logging.getLogger(__name__)


@register_component('service_control')
class ServiceControlService:
    """Service for the daemon start/stop controls"""

    def __init__(self, supervisor=None, client=None, event_bus=None, host_label=None):
        from ... import core
        from ...config.settings import DashboardConfig

        self.supervisor = supervisor or core.supervisor
        self.client = client or core.ollama_client
        self.event_bus = event_bus or core.event_bus
        self.host_label = host_label or DashboardConfig.ollama_host_label()

    def start_service(self, wait=False):
        """Start the daemon in the background and return immediately"""
        thread = threading.Thread(target=self._start_in_background, daemon=True)
        thread.start()
        if wait:
            thread.join()
        return {
            'message': 'Service starting...',
            'success': True,
        }

    def _start_in_background(self):
        try:
            self.supervisor.start()
        except errors.ServiceError as e:
            logger.error(f"Service start failed: {e}")
            self.event_bus.emit('service_status', {'status': 'error', 'message': str(e)})
            return
        self.event_bus.emit('service_status', {'status': 'running', 'message': 'Ollama service started'})

    def stop_service(self):
        """Kill the daemon we started"""
        if self.supervisor.stop():
            self.event_bus.emit('service_status', {'status': 'stopped', 'message': 'Ollama service stopped'})
        return {
            'message': 'Service stopping...',
        }

    def get_status(self):
        """Running flag, host and version of the daemon"""
        running = self.client.is_running()
        version = self.client.version() if running else 'unknown'
        status = {
            'running': running,
            'host': self.host_label,
            'version': version,
        }
        logger.debug(f"Service status: {status}")
        return status

    def is_available(self):
        return self.client.is_running()
