"""
Core services for dashboard components
"""
from collections import deque

from ..config.settings import DashboardConfig
from .environment import EnvironmentStore
from .errors import CommandError, OllamaDashboardError, OllamaUnavailableError, ServiceError
from .events import EventBus, format_sse
from .ollama_client import OllamaClient
from .supervisor import OllamaSupervisor

# Global state - shared across all components
system_logs = deque(maxlen=DashboardConfig.MAX_LOG_ENTRIES)
event_bus = EventBus(maxsize=DashboardConfig.EVENT_QUEUE_SIZE)
environment = EnvironmentStore(DashboardConfig.DEFAULT_ENVIRONMENT, DashboardConfig.ENVIRONMENT_FILE)
ollama_client = OllamaClient(DashboardConfig.OLLAMA_BASE_URL)
supervisor = OllamaSupervisor(ollama_client, environment)

__all__ = [
    'CommandError',
    'EnvironmentStore',
    'EventBus',
    'OllamaClient',
    'OllamaDashboardError',
    'OllamaSupervisor',
    'OllamaUnavailableError',
    'ServiceError',
    'environment',
    'event_bus',
    'format_sse',
    'ollama_client',
    'supervisor',
    'system_logs',
]
