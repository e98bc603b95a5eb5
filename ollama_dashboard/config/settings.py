"""
Dashboard configuration settings
"""
import os
import platform
from pathlib import Path


def _home_dir():
    if platform.system() == 'Windows':
        return Path(os.environ.get('USERPROFILE', str(Path.home())))
    return Path(os.environ.get('HOME', str(Path.home())))


class DashboardConfig:
    """Centralized configuration for dashboard"""

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY', 'ollama-dashboard-local')
    JSON_SORT_KEYS = False

    # Rate limiting
    RATELIMIT_ENABLED = os.environ.get('OLLAMA_DASHBOARD_RATELIMIT', 'true').lower() != 'false'
    RATELIMIT_STORAGE_URI = "memory://"
    RATELIMIT_DEFAULT = "600 per minute"

    # Dashboard HTTP server
    DASHBOARD_HOST = os.environ.get('OLLAMA_DASHBOARD_HOST', '127.0.0.1')
    DASHBOARD_PORT = int(os.environ.get('OLLAMA_DASHBOARD_PORT', 8081))

    # WebSocket chat relay, kept off the daemon port
    WEBSOCKET_HOST = os.environ.get('OLLAMA_DASHBOARD_WS_HOST', '0.0.0.0')
    WEBSOCKET_PORT = int(os.environ.get('OLLAMA_DASHBOARD_WS_PORT', 11435))
    WEBSOCKET_PATH = '/ws/chat'

    # Ollama daemon
    OLLAMA_HOST = '127.0.0.1'
    OLLAMA_PORT = int(os.environ.get('OLLAMA_DASHBOARD_OLLAMA_PORT', 11434))
    OLLAMA_BASE_URL = f'http://{OLLAMA_HOST}:{OLLAMA_PORT}'
    OLLAMA_BINARY = os.environ.get('OLLAMA_BINARY', '')
    BUNDLED_BINARY_DIRS = {
        'Windows': ('ollama-intel-win', 'ollama.exe'),
        'default': ('ollama-intel-ubuntu', 'ollama'),
    }

    # Timeouts in seconds
    TIMEOUTS = {
        'probe': 1,          # port check
        'status': 2,         # version / tags health check
        'list': 5,           # model listing
        'chat': 60,          # streaming chat
    }
    STARTUP_POLL_ATTEMPTS = 30
    STARTUP_POLL_INTERVAL = 0.1
    PORT_RELEASE_WAIT = 0.5
    PROCESS_KILL_WAIT = 0.1

    # Persisted state
    DATA_DIR = Path(os.environ.get('OLLAMA_DASHBOARD_DATA_DIR', str(_home_dir() / '.ollama_dashboard')))
    ENVIRONMENT_FILE = DATA_DIR / 'environment.json'
    STATS_FILE = _home_dir() / '.ollama' / 'stats.json'

    # Variables handed to `ollama serve`
    DEFAULT_ENVIRONMENT = {
        'OLLAMA_MODEL_SOURCE': 'modelscope',
        'OLLAMA_NUM_CTX': 2048,
        'OLLAMA_INTEL_GPU': True,
        'OLLAMA_DEBUG': False,
        'ONEAPI_DEVICE_SELECTOR': '',
    }

    # Front end bundle served from "/" when present
    FRONTEND_DIST = os.environ.get('OLLAMA_DASHBOARD_FRONTEND', '')

    # UI settings
    LOG_LEVEL = os.environ.get('OLLAMA_DASHBOARD_LOG_LEVEL', 'INFO').upper()
    MAX_LOG_ENTRIES = 1000
    EVENT_QUEUE_SIZE = 500
    SSE_HEARTBEAT_SECONDS = 15
    ONLINE_MODELS_PAGE_SIZE = 20

    @classmethod
    def ollama_host_label(cls):
        return f'{cls.OLLAMA_HOST}:{cls.OLLAMA_PORT}'
