"""
Ollama REST client
Thin wrapper over the daemon HTTP API on 127.0.0.1:11434
"""
import json
import logging

import requests

from ..config.settings import DashboardConfig
from .errors import OllamaUnavailableError

logger = logging.getLogger(__name__)


class OllamaClient:
    """HTTP access to the local Ollama daemon"""

    def __init__(self, base_url=None, timeouts=None, session=None):
        self.base_url = (base_url or DashboardConfig.OLLAMA_BASE_URL).rstrip('/')
        self.timeouts = dict(DashboardConfig.TIMEOUTS)
        if timeouts:
            self.timeouts.update(timeouts)
        self.session = session or requests.Session()

    def url(self, path):
        return f"{self.base_url}{path}"

    def is_running(self):
        """Daemon answers /api/tags with 200"""
        url = self.url('/api/tags')
        try:
            response = self.session.get(url, timeout=self.timeouts['status'])
        except requests.exceptions.RequestException as e:
            logger.debug(f"Health check {url} failed: {e}")
            return False

        running = response.status_code == 200
        logger.debug(f"Health check {url}: HTTP {response.status_code}, running={running}")
        return running

    def port_in_use(self, port):
        """Something answers HTTP on the given local port"""
        try:
            response = self.session.get(f"http://127.0.0.1:{port}/api/tags", timeout=self.timeouts['probe'])
            response.close()
            return True
        except requests.exceptions.RequestException:
            return False

    def version(self):
        """Daemon version string, "unknown" when unavailable"""
        try:
            response = self.session.get(self.url('/api/version'), timeout=self.timeouts['status'])
        except requests.exceptions.RequestException as e:
            logger.info(f"Version lookup failed: {e}")
            return 'unknown'

        if response.status_code != 200:
            logger.info(f"Version lookup failed: HTTP {response.status_code}")
            return 'unknown'

        try:
            version = response.json().get('version')
        except (ValueError, AttributeError):
            return 'unknown'
        return version if isinstance(version, str) else 'unknown'

    def list_models(self):
        """Raw model entries from /api/tags"""
        try:
            response = self.session.get(self.url('/api/tags'), timeout=self.timeouts['list'])
        except requests.exceptions.RequestException as e:
            raise OllamaUnavailableError(f"Model list request failed: {e}")

        if response.status_code != 200:
            raise OllamaUnavailableError(f"Model list request failed: HTTP {response.status_code}",
                                         status_code=response.status_code)

        try:
            result = response.json()
        except ValueError as e:
            raise OllamaUnavailableError(f"Model list is not valid JSON: {e}")

        models = result.get('models') if isinstance(result, dict) else None
        if not isinstance(models, list):
            logger.warning("Model list response has no 'models' array")
            return []
        return [m for m in models if isinstance(m, dict)]

    def chat_stream(self, payload):
        """POST /api/chat and yield each decoded NDJSON chunk

        Lines that are not JSON objects are skipped.
        """
        try:
            response = self.session.post(
                self.url('/api/chat'),
                json=payload,
                stream=True,
                timeout=self.timeouts['chat'],
            )
        except requests.exceptions.RequestException as e:
            raise OllamaUnavailableError(f"Chat request failed: {e}")

        with response:
            if response.status_code != 200:
                raise OllamaUnavailableError(f"Chat request failed: HTTP {response.status_code}",
                                             status_code=response.status_code)
            try:
                for line in response.iter_lines(decode_unicode=True):
                    if not line:
                        continue
                    try:
                        chunk = json.loads(line)
                    except ValueError:
                        continue
                    if isinstance(chunk, dict):
                        yield chunk
            except requests.exceptions.RequestException as e:
                raise OllamaUnavailableError(f"Chat stream interrupted: {e}")
