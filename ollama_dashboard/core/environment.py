"""
Environment variable store
Variables the UI edits and that are handed to every ollama process we spawn
"""
import json
import logging
import math
import threading
from pathlib import Path

logger = logging.getLogger(__name__)


class EnvironmentStore:
    """Daemon environment settings, persisted as JSON"""

    def __init__(self, defaults, path=None):
        self.defaults = dict(defaults)
        self.path = Path(path) if path else None
        self._variables = dict(defaults)
        self._lock = threading.Lock()

    def get(self):
        with self._lock:
            return dict(self._variables)

    def load(self):
        """Restore persisted variables, keeping defaults when there are none"""
        if not self.path or not self.path.exists():
            return self.get()

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                stored = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read environment file {self.path}: {e}")
            return self.get()

        if not isinstance(stored, dict):
            logger.warning(f"Ignoring environment file {self.path}: not a JSON object")
            return self.get()

        with self._lock:
            self._variables = stored
        logger.info(f"Loaded {len(stored)} environment variables from {self.path}")
        return self.get()

    def save(self, variables):
        """Replace all variables and persist them"""
        if not isinstance(variables, dict):
            raise ValueError('environment variables must be an object')
        for key, value in variables.items():
            if isinstance(value, float) and not math.isfinite(value):
                raise ValueError(f'{key} must be a finite number')

        with self._lock:
            self._variables = dict(variables)

        if self.path:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.path, 'w', encoding='utf-8') as f:
                    json.dump(variables, f, indent=2, ensure_ascii=False)
            except OSError as e:
                logger.error(f"Failed to persist environment variables to {self.path}: {e}")
        return self.get()

    def to_process_env(self, base=None, skip=()):
        """Merge the stored variables into a process environment

        Strings are passed when non-empty, booleans only when true (as "true"),
        finite numbers as integers. Anything else is left out.
        """
        env = dict(base or {})
        for key, value in self.get().items():
            if key in skip:
                continue
            if isinstance(value, bool):
                if value:
                    env[key] = 'true'
            elif isinstance(value, int):
                env[key] = str(value)
            elif isinstance(value, float):
                if math.isfinite(value):
                    env[key] = str(int(value))
            elif isinstance(value, str) and value != '':
                env[key] = value
        return env
