"""
Models Service
Local model management: list, pull with progress, delete, show
"""
import logging
import threading
from datetime import datetime, timedelta

from .. import register_component
from ...core.errors import CommandError, OllamaUnavailableError
from ...core.schemas import ModelInfo

logger = logging.getLogger(__name__)

PULL_PROGRESS_EVENT = 'model_pull_progress'
PROGRESS_TIME_FORMAT = '%Y-%m-%d %H:%M:%S'

PLACEHOLDER_MODEL_DETAILS = {
    'license': '...',
    'modelfile': '# Modelfile generated by ollama...',
    'parameters': {
        'num_ctx': 2048,
    },
    'template': '{{ if .System }}...',
}


def sample_models(now=None):
    """Models shown while the daemon cannot be reached"""
    now = now or datetime.now().astimezone()
    return [
        ModelInfo(
            name='llama3:8b',
            size='4.7 GB',
            modified_at=(now - timedelta(hours=24)).isoformat(timespec='seconds'),
            details={
                'format': 'gguf',
                'families': ['llama'],
                'parameter_size': '8B',
                'quantization_level': 'Q4_K_M',
            },
        ),
        ModelInfo(
            name='mistral:7b',
            size='4.1 GB',
            modified_at=(now - timedelta(hours=48)).isoformat(timespec='seconds'),
            details={
                'format': 'gguf',
                'families': ['transformer'],
                'parameter_size': '7B',
                'quantization_level': 'Q5_K_M',
            },
        ),
    ]


def parse_pull_progress(line):
    """Extract a percentage from a pull output line

    Returns (percent, stripped line), or (-1, line) when the line carries no
    percentage, e.g. "pulling 6a0746a1ec1a... 45% ▕██      ▏ 2.1 GB/4.7 GB".
    """
    if '%' not in line:
        return -1, line

    stripped = line.strip()
    for part in stripped.split(' '):
        if '%' in part:
            try:
                return float(part.strip('%')), stripped
            except ValueError:
                continue
    return -1, line


def is_error_line(line):
    return 'Error:' in line or 'error:' in line


class PullJob:
    """One `ollama pull` run reporting progress events"""

    def __init__(self, supervisor, event_bus, model_name):
        self.supervisor = supervisor
        self.event_bus = event_bus
        self.model_name = model_name
        self.error_reported = threading.Event()

    def send_progress(self, status, progress, message):
        event = {
            'model': self.model_name,
            'status': status,
            'progress': progress,
            'message': message,
            'time': datetime.now().strftime(PROGRESS_TIME_FORMAT),
        }
        self.event_bus.emit(PULL_PROGRESS_EVENT, event)
        logger.info(f"Pull progress: {self.model_name} - {status} ({progress:.1f}%)")
        return event

    def report_error(self, message):
        self.error_reported.set()
        self.send_progress('error', 0, message)

    def run(self):
        logger.info(f"Pulling model {self.model_name}")
        self.send_progress('started', 0, 'Pull started')

        try:
            process = self.supervisor.spawn('pull', self.model_name)
        except CommandError as e:
            logger.error(f"Pull of {self.model_name} could not start: {e}")
            self.report_error(str(e))
            return

        readers = [
            threading.Thread(target=self.read_output, args=(process.stdout, 'stdout'), daemon=True),
            threading.Thread(target=self.read_output, args=(process.stderr, 'stderr'), daemon=True),
        ]
        for reader in readers:
            reader.start()

        returncode = process.wait()
        for reader in readers:
            reader.join()

        if returncode != 0:
            logger.error(f"Pull of {self.model_name} failed with exit code {returncode}")
            if not self.error_reported.is_set():
                self.report_error(f"ollama pull exited with code {returncode}")
            return

        self.send_progress('completed', 100, 'Model pull completed')
        logger.info(f"Model pull completed: {self.model_name}")

    def read_output(self, stream, stream_type):
        """Turn output lines into progress events

        An error line on stderr ends reading of that stream.
        """
        if stream is None:
            return
        try:
            for line in stream:
                line = line.rstrip('\r\n')
                logger.debug(f"Pull output [{stream_type}]: {line}")

                if stream_type == 'stderr' and is_error_line(line):
                    self.report_error(line)
                    return

                progress, message = parse_pull_progress(line)
                if progress >= 0:
                    self.send_progress('downloading', progress, message)
        except (OSError, ValueError) as e:
            logger.error(f"Reading pull output failed: {e}")
            self.report_error(f"Reading pull output failed: {e}")


@register_component('models')
class ModelsService:
    """Service for the local models view"""

    def __init__(self, client=None, supervisor=None, event_bus=None):
        from ... import core

        self.client = client or core.ollama_client
        self.supervisor = supervisor or core.supervisor
        self.event_bus = event_bus or core.event_bus

    def list_models(self):
        """Installed models, or the sample list when the daemon gives none"""
        try:
            raw_models = self.client.list_models()
        except OllamaUnavailableError as e:
            logger.warning(f"Listing models failed, returning sample models: {e}")
            return sample_models()

        models = [ModelInfo.from_api(m) for m in raw_models]
        logger.info(f"Found {len(models)} models")
        if not models:
            logger.info("Model list is empty, returning sample models")
            return sample_models()
        return models

    def pull_model(self, name, wait=False):
        """Start a background pull and return immediately"""
        name = self._validate_name(name)
        job = PullJob(self.supervisor, self.event_bus, name)
        thread = threading.Thread(target=job.run, daemon=True)
        thread.start()
        if wait:
            thread.join()
        return {
            'message': f'Started pulling model: {name}',
            'model': name,
            'status': 'started',
        }

    def delete_model(self, name, wait=False):
        """Remove a model in the background"""
        name = self._validate_name(name)

        def remove():
            try:
                self.supervisor.run_command('rm', name)
            except CommandError as e:
                logger.error(f"Deleting model {name} failed: {e}")

        thread = threading.Thread(target=remove, daemon=True)
        thread.start()
        if wait:
            thread.join()
        return {
            'message': f'Model deleted: {name}',
        }

    def show_model(self, name):
        """Modelfile, parameters and template of a model"""
        name = self._validate_name(name)
        try:
            return self.supervisor.run_command_json('show', name, '--format', 'json')
        except CommandError as e:
            logger.warning(f"Showing model {name} failed, returning placeholder: {e}")
            return {key: (dict(value) if isinstance(value, dict) else value)
                    for key, value in PLACEHOLDER_MODEL_DETAILS.items()}

    @staticmethod
    def _validate_name(name):
        if not isinstance(name, str) or not name.strip():
            raise ValueError('model name is required')
        name = name.strip()
        if name.startswith('-'):
            raise ValueError(f'invalid model name: {name}')
        return name
