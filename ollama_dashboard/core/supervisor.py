"""
Ollama process supervisor
Owns the `ollama serve` child process and runs one-shot ollama CLI commands
"""
import json
import logging
import os
import platform
import subprocess
import sys
import threading
import time
from datetime import datetime
from pathlib import Path

import psutil

from ..config.settings import DashboardConfig
from .errors import CommandError, ServiceError

logger = logging.getLogger(__name__)
daemon_logger = logging.getLogger('ollama.serve')


def executable_dir():
    """Directory of the running program (the frozen app or the interpreter entry script)"""
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).resolve().parent
    if sys.argv and sys.argv[0]:
        return Path(sys.argv[0]).resolve().parent
    return Path('.').resolve()


class OllamaSupervisor:
    """Starts, stops and talks to the ollama binary"""

    def __init__(self, client, environment, config=DashboardConfig):
        self.client = client
        self.environment = environment
        self.config = config
        self.binary_path = config.OLLAMA_BINARY or 'ollama'
        self.process = None
        self.started_at = None
        self._lock = threading.Lock()

    def resolve_binary(self, base_dir=None, system=None):
        """Pick the bundled Intel build next to the executable, else ollama on PATH"""
        if self.config.OLLAMA_BINARY:
            self.binary_path = self.config.OLLAMA_BINARY
            logger.info(f"Using ollama binary from OLLAMA_BINARY: {self.binary_path}")
            return self.binary_path

        base_dir = Path(base_dir) if base_dir else executable_dir()
        system = system or platform.system()
        folder, name = self.config.BUNDLED_BINARY_DIRS.get(system, self.config.BUNDLED_BINARY_DIRS['default'])
        candidate = base_dir / folder / name
        logger.info(f"Looking for bundled ollama binary at {candidate}")

        if candidate.exists():
            self.binary_path = str(candidate)
        else:
            logger.info("Bundled binary not found, falling back to ollama on PATH")
            self.binary_path = 'ollama'
        return self.binary_path

    def is_managed_running(self):
        """The child we started is still alive"""
        return self.process is not None and self.process.poll() is None

    def start(self):
        """Start `ollama serve`, clearing the port first if something holds it

        Raises ServiceError when the port cannot be freed, the binary cannot be
        spawned or the API does not come up in time.
        """
        port = self.config.OLLAMA_PORT
        with self._lock:
            if self.client.port_in_use(port):
                logger.info(f"Port {port} is in use, trying to free it")
                if not self.kill_process_on_port(port):
                    raise ServiceError(f"Port {port} is in use, please stop the process holding it")
                time.sleep(self.config.PORT_RELEASE_WAIT)

            if self.process is not None:
                self._kill_child()
                time.sleep(self.config.PROCESS_KILL_WAIT)

            env = self.environment.to_process_env(base=os.environ)
            logger.info(f"Starting {self.binary_path} serve with environment {self.environment.get()}")
            try:
                process = subprocess.Popen(
                    [self.binary_path, 'serve'],
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    env=env,
                    text=True,
                    encoding='utf-8',
                    errors='replace',
                )
            except OSError as e:
                raise ServiceError(f"Failed to start ollama service: {e}")

            self.process = process
            self.started_at = datetime.now()
            logger.info(f"Ollama service started (PID: {process.pid})")

        for stream in (process.stdout, process.stderr):
            if stream is not None:
                threading.Thread(target=self._relay_output, args=(stream,), daemon=True).start()

        for _ in range(self.config.STARTUP_POLL_ATTEMPTS):
            if self.client.port_in_use(port):
                return process
            time.sleep(self.config.STARTUP_POLL_INTERVAL)

        raise ServiceError("Ollama service startup timed out")

    def stop(self):
        """Kill the child process; returns whether one was running"""
        with self._lock:
            if self.process is None:
                return False
            self._kill_child()
            self.process = None
            self.started_at = None
        logger.info("Ollama service stopped")
        return True

    def uptime_seconds(self):
        if self.started_at is None or not self.is_managed_running():
            return None
        return int((datetime.now() - self.started_at).total_seconds())

    def _kill_child(self):
        try:
            self.process.kill()
            self.process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            logger.warning(f"Ollama process {self.process.pid} did not exit after kill")
        except OSError as e:
            logger.debug(f"Ollama process already gone: {e}")

    def _relay_output(self, stream):
        """Forward daemon output to the log relay, line by line"""
        try:
            for line in stream:
                line = line.rstrip()
                if line:
                    daemon_logger.info(line)
        except (OSError, ValueError) as e:
            logger.debug(f"Stopped reading daemon output: {e}")

    def kill_process_on_port(self, port):
        """Kill every process listening on a local port"""
        killed = False
        try:
            connections = psutil.net_connections(kind='inet')
        except (psutil.AccessDenied, OSError) as e:
            logger.warning(f"Cannot inspect connections on port {port}: {e}")
            return False

        pids = {conn.pid for conn in connections
                if conn.laddr and conn.laddr.port == port and conn.pid
                and conn.status == psutil.CONN_LISTEN}
        for pid in pids:
            try:
                psutil.Process(pid).kill()
                logger.info(f"Killed PID {pid} holding port {port}")
                killed = True
            except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
                logger.warning(f"Could not kill PID {pid} on port {port}: {e}")

        if killed:
            time.sleep(self.config.PROCESS_KILL_WAIT)
        return killed

    def command_env(self, args):
        # `list` must show local models, so the model source is left out
        skip = ('OLLAMA_MODEL_SOURCE',) if 'list' in args else ()
        return self.environment.to_process_env(base=os.environ, skip=skip)

    def run_command(self, *args):
        """Run an ollama CLI command and return its combined output"""
        logger.info(f"Running {self.binary_path} {' '.join(args)}")
        try:
            result = subprocess.run(
                [self.binary_path, *args],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                env=self.command_env(args),
                text=True,
                encoding='utf-8',
                errors='replace',
            )
        except OSError as e:
            raise CommandError(f"Failed to run ollama {' '.join(args)}: {e}")

        output = result.stdout or ''
        if result.returncode != 0:
            logger.warning(f"ollama {' '.join(args)} exited with {result.returncode}: {output.strip()}")
            raise CommandError(f"ollama {' '.join(args)} exited with {result.returncode}",
                               output=output, returncode=result.returncode)

        logger.info(f"ollama {' '.join(args)} succeeded, output length {len(output)}")
        return output

    def run_command_json(self, *args):
        """Run an ollama CLI command whose output is a JSON object"""
        output = self.run_command(*args)
        try:
            result = json.loads(output)
        except ValueError as e:
            raise CommandError(f"ollama {' '.join(args)} returned invalid JSON: {e}", output=output)
        if not isinstance(result, dict):
            raise CommandError(f"ollama {' '.join(args)} did not return a JSON object", output=output)
        return result

    def spawn(self, *args):
        """Start an ollama CLI command with piped output for streaming"""
        logger.info(f"Spawning {self.binary_path} {' '.join(args)}")
        try:
            return subprocess.Popen(
                [self.binary_path, *args],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=self.command_env(args),
                text=True,
                encoding='utf-8',
                errors='replace',
            )
        except OSError as e:
            raise CommandError(f"Failed to start ollama {' '.join(args)}: {e}")
