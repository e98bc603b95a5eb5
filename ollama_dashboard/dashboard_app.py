"""
Ollama Dashboard
Flask backend supervising a local Ollama daemon for the bundled web UI
"""
import argparse
import logging
import threading

from flask import Flask
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from . import core
from .components.chat import init_chat
from .components.environment import init_environment
from .components.models import init_models
from .components.online_models import init_online_models
from .components.service_control import init_service_control
from .components.system_logs import init_system_logs
from .components.system_stats import init_system_stats
from .config.settings import DashboardConfig
from .core.errors import ServiceError
from .core.log_relay import install_log_relay
from .routes.main_routes import main_bp
from .ws.chat_relay import ChatRelayServer

logger = logging.getLogger(__name__)


class DashboardApp:
    """Main dashboard application class"""

    def __init__(self, config=DashboardConfig, supervisor=None, environment=None, relay=None):
        self.config = config
        self.app = None
        self.limiter = None
        self.supervisor = supervisor or core.supervisor
        self.environment = environment or core.environment
        self.relay = relay
        self.started = False

    def create_app(self, overrides=None):
        """Create and configure Flask application"""
        self.app = Flask(__name__)

        # Load configuration
        self.app.config.from_object(self.config)
        if overrides:
            self.app.config.update(overrides)

        # Localhost desktop backend: no CSRF, in-memory rate limits
        self.limiter = Limiter(
            key_func=get_remote_address,
            app=self.app,
            default_limits=[self.app.config['RATELIMIT_DEFAULT']],
            storage_uri=self.app.config['RATELIMIT_STORAGE_URI'],
        )

        # Initialize components
        init_service_control(self.app)
        init_environment(self.app)
        init_models(self.app)
        init_online_models(self.app)
        init_chat(self.app)
        init_system_stats(self.app)
        init_system_logs(self.app)

        # The event stream is long-lived, keep it out of the request budget
        self.limiter.exempt(self.app.view_functions['system_logs.api_event_stream'])

        # Register main blueprint last, it owns the catch-all front end route
        self.app.register_blueprint(main_bp)

        return self.app

    def startup(self, start_service=True):
        """Bring up logging, settings, the WebSocket relay and the daemon"""
        install_log_relay(core.event_bus, core.system_logs,
                          level=getattr(logging, self.config.LOG_LEVEL, logging.INFO))
        logger.info("startup: initializing")

        self.environment.load()
        self.supervisor.resolve_binary()

        if self.relay is None:
            self.relay = ChatRelayServer()
        try:
            self.relay.start()
        except OSError as e:
            logger.error(f"WebSocket server failed to start: {e}")

        if start_service:
            logger.info("startup: starting Ollama service")
            threading.Thread(target=self._start_service, name='ollama-start', daemon=True).start()

        self.started = True
        logger.info("startup: done")

    def _start_service(self):
        try:
            self.supervisor.start()
        except ServiceError as e:
            logger.error(f"Ollama service failed to start: {e}")
            core.event_bus.emit('service_status', {'status': 'error', 'message': str(e)})

    def shutdown(self):
        """Stop the daemon we started and the WebSocket relay"""
        if not self.started:
            return
        self.supervisor.stop()
        if self.relay is not None:
            self.relay.stop()
        self.started = False
        logger.info("shutdown: done")

    def run(self, host=None, port=None, start_service=True):
        """Start the dashboard application"""
        host = host or self.config.DASHBOARD_HOST
        port = port or self.config.DASHBOARD_PORT
        if self.app is None:
            self.create_app()

        self.startup(start_service=start_service)
        logger.info("Ollama Dashboard")
        logger.info(f"Starting on: http://{host}:{port}")
        logger.info(f"   - Ollama API:  {self.config.OLLAMA_BASE_URL}")
        logger.info(f"   - Chat socket: ws://{host}:{self.relay.port}{self.config.WEBSOCKET_PATH}")
        try:
            self.app.run(host=host, port=port, debug=False, threaded=True)
        finally:
            self.shutdown()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Backend for the Ollama desktop dashboard')
    parser.add_argument('--host', default=DashboardConfig.DASHBOARD_HOST, help='dashboard bind address')
    parser.add_argument('--port', type=int, default=DashboardConfig.DASHBOARD_PORT, help='dashboard port')
    parser.add_argument('--no-service', action='store_true',
                        help='do not start `ollama serve` on startup')
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, DashboardConfig.LOG_LEVEL, logging.INFO),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    dashboard = DashboardApp()
    dashboard.create_app()
    dashboard.run(host=args.host, port=args.port, start_service=not args.no_service)


if __name__ == '__main__':
    main()
