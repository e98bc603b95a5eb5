"""
Service Control API Routes
"""
import logging

from flask import Blueprint, jsonify

from .service import ServiceControlService

logger = logging.getLogger(__name__)

service_control_bp = Blueprint('service_control', __name__, url_prefix='/api/service')

# Service instance
service = ServiceControlService()


@service_control_bp.route('/start', methods=['POST'])
def api_start_service():
    """Start the Ollama daemon in the background"""
    try:
        return jsonify(service.start_service())
    except Exception as e:
        logger.exception(f"Failed to start service: {e}")
        return jsonify({'error': str(e)}), 500


@service_control_bp.route('/stop', methods=['POST'])
def api_stop_service():
    """Stop the Ollama daemon"""
    try:
        return jsonify(service.stop_service())
    except Exception as e:
        logger.exception(f"Failed to stop service: {e}")
        return jsonify({'error': str(e)}), 500


@service_control_bp.route('/status', methods=['GET'])
def api_service_status():
    """Daemon running state and version"""
    return jsonify(service.get_status())


@service_control_bp.route('/available', methods=['GET'])
def api_service_available():
    return jsonify({'available': service.is_available()})


def init_service_control(app):
    """Initialize service control component with Flask app"""
    app.register_blueprint(service_control_bp)
    return service_control_bp
