"""
Environment API Routes
"""
import logging

from flask import Blueprint, jsonify, request

from .service import EnvironmentService

logger = logging.getLogger(__name__)

environment_bp = Blueprint('environment', __name__, url_prefix='/api/environment')

# Initialize service
service = EnvironmentService()


@environment_bp.route('/info', methods=['GET'])
def api_environment_info():
    """Daemon version, GPU, memory and CPU summary"""
    try:
        return jsonify(service.get_environment_info())
    except Exception as e:
        logger.exception(f"Environment info failed: {e}")
        return jsonify({'error': str(e)}), 500


@environment_bp.route('/variables', methods=['GET'])
def api_get_variables():
    return jsonify(service.get_variables())


@environment_bp.route('/variables', methods=['POST'])
def api_save_variables():
    """Save the variables applied to the daemon on its next start"""
    data = request.get_json(silent=True)
    try:
        return jsonify(service.save_variables(data))
    except ValueError as e:
        return jsonify({'error': str(e)}), 400


def init_environment(app):
    """Initialize environment component with Flask app"""
    app.register_blueprint(environment_bp)
    return environment_bp
