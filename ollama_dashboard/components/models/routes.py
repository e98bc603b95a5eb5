"""
Models API Routes
"""
import logging

from flask import Blueprint, jsonify, request

from .service import ModelsService

logger = logging.getLogger(__name__)

models_bp = Blueprint('models', __name__, url_prefix='/api/models')

# Initialize service
service = ModelsService()


@models_bp.route('', methods=['GET'])
def api_list_models():
    """Installed models"""
    models = service.list_models()
    return jsonify([m.to_dict() for m in models])


@models_bp.route('/pull', methods=['POST'])
def api_pull_model():
    """Start pulling a model; progress arrives as model_pull_progress events"""
    data = request.get_json(silent=True) or {}
    try:
        return jsonify(service.pull_model(data.get('name')))
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.exception(f"Pull failed to start: {e}")
        return jsonify({'error': str(e)}), 500


@models_bp.route('/<path:name>', methods=['GET'])
def api_show_model(name):
    try:
        return jsonify(service.show_model(name))
    except ValueError as e:
        return jsonify({'error': str(e)}), 400


@models_bp.route('/<path:name>', methods=['DELETE'])
def api_delete_model(name):
    try:
        return jsonify(service.delete_model(name))
    except ValueError as e:
        return jsonify({'error': str(e)}), 400


def init_models(app):
    """Initialize models component with Flask app"""
    app.register_blueprint(models_bp)
    return models_bp
