"""
Online Models API Routes
"""
from flask import Blueprint, jsonify, request

from .service import OnlineModelsService

online_models_bp = Blueprint('online_models', __name__, url_prefix='/api/online-models')

# Initialize service
service = OnlineModelsService()


@online_models_bp.route('', methods=['GET'])
def api_online_models():
    """Paginated catalogue"""
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', None, type=int)
    return jsonify(service.get_online_models(page, limit))


@online_models_bp.route('/search', methods=['GET'])
def api_search_online_models():
    """Paginated catalogue filtered by ?q="""
    query = request.args.get('q', '')
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', None, type=int)
    return jsonify(service.search_online_models(query, page, limit))


def init_online_models(app):
    """Initialize online models component with Flask app"""
    app.register_blueprint(online_models_bp)
    return online_models_bp
