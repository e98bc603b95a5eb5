"""
Chat API Routes
"""
import logging

from flask import Blueprint, jsonify, request

from ...core.schemas import ChatRequest
from .service import ChatService

logger = logging.getLogger(__name__)

chat_bp = Blueprint('chat', __name__, url_prefix='/api')

# Initialize service
service = ChatService()


@chat_bp.route('/chat', methods=['POST'])
def api_chat_completion():
    """Streamed chat; pieces arrive as chat_stream events, the reply in the response"""
    try:
        chat_request = ChatRequest.from_dict(request.get_json(silent=True))
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    try:
        response = service.chat_completion(chat_request)
    except Exception as e:
        logger.exception(f"Chat completion failed: {e}")
        return jsonify({'error': str(e)}), 500
    return jsonify(response.to_dict())


def init_chat(app):
    """Initialize chat component with Flask app"""
    app.register_blueprint(chat_bp)
    return chat_bp
