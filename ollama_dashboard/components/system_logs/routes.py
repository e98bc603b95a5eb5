"""
System Logs Component Routes
"""
from flask import Blueprint, jsonify, request

from .service import DEFAULT_LOG_LIMIT, SystemLogsService
from .sse_handler import EventSSEHandler

system_logs_bp = Blueprint('system_logs', __name__, url_prefix='/api')

# Initialize service
service = SystemLogsService()
sse_handler = EventSSEHandler()


@system_logs_bp.route('/logs')
def api_logs():
    """Get relayed log lines with ?level= and ?limit= filtering"""
    level_filter = request.args.get('level', 'ALL')
    limit = request.args.get('limit', DEFAULT_LOG_LIMIT, type=int)
    return jsonify(service.get_logs(level_filter=level_filter, limit=limit))


@system_logs_bp.route('/events/stream')
def api_event_stream():
    """SSE endpoint for log, pull progress, chat and service events"""
    return sse_handler.stream_events()


def init_system_logs(app):
    """Initialize System Logs component with Flask app"""
    app.register_blueprint(system_logs_bp)
    return system_logs_bp
