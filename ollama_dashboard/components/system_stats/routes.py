"""
System Stats Routes
"""
from flask import Blueprint, jsonify

from .service import SystemStatsService

system_stats_bp = Blueprint('system_stats', __name__, url_prefix='/api')

# Initialize service
service = SystemStatsService()


@system_stats_bp.route('/stats')
def api_stats():
    """Dashboard counters"""
    return jsonify(service.get_stats())


@system_stats_bp.route('/intel/info')
def api_intel_info():
    return jsonify(service.get_intel_info())


def init_system_stats(app):
    """Initialize system stats component with Flask app"""
    app.register_blueprint(system_stats_bp)
    return system_stats_bp
