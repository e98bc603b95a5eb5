"""
Main page routes for dashboard
Serves the bundled front end when one is configured
"""
import os
from datetime import datetime

from flask import Blueprint, current_app, jsonify, send_from_directory

from ..components import registry
from ..config.settings import DashboardConfig

# Create main blueprint
main_bp = Blueprint('main', __name__)

# Client-side routes of the single page app
FRONTEND_ROUTES = ('dashboard', 'chat', 'models', 'online', 'settings', 'logs')


def _frontend_dir():
    dist = current_app.config.get('FRONTEND_DIST') or ''
    if dist and os.path.isfile(os.path.join(dist, 'index.html')):
        return dist
    return None


@main_bp.route('/')
def index():
    """Front end entry point, or a service summary without a bundle"""
    dist = _frontend_dir()
    if dist:
        return send_from_directory(dist, 'index.html')

    return jsonify({
        'name': 'Ollama Dashboard',
        'components': sorted(registry.get_all_components()),
        'ollama': DashboardConfig.OLLAMA_BASE_URL,
        'websocket': f'ws://{DashboardConfig.DASHBOARD_HOST}:{DashboardConfig.WEBSOCKET_PORT}'
                     f'{DashboardConfig.WEBSOCKET_PATH}',
        'time': datetime.now().isoformat(),
    })


@main_bp.route('/<path:filename>')
def frontend_file(filename):
    """Static assets, with client-side routes falling back to index.html"""
    dist = _frontend_dir()
    if not dist:
        return jsonify({'error': 'Not found'}), 404

    if os.path.isfile(os.path.join(dist, filename)):
        return send_from_directory(dist, filename)
    if filename.split('/', 1)[0] in FRONTEND_ROUTES:
        return send_from_directory(dist, 'index.html')
    return jsonify({'error': 'Not found'}), 404
