"""
Environment Component
Host summary and daemon environment variable settings
"""
from .routes import environment_bp, init_environment
from .service import EnvironmentService

__all__ = ['environment_bp', 'init_environment', 'EnvironmentService']
