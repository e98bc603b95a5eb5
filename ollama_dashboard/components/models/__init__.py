"""
Models Component
Local model list, pull progress, delete and details
"""
from .routes import models_bp, init_models
from .service import ModelsService, parse_pull_progress

__all__ = ['models_bp', 'init_models', 'ModelsService', 'parse_pull_progress']
