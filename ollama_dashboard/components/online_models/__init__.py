"""
Online Models Component
"""
from .routes import online_models_bp, init_online_models
from .service import OnlineModelsService

__all__ = ['online_models_bp', 'init_online_models', 'OnlineModelsService']
