"""
Service Control Component
Handles daemon start/stop and status probes
"""
from .routes import service_control_bp, init_service_control
from .service import ServiceControlService

__all__ = ['service_control_bp', 'init_service_control', 'ServiceControlService']
