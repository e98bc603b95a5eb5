"""
System Stats Component
Displays usage counters and the Intel optimisation summary
"""
from .routes import system_stats_bp, init_system_stats
from .service import SystemStatsService

__all__ = ['system_stats_bp', 'init_system_stats', 'SystemStatsService']
