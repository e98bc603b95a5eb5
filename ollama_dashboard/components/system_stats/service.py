"""
System Stats Service
Usage counters for the dashboard cards and the Intel build description
"""
import json
import logging
from pathlib import Path

from .. import register_component

logger = logging.getLogger(__name__)

INTEL_OPTIMIZATION_INFO = {
    'intel_gpu_support': True,
    'oneapi_available': True,
    'mkl_optimized': True,
    'supported_devices': [
        'Intel Core Ultra',
        'Intel Core 11th-14th gen',
        'Intel Arc A-Series GPU',
        'Intel Arc B-Series GPU',
    ],
    'optimization_source': 'ModelScope Intel Ollama Optimized Edition',
    'documentation_url': 'https://www.modelscope.cn/models/Intel/ollama/summary',
    'version': '2.3.0b20250923',
}


def format_running_time(seconds):
    hours, remainder = divmod(int(seconds), 3600)
    return f"{hours}h {remainder // 60}m"


@register_component('system_stats')
class SystemStatsService:
    """Service for the dashboard statistics"""

    def __init__(self, models_service=None, client=None, supervisor=None, stats_file=None):
        from ... import core
        from ...config.settings import DashboardConfig
        from ..models.service import ModelsService

        self.client = client or core.ollama_client
        self.supervisor = supervisor or core.supervisor
        self.models_service = models_service or ModelsService(client=self.client, supervisor=self.supervisor)
        self.stats_file = Path(stats_file or DashboardConfig.STATS_FILE)

    def get_stats(self):
        total_models = len(self.models_service.list_models())
        total_chats, total_tokens = self.read_saved_stats()

        return {
            'totalChats': total_chats,
            'totalTokens': total_tokens,
            'totalModels': total_models,
            'runningTime': self.running_time(),
        }

    def running_time(self):
        uptime = self.supervisor.uptime_seconds()
        if uptime is not None:
            return format_running_time(uptime)
        if self.client.is_running():
            return 'running'
        return '0h 0m'

    def read_saved_stats(self):
        """Chat and token totals from the stats file, zero when absent"""
        total_chats, total_tokens = 0, '0'
        if not self.stats_file.exists():
            return total_chats, total_tokens

        try:
            with open(self.stats_file, 'r', encoding='utf-8') as f:
                saved = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read stats file {self.stats_file}: {e}")
            return total_chats, total_tokens

        if isinstance(saved, dict):
            chats = saved.get('total_chats')
            if isinstance(chats, (int, float)) and not isinstance(chats, bool):
                total_chats = int(chats)
            tokens = saved.get('total_tokens')
            if isinstance(tokens, str):
                total_tokens = tokens
        return total_chats, total_tokens

    def get_intel_info(self):
        return dict(INTEL_OPTIMIZATION_INFO, supported_devices=list(INTEL_OPTIMIZATION_INFO['supported_devices']))
