"""
Online Models Service
Browse and search the curated model catalogue
"""
import copy
import logging

from .. import register_component
from ...core.errors import CommandError
from .catalog import BUILTIN_ONLINE_MODELS

logger = logging.getLogger(__name__)


def parse_model_list(output):
    """Model names from `ollama list` output (first column, header skipped)"""
    names = set()
    for line in (output or '').splitlines()[1:]:
        parts = line.split()
        if parts:
            names.add(parts[0])
    return names


def matches_query(model, query):
    """Case-insensitive match on name, description or any string detail"""
    query = query.lower()
    for key in ('name', 'description'):
        value = model.get(key)
        if isinstance(value, str) and query in value.lower():
            return True
    details = model.get('details')
    if isinstance(details, dict):
        for value in details.values():
            if isinstance(value, str) and query in value.lower():
                return True
    return False


def paginate(models, page, limit):
    """Slice a model list into the page/limit envelope the UI expects"""
    total = len(models)
    start = (page - 1) * limit
    end = min(start + limit, total)
    return {
        'models': models[start:end] if start < total else [],
        'total': total,
        'page': page,
        'limit': limit,
    }


@register_component('online_models')
class OnlineModelsService:
    """Service for the online models view"""

    def __init__(self, supervisor=None, catalog=None, page_size=None):
        from ... import core
        from ...config.settings import DashboardConfig

        self.supervisor = supervisor or core.supervisor
        self.catalog = catalog if catalog is not None else BUILTIN_ONLINE_MODELS
        self.page_size = page_size or DashboardConfig.ONLINE_MODELS_PAGE_SIZE

    def installed_models(self):
        """Names of locally installed models; empty when `ollama list` fails"""
        try:
            output = self.supervisor.run_command('list')
        except CommandError as e:
            logger.warning(f"Running ollama list failed: {e}")
            return set()
        logger.info(f"Local model list: {output.strip()}")
        return parse_model_list(output)

    def fetch_models(self):
        installed = self.installed_models()
        models = copy.deepcopy(self.catalog)
        for model in models:
            model['installed'] = model['name'] in installed
        return models

    def get_online_models(self, page=1, limit=None):
        page, limit = self._normalise_paging(page, limit)
        return paginate(self.fetch_models(), page, limit)

    def search_online_models(self, query, page=1, limit=None):
        page, limit = self._normalise_paging(page, limit)
        models = self.fetch_models()
        query = (query or '').strip()
        if query:
            models = [m for m in models if matches_query(m, query)]
        return paginate(models, page, limit)

    def _normalise_paging(self, page, limit):
        page = page if isinstance(page, int) and page >= 1 else 1
        limit = limit if isinstance(limit, int) and limit >= 1 else self.page_size
        return page, limit
