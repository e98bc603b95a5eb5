import json
from unittest.mock import Mock

import pytest

import ollama_dashboard.components.system_stats.routes as system_stats_routes
from ollama_dashboard.components.system_stats.service import (
    INTEL_OPTIMIZATION_INFO,
    SystemStatsService,
    format_running_time,
)


@pytest.fixture
def models_service():
    service = Mock()
    service.list_models.return_value = ['llama3:8b', 'mistral:7b', 'gemma:2b']
    return service


@pytest.fixture
def stats_service(models_service, fake_client, fake_supervisor, tmp_path):
    return SystemStatsService(models_service=models_service, client=fake_client,
                              supervisor=fake_supervisor, stats_file=tmp_path / 'stats.json')


class TestRunningTime:

    @pytest.mark.parametrize('seconds, expected', [
        (0, '0h 0m'),
        (59, '0h 0m'),
        (3725, '1h 2m'),
        (90061.7, '25h 1m'),
    ])
    def test_format(self, seconds, expected):
        assert format_running_time(seconds) == expected

    def test_uptime_of_managed_daemon(self, stats_service, fake_supervisor):
        fake_supervisor.uptime_seconds.return_value = 7260

        assert stats_service.running_time() == '2h 1m'

    def test_external_daemon(self, stats_service):
        assert stats_service.running_time() == 'running'

    def test_no_daemon(self, stats_service, fake_client):
        fake_client.is_running.return_value = False

        assert stats_service.running_time() == '0h 0m'


class TestStats:

    def test_without_stats_file(self, stats_service):
        assert stats_service.get_stats() == {
            'totalChats': 0,
            'totalTokens': '0',
            'totalModels': 3,
            'runningTime': 'running',
        }

    def test_reads_stats_file(self, stats_service):
        stats_service.stats_file.write_text(json.dumps({'total_chats': 12, 'total_tokens': '34.5K'}))

        stats = stats_service.get_stats()

        assert stats['totalChats'] == 12
        assert stats['totalTokens'] == '34.5K'

    def test_ignores_wrong_types(self, stats_service):
        stats_service.stats_file.write_text(json.dumps({'total_chats': 'many', 'total_tokens': 99}))

        assert stats_service.read_saved_stats() == (0, '0')

    def test_ignores_corrupt_file(self, stats_service):
        stats_service.stats_file.write_text('{not json')

        assert stats_service.read_saved_stats() == (0, '0')

    def test_intel_info_is_a_copy(self, stats_service):
        info = stats_service.get_intel_info()
        info['supported_devices'].append('Other')

        assert 'Other' not in INTEL_OPTIMIZATION_INFO['supported_devices']
        assert info['version'] == INTEL_OPTIMIZATION_INFO['version']


class TestStatsRoutes:

    @pytest.fixture(autouse=True)
    def install_service(self, monkeypatch, stats_service):
        monkeypatch.setattr(system_stats_routes, 'service', stats_service)

    def test_stats(self, client):
        body = client.get('/api/stats').get_json()

        assert body['totalModels'] == 3

    def test_intel_info(self, client):
        body = client.get('/api/intel/info').get_json()

        assert body['intel_gpu_support'] is True
        assert 'Intel Arc A-Series GPU' in body['supported_devices']
