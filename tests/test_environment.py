import json
from unittest.mock import patch

import pytest

import ollama_dashboard.components.environment.routes as environment_routes
from ollama_dashboard.components.environment.service import (
    GPU_SERVICE_RUNNING,
    GPU_UNKNOWN,
    EnvironmentService,
)
from ollama_dashboard.core.environment import EnvironmentStore


class TestEnvironmentStore:

    def test_process_env_conversion(self):
        store = EnvironmentStore({
            'OLLAMA_MODEL_SOURCE': 'modelscope',
            'OLLAMA_NUM_CTX': 2048.0,
            'OLLAMA_INTEL_GPU': True,
            'OLLAMA_DEBUG': False,
            'ONEAPI_DEVICE_SELECTOR': '',
            'IGNORED': None,
        })

        env = store.to_process_env(base={'PATH': '/usr/bin'})

        assert env == {
            'PATH': '/usr/bin',
            'OLLAMA_MODEL_SOURCE': 'modelscope',
            'OLLAMA_NUM_CTX': '2048',
            'OLLAMA_INTEL_GPU': 'true',
        }

    def test_process_env_skip(self):
        store = EnvironmentStore({'OLLAMA_MODEL_SOURCE': 'modelscope', 'OLLAMA_NUM_CTX': 4096})

        env = store.to_process_env(skip=('OLLAMA_MODEL_SOURCE',))

        assert env == {'OLLAMA_NUM_CTX': '4096'}

    def test_save_persists_and_load_restores(self, tmp_path):
        path = tmp_path / 'nested' / 'environment.json'
        store = EnvironmentStore({'OLLAMA_DEBUG': False}, path)

        store.save({'OLLAMA_DEBUG': True, 'OLLAMA_NUM_CTX': 8192})

        assert json.loads(path.read_text()) == {'OLLAMA_DEBUG': True, 'OLLAMA_NUM_CTX': 8192}
        restored = EnvironmentStore({'OLLAMA_DEBUG': False}, path)
        assert restored.load() == {'OLLAMA_DEBUG': True, 'OLLAMA_NUM_CTX': 8192}

    def test_load_keeps_defaults_on_bad_file(self, tmp_path):
        path = tmp_path / 'environment.json'
        path.write_text('[1, 2, 3]')
        store = EnvironmentStore({'OLLAMA_DEBUG': False}, path)

        assert store.load() == {'OLLAMA_DEBUG': False}

    def test_save_rejects_non_object(self, environment_store):
        with pytest.raises(ValueError):
            environment_store.save(['OLLAMA_DEBUG'])

    @pytest.mark.parametrize('value', [float('nan'), float('inf'), float('-inf')])
    def test_save_rejects_non_finite_numbers(self, environment_store, value):
        with pytest.raises(ValueError, match='OLLAMA_NUM_CTX'):
            environment_store.save({'OLLAMA_NUM_CTX': value})

        assert environment_store.get()['OLLAMA_NUM_CTX'] == 2048
        assert not environment_store.path.exists()

    def test_process_env_skips_non_finite_numbers(self, tmp_path):
        path = tmp_path / 'environment.json'
        path.write_text('{"OLLAMA_NUM_CTX": NaN, "OLLAMA_KEEP_ALIVE": Infinity, "OLLAMA_DEBUG": true}')
        store = EnvironmentStore({}, path)
        store.load()

        assert store.to_process_env() == {'OLLAMA_DEBUG': 'true'}

    def test_get_returns_copy(self, environment_store):
        environment_store.get()['OLLAMA_DEBUG'] = True

        assert environment_store.get()['OLLAMA_DEBUG'] is False


class TestEnvironmentService:

    def test_info_with_running_service(self, fake_client, environment_store):
        service = EnvironmentService(client=fake_client, environment=environment_store, system='Linux')

        with patch.object(EnvironmentService, 'get_cpu_info', return_value='8 CPU cores'):
            info = service.get_environment_info()

        assert info['ollama_version'] == '0.9.0'
        assert info['service_status'] == 'running'
        assert info['gpu_status'] == GPU_SERVICE_RUNNING
        assert info['os_info'] == 'linux'
        assert info['cpu_info'] == '8 CPU cores'
        assert info['memory_usage'].endswith('GB Total')

    def test_info_with_stopped_service(self, fake_client, environment_store):
        fake_client.is_running.return_value = False
        service = EnvironmentService(client=fake_client, environment=environment_store, system='Darwin')

        info = service.get_environment_info()

        assert info['ollama_version'] == 'unknown'
        assert info['service_status'] == 'stopped'
        assert info['gpu_status'] == GPU_UNKNOWN
        fake_client.version.assert_not_called()

    def test_linux_gpu_listing(self, fake_client, environment_store):
        fake_client.is_running.return_value = False
        service = EnvironmentService(client=fake_client, environment=environment_store, system='Linux')
        lspci = ('00:02.0 VGA compatible controller: NVIDIA Corporation GA104 [GeForce RTX 3070]\n'
                 '00:1f.3 Audio device: Intel Corporation Device 51c8\n')

        with patch('ollama_dashboard.components.environment.service._run', return_value=lspci):
            status = service.detect_gpu_status()

        assert status == 'Non-Intel GPU - NVIDIA Corporation GA104 [GeForce RTX 3070]'

    def test_cpu_info_without_name(self, fake_client, environment_store):
        service = EnvironmentService(client=fake_client, environment=environment_store, system='Darwin')

        with patch('ollama_dashboard.components.environment.service.platform.processor', return_value=''), \
                patch('ollama_dashboard.components.environment.service.psutil.cpu_count', return_value=4):
            assert service.get_cpu_info() == '4 CPU cores'


class TestEnvironmentRoutes:

    def _install(self, monkeypatch, fake_client, environment_store):
        monkeypatch.setattr(environment_routes, 'service',
                            EnvironmentService(client=fake_client, environment=environment_store, system='Linux'))

    def test_get_and_save_variables(self, client, monkeypatch, fake_client, environment_store):
        self._install(monkeypatch, fake_client, environment_store)

        assert client.get('/api/environment/variables').get_json() == {'OLLAMA_NUM_CTX': 2048,
                                                                       'OLLAMA_DEBUG': False}

        response = client.post('/api/environment/variables', json={'OLLAMA_DEBUG': True})

        assert response.status_code == 200
        assert response.get_json()['variables'] == {'OLLAMA_DEBUG': True}
        assert environment_store.get() == {'OLLAMA_DEBUG': True}

    def test_save_rejects_non_object_body(self, client, monkeypatch, fake_client, environment_store):
        self._install(monkeypatch, fake_client, environment_store)

        response = client.post('/api/environment/variables', json=['nope'])

        assert response.status_code == 400

    def test_save_rejects_nan_body(self, client, monkeypatch, fake_client, environment_store):
        self._install(monkeypatch, fake_client, environment_store)

        response = client.post('/api/environment/variables', data='{"OLLAMA_NUM_CTX": NaN}',
                               content_type='application/json')

        assert response.status_code == 400
        assert environment_store.to_process_env() == {'OLLAMA_NUM_CTX': '2048'}
