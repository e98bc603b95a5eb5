"""
Environment Service
Host hardware summary and the daemon environment variables
"""
import glob
import logging
import os
import platform
import subprocess

import psutil

from .. import register_component

logger = logging.getLogger(__name__)

WINDOWS_INTEL_DRIVER_PATHS = [
    r'C:\Windows\System32\igfxCUIService.exe',
    r'C:\Windows\System32\igfxDHL.dll',
    r'C:\Windows\System32\DriverStore\FileRepository\iigd_dch.inf_amd64_*',
]

GPU_SERVICE_RUNNING = 'Intel GPU - Available (Service Running)'
GPU_DRIVER_FOUND = 'Intel GPU - Detected (Driver Files Found)'
GPU_DETECTED = 'Intel GPU - Detected via System'
GPU_UNKNOWN = 'GPU detection in progress - Intel optimization enabled'


def _run(command, timeout=5):
    """Run a probe command, returning stdout or None"""
    try:
        result = subprocess.run(command, capture_output=True, text=True, timeout=timeout)
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"Probe {command[0]} failed: {e}")
        return None
    if result.returncode != 0:
        return None
    return result.stdout


def _wmi_value(output):
    """Third line of a `Select-Object` table is the first value"""
    lines = output.strip().splitlines() if output else []
    if len(lines) > 2:
        return lines[2].strip()
    return ''


@register_component('environment')
class EnvironmentService:
    """Service for the environment/settings view"""

    def __init__(self, client=None, environment=None, system=None):
        from ... import core

        self.client = client or core.ollama_client
        self.environment = environment or core.environment
        self.system = system or platform.system()

    def get_environment_info(self):
        """Summary shown on the dashboard"""
        running = self.client.is_running()
        return {
            'ollama_version': self.client.version() if running else 'unknown',
            'gpu_status': self.detect_gpu_status(),
            'service_status': 'running' if running else 'stopped',
            'memory_usage': self.get_memory_info(),
            'os_info': self.system.lower(),
            'arch': platform.machine(),
            'cpu_info': self.get_cpu_info(),
        }

    def detect_gpu_status(self):
        if self.client.is_running():
            return GPU_SERVICE_RUNNING

        if self.system == 'Windows':
            for path in WINDOWS_INTEL_DRIVER_PATHS:
                if path.endswith('*'):
                    if glob.glob(path) or os.path.isdir(os.path.dirname(path)):
                        return GPU_DRIVER_FOUND
                elif os.path.exists(path):
                    return GPU_DRIVER_FOUND

            output = _run(['powershell', '-Command',
                           'Get-WmiObject Win32_VideoController | Select-Object Name'])
            if output:
                return self._classify_gpu_listing(output, _wmi_value(output))

        elif self.system == 'Linux':
            output = _run(['lspci'])
            if output:
                video = [line for line in output.splitlines()
                         if 'VGA' in line or '3D controller' in line or 'Display' in line]
                if video:
                    return self._classify_gpu_listing('\n'.join(video), video[0].split(': ', 1)[-1])

        return GPU_UNKNOWN

    @staticmethod
    def _classify_gpu_listing(listing, first_name):
        lowered = listing.lower()
        if 'intel' in lowered:
            return GPU_DETECTED
        if 'radeon' in lowered or 'nvidia' in lowered or 'amd' in lowered:
            return f"Non-Intel GPU - {first_name.strip()}"
        return GPU_UNKNOWN

    def get_memory_info(self):
        try:
            total = psutil.virtual_memory().total
        except (OSError, RuntimeError) as e:
            logger.warning(f"Memory probe failed: {e}")
            return 'System memory detected'
        return f"{total / (1024 ** 3):.1f} GB Total"

    def get_cpu_info(self):
        cores = psutil.cpu_count(logical=True) or os.cpu_count() or 1
        name = ''
        if self.system == 'Windows':
            name = _wmi_value(_run(['powershell', '-Command',
                                    'Get-WmiObject Win32_Processor | Select-Object Name']))
        elif self.system == 'Linux':
            name = self._linux_cpu_name()
        if not name:
            name = platform.processor()

        if name:
            return f"{name} ({cores} cores)"
        return f"{cores} CPU cores"

    @staticmethod
    def _linux_cpu_name():
        try:
            with open('/proc/cpuinfo', 'r', encoding='utf-8') as f:
                for line in f:
                    if line.startswith('model name'):
                        return line.split(':', 1)[1].strip()
        except OSError:
            pass
        return ''

    def get_variables(self):
        logger.info("Reading environment variable settings")
        return self.environment.get()

    def save_variables(self, variables):
        """Replace the daemon environment settings"""
        logger.info(f"Saving environment variable settings: {variables}")
        saved = self.environment.save(variables)
        logger.info("Environment variable settings saved")
        return {
            'message': 'Environment variables saved',
            'variables': saved,
        }
