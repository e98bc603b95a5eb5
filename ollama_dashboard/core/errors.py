"""
Dashboard error types
"""


class OllamaDashboardError(Exception):
    """Base class for dashboard failures"""


class OllamaUnavailableError(OllamaDashboardError):
    """The daemon API could not be reached or answered with an error"""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class ServiceError(OllamaDashboardError):
    """Starting or stopping the daemon failed"""


class CommandError(OllamaDashboardError):
    """An ollama CLI invocation failed"""

    def __init__(self, message, output='', returncode=None):
        super().__init__(message)
        self.output = output
        self.returncode = returncode
