"""
Request defaults from the environment and configuration files.

Example:
    >>> from http_request.core.env_config import load_from_env, load_from_file
    >>>
    >>> defaults = load_from_env()
    >>> defaults = load_from_env(env_file=".env.production", read_timeout_ms=10000)
    >>> defaults = load_from_file("http_request.yaml")
"""

from .loader import load_from_env, build_logging_config
from .file_loader import load_from_file, build_defaults, ConfigFileError
from .settings import RequestSettings, RequestFileSettings, LoggingSettings

__all__ = [
    "load_from_env",
    "load_from_file",
    "build_defaults",
    "build_logging_config",
    "ConfigFileError",
    "RequestSettings",
    "RequestFileSettings",
    "LoggingSettings",
]
