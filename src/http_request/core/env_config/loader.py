"""
Request defaults from environment variables and .env files.
"""

from typing import Optional

from ..config import RequestDefaults
from ..logging.config import LoggingConfig
from .settings import LoggingSettings, RequestSettings


def build_logging_config(settings: Optional[LoggingSettings]) -> Optional[LoggingConfig]:
    """LoggingConfig from validated settings, None when logging is off."""
    if settings is None:
        return None
    return LoggingConfig.create(
        level=settings.level,
        format=settings.format,
        enable_console=settings.enable_console,
        enable_file=settings.enable_file,
        file_path=settings.file_path,
        max_bytes=settings.max_bytes,
        backup_count=settings.backup_count,
        enable_request_id=settings.enable_request_id,
    )


def load_from_env(env_file: Optional[str] = None, **overrides) -> RequestDefaults:
    """
    Load RequestDefaults from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters (RequestSettings field names)
    2. Environment variables (HTTP_REQUEST_*)
    3. .env file
    4. Defaults

    Args:
        env_file: Custom .env file path (default: .env in the working directory)
        **overrides: Explicit overrides, e.g. ``connect_timeout_ms=1000``

    Returns:
        RequestDefaults instance

    Raises:
        pydantic.ValidationError: An environment value or override is invalid

    Example:
        >>> defaults = load_from_env()
        >>> request = Request("https://api.example.com", defaults=defaults)

        >>> defaults = load_from_env(env_file=".env.test", read_timeout_ms=500)
    """
    if env_file is not None:
        settings = RequestSettings(_env_file=env_file, **overrides)
    else:
        settings = RequestSettings(**overrides)

    return RequestDefaults.create(
        headers=settings.headers,
        connect_timeout_ms=settings.connect_timeout_ms,
        read_timeout_ms=settings.read_timeout_ms,
        proxy_host=settings.proxy_host or None,
        proxy_port=settings.proxy_port,
        chunk_size=settings.chunk_size,
        logging=build_logging_config(settings.to_logging_settings()),
    )
