"""
Structured logger used by Request.

Fields are passed as keyword arguments and masked before they reach the
handlers, so headers and URLs can be logged as-is.
"""

import logging
from typing import Optional, Any

from .config import LoggingConfig, LogLevel
from .formatters import get_formatter
from .filters import RequestIdFilter, ExtraFieldsFilter
from .handlers import create_console_handler, create_file_handler
from ...utils.sanitizer import mask_sensitive_data

LOGGER_NAME = "http_request"


class RequestLogger:
    """
    Thin wrapper around a stdlib logger with keyword-field calls.

    Example:
        >>> logger = RequestLogger(LoggingConfig.create(level="DEBUG"))
        >>> logger.info("Request started", method="GET", url="https://api.com")
        >>> logger.close()
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = LOGGER_NAME):
        """
        Args:
            config: Logging configuration (defaults if None)
            name: Logger name
        """
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False

        level = self._get_level(self.config.level)
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)
        self._logger.propagate = False

        # Reinitialising with the same name replaces the old handlers
        for handler in self._logger.handlers[:]:
            handler.close()
            self._logger.removeHandler(handler)

        filters = []
        if self.config.enable_request_id:
            filters.append(RequestIdFilter())
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))

        formatter = get_formatter(self.config.format.value)

        if self.config.enable_console:
            self._logger.addHandler(create_console_handler(level, formatter, filters))

        if self.config.enable_file and self.config.file_path:
            self._logger.addHandler(create_file_handler(
                file_path=self.config.file_path,
                level=level,
                formatter=formatter,
                max_bytes=self.config.max_bytes,
                backup_count=self.config.backup_count,
                filters=filters
            ))

    @staticmethod
    def _get_level(level: LogLevel) -> int:
        return getattr(logging, level.value)

    @property
    def logger(self) -> logging.Logger:
        """Underlying stdlib logger."""
        return self._logger

    def _log(self, level: int, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        self._logger.log(level, message, exc_info=exc_info, extra=mask_sensitive_data(kwargs))

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log at ERROR with the current traceback. Call from an except block."""
        self._log(logging.ERROR, message, exc_info=True, **kwargs)

    def close(self) -> None:
        """
        Flush and close all handlers. Idempotent.
        """
        if self._closed:
            return

        for handler in self._logger.handlers[:]:
            try:
                handler.flush()
                handler.close()
            except (OSError, ValueError):
                # Handler stream already gone
                pass
            self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


# Shared logger instances, one per name
_loggers = {}


def get_logger(config: Optional[LoggingConfig] = None, name: str = LOGGER_NAME) -> RequestLogger:
    """
    Get the shared logger for ``name``, creating it on first use.

    A ``config`` different from the current one reconfigures the logger.
    """
    logger = _loggers.get(name)
    if logger is None or logger._closed or (config is not None and config != logger.config):
        if logger is not None:
            logger.close()
        logger = _loggers[name] = RequestLogger(config, name=name)
    return logger


def configure_logging(config: LoggingConfig, name: str = LOGGER_NAME) -> RequestLogger:
    """
    Replace the shared logger for ``name`` with a newly configured one.

    Example:
        >>> logger = configure_logging(LoggingConfig.create(level="DEBUG", format="colored"))
    """
    old = _loggers.get(name)
    if old is not None:
        old.close()
    logger = _loggers[name] = RequestLogger(config, name=name)
    return logger
