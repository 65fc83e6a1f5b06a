"""http-request - single-use HTTP request builder and executor on top of requests."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.request import Request, RequestState, SENTINEL_STATUS
from .core.config import (
    TimeoutConfig,
    ProxyConfig,
    RequestDefaults,
    RequestConfig,
)
from .core.response import Response, ResponseHeaders
from .core.trust import TrustedRoot
from .core.progress import ProgressListener, TqdmProgressListener
from .core.executor import RequestExecutor, get_default_executor, shutdown_default_executor
from .core.exceptions import (
    HTTPRequestException,
    TemporaryError,
    FatalError,
    TransportError,
    TimeoutError,
    ConnectionError,
    ProxyError,
    SSLError,
    StateError,
    ConfigurationError,
    InvalidBodyFileError,
    ParseError,
    ErrorKind,
    error_kind,
)
from .core.env_config import load_from_env, load_from_file
from .core.logging import LoggingConfig, configure_logging

# Users can configure logging themselves using logging.getLogger('http_request')
logging.getLogger('http_request').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("http-request-core")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    # Core
    "Request",
    "RequestState",
    "SENTINEL_STATUS",
    "Response",
    "ResponseHeaders",
    "TrustedRoot",

    # Config
    "TimeoutConfig",
    "ProxyConfig",
    "RequestDefaults",
    "RequestConfig",
    "load_from_env",
    "load_from_file",
    "LoggingConfig",
    "configure_logging",

    # Progress
    "ProgressListener",
    "TqdmProgressListener",

    # Executor
    "RequestExecutor",
    "get_default_executor",
    "shutdown_default_executor",

    # Exceptions
    "HTTPRequestException",
    "TemporaryError",
    "FatalError",
    "TransportError",
    "TimeoutError",
    "ConnectionError",
    "ProxyError",
    "SSLError",
    "StateError",
    "ConfigurationError",
    "InvalidBodyFileError",
    "ParseError",
    "ErrorKind",
    "error_kind",

    # Version
    "__version__",
]
