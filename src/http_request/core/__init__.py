"""Core http-request модули."""

from .config import (
    DEFAULT_CHUNK_SIZE,
    TimeoutConfig,
    ProxyConfig,
    RequestDefaults,
    RequestConfig,
)
from .exceptions import (
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
    classify_requests_exception,
)
from .body import RequestBody, UploadReader
from .progress import ProgressListener, TqdmProgressListener, copy_stream
from .trust import TrustedRoot
from .response import Response, ResponseHeaders
from .executor import (
    RequestExecutor,
    get_default_executor,
    shutdown_default_executor,
)
from .request import (
    Request,
    RequestState,
    GET,
    POST,
    PUT,
    DELETE,
    HEAD,
    PATCH,
    OPTIONS,
    QUERY_METHODS,
    SENTINEL_STATUS,
)

__all__ = [
    # Config
    "DEFAULT_CHUNK_SIZE",
    "TimeoutConfig",
    "ProxyConfig",
    "RequestDefaults",
    "RequestConfig",
    # Request
    "Request",
    "RequestState",
    "GET",
    "POST",
    "PUT",
    "DELETE",
    "HEAD",
    "PATCH",
    "OPTIONS",
    "QUERY_METHODS",
    "SENTINEL_STATUS",
    # Body / response
    "RequestBody",
    "UploadReader",
    "Response",
    "ResponseHeaders",
    "TrustedRoot",
    # Progress
    "ProgressListener",
    "TqdmProgressListener",
    "copy_stream",
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
    "classify_requests_exception",
]
