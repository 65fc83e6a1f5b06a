# src/http_request/core/request.py
"""
Request: one configurable, at-most-once executable HTTP exchange.

Typical use::

    request = (
        Request("https://api.example.com/items", Request.POST)
        .add_header("Accept", "application/json")
        .add_param("name", "widget")
        .set_connect_timeout(5000)
        .send()
    )
    if request.get_response_code() == 201:
        item = request.get_response_object(Item)
"""
import io
import logging
import os
import tempfile
import threading
import time
import uuid
import warnings
from concurrent.futures import Future
from contextlib import ExitStack
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar, Union

import pydantic
import requests
from requests.adapters import HTTPAdapter
from requests.structures import CaseInsensitiveDict

from .body import BodyData, RequestBody, UploadReader
from .config import ProxyConfig, RequestConfig, RequestDefaults, TimeoutConfig
from .exceptions import (
    ConfigurationError,
    ParseError,
    StateError,
    classify_requests_exception,
)
from .executor import RequestExecutor, get_default_executor
from .logging import RequestLogger, get_logger, set_request_id, clear_request_id
from .progress import ProgressListener, TqdmProgressListener, copy_stream
from .response import Response
from .trust import CertificateSource, TrustedRoot
from ..utils.encoding import ENCODING, append_query, encode_params, parse_content_length
from ..utils.sanitizer import mask_headers, mask_url

T = TypeVar("T")

GET = "GET"
POST = "POST"
PUT = "PUT"
DELETE = "DELETE"
HEAD = "HEAD"
PATCH = "PATCH"
OPTIONS = "OPTIONS"

# Methods whose params travel in the query string instead of the body
QUERY_METHODS = frozenset({GET, HEAD, DELETE, OPTIONS, "TRACE"})

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
BINARY_CONTENT_TYPE = "application/octet-stream"
IDENTITY_ENCODING = "identity"

# Status code reported through the async path when the round trip failed
SENTINEL_STATUS = -1

ResultCallback = Callable[["Request"], None]

_module_logger = logging.getLogger(__name__)


class RequestState(str, Enum):
    """Lifecycle of a Request. COMPLETED is terminal."""
    UNSENT = "unsent"
    IN_FLIGHT = "in_flight"
    COMPLETED = "completed"


class Request:
    """
    Builder and executor for a single HTTP exchange.

    Features:
        - Fluent configuration: headers, params, body, timeouts, proxy, pinned root
        - Synchronous send() or asynchronous send(callback) / send_async()
        - Redirects are returned as-is, never followed
        - Upload and download progress listeners
        - Body as bytes, text, stream, file or validated JSON object

    A Request can be sent once. The connection it opens is released by
    close(), by any accessor that drains the body, or on failure.
    """

    GET = GET
    POST = POST
    PUT = PUT
    DELETE = DELETE
    HEAD = HEAD
    PATCH = PATCH
    OPTIONS = OPTIONS

    def __init__(
        self,
        url: str,
        method: str = GET,
        *,
        defaults: Optional[RequestDefaults] = None,
        executor: Optional[RequestExecutor] = None,
    ):
        """
        Args:
            url: Target URL. Pass query parameters through add_param().
            method: HTTP method; any token is accepted
            defaults: Defaults for headers, timeouts, proxy and logging
            executor: Executor for asynchronous sends (shared default if None)
        """
        if not url:
            raise ValueError("url must not be empty")
        if not method:
            raise ValueError("method must not be empty")

        self._defaults = defaults or RequestDefaults()
        self._url = url
        self._method = method.upper()
        self._headers: CaseInsensitiveDict = CaseInsensitiveDict(self._defaults.headers)
        self._params: Dict[str, str] = {}
        self._body: Optional[RequestBody] = None
        self._timeout: TimeoutConfig = self._defaults.timeout
        self._proxy: Optional[ProxyConfig] = self._defaults.proxy
        self._trusted_root: Optional[TrustedRoot] = None
        self._download_listener: Optional[ProgressListener] = None
        self._upload_listener: Optional[ProgressListener] = None
        self._executor = executor

        self._state = RequestState.UNSENT
        self._state_lock = threading.Lock()
        self._response: Optional[Response] = None
        self._status_code: Optional[int] = None
        self._message: Optional[str] = None
        self._error: Optional[BaseException] = None

        self.request_id = uuid.uuid4().hex
        self._logger: Optional[RequestLogger] = (
            get_logger(self._defaults.logging) if self._defaults.logging else None
        )

    # ==================== Конфигурация ====================

    def add_header(self, name: str, value: str) -> 'Request':
        """
        Set a request header. An existing header with the same name (in any case) is replaced.
        """
        self._headers[name] = value
        return self

    def add_param(self, name: str, value: Any) -> 'Request':
        """
        Add a query/form parameter; the value is URL-encoded when sending.

        For GET, HEAD, DELETE, OPTIONS and TRACE the params go into the query
        string; for other methods they form a url-encoded body unless an
        explicit body was set.
        """
        self._params[name] = str(value)
        return self

    def set_connect_timeout(self, ms: int) -> 'Request':
        """Connect timeout in milliseconds, 0 waits forever."""
        self._timeout = self._timeout.replace(connect_ms=ms)
        return self

    def set_read_timeout(self, ms: int) -> 'Request':
        """Read timeout in milliseconds, 0 waits forever."""
        self._timeout = self._timeout.replace(read_ms=ms)
        return self

    def set_timeouts(self, connect_ms: int, read_ms: int) -> 'Request':
        self._timeout = TimeoutConfig(connect_ms=connect_ms, read_ms=read_ms)
        return self

    def set_proxy(self, host: str, port: int) -> 'Request':
        """
        Send through an HTTP proxy. An empty host or port 0 disables it.
        """
        self._proxy = ProxyConfig(host or "", port)
        return self

    def set_data(self, data: BodyData, close_when_read: bool = False) -> 'Request':
        """
        Set the request body, replacing any previous one.

        Args:
            data: ``bytes``/``bytearray`` (raw), ``str`` (UTF-8 encoded),
                ``os.PathLike`` (file, see set_file()) or a readable binary stream
            close_when_read: For streams, close the stream once the request
                has been sent. Otherwise the caller closes it after send()
                or in the async callback.

        Raises:
            InvalidBodyFileError: ``data`` is a path that is not a regular file
            TypeError: Unsupported body type
        """
        if isinstance(data, (bytes, bytearray, str)):
            body = RequestBody.from_bytes(data)
        elif isinstance(data, os.PathLike):
            return self.set_file(data)
        elif hasattr(data, "read"):
            body = RequestBody.from_stream(data, close_when_read=close_when_read)
        else:
            raise TypeError(f"Unsupported body type: {type(data).__name__}")
        self._replace_body(body)
        return self

    def set_file(self, path: Union[str, os.PathLike]) -> 'Request':
        """
        Stream the body from a file.

        The file is checked and opened now and closed after sending.
        Content-Length is the file size unless set explicitly.

        Raises:
            InvalidBodyFileError: The file does not exist or is not a regular file
        """
        self._replace_body(RequestBody.from_file(path))
        return self

    def _replace_body(self, body: RequestBody) -> None:
        previous, self._body = self._body, body
        if previous is not None and previous.stream is not body.stream:
            previous.release()

    def set_trusted_root(self, certificate: Union[CertificateSource, TrustedRoot]) -> 'Request':
        """
        Pin the TLS trust anchor for this request (certificate pinning).

        The system trust store is ignored and only this certificate is
        trusted. The URL must use https.

        Args:
            certificate: PEM text, DER bytes, path to a certificate file, or a TrustedRoot

        Raises:
            ConfigurationError: The certificate cannot be loaded into a trust context
        """
        self._trusted_root = (
            certificate if isinstance(certificate, TrustedRoot) else TrustedRoot.load(certificate)
        )
        return self

    def set_download_progress_listener(self, listener: Optional[ProgressListener]) -> 'Request':
        """
        Watch download progress of the draining accessors.

        ``listener(received, total)`` gets -1 as total when the response has
        no numeric Content-Length.
        """
        self._download_listener = listener
        return self

    def set_upload_progress_listener(self, listener: Optional[ProgressListener]) -> 'Request':
        """
        Watch upload progress of the request body.

        ``listener(sent, total)`` gets -1 as total when the body size is unknown.
        """
        self._upload_listener = listener
        return self

    def set_progress_listener(self, listener: Optional[ProgressListener]) -> 'Request':
        """Deprecated alias of set_download_progress_listener()."""
        warnings.warn(
            "set_progress_listener() is deprecated. Use set_download_progress_listener() instead.",
            DeprecationWarning,
            stacklevel=2
        )
        return self.set_download_progress_listener(listener)

    # ==================== Отправка ====================

    def snapshot(self) -> RequestConfig:
        """Immutable copy of the current configuration."""
        return RequestConfig(
            url=self._url,
            method=self._method,
            headers=dict(self._headers.items()),
            params=dict(self._params),
            body=self._body,
            timeout=self._timeout,
            proxy=self._proxy,
            trusted_root=self._trusted_root,
            chunk_size=self._defaults.chunk_size,
        )

    @staticmethod
    def _validate(config: RequestConfig) -> None:
        if config.trusted_root is not None and config.scheme != "https":
            raise ConfigurationError(
                f"Trusted root was set but the URL does not use https: {mask_url(config.url)}"
            )

    def _claim(self) -> RequestConfig:
        """Check the state, validate, then move UNSENT -> IN_FLIGHT; returns the snapshot to send."""
        with self._state_lock:
            if self._state is not RequestState.UNSENT:
                raise StateError(
                    "The request is in progress or has already been sent, create a new instance."
                )
            config = self.snapshot()
            # a rejected configuration leaves the request UNSENT
            self._validate(config)
            self._state = RequestState.IN_FLIGHT
        return config

    def send(
        self,
        callback: Optional[ResultCallback] = None,
        executor: Optional[RequestExecutor] = None,
    ) -> 'Request':
        """
        Send the request.

        Without ``callback`` the call blocks for the whole round trip and
        raises on failure. With ``callback`` it returns immediately and the
        round trip runs on a worker thread; failures are reported through
        ``get_response_code() == -1`` and ``get_response_message()``, and the
        callback is invoked exactly once on the worker thread.

        Args:
            callback: ``callback(request)`` for asynchronous sending
            executor: Executor for the asynchronous send

        Returns:
            This request, for chaining

        Raises:
            StateError: The request was already sent or is in flight
            ConfigurationError: Invalid configuration (e.g. pinned root over http)
            TransportError: Network failure (synchronous send only)
        """
        if callback is not None:
            self.send_async(callback, executor)
            return self

        config = self._claim()
        self._execute(config)
        return self

    def send_async(
        self,
        callback: Optional[ResultCallback] = None,
        executor: Optional[RequestExecutor] = None,
    ) -> "Future[Request]":
        """
        Send on a worker thread and return a Future resolved with this request.

        The Future never fails because of the round trip itself: transport
        failures produce the sentinel state (code -1) like send(callback).

        Raises:
            StateError: The request was already sent, or the executor is shut down
            ConfigurationError: Invalid configuration
        """
        config = self._claim()
        executor = executor or self._executor or get_default_executor()
        try:
            return executor.submit(self._execute_in_worker, config, callback)
        except RuntimeError as exc:
            with self._state_lock:
                self._state = RequestState.UNSENT
            raise StateError(f"Cannot schedule request: {exc}") from exc

    def _execute_in_worker(self, config: RequestConfig, callback: Optional[ResultCallback]) -> 'Request':
        try:
            self._execute(config)
        except Exception as exc:
            self._status_code = SENTINEL_STATUS
            self._message = f"{type(exc).__name__}: {exc}"
            self._error = exc

        if callback is not None:
            try:
                callback(self)
            except Exception:
                logger = self._logger.logger if self._logger else _module_logger
                logger.exception("Request callback failed", extra={"request_id": self.request_id})
        return self

    def _execute(self, config: RequestConfig) -> None:
        """One round trip from ``config``; always ends in COMPLETED."""
        set_request_id(self.request_id)
        start_time = time.monotonic()
        safe_url = mask_url(config.url)

        if self._logger:
            self._logger.info(
                "Request started",
                method=config.method,
                url=safe_url,
                headers=mask_headers(config.headers),
                has_body=config.body is not None,
                params_count=len(config.params),
            )

        try:
            self._response = self._transport(config)
            self._status_code = self._response.status_code
            self._message = self._response.reason

            if self._logger:
                self._logger.info(
                    "Request completed",
                    method=config.method,
                    url=safe_url,
                    status_code=self._status_code,
                    duration_ms=round((time.monotonic() - start_time) * 1000, 2),
                    content_length=self._response.content_length,
                )
        except Exception as exc:
            self._error = exc
            if self._logger:
                self._logger.error(
                    "Request failed",
                    method=config.method,
                    url=safe_url,
                    error=str(exc),
                    error_type=type(exc).__name__,
                    duration_ms=round((time.monotonic() - start_time) * 1000, 2),
                )
            raise
        finally:
            with self._state_lock:
                self._state = RequestState.COMPLETED
            if config.body is not None:
                config.body.release()
            clear_request_id()

    def _build_wire(self, config: RequestConfig) -> Tuple[str, CaseInsensitiveDict, Any]:
        """Effective URL, headers and body object handed to requests."""
        headers = CaseInsensitiveDict(config.headers)
        # keeps Content-Length equal to the bytes the body stream yields
        headers.setdefault("Accept-Encoding", IDENTITY_ENCODING)
        query = encode_params(config.params)
        url = config.url
        body = config.body

        if config.method in QUERY_METHODS:
            url = append_query(url, query)
        else:
            if "Content-Type" not in headers:
                headers["Content-Type"] = BINARY_CONTENT_TYPE if body is not None else FORM_CONTENT_TYPE
            if body is None:
                body = RequestBody.from_bytes(query.encode(ENCODING))

        if body is None:
            return url, headers, None

        if body.data is not None:
            headers["Content-Length"] = str(len(body.data))
            if not body.data:
                self._report_empty_upload()
                return url, headers, body.data
            if self._upload_listener is None:
                return url, headers, body.data
            return url, headers, UploadReader(body.data, listener=self._upload_listener,
                                              chunk_size=config.chunk_size)

        total = parse_content_length(headers.get("Content-Length"))
        if total < 0 and body.length >= 0:
            total = body.length
            headers["Content-Length"] = str(total)
        if total == 0:
            # requests would switch a zero-length stream to chunked encoding
            self._report_empty_upload()
            return url, headers, b""
        return url, headers, UploadReader(body.stream, total=total, listener=self._upload_listener,
                                          chunk_size=config.chunk_size)

    def _report_empty_upload(self) -> None:
        if self._upload_listener is not None:
            self._upload_listener(0, 0)

    def _transport(self, config: RequestConfig) -> Response:
        url, headers, data = self._build_wire(config)

        session = requests.Session()
        session.trust_env = False
        adapter = HTTPAdapter(max_retries=0)
        session.mount('http://', adapter)
        session.mount('https://', adapter)

        proxy = config.proxy.url if config.proxy else None
        timeout = config.timeout.as_tuple()

        try:
            with ExitStack() as stack:
                verify: Union[bool, str] = True
                if config.trusted_root is not None:
                    verify = stack.enter_context(config.trusted_root.as_ca_bundle())

                prepared = session.prepare_request(
                    requests.Request(config.method, url, headers=headers, data=data)
                )
                response = session.send(
                    prepared,
                    stream=True,
                    allow_redirects=False,
                    timeout=timeout,
                    proxies=config.proxy.as_proxies() if config.proxy else {},
                    verify=verify,
                )
        except (requests.exceptions.RequestException, OSError, ValueError) as exc:
            session.close()
            connect_timeout = timeout[0] if timeout else None
            raise classify_requests_exception(exc, mask_url(url), connect_timeout, proxy) from exc
        except BaseException:
            session.close()
            raise

        return Response(response, session, chunk_size=config.chunk_size)

    # ==================== Ответ ====================

    def get_response_code(self) -> Optional[int]:
        """HTTP status code, -1 after a failed async send, None before send()."""
        return self._status_code

    def get_response_message(self) -> Optional[str]:
        """Status reason phrase, or the failure description after a failed async send."""
        return self._message

    def get_response_header(self, name: str) -> Optional[str]:
        """First value of a response header (case-insensitive), or None."""
        if self._response is None:
            return None
        return self._response.headers.first(name)

    def get_response_headers(self, name: str) -> List[str]:
        """All values of a response header (case-insensitive), in received order."""
        if self._response is None:
            return []
        return self._response.headers.get_all(name)

    def _require_response(self) -> Response:
        if self._response is None or self._response.closed:
            raise StateError(
                "Method send() has not been called yet or the connection was already closed."
            )
        return self._response

    def get_response_stream(self):
        """
        Live response body stream, for any status code.

        The connection stays open: the caller must call close() when done.

        Raises:
            StateError: Called before send() or after the connection was closed
        """
        return self._require_response().stream

    def _drain(self, sink, listener: Optional[ProgressListener] = None) -> int:
        try:
            response = self._require_response()
            return copy_stream(
                response,
                sink,
                listener if listener is not None else self._download_listener,
                response.content_length,
                response.chunk_size,
            )
        finally:
            self.close()

    def get_response_data(self) -> bytes:
        """
        Read the whole body and close the connection.

        Raises:
            StateError: No open response
            TransportError: Reading failed
        """
        buffer = io.BytesIO()
        self._drain(buffer)
        return buffer.getvalue()

    def get_response_string(self, encoding: str = ENCODING) -> str:
        """Read the whole body decoded as text (UTF-8 by default) and close the connection."""
        return self.get_response_data().decode(encoding)

    def get_response_object(self, shape: Type[T] = Any) -> T:
        """
        Decode the JSON body validated against ``shape`` and close the connection.

        Args:
            shape: pydantic model, dataclass, TypedDict, builtin container type or Any

        Raises:
            StateError: No open response
            ParseError: The body is not valid JSON or does not match ``shape``
        """
        try:
            response = self._require_response()
            data = response.read()
            try:
                return pydantic.TypeAdapter(shape).validate_json(data)
            except pydantic.ValidationError as exc:
                raise ParseError(
                    f"Cannot decode response as {getattr(shape, '__name__', shape)}: {exc}",
                    url=mask_url(response.url or self._url),
                ) from exc
        finally:
            self.close()

    def write_response_to_stream(self, sink) -> int:
        """
        Copy the body into a writable binary stream and close the connection.

        Returns:
            Number of bytes written
        """
        return self._drain(sink)

    def write_response_to_file(self, path: Union[str, os.PathLike], show_progress: bool = False) -> int:
        """
        Save the body to a file and close the connection.

        The body goes to a temporary file in the same directory that replaces
        ``path`` only once fully written. On failure the temporary file is
        removed and an existing ``path`` is left as it was.

        Args:
            path: Destination file
            show_progress: Show a tqdm progress bar (requires the ``progress`` extra)

        Returns:
            Number of bytes written
        """
        listener = self._download_listener
        progress_bar = None
        if show_progress:
            progress_bar = TqdmProgressListener(desc=os.path.basename(os.fspath(path)))
            user_listener = listener

            def listener(transferred: int, total: int) -> None:
                progress_bar(transferred, total)
                if user_listener is not None:
                    user_listener(transferred, total)

        temp_path = None
        try:
            self._require_response()
            target = os.fspath(path)
            fd, temp_path = tempfile.mkstemp(
                dir=os.path.dirname(target) or None,
                prefix=f".{os.path.basename(target)}.",
                suffix=".part",
            )
            with os.fdopen(fd, "wb") as f:
                written = self._drain(f, listener)
            os.replace(temp_path, target)
            temp_path = None
            return written
        finally:
            if temp_path is not None and os.path.exists(temp_path):
                os.remove(temp_path)
            self.close()
            if progress_bar is not None:
                progress_bar.close()

    def close(self) -> None:
        """Release the connection. Idempotent, also before send()."""
        if self._response is not None:
            self._response.close()

    # ==================== Свойства ====================

    @property
    def url(self) -> str:
        return self._url

    @property
    def method(self) -> str:
        return self._method

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def response(self) -> Optional[Response]:
        """Response of the round trip, None before send() or after a failure."""
        return self._response

    @property
    def error(self) -> Optional[BaseException]:
        """Failure of the round trip, if any."""
        return self._error

    @property
    def headers(self) -> Dict[str, str]:
        """Copy of the configured request headers."""
        return dict(self._headers.items())

    @property
    def params(self) -> Dict[str, str]:
        """Copy of the configured params."""
        return dict(self._params)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        return f"<Request {self._method} {mask_url(self._url)} [{self._state.value}]>"
