"""
Иерархия исключений http-request.

Классификация:
- TemporaryError (retryable=True) - транспортные сбои, можно повторить запрос
- FatalError (fatal=True) - ошибки программиста или данных, повторять бессмысленно
"""

from enum import Enum
from typing import Optional

import requests
import urllib3

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPRequestException(Exception):
    """Базовое исключение http-request."""

    retryable: bool = False
    fatal: bool = False

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ТРАНСПОРТНЫЕ ОШИБКИ (retryable=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TemporaryError(HTTPRequestException):
    """
    Временная ошибка - повтор может помочь.

    Библиотека сама ничего не повторяет, флаг нужен вызывающему коду.
    """
    retryable = True

class TransportError(TemporaryError):
    """
    Сбой при connect, TLS handshake, записи тела или чтении ответа.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
    """

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        full_message = message
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message)

class TimeoutError(TransportError):
    """
    Таймаут запроса.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        timeout: Значение таймаута (сек)
        timeout_type: Тип таймаута ('connect' или 'read')
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        timeout_type: Optional[str] = None
    ):
        self.timeout = timeout
        self.timeout_type = timeout_type

        msg = message
        if timeout_type:
            msg += f" ({timeout_type} timeout"
            if timeout:
                msg += f": {timeout}s"
            msg += ")"

        super().__init__(msg, url)

class ConnectionError(TransportError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused
    - DNS resolution failed
    - Network unreachable
    """
    pass

class ProxyError(TransportError):
    """Ошибка прокси."""

    def __init__(self, message: str, url: Optional[str] = None, proxy: Optional[str] = None):
        self.proxy = proxy
        msg = message
        if proxy:
            msg += f" (proxy: {proxy})"
        super().__init__(msg, url)

class SSLError(TransportError):
    """TLS handshake or certificate verification failed."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ФАТАЛЬНЫЕ ОШИБКИ (fatal=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class FatalError(HTTPRequestException):
    """
    Фатальная ошибка - НЕ повторять.

    Примеры: повторный send(), неверный сертификат, битый JSON.
    """
    fatal = True

class StateError(FatalError):
    """
    Операция недопустима в текущем состоянии запроса.

    Примеры:
    - send() на уже отправленном запросе
    - get_response_stream() до send() или после close()
    """
    pass

class ConfigurationError(FatalError):
    """Ошибка конфигурации запроса (сертификат, схема URL, файл тела)."""
    pass

class InvalidBodyFileError(ConfigurationError, OSError):
    """
    Файл для тела запроса не существует или не является обычным файлом.

    Args:
        path: Путь к файлу
    """

    def __init__(self, path: str, reason: str = "Invalid file"):
        self.path = path
        super().__init__(f"{reason}: {path}")

class ParseError(FatalError):
    """
    Тело ответа не удалось разобрать.

    Примеры:
    - Битый JSON
    - JSON не соответствует ожидаемой схеме
    """

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        msg = message
        if url:
            msg += f" (url: {url})"
        super().__init__(msg)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ErrorKind(str, Enum):
    """Error discriminant for callers that prefer not to inspect exception types."""
    STATE = "state"
    CONFIGURATION = "configuration"
    TRANSPORT = "transport"
    PARSE = "parse"
    UNKNOWN = "unknown"


def error_kind(exc: Optional[BaseException]) -> Optional[ErrorKind]:
    """
    Classify an exception into an ErrorKind.

    Args:
        exc: Exception raised by (or captured from) a request, or None

    Returns:
        ErrorKind, or None when exc is None

    Examples:
        >>> error_kind(StateError("already sent"))
        <ErrorKind.STATE: 'state'>
        >>> error_kind(None) is None
        True
    """
    if exc is None:
        return None
    if isinstance(exc, StateError):
        return ErrorKind.STATE
    if isinstance(exc, ConfigurationError):
        return ErrorKind.CONFIGURATION
    if isinstance(exc, TransportError):
        return ErrorKind.TRANSPORT
    if isinstance(exc, ParseError):
        return ErrorKind.PARSE
    return ErrorKind.UNKNOWN


def classify_requests_exception(
    exc: Exception,
    url: str,
    timeout: Optional[float] = None,
    proxy: Optional[str] = None,
) -> HTTPRequestException:
    """
    Конвертировать requests.exceptions в наши исключения.

    Порядок проверок важен: в requests SSLError и ProxyError наследуются
    от ConnectionError, а ConnectTimeout - и от ConnectionError, и от Timeout.

    Args:
        exc: Исключение из requests
        url: URL запроса
        timeout: Настроенный таймаут для сообщения (сек)
        proxy: Адрес прокси для сообщения

    Returns:
        Наше исключение с правильной классификацией

    Examples:
        >>> exc = requests.exceptions.ReadTimeout()
        >>> our_exc = classify_requests_exception(exc, "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
        >>> assert our_exc.timeout_type == "read"
    """
    detail = str(exc) or type(exc).__name__

    if isinstance(exc, requests.exceptions.ConnectTimeout):
        return TimeoutError(f"Request timeout: {detail}", url, timeout, "connect")

    elif isinstance(exc, requests.exceptions.Timeout):
        return TimeoutError(f"Request timeout: {detail}", url, timeout, "read")

    elif isinstance(exc, requests.exceptions.SSLError):
        return SSLError(f"TLS error: {detail}", url)

    elif isinstance(exc, requests.exceptions.ProxyError):
        return ProxyError(f"Proxy error: {detail}", url, proxy)

    elif isinstance(exc, requests.exceptions.ConnectionError):
        return ConnectionError(f"Connection error: {detail}", url)

    elif isinstance(exc, (requests.exceptions.InvalidURL, requests.exceptions.MissingSchema,
                          requests.exceptions.InvalidSchema)):
        return ConfigurationError(f"Invalid URL: {detail}")

    elif isinstance(exc, requests.exceptions.RequestException):
        return TransportError(f"Request error: {detail}", url)

    # Чтение тела ответа идёт напрямую через urllib3
    elif isinstance(exc, urllib3.exceptions.ReadTimeoutError):
        return TimeoutError(f"Request timeout: {detail}", url, timeout, "read")

    elif isinstance(exc, urllib3.exceptions.ProtocolError):
        return ConnectionError(f"Connection error: {detail}", url)

    elif isinstance(exc, urllib3.exceptions.HTTPError):
        return TransportError(f"Response error: {detail}", url)

    elif isinstance(exc, OSError):
        # Ошибки чтения тела загрузки (файл, поток) - тоже транспорт
        return TransportError(f"I/O error: {detail}", url)

    else:
        # Неизвестная ошибка - оборачиваем
        return HTTPRequestException(detail)
