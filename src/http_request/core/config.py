"""
Конфигурация запросов.

Все конфиги immutable (frozen dataclasses): Request собирает изменяемое
состояние через builder-методы, а send() работает только со снимком
RequestConfig.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional, Tuple, Dict, Mapping, TYPE_CHECKING

if TYPE_CHECKING:
    from .body import RequestBody
    from .logging import LoggingConfig
    from .trust import TrustedRoot

DEFAULT_CHUNK_SIZE = 8192

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TIMEOUT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TimeoutConfig:
    """
    Таймауты подключения и чтения в миллисекундах.

    None означает таймаут не задан, 0 - ждать бесконечно.

    Args:
        connect_ms: Таймаут подключения (мс)
        read_ms: Таймаут чтения данных (мс)

    Examples:
        >>> TimeoutConfig(connect_ms=5000, read_ms=30000).as_tuple()
        (5.0, 30.0)
        >>> TimeoutConfig().as_tuple() is None
        True
    """
    connect_ms: Optional[int] = None
    read_ms: Optional[int] = None

    def __post_init__(self):
        """Валидация."""
        if self.connect_ms is not None and self.connect_ms < 0:
            raise ValueError("connect timeout must be non-negative")
        if self.read_ms is not None and self.read_ms < 0:
            raise ValueError("read timeout must be non-negative")

    @staticmethod
    def _seconds(ms: Optional[int]) -> Optional[float]:
        return ms / 1000 if ms else None

    def as_tuple(self) -> Optional[Tuple[Optional[float], Optional[float]]]:
        """Вернуть как (connect, read) в секундах для requests, или None."""
        connect, read = self._seconds(self.connect_ms), self._seconds(self.read_ms)
        if connect is None and read is None:
            return None
        return (connect, read)

    def replace(self, connect_ms: Optional[int] = None, read_ms: Optional[int] = None) -> 'TimeoutConfig':
        """Новый конфиг, где заданные значения заменены."""
        return TimeoutConfig(
            connect_ms=self.connect_ms if connect_ms is None else connect_ms,
            read_ms=self.read_ms if read_ms is None else read_ms,
        )

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# PROXY CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ProxyConfig:
    """
    HTTP forward proxy.

    The proxy is only used when host is non-empty and port is non-zero.

    Examples:
        >>> ProxyConfig("proxy.local", 3128).as_proxies()
        {'http': 'http://proxy.local:3128', 'https': 'http://proxy.local:3128'}
        >>> ProxyConfig("", 0).as_proxies()
        {}
    """
    host: str = ""
    port: int = 0

    def __post_init__(self):
        """Валидация."""
        if not 0 <= self.port <= 65535:
            raise ValueError("proxy port must be in range 0-65535")

    @property
    def enabled(self) -> bool:
        return bool(self.host) and self.port != 0

    @property
    def url(self) -> Optional[str]:
        return f"http://{self.host}:{self.port}" if self.enabled else None

    def as_proxies(self) -> Dict[str, str]:
        """Словарь proxies для requests."""
        if not self.enabled:
            return {}
        return {'http': self.url, 'https': self.url}

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# DEFAULTS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _freeze_dict(d: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    """Convert dict to immutable MappingProxyType."""
    return MappingProxyType(dict(d or {}))


@dataclass(frozen=True)
class RequestDefaults:
    """
    Значения по умолчанию для новых Request.

    Обычно создаётся один раз при старте приложения (например через
    load_from_env()) и передаётся в каждый Request.

    Args:
        headers: Заголовки, добавляемые в каждый запрос
        timeout: Таймауты
        proxy: Прокси
        chunk_size: Размер блока при копировании тел (байты)
        logging: Конфигурация логирования (None = без логов)

    Examples:
        >>> defaults = RequestDefaults(timeout=TimeoutConfig(connect_ms=3000))
        >>> defaults = RequestDefaults.create(connect_timeout_ms=3000, headers={"User-Agent": "app/1.0"})
    """
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    proxy: Optional[ProxyConfig] = None
    chunk_size: int = DEFAULT_CHUNK_SIZE
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        if isinstance(self.headers, dict):
            object.__setattr__(self, 'headers', _freeze_dict(self.headers))
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

    @classmethod
    def create(
        cls,
        headers: Optional[Dict[str, str]] = None,
        connect_timeout_ms: Optional[int] = None,
        read_timeout_ms: Optional[int] = None,
        proxy_host: Optional[str] = None,
        proxy_port: int = 0,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        logging: Optional['LoggingConfig'] = None,
    ) -> 'RequestDefaults':
        """Удобный конструктор из плоских значений."""
        proxy = ProxyConfig(proxy_host, proxy_port) if proxy_host else None
        return cls(
            headers=headers or {},
            timeout=TimeoutConfig(connect_ms=connect_timeout_ms, read_ms=read_timeout_ms),
            proxy=proxy,
            chunk_size=chunk_size,
            logging=logging,
        )

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# REQUEST SNAPSHOT
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class RequestConfig:
    """
    Immutable snapshot of a Request taken by send().

    The network round trip reads only this object, so mutating the
    builder afterwards has no effect on a request in flight.
    """
    url: str
    method: str
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    params: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    body: Optional['RequestBody'] = None
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    proxy: Optional[ProxyConfig] = None
    trusted_root: Optional['TrustedRoot'] = None
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self):
        if not self.url:
            raise ValueError("url must not be empty")
        if not self.method:
            raise ValueError("method must not be empty")
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, 'headers', _freeze_dict(self.headers))
        if not isinstance(self.params, MappingProxyType):
            object.__setattr__(self, 'params', _freeze_dict(self.params))

    @property
    def scheme(self) -> str:
        return self.url.split("://", 1)[0].lower() if "://" in self.url else ""
